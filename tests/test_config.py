import pytest
import os
from pathlib import Path

from clusprep.config import ClusConfig


def test_working_dir_gets_trailing_separator():
    config = ClusConfig("/tmp/clus", "emotions")
    assert config.working_dir == "/tmp/clus" + os.sep

    config = ClusConfig("/tmp/clus/", "emotions")
    assert config.working_dir == "/tmp/clus/"


def test_accepts_path_objects():
    config = ClusConfig(Path("/tmp/clus"), "emotions", settings_path=Path("/etc/emotions.s"))
    assert config.working_dir == "/tmp/clus" + os.sep
    assert config.settings_path == "/etc/emotions.s"


def test_settings_path_is_optional():
    assert ClusConfig("/tmp/clus/", "emotions").settings_path is None


def test_rejects_empty_values():
    with pytest.raises(ValueError):
        ClusConfig("/tmp/clus/", "")
    with pytest.raises(ValueError):
        ClusConfig("", "emotions")


def test_config_is_frozen():
    config = ClusConfig("/tmp/clus/", "emotions")
    with pytest.raises(AttributeError):
        config.dataset_name = "scene"


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CLUS_WORKING_DIR", str(tmp_path))
    config = ClusConfig.from_env("emotions", settings_path="emotions.s")
    assert config.working_dir == str(tmp_path) + os.sep
    assert config.dataset_name == "emotions"
    assert config.settings_path == "emotions.s"


def test_from_env_without_variable(monkeypatch):
    monkeypatch.delenv("CLUS_WORKING_DIR", raising=False)
    with pytest.raises(RuntimeError):
        ClusConfig.from_env("emotions")
