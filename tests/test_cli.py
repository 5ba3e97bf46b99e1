import pytest
import os
from pathlib import Path
from unittest.mock import patch

from clusprep.cli import build_parser, main


ARFF = """@relation scene

@attribute f1 numeric
@attribute f2 numeric
@attribute beach {0,1}
@attribute sunset {0,1}

@data
1.5,2,1,0
0,0.25,0,1
"""


@pytest.fixture
def arff_file(tmp_path):
    path = tmp_path / "scene.arff"
    path.write_text(ARFF)
    return path


@pytest.fixture(autouse=True)
def no_logging_setup():
    # keep the test session's logging configuration intact
    with patch("clusprep.cli.setup_logging"):
        yield


def test_label_selector_is_required(arff_file, tmp_path):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["transcode", str(arff_file), str(tmp_path / "out.arff")])


def test_transcode_command(arff_file, tmp_path):
    output = tmp_path / "out.arff"
    assert main(["transcode", str(arff_file), str(output), "--labels", "2"]) == 0

    lines = output.read_text().splitlines()
    assert lines[lines.index("@data") + 1:] == ["1.5,2,1,0", "0,0.25,0,1"]


def test_prepare_command(arff_file, tmp_path):
    settings = tmp_path / "scene.s"
    settings.write_text("[Data]\nFile = x\n[Attributes]\nTarget = 1\n")
    working_dir = str(tmp_path / "clus") + os.sep

    exit_code = main([
        "prepare", str(arff_file),
        "--working-dir", working_dir,
        "--name", "scene",
        "--settings", str(settings),
        "--label-names", "beach,sunset",
    ])

    assert exit_code == 0
    assert os.path.exists(working_dir + "scene-train.arff")
    written = Path(working_dir + "scene-train.s").read_text()
    assert f"File = {working_dir}scene-train.arff\n" in written
    assert "Target = 3,4\n" in written


def test_prepare_command_reports_failure(arff_file, tmp_path):
    exit_code = main([
        "prepare", str(arff_file),
        "--working-dir", str(tmp_path),
        "--name", "scene",
        "--settings", str(tmp_path / "missing.s"),
        "--labels", "2",
    ])
    assert exit_code == 1


def test_transcode_command_densifies_sparse_input(tmp_path):
    source = tmp_path / "sparse.arff"
    source.write_text(
        "@relation bibtex\n\n"
        "@attribute w1 numeric\n@attribute w2 numeric\n@attribute tag {0,1}\n\n"
        "@data\n{0 3,2 1}\n{1 1}\n"
    )
    output = tmp_path / "out.arff"

    assert main(["transcode", str(source), str(output), "--labels", "1"]) == 0

    lines = output.read_text().splitlines()
    assert lines[lines.index("@data") + 1:] == ["3,0,1", "0,1,0"]
