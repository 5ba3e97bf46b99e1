import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DATASET_EXTENSION = "arff"
SETTINGS_EXTENSION = "s"


def clus_working_dir() -> Path:
    try:
        working_dir = os.environ['CLUS_WORKING_DIR']
    except KeyError:
        msg = """ Please make sure CLUS_WORKING_DIR is in your system environment:
            add: 'export CLUS_WORKING_DIR=/path/to/clus/workdir/' to your bashrc and source it."""
        raise RuntimeError(msg)
    return Path(working_dir)


def check_file_exists(path: PathLike) -> None:
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")


def ensure_working_dir(path: PathLike) -> Path:
    """
    Creates the working directory (and any missing parents) if it does not exist yet.

    Calling it on an existing directory is a no-op. Any OSError raised while creating
    the directory (permissions, a file already sitting at `path`, ...) is propagated.
    """
    path = Path(path)
    if not path.is_dir():
        logger.info("Creating CLUS working directory: %s", path)
        path.mkdir(parents=True, exist_ok=True)
        logger.info("CLUS working directory created")
    return path


def _artifact_path(working_dir: PathLike, dataset_name: str, suffix: str) -> str:
    # Plain concatenation: a str working dir is expected to end with a separator.
    # str(Path) drops the trailing separator, so put it back for Path objects.
    base = os.path.join(working_dir, "") if isinstance(working_dir, Path) else working_dir
    return base + dataset_name + suffix


def data_path(working_dir: PathLike, dataset_name: str, split: str = "train") -> str:
    """
    Returns the path of a dataset artifact, e.g. {working_dir}{dataset_name}-train.arff.

    Args:
        working_dir: The CLUS working directory.
        dataset_name: Name shared by the training, test and settings files.
        split: Either "train" or "test".
    """
    if split not in ("train", "test"):
        raise ValueError(f"Unknown split: '{split}'. Expected 'train' or 'test'.")
    return _artifact_path(working_dir, dataset_name, f"-{split}.{DATASET_EXTENSION}")


def settings_path(working_dir: PathLike, dataset_name: str) -> str:
    """{working_dir}{dataset_name}-train.s"""
    return _artifact_path(working_dir, dataset_name, f"-train.{SETTINGS_EXTENSION}")
