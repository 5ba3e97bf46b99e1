import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from clusprep.utils.paths import clus_working_dir


@dataclass(frozen=True)
class ClusConfig:
    """
    Where and under which name the CLUS input files are written.

    Attributes:
        working_dir: Directory receiving the generated files. Always ends with a separator,
            since file names are built as working_dir + dataset_name + suffix.
        dataset_name: Name shared by the training, test and settings files.
        settings_path: Optional existing settings file to rewrite for this dataset.
    """
    working_dir: str
    dataset_name: str
    settings_path: Optional[str] = None

    def __post_init__(self):
        if not self.dataset_name:
            raise ValueError("dataset_name must be a non-empty string.")
        working_dir = os.fspath(self.working_dir)
        if not working_dir:
            raise ValueError("working_dir must be a non-empty path.")
        if not working_dir.endswith(os.sep):
            working_dir += os.sep
        # frozen dataclass, so bypass __setattr__
        object.__setattr__(self, "working_dir", working_dir)
        if self.settings_path is not None:
            object.__setattr__(self, "settings_path", os.fspath(self.settings_path))

    @classmethod
    def from_env(cls, dataset_name: str, settings_path: Optional[Union[str, Path]] = None) -> "ClusConfig":
        """Build a config whose working directory comes from CLUS_WORKING_DIR."""
        return cls(str(clus_working_dir()), dataset_name, settings_path)
