import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from clusprep.config import ClusConfig
from clusprep.ml.arff_transcoder import transcode
from clusprep.ml.dataset import MultiLabelDataset
from clusprep.ml.settings_templater import write_settings
from clusprep.utils.paths import data_path, ensure_working_dir

logger = logging.getLogger(__name__)


class Stage(Enum):
    WORKING_DIR = "working_dir"
    TRAIN_DATA = "train_data"
    TEST_DATA = "test_data"
    SETTINGS = "settings"


@dataclass
class PreparationOutcome:
    """
    Result of ClusInputPreparer.prepare.

    On failure `stage` names the step that failed and `error` holds the underlying
    OSError. Paths of the files written before the failure are still filled in.
    """
    train_path: Optional[str] = None
    test_path: Optional[str] = None
    settings_path: Optional[str] = None
    stage: Optional[Stage] = None
    error: Optional[OSError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class ClusInputPreparer:
    """
    Prepares the files CLUS needs to train on a multi-label dataset.
    """

    def __init__(self, config: ClusConfig, show_progress: bool = False):
        """
        Args:
            config: Working directory, dataset name and optional settings file.
            show_progress: Show progress bars while writing datasets.
        """
        self.config = config
        self.show_progress = show_progress

    def prepare(self, train: MultiLabelDataset, test: Optional[MultiLabelDataset] = None) -> PreparationOutcome:
        """
        Writes the CLUS input files for `train` (and `test`, if given).

        1. Creates the working directory if needed.
        2. Writes {working_dir}{name}-train.arff, and {name}-test.arff when a test set is given.
        3. If a settings file is configured, writes {name}-train.s with its File, TestSet
           and Target lines pointing at this dataset.

        I/O failures stop the preparation and are reported in the returned outcome
        rather than raised.
        """
        config = self.config
        outcome = PreparationOutcome()

        try:
            ensure_working_dir(config.working_dir)
        except OSError as e:
            return self._fail(outcome, Stage.WORKING_DIR, e)

        try:
            train_path = data_path(config.working_dir, config.dataset_name, "train")
            transcode(train, train_path, show_progress=self.show_progress)
            outcome.train_path = train_path
        except OSError as e:
            return self._fail(outcome, Stage.TRAIN_DATA, e)

        if test is not None:
            try:
                test_path = data_path(config.working_dir, config.dataset_name, "test")
                transcode(test, test_path, show_progress=self.show_progress)
                outcome.test_path = test_path
            except OSError as e:
                return self._fail(outcome, Stage.TEST_DATA, e)

        if config.settings_path is not None:
            try:
                written = write_settings(
                    config.settings_path, config.dataset_name, config.working_dir, train.label_indices
                )
                outcome.settings_path = str(written)
            except OSError as e:
                return self._fail(outcome, Stage.SETTINGS, e)

        return outcome

    def _fail(self, outcome: PreparationOutcome, stage: Stage, error: OSError) -> PreparationOutcome:
        logger.error("CLUS input preparation failed at stage '%s': %s", stage.value, error)
        outcome.stage = stage
        outcome.error = error
        return outcome
