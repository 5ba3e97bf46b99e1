"""
clusprep prepares multi-label datasets and settings files for the CLUS tool.

We import the main objects here so that elsewhere in the code we can do:
from clusprep import MultiLabelDataset

rather than:
from clusprep.ml.dataset import MultiLabelDataset
"""

from clusprep.config import ClusConfig
from clusprep.ml.dataset import AttributeDescriptor, AttributeType, MultiLabelDataset
from clusprep.ml.arff_reader import load_arff
from clusprep.ml.arff_transcoder import transcode
from clusprep.ml.settings_templater import rewrite_settings, write_settings
from clusprep.ml.preparer import ClusInputPreparer, PreparationOutcome, Stage
from clusprep.utils.paths import ensure_working_dir


__all__ = [
    "ClusConfig",
    "AttributeDescriptor",
    "AttributeType",
    "MultiLabelDataset",
    "load_arff",
    "transcode",
    "rewrite_settings",
    "write_settings",
    "ClusInputPreparer",
    "PreparationOutcome",
    "Stage",
    "ensure_working_dir",
]
