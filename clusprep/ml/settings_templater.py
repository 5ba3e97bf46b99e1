import logging
from pathlib import Path
from typing import List, Sequence, Union

from clusprep.utils.paths import PathLike, data_path, settings_path

logger = logging.getLogger(__name__)

FILE_DIRECTIVE = "File"
TEST_SET_DIRECTIVE = "TestSet"
TARGET_DIRECTIVE = "Target"

# Bytes that are not valid UTF-8 survive the round trip as surrogates.
SETTINGS_ENCODING = "utf-8"


def format_target(label_indices: Sequence[int]) -> str:
    """Comma separated 1-based label positions, e.g. [0, 1, 2] -> '1,2,3'."""
    if len(label_indices) == 0:
        raise ValueError("label_indices must contain at least one label index.")
    return ",".join(str(int(i) + 1) for i in label_indices)


def rewrite_settings(
    lines: Sequence[str],
    dataset_name: str,
    working_dir: PathLike,
    label_indices: Sequence[int],
) -> List[str]:
    """
    Points the File, TestSet and Target lines of a CLUS settings document at the given dataset.

    Lines are matched by their literal prefix. A replaced line keeps the line terminator
    of the line it replaces; every other line is returned exactly as it came in, so a
    document without any of the three directives comes back unchanged.

    Args:
        lines: The settings document, one entry per line, terminators included.
        dataset_name: Name of the dataset the training/test files are named after.
        working_dir: The CLUS working directory holding those files.
        label_indices: 0-based label columns, written 1-based on the Target line.

    Returns:
        The rewritten document, with as many lines as the input.
    """
    target = format_target(label_indices)
    rewritten = []
    for line in lines:
        if line.startswith(FILE_DIRECTIVE):
            content = f"File = {data_path(working_dir, dataset_name, 'train')}"
        elif line.startswith(TEST_SET_DIRECTIVE):
            content = f"TestSet = {data_path(working_dir, dataset_name, 'test')}"
        elif line.startswith(TARGET_DIRECTIVE):
            content = f"Target = {target}"
        else:
            rewritten.append(line)
            continue
        rewritten.append(content + _line_terminator(line))
    return rewritten


def _line_terminator(line: str) -> str:
    return line[len(line.rstrip("\r\n")):]


def write_settings(
    source_path: Union[str, Path],
    dataset_name: str,
    working_dir: PathLike,
    label_indices: Sequence[int],
) -> Path:
    """
    Reads an existing settings file and writes the rewritten copy into the working directory.

    The output goes to {working_dir}{dataset_name}-train.s; the source file is only read.
    Lines other than the three directives are copied byte for byte, whatever their encoding.
    """
    with open(source_path, "r", encoding=SETTINGS_ENCODING, errors="surrogateescape", newline="") as source:
        lines = source.readlines()

    rewritten = rewrite_settings(lines, dataset_name, working_dir, label_indices)

    target_path = Path(settings_path(working_dir, dataset_name))
    with open(target_path, "w", encoding=SETTINGS_ENCODING, errors="surrogateescape", newline="") as out:
        out.writelines(rewritten)
    logger.info("Wrote CLUS settings file %s (from %s)", target_path, source_path)
    return target_path
