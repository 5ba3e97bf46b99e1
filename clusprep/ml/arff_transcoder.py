import logging
from pathlib import Path
from typing import List, Sequence, TextIO, Union

import numpy as np
from tqdm import tqdm

from clusprep.ml.dataset import AttributeDescriptor, AttributeType, MultiLabelDataset, is_missing
from clusprep.utils.strings import (
    quote_arff,
    replace_semicolons,
    sanitize_attribute_name,
)

logger = logging.getLogger(__name__)

MISSING_VALUE = "?"
FLUSH_EVERY = 100


def transcode(
    dataset: MultiLabelDataset,
    output_path: Union[str, Path],
    flush_every: int = FLUSH_EVERY,
    show_progress: bool = False,
) -> Path:
    """
    Writes a multi-label dataset as an ARFF file that CLUS accepts.

    The file handle is closed on every exit path. If writing fails the error
    propagates and the partial file is left as it is.

    Args:
        dataset: The dataset to write. It is not modified.
        output_path: Where to write the ARFF file.
        flush_every: Number of instances between two flushes, at least 1.
        show_progress: Show a tqdm progress bar while writing rows.

    Returns:
        Path: The path of the written file.
    """
    _check_flush_every(flush_every)
    output_path = Path(output_path)
    logger.info(
        "Writing CLUS compliant ARFF to %s", output_path,
        extra={"num_instances": dataset.num_instances, "num_attributes": dataset.num_attributes},
    )
    with open(output_path, "w", encoding="utf-8") as out:
        write_arff(dataset, out, flush_every=flush_every, show_progress=show_progress)
    logger.info("Wrote %d instances to %s", dataset.num_instances, output_path)
    return output_path


def write_arff(
    dataset: MultiLabelDataset,
    out: TextIO,
    flush_every: int = FLUSH_EVERY,
    show_progress: bool = False,
) -> None:
    """
    Writes the CLUS compliant ARFF text of `dataset` to an open text stream.

    The steps are:
    1. Work on a copy of the dataset so the caller's data is never touched.
    2. Materialize sparse data into an explicit dense matrix.
    3. Write the header, with every attribute name sanitized (see `render_attribute_line`).
    4. Write one data row per instance, in the original order.

    The stream is flushed every `flush_every` instances and once more at the end.
    """
    _check_flush_every(flush_every)
    working_copy = dataset.copy()
    if working_copy.is_sparse:
        logger.debug("Converting sparse dataset to dense before writing")
    dense = working_copy.to_dense()

    for line in render_header(dense):
        out.write(line + "\n")

    rows = tqdm(dense.X, desc="Writing instances", total=dense.num_instances, disable=not show_progress)
    for i, row in enumerate(rows):
        if i % flush_every == 0:
            out.flush()
        out.write(render_instance(row, dense.attributes) + "\n")
    out.flush()


def render_header(dataset: MultiLabelDataset) -> List[str]:
    """
    Returns the ARFF header lines: @relation, one @attribute line per column and @data.
    """
    lines = [f"@relation {quote_arff(dataset.relation)}", ""]
    for attribute in dataset.attributes:
        lines.append(render_attribute_line(attribute))
    lines += ["", "@data"]
    return lines


def render_attribute_line(attribute: AttributeDescriptor) -> str:
    """
    Renders '@attribute <name> <type>' with the name made acceptable to CLUS.

    Every ';' on the line (name and nominal values alike) becomes SEMI_COLON. The
    name is then truncated if needed, replacing only its first occurrence on the line.
    """
    line = replace_semicolons(f"@attribute {quote_arff(attribute.name)} {attribute.declaration()}")
    original_name = quote_arff(replace_semicolons(attribute.name))
    new_name = quote_arff(sanitize_attribute_name(attribute.name))
    return line.replace(original_name, new_name, 1)


def render_instance(row: Sequence, attributes: Sequence[AttributeDescriptor]) -> str:
    """Renders one dense row as a comma separated ARFF data line."""
    return ",".join(_render_value(value, attribute) for value, attribute in zip(row, attributes))


def _render_value(value, attribute: AttributeDescriptor) -> str:
    if is_missing(value):
        return MISSING_VALUE
    if attribute.type is AttributeType.NUMERIC:
        number = float(value)
        if not np.isfinite(number):
            raise ValueError(f"Numeric attribute '{attribute.name}' holds {number}, which ARFF cannot represent.")
        return _format_number(number)
    if attribute.type is AttributeType.NOMINAL:
        return quote_arff(replace_semicolons(_nominal_label(value, attribute)))
    return quote_arff(str(value))


def _nominal_label(value, attribute: AttributeDescriptor) -> str:
    # Nominal cells hold the index of their value, but accept the value itself too.
    if isinstance(value, str):
        if value not in attribute.values:
            raise ValueError(f"'{value}' is not a declared value of nominal attribute '{attribute.name}'.")
        return value
    position = float(value)
    if not (position.is_integer() and 0 <= position < len(attribute.values)):
        raise ValueError(
            f"Nominal attribute '{attribute.name}' has {len(attribute.values)} values, got index {value}."
        )
    return attribute.values[int(position)]


def _format_number(value: float) -> str:
    """Up to 6 decimals, no trailing zeros, so 1.0 is written as 1."""
    if value.is_integer():
        return str(int(value))
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _check_flush_every(flush_every: int) -> None:
    if flush_every < 1:
        raise ValueError(f"flush_every must be at least 1, got {flush_every}")
