import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import arff
import numpy as np
from scipy import sparse
from scipy.io import arff as scipy_arff

from clusprep.ml.dataset import AttributeDescriptor, AttributeType, MultiLabelDataset
from clusprep.utils.paths import check_file_exists

logger = logging.getLogger(__name__)

NUMERIC_TYPES = ("NUMERIC", "REAL", "INTEGER")


def load_arff(
    path: Union[str, Path],
    label_names: Optional[Sequence[str]] = None,
    num_labels: Optional[int] = None,
    relation: Optional[str] = None,
) -> MultiLabelDataset:
    """
    Loads a dense or sparse ARFF file into a MultiLabelDataset.

    Dense files are read with scipy. Files whose data rows use the sparse
    `{index value, ...}` form (most Mulan datasets, e.g. bibtex or medical) are read
    with liac-arff and kept sparse; cells they leave out are zeros.

    Labels are picked either by name or, as Mulan does for files without a label
    definition, as the last `num_labels` attributes. Exactly one of the two must be given.

    Args:
        path: The ARFF file to read.
        label_names: Names of the label attributes.
        num_labels: Number of label attributes at the end of the attribute list.
        relation: Overrides the relation name read from the file.

    Returns:
        MultiLabelDataset: Numeric attributes as floats, nominal ones as value indices,
        missing values as NaN. X is a CSR matrix for sparse files.
    """
    if (label_names is None) == (num_labels is None):
        raise ValueError("Specify exactly one of label_names or num_labels.")
    check_file_exists(path)

    is_sparse, n_rows = _scan_data_section(path)
    if is_sparse:
        X, attributes, file_relation = _load_sparse(path, n_rows)
    else:
        X, attributes, file_relation = _load_dense(path)
    names = [attribute.name for attribute in attributes]

    if label_names is not None:
        unknown = [label for label in label_names if label not in names]
        if unknown:
            raise ValueError(f"Label attributes not found in {path}: {unknown}")
        label_indices = [names.index(label) for label in label_names]
    else:
        if not 0 < num_labels <= len(names):
            raise ValueError(f"num_labels must be between 1 and {len(names)}, got {num_labels}")
        label_indices = list(range(len(names) - num_labels, len(names)))

    logger.info("Loaded %s %s: %d instances, %d attributes, %d labels",
                "sparse" if is_sparse else "dense", path, X.shape[0], X.shape[1], len(label_indices))
    return MultiLabelDataset(
        X=X,
        attributes=attributes,
        label_indices=label_indices,
        relation=relation if relation is not None else file_relation,
    )


def _load_dense(path) -> Tuple[np.ndarray, List[AttributeDescriptor], str]:
    data, meta = scipy_arff.loadarff(str(path))

    attributes = []
    columns = []
    for index, name in enumerate(meta.names()):
        type_name, values = meta[name]
        column = data[name]
        if type_name == "numeric":
            attributes.append(AttributeDescriptor(name, AttributeType.NUMERIC, index))
            columns.append(np.asarray(column, dtype=float))
        elif type_name == "nominal":
            values = tuple(values)
            attributes.append(AttributeDescriptor(name, AttributeType.NOMINAL, index, values=values))
            columns.append(_nominal_to_indices(column, values))
        else:
            raise ValueError(f"Unsupported attribute type '{type_name}' for attribute '{name}'.")

    X = np.column_stack(columns) if columns else np.empty((len(data), 0))
    return X, attributes, meta.name


def _load_sparse(path, n_rows: int) -> Tuple[sparse.csr_matrix, List[AttributeDescriptor], str]:
    with open(path, "r", encoding="utf-8") as f:
        decoded = arff.load(f, encode_nominal=True, return_type=arff.COO)

    attributes = []
    for index, (name, type_spec) in enumerate(decoded["attributes"]):
        if isinstance(type_spec, list):
            attributes.append(AttributeDescriptor(name, AttributeType.NOMINAL, index, values=tuple(type_spec)))
        elif type_spec in NUMERIC_TYPES:
            attributes.append(AttributeDescriptor(name, AttributeType.NUMERIC, index))
        else:
            raise ValueError(f"Unsupported attribute type '{type_spec}' for attribute '{name}'.")

    values, rows, cols = decoded["data"]
    values = np.array([np.nan if v is None else v for v in values], dtype=float)
    X = sparse.coo_matrix(
        (values, (np.asarray(rows, dtype=int), np.asarray(cols, dtype=int))),
        shape=(n_rows, len(attributes)),
    ).tocsr()
    return X, attributes, decoded["relation"]


def _scan_data_section(path) -> Tuple[bool, int]:
    """Returns whether the rows after @data use the sparse {index value, ...} form, and how many rows there are."""
    in_data = False
    is_sparse = False
    n_rows = 0
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("%"):
                continue
            if not in_data:
                in_data = line.lower().startswith("@data")
                continue
            if n_rows == 0:
                is_sparse = line.startswith("{")
            n_rows += 1
    return is_sparse, n_rows


def _nominal_to_indices(column, values) -> np.ndarray:
    """Map nominal values (bytes from scipy) to their position in `values`; '?' becomes NaN."""
    lookup = {value: i for i, value in enumerate(values)}
    indices = np.empty(len(column), dtype=float)
    for i, raw in enumerate(column):
        value = raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)
        indices[i] = lookup.get(value, np.nan)
    return indices
