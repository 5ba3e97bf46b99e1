import numbers
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy import sparse

from clusprep.utils.strings import quote_arff


def is_missing(value) -> bool:
    """None and NaN both stand for a missing cell."""
    if value is None:
        return True
    return isinstance(value, (float, np.floating)) and np.isnan(value)


def _invalid_nominal_cells(column: np.ndarray, values: Tuple[str, ...]) -> list:
    if column.dtype.kind in "biuf":
        column = column.astype(float)
        valid = np.isnan(column) | (
            (np.floor(column) == column) & (column >= 0) & (column < len(values))
        )
        return column[~valid].tolist()
    return [
        cell for cell in column
        if not (is_missing(cell) or (isinstance(cell, str) and cell in values) or _is_value_index(cell, len(values)))
    ]


def _is_value_index(cell, n_values: int) -> bool:
    if isinstance(cell, (bool, np.bool_)) or not isinstance(cell, numbers.Real):
        return False
    return float(cell).is_integer() and 0 <= cell < n_values


class AttributeType(Enum):
    NUMERIC = "numeric"
    NOMINAL = "nominal"
    STRING = "string"


@dataclass(frozen=True)
class AttributeDescriptor:
    """
    Metadata for one column of a MultiLabelDataset.

    Attributes:
        name: The attribute name as it should appear in the ARFF header (before sanitization).
        type: Declared type of the column.
        index: Column position of the attribute in the dataset.
        values: Allowed values for nominal attributes, empty for the other types.
            Nominal cells store the 0-based position of their value in this tuple.
    """
    name: str
    type: AttributeType
    index: int
    values: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.type is AttributeType.NOMINAL and not self.values:
            raise ValueError(f"Nominal attribute '{self.name}' must declare at least one value.")
        if self.type is not AttributeType.NOMINAL and self.values:
            raise ValueError(f"Only nominal attributes take values, got values for '{self.name}'.")

    def declaration(self) -> str:
        """ARFF type declaration, e.g. 'numeric' or '{0,1}'."""
        if self.type is AttributeType.NOMINAL:
            return "{" + ",".join(quote_arff(v) for v in self.values) + "}"
        return self.type.value


@dataclass
class MultiLabelDataset:
    """
    A multi-label dataset: a matrix of instances plus per-column metadata.

    X holds one row per instance and one column per attribute (features and labels alike).
    It can be a dense numpy array or a scipy sparse matrix, in which case unstored cells
    are implicit zeros. Label columns are given by their 0-based positions.
    """
    X: object
    attributes: List[AttributeDescriptor]
    label_indices: List[int]
    relation: str = "dataset"

    def __post_init__(self):
        if not sparse.issparse(self.X):
            self.X = np.asarray(self.X)
        if len(self.X.shape) != 2:
            raise ValueError(f"X must be 2-dimensional, got shape {self.X.shape}")

        n_columns = self.X.shape[1]
        if n_columns != len(self.attributes):
            raise ValueError(
                f"X has {n_columns} columns but {len(self.attributes)} attributes were described."
            )
        for position, attribute in enumerate(self.attributes):
            if attribute.index != position:
                raise ValueError(
                    f"Attribute '{attribute.name}' has index {attribute.index} but sits at column {position}."
                )

        self.label_indices = [int(i) for i in self.label_indices]
        if not self.label_indices:
            raise ValueError("A multi-label dataset needs at least one label column.")
        if len(set(self.label_indices)) != len(self.label_indices):
            raise ValueError(f"Label indices must be unique, got {self.label_indices}")
        out_of_range = [i for i in self.label_indices if not 0 <= i < n_columns]
        if out_of_range:
            raise ValueError(f"Label indices {out_of_range} are out of range for {n_columns} columns.")

        self._check_nominal_cells()

    def _check_nominal_cells(self):
        """Every nominal cell must be missing, one of the declared values, or a valid index into them."""
        nominal = [a for a in self.attributes if a.type is AttributeType.NOMINAL]
        if not nominal:
            return
        X = self.X.tocsc() if sparse.issparse(self.X) else self.X
        for attribute in nominal:
            column = X[:, attribute.index]
            column = column.toarray().ravel() if sparse.issparse(column) else np.asarray(column).ravel()
            invalid = _invalid_nominal_cells(column, attribute.values)
            if invalid:
                raise ValueError(
                    f"Nominal attribute '{attribute.name}' has cells {invalid[:5]} that are neither "
                    f"missing nor an index into its {len(attribute.values)} values."
                )

    @property
    def num_instances(self) -> int:
        return self.X.shape[0]

    @property
    def num_attributes(self) -> int:
        return self.X.shape[1]

    @property
    def num_labels(self) -> int:
        return len(self.label_indices)

    @property
    def is_sparse(self) -> bool:
        return sparse.issparse(self.X)

    @property
    def label_names(self) -> List[str]:
        return [self.attributes[i].name for i in self.label_indices]

    def copy(self) -> "MultiLabelDataset":
        """Returns an independent working copy; changes to it never reach this dataset."""
        return MultiLabelDataset(
            X=self.X.copy(),
            attributes=list(self.attributes),
            label_indices=list(self.label_indices),
            relation=self.relation,
        )

    def to_dense(self) -> "MultiLabelDataset":
        """
        Returns a copy in which every cell is stored explicitly.

        Sparse matrices leave zeros implicit; ARFF rows written by the transcoder need
        every value, so implicit zeros are materialized here.
        """
        dense_X = self.X.toarray() if self.is_sparse else self.X.copy()
        return MultiLabelDataset(
            X=dense_X,
            attributes=list(self.attributes),
            label_indices=list(self.label_indices),
            relation=self.relation,
        )

    @classmethod
    def from_arrays(
        cls,
        features,
        labels,
        feature_names: Optional[Sequence[str]] = None,
        label_names: Optional[Sequence[str]] = None,
        relation: str = "dataset",
    ) -> "MultiLabelDataset":
        """
        Builds a dataset from a feature matrix and a binary label matrix.

        Features become numeric attributes, labels become nominal {0,1} attributes
        placed after the features (the usual Mulan layout). If either matrix is sparse
        the result is a sparse CSR matrix. Label cells must be 0, 1 or NaN (missing);
        anything else raises a ValueError naming the label.

        Args:
            features: (n_instances, n_features) array or sparse matrix.
            labels: (n_instances, n_labels) binary array or sparse matrix.
            feature_names: Optional names, defaults to feature_0, feature_1, ...
            label_names: Optional names, defaults to label_0, label_1, ...
            relation: Name written on the @relation line.
        """
        if not sparse.issparse(features):
            features = np.asarray(features, dtype=float)
        if not sparse.issparse(labels):
            labels = np.asarray(labels, dtype=float)
        if features.shape[0] != labels.shape[0]:
            raise ValueError(
                f"features and labels must have same length. Got features: {features.shape[0]}, labels: {labels.shape[0]}"
            )

        n_features = features.shape[1]
        n_labels = labels.shape[1]
        if feature_names is None:
            feature_names = [f"feature_{i}" for i in range(n_features)]
        if label_names is None:
            label_names = [f"label_{i}" for i in range(n_labels)]
        if len(feature_names) != n_features or len(label_names) != n_labels:
            raise ValueError("Number of names does not match the number of columns.")

        attributes = [
            AttributeDescriptor(name, AttributeType.NUMERIC, i)
            for i, name in enumerate(feature_names)
        ]
        attributes += [
            AttributeDescriptor(name, AttributeType.NOMINAL, n_features + i, values=("0", "1"))
            for i, name in enumerate(label_names)
        ]

        if sparse.issparse(features) or sparse.issparse(labels):
            X = sparse.hstack([sparse.csr_matrix(features), sparse.csr_matrix(labels)], format="csr")
        else:
            X = np.hstack([features, labels])

        label_indices = list(range(n_features, n_features + n_labels))
        return cls(X=X, attributes=attributes, label_indices=label_indices, relation=relation)
