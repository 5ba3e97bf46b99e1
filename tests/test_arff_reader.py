import pytest
import numpy as np

from clusprep.ml.arff_reader import load_arff
from clusprep.ml.arff_transcoder import transcode
from clusprep.ml.dataset import AttributeType


ARFF = """@relation emotions

@attribute Mean_Acc1298_Mean_Mem40_Centroid numeric
@attribute Std_Acc1298 numeric
@attribute mood {calm,tense}
@attribute amazed {0,1}
@attribute happy {0,1}

@data
0.034,0.5,calm,1,0
0.081,?,tense,0,1
0.110,0.25,?,1,1
"""


@pytest.fixture
def arff_file(tmp_path):
    path = tmp_path / "emotions.arff"
    path.write_text(ARFF)
    return path


def test_load_arff_with_num_labels(arff_file):
    dataset = load_arff(arff_file, num_labels=2)

    assert dataset.relation == "emotions"
    assert dataset.num_instances == 3
    assert dataset.num_attributes == 5
    assert dataset.label_indices == [3, 4]
    assert dataset.label_names == ["amazed", "happy"]
    assert [a.type for a in dataset.attributes] == [
        AttributeType.NUMERIC, AttributeType.NUMERIC,
        AttributeType.NOMINAL, AttributeType.NOMINAL, AttributeType.NOMINAL,
    ]
    assert dataset.attributes[2].values == ("calm", "tense")


def test_load_arff_values(arff_file):
    dataset = load_arff(arff_file, num_labels=2)

    assert dataset.X[0, 0] == pytest.approx(0.034)
    assert np.isnan(dataset.X[1, 1])
    np.testing.assert_array_equal(dataset.X[:2, 2], [0, 1])
    assert np.isnan(dataset.X[2, 2])
    np.testing.assert_array_equal(dataset.X[:, 3:], [[1, 0], [0, 1], [1, 1]])


def test_load_arff_with_label_names(arff_file):
    dataset = load_arff(arff_file, label_names=["happy", "mood"])
    assert dataset.label_indices == [4, 2]


def test_load_arff_relation_override(arff_file):
    assert load_arff(arff_file, num_labels=1, relation="renamed").relation == "renamed"


def test_load_arff_requires_one_label_selector(arff_file):
    with pytest.raises(ValueError):
        load_arff(arff_file)
    with pytest.raises(ValueError):
        load_arff(arff_file, label_names=["happy"], num_labels=1)


def test_load_arff_unknown_label(arff_file):
    with pytest.raises(ValueError, match="sad"):
        load_arff(arff_file, label_names=["sad"])


def test_load_arff_too_many_labels(arff_file):
    with pytest.raises(ValueError):
        load_arff(arff_file, num_labels=6)


def test_load_arff_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_arff(tmp_path / "nope.arff", num_labels=1)


def test_loaded_dataset_transcodes(arff_file, tmp_path):
    dataset = load_arff(arff_file, num_labels=2)
    output = tmp_path / "emotions-train.arff"
    transcode(dataset, output)

    lines = output.read_text().splitlines()
    assert "@attribute Mean_Acc1298_Mean_Mem40_Centro.. numeric" in lines
    assert "@attribute mood {calm,tense}" in lines
    data = lines[lines.index("@data") + 1:]
    assert data == [
        "0.034,0.5,calm,1,0",
        "0.081,?,tense,0,1",
        "0.11,0.25,?,1,1",
    ]


SPARSE_ARFF = """@relation medical

@attribute f1 numeric
@attribute f2 numeric
@attribute Class-0 {0,1}
@attribute Class-1 {0,1}

@data
% rows leave zeros out
{0 1.5,2 1,3 1}
{1 2,3 1}

{0 0.25}
"""


@pytest.fixture
def sparse_arff_file(tmp_path):
    path = tmp_path / "medical.arff"
    path.write_text(SPARSE_ARFF)
    return path


def test_load_sparse_arff(sparse_arff_file):
    dataset = load_arff(sparse_arff_file, num_labels=2)

    assert dataset.is_sparse
    assert dataset.relation == "medical"
    assert dataset.num_instances == 3
    assert dataset.label_names == ["Class-0", "Class-1"]
    assert dataset.attributes[2].type is AttributeType.NOMINAL
    assert dataset.attributes[2].values == ("0", "1")
    np.testing.assert_array_equal(
        dataset.X.toarray(),
        [[1.5, 0, 1, 1], [0, 2, 0, 1], [0.25, 0, 0, 0]],
    )


def test_sparse_arff_transcodes_dense(sparse_arff_file, tmp_path):
    dataset = load_arff(sparse_arff_file, label_names=["Class-0", "Class-1"])
    output = tmp_path / "medical-train.arff"
    transcode(dataset, output)

    lines = output.read_text().splitlines()
    assert lines[lines.index("@data") + 1:] == ["1.5,0,1,1", "0,2,0,1", "0.25,0,0,0"]
