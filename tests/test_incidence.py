import math

import numpy as np
import pytest
from scipy.sparse import csr_matrix

from pmi_vectors.config import PipelineConfig
from pmi_vectors.document import Document
from pmi_vectors.errors import InputError, NumericError
from pmi_vectors.incidence import incidence, incidence_from_pmi, keyword_vectors, keywords

CAT_TOKENS = "the cat sat on the mat the cat ran".split()


@pytest.fixture
def zero_row_pmi():
    # Row 2 carries no PMI mass
    return csr_matrix(np.array([[1.0, 1.0, 0.0], [1.0, 0.5, 0.0], [0.0, 0.0, 0.0]]))


def test_incidence_inverts_normalized_mass():
    pmi = csr_matrix(np.array([[1.0, 1.0], [1.0, 0.0]]))
    scores = incidence_from_pmi(pmi, ["x", "y"])
    # mass / |V| = 1.0 and 0.5
    assert scores == pytest.approx({"x": 1.0, "y": 2.0})


def test_zero_mass_excluded_by_default(zero_row_pmi):
    scores = incidence_from_pmi(zero_row_pmi, ["a", "b", "c"])
    assert set(scores) == {"a", "b"}
    assert scores["a"] == pytest.approx(1.5)
    assert scores["b"] == pytest.approx(2.0)


def test_zero_mass_as_infinity(zero_row_pmi):
    scores = incidence_from_pmi(zero_row_pmi, ["a", "b", "c"], zero_mass="inf")
    assert math.isinf(scores["c"])
    assert keywords(scores, descending=True)[0] == "c"


def test_zero_mass_raises(zero_row_pmi):
    with pytest.raises(NumericError):
        incidence_from_pmi(zero_row_pmi, ["a", "b", "c"], zero_mass="raise")


def test_unknown_zero_mass_policy(zero_row_pmi):
    with pytest.raises(InputError):
        incidence_from_pmi(zero_row_pmi, ["a", "b", "c"], zero_mass="ignore")


def test_document_incidence_covers_vocabulary():
    document = Document(CAT_TOKENS)
    scores = incidence(document, 2)
    assert set(scores) <= set(document.vocab())
    assert all(np.isfinite(v) for v in scores.values())


@pytest.mark.parametrize("top_n", [0, 1, 3, 5, 6, 8, 13])
def test_keywords_sorted_and_truncated(top_n):
    scores = incidence(Document(CAT_TOKENS), 2)
    ranked = keywords(scores, top_n)
    assert len(ranked) == top_n % 6
    values = [scores[t] for t in ranked]
    assert values == sorted(values)


def test_keywords_order():
    scores = {"a": 3.0, "b": -1.0, "c": 2.0}
    assert keywords(scores) == ["b", "c", "a"]
    assert keywords(scores, 2) == ["b", "c"]
    assert keywords(scores, 2, descending=True) == ["a", "c"]


@pytest.mark.parametrize("top_n", [None, 0, 1, 10])
def test_empty_corpus_has_no_keywords(top_n):
    scores = incidence(Document([]), 2)
    assert scores == {}
    assert keywords(scores, top_n) == []


def test_keyword_vectors():
    document = Document(CAT_TOKENS)
    config = PipelineConfig(max_juxt=2, max_dim=3)
    vectors = keyword_vectors(document, config)
    expected = keywords(incidence(document, 2), 3)
    assert list(vectors) == expected
    assert vectors.dimension == 3


@pytest.mark.parametrize("top_n, expected", [(0, []), (2, ["a", "b"]), (3, []), (4, ["a"])])
def test_keyword_count_wraps_on_full_vocabulary(zero_row_pmi, top_n, expected):
    # "c" is dropped for zero mass but still counts toward the vocabulary size
    scores = incidence_from_pmi(zero_row_pmi, ["a", "b", "c"])
    assert scores.vocab_size == 3
    assert keywords(scores, top_n) == expected
    assert keywords(dict(scores), top_n, vocab_size=3) == expected


def test_vocab_size_smaller_than_scores():
    with pytest.raises(InputError):
        keywords({"a": 1.0, "b": 2.0}, 1, vocab_size=1)
