import numpy as np
import pytest

from pmi_vectors.document import Document
from pmi_vectors.errors import UnknownTermError
from pmi_vectors.text import normalize, normalize_and_tokenize, tokenize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("The Cat sat.", ["the", "cat", "sat"]),
        ("Café naïve RÉSUMÉ", ["cafe", "naive", "resume"]),
        (b"fa\xc3\xa7ade, again!", ["facade", "again"]),
        ("", []),
    ],
)
def test_normalize_and_tokenize(raw, expected):
    assert normalize_and_tokenize(raw) == expected


def test_normalize_strips_combining_marks():
    assert normalize("Ångström") == "angstrom"
    assert tokenize("élève") == ["eleve"]


@pytest.mark.parametrize(
    "tokens",
    [
        "the cat sat on the mat the cat ran".split(),
        "a a a a".split(),
        "one".split(),
        "x y z y x w".split(),
    ],
)
def test_ids_are_a_permutation_of_range(tokens):
    document = Document(tokens)
    ids = sorted(document.token_indices.values())
    assert ids == list(range(document.size()))
    assert document.size() == len(set(tokens))
    for term in tokens:
        assert document.vocab()[document.term_id(term)] == term


def test_first_occurrence_order():
    document = Document("the cat sat on the mat the cat ran".split())
    assert document.vocab() == ["the", "cat", "sat", "on", "mat", "ran"]
    assert np.array_equal(document.token_ids, [0, 1, 2, 3, 0, 4, 0, 1, 5])


def test_unigram_probabilities_sum_to_one():
    document = Document("the cat sat on the mat the cat ran".split())
    probabilities = document.unigram_probabilities
    assert np.isclose(probabilities.sum(), 1.0)
    assert np.isclose(probabilities[document.term_id("the")], 3 / 9)
    assert np.isclose(probabilities[document.term_id("cat")], 2 / 9)


def test_empty_document():
    document = Document([])
    assert document.size() == 0
    assert len(document) == 0
    assert document.vocab() == []
    assert document.unigram_probabilities.shape == (0,)


def test_from_text_and_lookup():
    document = Document.from_text("Über über UBER")
    assert document.vocab() == ["uber"]
    assert "uber" in document
    with pytest.raises(UnknownTermError):
        document.term_id("missing")


def test_arrays_are_read_only():
    document = Document("a b a".split())
    with pytest.raises(ValueError):
        document.token_ids[0] = 1
    with pytest.raises(ValueError):
        document.unigram_probabilities[0] = 0.0


def test_vocabulary_index_is_read_only():
    document = Document("a b a".split())
    with pytest.raises(TypeError):
        document.token_indices["c"] = 2
    assert document.size() == 2
