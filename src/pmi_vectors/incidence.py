"""
Incidence: per-term importance derived from PMI mass.

A term's incidence is the inverse of its PMI row sum normalized by the
vocabulary size:

    incidence(t) = 1 / (sum_j pmi(t, j) / |V|)

Terms whose associations are broad and strong get a small incidence, terms
with little aggregate PMI mass get a large one.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from scipy.sparse import csr_matrix

from pmi_vectors.config import ZERO_MASS_POLICIES, PipelineConfig
from pmi_vectors.document import Document
from pmi_vectors.embeddings import VectorMapping, factorize
from pmi_vectors.errors import InputError, NumericError
from pmi_vectors.pmi import document_pmi


class IncidenceScores(dict):
    """Term -> incidence, remembering the size of the vocabulary it was scored over."""

    def __init__(self, scores=(), vocab_size: int = 0):
        super().__init__(scores)
        self.vocab_size = vocab_size


def incidence_from_pmi(
    pmi: csr_matrix,
    vocab: Sequence[str],
    zero_mass: str = "exclude",
) -> IncidenceScores:
    """
    Incidence of every term from an existing PMI matrix.

    Args:
        pmi: Square sparse PMI matrix.
        vocab: Terms ordered by id.
        zero_mass: What to do with terms whose PMI row sums to zero:
            ``"exclude"`` drops them, ``"inf"`` scores them ``math.inf``,
            ``"raise"`` raises NumericError.

    Returns:
        IncidenceScores of term -> incidence, in vocabulary order.
    """
    if zero_mass not in ZERO_MASS_POLICIES:
        raise InputError(f"zero_mass must be one of {ZERO_MASS_POLICIES}, got {zero_mass!r}")
    n = len(vocab)
    if pmi.shape != (n, n):
        raise InputError(f"PMI shape {pmi.shape} does not match {n} terms")

    mass = np.asarray(pmi.sum(axis=1)).ravel() / n if n else np.zeros(0)

    scores = IncidenceScores(vocab_size=n)
    for term, value in zip(vocab, mass):
        if value == 0:
            if zero_mass == "raise":
                raise NumericError(f"term {term!r} has zero PMI mass")
            if zero_mass == "inf":
                scores[term] = math.inf
            continue
        scores[term] = float(1.0 / value)
    return scores


def incidence(
    document: Document,
    max_juxt: int,
    positive: bool = False,
    zero_mass: str = "exclude",
) -> IncidenceScores:
    """Incidence of every term in a document."""
    return incidence_from_pmi(
        document_pmi(document, max_juxt, positive=positive),
        document.vocab(),
        zero_mass=zero_mass,
    )


def keywords(
    scores: dict[str, float],
    top_n: int | None = None,
    descending: bool = False,
    vocab_size: int | None = None,
) -> list[str]:
    """
    Terms ranked by incidence, ascending unless ``descending`` is set.

    ``top_n`` is taken modulo ``vocab_size``, the size of the vocabulary the
    scores came from, so terms dropped for zero PMI mass still count. It
    defaults to ``IncidenceScores.vocab_size``, else the number of scored
    terms. ``None`` returns every scored term. Ties keep the mapping's order.
    """
    if not scores:
        return []
    ranked = sorted(scores, key=scores.__getitem__, reverse=descending)
    if top_n is None:
        return ranked
    if vocab_size is None:
        vocab_size = getattr(scores, "vocab_size", len(ranked))
    if vocab_size < len(ranked):
        raise InputError(f"vocab_size {vocab_size} is smaller than the {len(ranked)} scored terms")
    return ranked[: top_n % vocab_size]


def keyword_vectors(document: Document, config: PipelineConfig) -> VectorMapping:
    """Embeddings of the document's top ``config.max_dim`` keywords."""
    pmi = document_pmi(document, config.max_juxt, positive=config.positive_pmi)
    vocab = document.vocab()
    scores = incidence_from_pmi(pmi, vocab, zero_mass=config.zero_mass)
    top = keywords(scores, config.max_dim, vocab_size=len(vocab))
    return factorize(pmi, vocab, max_dim=config.max_dim).vectors.restrict(top)
