"""
SVD word embeddings and similarity queries over them.

The PMI matrix is factorized with a full singular value decomposition and the
left singular vectors are kept. Row ``i`` of that matrix is the embedding of
the term with id ``i``. Mappings hand out read-only row views, never copies.

Usage:
    from pmi_vectors.config import PipelineConfig
    from pmi_vectors.document import Document
    from pmi_vectors.embeddings import word_vectors

    model = word_vectors(Document.from_text(text), PipelineConfig(max_juxt=2))
    model.vectors.similarity("cat", "mat")
    model.vectors.nearest_neighbors("cat", 5, descending=True)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy.sparse import csr_matrix

from pmi_vectors.config import PipelineConfig
from pmi_vectors.document import Document
from pmi_vectors.errors import InputError, NumericError, UnknownTermError
from pmi_vectors.pmi import document_pmi
from pmi_vectors.text import normalize_and_tokenize

if TYPE_CHECKING:
    from numpy.typing import NDArray


# =============================================================================
# Term -> vector mapping
# =============================================================================


class VectorMapping(Mapping[str, "NDArray[np.float64]"]):
    """
    Read-only mapping from term to embedding vector.

    Iteration follows insertion order, which for mappings produced by
    ``factorize`` is vocabulary id order.
    """

    def __init__(self, vectors: Mapping[str, NDArray[np.float64]]):
        self._vectors = dict(vectors)

    def __getitem__(self, term: str) -> NDArray[np.float64]:
        try:
            return self._vectors[term]
        except KeyError:
            raise UnknownTermError(term) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._vectors)

    def __len__(self) -> int:
        return len(self._vectors)

    def __repr__(self) -> str:
        return f"VectorMapping(terms={len(self)}, dimension={self.dimension})"

    @property
    def dimension(self) -> int:
        """Width of the vectors (0 for an empty mapping)."""
        for vector in self._vectors.values():
            return len(vector)
        return 0

    def vocabulary(self) -> set[str]:
        return set(self._vectors)

    def similarity(self, a: str, b: str) -> float:
        """Dot product of two term vectors."""
        return float(np.dot(self[a], self[b]))

    def nearest_neighbors(
        self,
        term: str,
        n: int | None = None,
        descending: bool = False,
    ) -> list[str]:
        """
        Rank the vocabulary by similarity to ``term``.

        The default order is ascending, so the least similar terms come
        first. Pass ``descending=True`` for the closest terms first. Ties keep
        vocabulary order.

        Args:
            term: Query term, must be in the mapping.
            n: Number of terms to return, taken modulo the vocabulary size
                (``0`` gives an empty list). ``None`` returns every term.
            descending: Sort from most to least similar.

        Returns:
            Ranked list of terms (``term`` itself included).
        """
        if not self._vectors:
            return []
        target = self[term]
        terms = list(self._vectors)
        sims = np.array([np.dot(target, self._vectors[t]) for t in terms])
        order = np.argsort(-sims if descending else sims, kind="stable")
        ranked = [terms[i] for i in order]
        if n is None:
            return ranked
        return ranked[: n % len(terms)]

    def embedding(self, tokens: Sequence[str]) -> NDArray[np.float64]:
        """Mean vector of a token sequence."""
        if len(tokens) == 0:
            raise InputError("cannot embed an empty token sequence")
        return np.mean([self[t] for t in tokens], axis=0)

    def text_embedding(self, text: bytes | str) -> NDArray[np.float64]:
        return self.embedding(normalize_and_tokenize(text))

    def restrict(self, terms: Iterable[str]) -> VectorMapping:
        """New mapping over a subset of terms (vectors stay shared)."""
        return VectorMapping({t: self[t] for t in terms})


# =============================================================================
# Factorization
# =============================================================================


@dataclass(frozen=True)
class EmbeddingModel:
    """
    Factorized PMI matrix of one corpus.

    Attributes:
        matrix: Read-only left singular vectors, ``vocab_size x width``.
        singular_values: Matching singular values, descending.
        vectors: Term -> row view of ``matrix``.
    """

    matrix: NDArray[np.float64]
    singular_values: NDArray[np.float64]
    vectors: VectorMapping

    @property
    def dimension(self) -> int:
        return self.matrix.shape[1]


def factorize(
    pmi: csr_matrix,
    vocab: Sequence[str],
    max_dim: int | None = None,
) -> EmbeddingModel:
    """
    Factorize a PMI matrix into term embeddings.

    Args:
        pmi: Square sparse PMI matrix.
        vocab: Terms ordered by id, one per matrix row.
        max_dim: Keep at most this many leading singular vectors.

    Returns:
        EmbeddingModel holding the left singular vectors.

    Raises:
        InputError: Vocabulary and matrix sizes disagree, or ``max_dim < 1``.
        NumericError: The matrix holds NaN/Inf or the SVD does not converge.
    """
    n = pmi.shape[0]
    if pmi.shape != (n, n) or len(vocab) != n:
        raise InputError(f"PMI shape {pmi.shape} does not match {len(vocab)} terms")
    if max_dim is not None and max_dim < 1:
        raise InputError(f"max_dim must be >= 1 or None, got {max_dim}")
    if not np.all(np.isfinite(pmi.data)):
        raise NumericError("PMI matrix contains non-finite values; cannot factorize")

    if n == 0:
        left = np.zeros((0, 0), dtype=np.float64)
        singular = np.zeros(0, dtype=np.float64)
    else:
        try:
            left, singular, _ = np.linalg.svd(pmi.toarray(), full_matrices=True)
        except np.linalg.LinAlgError as exc:
            raise NumericError(f"SVD failed: {exc}") from exc
        width = n if max_dim is None else min(max_dim, n)
        left = np.ascontiguousarray(left[:, :width])
        singular = singular[:width].copy()

    left.setflags(write=False)
    singular.setflags(write=False)
    vectors = VectorMapping({term: left[i] for i, term in enumerate(vocab)})
    return EmbeddingModel(matrix=left, singular_values=singular, vectors=vectors)


def word_vectors(document: Document, config: PipelineConfig) -> EmbeddingModel:
    """Tokens -> co-occurrence -> PMI -> SVD for a single document."""
    pmi = document_pmi(document, config.max_juxt, positive=config.positive_pmi)
    return factorize(pmi, document.vocab(), max_dim=config.max_dim)
