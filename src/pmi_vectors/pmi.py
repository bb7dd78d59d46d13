"""
Pointwise mutual information over a sparse co-occurrence matrix.

    pmi(i, j) = log( P(i, j) / (P(i) * P(j)) )

Only cells already present in the co-occurrence matrix are transformed. Absent
cells stay absent and mean "no evidence", never ``log(0)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy.sparse import csr_matrix

from pmi_vectors.cooccurrence import skipgram_matrix
from pmi_vectors.document import Document
from pmi_vectors.errors import InputError, NumericError

if TYPE_CHECKING:
    from numpy.typing import NDArray


def pmi_matrix(
    cooccurrence: csr_matrix,
    unigram: NDArray[np.float64],
    positive: bool = False,
) -> csr_matrix:
    """
    Normalize co-occurrence weights into PMI values.

    Args:
        cooccurrence: Square sparse co-occurrence matrix.
        unigram: Unigram probability of each term, indexed by id.
        positive: Floor negative values to zero (PPMI).

    Returns:
        New CSR matrix whose non-zero pattern is a subset of the input's.

    Raises:
        InputError: Shapes of the matrix and the unigram vector disagree.
        NumericError: A denominator is zero or a result is not finite.
    """
    n = cooccurrence.shape[0]
    if cooccurrence.shape != (n, n) or len(unigram) != n:
        raise InputError(
            f"co-occurrence shape {cooccurrence.shape} does not match "
            f"{len(unigram)} unigram probabilities"
        )

    if n == 0:
        return csr_matrix((0, 0), dtype=np.float64)

    coo = cooccurrence.tocoo()
    stored = coo.data != 0
    rows, cols, weights = coo.row[stored], coo.col[stored], coo.data[stored]

    denominator = unigram[rows] * unigram[cols]
    if np.any(denominator == 0):
        raise NumericError("zero unigram probability for a co-occurring term")

    with np.errstate(divide="ignore", invalid="ignore"):
        values = np.log(weights / denominator)
    if not np.all(np.isfinite(values)):
        raise NumericError("non-finite PMI value from co-occurrence cell")

    if positive:
        values = np.maximum(values, 0.0)

    result = csr_matrix((values, (rows, cols)), shape=(n, n))
    result.eliminate_zeros()
    return result


def document_pmi(document: Document, max_juxt: int, positive: bool = False) -> csr_matrix:
    """PMI matrix of a document, straight from its tokens."""
    return pmi_matrix(
        skipgram_matrix(document, max_juxt),
        document.unigram_probabilities,
        positive=positive,
    )
