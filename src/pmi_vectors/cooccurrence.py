"""
Skip-gram co-occurrence counting.

For every focus position with a complete window on both sides, each neighbour
at distance ``d`` (``1 <= d <= max_juxt``) contributes ``1/d`` to the cell of
the (focus, neighbour) term pair. Positions closer than ``max_juxt`` to either
end of the sequence are never used as focus positions. Every contribution is
written to both ``(a, b)`` and ``(b, a)``, and the finished matrix is divided
by the total token count.
"""

from __future__ import annotations

import warnings

import numpy as np
from scipy.sparse import coo_matrix, csr_matrix

from pmi_vectors.document import Document
from pmi_vectors.errors import InputError, PipelineWarning


def window_focus_positions(length: int, max_juxt: int) -> np.ndarray:
    """Positions whose window of radius ``max_juxt`` fits inside the sequence."""
    if max_juxt < 1:
        raise InputError(f"max_juxt must be >= 1, got {max_juxt}")
    return np.arange(max_juxt, max(length - max_juxt, max_juxt), dtype=np.int64)


def skipgram_matrix(document: Document, max_juxt: int) -> csr_matrix:
    """
    Build the weighted co-occurrence matrix of a document.

    Args:
        document: Source document.
        max_juxt: Window radius (positive).

    Returns:
        Symmetric ``size x size`` CSR matrix of density-normalized weights.
    """
    n = document.size()
    focus = window_focus_positions(len(document), max_juxt)
    if len(focus) == 0:
        if n:
            warnings.warn(
                f"Document of {len(document)} tokens has no complete window "
                f"of radius {max_juxt}; co-occurrence matrix is empty.",
                PipelineWarning,
                stacklevel=2,
            )
        return csr_matrix((n, n), dtype=np.float64)

    ids = document.token_ids
    rows, cols, weights = [], [], []
    for distance in range(1, max_juxt + 1):
        weight = 1.0 / distance
        for neighbour in (focus + distance, focus - distance):
            rows.append(ids[focus])
            cols.append(ids[neighbour])
            weights.append(np.full(len(focus), weight))

    one_way = coo_matrix(
        (np.concatenate(weights), (np.concatenate(rows), np.concatenate(cols))),
        shape=(n, n),
    ).tocsr()
    # A + A.T is exactly symmetric since float addition commutes
    matrix = csr_matrix(one_way + one_way.T)
    matrix.sum_duplicates()
    matrix.data /= len(document)
    return matrix
