"""
Cross-corpus adjacency and document similarity.

Given one embedding mapping per corpus, every term shared by all of them is
scored by how well its vectors agree across each ordered pair of corpora,
relative to the agreement of every other shared term:

    cross_PQ(t) = dot(P[t], Q[t])
    score_PQ(k) = sum_t( cross_PQ(k) / cross_PQ(t) ) / |V|

The per-pair scores are averaged over all ordered pairs. ``doc_sim`` reduces
the result to a single number.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import numpy as np
from tqdm import tqdm

from pmi_vectors.config import MIN_CORPORA_FOR_PARALLEL, PipelineConfig
from pmi_vectors.document import Document
from pmi_vectors.embeddings import VectorMapping, word_vectors
from pmi_vectors.errors import InputError, NumericError, PipelineWarning

if TYPE_CHECKING:
    from numpy.typing import NDArray


def shared_vocabulary(*mappings: Mapping[str, NDArray[np.float64]]) -> list[str]:
    """Terms present in every mapping, in the first mapping's order."""
    if not mappings:
        return []
    first, rest = mappings[0], mappings[1:]
    return [term for term in first if all(term in other for other in rest)]


def _stack(mapping: Mapping[str, NDArray[np.float64]], terms: list[str], width: int):
    return np.array([np.asarray(mapping[t])[:width] for t in terms], dtype=np.float64)


def cross_similarity(
    p: Mapping[str, NDArray[np.float64]],
    q: Mapping[str, NDArray[np.float64]],
    terms: list[str],
) -> NDArray[np.float64]:
    """
    ``dot(p[t], q[t])`` for each term.

    Vectors from models of different width are compared over their common
    leading components.
    """
    if not terms:
        return np.zeros(0, dtype=np.float64)
    width = min(len(p[terms[0]]), len(q[terms[0]]))
    return np.einsum("ij,ij->i", _stack(p, terms, width), _stack(q, terms, width))


def adjacency(*mappings: Mapping[str, NDArray[np.float64]]) -> dict[str, float]:
    """
    Adjacency score of every term shared by all corpora.

    Args:
        *mappings: One term -> vector mapping per corpus (at least two).

    Returns:
        New dict of shared term -> score averaged over ordered corpus pairs.

    Raises:
        InputError: Fewer than two mappings.
        NumericError: A shared term's cross-corpus similarity is zero.
    """
    if len(mappings) < 2:
        raise InputError(f"adjacency needs at least two mappings, got {len(mappings)}")

    terms = shared_vocabulary(*mappings)
    if not terms:
        warnings.warn("Corpora share no vocabulary; adjacency is empty.", PipelineWarning, stacklevel=2)
        return {}

    scores = np.zeros(len(terms), dtype=np.float64)
    pairs = 0
    for p, left in enumerate(mappings):
        for q, right in enumerate(mappings):
            if p == q:
                continue
            cross = cross_similarity(left, right, terms)
            zero = np.flatnonzero(cross == 0)
            if len(zero):
                raise NumericError(
                    f"term {terms[zero[0]]!r} has zero cross-corpus similarity "
                    f"between corpora {p} and {q}"
                )
            pair_scores = cross * np.sum(1.0 / cross) / len(terms)
            # Running mean over corpus pairs
            scores = (scores * pairs + pair_scores) / (pairs + 1)
            pairs += 1

    if not np.all(np.isfinite(scores)):
        raise NumericError("adjacency produced non-finite scores")
    return {term: float(score) for term, score in zip(terms, scores)}


def doc_sim(scores: Mapping[str, float]) -> float:
    """Mean adjacency score: one similarity value for the whole set of corpora."""
    if not scores:
        raise InputError("cannot compute document similarity of an empty adjacency map")
    return float(np.mean(list(scores.values())))


def embed_corpora(
    documents: Sequence[Document],
    config: PipelineConfig,
    show_progress: bool = False,
) -> list[VectorMapping]:
    """
    Build one embedding mapping per document.

    Documents are factorized independently; with ``config.num_workers > 1``
    they run in a thread pool. Results always follow input order.
    """
    if not documents:
        return []

    def build(document: Document) -> VectorMapping:
        return word_vectors(document, config).vectors

    progress = dict(total=len(documents), desc="Embedding", unit="corpus", disable=not show_progress)

    if config.num_workers == 1 or len(documents) < MIN_CORPORA_FOR_PARALLEL:
        return [build(document) for document in tqdm(documents, **progress)]

    with ThreadPoolExecutor(max_workers=config.num_workers) as executor:
        return list(tqdm(executor.map(build, documents), **progress))
