from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from functools import cached_property
from types import MappingProxyType
from typing import TYPE_CHECKING

import numpy as np

from pmi_vectors.errors import UnknownTermError
from pmi_vectors.text import normalize_and_tokenize

if TYPE_CHECKING:
    from numpy.typing import NDArray


class Document:
    """
    A fixed token sequence together with its vocabulary index.

    Each distinct token gets the next unused integer id in order of first
    appearance, so ids are contiguous in ``[0, size())``. The document cannot
    grow after construction.

    Args:
        tokens (Iterable[str]): The normalized token sequence, repeats included.

    Attributes:
        tokens (tuple[str, ...]): The token sequence.
        token_indices (Mapping[str, int]): Read-only vocabulary mapping from term to id.
    """

    def __init__(self, tokens: Iterable[str]):
        self.tokens: tuple[str, ...] = tuple(tokens)
        indices: dict[str, int] = {}
        for term in self.tokens:
            if term not in indices:
                indices[term] = len(indices)
        self.token_indices: Mapping[str, int] = MappingProxyType(indices)

    @classmethod
    def from_text(cls, raw: bytes | str) -> Document:
        return cls(normalize_and_tokenize(raw))

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens)

    def __contains__(self, term: object) -> bool:
        return term in self.token_indices

    def __repr__(self) -> str:
        return f"Document(tokens={len(self.tokens)}, vocab={self.size()})"

    def size(self) -> int:
        """Number of distinct terms."""
        return len(self.token_indices)

    def vocab(self) -> list[str]:
        """Terms ordered by id."""
        return list(self.token_indices)

    def term_id(self, term: str) -> int:
        try:
            return self.token_indices[term]
        except KeyError:
            raise UnknownTermError(term) from None

    @cached_property
    def token_ids(self) -> NDArray[np.int64]:
        """The token sequence as an array of term ids."""
        ids = np.fromiter(
            (self.token_indices[t] for t in self.tokens),
            dtype=np.int64,
            count=len(self.tokens),
        )
        ids.setflags(write=False)
        return ids

    @cached_property
    def term_frequency(self) -> NDArray[np.float64]:
        """Occurrence count of each term, indexed by id."""
        counts = np.bincount(self.token_ids, minlength=self.size()).astype(np.float64)
        counts.setflags(write=False)
        return counts

    @cached_property
    def unigram_probabilities(self) -> NDArray[np.float64]:
        """Term frequency over total token count, indexed by id."""
        if not self.tokens:
            return np.zeros(0, dtype=np.float64)
        probabilities = self.term_frequency / len(self.tokens)
        probabilities.setflags(write=False)
        return probabilities
