"""Exception and warning types raised by the embedding pipeline."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class InputError(PipelineError, ValueError):
    """Invalid parameters or an input for which no result is defined."""


class NumericError(PipelineError, ArithmeticError):
    """A non-finite value or a zero denominator reached a computation."""


class UnknownTermError(PipelineError, KeyError):
    """A term was looked up in a vocabulary or mapping that does not contain it."""

    def __init__(self, term: str):
        super().__init__(term)
        self.term = term

    def __str__(self) -> str:
        return f"term not in vocabulary: {self.term!r}"


class PipelineWarning(UserWarning):
    """The result is valid but degraded (e.g. nothing to count)."""
