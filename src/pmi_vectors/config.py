"""
Pipeline configuration.

Usage:
    from pmi_vectors.config import PipelineConfig

    config = PipelineConfig(max_juxt=2, max_dim=50)
"""

from __future__ import annotations

from dataclasses import dataclass

from pmi_vectors.errors import InputError


# =============================================================================
# Defaults
# =============================================================================

# Worker threads used when embedding several corpora at once
DEFAULT_NUM_WORKERS = 1

# Minimum corpora before enabling the thread pool
MIN_CORPORA_FOR_PARALLEL = 2

# How incidence treats terms whose PMI row sums to zero
ZERO_MASS_POLICIES = ("exclude", "inf", "raise")


@dataclass(frozen=True)
class PipelineConfig:
    """
    Parameters shared by every stage of the pipeline.

    Args:
        max_juxt: Window radius, number of neighbours counted on each side.
        max_dim: Embedding width cap, also the default keyword count.
        positive_pmi: Floor negative PMI values to zero (PPMI).
        zero_mass: Incidence policy for terms with zero PMI mass.
        num_workers: Threads used by ``embed_corpora``.
    """

    max_juxt: int
    max_dim: int | None = None
    positive_pmi: bool = False
    zero_mass: str = "exclude"
    num_workers: int = DEFAULT_NUM_WORKERS

    def __post_init__(self) -> None:
        if isinstance(self.max_juxt, bool) or not isinstance(self.max_juxt, int):
            raise InputError(f"max_juxt must be an int, got {self.max_juxt!r}")
        if self.max_juxt < 1:
            raise InputError(f"max_juxt must be >= 1, got {self.max_juxt}")
        if self.max_dim is not None and self.max_dim < 1:
            raise InputError(f"max_dim must be >= 1 or None, got {self.max_dim}")
        if self.zero_mass not in ZERO_MASS_POLICIES:
            raise InputError(
                f"zero_mass must be one of {ZERO_MASS_POLICIES}, got {self.zero_mass!r}"
            )
        if self.num_workers < 1:
            raise InputError(f"num_workers must be >= 1, got {self.num_workers}")
