"""
One-call entry point exposing the whole pipeline and its intermediate matrices.

Usage:
    from pmi_vectors.pipeline import PipelineConfig, build

    result = build("the cat sat on the mat the cat ran", PipelineConfig(max_juxt=2))
    result.vectors.similarity("the", "cat")
    result.keywords(3)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from scipy.sparse import csr_matrix

from pmi_vectors.adjacency import adjacency, doc_sim, embed_corpora, shared_vocabulary
from pmi_vectors.config import PipelineConfig
from pmi_vectors.cooccurrence import skipgram_matrix
from pmi_vectors.document import Document
from pmi_vectors.embeddings import EmbeddingModel, VectorMapping, factorize
from pmi_vectors.incidence import incidence_from_pmi, keywords
from pmi_vectors.pmi import pmi_matrix


@dataclass(frozen=True)
class PipelineResult:
    """Every stage's output for one corpus."""

    document: Document
    cooccurrence: csr_matrix
    pmi: csr_matrix
    model: EmbeddingModel
    incidence: dict[str, float]

    @property
    def vectors(self) -> VectorMapping:
        return self.model.vectors

    def keywords(self, top_n: int | None = None, descending: bool = False) -> list[str]:
        return keywords(
            self.incidence, top_n, descending=descending, vocab_size=self.document.size()
        )


def build(source: bytes | str | Iterable[str], config: PipelineConfig) -> PipelineResult:
    """
    Run the pipeline on raw text or an already tokenized sequence.

    Strings and bytes go through ``normalize_and_tokenize``; any other
    iterable is taken as the token sequence as is.
    """
    if isinstance(source, (bytes, str)):
        document = Document.from_text(source)
    else:
        document = Document(source)

    cooccurrence = skipgram_matrix(document, config.max_juxt)
    pmi = pmi_matrix(cooccurrence, document.unigram_probabilities, positive=config.positive_pmi)
    vocab = document.vocab()
    return PipelineResult(
        document=document,
        cooccurrence=cooccurrence,
        pmi=pmi,
        model=factorize(pmi, vocab, max_dim=config.max_dim),
        incidence=incidence_from_pmi(pmi, vocab, zero_mass=config.zero_mass),
    )


__all__ = [
    "PipelineConfig",
    "PipelineResult",
    "build",
    "adjacency",
    "doc_sim",
    "embed_corpora",
    "shared_vocabulary",
]
