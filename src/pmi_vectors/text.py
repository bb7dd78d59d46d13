from __future__ import annotations

import re
import unicodedata

_TOKEN_PATTERN = re.compile(r"\w+")


def normalize(text: str) -> str:
    """Canonical decomposition, combining marks stripped, lowercased."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return stripped.lower()


def tokenize(text: str) -> list[str]:
    """Tokenizes the normalized text into a list of words."""
    return _TOKEN_PATTERN.findall(normalize(text))


def normalize_and_tokenize(raw: bytes | str, encoding: str = "utf-8") -> list[str]:
    """
    Turn raw corpus bytes (or an already decoded string) into a token sequence.

    Args:
        raw: Corpus contents.
        encoding: Codec used when ``raw`` is bytes.

    Returns:
        Ordered list of normalized words, repeats included.
    """
    if isinstance(raw, bytes):
        raw = raw.decode(encoding)
    return tokenize(raw)
