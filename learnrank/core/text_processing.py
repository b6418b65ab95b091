from __future__ import annotations

import re
import unicodedata
from typing import Any, Iterable, List, Tuple

# Shared text layer: the profile builder, catalog projection and both scorers
# depend on this module rather than re-implementing normalization.

# Token pattern:
# - alphanumerics
# - allows internal separators like + # . - (e.g., c#, c++, node.js, self-learner)
_WORD_RE = re.compile(r"[a-z0-9]+(?:[#+.-][a-z0-9]+)*", re.IGNORECASE)

# Domain-agnostic stopwords plus learner-goal filler. Keep stable; tune conservatively.
_STOPWORDS = {
    "a", "an", "the", "and", "or", "to", "of", "in", "for", "on", "with", "as", "at", "by", "from",
    "is", "are", "be", "been", "being", "was", "were", "am",
    "this", "that", "these", "those", "it", "its", "they", "them", "their", "you", "your", "we", "our", "i", "me", "my",
    "will", "can", "may", "must", "should", "could", "would",
    "not", "no", "yes",
    "into", "over", "under", "between", "within", "without", "across", "per",
    "about", "also", "such", "than", "then", "there", "here",
    # goal statements ("I want to learn ... and become ...") carry no topic signal in these words
    "want", "wants", "wish", "like", "love", "learn", "learning", "become", "becoming", "get", "getting",
    "improve", "better", "some", "more", "most", "very", "really", "currently", "working",
    "interested", "passionate", "someday", "eventually", "goal", "goals",
    # URL noise from bios
    "https", "http", "www",
}


def normalize_text(text: str) -> str:
    """
    Deterministic normalization for downstream tokenization and substring matching.

    - stable across platforms
    - remove unicode quirks (smart quotes, non-breaking spaces)
    - collapse whitespace
    """
    if not text:
        return ""
    t = unicodedata.normalize("NFKC", text)
    t = t.replace("\u00a0", " ")
    # Normalize common unicode dashes to '-'
    t = re.sub(r"[\u2010-\u2015]", "-", t)
    t = " ".join(t.split())
    return t


def normalize_term(value: Any) -> str:
    """Lowercased, whitespace-collapsed term; anything that is not a string becomes ""."""
    if not isinstance(value, str):
        return ""
    return normalize_text(value).lower()


def normalize_terms(values: Any) -> Tuple[str, ...]:
    """
    Coerce a loosely-typed collection of labels into an ordered, deduped tuple
    of lowercase terms. A bare string counts as a single label; anything else
    that is not iterable yields an empty tuple.
    """
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    elif isinstance(values, dict) or not isinstance(values, Iterable):
        return ()

    out: List[str] = []
    seen = set()
    for v in values:
        if isinstance(v, dict):
            # skill records are often stored as {"name": "React", "level": "..."}
            v = v.get("name")
        term = normalize_term(v)
        if term and term not in seen:
            out.append(term)
            seen.add(term)
    return tuple(out)


def contains_ci(haystack: str, needle: str) -> bool:
    """Case-insensitive substring test; an empty needle never matches."""
    if not needle or not haystack:
        return False
    return needle.lower() in haystack.lower()


def tokenize_stream(text: str) -> List[str]:
    """Ordered token stream (deterministic)."""
    if not text:
        return []
    normalized = normalize_text(text).lower()
    out: List[str] = []
    for m in _WORD_RE.finditer(normalized):
        tok = m.group(0).strip(".-")
        if len(tok) < 2:
            continue
        if tok in _STOPWORDS:
            continue
        out.append(tok)
    return out

