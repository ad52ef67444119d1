"""Text normalization and similarity metrics for scenario titles and descriptions."""
from __future__ import annotations
import math
import re
import unicodedata
from typing import Optional

from rapidfuzz.distance import Levenshtein

_RE_COMBINING = re.compile(r"[\u0300-\u036f]")
_RE_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_RE_WS = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """Lower-case, strip accents and punctuation, collapse whitespace."""
    if not text:
        return ""
    t = unicodedata.normalize("NFD", text.lower())
    t = _RE_COMBINING.sub("", t)
    t = _RE_NON_ALNUM.sub("", t)
    t = _RE_WS.sub(" ", t).strip()
    return t


def jaccard_similarity(a: Optional[str], b: Optional[str]) -> float:
    """Token-set Jaccard index of the normalized strings, in [0, 1]."""
    set_a = set(normalize_text(a).split())
    set_b = set(normalize_text(b).split())
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def levenshtein_similarity(a: Optional[str], b: Optional[str]) -> float:
    """``1 - edit_distance / max_len`` of the normalized strings, in [0, 1]."""
    s1 = normalize_text(a)
    s2 = normalize_text(b)
    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0
    distance = Levenshtein.distance(s1, s2)
    return 1.0 - distance / max(len(s1), len(s2))


def combined_similarity(a: Optional[str], b: Optional[str]) -> float:
    # Jaccard wins on reordered words, Levenshtein on typos.
    return max(jaccard_similarity(a, b), levenshtein_similarity(a, b))


def to_percent(score: float) -> int:
    """Scale a [0, 1] score to an integer percentage, rounding halves up."""
    return int(math.floor(score * 100 + 0.5))


def candidate_score(
    title: Optional[str],
    description: Optional[str],
    stored_title: Optional[str],
    stored_description: Optional[str],
    title_weight: float = 0.7,
    description_weight: float = 0.3,
) -> int:
    """Weighted title/description similarity as a 0-100 percentage.

    Weights are applied as given, title term first; both are expected to
    sum to 1.
    """
    title_sim = combined_similarity(title, stored_title)
    desc_sim = combined_similarity(description or "", stored_description or "")
    combined = title_sim * title_weight + desc_sim * description_weight
    return max(0, min(100, to_percent(combined)))
