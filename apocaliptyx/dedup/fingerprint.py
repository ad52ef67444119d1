"""Content fingerprints for exact-duplicate lookups.

The fingerprint is a 32-bit polynomial hash (``h = h * 31 + c``) over the
UTF-16 code units of ``title|description``, both lower-cased and trimmed. It
must stay bit-compatible with the hashes the web client already stored in the
``content_hash`` column, so it deliberately skips the accent and punctuation
stripping used for similarity scoring.
"""
from __future__ import annotations
from typing import Optional

CONTENT_SEPARATOR = "|"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def build_hash_input(title: Optional[str], description: Optional[str] = "") -> str:
    return f"{(title or '').lower().strip()}{CONTENT_SEPARATOR}{(description or '').lower().strip()}"


def compute_content_hash(title: Optional[str], description: Optional[str] = "") -> str:
    """Return the hex fingerprint of a scenario's title and description."""
    content = build_hash_input(title, description)
    data = content.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = _to_int32((h << 5) - h + code_unit)
    return format(abs(h), "x").zfill(8)


def same_content(title_a: Optional[str], desc_a: Optional[str], title_b: Optional[str], desc_b: Optional[str]) -> bool:
    """Literal comparison of the hashed inputs, used to confirm a hash hit."""
    return build_hash_input(title_a, desc_a) == build_hash_input(title_b, desc_b)
