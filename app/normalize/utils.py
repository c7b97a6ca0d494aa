from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

_TERM_SPLIT_RE = re.compile(r"[,;\n|•]")
_YEARS_RE = re.compile(r"(?<!\d)(-?\d{1,2}(?:\.\d+)?)(?!\d)\s*\+?\s*(?:years|yrs|year|yr)?", re.IGNORECASE)
_EDGE_PUNCTUATION = " \t-–—*:;,()[]{}\"'"


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def normalize_term(value: Any, *, max_len: int = 120) -> str:
    """Lower-case, collapse whitespace and trim list punctuation. Empty when unusable."""
    if not isinstance(value, str):
        return ""
    cleaned = normalize_line(value).strip(_EDGE_PUNCTUATION).lower()
    if len(cleaned) > max_len:
        return ""
    return cleaned


def split_terms(value: Any) -> list[Any]:
    """Accept a list or a delimited string and return the raw items."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part for part in _TERM_SPLIT_RE.split(value) if part.strip()]
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return []


def first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def safe_non_negative_int(value: Any, max_value: int = 60) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _YEARS_RE.search(value)
        if not match:
            return None
        number = float(match.group(1))
    else:
        return None
    if math.isnan(number) or number < 0:
        return None
    if math.isinf(number):
        return max_value
    return min(max_value, int(number))
