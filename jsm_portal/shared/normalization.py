from __future__ import annotations
from typing import Any, Optional


def normalize_str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None

def normalize_int_or_none(value: Any, *, allow_zero: bool = False) -> Optional[int]:
    # bools are ints in Python, but never a valid identifier in a request body
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        v_int = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError, OverflowError):
        return None

    if not allow_zero and v_int <= 0:
        return None

    return v_int

def is_blank(value: Any) -> bool:
    """True for the values that must never be forwarded downstream: ``None`` and ``""``."""
    return value is None or value == ""
