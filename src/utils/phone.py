"""Phone number normalization helpers."""

from collections.abc import Callable, Iterable
from typing import Any


def normalize_number(value: Any) -> str:
    """
    Canonicalize a raw phone-number-like value into a lookup key.

    Only surrounding whitespace is removed; no formatting or validation
    is applied, so matching is exact after trimming.

    Args:
        value: Raw value (None, string, or any other primitive)

    Returns:
        str: Trimmed string form, or "" for None
    """
    if value is None:
        return ""
    return str(value).strip()


def first_normalized(candidates: Iterable[Callable[[], Any]]) -> str:
    """
    Evaluate candidate extractors in order and return the first non-empty
    normalized value.

    Args:
        candidates: Zero-argument callables, highest priority first

    Returns:
        str: First non-empty normalized value, or "" if none
    """
    for extract in candidates:
        normalized = normalize_number(extract())
        if normalized:
            return normalized
    return ""
