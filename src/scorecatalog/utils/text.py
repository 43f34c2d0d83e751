"""Text helpers for metadata keys and case-insensitive matching."""

from __future__ import annotations

import re
from typing import Iterable

_HYPHEN_LETTER = re.compile(r"-([a-z])")


def hyphen_to_camel(key: str) -> str:
    """Convert a hyphen-case key to camelCase.

    Only a hyphen followed by a lowercase letter is folded, so
    ``time-signature`` becomes ``timeSignature`` while ``a-1`` is left alone.
    """
    return _HYPHEN_LETTER.sub(lambda match: match.group(1).upper(), key)


def contains_casefold(haystack: str | None, needle: str) -> bool:
    """Case-insensitive substring test; a missing haystack never matches."""
    if haystack is None:
        return False
    return needle.casefold() in haystack.casefold()


def equals_casefold(value: str | None, other: str) -> bool:
    if value is None:
        return False
    return value.casefold() == other.casefold()


def sorted_unique(values: Iterable[str]) -> list[str]:
    """Distinct non-empty values in lexicographic order."""
    return sorted({value for value in values if value})
