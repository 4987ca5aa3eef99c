"""Answer normalisation for typed-answer drills."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_TRAILING_PUNCT = re.compile(r"[.!?]+$")
_ALTERNATIVES = re.compile(r"\s*[/,]\s*")


def normalize_answer(text: str) -> str:
    """Trim, collapse whitespace, drop trailing .!? and lowercase."""
    collapsed = _WHITESPACE.sub(" ", text.strip())
    return _TRAILING_PUNCT.sub("", collapsed).lower()


def answers_match(given: str, expected: str) -> bool:
    """
    Compare a typed answer with the expected one.

    `expected` may list alternatives separated by "/" or ",".
    """
    answer = normalize_answer(given)
    if not answer:
        return False
    if answer == normalize_answer(expected):
        return True
    return any(answer == normalize_answer(alt) for alt in _ALTERNATIVES.split(expected) if alt)
