"""
UGP — Permission string codec.

A permission string is the concatenation of action letters ("CAU").
"-" is the explicit empty set, distinct from having no assignment at all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional

if TYPE_CHECKING:
    from app.core.actions import Action

EMPTY_PERMISSIONS = "-"


def encode_letters(letters: Iterable[str]) -> str:
    """Join letters in first-seen order, dropping duplicates. Empty input gives "-"."""
    seen: List[str] = []
    for letter in letters:
        for ch in letter:
            if ch != EMPTY_PERMISSIONS and ch not in seen:
                seen.append(ch)
    return "".join(seen) if seen else EMPTY_PERMISSIONS


def encode(actions: Iterable["Action"]) -> str:
    return encode_letters(a.letter for a in actions)


def has_action(permissions: Optional[str], letter: str) -> bool:
    if not letter or not permissions or permissions == EMPTY_PERMISSIONS:
        return False
    return letter in permissions

