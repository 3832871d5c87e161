"""Item category vocabulary and case-insensitive category matching."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class Category(str, Enum):
    ASSAULT_RIFLE = "assaultrifle"
    SNIPER_RIFLE = "sniperrifle"
    MELEE = "melee"
    EXPLOSIVES = "explosives"
    TOOL = "tool"
    PISTOL = "pistol"
    SHOTGUN = "shotgun"
    SUITCASE = "suitcase"
    SMG = "smg"
    DISTRACTION = "distraction"
    POISON = "poison"
    CONTAINER = "container"


ALL_CATEGORIES: list[str] = [cat.value for cat in Category]


def normalize_category(name: str) -> str:
    return name.upper()


def match_category(candidate: str, enabled: Iterable[str]) -> bool:
    """Check whether ``candidate`` equals one of ``enabled``, ignoring case.

    Matching is exact after normalization, so an empty ``enabled`` matches
    nothing.
    """
    wanted = normalize_category(candidate)
    return any(normalize_category(name) == wanted for name in enabled)
