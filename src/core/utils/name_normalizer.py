"""Name and position normalization shared by role assignment and live matching.

Riot display names, live client names and champion identifiers disagree on
case, spacing and punctuation ("Kai'Sa" vs "Kaisa", "Lee Sin" vs "LeeSin").
Every comparison in the engine goes through ``normalize_name`` first.
"""

from __future__ import annotations

from src.contracts.common import RoleSlot

# Upstream position spellings -> canonical role
_POSITION_ALIASES: dict[str, RoleSlot] = {
    "top": RoleSlot.TOP,
    "toplane": RoleSlot.TOP,
    "jungle": RoleSlot.JUNGLE,
    "jungler": RoleSlot.JUNGLE,
    "jg": RoleSlot.JUNGLE,
    "jng": RoleSlot.JUNGLE,
    "middle": RoleSlot.MIDDLE,
    "mid": RoleSlot.MIDDLE,
    "midlane": RoleSlot.MIDDLE,
    "bottom": RoleSlot.BOTTOM,
    "bot": RoleSlot.BOTTOM,
    "adc": RoleSlot.BOTTOM,
    "carry": RoleSlot.BOTTOM,
    "utility": RoleSlot.UTILITY,
    "support": RoleSlot.UTILITY,
    "sup": RoleSlot.UTILITY,
    "supp": RoleSlot.UTILITY,
}


def normalize_name(raw: str | None) -> str:
    """Lowercase ``raw`` and drop whitespace and every non-alphanumeric char.

    Total function: ``None`` and empty input both give ``""``.

    >>> normalize_name("Kai'Sa")
    'kaisa'
    >>> normalize_name("  Hide on bush#KR1 ")
    'hideonbushkr1'
    """
    if not raw:
        return ""
    return "".join(ch for ch in raw.lower() if ch.isalnum())


def normalize_position(raw: str | None) -> RoleSlot | None:
    """Map a declared position to a canonical role, or None when unknown."""
    return _POSITION_ALIASES.get(normalize_name(raw))
