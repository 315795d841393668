"""Champion identity aliases.

Match-V5, the spectator API and the live client do not agree on champion
identifiers. Pairs are stored normalized (see ``normalize_name``).
"""

from __future__ import annotations

from typing import Final

from src.core.utils.name_normalizer import normalize_name

# Same champion, two internal names
CHAMPION_ALIAS_PAIRS: Final[frozenset[frozenset[str]]] = frozenset(
    {
        frozenset({"monkeyking", "wukong"}),
        frozenset({"nunu", "nunuwillump"}),
        frozenset({"renata", "renataglasc"}),
    }
)


def are_champion_aliases(left: str | None, right: str | None) -> bool:
    """True when the two names are a known alias pair (in either order)."""
    a, b = normalize_name(left), normalize_name(right)
    if not a or not b or a == b:
        return False
    return frozenset({a, b}) in CHAMPION_ALIAS_PAIRS
