"""Live Match Resolver - match a box-score participant to a live client player.

The live client feed and the match/lobby feeds share no primary key at render
time: display names can be transient in-client names, PUUIDs are usually
missing, and champion identifiers are spelled differently. Each live candidate
earns additive confidence points from the ``MATCH_POINTS`` table and the best
one is accepted only at or above ``ACCEPT_THRESHOLD``.

Architecture:
- Pure and synchronous; safe to call per displayed seat from any context
- "No match" is a normal outcome (``None``), never an exception
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Final

from src.contracts.participants import (
    LIVE_ITEM_SLOTS,
    ActivePlayer,
    LiveParticipant,
    Participant,
)
from src.core.data.champion_aliases import are_champion_aliases
from src.core.utils.name_normalizer import normalize_name

logger = logging.getLogger(__name__)


# ========================================================================
# Scoring table
# ========================================================================


@dataclass(frozen=True)
class MatchPoints:
    """Confidence points per signal; tune here, not in the control flow."""

    champion_exact: int = 10
    champion_alias: int = 10
    champion_partial: int = 5
    name_exact: int = 20
    riot_id_contains: int = 15
    name_contains_short: int = 10
    puuid_exact: int = 30
    puuid_prefix: int = 15


MATCH_POINTS: Final = MatchPoints()
ACCEPT_THRESHOLD: Final = 10
# Candidate names must be longer than 3 chars to count as contained in the target
SHORT_NAME_MIN_LENGTH: Final = 4
PUUID_PREFIX_MIN_LENGTH: Final = 8


@dataclass(frozen=True)
class MatchCandidateScore:
    """Transient pairing of a live candidate with its confidence."""

    candidate: LiveParticipant
    score: int


# ========================================================================
# Candidate scoring
# ========================================================================


def _champion_points(target: str, candidate: LiveParticipant, points: MatchPoints) -> int:
    target_champion = normalize_name(target)
    if not target_champion:
        return 0

    best = 0
    for raw in (candidate.champion_name, candidate.raw_champion_name):
        name = normalize_name(raw)
        if not name:
            continue
        if name == target_champion:
            return points.champion_exact
        if are_champion_aliases(target_champion, name):
            best = max(best, points.champion_alias)
        elif target_champion in name or name in target_champion:
            best = max(best, points.champion_partial)
    return best


def _name_points(participant: Participant, candidate: LiveParticipant, points: MatchPoints) -> int:
    target_names = {
        n
        for n in (
            normalize_name(participant.riot_id_game_name),
            normalize_name(participant.summoner_name),
        )
        if n
    }
    if not target_names:
        return 0

    candidate_names = {
        n
        for n in (
            normalize_name(candidate.summoner_name),
            normalize_name(candidate.riot_id_game_name),
        )
        if n
    }
    full_riot_id = normalize_name(candidate.riot_id)

    if target_names & candidate_names or full_riot_id in target_names:
        return points.name_exact
    if full_riot_id and any(target in full_riot_id for target in target_names):
        return points.riot_id_contains
    for name in candidate_names:
        if len(name) >= SHORT_NAME_MIN_LENGTH and any(name in t for t in target_names):
            return points.name_contains_short
    return 0


def _identifier_points(
    participant: Participant, candidate: LiveParticipant, points: MatchPoints
) -> int:
    target = (participant.puuid or "").strip()
    live = (candidate.puuid or "").strip()
    if not target or not live:
        return 0
    if target == live:
        return points.puuid_exact
    shorter, longer = sorted((target, live), key=len)
    if len(shorter) >= PUUID_PREFIX_MIN_LENGTH and longer.startswith(shorter):
        return points.puuid_prefix
    return 0


def score_candidate(
    participant: Participant,
    candidate: LiveParticipant,
    *,
    points: MatchPoints = MATCH_POINTS,
) -> int:
    """Raw additive confidence that ``candidate`` is ``participant``."""
    return (
        _champion_points(participant.champion_name, candidate, points)
        + _name_points(participant, candidate, points)
        + _identifier_points(participant, candidate, points)
    )


# ========================================================================
# Live field reconciliation
# ========================================================================


def _item_id(entry: Any) -> int | None:
    """Item ID from a bare number or a client item object; None when unusable."""
    if isinstance(entry, bool):
        return None
    if isinstance(entry, int):
        return entry if entry > 0 else None
    if isinstance(entry, float) and entry.is_integer():
        return int(entry) if entry > 0 else None
    if isinstance(entry, dict):
        for key in ("itemID", "itemId", "item_id", "id"):
            value = entry.get(key)
            if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                return value
    return None


def _slot_index(entry: Any) -> int | None:
    if not isinstance(entry, dict):
        return None
    slot = entry.get("slot")
    if isinstance(slot, int) and not isinstance(slot, bool) and 0 <= slot < LIVE_ITEM_SLOTS:
        return slot
    return None


def reconcile_item_slots(items: Sequence[Any] | None) -> tuple[int, ...]:
    """Lay live client items into a fixed 7-slot array (0 = empty).

    Items with an explicit slot index go there first; everything else fills
    the first empty slot left to right. Malformed entries are dropped.
    """
    slots = [0] * LIVE_ITEM_SLOTS
    unslotted: list[int] = []

    for entry in items or ():
        item_id = _item_id(entry)
        if item_id is None:
            logger.debug(f"Dropping malformed live item entry: {entry!r}")
            continue
        index = _slot_index(entry)
        if index is not None and slots[index] == 0:
            slots[index] = item_id
        else:
            unslotted.append(item_id)

    for item_id in unslotted:
        try:
            slots[slots.index(0)] = item_id
        except ValueError:
            logger.debug(f"No free slot for live item {item_id}")
            break

    return tuple(slots)


def _identity_keys(*names: str | None) -> set[str]:
    keys: set[str] = set()
    for name in names:
        if not name:
            continue
        keys.add(normalize_name(name))
        # "Name#TAG" also matches on the bare game name
        keys.add(normalize_name(name.split("#", 1)[0]))
    keys.discard("")
    return keys


def _active_player_gold(candidate: LiveParticipant, active_player: ActivePlayer | None) -> float | None:
    if active_player is None or active_player.current_gold is None:
        return None
    active_keys = _identity_keys(
        active_player.riot_id, active_player.riot_id_game_name, active_player.summoner_name
    )
    candidate_keys = _identity_keys(
        candidate.riot_id, candidate.riot_id_game_name, candidate.summoner_name
    )
    if active_keys & candidate_keys:
        return active_player.current_gold
    return None


# ========================================================================
# Resolution
# ========================================================================


def best_candidate(
    participant: Participant,
    live_roster: Iterable[LiveParticipant] | None,
    *,
    points: MatchPoints = MATCH_POINTS,
) -> MatchCandidateScore | None:
    """Highest-scoring live candidate; the first one wins ties."""
    best: MatchCandidateScore | None = None
    for candidate in live_roster or ():
        score = score_candidate(participant, candidate, points=points)
        if best is None or score > best.score:
            best = MatchCandidateScore(candidate=candidate, score=score)
    return best


def resolve_live_participant(
    participant: Participant,
    live_roster: Iterable[LiveParticipant] | None,
    *,
    active_player: ActivePlayer | None = None,
    threshold: int = ACCEPT_THRESHOLD,
    points: MatchPoints = MATCH_POINTS,
) -> LiveParticipant | None:
    """Find ``participant`` in the live roster snapshot.

    Args:
        participant: Box-score or lobby participant to locate
        live_roster: Latest live client ``allPlayers`` snapshot (may be empty/stale)
        active_player: Live client ``activePlayer`` record, for exact gold
        threshold: Minimum confidence to accept the best candidate

    Returns:
        A copy of the matched live player with ``item_slots`` reconciled and
        ``current_gold`` refined, or None when nothing is confident enough.
    """
    best = best_candidate(participant, live_roster, points=points)
    if best is None or best.score < threshold:
        logger.debug(
            f"No live match for {participant.participant_key} "
            f"(best score {best.score if best else 'n/a'})"
        )
        return None

    candidate = best.candidate
    gold = _active_player_gold(candidate, active_player)
    return candidate.model_copy(
        update={
            "item_slots": reconcile_item_slots(candidate.items),
            "current_gold": gold if gold is not None else candidate.current_gold,
        }
    )
