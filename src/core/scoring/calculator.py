"""Core scoring calculation logic - Pure domain functions with zero I/O.

Scores every participant of one finished match on six weighted components
(weights sum to 100), adds a victory bonus for the winning side and applies
the adjustment rules from ``rules.py``. Ranking is a stable sort on the total,
so equal totals keep collection order.

CRITICAL: This module MUST NOT contain any:
- Riot API calls
- Database operations
- File I/O
- Network requests
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from src.contracts.common import TeamSide
from src.contracts.participants import Participant
from src.core.scoring.models import MatchScoreSummary, RankedParticipant, ScoreBreakdown
from src.core.scoring.rules import (
    ADJUSTMENT_RULES,
    DAMAGE_SHARE,
    DEFAULT_VICTORY_BONUS,
    FARM,
    GOLD_SHARE,
    KDA,
    KILL_PARTICIPATION,
    LOWEST_TIER,
    MAX_TOTAL,
    TIER_THRESHOLDS,
    VISION,
    AdjustmentContext,
    ComponentSpec,
)
from src.core.utils.clamp import capped_fraction, clamp, safe_ratio

logger = logging.getLogger(__name__)

_NO_TEAM = 0


@dataclass(frozen=True)
class TeamTotals:
    kills: int = 0
    damage: int = 0
    gold: int = 0


def _team_of(participant: Participant) -> int:
    return int(participant.team_id) if participant.team_id is not None else _NO_TEAM


def build_team_totals(participants: Iterable[Participant]) -> dict[int, TeamTotals]:
    """Sum kills, champion damage and gold per team."""
    kills: dict[int, int] = {}
    damage: dict[int, int] = {}
    gold: dict[int, int] = {}

    for p in participants:
        team = _team_of(p)
        kills[team] = kills.get(team, 0) + p.kills
        damage[team] = damage.get(team, 0) + p.total_damage_dealt_to_champions
        gold[team] = gold.get(team, 0) + p.gold_earned

    return {
        team: TeamTotals(kills=kills[team], damage=damage[team], gold=gold[team])
        for team in kills
    }


def _weighted(spec: ComponentSpec, raw: float) -> float:
    return round(capped_fraction(raw, spec.full_marks) * spec.weight, 2)


def calculate_breakdown(
    participant: Participant,
    totals: TeamTotals,
    duration_seconds: float,
    *,
    won: bool,
    victory_bonus: float = DEFAULT_VICTORY_BONUS,
    key: str | None = None,
) -> ScoreBreakdown:
    """Score a single participant against precomputed team totals.

    A zero team total yields a zero component rather than a division error.
    """
    duration = max(0.0, float(duration_seconds or 0))
    minutes = max(1.0, duration / 60)

    takedowns = participant.kills + participant.assists
    raw_kda = takedowns / max(1, participant.deaths)
    damage_share = safe_ratio(participant.total_damage_dealt_to_champions, totals.damage)
    kill_participation = clamp(safe_ratio(takedowns, totals.kills), 0.0, 1.0)
    gold_share = safe_ratio(participant.gold_earned, totals.gold)
    cs_per_min = participant.total_cs / minutes
    vision_per_min = participant.vision_score / minutes

    components = {
        DAMAGE_SHARE.name: _weighted(DAMAGE_SHARE, damage_share),
        KILL_PARTICIPATION.name: _weighted(KILL_PARTICIPATION, kill_participation),
        KDA.name: _weighted(KDA, raw_kda),
        GOLD_SHARE.name: _weighted(GOLD_SHARE, gold_share),
        FARM.name: _weighted(FARM, cs_per_min),
        VISION.name: _weighted(VISION, vision_per_min),
    }

    ctx = AdjustmentContext(participant=participant, kda=raw_kda, duration_seconds=duration)
    fired = [rule for rule in ADJUSTMENT_RULES if rule.applies(ctx)]
    penalty = round(sum(rule.penalty(ctx) for rule in fired), 2)

    bonus = victory_bonus if won else 0.0
    total = clamp(sum(components.values()) + bonus - penalty, 0.0, MAX_TOTAL)

    return ScoreBreakdown(
        participant_key=key or participant.participant_key,
        team_id=None if participant.team_id is None else int(participant.team_id),
        **components,
        victory_bonus=bonus,
        penalty=penalty,
        adjustments=tuple(rule.name for rule in fired),
        total=round(total, 2),
        raw_kda=round(raw_kda, 2),
        raw_kill_participation=round(kill_participation, 4),
        cs_per_min=round(cs_per_min, 2),
        vision_per_min=round(vision_per_min, 2),
    )


def _participant_won(participant: Participant, winning_team: TeamSide | int | None) -> bool:
    if participant.win is not None:
        return participant.win
    if winning_team is None or participant.team_id is None:
        return False
    return int(participant.team_id) == int(winning_team)


def participant_keys(participants: Sequence[Participant]) -> list[str]:
    """Keys for a match roster, unique within it.

    A PUUID shared by several records (bots) falls back to ``team-name``; a
    name that still collides gets the participant's roster index appended.
    """
    keys = [p.participant_key for p in participants]
    shared = Counter(keys)
    keys = [
        p.fallback_key if shared[key] > 1 else key for p, key in zip(participants, keys)
    ]
    shared = Counter(keys)
    return [f"{key}-{index}" if shared[key] > 1 else key for index, key in enumerate(keys)]


def score_participants(
    participants: Iterable[Participant],
    duration_seconds: float,
    *,
    winning_team: TeamSide | int | None = None,
    victory_bonus: float = DEFAULT_VICTORY_BONUS,
) -> dict[str, ScoreBreakdown]:
    """Score every participant of one match.

    Args:
        participants: Up to ten participants of the match
        duration_seconds: Game length in seconds
        winning_team: Winner used for participants whose ``win`` is unknown
        victory_bonus: Points added for the winning side

    Returns:
        participant_key -> ScoreBreakdown, in collection order
    """
    roster = list(participants)
    # Team totals must exist before any individual score
    team_totals = build_team_totals(roster)

    return {
        key: calculate_breakdown(
            participant,
            team_totals.get(_team_of(participant), TeamTotals()),
            duration_seconds,
            won=_participant_won(participant, winning_team),
            victory_bonus=victory_bonus,
            key=key,
        )
        for key, participant in zip(participant_keys(roster), roster)
    }


def rank_scores(scores: Mapping[str, ScoreBreakdown]) -> dict[str, int]:
    """1-based rank by total, descending; ties keep mapping order."""
    ordered = sorted(scores.items(), key=lambda item: item[1].total, reverse=True)
    return {key: position for position, (key, _) in enumerate(ordered, start=1)}


def rank_participants(
    participants: Iterable[Participant],
    duration_seconds: float,
    *,
    winning_team: TeamSide | int | None = None,
    victory_bonus: float = DEFAULT_VICTORY_BONUS,
) -> dict[str, int]:
    """Score then rank all participants (1 = best)."""
    return rank_scores(
        score_participants(
            participants,
            duration_seconds,
            winning_team=winning_team,
            victory_bonus=victory_bonus,
        )
    )


def performance_tier(total: float) -> str:
    """Letter tier for a total score."""
    for tier, floor in TIER_THRESHOLDS:
        if total >= floor:
            return tier
    return LOWEST_TIER


def summarize_match(
    participants: Iterable[Participant],
    duration_seconds: float,
    *,
    winning_team: TeamSide | int | None = None,
    victory_bonus: float = DEFAULT_VICTORY_BONUS,
) -> MatchScoreSummary:
    """Full ranking with MVP, losing-side ACE and team averages."""
    roster = list(participants)
    scores = score_participants(
        roster,
        duration_seconds,
        winning_team=winning_team,
        victory_bonus=victory_bonus,
    )
    ranks = rank_scores(scores)
    rankings = [
        RankedParticipant(
            participant_key=key,
            rank=rank,
            total=scores[key].total,
            tier=performance_tier(scores[key].total),
        )
        for key, rank in sorted(ranks.items(), key=lambda item: item[1])
    ]

    team_scores: dict[int, list[float]] = {}
    for breakdown in scores.values():
        if breakdown.team_id is not None:
            team_scores.setdefault(breakdown.team_id, []).append(breakdown.total)
    team_averages = {
        team: round(np.mean(totals).item(), 2) for team, totals in sorted(team_scores.items())
    }

    mvp_key = rankings[0].participant_key if rankings else None
    # ACE: best of the losing side, only when a winner is known
    won = {
        key: _participant_won(participant, winning_team)
        for key, participant in zip(participant_keys(roster), roster)
    }
    ace_key = None
    if any(won.values()):
        ace_key = next((r.participant_key for r in rankings if not won[r.participant_key]), None)

    logger.debug(f"Scored {len(scores)} participants; mvp={mvp_key} ace={ace_key}")

    return MatchScoreSummary(
        duration_seconds=max(0.0, float(duration_seconds or 0)),
        rankings=rankings,
        breakdowns=scores,
        mvp_key=mvp_key,
        ace_key=ace_key,
        team_average_scores=team_averages,
    )
