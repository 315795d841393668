"""Match performance scoring.

Six weighted components (weights sum to 100):
1. Damage share (26)
2. Kill participation (21)
3. KDA / survival (18)
4. Gold share (13)
5. Farm rate (12)
6. Vision (10)

plus a victory bonus and small named adjustments; totals are capped at 120.
"""

from src.core.scoring.calculator import (
    build_team_totals,
    calculate_breakdown,
    participant_keys,
    performance_tier,
    rank_participants,
    rank_scores,
    score_participants,
    summarize_match,
)
from src.core.scoring.models import MatchScoreSummary, RankedParticipant, ScoreBreakdown

__all__ = [
    "MatchScoreSummary",
    "RankedParticipant",
    "ScoreBreakdown",
    "build_team_totals",
    "calculate_breakdown",
    "participant_keys",
    "performance_tier",
    "rank_participants",
    "rank_scores",
    "score_participants",
    "summarize_match",
]
