"""Unit tests for the match performance scorer.

Test Coverage Strategy:
1. Happy Path: a small two-team match with hand-computed breakdowns
2. Boundary Conditions: zero team totals, zero duration, the 120 cap
3. Adjustment rules: each named rule fires on its own
4. Ranking: stable ties, determinism, MVP/ACE selection

CRITICAL: Tests validate PURE domain logic only.
"""

import pytest
from pydantic import ValidationError

from src.contracts.common import TeamSide
from src.contracts.participants import Participant
from src.core.scoring.calculator import (
    build_team_totals,
    participant_keys,
    performance_tier,
    rank_participants,
    score_participants,
    summarize_match,
)
from src.core.scoring.models import ScoreBreakdown
from src.core.scoring.rules import COMPONENTS, MAX_TOTAL

THIRTY_MINUTES = 1800


def create_participant(name: str, team: int = 100, **stats) -> Participant:
    payload = {
        "puuid": name,
        "summonerName": name,
        "teamId": team,
        "championName": "Annie",
    }
    payload.update(stats)
    return Participant.model_validate(payload)


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def small_match() -> list[Participant]:
    """Two blue players who won and one red player who lost."""
    return [
        create_participant(
            "carry",
            kills=6,
            deaths=2,
            assists=4,
            totalDamageDealtToChampions=20000,
            goldEarned=12000,
            visionScore=30,
            totalMinionsKilled=200,
            neutralMinionsKilled=10,
            win=True,
        ),
        create_participant(
            "support",
            kills=2,
            deaths=4,
            assists=8,
            totalDamageDealtToChampions=10000,
            goldEarned=8000,
            visionScore=60,
            totalMinionsKilled=30,
            win=True,
        ),
        create_participant(
            "loser",
            team=200,
            kills=3,
            deaths=8,
            totalDamageDealtToChampions=15000,
            goldEarned=9000,
            visionScore=15,
            totalMinionsKilled=150,
            win=False,
        ),
    ]


# ============================================================================
# Component weights
# ============================================================================


def test_component_weights_sum_to_100() -> None:
    assert sum(c.weight for c in COMPONENTS) == 100


def test_team_totals(small_match) -> None:
    totals = build_team_totals(small_match)

    assert totals[100].kills == 8
    assert totals[100].damage == 30000
    assert totals[100].gold == 20000
    assert totals[200].kills == 3


# ============================================================================
# Happy Path
# ============================================================================


class TestScoreParticipants:
    def test_carry_breakdown(self, small_match) -> None:
        scores = score_participants(small_match, THIRTY_MINUTES)
        carry = scores["carry"]

        assert carry.damage_share == 26.0  # 67% share, capped
        assert carry.kill_participation == 21.0  # 125% capped at 100%
        assert carry.kda == 15.0  # KDA 5.0 of 6.0
        assert carry.gold_share == 13.0
        assert carry.farm == 10.5  # 7 CS/min of 8
        assert carry.vision == 5.0  # 1 per min of 2
        assert carry.victory_bonus == 10.0
        assert carry.adjustments == ()
        assert carry.total == pytest.approx(100.5)

    def test_support_breakdown(self, small_match) -> None:
        support = score_participants(small_match, THIRTY_MINUTES)["support"]

        assert support.damage_share == pytest.approx(24.76)
        assert support.kda == pytest.approx(7.5)
        assert support.farm == pytest.approx(1.5)
        assert support.vision == 10.0
        assert support.total == pytest.approx(87.76)

    def test_losing_side_gets_no_bonus(self, small_match) -> None:
        loser = score_participants(small_match, THIRTY_MINUTES)["loser"]

        assert loser.victory_bonus == 0.0
        assert loser.total == pytest.approx(71.12, abs=0.02)

    def test_winning_team_used_when_win_flag_missing(self) -> None:
        players = [
            create_participant("blue", kills=1),
            create_participant("red", team=200, kills=1),
        ]

        scores = score_participants(players, THIRTY_MINUTES, winning_team=TeamSide.BLUE)

        assert scores["blue"].victory_bonus == 10.0
        assert scores["red"].victory_bonus == 0.0

    def test_custom_victory_bonus(self) -> None:
        scores = score_participants(
            [create_participant("solo", win=True)], THIRTY_MINUTES, victory_bonus=5
        )
        assert scores["solo"].total == 5.0

    def test_deterministic(self, small_match) -> None:
        first = score_participants(small_match, THIRTY_MINUTES)
        second = score_participants(small_match, THIRTY_MINUTES)
        assert first == second


# ============================================================================
# Boundary Conditions
# ============================================================================


class TestBoundaries:
    def test_zero_team_totals_give_zero_components(self) -> None:
        players = [create_participant(f"p{i}") for i in range(5)]

        scores = score_participants(players, THIRTY_MINUTES)

        for breakdown in scores.values():
            assert breakdown.kill_participation == 0.0
            assert breakdown.damage_share == 0.0
            assert breakdown.gold_share == 0.0
            assert breakdown.total == 0.0

    def test_zero_duration_treated_as_one_minute(self) -> None:
        breakdown = score_participants(
            [create_participant("p", totalMinionsKilled=4)], 0
        )["p"]

        assert breakdown.cs_per_min == 4.0
        assert "short_game" not in breakdown.adjustments

    def test_total_capped_at_120(self) -> None:
        monster = create_participant(
            "monster",
            kills=20,
            deaths=0,
            assists=10,
            totalDamageDealtToChampions=80000,
            goldEarned=25000,
            visionScore=120,
            totalMinionsKilled=400,
            objectivesStolen=2,
            win=True,
        )

        breakdown = score_participants([monster], THIRTY_MINUTES, victory_bonus=20)["monster"]

        assert breakdown.components_total == 100.0
        assert breakdown.total == MAX_TOTAL

    def test_total_never_negative(self) -> None:
        feeder = create_participant("feeder", deaths=15)
        breakdown = score_participants([feeder], 600)["feeder"]

        assert breakdown.penalty > 0
        assert breakdown.total == 0.0

    def test_model_rejects_out_of_range_total(self) -> None:
        with pytest.raises(ValidationError):
            ScoreBreakdown(
                participant_key="x",
                damage_share=0,
                kill_participation=0,
                kda=0,
                gold_share=0,
                farm=0,
                vision=0,
                total=130,
                raw_kda=0,
                raw_kill_participation=0,
                cs_per_min=0,
                vision_per_min=0,
            )

    def test_colliding_keys_are_all_scored(self) -> None:
        players = [create_participant("same", kills=1), create_participant("same", kills=2)]

        scores = score_participants(players, THIRTY_MINUTES)

        assert list(scores) == ["100-same-0", "100-same-1"]
        assert scores["100-same-1"].participant_key == "100-same-1"


class TestBotMatch:
    @pytest.fixture
    def bot_match(self) -> list[Participant]:
        humans = [create_participant(f"human{i}", kills=i + 1, win=True) for i in range(5)]
        bots = [
            Participant.model_validate(
                {
                    "puuid": "BOT",
                    "summonerName": name,
                    "teamId": 200,
                    "championName": name,
                    "deaths": 3,
                    "win": False,
                }
            )
            for name in ("Annie", "Garen", "Ashe", "Annie", "Nunu")
        ]
        return humans + bots

    def test_every_participant_scored_and_ranked(self, bot_match) -> None:
        scores = score_participants(bot_match, THIRTY_MINUTES)
        ranks = rank_participants(bot_match, THIRTY_MINUTES)

        assert len(scores) == 10
        assert sorted(ranks.values()) == list(range(1, 11))

    def test_bot_keys_fall_back_to_team_and_name(self, bot_match) -> None:
        keys = participant_keys(bot_match)

        assert keys[5:] == ["200-Annie-5", "200-Garen", "200-Ashe", "200-Annie-8", "200-Nunu"]
        assert len(set(keys)) == 10

    def test_summary_covers_all_ten(self, bot_match) -> None:
        summary = summarize_match(bot_match, THIRTY_MINUTES)

        assert len(summary.rankings) == 10
        assert summary.ace_key in participant_keys(bot_match)[5:]


# ============================================================================
# Adjustment rules
# ============================================================================


class TestAdjustments:
    def test_deathless(self) -> None:
        breakdown = score_participants([create_participant("p", kills=1)], THIRTY_MINUTES)["p"]

        assert breakdown.adjustments == ("deathless",)
        assert breakdown.penalty == -3.0
        assert breakdown.total == pytest.approx(breakdown.components_total + 3)

    def test_objective_steal_is_capped(self) -> None:
        breakdown = score_participants(
            [create_participant("p", deaths=1, objectivesStolen=5)], THIRTY_MINUTES
        )["p"]

        assert breakdown.adjustments == ("objective_steal",)
        assert breakdown.penalty == -2.0

    def test_heavy_feeding(self) -> None:
        breakdown = score_participants(
            [create_participant("p", kills=1, deaths=10, assists=2)], THIRTY_MINUTES
        )["p"]

        assert breakdown.adjustments == ("heavy_feeding",)
        assert breakdown.penalty == 4.0

    def test_short_game(self) -> None:
        breakdown = score_participants(
            [create_participant("p", deaths=1, win=True)], 600
        )["p"]

        assert breakdown.adjustments == ("short_game",)
        assert breakdown.total == pytest.approx(7.0)


# ============================================================================
# Ranking
# ============================================================================


class TestRanking:
    def test_rank_order(self, small_match) -> None:
        assert rank_participants(small_match, THIRTY_MINUTES) == {
            "carry": 1,
            "support": 2,
            "loser": 3,
        }

    def test_ties_keep_collection_order(self) -> None:
        twins = [
            create_participant(name, kills=2, deaths=1, totalDamageDealtToChampions=1000)
            for name in ("first", "second", "third")
        ]

        ranks = rank_participants(twins, THIRTY_MINUTES)

        assert ranks == {"first": 1, "second": 2, "third": 3}

    def test_summary(self, small_match) -> None:
        summary = summarize_match(small_match, THIRTY_MINUTES)

        assert [r.participant_key for r in summary.rankings] == ["carry", "support", "loser"]
        assert [r.rank for r in summary.rankings] == [1, 2, 3]
        assert [r.tier for r in summary.rankings] == ["S", "A", "B"]
        assert summary.mvp_key == "carry"
        assert summary.ace_key == "loser"
        assert summary.team_average_scores[100] == pytest.approx(94.13)
        assert set(summary.team_average_scores) == {100, 200}

    def test_no_ace_without_known_winner(self) -> None:
        players = [create_participant("a", kills=1), create_participant("b", team=200)]

        summary = summarize_match(players, THIRTY_MINUTES)

        assert summary.mvp_key == "a"
        assert summary.ace_key is None

    def test_ace_reported_without_victory_bonus(self, small_match) -> None:
        summary = summarize_match(small_match, THIRTY_MINUTES, victory_bonus=0)

        assert summary.ace_key == "loser"
        assert all(b.victory_bonus == 0 for b in summary.breakdowns.values())

    def test_ace_from_winning_team_without_win_flags(self) -> None:
        players = [create_participant("a", kills=3), create_participant("b", team=200, kills=1)]

        summary = summarize_match(players, THIRTY_MINUTES, winning_team=TeamSide.BLUE, victory_bonus=0)

        assert summary.ace_key == "b"

    def test_empty_match(self) -> None:
        summary = summarize_match([], THIRTY_MINUTES)

        assert summary.rankings == []
        assert summary.mvp_key is None


@pytest.mark.parametrize(
    ("total", "tier"),
    [(120, "S"), (90, "S"), (89.99, "A"), (75, "A"), (60, "B"), (45, "C"), (44.99, "D"), (0, "D")],
)
def test_performance_tier(total: float, tier: str) -> None:
    assert performance_tier(total) == tier
