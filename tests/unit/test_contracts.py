"""Unit tests for feed contracts (Match-V5, spectator and live client shapes)."""

import pytest
from pydantic import ValidationError

from src.contracts import (
    ActivePlayer,
    LiveParticipant,
    Participant,
    PerkAsset,
    PerkSelection,
    TeamSide,
)

MATCH_V5_PARTICIPANT = {
    "puuid": "puuid-faker",
    "teamId": 100,
    "teamPosition": "MIDDLE",
    "summonerName": "Hide on bush",
    "riotIdGameName": "Faker",
    "riotIdTagline": "KR1",
    "championName": "Ahri",
    "championId": 103,
    "kills": 7,
    "deaths": 1,
    "assists": 9,
    "goldEarned": 13200,
    "totalDamageDealtToChampions": 28000,
    "visionScore": 31,
    "totalMinionsKilled": 250,
    "neutralMinionsKilled": 12,
    "objectivesStolen": 0,
    "summoner1Id": 4,
    "summoner2Id": 14,
    "win": True,
    "perks": {
        "statPerks": {"defense": 5002, "flex": 5008, "offense": 5005},
        "styles": [
            {
                "description": "primaryStyle",
                "style": 8100,
                "selections": [
                    {"perk": 8112, "var1": 0},
                    {"perk": 8139},
                    {"perk": 8138},
                    {"perk": 8135},
                ],
            },
            {
                "description": "subStyle",
                "style": 8200,
                "selections": [{"perk": 8226}, {"perk": 8210}],
            },
        ],
    },
    "someNewRiotField": {"ignored": True},
}


class TestParticipant:
    def test_match_v5_payload(self) -> None:
        participant = Participant.model_validate(MATCH_V5_PARTICIPANT)

        assert participant.team_id is TeamSide.BLUE
        assert participant.team_position == "MIDDLE"
        assert participant.display_name == "Faker"
        assert participant.total_cs == 262
        assert participant.spell_ids == (4, 14)
        assert participant.participant_key == "puuid-faker"
        assert participant.perks is not None
        assert participant.perks.primary_style == 8100
        assert participant.perks.sub_style == 8200
        assert participant.perks.keystone_id == 8112

    def test_position_fallback_keys(self) -> None:
        participant = Participant.model_validate(
            {"teamId": 200, "teamPosition": "", "individualPosition": "JUNGLE"}
        )
        assert participant.team_position == "JUNGLE"

    def test_spectator_spell_keys(self) -> None:
        participant = Participant.model_validate({"teamId": 100, "spell1Id": 11, "spell2Id": 4})
        assert participant.spell_ids == (11, 4)

    def test_null_counters_become_zero(self) -> None:
        participant = Participant.model_validate({"teamId": 100, "kills": None, "visionScore": None})

        assert participant.kills == 0
        assert participant.vision_score == 0

    def test_negative_counter_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Participant.model_validate({"teamId": 100, "deaths": -1})

    def test_fallback_participant_key(self) -> None:
        by_name = Participant.model_validate({"teamId": 200, "summonerName": "Chovy"})
        by_champion = Participant.model_validate({"teamId": 100, "championName": "Azir"})
        anonymous = Participant.model_validate({})

        assert by_name.participant_key == "200-Chovy"
        assert by_champion.participant_key == "100-Azir"
        assert anonymous.participant_key == "0-player"

    def test_bot_puuid_is_not_a_key(self) -> None:
        bot = Participant.model_validate({"puuid": "BOT", "teamId": 200, "summonerName": "Annie Bot"})
        assert bot.participant_key == "200-Annie Bot"

    def test_records_are_immutable(self) -> None:
        participant = Participant.model_validate(MATCH_V5_PARTICIPANT)
        with pytest.raises(ValidationError):
            participant.kills = 99

    def test_snake_case_names_accepted(self) -> None:
        participant = Participant(team_id=200, champion_name="Azir", gold_earned=100)
        assert participant.gold_earned == 100


class TestPerkSelection:
    def test_spectator_shape(self) -> None:
        perks = PerkSelection.model_validate(
            {"perkIds": [8010, 9111, 9104, 8299], "perkStyle": 8000, "perkSubStyle": 8400}
        )

        assert perks.keystone_id == 8010
        assert perks.primary_style == 8000
        assert perks.sub_style == 8400

    def test_empty_selection_has_no_keystone(self) -> None:
        assert PerkSelection.model_validate({}).keystone_id is None
        assert PerkSelection.model_validate({"perkIds": [0]}).keystone_id is None


class TestLiveParticipant:
    def test_live_client_payload(self) -> None:
        live = LiveParticipant.model_validate(
            {
                "championName": "Wukong",
                "rawChampionName": "game_character_displayname_MonkeyKing",
                "isDead": False,
                "items": [{"itemID": 1055, "slot": 0, "count": 1}],
                "level": 11,
                "riotId": "Faker#KR1",
                "riotIdGameName": "Faker",
                "scores": {"kills": 3, "deaths": 1, "assists": 4, "creepScore": 120, "wardScore": 8.5},
                "summonerName": "Faker#KR1",
                "team": "CHAOS",
            }
        )

        assert live.team is TeamSide.RED
        assert live.kills == 3
        assert live.creep_score == 120
        assert live.ward_score == 8.5
        assert live.level == 11
        assert live.items[0]["itemID"] == 1055
        assert live.item_slots == ()

    def test_null_items(self) -> None:
        assert LiveParticipant.model_validate({"items": None}).items == []

    def test_numeric_team(self) -> None:
        assert LiveParticipant.model_validate({"teamId": 100}).team is TeamSide.BLUE


class TestTeamSide:
    @pytest.mark.parametrize(
        ("marker", "expected"),
        [
            ("ORDER", TeamSide.BLUE),
            ("chaos", TeamSide.RED),
            (100, TeamSide.BLUE),
            ("200", TeamSide.RED),
            ("PURPLE", None),
            (300, None),
            (None, None),
        ],
    )
    def test_coerce(self, marker, expected) -> None:
        assert TeamSide.coerce(marker) is expected


def test_active_player() -> None:
    active = ActivePlayer.model_validate(
        {"riotId": "Faker#KR1", "currentGold": 1500.25, "level": 9, "championStats": {}}
    )

    assert active.current_gold == 1500.25
    assert active.riot_id == "Faker#KR1"


def test_perk_asset_rejects_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        PerkAsset(icon="https://x/y.png", name="Electrocute", extra="nope")
