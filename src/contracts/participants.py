"""
Participant data contracts for the three upstream feeds.

- Participant: finished-match box score (Match-V5 ``info.participants[]``),
  also used for spectator/champion-select lobby rows.
- LiveParticipant: one entry of the live client ``allPlayers`` snapshot.
- ActivePlayer: the live client's ``activePlayer`` record (local player).
"""

from typing import Any

from pydantic import AliasChoices, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

from .common import FeedContract, TeamSide

LIVE_ITEM_SLOTS = 7
# Match-V5 gives every bot this placeholder PUUID
BOT_PUUID = "BOT"


def _first_present(data: dict[str, Any], *keys: str) -> Any:
    """Return the first non-empty value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


class PerkSelection(FeedContract):
    """Rune/Perk selection for a participant.

    Accepts the Match-V5 shape (``styles[].selections[].perk``) as well as
    the spectator shape (``perkIds``, ``perkStyle``, ``perkSubStyle``).
    """

    primary_style: int | None = Field(
        None, validation_alias=AliasChoices("perkStyle", "primaryStyle", "primary_style")
    )
    perk_ids: list[int] = Field(
        default_factory=list, validation_alias=AliasChoices("perkIds", "perk_ids")
    )
    sub_style: int | None = Field(
        None, validation_alias=AliasChoices("perkSubStyle", "subStyle", "sub_style")
    )

    @model_validator(mode="before")
    @classmethod
    def _flatten_match_v5_styles(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "styles" not in data:
            return data

        styles = [s for s in (data.get("styles") or []) if isinstance(s, dict)]
        primary = next(
            (s for s in styles if s.get("description") == "primaryStyle"),
            styles[0] if styles else {},
        )
        secondary = next(
            (s for s in styles if s.get("description") == "subStyle"),
            styles[1] if len(styles) > 1 else {},
        )
        perk_ids = [
            sel["perk"]
            for sel in primary.get("selections") or []
            if isinstance(sel, dict) and isinstance(sel.get("perk"), int)
        ]
        return {
            "primary_style": primary.get("style"),
            "perk_ids": perk_ids,
            "sub_style": secondary.get("style"),
        }

    @property
    def keystone_id(self) -> int | None:
        """First primary-tree selection, if it is a real perk ID."""
        if self.perk_ids and self.perk_ids[0] > 0:
            return self.perk_ids[0]
        return None


class Participant(FeedContract):
    """Participant (player) record from a finished match or lobby feed."""

    # Identity
    team_id: TeamSide | None = Field(None, description="100 (blue) or 200 (red)")
    team_position: str | None = Field(None, description="Declared position, if any")
    summoner_name: str = Field("", description="Legacy display name")
    riot_id_game_name: str | None = Field(None, description="Riot ID game name (before #)")
    riot_id_tagline: str | None = Field(None, description="Riot ID tag line (after #)")
    puuid: str | None = Field(None, description="Stable player identifier")

    # Champion
    champion_name: str = Field("", description="Champion internal name, e.g. 'MonkeyKing'")
    champion_id: int | None = Field(None, ge=0)

    # Box score
    kills: int = Field(0, ge=0)
    deaths: int = Field(0, ge=0)
    assists: int = Field(0, ge=0)
    gold_earned: int = Field(0, ge=0)
    total_damage_dealt_to_champions: int = Field(0, ge=0)
    vision_score: int = Field(0, ge=0)
    total_minions_killed: int = Field(0, ge=0, description="Lane minions")
    neutral_minions_killed: int = Field(0, ge=0, description="Jungle/neutral minions")
    objectives_stolen: int = Field(0, ge=0)

    # Loadout
    summoner1_id: int | None = Field(None, description="First summoner spell")
    summoner2_id: int | None = Field(None, description="Second summoner spell")
    perks: PerkSelection | None = None

    win: bool | None = Field(None, description="None when the feed omits the result")

    @model_validator(mode="before")
    @classmethod
    def _normalize_feed_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        # ARAM and lobby rows leave teamPosition blank; fall back to other position keys
        if _first_present(data, "teamPosition", "team_position") is None:
            fallback = _first_present(data, "position", "individualPosition", "lane")
            data.pop("teamPosition", None)
            data["team_position"] = fallback
        if "spell1Id" in data and "summoner1Id" not in data:
            data["summoner1_id"] = data["spell1Id"]
        if "spell2Id" in data and "summoner2Id" not in data:
            data["summoner2_id"] = data["spell2Id"]
        # Box-score counters occasionally arrive as null
        for key, value in list(data.items()):
            if value is None and key in _COUNTER_KEYS:
                data[key] = 0
        return data

    @property
    def display_name(self) -> str:
        """Riot ID game name when present, legacy summoner name otherwise."""
        return self.riot_id_game_name or self.summoner_name

    @property
    def spell_ids(self) -> tuple[int, ...]:
        return tuple(s for s in (self.summoner1_id, self.summoner2_id) if s is not None)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def participant_key(self) -> str:
        """Stable key used by scoring and ranking maps.

        Bots all share the ``BOT`` PUUID, so they are keyed like anonymous players.
        """
        if self.puuid and self.puuid != BOT_PUUID:
            return self.puuid
        return self.fallback_key

    @property
    def fallback_key(self) -> str:
        team = int(self.team_id) if self.team_id is not None else 0
        label = self.display_name or self.champion_name or "player"
        return f"{team}-{label}"

    @property
    def total_cs(self) -> int:
        return self.total_minions_killed + self.neutral_minions_killed


_COUNTER_KEYS = frozenset(
    name
    for field_name in (
        "kills",
        "deaths",
        "assists",
        "gold_earned",
        "total_damage_dealt_to_champions",
        "vision_score",
        "total_minions_killed",
        "neutral_minions_killed",
        "objectives_stolen",
    )
    for name in (field_name, to_camel(field_name))
)


class LiveParticipant(FeedContract):
    """One player of a live client ``allPlayers`` snapshot.

    Recreated on every poll; there is no identity continuity between polls.
    """

    team: TeamSide | None = None
    summoner_name: str = ""
    riot_id: str | None = Field(None, description="Full 'Name#TAG' identity")
    riot_id_game_name: str | None = None
    puuid: str | None = None
    champion_name: str = ""
    raw_champion_name: str | None = None

    kills: int = Field(0, ge=0)
    deaths: int = Field(0, ge=0)
    assists: int = Field(0, ge=0)
    creep_score: int = Field(0, ge=0)
    ward_score: float = Field(0.0, ge=0)
    current_gold: float | None = Field(None, ge=0)
    level: int = Field(1, ge=0)
    is_dead: bool = False
    respawn_timer: float = Field(0.0, ge=0)

    # Raw client item entries: objects with a slot index or bare item IDs
    items: list[Any] = Field(default_factory=list)
    # Filled in by the live match resolver, LIVE_ITEM_SLOTS long once reconciled
    item_slots: tuple[int, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _flatten_client_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        team_marker = _first_present(data, "team", "teamId", "team_id")
        data.pop("teamId", None)
        data.pop("team_id", None)
        data["team"] = TeamSide.coerce(team_marker) if team_marker is not None else None

        scores = data.pop("scores", None)
        if isinstance(scores, dict):
            for key in ("kills", "deaths", "assists", "creepScore", "wardScore"):
                if key in scores and key not in data:
                    data[key] = scores[key]
        if data.get("items") is None:
            data["items"] = []
        return data


class ActivePlayer(FeedContract):
    """Live client ``activePlayer`` record; its gold figure is exact."""

    summoner_name: str = ""
    riot_id: str | None = None
    riot_id_game_name: str | None = None
    current_gold: float | None = Field(None, ge=0)
    level: int = Field(1, ge=0)
