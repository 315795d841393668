#!/usr/bin/env python3
"""Score a finished match from a Match-V5 JSON dump.

Prints the role assignment of both teams and the ranked performance table.

Usage:
    # Score a saved match
    python scripts/score_match.py match.json

    # Also reconcile against a live client snapshot (liveclientdata/allgamedata)
    python scripts/score_match.py match.json --live allgamedata.json

    # Resolve keystone names through the perk asset catalog
    python scripts/score_match.py match.json --runes
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError  # noqa: E402

from src.config.settings import get_settings  # noqa: E402
from src.contracts.common import TeamSide  # noqa: E402
from src.contracts.participants import ActivePlayer, LiveParticipant, Participant  # noqa: E402
from src.core.domain.role_assigner import assign_match_roles  # noqa: E402
from src.core.scoring.calculator import participant_keys, summarize_match  # noqa: E402
from src.core.services.asset_request_coalescer import get_asset_coalescer  # noqa: E402
from src.core.services.live_match_resolver import resolve_live_participant  # noqa: E402


def print_section(title: str, symbol: str = "=") -> None:
    """Print a formatted section header."""
    print(f"\n{symbol * 60}")
    print(f"{title}")
    print(f"{symbol * 60}")


def load_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def winning_team(info: dict[str, Any]) -> TeamSide | None:
    for team in info.get("teams") or []:
        if isinstance(team, dict) and team.get("win") is True:
            return TeamSide.coerce(team.get("teamId"))
    return None


def print_roles(participants: list[Participant]) -> None:
    print_section("ROLES")
    for side, roles in assign_match_roles(participants).items():
        print(f"{side.name}:")
        for role, participant in roles.items():
            print(f"  {role.value:<8} {participant.display_name or '?':<20} {participant.champion_name}")


def print_rankings(participants: list[Participant], duration: float, winner: TeamSide | None) -> None:
    settings = get_settings()
    summary = summarize_match(
        participants,
        duration,
        winning_team=winner,
        victory_bonus=settings.scoring_victory_bonus,
    )
    names = {
        key: p.display_name or p.champion_name
        for key, p in zip(participant_keys(participants), participants)
    }

    print_section("RANKING")
    for row in summary.rankings:
        breakdown = summary.breakdowns[row.participant_key]
        marker = ""
        if row.participant_key == summary.mvp_key:
            marker = " MVP"
        elif row.participant_key == summary.ace_key:
            marker = " ACE"
        print(
            f"#{row.rank:<2} {names[row.participant_key]:<20} "
            f"{row.total:6.2f} [{row.tier}] "
            f"kda={breakdown.raw_kda:.2f} kp={breakdown.raw_kill_participation:.0%}{marker}"
        )
        if breakdown.adjustments:
            print(f"     adjustments: {', '.join(breakdown.adjustments)}")

    for team, average in summary.team_average_scores.items():
        print(f"Team {team} average: {average:.2f}")


def print_live(participants: list[Participant], snapshot: Any) -> None:
    if not isinstance(snapshot, dict):
        raise ValueError(f"expected a JSON object, got {type(snapshot).__name__}")
    roster = [LiveParticipant.model_validate(p) for p in snapshot.get("allPlayers") or []]
    raw_active = snapshot.get("activePlayer")
    active = ActivePlayer.model_validate(raw_active) if isinstance(raw_active, dict) else None

    print_section("LIVE MATCH", "-")
    for participant in participants:
        live = resolve_live_participant(participant, roster, active_player=active)
        label = participant.display_name or participant.champion_name
        if live is None:
            print(f"  {label:<20} (no live match)")
            continue
        gold = f"{live.current_gold:.0f}" if live.current_gold is not None else "-"
        print(f"  {label:<20} -> {live.riot_id or live.summoner_name} gold={gold} items={list(live.item_slots)}")


async def print_keystones(participants: list[Participant]) -> None:
    keys = participant_keys(participants)
    keystones = {
        key: p.perks.keystone_id
        for key, p in zip(keys, participants)
        if p.perks is not None and p.perks.keystone_id is not None
    }
    coalescer = get_asset_coalescer()
    try:
        assets = await coalescer.get(keystones.values())
    finally:
        await coalescer.close()

    print_section("KEYSTONES", "-")
    for key, participant in zip(keys, participants):
        perk_id = keystones.get(key)
        asset = assets.get(perk_id) if perk_id is not None else None
        label = participant.display_name or participant.champion_name
        print(f"  {label:<20} {asset.name if asset else '-'}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Score a Match-V5 match JSON")
    parser.add_argument("match", type=Path, help="Match-V5 match JSON file")
    parser.add_argument("--live", type=Path, help="Live client allgamedata JSON snapshot")
    parser.add_argument("--runes", action="store_true", help="Resolve keystone names")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else get_settings().app_log_level)

    try:
        payload = load_json(args.match)
    except (OSError, json.JSONDecodeError) as e:
        print(f"❌ Cannot read {args.match}: {e}")
        return 1

    info = payload.get("info", payload) if isinstance(payload, dict) else {}
    try:
        participants = [Participant.model_validate(p) for p in info.get("participants") or []]
    except ValidationError as e:
        print(f"❌ Invalid participant data:\n{e}")
        return 1

    if not participants:
        print("❌ No participants found")
        return 1

    duration = float(info.get("gameDuration") or 0)
    # Matches before patch 11.20 report gameDuration in milliseconds
    if "gameEndTimestamp" not in info:
        duration /= 1000
    print_roles(participants)
    print_rankings(participants, duration, winning_team(info))

    if args.live:
        try:
            print_live(participants, load_json(args.live))
        except (OSError, ValueError) as e:
            print(f"❌ Cannot use live snapshot {args.live}: {e}")
            return 1

    if args.runes:
        asyncio.run(print_keystones(participants))

    return 0


if __name__ == "__main__":
    sys.exit(main())
