"""
Text & Number Formatting.

Shared display helpers for stat labels, stat values and player labels used
across the league pages.
"""

import math
import re
from typing import Any, Dict, List, Optional, Tuple

from fantasy_exchange.common.schemas import PlayerInfo, SeasonStats

MISSING = "-"

# Raw payload keys that identify a row instead of describing play
_ID_KEYS = {
    "StatID", "TeamID", "PlayerID", "SeasonType", "Season", "GlobalTeamID",
    "ScoringDetails", "Updated", "Created",
}


def format_stat(value: Any) -> str:
    """
    Whole numbers print without decimals, other floats with two.

    Examples:
        12.0 -> "12"
        4.567 -> "4.57"
        None -> "-"
    """
    if value is None or isinstance(value, bool):
        return MISSING if value is None else str(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return MISSING
        if float(value).is_integer():
            return str(int(value))
        return f"{value:.2f}"
    return str(value)


def humanize_key(key: str) -> str:
    """
    Turn an API field name into a column label.

    Examples:
        "passing_yards" -> "Passing Yards"
        "ReceivingTargets" -> "Receiving Targets"
    """
    s = str(key).replace("_", " ")
    s = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", s)
    return " ".join(word[:1].upper() + word[1:] for word in s.split())


def player_label(info: Optional[PlayerInfo], player_id: str = "") -> str:
    """"Name (POS - TEAM)" for pickers; falls back to the raw id."""
    if info is None:
        return player_id
    pos = info.position or "?"
    team = info.team or "FA"
    return f"{info.display_name} ({pos} - {team})"


def season_stat_items(stats: Optional[SeasonStats]) -> List[Tuple[str, float]]:
    """The headline season numbers, grouped passing / rushing / receiving."""
    if stats is None:
        return []
    p, r, rec = stats.passing, stats.rushing, stats.receiving
    items = [
        ("Games Played", stats.games_played),
        ("Fantasy Points", stats.fantasy_points),
        ("Pass Yds", p.yards),
        ("Pass TD", p.touchdowns),
        ("INT", p.interceptions),
        ("Cmp / Att", f"{format_stat(p.completions)} / {format_stat(p.attempts)}"),
        ("Rush Att", r.attempts),
        ("Rush Yds", r.yards),
        ("Rush TD", r.touchdowns),
        ("Targets", rec.targets),
        ("Rec", rec.receptions),
        ("Rec Yds", rec.yards),
        ("Rec TD", rec.touchdowns),
        ("Fum Lost", stats.fumbles_lost),
    ]
    return items


def raw_stat_items(raw: Optional[Dict[str, Any]]) -> List[Tuple[str, Any]]:
    """
    Every numeric field of a stats payload, labelled.

    Nested category blocks ({"rushing": {"yards": ...}}) are flattened with the
    category as prefix.
    """
    if not isinstance(raw, dict):
        return []
    items = []
    for key, value in raw.items():
        if key in _ID_KEYS:
            continue
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                if isinstance(sub_value, (int, float)) and not isinstance(sub_value, bool):
                    items.append((f"{humanize_key(key)} {humanize_key(sub_key)}", sub_value))
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            items.append((humanize_key(key), value))
    return items
