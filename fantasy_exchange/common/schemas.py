# fantasy_exchange/common/schemas.py
"""
Typed records for the upstream payloads.

Sleeper and SportsData.io both return loosely-typed JSON where any field may
be missing, null, or a string.  Every payload passes through one of the
``normalize_*`` functions below exactly once, at the API boundary, so the
rest of the app works with NamedTuples whose defaults are already filled in.

Zero Streamlit imports.
"""

import math
from typing import Any, Dict, Iterable, List, NamedTuple, Optional


# =============================================================================
# PRIMITIVE COERCION
# =============================================================================

def safe_number(value: Any) -> float:
    """Coerce anything to a finite float, defaulting to 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(num) or math.isinf(num):
        return 0.0
    return num


def _optional_number(value: Any) -> Optional[float]:
    """Like ``safe_number`` but keeps "missing" distinct from zero."""
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return int(num) if num.is_integer() else num


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _id_list(values: Any) -> List[str]:
    """Sleeper id arrays may be null or contain nulls; ids are kept as strings."""
    if not isinstance(values, (list, tuple)):
        return []
    return [str(v) for v in values if v is not None and str(v) != ""]


# =============================================================================
# SLEEPER RECORDS
# =============================================================================

class PlayerInfo(NamedTuple):
    """One entry of the Sleeper player directory."""
    player_id: str
    full_name: str = ""
    first_name: str = ""
    last_name: str = ""
    position: str = ""
    team: str = ""
    rank_ecr: Optional[float] = None
    depth_chart_order: Optional[float] = None
    status: str = ""
    age: Optional[float] = None
    years_exp: Optional[float] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.player_id


class Roster(NamedTuple):
    """A team's roster.  The id lists are independent tags, not a partition."""
    roster_id: Optional[int]
    owner_id: Optional[str] = None
    players: List[str] = []
    starters: List[str] = []
    reserve: List[str] = []
    taxi: List[str] = []
    wins: int = 0
    losses: int = 0
    ties: int = 0
    fpts: float = 0.0


class LeagueUser(NamedTuple):
    user_id: str
    display_name: str = "Unknown"
    username: str = ""
    team_name: Optional[str] = None


class Matchup(NamedTuple):
    roster_id: Optional[int]
    matchup_id: Optional[int] = None
    points: Optional[float] = None


def normalize_player(player_id: Any, raw: Any) -> PlayerInfo:
    """Build a PlayerInfo from one value of the ``/players/nfl`` mapping."""
    if not isinstance(raw, dict):
        raw = {}
    first = _text(raw.get("first_name"))
    last = _text(raw.get("last_name"))
    full = _text(raw.get("full_name"))
    if not full and first and last:
        full = f"{first} {last}"
    return PlayerInfo(
        player_id=_text(player_id),
        full_name=full,
        first_name=first,
        last_name=last,
        position=_text(raw.get("position")).upper(),
        team=_text(raw.get("team")).upper(),
        rank_ecr=_optional_number(raw.get("rank_ecr")),
        depth_chart_order=_optional_number(raw.get("depth_chart_order")),
        status=_text(raw.get("status")),
        age=_optional_number(raw.get("age")),
        years_exp=_optional_number(raw.get("years_exp")),
    )


def normalize_players(raw: Any) -> Dict[str, PlayerInfo]:
    if not isinstance(raw, dict):
        return {}
    return {str(pid): normalize_player(pid, data) for pid, data in raw.items()}


def _roster_id(value: Any) -> Optional[int]:
    num = _optional_number(value)
    return int(num) if num is not None else None


def normalize_roster(raw: Any) -> Roster:
    if not isinstance(raw, dict):
        raw = {}
    settings = raw.get("settings") or {}
    if not isinstance(settings, dict):
        settings = {}
    # Sleeper splits season points into an integer part and hundredths
    fpts = safe_number(settings.get("fpts")) + safe_number(settings.get("fpts_decimal")) / 100
    owner = raw.get("owner_id")
    return Roster(
        roster_id=_roster_id(raw.get("roster_id")),
        owner_id=str(owner) if owner is not None else None,
        players=_id_list(raw.get("players")),
        starters=_id_list(raw.get("starters")),
        reserve=_id_list(raw.get("reserve")),
        taxi=_id_list(raw.get("taxi")),
        wins=int(safe_number(settings.get("wins"))),
        losses=int(safe_number(settings.get("losses"))),
        ties=int(safe_number(settings.get("ties"))),
        fpts=round(fpts, 2),
    )


def normalize_rosters(raw: Any) -> List[Roster]:
    if not isinstance(raw, list):
        return []
    return [normalize_roster(r) for r in raw]


def normalize_user(raw: Any) -> LeagueUser:
    if not isinstance(raw, dict):
        raw = {}
    metadata = raw.get("metadata") or {}
    if not isinstance(metadata, dict):
        metadata = {}
    team_name = _text(metadata.get("team_name")) or _text(metadata.get("team_name_update")) or None
    return LeagueUser(
        user_id=_text(raw.get("user_id")),
        display_name=_text(raw.get("display_name")) or "Unknown",
        username=_text(raw.get("username")),
        team_name=team_name,
    )


def normalize_users(raw: Any) -> List[LeagueUser]:
    if not isinstance(raw, list):
        return []
    return [normalize_user(u) for u in raw]


def normalize_matchup(raw: Any) -> Matchup:
    if not isinstance(raw, dict):
        raw = {}
    matchup_id = _optional_number(raw.get("matchup_id"))
    return Matchup(
        roster_id=_roster_id(raw.get("roster_id")),
        matchup_id=int(matchup_id) if matchup_id is not None else None,
        points=_optional_number(raw.get("points")),
    )


def normalize_matchups(raw: Any) -> List[Matchup]:
    if not isinstance(raw, list):
        return []
    return [normalize_matchup(m) for m in raw]


# =============================================================================
# STATISTICS RECORDS
# =============================================================================

class PassingStats(NamedTuple):
    yards: float = 0.0
    touchdowns: float = 0.0
    interceptions: float = 0.0
    completions: float = 0.0
    attempts: float = 0.0


class RushingStats(NamedTuple):
    yards: float = 0.0
    touchdowns: float = 0.0
    attempts: float = 0.0


class ReceivingStats(NamedTuple):
    receptions: float = 0.0
    yards: float = 0.0
    touchdowns: float = 0.0
    targets: float = 0.0


class SeasonStats(NamedTuple):
    """Season aggregates for one player, grouped by category."""
    passing: PassingStats = PassingStats()
    rushing: RushingStats = RushingStats()
    receiving: ReceivingStats = ReceivingStats()
    fumbles_lost: float = 0.0
    games_played: float = 0.0
    fantasy_points: float = 0.0
    raw: Dict[str, Any] = {}


class GameLogEntry(NamedTuple):
    week: int
    opponent: str = ""
    home_or_away: str = ""
    fantasy_points: float = 0.0
    stats: Dict[str, float] = {}


def _category(block: Any) -> Dict[str, Any]:
    return block if isinstance(block, dict) else {}


def _from_categories(stats: Dict[str, Any]) -> SeasonStats:
    """The nested shape: ``{"passes": {...}, "rushing": {...}, "receiving": {...}}``."""
    passes = _category(stats.get("passes") or stats.get("passing"))
    rushing = _category(stats.get("rushing"))
    receiving = _category(stats.get("receiving"))
    return SeasonStats(
        passing=PassingStats(
            yards=safe_number(passes.get("yards")),
            touchdowns=safe_number(passes.get("scored")),
            interceptions=safe_number(passes.get("interceptions")),
            completions=safe_number(passes.get("success")),
            attempts=safe_number(passes.get("total")),
        ),
        rushing=RushingStats(
            yards=safe_number(rushing.get("yards")),
            touchdowns=safe_number(rushing.get("scored")),
            attempts=safe_number(rushing.get("total")),
        ),
        receiving=ReceivingStats(
            receptions=safe_number(receiving.get("success")),
            yards=safe_number(receiving.get("yards")),
            touchdowns=safe_number(receiving.get("scored")),
            targets=safe_number(receiving.get("total")),
        ),
        fumbles_lost=safe_number(rushing.get("lost")) + safe_number(receiving.get("lost")),
        raw=stats,
    )


def _from_flat(row: Dict[str, Any]) -> SeasonStats:
    """The SportsData.io ``PlayerSeasonStatsByPlayerID`` shape."""
    return SeasonStats(
        passing=PassingStats(
            yards=safe_number(row.get("PassingYards")),
            touchdowns=safe_number(row.get("PassingTouchdowns")),
            interceptions=safe_number(row.get("PassingInterceptions")),
            completions=safe_number(row.get("PassingCompletions")),
            attempts=safe_number(row.get("PassingAttempts")),
        ),
        rushing=RushingStats(
            yards=safe_number(row.get("RushingYards")),
            touchdowns=safe_number(row.get("RushingTouchdowns")),
            attempts=safe_number(row.get("RushingAttempts")),
        ),
        receiving=ReceivingStats(
            receptions=safe_number(row.get("Receptions")),
            yards=safe_number(row.get("ReceivingYards")),
            touchdowns=safe_number(row.get("ReceivingTouchdowns")),
            targets=safe_number(row.get("ReceivingTargets")),
        ),
        fumbles_lost=safe_number(row.get("FumblesLost")),
        games_played=safe_number(row.get("Played")),
        fantasy_points=safe_number(row.get("FantasyPointsPPR") or row.get("FantasyPoints")),
        raw=row,
    )


def normalize_season_stats(payload: Any) -> Optional[SeasonStats]:
    """
    Normalize a season statistics payload.

    Accepts the flat SportsData.io row (or a list of rows, first one wins) and
    the nested ``{"statistics": [{"statistics": {...categories}}]}`` shape.

    Returns:
        SeasonStats, or None when the payload is absent or empty.
    """
    if isinstance(payload, list):
        payload = next((row for row in payload if isinstance(row, dict) and row), None)
    if not isinstance(payload, dict) or not payload:
        return None

    if "statistics" in payload:
        blocks = payload.get("statistics")
        if not isinstance(blocks, list) or not blocks:
            return None
        first = blocks[0] if isinstance(blocks[0], dict) else {}
        return _from_categories(_category(first.get("statistics")))

    return _from_flat(payload)


# Per-game fields surfaced on the stat sheet, in display order
GAME_LOG_FIELDS = [
    ("PassingYards", "Pass Yds"),
    ("PassingTouchdowns", "Pass TD"),
    ("PassingInterceptions", "INT"),
    ("RushingYards", "Rush Yds"),
    ("RushingTouchdowns", "Rush TD"),
    ("Receptions", "Rec"),
    ("ReceivingYards", "Rec Yds"),
    ("ReceivingTouchdowns", "Rec TD"),
    ("FumblesLost", "Fum Lost"),
]


def normalize_game_log(rows: Any) -> List[GameLogEntry]:
    """Normalize ``PlayerGameStatsByPlayerID`` rows, ordered by week."""
    if not isinstance(rows, Iterable) or isinstance(rows, (str, bytes, dict)):
        return []
    entries = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        week = _optional_number(row.get("Week"))
        if week is None:
            continue
        entries.append(GameLogEntry(
            week=int(week),
            opponent=_text(row.get("Opponent")),
            home_or_away=_text(row.get("HomeOrAway")),
            fantasy_points=safe_number(row.get("FantasyPointsPPR") or row.get("FantasyPoints")),
            stats={label: safe_number(row.get(field)) for field, label in GAME_LOG_FIELDS},
        ))
    return sorted(entries, key=lambda e: e.week)
