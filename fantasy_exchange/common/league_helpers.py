# fantasy_exchange/common/league_helpers.py
"""
Shared helpers for the league pages.

Provides:
- Owner lookup: roster_id -> manager / team name
- Roster sections: starters, bench, injured reserve, taxi squad
- Standings: wins first, then points for
- Schedule: my opponent and result for every week
"""

from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional

import pandas as pd

import config
from fantasy_exchange.common.schemas import LeagueUser, Matchup, Roster


class OwnerInfo(NamedTuple):
    display_name: str
    username: str = ""
    team_name: Optional[str] = None


class RosterSections(NamedTuple):
    starters: List[str]
    bench: List[str]
    reserve: List[str]
    taxi: List[str]


def build_owner_map(users: Iterable[LeagueUser], rosters: Iterable[Roster]) -> Dict[Optional[int], OwnerInfo]:
    """Map every roster to its owner; rosters without a known owner get "Team N"."""
    by_user = {
        u.user_id: OwnerInfo(display_name=u.display_name, username=u.username, team_name=u.team_name)
        for u in users
    }
    owners = {}
    for r in rosters:
        placeholder = f"Team {r.roster_id}"
        owners[r.roster_id] = by_user.get(r.owner_id) or OwnerInfo(display_name=placeholder, team_name=placeholder)
    return owners


def team_label(owner: Optional[OwnerInfo]) -> str:
    if owner is None:
        return "Unknown Team"
    return owner.team_name or f"{owner.display_name}'s Team"


def opponent_label(owners: Mapping[Optional[int], OwnerInfo], roster_id: Optional[int]) -> str:
    owner = owners.get(roster_id)
    if owner is None:
        return f"Team {roster_id}"
    return owner.team_name or owner.display_name or f"Team {roster_id}"


def find_roster(rosters: Iterable[Roster], roster_id: Optional[int]) -> Optional[Roster]:
    if roster_id is None:
        return None
    return next((r for r in rosters if r.roster_id == roster_id), None)


def split_roster(roster: Roster) -> RosterSections:
    """Bench is everyone on the roster who is not a starter, on IR or on the taxi squad."""
    tagged = set(roster.starters) | set(roster.reserve) | set(roster.taxi)
    bench = [pid for pid in roster.players if pid not in tagged]
    return RosterSections(
        starters=list(roster.starters),
        bench=bench,
        reserve=list(roster.reserve),
        taxi=list(roster.taxi),
    )


def league_player_ids(rosters: Iterable[Roster]) -> List[str]:
    """Every rostered player id in the league, first occurrence order."""
    seen = {}
    for r in rosters:
        for pid in r.players:
            seen.setdefault(pid, None)
    return list(seen)


def compute_standings(rosters: Iterable[Roster], owners: Mapping[Optional[int], OwnerInfo]) -> pd.DataFrame:
    """
    League table ordered by wins, then points for.

    Returns:
        DataFrame with columns: Rank, Team, Manager, W, L, T, PF, roster_id
    """
    columns = ["Rank", "Team", "Manager", "W", "L", "T", "PF", "roster_id"]
    rows = []
    for r in rosters:
        owner = owners.get(r.roster_id)
        rows.append({
            "Team": team_label(owner),
            "Manager": owner.display_name if owner else "",
            "W": r.wins,
            "L": r.losses,
            "T": r.ties,
            "PF": r.fpts,
            "roster_id": r.roster_id,
        })
    if not rows:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame(rows)
    df = df.sort_values(["W", "PF"], ascending=[False, False], kind="mergesort").reset_index(drop=True)
    df["Rank"] = range(1, len(df) + 1)
    return df[columns]


def schedule_weeks(nfl_state: Optional[dict]) -> List[int]:
    """Weeks 1..N where N is the regular season length or the current week, whichever is later."""
    week = 0
    if isinstance(nfl_state, dict):
        try:
            week = int(nfl_state.get("week") or 0)
        except (TypeError, ValueError):
            week = 0
    last = max(config.REGULAR_SEASON_WEEKS, week)
    return list(range(1, last + 1))


def _result(mine: Optional[float], theirs: Optional[float]) -> Optional[str]:
    if mine is None or theirs is None:
        return None
    if mine > theirs:
        return "W"
    if mine < theirs:
        return "L"
    return "T"


def build_schedule(
    matchups_by_week: Mapping[int, List[Matchup]],
    my_roster_id: Optional[int],
    owners: Mapping[Optional[int], OwnerInfo],
) -> List[Dict]:
    """
    One row per week for my team.

    Weeks where my roster has no matchup entry are byes; a matchup with no
    opponent yet is "TBD".

    Returns:
        List of dicts with keys: week, opponent, my_points, opp_points, result
    """
    if my_roster_id is None:
        return []

    schedule = []
    for week in sorted(matchups_by_week):
        entries = matchups_by_week.get(week) or []
        mine = next((m for m in entries if m.roster_id == my_roster_id), None)
        if mine is None:
            schedule.append({"week": week, "opponent": "BYE", "my_points": None,
                             "opp_points": None, "result": None})
            continue

        opp = None
        if mine.matchup_id is not None:
            opp = next((m for m in entries
                        if m.matchup_id == mine.matchup_id and m.roster_id != my_roster_id), None)

        opp_points = opp.points if opp else None
        schedule.append({
            "week": week,
            "opponent": opponent_label(owners, opp.roster_id) if opp else "TBD",
            "my_points": mine.points,
            "opp_points": opp_points,
            "result": _result(mine.points, opp_points),
        })
    return schedule


def record_summary(schedule: List[Dict]) -> str:
    """W-L-T string over the weeks that have a result."""
    results = [row["result"] for row in schedule if row.get("result")]
    return f"{results.count('W')}-{results.count('L')}-{results.count('T')}"
