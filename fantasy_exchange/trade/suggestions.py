# fantasy_exchange/trade/suggestions.py
"""
League-wide trade ideas.

Pairs teams where one team's deficit position is another team's surplus.
Positions come from the player directory, the same classification the trade
calculator uses.
"""

from typing import Dict, List, NamedTuple, Optional

from fantasy_exchange.common.league_helpers import build_owner_map, team_label
from fantasy_exchange.common.player_matching import PlayerDirectory
from fantasy_exchange.common.schemas import LeagueUser, Roster
from fantasy_exchange.trade.roster_needs import NeedProfile, estimate_roster_needs

MAX_SUGGESTIONS = 25


class TeamProfile(NamedTuple):
    roster_id: Optional[int]
    name: str
    counts: Dict[str, int]
    needs: NeedProfile


class Suggestion(NamedTuple):
    from_team: str
    to_team: str
    position: str
    note: str


def build_team_profiles(
    users: List[LeagueUser], rosters: List[Roster], directory: PlayerDirectory
) -> List[TeamProfile]:
    owners = build_owner_map(users, rosters)
    profiles = []
    for roster in rosters:
        counts, needs = estimate_roster_needs(roster.players, directory)
        profiles.append(TeamProfile(
            roster_id=roster.roster_id,
            name=team_label(owners.get(roster.roster_id)),
            counts=counts,
            needs=needs,
        ))
    return profiles


def _pair_suggestions(needy: TeamProfile, stocked: TeamProfile) -> List[Suggestion]:
    out = []
    for pos in needy.needs.deficit:
        if pos in stocked.needs.surplus:
            out.append(Suggestion(
                from_team=stocked.name,
                to_team=needy.name,
                position=pos,
                note=f"{needy.name} needs {pos}; {stocked.name} has surplus {pos}.",
            ))
    return out


def build_suggestions(
    users: List[LeagueUser],
    rosters: List[Roster],
    directory: PlayerDirectory,
    limit: int = MAX_SUGGESTIONS,
    roster_id: Optional[int] = None,
) -> List[Suggestion]:
    """
    Every deficit/surplus match between two teams, in roster order.

    With ``roster_id`` only pairs that include that roster are kept; the
    limit applies after that filter.
    """
    profiles = build_team_profiles(users, rosters, directory)
    suggestions = []
    for i, a in enumerate(profiles):
        for b in profiles[i + 1:]:
            if roster_id is not None and roster_id not in (a.roster_id, b.roster_id):
                continue
            suggestions.extend(_pair_suggestions(a, b))
            suggestions.extend(_pair_suggestions(b, a))
    return suggestions[:limit]
