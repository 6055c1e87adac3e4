# fantasy_exchange/trade/roster_needs.py
"""
Roster need estimation.

Counts a roster's players by position and flags the tracked positions where
the roster is short (deficit) or carrying at least two extra players
(surplus).  Pure functions, no Streamlit imports.
"""

from collections import Counter
from typing import Dict, Iterable, List, NamedTuple, Tuple

from fantasy_exchange.common.player_matching import PlayerDirectory

# Target roster counts for the positions that drive trade needs
POSITION_TARGETS = {"QB": 2, "RB": 4, "WR": 5, "TE": 2}

# A position is in surplus once it holds this many players above target
SURPLUS_MARGIN = 2


class NeedProfile(NamedTuple):
    surplus: List[str]
    deficit: List[str]


def count_positions(player_ids: Iterable[str], directory: PlayerDirectory) -> Dict[str, int]:
    """Tally players per position; unresolved ids land in ``UNKNOWN``."""
    counts = Counter(directory.position_of(pid) for pid in player_ids)
    return dict(counts)


def derive_needs(counts: Dict[str, int]) -> NeedProfile:
    """
    Compare position counts against ``POSITION_TARGETS``.

    Positions outside the tracked four (K, DEF, UNKNOWN, ...) are never flagged.
    """
    surplus, deficit = [], []
    for pos, target in POSITION_TARGETS.items():
        have = counts.get(pos, 0)
        if have >= target + SURPLUS_MARGIN:
            surplus.append(pos)
        if have < target:
            deficit.append(pos)
    return NeedProfile(surplus=surplus, deficit=deficit)


def estimate_roster_needs(
    player_ids: Iterable[str], directory: PlayerDirectory
) -> Tuple[Dict[str, int], NeedProfile]:
    counts = count_positions(player_ids, directory)
    return counts, derive_needs(counts)


def simulate_trade_roster(
    roster_ids: Iterable[str], outgoing: Iterable[str], incoming: Iterable[str]
) -> List[str]:
    """Roster ids after sending ``outgoing`` away and adding ``incoming``."""
    outgoing = set(outgoing)
    kept = [pid for pid in roster_ids if pid not in outgoing]
    return kept + list(incoming)
