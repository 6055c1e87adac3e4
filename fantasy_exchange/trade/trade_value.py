# fantasy_exchange/trade/trade_value.py
"""
Trade Value Evaluator.

Scores each player with a point-weighted heuristic and classifies a proposed
trade:

- Base value from expert consensus rank (60% weight)
- Stats value from last season's production, position-specific (40% weight)
- Verdict from the net value delta (fixed +/-50 band)
- Positional impact from the post-trade roster (see roster_needs)

Every lookup degrades to a default, so unknown players and partial stats
payloads score lower instead of raising.
"""

from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

from fantasy_exchange.common.player_matching import UNKNOWN_POSITION, UNRANKED, PlayerDirectory
from fantasy_exchange.common.schemas import PlayerInfo, SeasonStats, normalize_season_stats
from fantasy_exchange.trade.roster_needs import NeedProfile, estimate_roster_needs, simulate_trade_roster

RANK_WEIGHT = 0.6
STATS_WEIGHT = 0.4

# Net value beyond which a trade is no longer neutral
VERDICT_THRESHOLD = 50

VERDICT_BENEFICIAL = "beneficial"
VERDICT_NEUTRAL = "neutral"
VERDICT_HURTS = "hurts"

VERDICT_TEXT = {
    VERDICT_BENEFICIAL: "Good Trade ✓",
    VERDICT_NEUTRAL: "Neutral Trade",
    VERDICT_HURTS: "Bad Trade ✗",
}

MAX_INCOMING = 2


class TradeAnalysis(NamedTuple):
    my_value: float
    target_value: float
    net_value: float
    verdict: str
    verdict_text: str
    position_counts: Dict[str, int]
    needs: NeedProfile
    my_positions: List[str]
    target_positions: List[str]
    player_values: Dict[str, float]


# ============================================================================
# PLAYER VALUE
# ============================================================================

def player_rank(info: Optional[PlayerInfo]) -> float:
    if info is None:
        return UNRANKED
    return info.rank_ecr or info.depth_chart_order or UNRANKED


def rank_component(info: Optional[PlayerInfo]) -> float:
    rank = player_rank(info)
    if 0 < rank < UNRANKED:
        return (1000 - rank) * RANK_WEIGHT
    return 0.0


def stats_component(position: str, stats: Optional[SeasonStats]) -> float:
    """Fantasy-scoring approximation for one season, already scaled by 0.4."""
    if stats is None:
        return 0.0

    passing, rushing, receiving = stats.passing, stats.rushing, stats.receiving
    position = (position or "").upper()

    if position == "QB":
        # 1 pt / 25 pass yds, 1 pt / 10 rush yds, 4 per TD, -2 per INT
        completion_bonus = (passing.completions / passing.attempts) * 2 if passing.attempts > 0 else 0
        points = (
            passing.yards * 0.04
            + rushing.yards * 0.1
            + (passing.touchdowns + rushing.touchdowns) * 4
            - passing.interceptions * 2
            + completion_bonus
        )
    elif position == "RB":
        # PPR: 1 pt / 10 yds either way, 1 per catch, 6 per TD, -2 per fumble lost
        points = (
            rushing.yards * 0.1
            + receiving.yards * 0.1
            + receiving.receptions
            + (rushing.touchdowns + receiving.touchdowns) * 6
            - stats.fumbles_lost * 2
        )
    elif position in ("WR", "TE"):
        catch_rate_bonus = (receiving.receptions / receiving.targets) * 3 if receiving.targets > 0 else 0
        points = (
            receiving.receptions
            + receiving.yards * 0.1
            + receiving.touchdowns * 6
            - stats.fumbles_lost * 2
            + catch_rate_bonus
        )
    else:
        total_yards = rushing.yards + passing.yards
        total_tds = rushing.touchdowns + passing.touchdowns
        points = total_yards * 0.05 + total_tds * 5

    return points * STATS_WEIGHT


def player_value(info: Optional[PlayerInfo], stats: Any = None) -> float:
    """
    Scalar trade value for one player, never negative.

    ``stats`` may be a SeasonStats or a raw payload; raw payloads are
    normalized here so a caller that skipped the boundary still gets a value.
    """
    if stats is not None and not isinstance(stats, SeasonStats):
        stats = normalize_season_stats(stats)
    position = info.position if info else UNKNOWN_POSITION
    value = rank_component(info) + stats_component(position, stats)
    return max(0.0, value)


# ============================================================================
# TRADE PROPOSAL
# ============================================================================

class TradeProposal:
    """
    The players on each side of a trade being considered.

    A player id can only sit on one side, and at most ``MAX_INCOMING`` players
    can be received.  Additions that would break either rule are ignored.
    """

    def __init__(self):
        self.outgoing: List[str] = []
        self.incoming: List[str] = []

    def add_outgoing(self, player_id: str) -> bool:
        if player_id in self.outgoing or player_id in self.incoming:
            return False
        self.outgoing.append(player_id)
        return True

    def remove_outgoing(self, player_id: str) -> None:
        self.outgoing = [pid for pid in self.outgoing if pid != player_id]

    def add_incoming(self, player_id: str) -> bool:
        if len(self.incoming) >= MAX_INCOMING:
            return False
        if player_id in self.incoming or player_id in self.outgoing:
            return False
        self.incoming.append(player_id)
        return True

    def remove_incoming(self, player_id: str) -> None:
        self.incoming = [pid for pid in self.incoming if pid != player_id]

    @property
    def can_add_incoming(self) -> bool:
        return len(self.incoming) < MAX_INCOMING

    @property
    def is_complete(self) -> bool:
        return bool(self.outgoing) and bool(self.incoming)

    def all_player_ids(self) -> List[str]:
        return self.outgoing + self.incoming

    def clear(self) -> None:
        self.outgoing = []
        self.incoming = []


# ============================================================================
# TRADE EVALUATION
# ============================================================================

def classify_net_value(net_value: float) -> str:
    if net_value > VERDICT_THRESHOLD:
        return VERDICT_BENEFICIAL
    if net_value < -VERDICT_THRESHOLD:
        return VERDICT_HURTS
    return VERDICT_NEUTRAL


def evaluate_trade(
    outgoing: Iterable[str],
    incoming: Iterable[str],
    directory: PlayerDirectory,
    stats_by_id: Optional[Mapping[str, Any]] = None,
    roster_ids: Optional[Iterable[str]] = None,
) -> Optional[TradeAnalysis]:
    """
    Score both sides of a trade and the roster it leaves behind.

    Args:
        outgoing: player ids being given away
        incoming: player ids being received
        directory: player directory for positions and ranks
        stats_by_id: season stats per player id; missing ids value on rank only
        roster_ids: my current roster; None scores the incoming players alone

    Returns:
        TradeAnalysis, or None when either side is empty.

    Raises:
        ValueError: a player is on both sides of the trade.
    """
    outgoing = list(outgoing or [])
    incoming = list(incoming or [])
    if not outgoing or not incoming:
        return None
    both_sides = set(outgoing) & set(incoming)
    if both_sides:
        raise ValueError(f"Players on both sides of the trade: {sorted(both_sides)}")

    stats_by_id = stats_by_id or {}
    values = {
        pid: player_value(directory.lookup_by_id(pid), stats_by_id.get(pid))
        for pid in outgoing + incoming
    }

    my_value = sum(values[pid] for pid in outgoing)
    target_value = sum(values[pid] for pid in incoming)
    net_value = target_value - my_value
    verdict = classify_net_value(net_value)

    after_trade = simulate_trade_roster(roster_ids or [], outgoing, incoming)
    counts, needs = estimate_roster_needs(after_trade, directory)

    return TradeAnalysis(
        my_value=my_value,
        target_value=target_value,
        net_value=net_value,
        verdict=verdict,
        verdict_text=VERDICT_TEXT[verdict],
        position_counts=counts,
        needs=needs,
        my_positions=[directory.position_of(pid) for pid in outgoing],
        target_positions=[directory.position_of(pid) for pid in incoming],
        player_values=values,
    )
