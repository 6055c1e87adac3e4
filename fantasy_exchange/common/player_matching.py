"""
Player Matching Module

Provides canonical name normalization, a PlayerDirectory for id-keyed lookups
over the Sleeper player mapping, and the name matching used to find the same
player in the SportsData.io player list.

Sleeper and SportsData spell names differently often enough ("D.J. Moore" vs
"DJ Moore", "Kenneth Walker III" vs "Kenneth Walker") that a plain substring
search misses players.  The substring pass runs first; fuzzy matching on the
canonical form is only a fallback.
"""

import re
import unicodedata
from typing import Any, Dict, Iterable, List, Optional

from fuzzywuzzy import fuzz

from fantasy_exchange.common.schemas import PlayerInfo, normalize_players

UNKNOWN_POSITION = "UNKNOWN"
UNRANKED = 999

# Name matches considered before the team tie-break
MATCH_LIMIT = 10

_SPECIAL_CHARS = {
    'ø': 'o', 'Ø': 'O',
    'æ': 'ae', 'Æ': 'AE',
    'œ': 'oe', 'Œ': 'OE',
    'ð': 'd', 'Ð': 'D',
    'þ': 'th', 'Þ': 'Th',
    'ł': 'l', 'Ł': 'L',
    'đ': 'd', 'Đ': 'D',
    'ß': 'ss',
}


def canonical_normalize(name: Any) -> str:
    """
    Single source of truth for name normalization.

    - NFKD unicode normalize, ASCII encode (strips accents)
    - Lowercase
    - Remove non-alphanumeric characters
    - Collapse whitespace

    Examples:
        "D.J. Moore" -> "dj moore"
        "Ja'Marr Chase" -> "jamarr chase"
        "Amon-Ra St. Brown" -> "amonra st brown"
    """
    if name is None or (isinstance(name, float) and name != name):
        return ""
    s = str(name).strip()
    # Characters that don't decompose under NFKD
    for char, replacement in _SPECIAL_CHARS.items():
        s = s.replace(char, replacement)
    s = unicodedata.normalize("NFKD", s)
    s = s.encode("ascii", "ignore").decode("ascii").lower()
    s = re.sub(r"[^a-z0-9 ]", "", s)
    return re.sub(r"\s+", " ", s).strip()


class PlayerDirectory:
    """
    Id-keyed lookup over the Sleeper ``/players/nfl`` mapping.

    Every lookup degrades to a default instead of raising, so callers can pass
    ids straight from a roster without checking them first.

    Usage:
        directory = PlayerDirectory()
        directory.build_from_sleeper(raw_players)

        directory.position_of("4046")      # "QB", or "UNKNOWN"
        directory.search("chase", candidate_ids=league_ids)
    """

    def __init__(self, players: Optional[Dict[str, PlayerInfo]] = None):
        self._by_id: Dict[str, PlayerInfo] = dict(players or {})
        self._built = bool(self._by_id)

    @classmethod
    def from_sleeper(cls, raw: Any) -> "PlayerDirectory":
        directory = cls()
        directory.build_from_sleeper(raw)
        return directory

    def build_from_sleeper(self, raw: Any) -> None:
        self._by_id = normalize_players(raw)
        self._built = True

    @property
    def is_built(self) -> bool:
        return self._built

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, player_id: object) -> bool:
        return str(player_id) in self._by_id

    def lookup_by_id(self, player_id: Any) -> Optional[PlayerInfo]:
        if player_id is None:
            return None
        return self._by_id.get(str(player_id))

    def position_of(self, player_id: Any) -> str:
        info = self.lookup_by_id(player_id)
        return (info.position if info and info.position else UNKNOWN_POSITION)

    def rank_of(self, player_id: Any) -> float:
        """Expert consensus rank, else depth chart order, else 999 (unranked)."""
        info = self.lookup_by_id(player_id)
        if info is None:
            return UNRANKED
        return info.rank_ecr or info.depth_chart_order or UNRANKED

    def display_name(self, player_id: Any) -> str:
        info = self.lookup_by_id(player_id)
        return info.display_name if info else str(player_id)

    def search(self, query: str, candidate_ids: Optional[Iterable[str]] = None,
               limit: int = 10) -> List[PlayerInfo]:
        """Case-insensitive substring match on name, position or team."""
        q = (query or "").strip().lower()
        if not q:
            return []
        ids = candidate_ids if candidate_ids is not None else self._by_id.keys()
        results = []
        seen = set()
        for pid in ids:
            info = self.lookup_by_id(pid)
            if info is None or info.player_id in seen:
                continue
            name = info.full_name or f"{info.first_name} {info.last_name}".strip()
            if q in name.lower() or q in info.position.lower() or (info.team and q in info.team.lower()):
                seen.add(info.player_id)
                results.append(info)
                if len(results) >= limit:
                    break
        return results


# =============================================================================
# STATS API MATCHING
# =============================================================================

def _stats_full_name(candidate: Dict[str, Any]) -> str:
    return f"{candidate.get('FirstName') or ''} {candidate.get('LastName') or ''}".strip()


def _teams_overlap(a: Any, b: Any) -> bool:
    a = str(a or "").upper()
    b = str(b or "").upper()
    if not a or not b:
        return False
    return a in b or b in a


def filter_by_name(candidates: Iterable[Dict[str, Any]], name: str) -> List[Dict[str, Any]]:
    """Candidates whose "First Last" contains ``name`` (case-insensitive)."""
    needle = (name or "").lower()
    if not needle:
        return []
    return [c for c in candidates if isinstance(c, dict) and needle in _stats_full_name(c).lower()]


def select_stats_player(
    candidates: Iterable[Dict[str, Any]],
    name: str,
    team: Optional[str] = None,
    fuzzy_threshold: int = 90,
    limit: int = MATCH_LIMIT,
) -> Optional[Dict[str, Any]]:
    """
    Pick the SportsData.io player record that corresponds to a Sleeper player.

    Args:
        candidates: SportsData ``/Players`` rows (FirstName, LastName, Team, PlayerID)
        name: Sleeper display name
        team: Sleeper team abbreviation, used only to break ties
        fuzzy_threshold: minimum token_sort_ratio for the fallback pass
        limit: only the first ``limit`` matches take part in the team tie-break

    Returns:
        The matching row, or None.
    """
    candidates = [c for c in candidates if isinstance(c, dict)]
    matches = filter_by_name(candidates, name)[:limit]

    if not matches:
        target = canonical_normalize(name)
        if not target:
            return None
        scored = [
            (fuzz.token_sort_ratio(target, canonical_normalize(_stats_full_name(c))), i, c)
            for i, c in enumerate(candidates)
        ]
        scored = [s for s in scored if s[0] >= fuzzy_threshold]
        if not scored:
            return None
        # Highest score first, input order breaks ties
        scored.sort(key=lambda s: (-s[0], s[1]))
        matches = [c for _, _, c in scored][:limit]

    if team and len(matches) > 1:
        for c in matches:
            if _teams_overlap(c.get("Team"), team):
                return c

    return matches[0]
