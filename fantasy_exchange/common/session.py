# fantasy_exchange/common/session.py
#
# Login session persisted to a local JSON file so a browser refresh or app
# restart keeps the user signed in with their league selected.
# Zero Streamlit imports.

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from fantasy_exchange.common.error_helpers import get_logger

_logger = get_logger("fantasy_exchange.session")


@dataclass
class UserSession:
    username: Optional[str] = None
    league_id: Optional[str] = None
    my_roster_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.username)


def _from_dict(data: dict) -> UserSession:
    roster_id = data.get("my_roster_id")
    try:
        roster_id = int(roster_id) if roster_id is not None else None
    except (TypeError, ValueError):
        roster_id = None
    return UserSession(
        username=data.get("username") or None,
        league_id=data.get("league_id") or None,
        my_roster_id=roster_id,
    )


class SessionStore:
    """
    Mock login plus league selection, written through to ``path`` on every change.

    There is no real authentication: any non-empty username and password pair
    signs in.
    """

    def __init__(self, path):
        self.path = Path(path)
        self.session = UserSession()

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    def load(self) -> UserSession:
        """Read the session file; a missing or unreadable file is an empty session."""
        if not self.path.exists():
            self.session = UserSession()
            return self.session
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            self.session = _from_dict(data if isinstance(data, dict) else {})
        except (json.JSONDecodeError, OSError) as e:
            _logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            self.session = UserSession()
        return self.session

    def _save(self) -> bool:
        try:
            with open(self.path, "w") as f:
                json.dump(asdict(self.session), f, indent=2)
                f.write("\n")
            return True
        except OSError as e:
            _logger.warning("Could not write session file %s: %s", self.path, e)
            return False

    def login(self, username: str, password: str) -> UserSession:
        username = (username or "").strip()
        if not username or not password:
            raise ValueError("Username and password required")
        # A previously chosen league and team survive a fresh login
        self.session.username = username
        self._save()
        _logger.info("User %s logged in", username)
        return self.session

    def save_league_id(self, league_id: str) -> None:
        league_id = (league_id or "").strip() or None
        if league_id != self.session.league_id:
            # A different league means a different set of rosters
            self.session.my_roster_id = None
        self.session.league_id = league_id
        self._save()

    def save_my_roster_id(self, roster_id: Optional[int]) -> None:
        self.session.my_roster_id = int(roster_id) if roster_id is not None else None
        self._save()

    def logout(self) -> None:
        self.session = UserSession()
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            _logger.warning("Could not remove session file %s: %s", self.path, e)
