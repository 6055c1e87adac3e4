"""
Error-handling helpers for the Fantasy Exchange app.

* ``get_logger(name)`` returns a stdlib logger that writes to stderr
  (visible in the terminal / container logs).
* ``show_api_error(context, …)`` renders a user-facing ``st.error``
  with an actionable hint and optionally logs the exception.

Upstream client modules never call ``st.error`` themselves; they log and
return "no data".  Page-level functions decide what the user sees.
"""

import logging

import streamlit as st

import config


def get_logger(name: str = "fantasy_exchange") -> logging.Logger:
    """App-wide logger with a StreamHandler (visible in terminal / container logs)."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))
    return logger


# Standard remediation hints shown to the user.
_HINTS = {
    "api_down":  "The Sleeper API may be temporarily unavailable. Try reloading in a few minutes.",
    "league_id": "Please verify your League ID on the Dashboard (Sleeper → League → Settings).",
    "roster":    "Pick your team on the Dashboard first.",
    "stats_api": "Player statistics come from SportsData.io. Check `STATS_API_KEY` in `.env`.",
    "network":   "Check your internet connection and try again.",
}


def show_api_error(
    context: str,
    *,
    hint_key: str = "api_down",
    exception: Exception = None,
    stop: bool = False,
) -> None:
    """Display a user-friendly ``st.error`` with an actionable hint.

    Parameters
    ----------
    context : str
        A short phrase describing what was happening, e.g.
        ``"loading league rosters"``.
    hint_key : str
        Key into ``_HINTS`` for the remediation message.
    exception : Exception, optional
        If provided, the exception is logged at WARNING level.
    stop : bool
        If ``True``, ``st.stop()`` is called after displaying the error.
    """
    hint = _HINTS.get(hint_key, _HINTS["api_down"])
    st.error(f"**Could not load data** while {context}.\n\n{hint}")
    if exception:
        get_logger().warning("Error while %s: %s", context, exception)
    if stop:
        st.stop()
