"""
Logging and user-facing error messages for the fixture planner.

Loggers live under the ``fpl_app`` namespace and print to stderr, so failed
API calls show up in the terminal running ``streamlit run``.

Cached API wrappers only log: a ``@st.cache_data`` function replays its
return value, not its ``st.error`` calls. Rendering an error is left to the
page via ``show_api_error`` / ``show_retryable_error``.
"""

import logging
from typing import Optional

import streamlit as st

import config

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str = "fpl_app") -> logging.Logger:
    """Logger with a single stderr handler at ``config.LOG_LEVEL``."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))
    return logger


# What the user can do about each kind of failure
_HINTS = {
    "api_down": "The FPL API may be temporarily unavailable. Try again in a few minutes.",
    "horizon": "Unable to determine the current gameweek, so there is nothing to plan yet. Please try again.",
    "squad": "Check your Classic team ID (`FPL_CLASSIC_TEAM_ID` in `.env`, or the box above).",
    "preseason": "Squads appear once the first gameweek deadline of the season has passed.",
}


def hint_text(hint_key: str) -> str:
    """Remediation text for ``hint_key``; unknown keys get the generic API hint."""
    return _HINTS.get(hint_key, _HINTS["api_down"])


def show_api_error(
    context: str,
    *,
    hint_key: str = "api_down",
    exception: Optional[Exception] = None,
    stop: bool = False,
) -> None:
    """Render ``st.error`` for a failure while ``context`` (e.g. "loading fixtures").

    Unknown ``hint_key`` values fall back to the generic API hint. When an
    ``exception`` is passed it is logged; ``stop=True`` ends the script run.
    """
    hint = hint_text(hint_key)
    st.error(f"**Something went wrong** while {context}.\n\n{hint}")
    if exception is not None:
        get_logger("fpl_app.errors").warning("Error while %s: %s", context, exception)
    if stop:
        st.stop()


def show_retryable_error(context: str, *, hint_key: str = "api_down", retry_key: str = "retry") -> bool:
    """``show_api_error`` plus a Retry button; True on the run where it was clicked."""
    show_api_error(context, hint_key=hint_key)
    return bool(st.button("Retry", key=retry_key))
