# Configuration settings for the Streamlit app
import os

from dotenv import load_dotenv

# Pull values from a local .env file (if present) before reading the environment
load_dotenv()


def _int_env(name, default=None):
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


# FPL Classic API
FPL_API_BASE = os.getenv("FPL_API_BASE", "https://fantasy.premierleague.com/api").rstrip("/")
FPL_HTTP_TIMEOUT = _int_env("FPL_HTTP_TIMEOUT", 30)

# Classic team whose squad is planned (entry id from the FPL website URL)
FPL_CLASSIC_TEAM_ID = _int_env("FPL_CLASSIC_TEAM_ID")

# Fixture planner: default number of gameweeks (2-5; anything else falls back to 3)
PLANNER_DEFAULT_HORIZON = _int_env("FPL_PLANNER_DEFAULT_HORIZON", 3)

# Level for the fpl_app.* loggers (DEBUG, INFO, WARNING, ...)
LOG_LEVEL = os.getenv("FPL_LOG_LEVEL", "INFO").upper()

# FDR palette: 1=easy(green) -> 5=hard(red), (bg, text)
FDR_COLORS = {
    1: ("#166534", "#86efac"),
    2: ("#14532d", "#bbf7d0"),
    3: ("#1a1a2e", "#e0e0e0"),
    4: ("#7f1d1d", "#fecaca"),
    5: ("#991b1b", "#fca5a5"),
}

POSITION_COLORS = {
    "GK": "#eab308",
    "DEF": "#3b82f6",
    "MID": "#10b981",
    "FWD": "#ef4444",
}
