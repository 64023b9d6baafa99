# dairy_search/config.py
from dotenv import load_dotenv
from loguru import logger
import os

load_dotenv()

# Search defaults, also used as clamping targets for bad caller input
DEFAULT_THRESHOLD = 0.3
DEFAULT_LIMIT = 40


def _getenv_number(name: str, default, cast):
    """Read a numeric environment variable, keeping the default if it does not parse."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning(f"Environment variable {name}={raw!r} is not a valid {cast.__name__}, using {default}")
        return default


# Runtime parameters
SEARCH_THRESHOLD = _getenv_number("SEARCH_THRESHOLD", DEFAULT_THRESHOLD, float)
SEARCH_LIMIT = _getenv_number("SEARCH_LIMIT", DEFAULT_LIMIT, int)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# File names
CATALOG_PATH = os.getenv("CATALOG_PATH", "data/establishments.csv")
