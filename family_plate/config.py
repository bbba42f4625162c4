"""Configuration for FamilyPlate."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# App directories
APP_NAME = "family-plate"
CONFIG_DIR = Path.home() / f".{APP_NAME}"
STORE_FILE = CONFIG_DIR / "store.json"

# Extraction proxy defaults
DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_TIMEOUT = 60.0

DEFAULT_LOG_LEVEL = "WARNING"


def get_api_url() -> str:
    """Get the base URL of the extraction proxy."""
    return os.getenv("FAMILY_PLATE_API_URL", DEFAULT_API_URL).rstrip("/")


def get_timeout() -> float:
    """Get the request timeout in seconds for extraction calls."""
    raw = os.getenv("FAMILY_PLATE_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT


def get_store_path() -> Path:
    """Get the path of the JSON store file, creating its directory."""
    override = os.getenv("FAMILY_PLATE_STORE")
    path = Path(override).expanduser() if override else STORE_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def get_log_level() -> str:
    """Get the log level name from the environment."""
    return os.getenv("FAMILY_PLATE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
