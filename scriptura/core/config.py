# scriptura/core/config.py
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env
load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent.parent

# ---- DISCORD ----
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN") or os.getenv("TOKEN")
DISCORD_CLIENT_ID = os.getenv("DISCORD_CLIENT_ID") or os.getenv("CLIENT_ID")
DISCORD_GUILD_ID = os.getenv("DISCORD_GUILD_ID")

# ---- SCRIPTURE BACKENDS ----
ESV_API_KEY = os.getenv("ESV_API_KEY")
ESV_BASE_URL = os.getenv("ESV_BASE_URL", "https://api.esv.org/v3/passage")

API_BIBLE_KEY = os.getenv("API_BIBLE_KEY")
API_BIBLE_BASE_URL = os.getenv("API_BIBLE_BASE_URL", "https://rest.api.bible/v1")

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

# ---- PAGINATION ----
PAGINATION_TIMEOUT_SECONDS = float(os.getenv("PAGINATION_TIMEOUT_SECONDS", "120"))

# ---- STORAGE ----
PREFERENCES_DB = os.getenv(
    "PREFERENCES_DB",
    str(PACKAGE_DIR.parent / "scriptura.db"),
)
DAILY_VERSES_FILE = os.getenv(
    "DAILY_VERSES_FILE",
    str(PACKAGE_DIR / "data" / "daily_verses.json"),
)

# ---- STATUS SERVER ----
STATUS_HOST = os.getenv("STATUS_HOST", "127.0.0.1")
STATUS_PORT = int(os.getenv("STATUS_PORT")) if os.getenv("STATUS_PORT") else None

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str = None) -> None:
    """Install the process-wide log format."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
