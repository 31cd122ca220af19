"""Runtime configuration for the FleetBook application."""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

# Base URL of the JSON document store
STORE_URL = os.getenv("FLEETBOOK_STORE_URL", "http://localhost:3000").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("FLEETBOOK_REQUEST_TIMEOUT", "10"))

# Secret for session tokens - set FLEETBOOK_JWT_SECRET in production
JWT_SECRET = os.getenv("FLEETBOOK_JWT_SECRET", "fleetbook_secret_key")
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = int(os.getenv("FLEETBOOK_JWT_EXPIRATION_HOURS", "24"))

# Trip notification sweep
SWEEP_INTERVAL_SECONDS = int(os.getenv("FLEETBOOK_SWEEP_INTERVAL_SECONDS", "600"))
STARTING_SOON_MIN_MINUTES = 50
STARTING_SOON_MAX_MINUTES = 70

# CLI session storage
CONFIG_DIR = os.path.expanduser(os.getenv("FLEETBOOK_CONFIG_DIR", "~/.fleetbook"))
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")

LOG_LEVEL = os.getenv("FLEETBOOK_LOG_LEVEL", "INFO").upper()


def setup_logging(level: str = None) -> None:
    """Configure root logging for the CLI and the sweep loop."""
    logging.basicConfig(
        level=getattr(logging, level or LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # urllib3 logs every connection to the store at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
