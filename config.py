"""Application configuration: environment variables and derived constants.

Loads the identity-manager target, API paths, client credentials and request
timeout from the environment via ``python-dotenv``.  All values are resolved
at import time so other modules can ``from config import …`` without repeated
lookups.  Command-line flags override these defaults in :mod:`cli.dispatcher`.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from core.auth import DEFAULT_TOKEN_PATH
from core.context import DEFAULT_BASE_PATH
from core.logger import EntitlectlLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

# ── Logger (used for startup diagnostics at the bottom of this module) ───────
logger = EntitlectlLogger.get_logger()

DEFAULT_TIMEOUT = 10


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_timeout(raw: str | None) -> int:
    """Parse ``IDM_TIMEOUT`` as a positive number of seconds.

    Empty, non-numeric or non-positive values fall back to
    :data:`DEFAULT_TIMEOUT`.
    """
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring non-numeric IDM_TIMEOUT", extra={"raw_timeout": raw})
        return DEFAULT_TIMEOUT
    if value <= 0:
        logger.warning("Ignoring non-positive IDM_TIMEOUT", extra={"raw_timeout": raw})
        return DEFAULT_TIMEOUT
    return value


def _env(name: str) -> str | None:
    """Return the stripped value of *name*, or ``None`` when unset or blank."""
    value = os.environ.get(name, "").strip()
    return value or None


# ── Public constants ─────────────────────────────────────────────────────────

TARGET_URL: str | None = _env("IDM_TARGET_URL")
BASE_PATH: str = _env("IDM_BASE_PATH") or DEFAULT_BASE_PATH
TOKEN_PATH: str = _env("IDM_TOKEN_PATH") or DEFAULT_TOKEN_PATH
CLIENT_ID: str | None = _env("IDM_CLIENT_ID")
CLIENT_SECRET: str | None = _env("IDM_CLIENT_SECRET")
ACCESS_TOKEN: str | None = _env("IDM_ACCESS_TOKEN")
REQUEST_TIMEOUT: int = _parse_timeout(os.environ.get("IDM_TIMEOUT"))


# ── Startup diagnostics ─────────────────────────────────────────────────────

if TARGET_URL:
    logger.info("Config loaded, IDM_TARGET_URL is set", extra={"target_url": TARGET_URL})
else:
    logger.info("Config loaded, IDM_TARGET_URL is NOT set")

if CLIENT_ID and CLIENT_SECRET:
    logger.info("Client credentials configured", extra={"client_id": CLIENT_ID})
elif CLIENT_ID or CLIENT_SECRET:
    logger.warning("Incomplete client credentials, need both IDM_CLIENT_ID and IDM_CLIENT_SECRET")

logger.debug(
    "API paths resolved",
    extra={"base_path": BASE_PATH, "token_path": TOKEN_PATH, "timeout": REQUEST_TIMEOUT},
)
