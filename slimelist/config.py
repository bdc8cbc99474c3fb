"""Configuration defaults and loading for SlimeList."""

import json
import logging
import os
from typing import Dict, Any, Optional

from .core.http_client import API_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_CFG: Dict[str, Any] = {
    "base_url": API_BASE_URL,
    "timeout": DEFAULT_TIMEOUT,
    "backoff": "fixed",
    "backoff_seconds": 1.0,
    "max_attempts": None,       # None = retry rate limits forever
    "max_concurrency": 3,
    "database": "data/slimelist.db",
    "user_id": "local",
    "logging_level": "INFO",
}

ENV_OVERRIDES = {
    "SLIMELIST_DATABASE": "database",
    "SLIMELIST_USER_ID": "user_id",
    "SLIMELIST_LOG_LEVEL": "logging_level",
}


def load_config(path: str = "slimelist.json", env: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Defaults, overlaid by the JSON file at `path`, overlaid by env vars."""
    merged = DEFAULT_CFG.copy()
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                merged.update(loaded)
            else:
                logger.warning("%s does not hold a JSON object - using defaults", path)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read %s: %s - using defaults", path, e)
    else:
        logger.debug("%s not found - using defaults", path)

    env = os.environ if env is None else env
    for var, key in ENV_OVERRIDES.items():
        if env.get(var):
            merged[key] = env[var]
    return merged


def configure_logging(level_name: str = "INFO") -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
