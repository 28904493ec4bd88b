"""cronmatch settings -- evaluation time zone, log level and named schedules.

Settings come from $CRONMATCH_HOME/config.yaml, with secrets or per-host
values kept in $CRONMATCH_HOME/.env and referenced as ${VAR}. A missing
file means defaults; a malformed one raises pydantic's ValidationError.

Example config.yaml:
    cron:
      timezone: Europe/Paris
    logging:
      level: DEBUG
    schedules:
      backup: "0 0 3 * * *"
      report: ${REPORT_SCHEDULE}
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Default home directory for config files
DEFAULT_HOME = Path.home() / ".cronmatch"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_env_vars(value: Any) -> Any:
    """Substitute ${VAR} in schedule strings and settings, walking nested
    sections. Unknown variables stay as written so the expression compiler
    reports them against the schedule that uses them.
    """
    if isinstance(value, dict):
        return {key: _resolve_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]
    if not isinstance(value, str):
        return value

    def lookup(match: re.Match) -> str:
        name = match.group(1)
        if name in os.environ:
            return os.environ[name]
        logger.warning("Config references unset variable %s", name)
        return match.group(0)

    return _ENV_VAR_RE.sub(lookup, value)


# ---------------------------------------------------------------------------
# Config models (Pydantic)
# ---------------------------------------------------------------------------

class CronConfig(BaseModel):
    timezone: str | None = None
    utc: bool = False

    @property
    def effective_timezone(self) -> str | None:
        """Zone instants are evaluated in; `utc` wins over `timezone`."""
        return "UTC" if self.utc else self.timezone


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    """Top-level application configuration."""

    home_dir: str = str(DEFAULT_HOME)
    cron: CronConfig = Field(default_factory=CronConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    schedules: dict[str, str] = Field(default_factory=dict)

    @property
    def home_path(self) -> Path:
        """Resolved home directory as a Path."""
        return Path(self.home_dir).expanduser()


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_config(
    config_path: str | Path | None = None,
    env_path: str | Path | None = None,
) -> AppConfig:
    """Load configuration from YAML + .env files.

    1. Load .env into environment variables
    2. Load config.yaml and resolve ${ENV_VAR} references
    3. Validate against Pydantic models
    """
    home = Path(os.environ.get("CRONMATCH_HOME", str(DEFAULT_HOME))).expanduser()

    if env_path is None:
        env_path = home / ".env"
    if config_path is None:
        config_path = home / "config.yaml"

    env_path = Path(env_path)
    config_path = Path(config_path)

    # Load .env
    if env_path.exists():
        load_dotenv(env_path)
        logger.info("Loaded environment from %s", env_path)
    else:
        logger.debug("No .env file at %s", env_path)

    # Load config.yaml
    raw_config: dict = {}
    if config_path.exists():
        with open(config_path) as f:
            raw_config = yaml.safe_load(f) or {}
        logger.info("Loaded config from %s", config_path)
    else:
        logger.info("No config file at %s, using defaults", config_path)

    resolved = _resolve_env_vars(raw_config)

    # Override home_dir if set via env
    if "CRONMATCH_HOME" in os.environ:
        resolved["home_dir"] = os.environ["CRONMATCH_HOME"]

    return AppConfig(**resolved)
