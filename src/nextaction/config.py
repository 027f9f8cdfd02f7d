"""Configuration management for nextaction."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

NEXTACTION_HOME = Path(os.environ.get("NEXTACTION_HOME", Path.home() / ".nextaction"))
CONFIG_FILE = NEXTACTION_HOME / "config" / "nextaction.conf"
ENV_PREFIX = "NXTT_"


@dataclass
class Config:
    """nextaction configuration."""

    token: str = ""
    interval: int = 10
    nextaction_name: str = "nextaction"
    someday_name: str = "someday"
    api_url: str = ""
    batch_size: int = 100


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, using {default}")
        return default


def _strip_value(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0]
    return value.strip()


def _apply(config: Config, key: str, value: str) -> None:
    match key:
        case "token":
            config.token = value
        case "interval":
            config.interval = _parse_int(key, value, config.interval)
        case "nextaction_name":
            config.nextaction_name = value
        case "someday_name":
            config.someday_name = value
        case "api_url":
            config.api_url = value
        case "batch_size":
            config.batch_size = _parse_int(key, value, config.batch_size)
        case _:
            logger.debug(f"Ignoring unknown config key {key!r}")


def load_config(
    config_file: Path | None = None,
    environ: dict[str, str] | None = None,
) -> Config:
    """
    Load configuration from nextaction.conf, then the environment.

    NXTT_* variables override file values. TODOIST_TOKEN is used when no
    token is configured anywhere else.
    """
    config = Config()
    config_file = config_file or CONFIG_FILE
    environ = os.environ if environ is None else environ

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            _apply(config, key.strip().lower(), _strip_value(value.strip()))

    for name, value in environ.items():
        if name.startswith(ENV_PREFIX):
            _apply(config, name[len(ENV_PREFIX):].lower(), value.strip())

    if not config.token and environ.get("TODOIST_TOKEN"):
        config.token = environ["TODOIST_TOKEN"].strip()

    return config
