"""Configuration management for Become."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

BECOME_HOME = Path(os.environ.get("BECOME_HOME", Path.home() / "become"))
CONFIG_FILE = BECOME_HOME / "config" / "become.conf"
DATA_DIR = BECOME_HOME / "data"


@dataclass
class Config:
    """Become configuration."""

    data_dir: str = ""
    # Seconds; the grid fast drags land on, and the minimum event length
    snap_increment: int = 900
    # Seconds; used while dragging slower than velocity_threshold
    slow_snap_increment: int = 60
    velocity_threshold: float = 300.0  # points per second
    hour_height: float = 80.0  # points per hour on the timeline
    tap_threshold: float = 10.0  # points; shorter drags are taps
    use_24h: bool = False


def _parse_value(value: str) -> str:
    """Strip quotes, or inline comments from unquoted values."""
    if value.startswith('"'):
        end_quote = value.find('"', 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if value.startswith("'"):
        end_quote = value.find("'", 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _positive(key: str, value: str, cast, default):
    try:
        number = cast(value)
    except ValueError:
        logger.warning(f"Ignoring {key.upper()}={value!r}: not a number")
        return default
    if number <= 0:
        logger.warning(f"Ignoring {key.upper()}={value!r}: must be positive")
        return default
    return number


def load_config(path: Path | None = None) -> Config:
    """Load configuration from become.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _parse_value(value.strip())

        match key:
            case "data_dir":
                config.data_dir = value
            case "snap_increment":
                config.snap_increment = _positive(key, value, int, config.snap_increment)
            case "slow_snap_increment":
                config.slow_snap_increment = _positive(key, value, int, config.slow_snap_increment)
            case "velocity_threshold":
                config.velocity_threshold = _positive(key, value, float, config.velocity_threshold)
            case "hour_height":
                config.hour_height = _positive(key, value, float, config.hour_height)
            case "tap_threshold":
                config.tap_threshold = _positive(key, value, float, config.tap_threshold)
            case "use_24h":
                config.use_24h = value.lower() in ("1", "true", "yes", "on")
            case _:
                logger.debug(f"Unknown config key: {key}")

    return config
