# Settings - CENTRALIZED for lottocheck upstream access
"""
Centralized settings for upstream URLs, request timeouts and display
defaults. Values are resolved once and cached.

Precedence: environment variables (loaded from .env when python-dotenv is
installed) > config/config.ini [lottocheck] section > built-in defaults.
"""

import configparser
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

# Load environment variables from .env if present
load_dotenv()


CONFIG_SECTION = "lottocheck"

DEFAULTS = {
    "request_timeout": "30",
    "user_agent": "Mozilla/5.0 (compatible; Lottery-API/1.0)",
    "megamillions_base_url": "https://www.megamillions.com/cmspages/utilservice.asmx",
    "powerball_base_url": "https://www.powerball.com",
    "default_jackpot_display": "$500 Million",
    "log_level": "INFO",
}

ENV_VARS = {
    "request_timeout": "LOTTOCHECK_TIMEOUT",
    "user_agent": "LOTTOCHECK_USER_AGENT",
    "megamillions_base_url": "LOTTOCHECK_MEGAMILLIONS_URL",
    "powerball_base_url": "LOTTOCHECK_POWERBALL_URL",
    "default_jackpot_display": "LOTTOCHECK_DEFAULT_JACKPOT",
    "log_level": "LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    request_timeout: float
    user_agent: str
    megamillions_base_url: str
    powerball_base_url: str
    default_jackpot_display: str
    log_level: str


_settings: Optional[Settings] = None


def get_config_path() -> str:
    """Path of the optional ini file, overridable with LOTTOCHECK_CONFIG."""
    override = os.getenv("LOTTOCHECK_CONFIG")
    if override:
        return override
    current_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(current_dir, '..', 'config', 'config.ini')


def _read_ini(path: str) -> dict:
    config = configparser.ConfigParser(interpolation=None)
    try:
        config.read(path)
    except (configparser.Error, OSError) as e:
        logger.error(f"Error reading config file {path}: {e}. Using defaults.")
        return {}

    if not config.has_section(CONFIG_SECTION):
        logger.debug(f"Config section '{CONFIG_SECTION}' not found in {path}, using defaults")
        return {}
    return dict(config[CONFIG_SECTION])


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        timeout = -1.0
    if timeout <= 0:
        logger.warning(f"Invalid request timeout '{raw}', using default {DEFAULTS['request_timeout']}s")
        return float(DEFAULTS["request_timeout"])
    return timeout


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Build Settings from environment, ini file and defaults.

    Args:
        config_path: Optional ini file path (defaults to config/config.ini)

    Returns:
        Settings: resolved settings
    """
    values = dict(DEFAULTS)
    values.update(_read_ini(config_path or get_config_path()))

    for key, env_var in ENV_VARS.items():
        env_value = os.getenv(env_var)
        if env_value:
            values[key] = env_value

    return Settings(
        request_timeout=_parse_timeout(values["request_timeout"]),
        user_agent=values["user_agent"],
        megamillions_base_url=values["megamillions_base_url"].rstrip("/"),
        powerball_base_url=values["powerball_base_url"].rstrip("/"),
        default_jackpot_display=values["default_jackpot_display"],
        log_level=values["log_level"].upper(),
    )


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings

    if _settings is None:
        _settings = load_settings()
        logger.debug(
            f"Settings loaded (timeout={_settings.request_timeout}s, "
            f"powerball={_settings.powerball_base_url}, "
            f"megamillions={_settings.megamillions_base_url})"
        )
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call reloads them."""
    global _settings
    _settings = None
