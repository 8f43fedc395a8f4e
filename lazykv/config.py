"""Engine settings loaded from the environment, plus logging setup."""

import os
import logging
from typing import Optional

from lazykv.models import EngineSettings

logger = logging.getLogger(__name__)

ENV_PREFIX = "LAZYKV_"

_settings: Optional[EngineSettings] = None


def _env_flag(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings_from_env(environ=None) -> EngineSettings:
    """Build settings from LAZYKV_* environment variables"""
    environ = os.environ if environ is None else environ
    values = {}

    if f"{ENV_PREFIX}LOG_LEVEL" in environ:
        values["log_level"] = environ[f"{ENV_PREFIX}LOG_LEVEL"]
    if environ.get(f"{ENV_PREFIX}SHUFFLE_SEED", "").strip():
        values["shuffle_seed"] = environ[f"{ENV_PREFIX}SHUFFLE_SEED"]
    if f"{ENV_PREFIX}STRICT_CYCLE" in environ:
        values["strict_cycle"] = _env_flag(environ[f"{ENV_PREFIX}STRICT_CYCLE"])

    return EngineSettings(**values)


def get_settings() -> EngineSettings:
    """Return the active settings, reading the environment on first use"""
    global _settings
    if _settings is None:
        _settings = load_settings_from_env()
    return _settings


def configure(settings: Optional[EngineSettings] = None, **overrides) -> EngineSettings:
    """Replace the active settings and apply their logging level"""
    global _settings
    base = settings or get_settings()
    if overrides:
        base = base.model_copy(update=overrides)
        # model_copy skips validation
        base = EngineSettings(**base.model_dump())
    _settings = base
    configure_logging(_settings.log_level)
    logger.debug(f"Engine configured: {_settings.model_dump()}")
    return _settings


def reset_settings():
    """Forget the active settings; the next get_settings() re-reads the environment"""
    global _settings
    _settings = None


def configure_logging(level: str = "WARNING"):
    """Configure root logging and the lazykv logger level"""
    logging.basicConfig(level=level)
    logging.getLogger("lazykv").setLevel(level)
