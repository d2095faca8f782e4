"""Process-wide settings loaded once at startup.

Values come from the environment, optionally seeded from a ``.env`` file at
the project root. Nothing else in the package reads the environment; the
resulting :class:`Settings` is passed explicitly to whoever needs it.
"""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import dotenv_values

from image_translator.errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_API_KEY = "GEMINI_API_KEY"
ENV_MODEL = "GEMINI_MODEL"
ENV_BASE_URL = "GEMINI_API_BASE_URL"
ENV_TIMEOUT = "IMAGE_TRANSLATOR_TIMEOUT"
ENV_SECRET_KEY = "IMAGE_TRANSLATOR_SECRET_KEY"
ENV_LOG_LEVEL = "IMAGE_TRANSLATOR_LOG_LEVEL"

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_TIMEOUT = 60.0

_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
DOTENV_PATH = os.path.join(_PROJECT_ROOT, ".env")


@dataclass(frozen=True)
class Settings:
    api_key: str = field(repr=False)
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    request_timeout: Optional[float] = DEFAULT_TIMEOUT
    secret_key: str = field(default_factory=lambda: secrets.token_hex(32), repr=False)
    log_level: str = "INFO"


def _parse_timeout(raw: str | None) -> Optional[float]:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{ENV_TIMEOUT} must be a number of seconds, got '{raw}'.")
    return None if value <= 0 else value


def load_settings(
    environ: Mapping[str, str] | None = None,
    dotenv_path: str | None = DOTENV_PATH,
) -> Settings:
    """Build :class:`Settings` from the environment.

    Doxygen:
    - @param environ: Mapping to read instead of ``os.environ``.
    - @param dotenv_path: ``.env`` file whose values fill in keys missing
      from ``environ``; None skips it.
    - @return: Frozen settings instance.
    - @throws ConfigurationError: If the API key is missing or a value is malformed.
    """
    values: dict[str, str] = {}
    if dotenv_path and os.path.exists(dotenv_path):
        values.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
        logger.debug("Loaded .env from %s", dotenv_path)
    values.update(os.environ if environ is None else environ)

    api_key = (values.get(ENV_API_KEY) or "").strip()
    if not api_key:
        raise ConfigurationError(f"{ENV_API_KEY} is not set.")

    secret_key = (values.get(ENV_SECRET_KEY) or "").strip()
    if not secret_key:
        logger.warning("%s is not set; sessions will not survive a restart.", ENV_SECRET_KEY)
        secret_key = secrets.token_hex(32)

    return Settings(
        api_key=api_key,
        model=(values.get(ENV_MODEL) or "").strip() or DEFAULT_MODEL,
        base_url=((values.get(ENV_BASE_URL) or "").strip() or DEFAULT_BASE_URL).rstrip("/"),
        request_timeout=_parse_timeout(values.get(ENV_TIMEOUT)),
        secret_key=secret_key,
        log_level=(values.get(ENV_LOG_LEVEL) or "").strip().upper() or "INFO",
    )


__all__ = [
    "Settings",
    "load_settings",
    "ENV_API_KEY",
    "DEFAULT_MODEL",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
]
