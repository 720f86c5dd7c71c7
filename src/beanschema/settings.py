"""Settings for beanschema.

``BeanSchemaSettings`` holds the few knobs the binder exposes: the log level,
JSON log rendering, and the accessor naming convention used when callers do
not pass one explicitly.

Features:
    - **Pydantic validation:** Type-checked when settings are loaded
    - **Environment-driven:** ``BEANSCHEMA_`` prefixed env vars and ``.env`` files
    - **Extra ignore:** Unknown env vars don't cause startup failures

Examples:
    >>> import os
    >>> os.environ["BEANSCHEMA_NAMING_CONVENTION"] = "snake"
    >>> BeanSchemaSettings().naming_convention
    'snake'

Tags:
    settings, configuration, pydantic, environment, beanschema

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BeanSchemaSettings(BaseSettings):
    """Settings shared by every beanschema entry point.

    Fields
    ──────
    log_level          : Structlog log level
    log_json           : Render logs as JSON (None → auto-detect from tty)
    naming_convention  : Default accessor convention (bean, snake, annotated)
    """

    model_config = SettingsConfigDict(
        env_prefix="BEANSCHEMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    # ── Binding ──────────────────────────────────────────────────
    naming_convention: Literal["bean", "snake", "annotated"] = Field(
        default="bean",
        description="Accessor naming convention used when none is passed explicitly",
    )


@lru_cache(maxsize=1)
def get_settings() -> BeanSchemaSettings:
    """Return the process-wide settings instance."""
    return BeanSchemaSettings()


def default_convention():
    """Build the accessor convention named by the current settings."""
    from beanschema.conventions import get_convention

    return get_convention(get_settings().naming_convention)


__all__ = ["BeanSchemaSettings", "get_settings", "default_convention"]
