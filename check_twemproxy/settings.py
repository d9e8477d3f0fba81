# filename: check_twemproxy/settings.py
# -*- coding: utf-8 -*-
"""
Settings for the twemproxy check.

Two layers:

* ``Settings`` reads process-wide knobs from the environment via
  ``pydantic-settings`` (prefix ``TWEMPROXY_CHECK_``): where snapshots live,
  how old they may get, the default fetch timeout and transport, log level.
* ``CheckConfig`` holds the values of one invocation, assembled from the
  command line with the settings as fallback.
"""
from __future__ import annotations

import tempfile
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = 22222
DEFAULT_WARNING = 0
DEFAULT_CRITICAL = 10

Transport = Literal["tcp", "http"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TWEMPROXY_CHECK_", case_sensitive=False, extra="ignore")

    STATE_DIR: str = Field(default_factory=tempfile.gettempdir)
    STALE_AFTER_SECONDS: int = Field(default=300, ge=0)
    FETCH_TIMEOUT: float = Field(default=5.0, gt=0)
    TRANSPORT: Transport = "tcp"
    LOG_LEVEL: str = "WARNING"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper(cls, v: str) -> str:
        return (v or "WARNING").strip().upper()


class CheckConfig(BaseModel):
    host: str = Field(min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    warning: int = Field(default=DEFAULT_WARNING, ge=0)
    critical: int = Field(default=DEFAULT_CRITICAL, ge=0)
    verbose: bool = False
    timeout: float = Field(default=5.0, gt=0)
    transport: Transport = "tcp"

    @field_validator("host")
    @classmethod
    def _strip_host(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("host must not be empty")
        return v


def load_settings() -> Settings:
    return Settings()
