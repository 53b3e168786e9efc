"""Configuration via pydantic-settings, overridable from the environment."""
from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NamePolicy = Literal["truncate", "reject"]
OverflowPolicy = Literal["fail", "saturate"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

INT32_MAX = 2**31 - 1


class Settings(BaseSettings):
    """samplestat configuration, loaded from env vars.

    The CLI also reads a .env file (``Settings(_env_file=".env")``); library
    callers get fixed defaults regardless of the working directory.
    """

    model_config = SettingsConfigDict(env_prefix="SAMPLESTAT_")

    separator: str = Field(default=",", description="Single-character field separator")
    line_capacity: int = Field(default=256, ge=2, description="Line buffer size, including terminator")
    name_capacity: int = Field(default=50, ge=2, description="Name buffer size, including terminator")
    name_policy: NamePolicy = Field(default="truncate", description="What to do with over-long names")
    overflow: OverflowPolicy = Field(default="fail", description="Integer overflow policy (fail|saturate)")
    integer_max: int = Field(default=INT32_MAX, ge=0, description="Largest accepted age or height")
    log_level: LogLevel = Field(default="WARNING", description="Log level used by the CLI")

    @field_validator("separator")
    @classmethod
    def separator_is_single_character(cls, value: str) -> str:
        if len(value) != 1 or value == "\n":
            raise ValueError("separator must be a single character other than newline")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def log_level_upper(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
