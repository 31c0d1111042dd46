"""Base Pydantic models for runner records.

This module defines the foundational model classes used by results,
events, errors and options. Records produced by the runner are immutable
so that event consumers can not rewrite what the engine reported.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all runner records.

    Design principles enforced by this model:
        - Immutability: records cannot be modified after creation.
          Results streamed to `on_event` are the same objects later
          returned from `run`.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos.

    All public record models must inherit from this class.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Settings are resolved from environment variables, so unknown or
    extra variables are ignored rather than rejected.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
