"""CLI settings — flags and ``ENVTAG_*`` env vars in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``ENVTAG_*`` prefix
  3. Code defaults

These settings only steer the CLI; the records being bound never read them.
"""

from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class EnvtagSettings(BaseSettings):
    """Unified settings for the envtag CLI, frozen after construction."""

    model_config = {
        "frozen": True,
        "env_prefix": "ENVTAG_",
    }

    json_output: bool = False
    verbose: bool = False
    log_json: bool = False
    fail_fast: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Flags and environment only; no dotenv or secrets files."""
        return (init_settings, env_settings)

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> EnvtagSettings:
        """Construct settings from a CLI invocation.

        Flags left at their Click default (False) do not mask env vars.
        """
        overrides = {name: value for name, value in cli_flags.items() if value}
        return cls(**overrides)
