"""Configuration management for cargo-menu."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cargo_menu.core.args import SeparatorPolicy
from cargo_menu.core.types import ProjectState
from cargo_menu.errors import ConfigurationError
from cargo_menu.logging_utils import configure_logging
from cargo_menu.runner import NAMING_STRATEGIES


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CARGO_MENU_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cargo_path: str = Field(default="cargo", description="Path to the cargo executable")
    project_dir: Path | None = Field(default=None, description="Project root; defaults to the working directory")
    output_naming: str = Field(default="shared", description="Output surface naming: shared, command or project")
    post_separator_flags: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Extra flags per subcommand that must follow `--`",
    )
    strict_metadata: bool = Field(default=False, description="Raise on cargo metadata failures instead of ignoring")
    log_level: str = Field(default="WARNING", description="Log level")

    @field_validator("output_naming")
    @classmethod
    def _known_naming(cls, value: str) -> str:
        if value not in NAMING_STRATEGIES:
            known = ", ".join(sorted(NAMING_STRATEGIES))
            raise ValueError(f"expected one of: {known}")
        return value

    @field_validator("cargo_path")
    @classmethod
    def _non_empty_cargo(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("cargo path must not be empty")
        return value.strip()

    def separator_policy(self) -> SeparatorPolicy:
        return SeparatorPolicy().extended(self.post_separator_flags)

    def project_state(self) -> ProjectState:
        root = (self.project_dir or Path.cwd()).expanduser().resolve()
        return ProjectState(root=root, cargo_path=self.cargo_path)


def get_settings(**overrides: Any) -> Settings:
    """Build settings from the environment and `.env`, with explicit overrides on top.

    Raises:
        ConfigurationError: when a value fails validation.
    """

    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        settings = Settings(**values)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc

    configure_logging(settings.log_level)
    return settings
