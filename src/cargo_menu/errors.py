"""Application-level exception types for cargo-menu."""

from __future__ import annotations


class CargoMenuError(Exception):
    """Base exception for cargo-menu."""


class ConfigurationError(CargoMenuError):
    """Raised when settings cannot be turned into a usable configuration."""


class UsageError(CargoMenuError):
    """Raised when a menu is driven with input it cannot accept."""


class UnknownKeyError(UsageError):
    """Raised when a key is not bound in the current menu."""


class MetadataError(CargoMenuError):
    """Base exception for `cargo metadata` failures."""


class CargoNotFoundError(MetadataError):
    """Raised when the configured cargo executable cannot be started."""


class MetadataCommandError(MetadataError):
    """Raised when `cargo metadata` exits with a non-zero status."""

    def __init__(self, returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "(no output)"
        super().__init__(f"exit={returncode}: {detail}")


class MetadataParseError(MetadataError):
    """Raised when `cargo metadata` output is not a valid metadata document."""
