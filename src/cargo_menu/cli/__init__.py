"""Terminal host for cargo-menu."""

from cargo_menu.cli.app import app

__all__ = ["app"]
