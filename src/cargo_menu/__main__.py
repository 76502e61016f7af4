"""Entry point for running cargo-menu as a module."""

from cargo_menu.cli.app import app

if __name__ == "__main__":
    app()
