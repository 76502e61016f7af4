from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    for name in (
        "CARGO_MENU_CARGO_PATH",
        "CARGO_MENU_PROJECT_DIR",
        "CARGO_MENU_OUTPUT_NAMING",
        "CARGO_MENU_POST_SEPARATOR_FLAGS",
        "CARGO_MENU_STRICT_METADATA",
        "CARGO_MENU_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of settings loading.
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))
