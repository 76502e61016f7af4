import importlib
import json
import sys
from pathlib import Path
from types import SimpleNamespace

from typer.testing import CliRunner

import cargo_menu.core.metadata as metadata_module

cli_app_module = importlib.import_module("cargo_menu.cli.app")

runner = CliRunner()


def _fake_metadata(monkeypatch, *, stdout: str = "", returncode: int = 0) -> None:
    def run(cmd, **kwargs):
        return SimpleNamespace(stdout=stdout.encode(), stderr=b"error: not a cargo project", returncode=returncode)

    monkeypatch.setattr(metadata_module.subprocess, "run", run)


def test_exec_dry_run_moves_nocapture_behind_separator() -> None:
    result = runner.invoke(cli_app_module.app, ["exec", "test", "--release", "--nocapture", "--lib", "--dry-run"])
    assert result.exit_code == 0
    assert result.output.strip() == "cargo test --release --lib -- --nocapture"


def test_exec_dry_run_with_passthrough_and_cargo_path() -> None:
    result = runner.invoke(
        cli_app_module.app,
        ["--cargo", "/opt/cargo", "exec", "run", "--bin=server", "--pass", "--port 8080", "--dry-run"],
    )
    assert result.exit_code == 0
    assert result.output.strip() == "/opt/cargo run --bin=server -- --port 8080"


def test_custom_dry_run_keeps_explicit_separator() -> None:
    result = runner.invoke(cli_app_module.app, ["custom", "cargo test --release -- --nocapture", "--dry-run"])
    assert result.exit_code == 0
    assert result.output.strip() == "cargo test --release -- --nocapture"


def test_custom_rejects_empty_line() -> None:
    result = runner.invoke(cli_app_module.app, ["custom", "  "])
    assert result.exit_code == 1
    assert "missing cargo subcommand" in result.output


def test_exec_runs_command_and_propagates_exit_code(tmp_path: Path) -> None:
    fake_cargo = f'"{sys.executable}" -c "import sys; print(sys.argv[1:]); sys.exit(3)"'
    result = runner.invoke(
        cli_app_module.app,
        ["--cargo", fake_cargo, "--project", str(tmp_path), "exec", "build", "--release"],
    )
    assert result.exit_code == 3
    assert "['build', '--release']" in result.output


def test_invalid_naming_is_reported() -> None:
    result = runner.invoke(cli_app_module.app, ["--naming", "per-buffer", "show"])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_targets_and_features(monkeypatch) -> None:
    document = {
        "packages": [
            {
                "targets": [{"kind": ["bin"], "name": "server"}, {"kind": ["example"], "name": "echo"}],
                "features": {"tls": []},
            }
        ]
    }
    _fake_metadata(monkeypatch, stdout=json.dumps(document))

    bins = runner.invoke(cli_app_module.app, ["targets"])
    examples = runner.invoke(cli_app_module.app, ["targets", "--kind", "example"])
    features = runner.invoke(cli_app_module.app, ["features"])

    assert bins.exit_code == 0
    assert bins.output.strip() == "server"
    assert examples.output.strip() == "echo"
    assert features.output.strip() == "tls"


def test_targets_degrade_to_none_outside_a_project(monkeypatch) -> None:
    _fake_metadata(monkeypatch, returncode=101)
    result = runner.invoke(cli_app_module.app, ["targets"])
    assert result.exit_code == 0
    assert "(none)" in result.output


def test_targets_strict_mode_fails(monkeypatch) -> None:
    monkeypatch.setenv("CARGO_MENU_STRICT_METADATA", "true")
    _fake_metadata(monkeypatch, returncode=101)
    result = runner.invoke(cli_app_module.app, ["features"])
    assert result.exit_code == 1
    assert "exit=101" in result.output


def test_targets_unknown_kind() -> None:
    result = runner.invoke(cli_app_module.app, ["targets", "--kind", "proc-macro"])
    assert result.exit_code == 1
    assert "unknown target kind" in result.output


def test_show_menu() -> None:
    result = runner.invoke(cli_app_module.app, ["show", "test"])
    assert result.exit_code == 0
    assert "--nocapture" in result.output
    assert "Test name filter" in result.output


def test_show_unknown_menu() -> None:
    result = runner.invoke(cli_app_module.app, ["show", "publish"])
    assert result.exit_code == 1


def test_no_subcommand_opens_interactive_menu(monkeypatch, tmp_path: Path) -> None:
    called = {"run": False}

    class _FakeInteractive:
        def __init__(self, settings, *, renderer=None):
            assert settings.project_state().root == tmp_path.resolve()

        def run(self) -> None:
            called["run"] = True

    monkeypatch.setattr(cli_app_module, "InteractiveMenu", _FakeInteractive)

    result = runner.invoke(cli_app_module.app, ["--project", str(tmp_path)])
    assert result.exit_code == 0
    assert called["run"] is True
