import pytest

from cargo_menu.core.args import SeparatorPolicy
from cargo_menu.core.commands import assemble_command, parse_command_line, parse_command_words
from cargo_menu.errors import UsageError


def test_assemble_test_command_with_separator() -> None:
    assert assemble_command("test", ["--release", "--", "--nocapture"]) == "cargo test --release -- --nocapture"


def test_assemble_moves_post_separator_flags() -> None:
    assert (
        assemble_command("test", ["--nocapture", "--release", "--lib"])
        == "cargo test --release --lib -- --nocapture"
    )


def test_assemble_without_args_has_no_trailing_space() -> None:
    assert assemble_command("build", []) == "cargo build"


def test_assemble_uses_configured_cargo_path() -> None:
    command = assemble_command("check", ["--workspace"], cargo_path="/opt/rust/bin/cargo")
    assert command == "/opt/rust/bin/cargo check --workspace"


def test_assemble_passes_free_text_as_typed() -> None:
    command = assemble_command("run", ["--bin=server", "--", "--port 8080"])
    assert command == "cargo run --bin=server -- --port 8080"


def test_assemble_with_custom_policy() -> None:
    policy = SeparatorPolicy().extended({"test": ["--exact"]})
    assert assemble_command("test", ["--exact", "parse"], policy=policy) == "cargo test parse -- --exact"


def test_parse_command_line_strips_leading_cargo() -> None:
    assert parse_command_line("cargo test --release -- --nocapture") == (
        "test",
        ["--release", "--", "--nocapture"],
    )
    assert parse_command_line("build --features 'a b'") == ("build", ["--features", "a b"])


def test_parse_command_line_requires_subcommand() -> None:
    with pytest.raises(UsageError):
        parse_command_line("   ")
    with pytest.raises(UsageError):
        parse_command_line("cargo")


def test_parse_command_words_rejects_unbalanced_quotes() -> None:
    with pytest.raises(UsageError):
        parse_command_words('run -- "unterminated')
