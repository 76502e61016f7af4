"""Declarative menu table: command -> flag groups -> flags."""

from __future__ import annotations

from dataclasses import dataclass, field

from cargo_menu.core.args import SEPARATOR
from cargo_menu.errors import UnknownKeyError, UsageError


@dataclass(frozen=True)
class FlagSpec:
    """One selectable entry in a flag group.

    `argument` decides how the selection becomes tokens:
    a switch such as `--release`, an option ending in `=` that takes a value,
    `""` for positional free text, or `--` for text passed to the program.
    """

    key: str
    description: str
    argument: str
    completion: str | None = None
    multi_value: bool = False
    choices: tuple[str, ...] = ()

    @property
    def takes_value(self) -> bool:
        return self.is_option or self.is_positional or self.is_passthrough

    @property
    def is_option(self) -> bool:
        return self.argument.endswith("=")

    @property
    def is_positional(self) -> bool:
        return self.argument == ""

    @property
    def is_passthrough(self) -> bool:
        return self.argument == SEPARATOR

    def render(self, value: str | list[str] | None = None) -> list[str]:
        if not self.takes_value:
            return [self.argument]
        if value is None:
            raise UsageError(f"{self.key} requires a value")
        text = ",".join(value) if isinstance(value, list) else value
        if self.is_option:
            return [f"{self.argument}{text}"]
        if self.is_passthrough:
            return [SEPARATOR, text]
        return [text]


@dataclass(frozen=True)
class FlagGroup:
    title: str
    flags: tuple[FlagSpec, ...]


@dataclass(frozen=True)
class MenuAction:
    """A key that runs the menu, e.g. `b` for build or `o` for `doc --open`."""

    key: str
    description: str
    subcommand: str
    extra_args: tuple[str, ...] = ()


@dataclass(frozen=True)
class CommandMenu:
    name: str
    key: str
    description: str
    groups: tuple[FlagGroup, ...] = ()
    actions: tuple[MenuAction, ...] = field(default_factory=tuple)

    def flags(self) -> list[FlagSpec]:
        return [flag for group in self.groups for flag in group.flags]

    def flag(self, key: str) -> FlagSpec:
        for flag in self.flags():
            if flag.key == key:
                return flag
        raise UnknownKeyError(f"no flag bound to {key!r} in {self.name}")

    def action(self, key: str) -> MenuAction:
        for action in self.actions:
            if action.key == key:
                return action
        raise UnknownKeyError(f"no action bound to {key!r} in {self.name}")

    def keys(self) -> list[str]:
        return [flag.key for flag in self.flags()] + [action.key for action in self.actions]


TARGET_SELECTION = FlagGroup(
    "Target selection",
    (
        FlagSpec("-l", "Library", "--lib"),
        FlagSpec("-b", "Binary", "--bin=", completion="bin"),
        FlagSpec("-B", "All binaries", "--bins"),
        FlagSpec("-e", "Example", "--example=", completion="example"),
        FlagSpec("-E", "All examples", "--examples"),
        FlagSpec("-t", "Test target", "--test=", completion="test"),
        FlagSpec("-T", "All test targets", "--tests"),
        FlagSpec("-n", "Benchmark", "--bench=", completion="bench"),
        FlagSpec("-N", "All benchmarks", "--benches"),
        FlagSpec("-a", "All targets", "--all-targets"),
        FlagSpec("-w", "Whole workspace", "--workspace"),
    ),
)

FEATURE_SELECTION = FlagGroup(
    "Feature selection",
    (
        FlagSpec("-f", "Features", "--features=", completion="feature", multi_value=True),
        FlagSpec("-F", "All features", "--all-features"),
        FlagSpec("-d", "No default features", "--no-default-features"),
    ),
)

COMPILATION_MODE = FlagGroup(
    "Compilation mode",
    (
        FlagSpec("-r", "Release", "--release"),
        FlagSpec("-p", "Profile", "--profile=", choices=("dev", "release", "test", "bench")),
        FlagSpec("-j", "Jobs", "--jobs="),
        FlagSpec("-k", "Keep going", "--keep-going"),
    ),
)

MANIFEST_MODE = FlagGroup(
    "Manifest options",
    (
        FlagSpec("-L", "Locked", "--locked"),
        FlagSpec("-Z", "Frozen", "--frozen"),
        FlagSpec("-O", "Offline", "--offline"),
    ),
)

BUILD_GROUPS = (TARGET_SELECTION, FEATURE_SELECTION, COMPILATION_MODE, MANIFEST_MODE)

COMMAND_MENUS: dict[str, CommandMenu] = {
    "build": CommandMenu(
        "build",
        "b",
        "Build",
        BUILD_GROUPS,
        (MenuAction("b", "Build", "build"),),
    ),
    "check": CommandMenu(
        "check",
        "c",
        "Check",
        BUILD_GROUPS,
        (MenuAction("c", "Check", "check"),),
    ),
    "clean": CommandMenu(
        "clean",
        "C",
        "Clean",
        (
            FlagGroup(
                "Clean options",
                (
                    FlagSpec("-r", "Release artifacts only", "--release"),
                    FlagSpec("-D", "Documentation only", "--doc"),
                    FlagSpec("-n", "Dry run", "--dry-run"),
                ),
            ),
            MANIFEST_MODE,
        ),
        (MenuAction("C", "Clean", "clean"),),
    ),
    "clippy": CommandMenu(
        "clippy",
        "l",
        "Clippy",
        (
            *BUILD_GROUPS,
            FlagGroup(
                "Lints",
                (
                    FlagSpec("-W", "Deny warnings", "-Dwarnings"),
                    FlagSpec("-P", "Pedantic lints", "-Wclippy::pedantic"),
                ),
            ),
        ),
        (
            MenuAction("l", "Clippy", "clippy"),
            MenuAction("f", "Fix", "clippy", ("--fix",)),
            MenuAction("F", "Fix (allow dirty and staged)", "clippy", ("--fix", "--allow-dirty", "--allow-staged")),
        ),
    ),
    "doc": CommandMenu(
        "doc",
        "d",
        "Documentation",
        (
            FlagGroup(
                "Documentation options",
                (
                    FlagSpec("-D", "No dependencies", "--no-deps"),
                    FlagSpec("-P", "Document private items", "--document-private-items"),
                ),
            ),
            FEATURE_SELECTION,
            COMPILATION_MODE,
            MANIFEST_MODE,
        ),
        (
            MenuAction("d", "Doc", "doc"),
            MenuAction("o", "Doc and open", "doc", ("--open",)),
        ),
    ),
    "fmt": CommandMenu(
        "fmt",
        "f",
        "Format",
        (
            FlagGroup(
                "Format options",
                (
                    FlagSpec("-c", "Check only", "--check"),
                    FlagSpec("-a", "All packages", "--all"),
                ),
            ),
        ),
        (MenuAction("f", "Format", "fmt"),),
    ),
    "run": CommandMenu(
        "run",
        "r",
        "Run",
        (
            FlagGroup(
                "Target selection",
                (
                    FlagSpec("-b", "Binary", "--bin=", completion="bin"),
                    FlagSpec("-e", "Example", "--example=", completion="example"),
                ),
            ),
            FEATURE_SELECTION,
            COMPILATION_MODE,
            MANIFEST_MODE,
            FlagGroup("Arguments", (FlagSpec("--", "Binary arguments", SEPARATOR),)),
        ),
        (MenuAction("r", "Run", "run"),),
    ),
    "test": CommandMenu(
        "test",
        "t",
        "Test",
        (
            *BUILD_GROUPS,
            FlagGroup(
                "Test options",
                (
                    FlagSpec("-D", "Doc tests only", "--doc"),
                    FlagSpec("-x", "No fail fast", "--no-fail-fast"),
                    FlagSpec("-s", "Show output", "--nocapture"),
                    FlagSpec("-i", "Include ignored", "--include-ignored"),
                    FlagSpec("-I", "Ignored only", "--ignored"),
                    FlagSpec("-m", "Test name filter", ""),
                ),
            ),
        ),
        (MenuAction("t", "Test", "test"),),
    ),
}

# Free-form entry point; the typed line becomes the subcommand and its arguments.
CUSTOM_COMMAND = CommandMenu("custom", "x", "Custom command")


def menu_by_key(key: str) -> CommandMenu:
    if key == CUSTOM_COMMAND.key:
        return CUSTOM_COMMAND
    for menu in COMMAND_MENUS.values():
        if menu.key == key:
            return menu
    raise UnknownKeyError(f"no command bound to {key!r}")


def menu_by_name(name: str) -> CommandMenu:
    if name == CUSTOM_COMMAND.name:
        return CUSTOM_COMMAND
    try:
        return COMMAND_MENUS[name]
    except KeyError:
        raise UnknownKeyError(f"unknown command {name!r}") from None
