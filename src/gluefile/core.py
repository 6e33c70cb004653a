"""
Shared types for the glue pipeline: exceptions, run configuration and
diagnostic output.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from colorama import Fore, Style, just_fix_windows_console

just_fix_windows_console()

STDOUT_SENTINEL = "-"
DEFAULT_OUTPUT = "output.glue"


# Exceptions
class GlueError(Exception):
    """Base exception for glue errors."""


class InvalidPatternError(GlueError):
    """Raised when an include or exclude glob does not compile."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern '{pattern}': {reason}")


class TraversalError(GlueError):
    """Raised when the directory walk itself fails."""


class ConfigFileError(GlueError):
    """Raised when an exclude-patterns file cannot be read."""


class OutputWriteError(GlueError):
    """Raised when the bundle cannot be written to its destination."""


# Configuration
@dataclass(frozen=True)
class TraversalConfig:
    root: Path
    honor_ignore_files: bool = True
    show_hidden: bool = True


@dataclass(frozen=True)
class GlueConfig:
    """Validated run configuration handed over by the command line."""

    patterns: Tuple[str, ...]
    excludes: Tuple[str, ...] = ()
    output: str = DEFAULT_OUTPUT
    root: Path = field(default_factory=lambda: Path("."))
    no_ignore: bool = False
    include_binary: bool = False
    show_hidden: bool = True
    verbose: bool = False

    def traversal(self) -> TraversalConfig:
        return TraversalConfig(
            root=self.root,
            honor_ignore_files=not self.no_ignore,
            show_hidden=self.show_hidden,
        )


# Diagnostics
WARNING = "warning"
INFO = "info"
SUCCESS = "success"
ERROR = "error"

_COLORS = {
    WARNING: Fore.YELLOW,
    INFO: Fore.CYAN,
    SUCCESS: Fore.GREEN,
    ERROR: Fore.RED,
}


@dataclass(frozen=True)
class Diagnostic:
    level: str
    message: str


def emit(message: str, level: str = INFO) -> None:
    """Write one ``[glue]`` line to stderr, coloured when stderr is a terminal."""
    line = f"[glue] {message}"
    stream = sys.stderr
    color = _COLORS.get(level)
    if color and stream.isatty():
        line = color + line + Style.RESET_ALL
    print(line, file=stream)


def warn(message: str) -> None:
    emit(message, WARNING)


def emit_all(diagnostics: List[Diagnostic]) -> None:
    for diag in diagnostics:
        emit(diag.message, diag.level)


# Extra exclude patterns
def load_extra_patterns(config_path: Path) -> List[str]:
    """Read newline-separated exclude globs from *config_path*."""
    if not config_path.exists():
        raise ConfigFileError(f"Config file '{config_path}' does not exist")
    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            return [
                ln.strip()
                for ln in fh
                if ln.strip() and not ln.lstrip().startswith("#")
            ]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read config file '{config_path}': {e}")


def resolve_output(output: str) -> Optional[Path]:
    """Absolute path of the output file, or ``None`` for stdout."""
    if output == STDOUT_SENTINEL:
        return None
    try:
        return Path(output).resolve()
    except (OSError, RuntimeError):
        return None
