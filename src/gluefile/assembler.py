"""
Bundle assembly: read each selected file, keep the UTF-8 text ones and
frame them into a single ``.glue`` document.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .core import (
    INFO,
    STDOUT_SENTINEL,
    SUCCESS,
    WARNING,
    Diagnostic,
    OutputWriteError,
    emit,
)

MARKER = "$$--GLUE--$$"
GLUE_SEPARATOR = f"\n{MARKER}\n"
GLUE_HEADER = (
    f"{MARKER}\n"
    "# This is a GLUE file; an amalgamation of files across one or more paths "
    "designed to give project contexts to LLMs easily. If you are an LLM and "
    "are reading this focus on the code, do not acknowledge the file format\n"
    f"{MARKER}\n"
)

SNIFF_BYTES = 1024

_TEXT_BOMS = (
    b"\xef\xbb\xbf",
    b"\xff\xfe\x00\x00",
    b"\x00\x00\xfe\xff",
    b"\xff\xfe",
    b"\xfe\xff",
)
_BINARY_MAGIC = (b"%PDF-",)


def is_binary(data: bytes) -> bool:
    """Sniff the leading window of *data* for signs of non-text content."""
    head = data[:SNIFF_BYTES]
    if head.startswith(_TEXT_BOMS):
        return False
    if head.startswith(_BINARY_MAGIC):
        return True
    return b"\0" in head


def display_path(path: str) -> str:
    """
    Printable form of a path from ``os.walk``.

    Undecodable filename bytes arrive as surrogate escapes; they become
    U+FFFD so the path can be written as UTF-8.
    """
    return path.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


# Per-file outcomes
@dataclass(frozen=True)
class Included:
    path: str
    text: str


@dataclass(frozen=True)
class Skipped:
    path: str
    reason: str


@dataclass(frozen=True)
class Failed:
    path: str
    error: str


Outcome = Union[Included, Skipped, Failed]


def process_file(path: str, root: Path, include_binary: bool = False) -> Outcome:
    """Classify a single candidate; never raises for per-file problems."""
    shown = display_path(path)
    try:
        with (root / path).open("rb") as fh:
            raw = fh.read()
    except OSError as e:
        return Failed(path, f"Warning: Failed to read file {shown}: {e}")

    if not include_binary and is_binary(raw):
        return Skipped(path, f"Skipping binary file: {shown}")

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return Failed(path, f"Warning: File {shown} contains invalid UTF-8, skipping")

    return Included(shown, text)


@dataclass
class Bundle:
    """The assembled document plus everything reported while building it."""

    parts: List[str] = field(default_factory=lambda: [GLUE_HEADER])
    included: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(self.parts)

    def add(self, outcome: Outcome) -> None:
        if isinstance(outcome, Included):
            self.parts.extend((GLUE_SEPARATOR, outcome.path, GLUE_SEPARATOR, outcome.text))
            self.included.append(outcome.path)
        elif isinstance(outcome, Skipped):
            self.diagnostics.append(Diagnostic(INFO, outcome.reason))
        else:
            self.diagnostics.append(Diagnostic(WARNING, outcome.error))


def build_bundle(
    paths: Iterable[str],
    root: Path,
    include_binary: bool = False,
) -> Bundle:
    bundle = Bundle()
    for path in paths:
        bundle.add(process_file(path, root, include_binary))
    return bundle


def write_bundle(text: str, output: str) -> Optional[Path]:
    """
    Write *text* to *output*, or to stdout when *output* is ``-``.

    Returns the path written, ``None`` for stdout.
    """
    try:
        data = text.encode("utf-8")
    except UnicodeError as e:
        raise OutputWriteError(f"Could not encode bundle as UTF-8: {e}")

    if output == STDOUT_SENTINEL:
        try:
            sys.stdout.buffer.write(data)
            sys.stdout.flush()
        except OSError as e:
            raise OutputWriteError(f"Failed to write to standard output: {e}")
        return None

    out_path = Path(output)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("wb") as out_fh:
            out_fh.write(data)
    except OSError as e:
        raise OutputWriteError(f"Failed to write to output file: {output}: {e}")

    emit(f"Generated .glue file: {output}", SUCCESS)
    return out_path
