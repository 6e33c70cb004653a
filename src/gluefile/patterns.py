"""
Glob patterns for file selection.

Every pattern is matched two independent ways and a path matches when
either one does:

* structured: a glob applied segment by segment, anchored at the root,
  where ``*`` stays inside one segment and a ``**`` segment spans any
  number of directories, so ``**/*.rs`` reaches ``src/a/b.rs`` while
  ``a.txt`` never matches ``sub/a.txt``;
* string: a plain shell glob over the whole path string (``fnmatch``),
  where ``*`` also crosses ``/``, so ``src/*.rs`` matches
  ``src/a/b.rs``.
"""

from __future__ import annotations

import fnmatch
import re
from typing import Iterable, List, Optional, Sequence

from .core import InvalidPatternError


def _check_syntax(raw: str) -> Optional[str]:
    """Return the reason *raw* is not a valid glob, or ``None``."""
    if not raw:
        return "pattern is empty"

    i = 0
    n = len(raw)
    while i < n:
        ch = raw[i]
        if ch == "*":
            j = i
            while j < n and raw[j] == "*":
                j += 1
            stars = j - i
            if stars > 2:
                return "wildcards are either regular `*` or recursive `**`"
            if stars == 2:
                before_ok = i == 0 or raw[i - 1] == "/"
                after_ok = j == n or raw[j] == "/"
                if not (before_ok and after_ok):
                    return "recursive wildcards must form a single path component"
            i = j
            continue
        if ch == "[":
            j = i + 1
            if j < n and raw[j] in "!^":
                j += 1
            # a leading ']' is a literal member of the class
            if j < n and raw[j] == "]":
                j += 1
            close = raw.find("]", j)
            if close == -1:
                return "invalid range pattern"
            i = close + 1
            continue
        if ch == "\\":
            i += 2
            continue
        i += 1
    return None


RECURSIVE = "**"


def _compile_segments(glob: str) -> List[Optional["re.Pattern[str]"]]:
    """One regex per path segment; ``None`` stands for a ``**`` segment."""
    return [
        None if seg == RECURSIVE else re.compile(fnmatch.translate(seg))
        for seg in glob.split("/")
    ]


def _match_segments(
    segments: Sequence[Optional["re.Pattern[str]"]],
    parts: Sequence[str],
) -> bool:
    if not segments:
        return not parts
    head = segments[0]
    if head is None:
        return any(
            _match_segments(segments[1:], parts[i:]) for i in range(len(parts) + 1)
        )
    if not parts or head.match(parts[0]) is None:
        return False
    return _match_segments(segments[1:], parts[1:])


class GluePattern:
    """One compiled include/exclude glob."""

    def __init__(self, raw: str):
        self.raw = raw
        reason = _check_syntax(raw)
        if reason:
            raise InvalidPatternError(raw, reason)

        glob = raw
        while glob.startswith("./"):
            glob = glob[2:]
        try:
            self._segments = _compile_segments(glob)
            self._regex: "re.Pattern[str]" = re.compile(fnmatch.translate(glob))
        except re.error as e:
            raise InvalidPatternError(raw, str(e))

    def matches_structured(self, rel_path: str) -> bool:
        return _match_segments(self._segments, rel_path.split("/"))

    def matches_string(self, rel_path: str) -> bool:
        return self._regex.match(rel_path) is not None

    def matches(self, rel_path: str) -> bool:
        """*rel_path* is a root-relative POSIX path such as ``src/main.rs``."""
        return self.matches_structured(rel_path) or self.matches_string(rel_path)

    def __repr__(self) -> str:
        return f"GluePattern({self.raw!r})"


class PatternSet:
    """Ordered collection of compiled globs; any single match counts."""

    def __init__(self, patterns: List[GluePattern]):
        self.patterns = patterns

    @classmethod
    def compile(cls, raws: Iterable[str]) -> "PatternSet":
        return cls([GluePattern(raw) for raw in raws])

    def matches(self, rel_path: str) -> bool:
        return any(p.matches(rel_path) for p in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __iter__(self):
        return iter(self.patterns)
