"""
File selection: walk a root directory, honour ignore files, apply the
include/exclude globs and return candidates in a stable order.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

import pathspec

from .core import TraversalConfig, TraversalError, warn
from .patterns import PatternSet

VCS_DIR = ".git"
IGNORE_FILENAMES: Tuple[str, ...] = (".gitignore", ".ignore")


def is_vcs_path(rel_path: str) -> bool:
    """True when any segment of *rel_path* is the ``.git`` directory."""
    return VCS_DIR in rel_path.replace("\\", "/").split("/")


# Ignore-file handling
def _read_spec(path: Path) -> Optional["pathspec.GitIgnoreSpec"]:
    if not path.is_file():
        return None
    try:
        with path.open("r", encoding="utf-8", errors="replace") as fh:
            return pathspec.GitIgnoreSpec.from_lines(fh)
    except OSError as e:
        warn(f"! Could not read ignore file {path}: {e}")
        return None


class IgnoreRules:
    """
    Gitignore layers keyed by the root-relative directory that holds them.

    Only the ancestors of a path are consulted, deepest first; inside a
    layer the last matching line wins, so ``!pattern`` re-includes what an
    earlier line ignored. ``.git/info/exclude`` ranks below everything.
    """

    def __init__(self) -> None:
        self._base: List["pathspec.GitIgnoreSpec"] = []
        self._by_dir: Dict[str, List["pathspec.GitIgnoreSpec"]] = {}

    @classmethod
    def for_root(cls, root: Path) -> "IgnoreRules":
        rules = cls()
        exclude = _read_spec(root / VCS_DIR / "info" / "exclude")
        if exclude is not None:
            rules._base.append(exclude)
        return rules

    def load_dir(self, root: Path, rel_dir: str) -> None:
        """Register the ignore files found in *rel_dir*."""
        directory = root / rel_dir if rel_dir else root
        specs = [
            spec
            for spec in (_read_spec(directory / name) for name in IGNORE_FILENAMES)
            if spec is not None
        ]
        if specs:
            self._by_dir[rel_dir] = specs

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        suffix = "/" if is_dir else ""
        parts = rel_path.split("/")
        for depth in range(len(parts) - 1, -1, -1):
            specs = self._by_dir.get("/".join(parts[:depth]))
            if not specs:
                continue
            local = "/".join(parts[depth:]) + suffix
            for spec in reversed(specs):
                decision = spec.check_file(local).include
                if decision is not None:
                    return decision
        for spec in reversed(self._base):
            decision = spec.check_file(rel_path + suffix).include
            if decision is not None:
                return decision
        return False


# Traversal
def _rel(root: Path, path: str) -> str:
    return Path(os.path.relpath(path, root)).as_posix()


def _raise_walk_error(err: OSError) -> None:
    raise TraversalError(f"Could not scan '{err.filename}': {err.strerror or err}")


def walk_files(config: TraversalConfig) -> Iterator[str]:
    """
    Yield root-relative POSIX paths of the regular files below the root.

    ``.git`` directories are never entered, whatever the ignore settings.
    Symlinked directories are not followed.
    """
    root = config.root
    try:
        root = root.resolve()
    except (OSError, RuntimeError) as e:
        raise TraversalError(f"Could not resolve root path '{config.root}': {e}")
    if not root.exists():
        raise TraversalError(f"Root directory '{root}' does not exist")
    if not root.is_dir():
        raise TraversalError(f"Root path '{root}' is not a directory")

    rules = IgnoreRules.for_root(root) if config.honor_ignore_files else None

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        rel_dir = _rel(root, dirpath)
        if rel_dir == ".":
            rel_dir = ""
        if rules is not None:
            rules.load_dir(root, rel_dir)

        kept_dirs = []
        for name in sorted(dirnames):
            if name == VCS_DIR:
                continue
            if not config.show_hidden and name.startswith("."):
                continue
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if rules is not None and rules.is_ignored(rel, is_dir=True):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for name in sorted(filenames):
            if not config.show_hidden and name.startswith("."):
                continue
            rel = f"{rel_dir}/{name}" if rel_dir else name
            # drops broken links and anything that is not a regular file
            if not os.path.isfile(os.path.join(dirpath, name)):
                continue
            if rules is not None and rules.is_ignored(rel):
                continue
            yield rel


def collect_files(
    config: TraversalConfig,
    includes: PatternSet,
    excludes: PatternSet,
    skip: Iterable[Path] = (),
) -> List[str]:
    """
    Return the sorted root-relative paths selected by *includes* and
    not dropped by *excludes*. Exclusion always wins.

    Paths in *skip* (typically the output file) are never selected.
    """
    root = config.root.resolve()
    skipped: Set[str] = set()
    for path in skip:
        try:
            skipped.add(path.resolve().relative_to(root).as_posix())
        except ValueError:
            continue

    kept: List[str] = []
    for rel in walk_files(config):
        if is_vcs_path(rel) or rel in skipped:
            continue
        if not includes.matches(rel):
            continue
        if excludes.matches(rel):
            continue
        kept.append(rel)

    kept.sort()
    if not kept:
        warn("Warning: No files matched the provided patterns")
    return kept
