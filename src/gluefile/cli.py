"""
CLI entrypoint for the glue package.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .assembler import build_bundle, write_bundle
from .core import (
    DEFAULT_OUTPUT,
    ERROR,
    GlueConfig,
    GlueError,
    emit,
    emit_all,
    load_extra_patterns,
    resolve_output,
)
from .patterns import PatternSet
from .selector import collect_files


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="glue",
        description="Glue files matching glob patterns into one .glue document for LLM context.",
    )
    p.add_argument("patterns", nargs="+", help="Input patterns (supports glob syntax)")
    p.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        help="Pattern to exclude, in addition to ignore files (repeatable)",
    )
    p.add_argument(
        "-o",
        "--output",
        default=DEFAULT_OUTPUT,
        help=f"Output file, '-' for stdout (default: {DEFAULT_OUTPUT})",
    )
    p.add_argument(
        "--no-ignore",
        action="store_true",
        help="Include files that would be ignored by .gitignore",
    )
    p.add_argument(
        "--include-binary",
        action="store_true",
        help="Include binary files (they will be skipped by default)",
    )
    p.add_argument("--root", type=Path, default=Path("."), help="Project root dir")
    p.add_argument(
        "--exclude-from",
        type=Path,
        help="Path to a file with extra exclude patterns (one per line)",
    )
    p.add_argument(
        "--skip-hidden",
        action="store_true",
        help="Skip dotfiles and dot-directories",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def build_config(ns: argparse.Namespace) -> GlueConfig:
    excludes = list(ns.exclude)
    if ns.exclude_from:
        excludes.extend(load_extra_patterns(ns.exclude_from.resolve()))
    return GlueConfig(
        patterns=tuple(ns.patterns),
        excludes=tuple(excludes),
        output=ns.output,
        root=ns.root,
        no_ignore=ns.no_ignore,
        include_binary=ns.include_binary,
        show_hidden=not ns.skip_hidden,
        verbose=ns.verbose,
    )


def run(config: GlueConfig) -> str:
    """Select, assemble and write one bundle; returns the bundle text."""
    includes = PatternSet.compile(config.patterns)
    excludes = PatternSet.compile(config.excludes)

    out_path = resolve_output(config.output)
    if config.verbose:
        emit(f"Scanning {config.root.resolve()} …")

    files = collect_files(
        config.traversal(),
        includes,
        excludes,
        skip=[out_path] if out_path else (),
    )
    if config.verbose:
        emit(f"{len(files)} files matched.")

    bundle = build_bundle(files, config.root, include_binary=config.include_binary)
    emit_all(bundle.diagnostics)
    if config.verbose:
        emit(
            f"{len(bundle.included)} files glued, "
            f"{len(files) - len(bundle.included)} skipped."
        )

    text = bundle.text
    write_bundle(text, config.output)
    return text


def main(argv: Optional[List[str]] = None) -> int:
    try:
        ns = _parse_args(argv)
        run(build_config(ns))
    except GlueError as e:
        emit(f"Error: {e}", ERROR)
        return 1
    except KeyboardInterrupt:
        emit("Cancelled.", ERROR)
        return 1
    except Exception as e:
        emit(f"Unexpected error: {e}", ERROR)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
