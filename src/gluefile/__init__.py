"""
Glue - A tool for gluing project files into a single document for LLM ingestion.

This package walks a directory tree, honours ``.gitignore``-style ignore files,
selects files through include/exclude glob patterns, skips binary and
non-UTF-8 content, and concatenates the rest into a ``.glue`` bundle.
"""

__version__ = "0.1.0"
__author__ = "Glue Team"
