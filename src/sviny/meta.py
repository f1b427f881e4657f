# src/sviny/meta.py

"""Centralized program identity constants for Sviny."""

from typing import NamedTuple

_BASE = "sviny"

# CLI script name (the executable or `python -m` entrypoint)
PROGRAM_SCRIPT = _BASE

# Human-readable name for banners, help text, etc.
PROGRAM_DISPLAY = _BASE.title()

# Python package / import name
PROGRAM_PACKAGE = _BASE.replace("-", "_")

# Environment variable prefix (used for SVINY_LOG_LEVEL, etc.)
PROGRAM_ENV = _BASE.replace("-", "_").upper()

# Short tagline or description for help screens and metadata
DESCRIPTION = "Generates a tiny Svelte app."


class Metadata(NamedTuple):
    version: str
    commit: str
