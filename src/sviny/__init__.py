# src/sviny/__init__.py

"""Sviny: point a single Svelte component at a ready-made Vite project.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use or custom integrations.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()              → CLI entrypoint
    - build_component()   → Link, merge, bundle and restore in one call
    - WorkspaceSession    → The temporary tool-project mutations as a context
    - merge_manifests()   → Overlay user dependencies on the tool manifest
    - get_metadata()      → Retrieve version / commit info
"""

from .actions import (
    build_component,
    get_metadata,
    sigterm_as_interrupt,
)
from .bundler import (
    build_command,
    build_env,
    install_dependencies,
    run_build,
)
from .cli import (
    dispatch_command,
    main,
)
from .config import (
    determine_log_level,
    find_config,
    load_and_validate_config,
    load_config,
    resolve_options,
    validate_config,
)
from .constants import (
    COMPONENT_SUFFIX,
    DEFAULT_COMPONENT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUT_DIR,
    ENTRY_LINK,
    MANIFEST_NAME,
)
from .errors import (
    BuildError,
    ConfigError,
    ManifestParseError,
    MissingFileError,
    StaleLinkError,
    SvinyError,
    UnknownCommandError,
)
from .manifest import (
    dump_manifest,
    load_manifest,
    merge_manifests,
    restore_manifest,
    write_manifest,
)
from .meta import (
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .runtime import current_runtime
from .types import BuildOptions, Manifest, Runtime
from .utils import load_jsonc, should_use_color
from .utils_logs import (
    LEVEL_ORDER,
    RESET,
    colorize,
    get_logger,
)
from .workspace import (
    WorkspaceSession,
    check_stale,
    clean_stale,
    link,
    unlink,
)


__all__ = [  # noqa: RUF022
    # --- CLI / Actions ---
    "build_component",
    "dispatch_command",
    "get_metadata",
    "main",
    "sigterm_as_interrupt",
    #
    # --- Workspace ---
    "WorkspaceSession",
    "check_stale",
    "clean_stale",
    "link",
    "unlink",
    #
    # --- Manifests ---
    "dump_manifest",
    "load_manifest",
    "merge_manifests",
    "restore_manifest",
    "write_manifest",
    #
    # --- Bundler ---
    "build_command",
    "build_env",
    "install_dependencies",
    "run_build",
    #
    # --- Config Handling ---
    "determine_log_level",
    "find_config",
    "load_and_validate_config",
    "load_config",
    "resolve_options",
    "validate_config",
    #
    # --- Constants / Metadata / Runtime ---
    "COMPONENT_SUFFIX",
    "DEFAULT_COMPONENT",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_OUT_DIR",
    "ENTRY_LINK",
    "MANIFEST_NAME",
    "Metadata",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    "current_runtime",
    #
    # --- Errors ---
    "BuildError",
    "ConfigError",
    "ManifestParseError",
    "MissingFileError",
    "StaleLinkError",
    "SvinyError",
    "UnknownCommandError",
    #
    # --- utils ---
    "LEVEL_ORDER",
    "RESET",
    "colorize",
    "get_logger",
    "load_jsonc",
    "should_use_color",
    #
    # --- Types ---
    "BuildOptions",
    "Manifest",
    "Runtime",
]
