# src/sviny/config.py

"""Project config discovery, validation and resolution into BuildOptions.

Precedence everywhere is CLI → environment → config file → defaults.
"""

import argparse
import os
import shlex
from dataclasses import dataclass
from difflib import get_close_matches
from importlib import resources
from pathlib import Path
from typing import Any, cast, get_type_hints

from .constants import (
    DEFAULT_BUNDLER,
    DEFAULT_COMPONENT,
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_ENV_OUT_DIR,
    DEFAULT_ENV_PROJECT_DIR,
    DEFAULT_INSTALL,
    DEFAULT_INSTALL_COMMAND,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUT_DIR,
    DEFAULT_STRICT_CONFIG,
    DEFAULT_WATCH,
)
from .errors import ConfigError
from .meta import PROGRAM_ENV, PROGRAM_PACKAGE, PROGRAM_SCRIPT
from .types import BuildOptions, ConfigInput
from .utils import load_jsonc, plural, remove_path_in_error_message
from .utils_logs import LEVEL_ORDER, get_logger


# --------------------------------------------------------------------------- #
# discovery and loading
# --------------------------------------------------------------------------- #


def find_config(args: argparse.Namespace, cwd: Path) -> Path | None:
    """Locate a configuration file.

    Search order:
      1. Explicit path from CLI (--config)
      2. .{PROGRAM_SCRIPT}.jsonc, then .{PROGRAM_SCRIPT}.json in cwd

    Returns the first matching path, or None if no config was found.
    """
    logger = get_logger()

    if getattr(args, "config", None):
        config = Path(args.config).expanduser().resolve()
        if not config.exists():
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ConfigError(xmsg)
        return config

    candidates: list[Path] = [
        cwd / f".{PROGRAM_SCRIPT}.jsonc",
        cwd / f".{PROGRAM_SCRIPT}.json",
    ]
    found = [p for p in candidates if p.exists()]

    if not found:
        logger.trace("No config file found in %s", cwd)
        return None

    if len(found) > 1:
        names = ", ".join(p.name for p in found)
        logger.warning(
            "Multiple config files detected (%s); using %s.", names, found[0].name
        )
    return found[0]


def load_config(config_path: Path) -> dict[str, Any] | None:
    """Load the raw config object. Empty files read as None."""
    try:
        raw = load_jsonc(config_path)
    except ValueError as e:
        clean_msg = remove_path_in_error_message(str(e), config_path)
        xmsg = (
            f"Error while loading configuration file '{config_path.name}': {clean_msg}"
        )
        raise ConfigError(xmsg) from e

    if raw is None:
        return None
    if not isinstance(raw, dict):
        xmsg = f"{config_path.name} must contain a JSON object, not a list."
        raise ConfigError(xmsg)
    return raw


# --------------------------------------------------------------------------- #
# validation
# --------------------------------------------------------------------------- #


@dataclass
class ValidationSummary:
    valid: bool
    errors: list[str]
    warnings: list[str]
    strict: bool


# accepted runtime types per key; str|list keys allow either form
_SCHEMA: dict[str, tuple[type, ...]] = {
    "app": (str,),
    "out": (str,),
    "watch": (bool,),
    "project": (str,),
    "bundler": (str, list),
    "install": (bool,),
    "install_command": (str, list),
    "log_level": (str,),
    "strict_config": (bool,),
}

# keep the runtime schema honest against the declared TypedDict
assert set(_SCHEMA) == set(get_type_hints(ConfigInput)), (  # noqa: S101
    "_SCHEMA out of sync with ConfigInput"
)


def validate_config(raw: dict[str, Any]) -> ValidationSummary:
    """Check key names and value types.

    Unknown keys are warnings, or errors when `strict_config` is true.
    """
    strict = raw.get("strict_config", DEFAULT_STRICT_CONFIG) is True
    summary = ValidationSummary(valid=True, errors=[], warnings=[], strict=strict)

    for key, value in raw.items():
        expected = _SCHEMA.get(key)
        if expected is None:
            msg = f"Unknown key {key!r}"
            close = get_close_matches(key, list(_SCHEMA), n=1, cutoff=0.6)
            if close:
                msg += f" (did you mean {close[0]!r}?)"
            (summary.errors if strict else summary.warnings).append(msg)
            continue

        if not isinstance(value, expected):
            names = " or ".join(t.__name__ for t in expected)
            summary.errors.append(
                f"{key!r} must be {names}, not {type(value).__name__}"
            )
            continue

        if isinstance(value, list) and not all(isinstance(v, str) for v in value):
            summary.errors.append(f"{key!r} must be a list of strings")

    level = raw.get("log_level")
    if isinstance(level, str) and level.lower() not in LEVEL_ORDER:
        summary.errors.append(
            f"'log_level' must be one of {', '.join(LEVEL_ORDER)}, not {level!r}"
        )

    summary.valid = not summary.errors
    return summary


def _report_validation(summary: ValidationSummary, config_path: Path) -> None:
    logger = get_logger()
    mode = "strict mode" if summary.strict else "lenient mode"

    if summary.errors:
        logger.error(
            "Failed to validate configuration file %s (%s). Found %d error%s:\n  • %s",
            config_path.name,
            mode,
            len(summary.errors),
            plural(summary.errors),
            "\n  • ".join(summary.errors),
        )
    if summary.warnings:
        logger.warning(
            "Configuration file %s has %d warning%s:\n  • %s",
            config_path.name,
            len(summary.warnings),
            plural(summary.warnings),
            "\n  • ".join(summary.warnings),
        )
    if summary.valid and not summary.warnings:
        logger.debug("Validated %s (%s) successfully.", config_path.name, mode)


def load_and_validate_config(
    args: argparse.Namespace,
    cwd: Path,
) -> tuple[Path, ConfigInput] | None:
    """Find, load and validate the project config.

    Returns (config_path, config) or None if there is no config.
    """
    config_path = find_config(args, cwd)
    if config_path is None:
        return None

    raw = load_config(config_path)
    if raw is None:
        return None

    summary = validate_config(raw)
    _report_validation(summary, config_path)
    if not summary.valid:
        xmsg = f"Configuration file {config_path.name} contains validation errors."
        exception = ConfigError(xmsg)
        exception.silent = True  # already reported above
        raise exception

    return config_path, cast("ConfigInput", raw)


# --------------------------------------------------------------------------- #
# resolution
# --------------------------------------------------------------------------- #


def _env(name: str) -> str | None:
    return os.getenv(f"{PROGRAM_ENV}_{name}") or None


def determine_log_level(
    args: argparse.Namespace,
    config_log_level: str | None = None,
) -> str:
    """Resolve log level from CLI → env → config → default."""
    if getattr(args, "log_level", None):
        return cast("str", args.log_level)

    env_log_level = _env(DEFAULT_ENV_LOG_LEVEL) or os.getenv(DEFAULT_ENV_LOG_LEVEL)
    if env_log_level:
        return env_log_level.lower()

    if config_log_level:
        return config_log_level.lower()

    return DEFAULT_LOG_LEVEL


def default_project_dir() -> Path:
    """The tool project shipped inside the package."""
    return Path(str(resources.files(PROGRAM_PACKAGE) / "template"))


def _as_command(
    value: str | list[str] | None,
    default: tuple[str, ...],
) -> tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, str):
        return tuple(shlex.split(value))
    return tuple(value)


def _relative_to(base: Path, raw: str) -> Path:
    path = Path(raw).expanduser()
    return path if path.is_absolute() else base / path


def resolve_app(args: argparse.Namespace, config: ConfigInput | None = None) -> str:
    """The component argument as the user wrote it (CLI → config → default)."""
    app = getattr(args, "app", None)
    if app:
        return cast("str", app)
    if config and config.get("app"):
        return config["app"]
    return DEFAULT_COMPONENT


def resolve_options(
    args: argparse.Namespace,
    cwd: Path,
    config: ConfigInput | None = None,
    config_dir: Path | None = None,
) -> BuildOptions:
    """Build the immutable BuildOptions for one invocation.

    Paths from the CLI and env resolve against `cwd`; paths from the
    config file resolve against the config file's directory.
    """
    logger = get_logger()
    cfg: ConfigInput = config or {}
    cfg_dir = config_dir or cwd

    # --- component ---
    app = resolve_app(args, cfg)
    app_base = cwd if getattr(args, "app", None) or not cfg.get("app") else cfg_dir
    component = _relative_to(app_base, app)

    # --- output directory ---
    if getattr(args, "out", None):
        out_dir = _relative_to(cwd, args.out)
    elif _env(DEFAULT_ENV_OUT_DIR):
        out_dir = _relative_to(cwd, cast("str", _env(DEFAULT_ENV_OUT_DIR)))
    elif cfg.get("out"):
        out_dir = _relative_to(cfg_dir, cfg["out"])
    else:
        out_dir = cwd / DEFAULT_OUT_DIR

    # --- tool project ---
    if getattr(args, "project", None):
        project_dir = _relative_to(cwd, args.project)
    elif _env(DEFAULT_ENV_PROJECT_DIR):
        project_dir = _relative_to(cwd, cast("str", _env(DEFAULT_ENV_PROJECT_DIR)))
    elif cfg.get("project"):
        project_dir = _relative_to(cfg_dir, cfg["project"])
    else:
        project_dir = default_project_dir()

    # --- flags ---
    watch = bool(getattr(args, "watch", False)) or cfg.get("watch", DEFAULT_WATCH)
    install = bool(getattr(args, "install", False)) or cfg.get(
        "install", DEFAULT_INSTALL
    )

    options = BuildOptions(
        component=component,
        out_dir=out_dir,
        watch=watch,
        project_dir=project_dir.resolve(),
        bundler=_as_command(cfg.get("bundler"), DEFAULT_BUNDLER),
        install=install,
        install_command=_as_command(
            cfg.get("install_command"), DEFAULT_INSTALL_COMMAND
        ),
    )
    logger.trace("[CONFIG] resolved options: %s", options)
    return options
