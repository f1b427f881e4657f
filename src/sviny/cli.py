# src/sviny/cli.py

import argparse
import platform
import sys
from collections.abc import Callable
from difflib import get_close_matches
from pathlib import Path

from .actions import build_component, get_metadata
from .config import (
    determine_log_level,
    load_and_validate_config,
    resolve_app,
    resolve_options,
)
from .constants import (
    COMPONENT_SUFFIX,
    DEFAULT_COMPONENT,
    DEFAULT_OUT_DIR,
    MANIFEST_NAME,
)
from .errors import UnknownCommandError
from .meta import DESCRIPTION, PROGRAM_DISPLAY, PROGRAM_SCRIPT
from .runtime import current_runtime
from .types import ConfigInput
from .utils import get_sys_version_info, safe_log, should_use_color
from .utils_logs import LEVEL_ORDER, RED, colorize, get_logger, set_log_level


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-o", "--out", "--watch", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # Argparse message for bad flags is typically
        # "unrecognized arguments: --wacth ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(
        prog=PROGRAM_SCRIPT,
        description=f"{PROGRAM_DISPLAY}: {DESCRIPTION}",
        epilog="Commands (when the first argument is not a component): help, version",
    )

    # --- Positional ---
    parser.add_argument(
        "app",
        nargs="?",
        metavar="APP",
        help=(
            f"Component file to build (default: {DEFAULT_COMPONENT})."
            f" Anything not ending in {COMPONENT_SUFFIX} is read as a command."
        ),
    )
    parser.add_argument("command_args", nargs="*", help=argparse.SUPPRESS)

    # --- Standard flags ---
    parser.add_argument(
        "-o",
        "--out",
        metavar="DIR",
        help=f"Output directory (default: {DEFAULT_OUT_DIR}).",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action="store_true",
        help="Rebuild whenever the component file changes.",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Get the installed version."
    )
    parser.add_argument("-c", "--config", help="Path to a project config file.")
    parser.add_argument(
        "--project",
        metavar="DIR",
        help="Use this tool project instead of the bundled one.",
    )
    parser.add_argument(
        "--install",
        action="store_true",
        help="Install the merged dependencies into the tool project before building.",
    )
    parser.add_argument(
        "--clean-stale",
        action="store_true",
        help="Remove a link or manifest backup left by an interrupted build first.",
    )

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    # --- Verbosity ---
    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )
    return parser


def _print_version() -> int:
    logger = get_logger()
    meta = get_metadata()
    logger.info(meta.version)
    logger.debug("%s %s (%s)", PROGRAM_DISPLAY, meta.version, meta.commit)
    return 0


# --------------------------------------------------------------------------- #
# Subcommands
# --------------------------------------------------------------------------- #

CommandHandler = Callable[[argparse.Namespace, argparse.ArgumentParser], int]


def _help_command(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    parser.print_help()
    return 0


def _version_command(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    return _print_version()


COMMANDS: dict[str | None, CommandHandler] = {
    None: _help_command,
    "help": _help_command,
    "version": _version_command,
}


def dispatch_command(
    command: str | None,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    """Run the subcommand named by the first free argument."""
    handler = COMMANDS.get(command)
    if handler is None:
        known = [c for c in COMMANDS if c is not None]
        xmsg = f"Unknown command: {command!r}."
        close = get_close_matches(str(command), known, n=1, cutoff=0.6)
        if close:
            xmsg += f" Did you mean {close[0]!r}?"
        elif not str(command).endswith(COMPONENT_SUFFIX):
            xmsg += f" Component files must end in {COMPONENT_SUFFIX}."
        raise UnknownCommandError(xmsg)
    return handler(args, parser)


def is_component(app: str | None) -> bool:
    return bool(app) and str(app).endswith(COMPONENT_SUFFIX)


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:  # noqa: C901, PLR0911
    logger = get_logger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- Early runtime init (use CLI + env + defaults) ---
        set_log_level(determine_log_level(args))
        if args.use_color is not None:
            current_runtime["use_color"] = args.use_color
        else:
            current_runtime["use_color"] = should_use_color()
        logger.trace("[BOOT] log-level initialized: %s", current_runtime["log_level"])

        logger.debug(
            "Runtime: Python %s (%s)\n    %s",
            platform.python_version(),
            platform.python_implementation(),
            sys.version.replace("\n", " "),
        )

        # --- Version flag ---
        if args.version:
            return _print_version()

        # --- Python version check ---
        if get_sys_version_info() < (3, 10):
            logger.error("%s requires Python 3.10 or newer.", PROGRAM_DISPLAY)
            return 1

        # --- Load configuration ---
        cwd = Path.cwd().resolve()
        config: ConfigInput | None = None
        config_dir: Path | None = None
        config_result = load_and_validate_config(args, cwd)
        if config_result is not None:
            config_path, config = config_result
            config_dir = config_path.parent
            set_log_level(determine_log_level(args, config.get("log_level")))
            logger.debug("🔧 Using config: %s", config_path)

        # --- Component build, the dispatcher is never reached ---
        app = resolve_app(args, config)
        if is_component(app):
            options = resolve_options(args, cwd, config, config_dir)
            build_component(
                options,
                user_manifest=cwd / MANIFEST_NAME,
                clean_first=args.clean_stale,
            )
            return 0

        # --- Subcommands ---
        return dispatch_command(args.app, args, parser)

    except KeyboardInterrupt:
        logger.info("\n🛑 Interrupted.")
        return 130

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        silent = getattr(e, "silent", False)
        if not silent:
            try:
                logger.error_if_not_debug(colorize(str(e), RED))
            except Exception:  # noqa: BLE001
                safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return getattr(e, "code", 1)

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.critical_if_not_debug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")

        return getattr(e, "code", 1)


def main_entry() -> None:
    sys.exit(main())
