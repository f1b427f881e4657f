# src/sviny/bundler.py

"""Hands the linked workspace to the external bundler (Vite)."""

import os
import subprocess
from collections.abc import Mapping

from .constants import (
    BUNDLER_CONFIG,
    DEFAULT_ENV_COMPONENT,
    DEFAULT_ENV_OUT_DIR,
    DEFAULT_ENV_WATCH_INCLUDE,
)
from .errors import BuildError
from .meta import PROGRAM_ENV
from .types import BuildOptions
from .utils_logs import RED, colorize, get_logger


def build_command(options: BuildOptions) -> list[str]:
    """Return the bundler argv for a build of `options`.

    Never carries `--watch`: Vite merges that flag in as `build.watch: true`,
    which overwrites the `include` list the tool project's config builds
    from the environment (see `build_env`).
    """
    return [
        *options.bundler,
        "build",
        "--config",
        str(options.project_dir / BUNDLER_CONFIG),
        "--outDir",
        str(options.out_dir),
    ]


def build_env(
    options: BuildOptions,
    *,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Environment for the bundler process.

    In watch mode the component's real path is exported so the tool
    project's config can restrict the watcher to the user's own file
    rather than the link inside the tool project.
    """
    env = dict(os.environ if base is None else base)
    env[f"{PROGRAM_ENV}_{DEFAULT_ENV_COMPONENT}"] = str(options.component)
    env[f"{PROGRAM_ENV}_{DEFAULT_ENV_OUT_DIR}"] = str(options.out_dir)
    if options.watch:
        env[f"{PROGRAM_ENV}_{DEFAULT_ENV_WATCH_INCLUDE}"] = os.path.realpath(
            options.component
        )
    else:
        env.pop(f"{PROGRAM_ENV}_{DEFAULT_ENV_WATCH_INCLUDE}", None)
    return env


def _run(cmd: list[str], options: BuildOptions, *, what: str) -> None:
    logger = get_logger()
    logger.debug("$ %s", " ".join(cmd))
    try:
        subprocess.run(  # noqa: S603
            cmd,
            cwd=options.project_dir,
            env=build_env(options),
            check=True,
        )
    except subprocess.CalledProcessError as e:
        logger.error(colorize(f"{what} failed with exit code {e.returncode}", RED))
        xmsg = f"{what} failed: {' '.join(cmd)} exited with {e.returncode}"
        # negative return codes mean the child died from a signal
        code = e.returncode if e.returncode > 0 else 1
        raise BuildError(xmsg, code=code, silent=True) from e
    except OSError as e:
        # e.g. npx missing from PATH
        logger.error(colorize(f"{what} could not start: {e}", RED))
        xmsg = f"{what} failed: {e}"
        raise BuildError(xmsg, silent=True) from e


def install_dependencies(options: BuildOptions) -> None:
    """Install the merged manifest's dependencies inside the tool project."""
    logger = get_logger()
    logger.info("📦 Installing dependencies in %s", options.project_dir)
    _run(list(options.install_command), options, what="Install")


def run_build(options: BuildOptions) -> None:
    """Run the bundler against the tool project.

    Blocks until the bundler exits. In watch mode that is when the watch
    session is interrupted; the interrupt is reported and re-raised so the
    caller's teardown still runs.
    """
    logger = get_logger()
    try:
        _run(build_command(options), options, what="Build")
    except KeyboardInterrupt:
        if options.watch:
            logger.info("\n🛑 Watch stopped.")
        raise
