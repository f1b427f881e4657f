# src/sviny/actions.py
import re
import signal
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from importlib import metadata as importlib_metadata
from pathlib import Path

from .bundler import install_dependencies, run_build
from .errors import MissingFileError
from .meta import PROGRAM_PACKAGE, Metadata
from .types import BuildOptions
from .utils_logs import get_logger
from .workspace import WorkspaceSession, check_stale, clean_stale


def get_metadata() -> Metadata:
    """Return (version, commit) for this tool.

    - Source checkout → read pyproject.toml + git
    - Installed package → distribution metadata, no commit
    """
    logger = get_logger()
    logger.trace("get_metadata ran from: %s", Path(__file__).resolve())

    version = "unknown"
    commit = "unknown"

    # Source checkout: src/sviny/actions.py → repo root is two levels up
    root = Path(__file__).resolve().parents[2]
    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        logger.trace("trying to read metadata from %s", pyproject)
        text = pyproject.read_text(encoding="utf-8")
        match = re.search(r'(?m)^\s*version\s*=\s*["\']([^"\']+)["\']', text)
        if match:
            version = match.group(1)

        with suppress(Exception):
            logger.trace("trying to get commit from git")
            result = subprocess.run(
                ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
                cwd=root,
                capture_output=True,
                text=True,
                check=True,
            )
            commit = result.stdout.strip()

    if version == "unknown":
        with suppress(importlib_metadata.PackageNotFoundError):
            version = importlib_metadata.version(PROGRAM_PACKAGE)

    logger.trace("got package version %s with commit %s", version, commit)
    return Metadata(version, commit)


@contextmanager
def sigterm_as_interrupt() -> Iterator[None]:
    """Turn SIGTERM into KeyboardInterrupt so `finally` blocks still run."""

    def _raise_interrupt(signum: int, frame: object) -> None:
        raise KeyboardInterrupt

    previous = None
    # signal handlers can only be installed from the main thread
    with suppress(ValueError):
        previous = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)


def build_component(
    options: BuildOptions,
    *,
    user_manifest: Path,
    clean_first: bool = False,
) -> None:
    """Build one component through the tool project.

    Preconditions (component exists, no stale state, both manifests
    parse) are all checked before the tool project is touched. With
    `clean_first`, leftovers of an interrupted build are repaired once
    the component is known to exist.
    """
    logger = get_logger()

    if not options.component.exists():
        xmsg = f"{options.component} does not exist."
        raise MissingFileError(xmsg)

    if clean_first:
        clean_stale(options.project_dir)
    check_stale(options.project_dir)
    session = WorkspaceSession(options, user_manifest=user_manifest)

    logger.info("Building %s to %s", options.component, options.out_dir)
    with sigterm_as_interrupt(), session:
        if options.install:
            install_dependencies(options)
        if options.watch:
            logger.info("👀 Watching %s... Press Ctrl+C to stop.", options.component)
        run_build(options)

    logger.info("✅ Build completed → %s", options.out_dir)
