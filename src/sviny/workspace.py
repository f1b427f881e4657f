# src/sviny/workspace.py

"""Temporary mutations of the tool project, and their guaranteed teardown.

A build borrows the tool project for a moment: its manifest is swapped for
a merged one and its entry point is replaced by a link to the user's
component. `WorkspaceSession` owns both and puts everything back when the
`with` block exits, however it exits.
"""

import os
from pathlib import Path
from types import TracebackType

from .constants import BACKUP_SUFFIX, ENTRY_LINK, MANIFEST_NAME
from .errors import StaleLinkError
from .manifest import (
    load_manifest,
    merge_manifests,
    restore_manifest,
    write_manifest,
)
from .types import BuildOptions, Manifest
from .utils_logs import get_logger


# --------------------------------------------------------------------------- #
# link primitives
# --------------------------------------------------------------------------- #


def _exists_or_dangling(path: Path) -> bool:
    # Path.exists() follows links, so a link to a deleted file reads as absent
    return path.is_symlink() or path.exists()


def backup_path(project_dir: Path) -> Path:
    return project_dir / f"{MANIFEST_NAME}{BACKUP_SUFFIX}"


def link(source: Path, target: Path) -> None:
    """Create a symlink at `target` pointing to `source`.

    Refuses to replace anything already at `target`.
    """
    logger = get_logger()
    if _exists_or_dangling(target):
        xmsg = (
            f"{target} already exists; a previous build did not clean up."
            " Remove it or rerun with --clean-stale."
        )
        raise StaleLinkError(xmsg)

    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        os.symlink(source, target)
    except FileExistsError as e:
        # lost a race with another invocation
        xmsg = f"{target} appeared while linking: {e}"
        raise StaleLinkError(xmsg) from e
    logger.debug("🔗 %s → %s", target, source)


def unlink(target: Path) -> bool:
    """Remove the link at `target`. Failures are logged, never raised."""
    logger = get_logger()
    try:
        target.unlink()
    except FileNotFoundError:
        logger.warning("Link %s was already removed.", target)
        return False
    except OSError as e:
        logger.warning("Could not remove link %s: %s", target, e)
        return False
    logger.debug("Removed link %s", target)
    return True


def check_stale(project_dir: Path) -> None:
    """Fail if an earlier run left its link or manifest backup behind."""
    leftovers = [
        p
        for p in (project_dir / ENTRY_LINK, backup_path(project_dir))
        if _exists_or_dangling(p)
    ]
    if leftovers:
        names = ", ".join(str(p) for p in leftovers)
        xmsg = (
            f"Leftover state from a previous build: {names}."
            " Remove it or rerun with --clean-stale."
        )
        raise StaleLinkError(xmsg)


def clean_stale(project_dir: Path) -> bool:
    """Undo whatever an interrupted run left behind.

    Removes the entry link (only if it is a symlink) and restores the
    manifest from its backup. Returns True if anything was cleaned.
    """
    logger = get_logger()
    cleaned = False

    entry = project_dir / ENTRY_LINK
    if entry.is_symlink():
        cleaned = unlink(entry) or cleaned
    elif entry.exists():
        xmsg = f"{entry} is a regular file, not a link; refusing to remove it."
        raise StaleLinkError(xmsg)

    backup = backup_path(project_dir)
    if backup.exists():
        text = backup.read_bytes().decode("utf-8")
        manifest, _ = load_manifest(backup)
        restore_manifest(project_dir / MANIFEST_NAME, manifest, text=text)
        backup.unlink()
        logger.info("♻️  Restored %s from backup.", MANIFEST_NAME)
        cleaned = True

    if not cleaned:
        logger.info("Nothing to clean in %s", project_dir)
    return cleaned


# --------------------------------------------------------------------------- #
# session
# --------------------------------------------------------------------------- #


class WorkspaceSession:
    """Scoped ownership of the merged manifest and the entry link.

    Manifests are read (and validated) when the session is constructed, so
    a bad manifest fails before anything on disk changes. Entering the
    session mutates the tool project; `release()` undoes it and is safe to
    call more than once.
    """

    def __init__(self, options: BuildOptions, *, user_manifest: Path) -> None:
        self.options = options
        self.manifest_path = options.manifest_path
        self.link_path = options.link_path
        self.backup_path = backup_path(options.project_dir)

        self.original, self.original_text = load_manifest(self.manifest_path)
        user, _ = load_manifest(user_manifest, missing_ok=True)
        self.merged: Manifest = merge_manifests(self.original, user)

        self._manifest_written = False
        self._linked = False

    # --- acquire ------------------------------------------------------------

    def acquire(self) -> "WorkspaceSession":
        logger = get_logger()
        check_stale(self.options.project_dir)

        self.backup_path.write_bytes(self.original_text.encode("utf-8"))
        self._manifest_written = True
        try:
            write_manifest(self.manifest_path, self.merged)
            logger.debug("Wrote merged manifest %s", self.manifest_path)
            link(self.options.component, self.link_path)
        except BaseException:
            self.release()
            raise
        self._linked = True
        return self

    # --- release ------------------------------------------------------------

    def release(self) -> None:
        """Remove the link, then restore the manifest."""
        if self._linked:
            self._linked = False
            unlink(self.link_path)

        if self._manifest_written:
            self._manifest_written = False
            restore_manifest(
                self.manifest_path, self.original, text=self.original_text
            )
            self.backup_path.unlink(missing_ok=True)

    def __enter__(self) -> "WorkspaceSession":
        return self.acquire()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
