# src/sviny/manifest.py

"""Manifest (package.json) loading, merging and restoration.

The tool project's manifest is temporarily overwritten with a merged copy
so the bundler can resolve the user's dependencies, then put back exactly
as it was.
"""

import json
from pathlib import Path
from typing import Any, cast

from .errors import ManifestParseError
from .types import Manifest
from .utils_logs import get_logger


DEPENDENCY_KEYS: tuple[str, ...] = ("dependencies", "devDependencies")


def parse_manifest(text: str, path: Path) -> Manifest:
    """Parse manifest text, raising ManifestParseError on anything but an object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = (
            f"Invalid manifest {path}:"
            f" {e.msg} (line {e.lineno}, column {e.colno})"
        )
        raise ManifestParseError(xmsg) from e

    if not isinstance(data, dict):
        xmsg = f"Invalid manifest {path}: root must be an object, not {type(data).__name__}"
        raise ManifestParseError(xmsg)

    for key in DEPENDENCY_KEYS:
        value = data.get(key)
        if value is not None and not isinstance(value, dict):
            xmsg = (
                f"Invalid manifest {path}: {key!r} must be an object,"
                f" not {type(value).__name__}"
            )
            raise ManifestParseError(xmsg)

    return cast("Manifest", data)


def load_manifest(path: Path, *, missing_ok: bool = False) -> tuple[Manifest, str]:
    """Return the parsed manifest at `path` and its verbatim text.

    With `missing_ok`, an absent file reads as an empty manifest.
    """
    logger = get_logger()
    if not path.exists():
        if missing_ok:
            logger.debug("No manifest at %s, treating as empty.", path)
            return cast("Manifest", {}), ""
        xmsg = f"Manifest not found: {path}"
        raise ManifestParseError(xmsg)

    try:
        # bytes, so line endings survive the restore unchanged
        text = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        xmsg = f"Could not read manifest {path}: {e}"
        raise ManifestParseError(xmsg) from e

    logger.trace("[MANIFEST] loaded %s (%d bytes)", path, len(text))
    return parse_manifest(text, path), text


def merge_manifests(tool: Manifest, user: Manifest) -> Manifest:
    """Overlay the user's dependency maps onto the tool manifest.

    Every other top-level key of `tool` is kept as is. Neither input is
    modified. Both dependency keys are always present in the result.
    """
    merged: dict[str, Any] = dict(tool)
    for key in DEPENDENCY_KEYS:
        base = cast("dict[str, str]", tool.get(key) or {})
        overlay = cast("dict[str, str]", user.get(key) or {})
        merged[key] = {**base, **overlay}
    return cast("Manifest", merged)


def dump_manifest(manifest: Manifest) -> str:
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def write_manifest(path: Path, manifest: Manifest) -> None:
    path.write_text(dump_manifest(manifest), encoding="utf-8")


def restore_manifest(
    path: Path,
    original: Manifest,
    *,
    text: str | None = None,
) -> None:
    """Put the original manifest back on disk.

    When the verbatim original `text` is known it is written as is, so the
    file ends up byte-for-byte what it was before the build.
    """
    logger = get_logger()
    if text:
        path.write_bytes(text.encode("utf-8"))
    else:
        write_manifest(path, original)
    logger.debug("Restored manifest %s", path)
