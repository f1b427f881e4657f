# src/sviny/types.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TypedDict

from typing_extensions import NotRequired

from .constants import DEFAULT_INSTALL_COMMAND, ENTRY_LINK, MANIFEST_NAME


class Manifest(TypedDict):
    name: NotRequired[str]
    version: NotRequired[str]
    dependencies: NotRequired[dict[str, str]]  # package → version specifier
    devDependencies: NotRequired[dict[str, str]]
    # every other package.json key is carried through untouched


class ConfigInput(TypedDict, total=False):
    app: str
    out: str
    watch: bool
    project: str
    bundler: str | list[str]
    install: bool
    install_command: str | list[str]
    log_level: str
    strict_config: bool


class Runtime(TypedDict):
    log_level: str
    use_color: bool


@dataclass(frozen=True)
class BuildOptions:
    component: Path  # absolute, as given (not symlink-resolved)
    out_dir: Path
    watch: bool
    project_dir: Path  # the tool project that owns the manifest and link
    bundler: tuple[str, ...]
    install: bool = False
    install_command: tuple[str, ...] = DEFAULT_INSTALL_COMMAND

    @property
    def link_path(self) -> Path:
        return self.project_dir / ENTRY_LINK

    @property
    def manifest_path(self) -> Path:
        return self.project_dir / MANIFEST_NAME
