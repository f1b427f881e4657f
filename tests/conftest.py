# tests/conftest.py
"""
Shared test setup for project.

Every test gets its own tool project and user project under tmp_path, and
the bundler is replaced by a recorder, so no Node toolchain is needed.
"""

import subprocess
from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest
from pytest import Config, Item as PytestItem

import sviny.bundler as mod_bundler
import sviny.meta as mod_meta
import sviny.runtime as mod_runtime
from tests.utils import FakeBundler, make_tool_project, make_trace, make_user_project

TRACE = make_trace("⚡️")


@pytest.fixture(autouse=True)
def _isolate_runtime(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep log level / color and env overrides from leaking between tests."""
    for name in ("LOG_LEVEL", "PROJECT_DIR", "OUT_DIR", "WATCH_INCLUDE", "COMPONENT"):
        monkeypatch.delenv(f"{mod_meta.PROGRAM_ENV}_{name}", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    saved = dict(mod_runtime.current_runtime)
    mod_runtime.current_runtime["log_level"] = "info"
    mod_runtime.current_runtime["use_color"] = False
    yield
    mod_runtime.current_runtime.update(saved)


@pytest.fixture
def tool_project(tmp_path: Path) -> Path:
    return make_tool_project(tmp_path / "tool")


@pytest.fixture
def user_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A user project that is also the current working directory."""
    root = make_user_project(tmp_path / "user")
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def fake_bundler(
    tool_project: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> FakeBundler:
    fake = FakeBundler(tool=tool_project)
    # only the bundler module sees the fake; other subprocess users are untouched
    fake_subprocess = SimpleNamespace(
        run=fake, CalledProcessError=subprocess.CalledProcessError
    )
    monkeypatch.setattr(mod_bundler, "subprocess", fake_subprocess)
    # route the CLI at the throwaway tool project
    monkeypatch.setenv(f"{mod_meta.PROGRAM_ENV}_PROJECT_DIR", str(tool_project))
    TRACE("fake bundler installed for", tool_project)
    return fake


def pytest_collection_modifyitems(
    config: Config,
    items: list[PytestItem],
) -> None:
    """Automatically skip debug tests unless asked for."""
    keywords = config.getoption("-k") or ""
    if "debug" in keywords.lower():
        return  # user explicitly requested them, don't skip

    for item in items:
        if "debug" in item.keywords:
            item.add_marker(
                pytest.mark.skip(reason="Skipped debug test (use -k debug to run)")
            )
