# tests/test_config.py
"""Tests for sviny.config (discovery, validation, option resolution)."""

import argparse
from pathlib import Path

import pytest

import sviny.config as mod_config
import sviny.errors as mod_errors
from sviny.constants import DEFAULT_BUNDLER, DEFAULT_INSTALL_COMMAND
from sviny.meta import PROGRAM_ENV, PROGRAM_SCRIPT


def _args(**kwargs: object) -> argparse.Namespace:
    defaults: dict[str, object] = {
        "app": None,
        "out": None,
        "watch": False,
        "config": None,
        "project": None,
        "install": False,
        "log_level": None,
    }
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


# ---------------------------------------------------------------------------
# find / load
# ---------------------------------------------------------------------------


def test_find_config_none(tmp_path: Path) -> None:
    assert mod_config.find_config(_args(), tmp_path) is None


def test_find_config_prefers_jsonc(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    (tmp_path / f".{PROGRAM_SCRIPT}.json").write_text("{}")
    (tmp_path / f".{PROGRAM_SCRIPT}.jsonc").write_text("{}")

    # --- execute ---
    found = mod_config.find_config(_args(), tmp_path)

    # --- verify ---
    assert found == tmp_path / f".{PROGRAM_SCRIPT}.jsonc"
    assert "Multiple config files" in capsys.readouterr().err


def test_find_config_explicit_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        mod_config.find_config(_args(config=str(tmp_path / "x.json")), tmp_path)


def test_find_config_explicit_directory(tmp_path: Path) -> None:
    with pytest.raises(mod_errors.ConfigError, match="directory"):
        mod_config.find_config(_args(config=str(tmp_path)), tmp_path)


def test_load_config_accepts_comments_and_trailing_commas(tmp_path: Path) -> None:
    # --- setup ---
    path = tmp_path / f".{PROGRAM_SCRIPT}.jsonc"
    path.write_text(
        """
        {
          // where the bundle goes
          "out": "dist",
          "watch": true,
        }
        """
    )

    # --- execute ---
    raw = mod_config.load_config(path)

    # --- verify ---
    assert raw == {"out": "dist", "watch": True}


def test_load_config_empty_file_is_none(tmp_path: Path) -> None:
    path = tmp_path / f".{PROGRAM_SCRIPT}.json"
    path.write_text("// nothing yet\n")
    assert mod_config.load_config(path) is None


def test_load_config_rejects_list(tmp_path: Path) -> None:
    path = tmp_path / f".{PROGRAM_SCRIPT}.json"
    path.write_text('["App.svelte"]')
    with pytest.raises(mod_errors.ConfigError, match="JSON object"):
        mod_config.load_config(path)


def test_load_config_syntax_error_mentions_file_once(tmp_path: Path) -> None:
    # --- setup ---
    path = tmp_path / f".{PROGRAM_SCRIPT}.json"
    path.write_text("{oops}")

    # --- execute ---
    with pytest.raises(mod_errors.ConfigError) as exc_info:
        mod_config.load_config(path)

    # --- verify ---
    msg = str(exc_info.value)
    assert path.name in msg
    assert str(tmp_path) not in msg


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


def test_validate_config_valid() -> None:
    summary = mod_config.validate_config(
        {"app": "Main.svelte", "out": "dist", "bundler": ["pnpm", "vite"]}
    )
    assert summary.valid
    assert summary.errors == []
    assert summary.warnings == []


def test_validate_config_unknown_key_warns_with_hint() -> None:
    # --- execute ---
    summary = mod_config.validate_config({"wacth": True})

    # --- verify ---
    assert summary.valid
    assert summary.warnings == ["Unknown key 'wacth' (did you mean 'watch'?)"]


def test_validate_config_unknown_key_strict_is_error() -> None:
    summary = mod_config.validate_config({"strict_config": True, "extra": 1})
    assert not summary.valid
    assert summary.errors == ["Unknown key 'extra'"]


@pytest.mark.parametrize(
    ("raw", "fragment"),
    [
        ({"watch": "yes"}, "'watch' must be bool"),
        ({"out": 3}, "'out' must be str"),
        ({"bundler": ["npx", 1]}, "'bundler' must be a list of strings"),
        ({"log_level": "chatty"}, "'log_level' must be one of"),
    ],
)
def test_validate_config_type_errors(raw: dict[str, object], fragment: str) -> None:
    summary = mod_config.validate_config(raw)
    assert not summary.valid
    assert any(fragment in e for e in summary.errors)


def test_load_and_validate_config_invalid_is_silent_error(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    (tmp_path / f".{PROGRAM_SCRIPT}.json").write_text('{"watch": "yes"}')

    # --- execute ---
    with pytest.raises(mod_errors.ConfigError) as exc_info:
        mod_config.load_and_validate_config(_args(), tmp_path)

    # --- verify ---
    assert exc_info.value.silent is True
    assert "Failed to validate" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# determine_log_level
# ---------------------------------------------------------------------------


def test_log_level_cli_beats_env_and_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(f"{PROGRAM_ENV}_LOG_LEVEL", "error")
    level = mod_config.determine_log_level(_args(log_level="trace"), "warning")
    assert level == "trace"


def test_log_level_env_beats_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    assert mod_config.determine_log_level(_args(), "warning") == "error"


def test_log_level_config_then_default() -> None:
    assert mod_config.determine_log_level(_args(), "warning") == "warning"
    assert mod_config.determine_log_level(_args()) == "info"


# ---------------------------------------------------------------------------
# resolve_options
# ---------------------------------------------------------------------------


def test_resolve_options_defaults(tmp_path: Path) -> None:
    # --- execute ---
    options = mod_config.resolve_options(_args(), tmp_path)

    # --- verify ---
    assert options.component == tmp_path / "App.svelte"
    assert options.out_dir == tmp_path / "build"
    assert options.watch is False
    assert options.install is False
    assert options.bundler == DEFAULT_BUNDLER
    assert options.install_command == DEFAULT_INSTALL_COMMAND
    assert options.project_dir == mod_config.default_project_dir().resolve()


def test_resolve_options_cli(tmp_path: Path) -> None:
    # --- execute ---
    options = mod_config.resolve_options(
        _args(app="custom.svelte", out="dist", watch=True, project="tool"),
        tmp_path,
    )

    # --- verify ---
    assert options.component == tmp_path / "custom.svelte"
    assert options.out_dir == tmp_path / "dist"
    assert options.watch is True
    assert options.project_dir == (tmp_path / "tool").resolve()


def test_resolve_options_config_paths_relative_to_config_dir(tmp_path: Path) -> None:
    # --- setup ---
    config_dir = tmp_path / "conf"
    config = {
        "app": "ui/Main.svelte",
        "out": "public",
        "install": True,
        "bundler": "pnpm exec vite",
        "install_command": ["pnpm", "install"],
    }

    # --- execute ---
    options = mod_config.resolve_options(
        _args(),
        tmp_path,
        config,  # type: ignore[arg-type]
        config_dir,
    )

    # --- verify ---
    assert options.component == config_dir / "ui" / "Main.svelte"
    assert options.out_dir == config_dir / "public"
    assert options.install is True
    assert options.bundler == ("pnpm", "exec", "vite")
    assert options.install_command == ("pnpm", "install")


def test_resolve_options_env_beats_config(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    monkeypatch.setenv(f"{PROGRAM_ENV}_OUT_DIR", "from-env")
    monkeypatch.setenv(f"{PROGRAM_ENV}_PROJECT_DIR", str(tmp_path / "env-tool"))

    # --- execute ---
    options = mod_config.resolve_options(
        _args(),
        tmp_path,
        {"out": "from-config", "project": "cfg-tool"},
    )

    # --- verify ---
    assert options.out_dir == tmp_path / "from-env"
    assert options.project_dir == (tmp_path / "env-tool").resolve()


def test_resolve_options_cli_beats_env(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv(f"{PROGRAM_ENV}_OUT_DIR", "from-env")
    options = mod_config.resolve_options(_args(out="from-cli"), tmp_path)
    assert options.out_dir == tmp_path / "from-cli"


def test_build_options_are_immutable(tmp_path: Path) -> None:
    options = mod_config.resolve_options(_args(), tmp_path)
    with pytest.raises(AttributeError):
        options.watch = True  # type: ignore[misc]


def test_default_project_dir_ships_tool_project() -> None:
    project = mod_config.default_project_dir()
    assert (project / "package.json").is_file()
    assert (project / "vite.config.js").is_file()
    assert (project / "src" / "main.js").is_file()
