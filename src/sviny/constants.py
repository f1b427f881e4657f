# src/sviny/constants.py
"""
Central constants used across the project.
"""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"
DEFAULT_ENV_PROJECT_DIR: str = "PROJECT_DIR"
DEFAULT_ENV_OUT_DIR: str = "OUT_DIR"
DEFAULT_ENV_WATCH_INCLUDE: str = "WATCH_INCLUDE"
DEFAULT_ENV_COMPONENT: str = "COMPONENT"

# --- component / tool project layout ---
COMPONENT_SUFFIX: str = ".svelte"
DEFAULT_COMPONENT: str = "App.svelte"
ENTRY_LINK: str = "src/App.svelte"  # relative to the tool project
MANIFEST_NAME: str = "package.json"
BACKUP_SUFFIX: str = ".sviny-backup"
BUNDLER_CONFIG: str = "vite.config.js"

# --- config defaults ---
DEFAULT_STRICT_CONFIG: bool = False
DEFAULT_OUT_DIR: str = "build"
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_WATCH: bool = False
DEFAULT_INSTALL: bool = False
DEFAULT_BUNDLER: tuple[str, ...] = ("npx", "vite")
DEFAULT_INSTALL_COMMAND: tuple[str, ...] = ("npm", "install")
