# src/sviny/errors.py

"""Controlled failures raised by sviny.

Each error subclasses the builtin that ``cli.main()`` already treats as a
controlled termination, and carries the exit ``code`` to return.
"""


class SvinyError(Exception):
    code: int = 1
    silent: bool = False  # True when the failure was already reported

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        silent: bool | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        if silent is not None:
            self.silent = silent


class MissingFileError(SvinyError, FileNotFoundError):
    """The requested component file does not exist."""


class ManifestParseError(SvinyError, ValueError):
    """A package.json could not be read as a JSON object."""


class StaleLinkError(SvinyError, RuntimeError):
    """A link or manifest backup from an earlier run is still present."""


class BuildError(SvinyError, RuntimeError):
    """The bundler (or the dependency install) failed.

    ``code`` mirrors the child process return code when there is one.
    """


class UnknownCommandError(SvinyError, ValueError):
    """The first free argument is not a known subcommand."""


class ConfigError(SvinyError, ValueError):
    """The project config file has an invalid shape."""
