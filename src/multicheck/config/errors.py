# Custom exceptions so startup failures are clean and readable.

from __future__ import annotations


class MulticheckError(Exception):
    """Base error for anything that aborts a run before the command loop."""


class ConfigError(MulticheckError):
    """Base error for configuration problems."""


class ConfigFileMissingError(ConfigError):
    """Raised when a host config or multicheck config file cannot be read."""


class ConfigValueError(ConfigError):
    """Raised when a host config file holds an invalid value."""


class MissingHostnameError(ConfigValueError):
    """Raised when the agent config has no Hostname entry."""


class ConfigParseError(ConfigError):
    """Raised when the multicheck config text is malformed."""

    def __init__(self, message: str, *, line_no: int | None = None, source: str | None = None) -> None:
        self.line_no = line_no
        self.source = source
        where = source or "<config>"
        if line_no is not None:
            where = f"{where}:{line_no}"
        super().__init__(f"{where}: {message}")


class DuplicateCommandError(ConfigParseError):
    """Raised when the same command line is declared twice."""


class OrphanItemError(ConfigParseError):
    """Raised when an item line appears before any command line."""


class ConfigSyntaxError(ConfigParseError):
    """Raised for a line that is neither a command nor an item."""


class EmptyConfigError(ConfigParseError):
    """Raised when no usable command is declared."""


class InvalidPatternError(ConfigParseError):
    """Raised when an item pattern does not compile or lacks two capture groups."""


class UsageError(MulticheckError):
    """Base error for command line problems."""


class MissingArgumentError(UsageError):
    """Raised when the HOSTNAME argument is missing."""


class SenderBinaryNotFoundError(UsageError):
    """Raised when the sender binary does not exist or is not readable."""
