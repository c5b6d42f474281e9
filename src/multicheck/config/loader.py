from __future__ import annotations

from pathlib import Path
from typing import Union

from .errors import ConfigFileMissingError

PathLike = Union[str, Path]


def read_config_text(path: PathLike, *, description: str = "Config file") -> str:
    """
    Read a config file as UTF-8 text.

    Raises:
        ConfigFileMissingError:
            - if the path does not exist or is not a file
            - or if it cannot be read.
    """

    p = Path(path)

    if not p.exists():
        raise ConfigFileMissingError(f"{description} not found: {p}")

    if not p.is_file():
        raise ConfigFileMissingError(f"{description} path is not a file: {p}")

    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileMissingError(f"Failed to read {description.lower()}: {p}") from e
