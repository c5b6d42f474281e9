from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping
import logging

from .errors import ConfigValueError, MissingHostnameError
from .loader import PathLike, read_config_text

logger = logging.getLogger(__name__)

AGENT_HOSTNAME = "localhost"
DEFAULT_SERVER = "127.0.0.1"
DEFAULT_PORT = 10051

# Server listening on every interface; reach it through loopback.
_WILDCARD_ADDRESSES = {"0.0.0.0", "::", "*"}


@dataclass(frozen=True)
class TargetContext:
    hostname: str
    server_address: str
    server_port: int
    mode: str  # "agent" or "server"


def read_key_value_file(path: PathLike, *, description: str = "Host config") -> dict[str, str]:
    """
    Read a 'Key = Value' host configuration file.

    Rules:
      - blank lines and '#' comments are skipped
      - lines without '=' are ignored (include directives and the like)
      - a key set twice keeps the last value
    """
    values: dict[str, str] = {}
    for line in read_config_text(path, description=description).splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        values[key.strip()] = value.strip()
    return values


def _port(values: Mapping[str, str], key: str) -> int:
    raw = values.get(key, "").strip()
    if not raw:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError as e:
        raise ConfigValueError(f"Invalid '{key}' (must be an integer): {raw!r}") from e
    if not 0 < port < 65536:
        raise ConfigValueError(f"Invalid '{key}' (must be between 1 and 65535): {port}")
    return port


def agent_target(values: Mapping[str, str]) -> TargetContext:
    hostname = values.get("Hostname", "").strip()
    if not hostname:
        raise MissingHostnameError("Agent config has no 'Hostname' entry")

    # Server may list several addresses; the first one receives the data.
    servers = [s.strip() for s in values.get("Server", "").split(",") if s.strip()]
    server = servers[0] if servers else DEFAULT_SERVER

    return TargetContext(
        hostname=hostname,
        server_address=server,
        server_port=_port(values, "ServerPort"),
        mode="agent",
    )


def server_target(values: Mapping[str, str], hostname: str) -> TargetContext:
    listen_ip = values.get("ListenIP", "").split(",")[0].strip() or DEFAULT_SERVER
    if listen_ip in _WILDCARD_ADDRESSES:
        listen_ip = DEFAULT_SERVER

    return TargetContext(
        hostname=hostname,
        server_address=listen_ip,
        server_port=_port(values, "ListenPort"),
        mode="server",
    )


def resolve_target(hostname: str, *, agent_config: PathLike, server_config: PathLike) -> TargetContext:
    """
    Build the TargetContext for this run.

    'localhost' selects agent mode (agent config supplies hostname and server),
    anything else selects server-proxy mode for that host.
    """
    if hostname == AGENT_HOSTNAME:
        target = agent_target(read_key_value_file(agent_config, description="Agent config"))
    else:
        target = server_target(read_key_value_file(server_config, description="Server config"), hostname)

    logger.debug(
        "Target %s (%s mode) -> %s:%d",
        target.hostname,
        target.mode,
        target.server_address,
        target.server_port,
    )
    return target
