from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Sequence

from multicheck.adapters.sender import check_sender_binary
from multicheck.config import dump_configuration, load_multicheck_config
from multicheck.config.errors import ConfigError, MissingArgumentError, UsageError
from multicheck.config.hostconf import AGENT_HOSTNAME, resolve_target
from multicheck.pipeline.multicheck import make_run_context, run_multicheck

VERSION = "1.0.0"

EXIT_OK = 0
EXIT_USAGE = 3

DEFAULT_AGENT_CONFIG = "/etc/zabbix/zabbix_agentd.conf"
DEFAULT_SERVER_CONFIG = "/etc/zabbix/zabbix_server.conf"
DEFAULT_MULTICHECK_CONFIG = "/etc/zabbix/multicheck.conf"
DEFAULT_SENDER = "/usr/bin/zabbix_sender"

MANUAL = f"""\
multicheck {VERSION}

Run shell commands, pick values out of their output with regular expressions
and send them to the monitoring server as items.

MODES
    multicheck localhost
        Agent mode. Hostname, Server and ServerPort are read from the agent
        config (--agent-config).

    multicheck HOSTNAME
        Server-proxy mode. Data is sent for HOSTNAME to the server found in
        ListenIP and ListenPort of the server config (--server-config).

CONFIG FILE (--config)
    # comment
    command = <shell command line>
    item = /<regex>/, <item prefix>

    Each item line belongs to the command above it. The regex must have two
    capture groups: the first becomes the item key parameter, the second the
    value. A line matching

        item = /(.*)[\\=\\:\\s]+([\\d.]+)/, app.stats

    against "hits 52002" sends app.stats[hits] = 52002. When a key shows up on
    several lines the last one wins. The token @HOSTNAME@ in a command is
    replaced with the target hostname before it runs.

EXIT STATUS
    0   all commands processed ("OK" is printed)
    3   usage or configuration error
"""

logger = logging.getLogger(__name__)


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="multicheck",
        description="Extract values from command output and send them to the monitoring server",
    )
    parser.add_argument(
        "hostname",
        nargs="?",
        metavar="HOSTNAME",
        help=f"Target host; '{AGENT_HOSTNAME}' selects agent mode",
    )
    parser.add_argument(
        "-a",
        "--agent-config",
        default=DEFAULT_AGENT_CONFIG,
        help=f"Path to the agent config (default: {DEFAULT_AGENT_CONFIG})",
    )
    parser.add_argument(
        "-s",
        "--server-config",
        default=DEFAULT_SERVER_CONFIG,
        help=f"Path to the server config (default: {DEFAULT_SERVER_CONFIG})",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_MULTICHECK_CONFIG,
        help=f"Path to the multicheck config (default: {DEFAULT_MULTICHECK_CONFIG})",
    )
    parser.add_argument(
        "-z",
        "--sender",
        default=DEFAULT_SENDER,
        help=f"Path to the sender binary (default: {DEFAULT_SENDER})",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=None,
        help="Kill commands running longer than this many seconds (default: no limit)",
    )
    parser.add_argument(
        "--first-rule-only",
        action="store_true",
        help="Apply only the first item rule of each command",
    )
    parser.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the parsed multicheck config as YAML and exit",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Verbose output; records are shown instead of sent",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("--man", action="store_true", help="Show the manual and exit")
    return parser


def _configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("multicheck").setLevel(level)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.man:
        print(MANUAL.rstrip())
        return EXIT_OK

    _configure_logging(args.debug)

    if args.timeout is not None and args.timeout <= 0:
        print("Argument error: --timeout must be > 0", file=sys.stderr)
        return EXIT_USAGE

    try:
        if not args.hostname and not args.dump_config:
            parser.print_usage(sys.stderr)
            raise MissingArgumentError("missing required argument HOSTNAME")

        cfg = load_multicheck_config(args.config)
        if args.dump_config:
            print(dump_configuration(cfg).rstrip())
            return EXIT_OK

        target = resolve_target(
            args.hostname,
            agent_config=args.agent_config,
            server_config=args.server_config,
        )
        sender_path = check_sender_binary(args.sender)
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except UsageError as exc:
        print(f"Argument error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    ctx = make_run_context(
        target=target,
        config=cfg,
        sender_path=sender_path,
        debug=args.debug,
        first_rule_only=args.first_rule_only,
        timeout_sec=args.timeout,
    )
    logger.debug("Loaded %d commands from %s", len(cfg.commands), args.config)

    run_multicheck(ctx)
    print("OK")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
