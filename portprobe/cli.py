"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys

from portprobe import __version__
from portprobe.config import settings
from portprobe.output import FORMATS, render
from portprobe.scanner import run_scan
from portprobe.schemas import ScanRequest
from portprobe.utils import configure_logging, parse_port_spec, read_hosts


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="portprobe",
        description="Test TCP reachability of ports on one or more hosts",
    )
    p.add_argument("hosts", nargs="+", metavar="HOST", help="Host or IP to probe ('-' reads hosts from stdin)")
    p.add_argument("-t", "--tcp-ports", help="TCP port spec: 22,80,443 or 1-1024 or mixed, !N excludes")
    p.add_argument("-u", "--udp-ports", help="UDP port spec (accepted, not probed)")
    p.add_argument(
        "--tcp-timeout",
        type=int,
        default=settings.tcp_timeout_ms,
        help=f"TCP connect timeout in ms (default: {settings.tcp_timeout_ms})",
    )
    p.add_argument(
        "--udp-timeout",
        type=int,
        default=settings.udp_timeout_ms,
        help=f"UDP timeout in ms (default: {settings.udp_timeout_ms})",
    )
    p.add_argument("--format", choices=FORMATS, default="table", help="Report format (default: table)")
    p.add_argument("--log-level", default=settings.log_level, help=f"Log level (default: {settings.log_level})")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def _collect_hosts(values: list[str]) -> list[str]:
    hosts: list[str] = []
    for value in values:
        if value == "-":
            hosts.extend(read_hosts(sys.stdin))
        else:
            hosts.append(value)
    return hosts


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = configure_logging(args.log_level)

    try:
        request = ScanRequest(
            hosts=_collect_hosts(args.hosts),
            tcp_ports=parse_port_spec(args.tcp_ports) if args.tcp_ports else [],
            udp_ports=parse_port_spec(args.udp_ports) if args.udp_ports else [],
            tcp_timeout_ms=args.tcp_timeout,
            udp_timeout_ms=args.udp_timeout,
        )
    except ValueError as exc:
        logger.debug("Rejected scan request", exc_info=True)
        print(f"portprobe: error: {exc}", file=sys.stderr)
        return 2

    results = run_scan(request)
    print(render(results, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
