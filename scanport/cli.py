from __future__ import annotations

import argparse
import os
import sys

from .errors import InvalidArgument, ScanportError
from .log import create_logger
from .output import FORMATS, print_results
from .ports import parse_port
from .scanner import DEFAULT_BACKOFF_S, scan
from .targets import expand_targets
from .timeouts import parse_timeout


class _Parser(argparse.ArgumentParser):
    # Report usage errors on one line like every other failure.
    def error(self, message):
        raise InvalidArgument(message)


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return n


def _non_negative_float(value: str) -> float:
    f = float(value)
    if not f >= 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return f


def build_parser(prog=None) -> argparse.ArgumentParser:
    p = _Parser(
        prog=prog,
        description="Find which hosts on IPv4 /24 subnets have a TCP port open.",
    )
    p.add_argument("--debug", action="store_true", help="Log every probe outcome to stderr")
    p.add_argument("--format", choices=FORMATS, default="txt", help="Output format (default: txt)")
    p.add_argument("--all", action="store_true", help="Output every outcome, not only open hosts")
    p.add_argument(
        "--max-workers",
        type=_positive_int,
        help="Maximum simultaneous probes (default: one per host)",
    )
    p.add_argument(
        "--backoff",
        type=_non_negative_float,
        default=DEFAULT_BACKOFF_S,
        help=f"Seconds to wait when out of file descriptors (default: {DEFAULT_BACKOFF_S})",
    )
    p.add_argument("--fail-fast", action="store_true", help="Abort the scan on the first socket error")
    p.add_argument("timeout", metavar="TIMEOUT", help="Seconds to wait for each connection, e.g. 0.5")
    p.add_argument("port", metavar="PORT", help="TCP port to probe")
    p.add_argument("subnets", metavar="SUBNET", nargs="+", help="Subnet shaped A.B.C.0/24")
    return p


def main(argv=None) -> int:
    prog = os.path.basename(sys.argv[0]) or "scanport"
    if prog == "__main__.py":
        prog = "scanport"

    try:
        parser = build_parser(prog)
        args = parser.parse_args(argv)

        timeout = parse_timeout(args.timeout)
        port = parse_port(args.port)
        targets = expand_targets(args.subnets, port)

        create_logger(args.debug)
        results = scan(
            targets,
            timeout,
            max_workers=args.max_workers,
            backoff_s=args.backoff,
            fail_fast=args.fail_fast,
        )
    except ScanportError as e:
        print(f"{prog}: {e}", file=sys.stderr)
        return 1

    print_results(results, fmt=args.format, include_all=args.all)
    return 0
