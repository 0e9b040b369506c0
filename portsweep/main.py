"""
main.py - Command-line entry point for portsweep.

Parses the command line, resolves the target, and runs one scan with a
coloured console reporter attached.  Exit codes: 0 for a completed scan or
help output, 1 for any configuration or resolution error.
"""

import argparse
import sys
from typing import List, Optional

# Third-party
from colorama import Fore, Style
from colorama import init as colorama_init

# Project modules
from . import __version__
from .config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_END_PORT,
    DEFAULT_START_PORT,
    DEFAULT_TIMEOUT_MS,
    ConfigError,
    ScanConfig,
)
from .logger import setup_logger
from .reporter import ConsoleReporter, TerminalTitle
from .resolver import ResolutionError, resolve_target
from .scanner import PortScanner, RandomProbe, StaticProbe

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

EPILOG = f"""\
It is not required to have both min and max ports
Example: '-min 1024 -max 1337' or just '-min 22'

Defaults: All ports, {DEFAULT_CONCURRENCY} threads, {DEFAULT_TIMEOUT_MS} ms timeout
"""


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that exits with status 1 on bad input instead of 2."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(EXIT_ERROR, f"{self.prog}: error: {message}\n")


def build_parser() -> ArgumentParser:
    p = ArgumentParser(
        prog="portsweep",
        description="Concurrent TCP connect port scanner with banner capture",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("target", help="IP address / hostname")
    p.add_argument("-min", "--minport", type=int, default=DEFAULT_START_PORT,
                   metavar="PORT", help="First port to scan (default: %(default)s)")
    p.add_argument("-max", "--maxport", type=int, default=DEFAULT_END_PORT,
                   metavar="PORT", help="Last port to scan (default: %(default)s)")
    p.add_argument("-t", "--threads", type=int, default=DEFAULT_CONCURRENCY,
                   help="Concurrent connection attempts (default: %(default)s)")
    p.add_argument("-T", "--timeout", type=int, default=DEFAULT_TIMEOUT_MS,
                   metavar="MS", help="Per-attempt timeout in ms (default: %(default)s)")
    p.add_argument("-n", "--nobanner", action="store_true",
                   help="Do not try to grab banners from open ports")
    p.add_argument("--random-probe", type=int, nargs="?", const=8, default=None,
                   metavar="LEN", help="Send LEN random printable characters as the "
                   "banner probe instead of the fixed greeting (default LEN: 8)")
    p.add_argument("--show-closed", action="store_true",
                   help="Also list closed ports")
    p.add_argument("--min-latency", type=int, default=0, metavar="MS",
                   help="Minimum time spent on each port, in ms (default: off)")
    p.add_argument("--no-title", action="store_true",
                   help="Do not show the current port in the terminal title")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="Print debug logging to stderr")
    p.add_argument("--log-file", metavar="PATH", help="Also write debug logging to PATH")
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return p


def validate_args(args: argparse.Namespace) -> None:
    """Reject settings that cannot produce a scan, before any network I/O."""
    if args.threads < 1:
        raise ConfigError("Minimum 1 thread")
    if args.timeout < 1:
        raise ConfigError("Timeout must be at least 1 ms")
    if args.min_latency < 0:
        raise ConfigError("Minimum latency cannot be negative")
    if args.random_probe is not None and args.random_probe < 1:
        raise ConfigError("Random probe length must be at least 1")
    for name, value in (("minport", args.minport), ("maxport", args.maxport)):
        if not 1 <= value <= 65535:
            raise ConfigError(f"--{name} must be between 1 and 65535, got {value}")
    if args.minport > args.maxport:
        raise ConfigError(f"Invalid port range: {args.minport}-{args.maxport}")


def build_config(args: argparse.Namespace, address: str) -> ScanConfig:
    if args.random_probe is not None:
        probe = RandomProbe(args.random_probe)
    else:
        probe = StaticProbe()
    return ScanConfig(
        address=address,
        start_port=args.minport,
        end_port=args.maxport,
        concurrency=args.threads,
        timeout=args.timeout / 1000.0,
        grab_banner=not args.nobanner,
        min_latency=args.min_latency / 1000.0,
        probe=probe,
    )


def _fail(message: str) -> int:
    print(f"{Fore.RED}{message}{Style.RESET_ALL}", file=sys.stderr)
    return EXIT_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    colorama_init(autoreset=True)
    parser = build_parser()

    if not argv:
        parser.print_help()
        return EXIT_OK

    args = parser.parse_args(argv)
    logger = setup_logger(verbose=args.verbose, log_file=args.log_file)

    try:
        validate_args(args)
        address = resolve_target(args.target)
        config = build_config(args, address)
    except (ConfigError, ResolutionError) as exc:
        logger.error("Aborting before scan: %s", exc)
        return _fail(str(exc))

    reporter = ConsoleReporter(show_closed=args.show_closed)
    title = TerminalTitle(enabled=False if args.no_title else None, lock=reporter.lock)
    scanner = PortScanner(config)

    reporter.header(args.target, address)
    try:
        summary = scanner.scan(reporter.emit, on_dispatch=title.notify)
    except KeyboardInterrupt:
        print(
            f"\n{Fore.YELLOW}Scan interrupted by user (Ctrl+C).{Style.RESET_ALL}",
            file=sys.stderr,
        )
        logger.warning("Scan interrupted by user (KeyboardInterrupt)")
        return EXIT_INTERRUPTED

    reporter.summary(summary)
    return EXIT_OK


def run() -> None:
    """Console-script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        print(f"\n{Fore.RED}Fatal error: {exc}{Style.RESET_ALL}\n", file=sys.stderr)
        setup_logger().critical("Fatal error: %s", exc, exc_info=True)
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    run()
