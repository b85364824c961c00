"""Command line interface: loadcompare [flags] before/ after/"""
import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from src.shared.config import CompareSettings
from src.shared.logging import LoggingManager
from .durations import parse_duration
from .exceptions import CompareError, ConfigError
from .models import CompareOptions, MarginConfig, OutputFormat
from .runner import ComparisonRunner


# Configure logging
logger = logging.getLogger(__name__)

PROG = "loadcompare"


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ConfigError instead of exiting."""

    def error(self, message):
        raise ConfigError(message)


def _duration(text: str) -> int:
    try:
        return parse_duration(text)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser(settings: CompareSettings) -> ArgumentParser:
    """
    Build the argument parser; defaults come from the settings.

    Flags accept one or two leading dashes (-csv and --csv).
    """
    margins = settings.margins
    parser = ArgumentParser(
        prog=PROG,
        usage=f"{PROG} [-csv | -xlsx | -png] [flags] before/ after/",
        description="Compare two directories of vegeta results.",
        allow_abbrev=False,
    )
    parser.add_argument("before_dir", help="directory with the before recordings")
    parser.add_argument("after_dir", help="directory with the after recordings")

    formats = parser.add_mutually_exclusive_group()
    formats.add_argument("-csv", "--csv", dest="output_format", action="store_const", const=OutputFormat.CSV,
                         help="output comma separated values (csv)")
    formats.add_argument("-xlsx", "--xlsx", dest="output_format", action="store_const", const=OutputFormat.XLSX,
                         help="output colored Google Sheets/Excel document (xlsx)")
    formats.add_argument("-png", "--png", dest="output_format", action="store_const", const=OutputFormat.PNG,
                         help="output a latency comparison chart (png)")
    parser.set_defaults(output_format=OutputFormat.MARKDOWN)

    parser.add_argument("-progress", "--progress", action="store_true",
                        help="print progress messages to stderr")
    parser.add_argument("-total-requests-margin", "--total-requests-margin", type=int,
                        default=margins.total_requests,
                        help="margin of error for total requests (in # requests)")
    parser.add_argument("-request-rate-margin", "--request-rate-margin", type=float,
                        default=margins.request_rate,
                        help="margin of error for request rate (in requests/second)")
    parser.add_argument("-throughput-margin", "--throughput-margin", type=float,
                        default=margins.throughput,
                        help="margin of error for throughput (in requests/second)")
    parser.add_argument("-mean-bytes-sent-margin", "--mean-bytes-sent-margin", type=float,
                        default=margins.mean_bytes_sent,
                        help="margin of error for mean bytes sent (in # bytes)")
    parser.add_argument("-mean-bytes-received-margin", "--mean-bytes-received-margin", type=float,
                        default=margins.mean_bytes_received,
                        help="margin of error for mean bytes received (in # bytes)")
    parser.add_argument("-success-margin", "--success-margin", type=float,
                        default=margins.success,
                        help="margin of error for success percentage (in percentage points, 0.0 - 100.0)")
    parser.add_argument("-request-duration-margin", "--request-duration-margin", type=_duration,
                        default=margins.request_duration,
                        help='margin of error for Mean, P50, P95, P99, Max (e.g. "30ms")')
    parser.add_argument("-workers", "--workers", type=int, default=settings.workers,
                        help="number of recordings aggregated in parallel")
    parser.add_argument("-strict", "--strict", action="store_true", default=settings.strict_pairing,
                        help="fail when a recording exists in only one directory")
    parser.add_argument("-log-level", "--log-level", default=settings.log_level,
                        help="logging level for diagnostics on stderr")
    return parser


def parse_args(argv: Optional[List[str]], settings: CompareSettings) -> CompareOptions:
    """
    Parse command line arguments into run options.

    Raises:
        ConfigError: On wrong arity, unknown flags or invalid values.
    """
    args = build_parser(settings).parse_args(argv)
    if args.workers < 1:
        raise ConfigError("-workers must be at least 1")
    try:
        margins = MarginConfig(
            total_requests=args.total_requests_margin,
            request_rate=args.request_rate_margin,
            throughput=args.throughput_margin,
            mean_bytes_sent=args.mean_bytes_sent_margin,
            mean_bytes_received=args.mean_bytes_received_margin,
            success=args.success_margin,
            request_duration=args.request_duration_margin,
        )
    except ValidationError as e:
        raise ConfigError(f"invalid margin: {e}") from e

    return CompareOptions(
        before_dir=args.before_dir,
        after_dir=args.after_dir,
        output_format=args.output_format,
        margins=margins,
        progress=args.progress,
        workers=args.workers,
        strict=args.strict,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point; returns the process exit code.

    0 on success, 1 on a usage error or any failure while comparing.
    """
    try:
        settings = CompareSettings()
        options = parse_args(argv, settings)
    except (ConfigError, ValidationError) as e:
        sys.stderr.write(f"usage: {PROG} [-csv | -xlsx | -png] [flags] before/ after/\n")
        sys.stderr.write(f"{PROG}: error: {e}\n")
        return 1

    LoggingManager.setup_logging(options.log_level, progress=options.progress,
                                 library_log_levels=settings.library_log_levels)
    try:
        ComparisonRunner(options).run()
    except (CompareError, OSError) as e:
        sys.stderr.write(f"{PROG}: error: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
