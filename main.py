"""pipelog — latency statistics by day and endpoint from NDJSON access logs."""

import logging
import sys
from argparse import ArgumentParser

from pipelog.config import LOG_LEVELS, OUTPUT_FORMATS, load_config
from pipelog.extractor import ConfigError, ExtractionError
from pipelog.formatter import get_formatter
from pipelog.pipeline import scan
from pipelog.reader import open_source, stdin_is_interactive
from pipelog.report import build_reports

VERSION = "1.0"


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="pipelog",
        description="Request latency statistics from newline-delimited JSON logs.",
    )
    parser.add_argument("-d", "--duration", help="Path to request duration (default: duration)")
    parser.add_argument("-u", "--uri", help="Path to request uri (default: uri)")
    parser.add_argument("-m", "--method", help="Path to request method (default: method)")
    parser.add_argument("-t", "--time", help="Path to request timestamp (default: time)")
    parser.add_argument(
        "-n", "--namespace",
        help="JSON path to apply to all other fields (default: $)",
    )
    parser.add_argument("-f", "--file", help="Log file to be parsed (default: stdin)")
    parser.add_argument(
        "-F", "--fail",
        action="store_true",
        default=None,
        help="Fail if an error occurs while parsing a single line",
    )
    parser.add_argument(
        "-U", "--merge-uuid",
        action="store_true",
        default=None,
        help="Hide UUIDs in URIs and merge URIs with the same structure",
    )
    parser.add_argument("--top", type=int, help="Number of endpoints to show (0 for all)")
    parser.add_argument(
        "--no-stddev",
        dest="show_stddev",
        action="store_false",
        default=None,
        help="Omit the standard deviation column",
    )
    parser.add_argument("--output", choices=OUTPUT_FORMATS, help="Output format (default: table)")
    parser.add_argument("--config", help="YAML config file (default: $PIPELOG_CONFIG)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Diagnostic log level on stderr (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"pipelog {VERSION}")
    return parser


def run(args) -> int:
    """Load config, scan the input, print both reports. Returns the exit code."""
    config = load_config(args.config).with_overrides(
        duration_path=args.duration,
        uri_path=args.uri,
        method_path=args.method,
        time_path=args.time,
        namespace=args.namespace,
        fail_fast=args.fail,
        merge_uuid=args.merge_uuid,
        top_endpoints=args.top,
        show_stddev=args.show_stddev,
        output=args.output,
        log_level=args.log_level,
    )
    logging.getLogger().setLevel(config.log_level.upper())

    if not args.file and stdin_is_interactive():
        print("You should either pipe something into pipelog or specify an existing file to parse")
        return 0

    try:
        result = scan(open_source(args.file), config)
    except ExtractionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    reports = build_reports(result.aggregator, config)
    formatter = get_formatter(config.output)
    print(formatter(reports, summary=result.summary(), show_stddev=config.show_stddev))
    return 0


def main():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )
    parser = build_parser()
    args = parser.parse_args()
    try:
        code = run(args)
    except (ConfigError, FileNotFoundError) as e:
        parser.exit(2, f"{parser.prog}: error: {e}\n")
    sys.exit(code)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
