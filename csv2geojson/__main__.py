"""
Main entry point for the csv2geojson package when run as a module.

Uses Python 3.10+ type annotations.
"""

import sys
import argparse
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from csv2geojson.config import ConfigManager, load_settings
from csv2geojson.converter import GeoJSONConverter
from csv2geojson.error_formatter import get_error_summary, print_error
from csv2geojson.errors import Csv2GeoJsonError
from csv2geojson.logging_config import configure_logging

# Set up logger
logger = logging.getLogger("csv2geojson")


def setup_argparse() -> argparse.ArgumentParser:
    """
    Set up command-line argument parsing.
    """
    parser = argparse.ArgumentParser(
        prog="csv2geojson",
        description="Convert a CSV of geolocated IP lookups into a GeoJSON FeatureCollection"
    )

    # Input file (primary parameter)
    parser.add_argument(
        "csv_file",
        nargs="?",
        help="CSV file with columns Timestamp, IP, City, Region, Country, Latitude, Longitude"
    )

    # Output options
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write the GeoJSON to this path (overrides --output-naming)"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the output file (default: current directory)"
    )
    parser.add_argument(
        "--output-naming",
        choices=["derived", "fixed"],
        help="'derived' writes <input name>.geojson, 'fixed' writes --output-name (default: derived)"
    )
    parser.add_argument(
        "--output-name",
        help="File name used with --output-naming fixed (default: output.geojson)"
    )
    parser.add_argument(
        "--indent",
        type=int,
        help="Indentation step of the JSON output (default: 4)"
    )

    # Input options
    parser.add_argument(
        "--skip-header",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Discard the first row as a header (default: yes)"
    )
    parser.add_argument(
        "--encoding",
        help="Encoding of the input CSV file (default: utf-8); output is always UTF-8"
    )
    parser.add_argument(
        "--delimiter",
        help="CSV field delimiter (default: ,)"
    )

    # Coordinate handling
    policy = parser.add_mutually_exclusive_group()
    policy.add_argument(
        "--strict",
        dest="coordinate_policy",
        action="store_const",
        const="strict",
        help="Abort when a latitude or longitude is not a valid number"
    )
    policy.add_argument(
        "--lenient",
        dest="coordinate_policy",
        action="store_const",
        const="lenient",
        help="Write 0.0 for a latitude or longitude that is not a valid number (default)"
    )

    # Configuration file parameters
    parser.add_argument(
        "--config",
        help="Path to configuration file (YAML or JSON)"
    )
    parser.add_argument(
        "--profile",
        default="default",
        help="Configuration profile to use"
    )

    # Logging options
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default="warning",
        help="Set logging level (default: warning)"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs in JSON format"
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to specified file"
    )

    return parser


def handle_convert_command(args: argparse.Namespace) -> int:
    """
    Convert the CSV file named on the command line.

    Args:
        args: Command-line arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        manager = ConfigManager(config_file=args.config, profile=args.profile)
        if args.config:
            logger.info("Using configuration file: %s (profile: %s)", args.config, args.profile)

        settings = load_settings(
            manager,
            skip_header=args.skip_header,
            output_naming=args.output_naming,
            output_name=args.output_name,
            output_dir=args.output_dir,
            coordinate_policy=args.coordinate_policy,
            indent=args.indent,
            encoding=args.encoding,
            delimiter=args.delimiter,
        )

        converter = GeoJSONConverter(settings)
        output_path = converter.convert_file(Path(args.csv_file), args.output)

    except Csv2GeoJsonError as e:
        logger.debug("Conversion failed: %s", get_error_summary(e))
        print_error(e)
        return 1

    print(f"GeoJSON file '{output_path}' created successfully.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the csv2geojson module.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = setup_argparse()
    args = parser.parse_args(argv)

    # A missing input file prints usage and exits cleanly, as the tool always has
    if args.csv_file is None:
        parser.print_usage(sys.stdout)
        return 0

    try:
        configure_logging(
            level=args.log_level.upper(),
            json_output=args.json_logs,
            log_file=args.log_file
        )
    except Csv2GeoJsonError as e:
        print_error(e)
        return 1

    load_dotenv(find_dotenv(usecwd=True))

    logger.info("csv2geojson starting")

    try:
        return handle_convert_command(args)

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130  # Standard Unix exit code for SIGINT
    except Exception as e:
        logger.critical("Unhandled exception: %s", str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
