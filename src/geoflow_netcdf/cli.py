"""
geoflow-netcdf command-line interface.

Subcommands:
    convert   Materialize a JSON schema into a NetCDF file
    inspect   Print the dimensions and variables a schema declares
"""

import argparse
import logging
import sys
from enum import IntEnum
from typing import List, Optional

from .config import ConverterConfig
from .conversion import GToNetCDF, SchemaStore
from .core.exceptions import GeoFlowNetCDFError

logger = logging.getLogger(__name__)

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s'


class ExitCode(IntEnum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    PARTIAL = 3


def convert(args: argparse.Namespace) -> int:
    """Write the schema metadata to the output NetCDF file."""
    overrides = {}
    if args.schema:
        overrides['schema_file'] = args.schema
    if args.output:
        overrides['output_file'] = args.output
    if args.mode:
        overrides['mode'] = args.mode
    if args.best_effort:
        overrides['best_effort'] = True
    if args.strict_attributes:
        overrides['strict_attributes'] = True

    if args.config:
        config = ConverterConfig.from_file(args.config, overrides=overrides)
    else:
        config = ConverterConfig(**overrides)

    with GToNetCDF.from_config(config) as converter:
        bindings = converter.write_metadata()
        report = converter.report

    for entry in report.entries:
        print(f"{entry.level}: {entry.entity}: {entry.text}", file=sys.stderr)
    print(f"Wrote {len(bindings)} variables to {config.output_file}")

    if report.has_errors:
        return ExitCode.PARTIAL
    return ExitCode.SUCCESS


def inspect(args: argparse.Namespace) -> int:
    """Print a schema in CDL-like form."""
    schema = SchemaStore.from_file(args.schema)

    print("dimensions:")
    for name, size in schema.dimensions():
        print(f"\t{name} = {size} ;")
    print("variables:")
    for var in schema.variables():
        print(f"\t{var.type_name} {var.name}({', '.join(var.dims)}) ;")
        for name, _, value in schema.attributes_of(var.name):
            print(f"\t\t{var.name}:{name} = \"{value}\" ;")

    undeclared = schema.undeclared_dimensions()
    for var_name, dims in undeclared.items():
        print(f"warning: {var_name} uses undeclared dimensions {dims}", file=sys.stderr)
    return ExitCode.PARTIAL if undeclared else ExitCode.SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='geoflow-netcdf',
        description='Convert GeoFLOW data to NetCDF using a JSON schema',
    )
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True, metavar='<command>')

    convert_parser = subparsers.add_parser('convert', help='Write schema metadata to a NetCDF file')
    convert_parser.add_argument('--schema', help='JSON schema file')
    convert_parser.add_argument('--output', help='NetCDF file to write')
    convert_parser.add_argument('--mode', choices=['read', 'write', 'replace', 'newFile'],
                                help='File mode (default: newFile)')
    convert_parser.add_argument('--config', help='YAML converter configuration')
    convert_parser.add_argument('--best-effort', action='store_true', dest='best_effort',
                                help='Continue with remaining variables when one fails')
    convert_parser.add_argument('--strict-attributes', action='store_true', dest='strict_attributes',
                                help='Fail on the first unparseable attribute value')
    convert_parser.set_defaults(func=convert)

    inspect_parser = subparsers.add_parser('inspect', help='Print the declarations of a schema')
    inspect_parser.add_argument('--schema', required=True, help='JSON schema file')
    inspect_parser.set_defaults(func=inspect)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``geoflow-netcdf`` console script."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return ExitCode.USAGE_ERROR if exc.code else ExitCode.SUCCESS

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format=LOG_FORMAT,
    )

    try:
        return int(args.func(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except GeoFlowNetCDFError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.GENERAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
