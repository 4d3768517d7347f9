"""
Command-line interface for the Callout SDK
Fires a single callout against a configured named credential
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

import requests

from . import __version__
from .client import RestClient
from .config import CalloutConfig
from .exceptions import CalloutSDKError
from .types import HttpVerb

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_TRANSPORT_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='callout-cli',
        description='Make REST callouts through named credentials'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Callout SDK {__version__}'
    )
    parser.add_argument(
        '--config',
        help='Path to the JSON configuration file (default: $CALLOUT_CONFIG_FILE '
             'or callout-config.json)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    setup_call_parser(subparsers)
    subparsers.add_parser('aliases', help='List configured credential aliases')

    return parser


def setup_call_parser(subparsers):
    """Setup the call subcommand."""
    call_parser = subparsers.add_parser('call', help='Make one callout')
    call_parser.add_argument('alias', help='Named credential alias')
    call_parser.add_argument(
        'verb',
        type=str.upper,
        choices=[verb.value for verb in HttpVerb],
        help='HTTP verb'
    )
    call_parser.add_argument('path', help='Resource path relative to the credential URL')
    call_parser.add_argument('--query', default='', help='Query string, encoded as a whole')

    body_group = call_parser.add_mutually_exclusive_group()
    body_group.add_argument('--body', default='', help='Raw request body')
    body_group.add_argument('--body-file', help='Read the request body from a file')

    call_parser.add_argument(
        '--header', '-H',
        action='append',
        default=None,
        metavar='NAME:VALUE',
        help='Request header; replaces the default headers (repeatable)'
    )
    call_parser.add_argument(
        '--include-headers', '-i',
        action='store_true',
        help='Print response headers'
    )


def parse_headers(values: Optional[List[str]]) -> Optional[Dict[str, str]]:
    """Parse NAME:VALUE pairs. Returns None when no header was given."""
    if values is None:
        return None

    headers = {}
    for value in values:
        name, sep, header_value = value.partition(':')
        if not sep or not name.strip():
            raise CalloutSDKError(f"Invalid header '{value}', expected NAME:VALUE", "INVALID_HEADER")
        headers[name.strip()] = header_value.strip()
    return headers


def load_config(args) -> CalloutConfig:
    if args.config:
        return CalloutConfig.from_file(args.config)
    return CalloutConfig.load_default()


def handle_call_command(args) -> int:
    config = load_config(args)

    if args.body_file:
        with open(args.body_file, 'r', encoding='utf-8') as f:
            body = f.read()
    else:
        body = args.body

    headers = parse_headers(args.header)

    with config.build_transport() as transport:
        client = RestClient(
            args.alias,
            registry=config.build_registry(),
            transport=transport,
            builder=config.build_request_builder()
        )
        try:
            response = client.call(args.verb, args.path, args.query, body, headers)
        except requests.exceptions.RequestException as e:
            print(f"Transport error: {e}", file=sys.stderr)
            return EXIT_TRANSPORT_ERROR

    print(f"HTTP {response.status_code} {response.reason}".rstrip())
    if args.include_headers:
        for name, value in response.headers.items():
            print(f"{name}: {value}")
        print()
    if response.body:
        print(response.body)

    return EXIT_OK


def handle_aliases_command(args) -> int:
    registry = load_config(args).build_registry()
    for alias in registry.aliases():
        print(f"{alias}\t{registry.get(alias).base_url}")
    return EXIT_OK


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 when the round trip completed, whatever the status)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s %(message)s'
    )

    try:
        if args.command == 'call':
            return handle_call_command(args)
        elif args.command == 'aliases':
            return handle_aliases_command(args)
        else:
            parser.print_help()
            return EXIT_ERROR

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except CalloutSDKError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
