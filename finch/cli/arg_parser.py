"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
finch command-line interface. Defaults come from the user configuration.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..user_config import get_user_config


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    config = get_user_config()

    parser = argparse.ArgumentParser(
        prog='finch',
        description='Replace images with higher resolution copies found online',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -k YOUR_KEY
      Upgrade every image under the current directory

  %(prog)s ~/Pictures/wallpapers -k YOUR_KEY --tolerance 0.95
      Stricter matching: reject anything less than 95%% similar

  FINCH_API_KEY=YOUR_KEY %(prog)s ~/Pictures --workers 8
      Read the key from the environment and use 8 parallel workers

Notes:
  Files are overwritten in place. Keep a backup if in doubt.
        """
    )

    parser.add_argument(
        'directory',
        type=Path,
        nargs='?',
        default=Path('.'),
        help='Target directory containing images to enhance. Default: current directory'
    )

    parser.add_argument(
        '-k', '--api-key',
        dest='api_key',
        default=config.api_key,
        help='Your Google Vision API key (or set FINCH_API_KEY)'
    )

    parser.add_argument(
        '-t', '--tolerance',
        type=float,
        default=config.default_tolerance,
        help=f'Similarity tolerance (0-1, higher=stricter). Default: {config.default_tolerance}'
    )

    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=config.default_workers,
        help=f'Number of parallel workers. Default: {config.default_workers}'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        default=config.request_timeout,
        help=f'Seconds to wait on each HTTP request. Default: {config.request_timeout}'
    )

    parser.add_argument(
        '-r', '--no-recursive',
        action='store_true',
        help='Do not scan subdirectories'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['/path/to/photos', '-k', 'KEY', '--tolerance', '0.95'])
        >>> args.directory
        PosixPath('/path/to/photos')
        >>> args.tolerance
        0.95
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
