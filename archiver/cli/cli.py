"""Command-line interface for archiver."""
import argparse
import os
import sys
from typing import List, Optional

from .. import constants
from ..core import config
from ..core.version import get_version
from ..utils.logging_config import configure_logging
from .commands import archive as archive_commands
from .commands import config as config_commands

def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(prog="archiver", description="Pack and safely unpack application bundles")
    parser.add_argument('-V', '--version', action='version', version=f'archiver {get_version()}')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=False)

    # Archive commands
    compress_parser = subparsers.add_parser('compress', help='Create a .tar.gz archive')
    compress_parser.add_argument('source', help='File or directory to archive')
    compress_parser.add_argument('destination', help='Archive file to create')
    compress_parser.set_defaults(func=archive_commands.compress_command)

    write_tar_parser = subparsers.add_parser(
        'write-tar',
        help='Write an uncompressed tar stream',
        description="Write an uncompressed tar stream.\n\n"
                    "A trailing slash on SOURCE archives the directory's contents as './'; "
                    "without it the directory itself is the top-level entry.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    write_tar_parser.add_argument('source', help='File or directory to archive')
    write_tar_parser.add_argument('-o', '--output', help='Output file (default: stdout)')
    write_tar_parser.set_defaults(func=archive_commands.write_tar_command)

    extract_parser = subparsers.add_parser('extract', help='Extract a zip, tar.gz or tar archive')
    extract_parser.add_argument('source', help='Archive file to extract')
    extract_parser.add_argument('destination', help='Directory to extract into')
    extract_parser.add_argument('--format', choices=constants.EXTRACTOR_KINDS, default='auto',
                                help='Force an archive format instead of detecting it')
    extract_parser.set_defaults(func=archive_commands.extract_command)

    pull_parser = subparsers.add_parser('pull', help='Download an archive and extract it')
    pull_parser.add_argument('url', help='http(s) URL of the archive')
    pull_parser.add_argument('destination', help='Directory to extract into')
    pull_parser.add_argument('--format', choices=constants.EXTRACTOR_KINDS, default='auto',
                             help='Force an archive format instead of detecting it')
    pull_parser.add_argument('--timeout', type=int, help='Request timeout in seconds')
    pull_parser.set_defaults(func=archive_commands.pull_command)

    # Config commands
    config_parser = subparsers.add_parser(
        'config',
        help='Global configuration commands',
        description="Global configuration commands.\n\nKeys: " + ", ".join(constants.DEFAULT_CONFIG.keys())
    )
    config_subparsers = config_parser.add_subparsers(dest='config_command')

    config_set = config_subparsers.add_parser('set', help='Set a config value')
    config_set.add_argument('key', help='Config key')
    config_set.add_argument('value', help='Config value')
    config_set.set_defaults(func=config_commands.config_set_command)

    config_get = config_subparsers.add_parser('get', help='Get a config value')
    config_get.add_argument('key', help='Config key')
    config_get.set_defaults(func=config_commands.config_get_command)

    config_list = config_subparsers.add_parser('list', help='List config values')
    config_list.set_defaults(func=config_commands.config_list_command)

    return parser

def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, if None uses sys.argv[1:]

    Returns:
        int: Exit code
    """
    if args is None:
        args = sys.argv[1:]

    parser = create_parser()
    parsed_args = parser.parse_args(args)

    try:
        if parsed_args.verbose:
            configure_logging('DEBUG')
        elif os.environ.get('ARCHIVER_LOG_LEVEL'):
            configure_logging()
        else:
            configure_logging(config.load_global_config().get('log_level'))

        if hasattr(parsed_args, 'func'):
            parsed_args.func(parsed_args)
            return 0
        else:
            parser.print_help()
            return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

if __name__ == '__main__':
    sys.exit(main())
