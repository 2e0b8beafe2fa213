"""Command implementations for archiver CLI."""

from .archive import (
    compress_command,
    write_tar_command,
    extract_command,
    pull_command
)
from .config import (
    config_set_command,
    config_get_command,
    config_list_command
)

__all__ = [
    'compress_command',
    'write_tar_command',
    'extract_command',
    'pull_command',
    'config_set_command',
    'config_get_command',
    'config_list_command'
]
