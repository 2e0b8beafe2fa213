"""Core functionality for archiver."""

from . import config
from . import entry
from . import securejoin
from . import compressor
from . import extractor
from . import detect
from . import xattr
from . import platform
from . import download

__all__ = [
    'config', 'entry', 'securejoin', 'compressor', 'extractor',
    'detect', 'xattr', 'platform', 'download',
]
