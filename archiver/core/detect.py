"""Archive format sniffing."""
from enum import Enum
from pathlib import Path
from typing import Union

from .. import constants


class ArchiveFormat(Enum):
    """Container formats the extractor understands, keyed by content type."""

    ZIP = "application/zip"
    GZIP = "application/x-gzip"
    TAR = "application/x-tar"
    UNKNOWN = "application/octet-stream"


def detect_bytes(head: bytes) -> ArchiveFormat:
    """Classify the leading bytes of an archive."""
    if head.startswith(constants.ZIP_SIGNATURES):
        return ArchiveFormat.ZIP
    if head.startswith(constants.GZIP_SIGNATURE):
        return ArchiveFormat.GZIP
    magic_end = constants.TAR_MAGIC_OFFSET + len(constants.TAR_MAGIC)
    if head[constants.TAR_MAGIC_OFFSET:magic_end] == constants.TAR_MAGIC:
        return ArchiveFormat.TAR
    return ArchiveFormat.UNKNOWN


def detect_format(path: Union[str, Path]) -> ArchiveFormat:
    """Classify the file at `path` by its first bytes.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, 'rb') as f:
        head = f.read(constants.SNIFF_LENGTH)
    return detect_bytes(head)
