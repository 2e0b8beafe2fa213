"""Safe extraction of tar, tar.gz and zip archives."""
import logging
import os
import tarfile
import zipfile
from contextlib import closing
from functools import partial
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional, Tuple, Union

from .detect import ArchiveFormat, detect_format
from .entry import Entry, EntryKind
from .securejoin import secure_join
from .xattr import XattrBridge, get_xattr_bridge
from ..utils.exceptions import InvalidInputError, PathEscapeError, UnsupportedFormatError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
EntryStream = Iterator[Tuple[Entry, Optional[BinaryIO]]]


def _read_tar(source_path: str, mode: str) -> EntryStream:
    """Decode tar members one at a time.

    The content handle of a file member is only valid until the next item
    is requested.
    """
    with tarfile.open(source_path, mode, encoding='utf-8') as tar:
        for info in tar:
            entry = Entry.from_tarinfo(info)
            if entry is None:
                logger.warning("Skipping unsupported tar member %s (type %r)", info.name, info.type)
                continue
            if entry.kind is EntryKind.FILE:
                with tar.extractfile(info) as fh:
                    yield entry, fh
            else:
                yield entry, None


def _read_zip(source_path: str) -> EntryStream:
    """Decode zip members in central directory order."""
    with zipfile.ZipFile(source_path) as zf:
        for info in zf.infolist():
            entry = Entry.from_zipinfo(info)
            if entry.kind is EntryKind.DIRECTORY:
                yield entry, None
            elif entry.kind is EntryKind.SYMLINK:
                with zf.open(info) as fh:
                    entry.link_target = fh.read().decode('utf-8')
                yield entry, None
            else:
                with zf.open(info) as fh:
                    yield entry, fh


_READERS = {
    ArchiveFormat.ZIP: _read_zip,
    ArchiveFormat.GZIP: partial(_read_tar, mode='r|gz'),
    ArchiveFormat.TAR: partial(_read_tar, mode='r|'),
}


def _resolve_target(root: str, entry: Entry) -> str:
    """Find where an entry lands under `root`.

    A symlink entry must not be resolved through itself, so only its parent
    goes through the joiner.
    """
    if entry.kind is EntryKind.SYMLINK:
        parent, _, base = entry.name.rstrip('/').rpartition('/')
        if base in ('', '.', '..'):
            raise PathEscapeError(f"Invalid symlink entry name {entry.name!r}")
        return os.path.join(secure_join(root, parent), base)
    return secure_join(root, entry.name)


def _materialize(entries: EntryStream, destination_root: str, xattrs: XattrBridge) -> int:
    root = os.path.realpath(destination_root)
    files = []
    directories = []
    attributed = []
    count = 0

    for entry, source in entries:
        target = _resolve_target(root, entry)
        logger.debug("Extracting %s -> %s", entry.name, target)
        entry.materialize(target, source, defer_metadata=True)
        count += 1
        if target == root:
            continue
        if entry.kind is EntryKind.FILE:
            files.append((target, entry))
        elif entry.kind is EntryKind.DIRECTORY:
            directories.append((target, entry))
        if entry.xattrs:
            attributed.append((target, entry.xattrs))

    # Attributes need write access, so they go on before any stored mode
    for target, attrs in attributed:
        xattrs.apply(target, attrs)

    for target, entry in files:
        entry.apply_metadata(target)

    # Deepest first, so a read-only parent cannot block its children
    for target, entry in sorted(directories, key=lambda item: item[0], reverse=True):
        entry.apply_metadata(target)

    return count


def _run(reader: Callable[[str], EntryStream], source_path: PathLike,
         destination_root: PathLike, xattrs: Optional[XattrBridge]) -> None:
    bridge = xattrs if xattrs is not None else get_xattr_bridge()
    source = os.fspath(source_path)
    destination = os.fspath(destination_root)
    os.makedirs(destination, exist_ok=True)

    logger.info("Extracting %s to %s", source, destination)
    with closing(reader(source)) as entries:
        count = _materialize(entries, destination, bridge)
    logger.info("Extracted %d entries from %s", count, source)


def extract(source_path: PathLike, destination_root: PathLike, xattrs: Optional[XattrBridge] = None) -> None:
    """Extract a zip, tar.gz or tar archive, choosing the reader by content.

    Args:
        source_path: Archive file
        destination_root: Directory to extract into (created if missing)
        xattrs: Attribute bridge; defaults to the platform bridge

    Raises:
        UnsupportedFormatError: If the content is not a recognized archive
        PathEscapeError: If an entry would land outside `destination_root`.
            Entries after it are not extracted.
        OSError: On any filesystem failure
    """
    archive_format = detect_format(source_path)
    reader = _READERS.get(archive_format)
    if reader is None:
        raise UnsupportedFormatError(f"{source_path} is not a supported archive: {archive_format.value}")
    _run(reader, source_path, destination_root, xattrs)


def extract_tar(source_path: PathLike, destination_root: PathLike, xattrs: Optional[XattrBridge] = None) -> None:
    """Extract a tar or tar.gz archive without looking at other formats."""
    archive_format = detect_format(source_path)
    if archive_format not in (ArchiveFormat.GZIP, ArchiveFormat.TAR):
        raise UnsupportedFormatError(f"{source_path} is not a tar archive: {archive_format.value}")
    _run(_READERS[archive_format], source_path, destination_root, xattrs)


def extract_zip(source_path: PathLike, destination_root: PathLike, xattrs: Optional[XattrBridge] = None) -> None:
    """Extract a zip archive without looking at other formats."""
    archive_format = detect_format(source_path)
    if archive_format is not ArchiveFormat.ZIP:
        raise UnsupportedFormatError(f"{source_path} is not a zip archive: {archive_format.value}")
    _run(_READERS[archive_format], source_path, destination_root, xattrs)


_EXTRACTORS = {
    'auto': extract,
    'tar': extract_tar,
    'zip': extract_zip,
}


def get_extractor(kind: str = 'auto') -> Callable[..., None]:
    """Return the extractor for 'auto', 'tar' or 'zip'.

    Raises:
        InvalidInputError: If `kind` is not one of those
    """
    try:
        return _EXTRACTORS[kind]
    except KeyError:
        raise InvalidInputError(f"Unknown extractor '{kind}'. Choose from: {', '.join(_EXTRACTORS)}")
