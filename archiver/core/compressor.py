"""Build tar archives from a file or directory tree."""
import logging
import os
import tarfile
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Tuple, Union

from .entry import Entry, EntryKind
from .xattr import XattrBridge, get_xattr_bridge

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _children(dir_path: str, dir_name: str) -> List[Tuple[str, str]]:
    """List (path, archive name) pairs for a directory in listing order."""
    with os.scandir(dir_path) as it:
        return [
            (child.path, child.name if dir_name in ('', '.') else f"{dir_name}/{child.name}")
            for child in it
        ]


def iter_entries(
    source_path: str,
    root_name: Optional[str],
    xattrs: XattrBridge,
) -> Iterator[Tuple[str, Entry]]:
    """Walk `source_path` and yield (path, Entry) pairs, parents first.

    A file source yields a single entry named by its base name. For a
    directory source, `root_name` names the root entry. When it is None the
    root is not emitted and descendants are named relative to it. Symlinks
    are never followed.

    Raises:
        OSError: If any path in the tree cannot be stat'ed or listed
    """
    root = Entry.from_path(source_path, os.path.basename(source_path), xattrs.read(source_path))
    if root.kind is not EntryKind.DIRECTORY:
        yield source_path, root
        return

    if root_name is not None:
        root.name = root_name
        yield source_path, root

    stack = list(reversed(_children(source_path, root_name or '')))
    while stack:
        path, name = stack.pop()
        entry = Entry.from_path(path, name, xattrs.read(path))
        yield path, entry
        if entry.kind is EntryKind.DIRECTORY:
            stack.extend(reversed(_children(path, name)))


def _add_entry(tar: tarfile.TarFile, path: str, entry: Entry) -> None:
    info = entry.to_tarinfo()
    logger.debug("Adding %s (%s)", entry.name, entry.kind.value)
    if entry.kind is EntryKind.FILE:
        with open(path, 'rb') as f:
            tar.addfile(info, f)
    else:
        tar.addfile(info)


def compress(source_path: PathLike, destination_path: PathLike, xattrs: Optional[XattrBridge] = None) -> None:
    """Write a gzip-compressed tar archive of `source_path` to `destination_path`.

    A directory source contributes its contents only. The directory itself
    is not an entry, with or without a trailing slash.

    Args:
        source_path: File or directory to archive
        destination_path: New archive file
        xattrs: Attribute bridge; defaults to the platform bridge

    Raises:
        OSError: If the source or any path under it cannot be read. A
            partially written archive is left in place.
    """
    bridge = xattrs if xattrs is not None else get_xattr_bridge()
    source = os.path.abspath(os.fspath(source_path))
    os.lstat(source)

    logger.info("Compressing %s to %s", source, destination_path)
    count = 0
    with tarfile.open(destination_path, 'w:gz', format=tarfile.PAX_FORMAT, encoding='utf-8') as tar:
        for path, entry in iter_entries(source, None, bridge):
            _add_entry(tar, path, entry)
            count += 1
    logger.info("Wrote %d entries to %s", count, destination_path)


def write_tar(source_path: PathLike, output: BinaryIO, xattrs: Optional[XattrBridge] = None) -> None:
    """Write an uncompressed tar stream of `source_path` to `output`.

    Without a trailing slash the root directory is the first entry and every
    name starts with its base name (``outer-dir/inner-dir/...``). With a
    trailing slash the root is written as ``./`` and only its contents
    follow (``inner-dir/...``). `output` is left open.

    Raises:
        OSError: If the source or any path under it cannot be read
    """
    bridge = xattrs if xattrs is not None else get_xattr_bridge()
    raw = os.fspath(source_path)
    source = os.path.abspath(raw)
    root_name = '.' if raw.endswith(('/', os.sep)) else os.path.basename(source)

    logger.debug("Writing tar stream for %s", source)
    with tarfile.open(fileobj=output, mode='w|', format=tarfile.PAX_FORMAT, encoding='utf-8') as tar:
        for path, entry in iter_entries(source, root_name, bridge):
            _add_entry(tar, path, entry)
