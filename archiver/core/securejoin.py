"""Join untrusted archive names onto a trusted destination root."""
import os
import re
import stat
from collections import deque
from typing import List

from .. import constants
from ..utils.exceptions import PathEscapeError

_SEPARATORS = re.compile(r'[\\/]+' if os.sep == '\\' else r'/+')


def _split(path: str) -> List[str]:
    return [part for part in _SEPARATORS.split(path) if part]


def _is_absolute(path: str) -> bool:
    return path.startswith(('/', os.sep)) or os.path.isabs(path) or bool(os.path.splitdrive(path)[0])


def _is_within(root: str, path: str) -> bool:
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def secure_join(root: str, unsafe_path: str) -> str:
    """Resolve `unsafe_path` against `root` and return a path inside `root`.

    Components are walked one at a time over the real filesystem. Symlinks
    found on the existing prefix are expanded in place. A relative target
    continues from the link's directory. An absolute target must already
    lie under `root`. Missing components are appended as they are. Nothing
    is cached, so every call sees the tree as it is now, including links
    created by earlier entries.

    Args:
        root: Trusted destination directory
        unsafe_path: Relative name read from an archive

    Returns:
        str: Absolute path that is `root` or a descendant of it

    Raises:
        PathEscapeError: If the name is absolute, climbs above `root`, or
            passes through a symlink that leads out of `root`
    """
    root = os.path.realpath(root)
    if _is_absolute(unsafe_path):
        raise PathEscapeError(f"Archive entry {unsafe_path!r} is an absolute path")

    pending = deque(_split(unsafe_path))
    current = root
    expansions = 0

    while pending:
        part = pending.popleft()
        if part == '.':
            continue
        if part == '..':
            if current == root:
                raise PathEscapeError(f"Archive entry {unsafe_path!r} resolves outside {root}")
            current = os.path.dirname(current)
            continue

        candidate = os.path.join(current, part)
        try:
            st = os.lstat(candidate)
        except (FileNotFoundError, NotADirectoryError):
            current = candidate
            continue

        if not stat.S_ISLNK(st.st_mode):
            current = candidate
            continue

        expansions += 1
        if expansions > constants.MAX_SYMLINK_EXPANSIONS:
            raise PathEscapeError(f"Archive entry {unsafe_path!r} expands too many symlinks")

        link = os.readlink(candidate)
        if _is_absolute(link):
            link = os.path.normpath(link)
            if not _is_within(root, link):
                raise PathEscapeError(
                    f"Archive entry {unsafe_path!r} passes through a symlink to {link} outside {root}"
                )
            current = root
            link = os.path.relpath(link, root)
        pending.extendleft(reversed(_split(link)))

    return current
