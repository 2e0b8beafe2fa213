"""Normalized representation of a single archive member."""
import os
import shutil
import stat
import tarfile
import time
import zipfile
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Dict, Optional

from .. import constants


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


_TAR_TYPES = {
    EntryKind.FILE: tarfile.REGTYPE,
    EntryKind.DIRECTORY: tarfile.DIRTYPE,
    EntryKind.SYMLINK: tarfile.SYMTYPE,
}

_TYPE_BITS = {
    EntryKind.FILE: stat.S_IFREG,
    EntryKind.DIRECTORY: stat.S_IFDIR,
    EntryKind.SYMLINK: stat.S_IFLNK,
}


@dataclass
class Entry:
    """One archive member.

    `name` is slash separated and relative. `link_target` is only set for
    symlinks, and `size` is only non-zero for regular files. File content is
    never held here: it streams from a separate byte source.
    """

    name: str
    kind: EntryKind
    mode: int
    link_target: str = ""
    size: int = 0
    mtime: float = 0.0
    xattrs: Dict[str, bytes] = field(default_factory=dict)

    @property
    def permissions(self) -> int:
        return stat.S_IMODE(self.mode)

    @classmethod
    def from_path(cls, path: str, name: str, xattrs: Optional[Dict[str, bytes]] = None) -> "Entry":
        """Build an entry from a live filesystem object without following symlinks.

        Raises:
            OSError: If the path cannot be stat'ed or the link cannot be read
            ValueError: If the path is not a file, directory or symlink
        """
        st = os.lstat(path)
        if stat.S_ISLNK(st.st_mode):
            kind = EntryKind.SYMLINK
        elif stat.S_ISDIR(st.st_mode):
            kind = EntryKind.DIRECTORY
        elif stat.S_ISREG(st.st_mode):
            kind = EntryKind.FILE
        else:
            raise ValueError(f"Unsupported file type for archiving: {path}")

        return cls(
            name=name,
            kind=kind,
            mode=st.st_mode,
            link_target=os.readlink(path) if kind is EntryKind.SYMLINK else "",
            size=st.st_size if kind is EntryKind.FILE else 0,
            mtime=st.st_mtime,
            xattrs=dict(xattrs or {}),
        )

    @classmethod
    def from_tarinfo(cls, info: tarfile.TarInfo, encoding: str = "utf-8") -> Optional["Entry"]:
        """Build an entry from a tar header.

        Returns None for member types outside file/directory/symlink
        (hardlinks, devices, FIFOs).
        """
        if info.isdir():
            kind = EntryKind.DIRECTORY
        elif info.issym():
            kind = EntryKind.SYMLINK
        elif info.isreg():
            kind = EntryKind.FILE
        else:
            return None

        xattrs = {}
        for key, value in info.pax_headers.items():
            if key.startswith(constants.PAX_XATTR_PREFIX):
                xattrs[key[len(constants.PAX_XATTR_PREFIX):]] = value.encode(encoding, "surrogateescape")

        return cls(
            name=info.name,
            kind=kind,
            mode=_TYPE_BITS[kind] | stat.S_IMODE(info.mode),
            link_target=info.linkname if kind is EntryKind.SYMLINK else "",
            size=info.size if kind is EntryKind.FILE else 0,
            mtime=float(info.mtime),
            xattrs=xattrs,
        )

    @classmethod
    def from_zipinfo(cls, info: zipfile.ZipInfo) -> "Entry":
        """Build an entry from a zip central directory record.

        The Unix mode lives in the high 16 bits of external_attr. Archives made
        on other systems leave it empty, and then plain defaults apply.
        """
        unix_mode = info.external_attr >> 16
        if stat.S_ISLNK(unix_mode):
            kind = EntryKind.SYMLINK
        elif stat.S_ISDIR(unix_mode) or info.is_dir():
            kind = EntryKind.DIRECTORY
        else:
            kind = EntryKind.FILE

        permissions = stat.S_IMODE(unix_mode)
        if not permissions:
            permissions = constants.DEFAULT_DIR_MODE if kind is EntryKind.DIRECTORY else constants.DEFAULT_FILE_MODE

        try:
            mtime = time.mktime(info.date_time + (0, 0, -1))
        except (OverflowError, ValueError):
            mtime = 0.0

        return cls(
            name=info.filename,
            kind=kind,
            mode=_TYPE_BITS[kind] | permissions,
            size=info.file_size if kind is EntryKind.FILE else 0,
            mtime=mtime,
        )

    def to_tarinfo(self, encoding: str = "utf-8") -> tarfile.TarInfo:
        """Build a PAX tar header for this entry."""
        info = tarfile.TarInfo(self.name)
        info.type = _TAR_TYPES[self.kind]
        info.mode = self.permissions
        info.mtime = int(self.mtime)
        info.size = self.size if self.kind is EntryKind.FILE else 0
        if self.kind is EntryKind.SYMLINK:
            info.linkname = self.link_target
        for attr_name, value in self.xattrs.items():
            info.pax_headers[constants.PAX_XATTR_PREFIX + attr_name] = value.decode(encoding, "surrogateescape")
        return info

    def apply_metadata(self, target: str) -> None:
        """Set the stored permission bits and mtime on `target`."""
        os.chmod(target, self.permissions)
        os.utime(target, (self.mtime, self.mtime))

    def materialize(self, target: str, source: Optional[BinaryIO] = None, defer_metadata: bool = False) -> None:
        """Create this entry's filesystem object at `target`.

        `target` must already be resolved and checked against the
        destination root. Directory modes are left to the caller because a
        read-only directory would block its own children. With
        `defer_metadata` a file is left owner-writable at 0o600 until the
        caller runs `apply_metadata`.
        """
        if self.kind is EntryKind.DIRECTORY:
            os.makedirs(target, exist_ok=True)
            return

        parent = os.path.dirname(target)
        if parent:
            os.makedirs(parent, mode=constants.DEFAULT_DIR_MODE, exist_ok=True)

        if self.kind is EntryKind.SYMLINK:
            if os.path.islink(target) or (os.path.lexists(target) and not os.path.isdir(target)):
                os.unlink(target)
            os.symlink(self.link_target, target)
            return

        flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, 'O_NOFOLLOW', 0) | getattr(os, 'O_BINARY', 0)
        fd = os.open(target, flags, 0o600)
        with os.fdopen(fd, 'wb') as out:
            if source is not None:
                shutil.copyfileobj(source, out)
        if not defer_metadata:
            self.apply_metadata(target)
