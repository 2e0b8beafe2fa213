"""Builders for test archives."""
import io
import stat
import tarfile
import zipfile
from typing import NamedTuple


class ArchiveFile(NamedTuple):
    """Description of one member for the archive builders below."""
    name: str
    body: bytes = b""
    mode: int = 0
    dir: bool = False
    link: str = ""
    xattrs: dict = {}


def _tar_info(member: ArchiveFile) -> tarfile.TarInfo:
    info = tarfile.TarInfo(member.name)
    if member.dir:
        info.type = tarfile.DIRTYPE
        info.mode = member.mode or 0o755
    elif member.link:
        info.type = tarfile.SYMTYPE
        info.linkname = member.link
        info.mode = 0o777
    else:
        info.size = len(member.body)
        info.mode = member.mode or 0o644
    for name, value in member.xattrs.items():
        info.pax_headers["SCHILY.xattr." + name] = value.decode("utf-8", "surrogateescape")
    return info


def write_tar_archive(path, files, mode="w:gz") -> None:
    with tarfile.open(path, mode, format=tarfile.PAX_FORMAT, encoding="utf-8") as tf:
        for member in files:
            info = _tar_info(member)
            body = io.BytesIO(member.body) if info.isreg() else None
            tf.addfile(info, body)


def write_zip_archive(path, files) -> None:
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for member in files:
            info = zipfile.ZipInfo(member.name)
            if member.dir:
                info.external_attr = (stat.S_IFDIR | (member.mode or 0o755)) << 16
                zf.writestr(info, b"")
            elif member.link:
                info.external_attr = (stat.S_IFLNK | 0o777) << 16
                zf.writestr(info, member.link.encode("utf-8"))
            else:
                info.external_attr = (stat.S_IFREG | (member.mode or 0o644)) << 16
                zf.writestr(info, member.body)


STANDARD_FILES = [
    ArchiveFile("./", dir=True),
    ArchiveFile("./some-file", body=b"some-file-contents"),
    ArchiveFile("./empty-dir/", dir=True),
    ArchiveFile("./nonempty-dir/", dir=True),
    ArchiveFile("./nonempty-dir/file-in-dir", body=b"file-in-dir-contents"),
    ArchiveFile("./legit-exe-not-a-virus.bat", body=b"rm -rf /", mode=0o755),
    ArchiveFile("./some-symlink", link="some-file"),
]
