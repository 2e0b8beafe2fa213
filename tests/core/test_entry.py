"""Tests for the archive entry model."""
import io
import os
import stat
import tarfile
import zipfile

import pytest

from archiver.core.entry import Entry, EntryKind


def test_from_path_regular_file(tmp_path):
    """Test a regular file becomes a FILE entry with its size and mode."""
    path = tmp_path / "data.bin"
    path.write_bytes(b"12345")
    os.chmod(path, 0o640)

    entry = Entry.from_path(str(path), "data.bin")

    assert entry.kind is EntryKind.FILE
    assert entry.size == 5
    assert entry.permissions == 0o640
    assert stat.S_ISREG(entry.mode)
    assert entry.link_target == ""
    assert entry.xattrs == {}

def test_from_path_directory(tmp_path):
    """Test a directory carries no size."""
    entry = Entry.from_path(str(tmp_path), "dir", {"user.a": b"1"})
    assert entry.kind is EntryKind.DIRECTORY
    assert entry.size == 0
    assert entry.xattrs == {"user.a": b"1"}

def test_from_path_symlink_not_followed(tmp_path):
    """Test a symlink keeps its raw target and is never read through."""
    (tmp_path / "target").write_bytes(b"content")
    os.symlink("target", tmp_path / "link")

    entry = Entry.from_path(str(tmp_path / "link"), "link")

    assert entry.kind is EntryKind.SYMLINK
    assert entry.link_target == "target"
    assert entry.size == 0

def test_from_path_missing(tmp_path):
    """Test a missing path raises the filesystem error."""
    with pytest.raises(FileNotFoundError):
        Entry.from_path(str(tmp_path / "nope"), "nope")

def test_from_path_rejects_fifo(tmp_path):
    """Test special files cannot be archived."""
    if not hasattr(os, "mkfifo"):
        pytest.skip("platform has no FIFOs")
    os.mkfifo(tmp_path / "pipe")
    with pytest.raises(ValueError, match="Unsupported file type"):
        Entry.from_path(str(tmp_path / "pipe"), "pipe")

def test_to_tarinfo_symlink():
    """Test a symlink header has the link target and no size."""
    entry = Entry("a/link", EntryKind.SYMLINK, stat.S_IFLNK | 0o777, link_target="../b")
    info = entry.to_tarinfo()
    assert info.issym()
    assert info.linkname == "../b"
    assert info.size == 0

def test_to_tarinfo_xattrs_as_pax_records():
    """Test attributes are stored as SCHILY.xattr PAX records."""
    entry = Entry("f", EntryKind.FILE, stat.S_IFREG | 0o600, size=1,
                  xattrs={"user.text": b"hello", "user.raw": b"\xff\x00"})
    info = entry.to_tarinfo()
    assert info.pax_headers["SCHILY.xattr.user.text"] == "hello"
    assert info.mode == 0o600

def test_tarinfo_round_trip_keeps_binary_xattrs():
    """Test binary attribute values survive a write and a read of the header."""
    entry = Entry("f", EntryKind.FILE, stat.S_IFREG | 0o600, size=1,
                  xattrs={"user.raw": b"\xff\x00\xfe"})
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=tarfile.PAX_FORMAT, encoding="utf-8") as tar:
        tar.addfile(entry.to_tarinfo(), io.BytesIO(b"x"))

    buffer.seek(0)
    with tarfile.open(fileobj=buffer, mode="r", encoding="utf-8") as tar:
        restored = Entry.from_tarinfo(tar.getmembers()[0])

    assert restored.xattrs == {"user.raw": b"\xff\x00\xfe"}
    assert restored.kind is EntryKind.FILE

def test_from_tarinfo_kinds():
    """Test tar member types map onto entry kinds."""
    directory = tarfile.TarInfo("d")
    directory.type = tarfile.DIRTYPE
    directory.mode = 0o700
    assert Entry.from_tarinfo(directory).kind is EntryKind.DIRECTORY
    assert Entry.from_tarinfo(directory).mode == stat.S_IFDIR | 0o700

    hardlink = tarfile.TarInfo("h")
    hardlink.type = tarfile.LNKTYPE
    assert Entry.from_tarinfo(hardlink) is None

    device = tarfile.TarInfo("dev")
    device.type = tarfile.CHRTYPE
    assert Entry.from_tarinfo(device) is None

def test_from_zipinfo_modes():
    """Test zip external attributes decide kind and mode."""
    info = zipfile.ZipInfo("bin/tool")
    info.external_attr = (stat.S_IFREG | 0o755) << 16
    entry = Entry.from_zipinfo(info)
    assert entry.kind is EntryKind.FILE
    assert entry.permissions == 0o755

    link = zipfile.ZipInfo("bin/alias")
    link.external_attr = (stat.S_IFLNK | 0o777) << 16
    assert Entry.from_zipinfo(link).kind is EntryKind.SYMLINK

    folder = zipfile.ZipInfo("bin/")
    assert Entry.from_zipinfo(folder).kind is EntryKind.DIRECTORY
    assert Entry.from_zipinfo(folder).permissions == 0o755

def test_materialize_file_applies_mode(tmp_path):
    """Test a file is written with its exact stored mode regardless of umask."""
    entry = Entry("x", EntryKind.FILE, stat.S_IFREG | 0o751, size=3, mtime=1000000000)
    target = tmp_path / "sub" / "x"

    entry.materialize(str(target), io.BytesIO(b"abc"))

    assert target.read_bytes() == b"abc"
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o751
    assert int(os.stat(target).st_mtime) == 1000000000

def test_materialize_file_deferred_metadata(tmp_path):
    """Test a deferred file stays owner-writable until apply_metadata runs."""
    entry = Entry("x", EntryKind.FILE, stat.S_IFREG | 0o444, size=3, mtime=1000000000)
    target = tmp_path / "x"

    entry.materialize(str(target), io.BytesIO(b"abc"), defer_metadata=True)
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o600

    entry.apply_metadata(str(target))
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o444
    assert int(os.stat(target).st_mtime) == 1000000000

def test_materialize_symlink_replaces_existing(tmp_path):
    """Test a symlink entry replaces an existing file or link at its path."""
    (tmp_path / "link").write_bytes(b"old")
    entry = Entry("link", EntryKind.SYMLINK, stat.S_IFLNK | 0o777, link_target="elsewhere")

    entry.materialize(str(tmp_path / "link"))
    entry.materialize(str(tmp_path / "link"))

    assert os.readlink(tmp_path / "link") == "elsewhere"

def test_materialize_directory_existing(tmp_path):
    """Test an existing directory is accepted."""
    entry = Entry("d", EntryKind.DIRECTORY, stat.S_IFDIR | 0o755)
    (tmp_path / "d").mkdir()
    entry.materialize(str(tmp_path / "d"))
    assert (tmp_path / "d").is_dir()
