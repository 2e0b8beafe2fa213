"""Test fixtures for archiver"""
import errno
import os
from unittest.mock import patch

import pytest

from tests.helpers import STANDARD_FILES, write_tar_archive, write_zip_archive


@pytest.fixture(autouse=True)
def archiver_home(tmp_path):
    """Keep every test away from the real ~/.config/archiver"""
    home = tmp_path / ".config" / "archiver"
    with patch('archiver.constants.ARCHIVER_HOME', home), \
         patch('archiver.constants.ARCHIVER_CONFIG_FILE', home / "config.yaml"):
        yield home


@pytest.fixture
def archive_files():
    return list(STANDARD_FILES)


@pytest.fixture
def tar_gz_archive(tmp_path, archive_files):
    path = tmp_path / "archive.tgz"
    write_tar_archive(path, archive_files)
    return path


@pytest.fixture
def zip_archive(tmp_path, archive_files):
    path = tmp_path / "archive.zip"
    write_zip_archive(path, archive_files)
    return path


@pytest.fixture
def extraction_dest(tmp_path):
    path = tmp_path / "extracted"
    path.mkdir()
    return path


@pytest.fixture
def xattr_capable(tmp_path):
    """Skip unless the temp filesystem accepts user.* extended attributes"""
    if not hasattr(os, "setxattr"):
        pytest.skip("platform has no extended attribute support")
    probe = tmp_path / "xattr-probe"
    probe.write_bytes(b"")
    try:
        os.setxattr(probe, "user.archiver.probe", b"1")
    except OSError as e:
        if e.errno in (errno.ENOTSUP, errno.EPERM, errno.EACCES):
            pytest.skip("filesystem does not support user extended attributes")
        raise
    finally:
        probe.unlink()
    return True
