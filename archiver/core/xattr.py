"""Extended attribute bridge.

The engine never calls the ``os.*xattr`` functions directly. It goes through
an `XattrBridge`, which is a no-op on platforms without attribute support
and `PosixXattrBridge` where the interpreter exposes the Linux calls.
"""
import errno
import logging
import os
from typing import Dict

from . import platform
from .. import constants
from ..utils.exceptions import AttributeUnsupportedError

logger = logging.getLogger(__name__)

# Failures that mean "this filesystem or this user cannot carry the attribute"
_TOLERATED_ERRNOS = frozenset(
    code for code in (
        errno.ENOTSUP,
        getattr(errno, 'EOPNOTSUPP', None),
        errno.EPERM,
        errno.EACCES,
    ) if code is not None
)

# Reading can also race with removal of a single attribute
_UNREADABLE_ERRNOS = _TOLERATED_ERRNOS | frozenset(
    code for code in (getattr(errno, 'ENODATA', None), getattr(errno, 'ENOATTR', None))
    if code is not None
)


class XattrBridge:
    """Bridge for platforms without extended attributes: reads nothing, sets nothing."""

    supported = False

    def read(self, path: str) -> Dict[str, bytes]:
        return {}

    def set(self, path: str, name: str, value: bytes) -> None:
        pass

    def apply(self, path: str, attrs: Dict[str, bytes]) -> None:
        """Set every attribute in `attrs` on `path` without following symlinks.

        Attributes the filesystem refuses with ENOTSUP, EPERM or EACCES are
        skipped. Any other OSError propagates.
        """
        for name, value in attrs.items():
            try:
                self.set(path, name, value)
            except AttributeUnsupportedError as e:
                logger.debug("Skipping extended attribute: %s", e)


class PosixXattrBridge(XattrBridge):
    """Bridge backed by os.listxattr/os.getxattr/os.setxattr."""

    supported = True

    def read(self, path: str) -> Dict[str, bytes]:
        """Read the user.* attributes of `path` itself, never a link's target."""
        try:
            names = os.listxattr(path, follow_symlinks=False)
        except OSError as e:
            if e.errno in _UNREADABLE_ERRNOS:
                return {}
            raise

        attrs = {}
        for name in names:
            if not name.startswith(constants.XATTR_NAMESPACES):
                continue
            try:
                attrs[name] = os.getxattr(path, name, follow_symlinks=False)
            except OSError as e:
                if e.errno in _UNREADABLE_ERRNOS:
                    continue
                raise
        return attrs

    def set(self, path: str, name: str, value: bytes) -> None:
        try:
            os.setxattr(path, name, value, follow_symlinks=False)
        except OSError as e:
            if e.errno in _TOLERATED_ERRNOS:
                raise AttributeUnsupportedError(
                    f"Cannot set {name} on {path}: {os.strerror(e.errno)}"
                ) from e
            raise


def get_xattr_bridge(enabled: bool = True) -> XattrBridge:
    """Return the attribute bridge for this platform.

    Args:
        enabled: When False, always return the no-op bridge
    """
    if enabled and platform.supports_xattrs():
        return PosixXattrBridge()
    return XattrBridge()
