"""Platform-specific functionality."""
import os

def supports_xattrs() -> bool:
    """Check if the interpreter exposes the Linux-style xattr calls.

    Returns:
        bool: True when os.setxattr/os.getxattr/os.listxattr are available
    """
    return all(hasattr(os, name) for name in ('setxattr', 'getxattr', 'listxattr'))
