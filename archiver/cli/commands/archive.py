"""Archive command implementations."""
import sys
from pathlib import Path

from ...core import config, download
from ...core.compressor import compress, write_tar
from ...core.extractor import get_extractor
from ...core.xattr import XattrBridge, get_xattr_bridge


def _xattr_bridge() -> XattrBridge:
    """Pick the attribute bridge according to the preserve_xattrs setting."""
    global_config = config.load_global_config()
    return get_xattr_bridge(enabled=bool(global_config.get('preserve_xattrs', True)))

def compress_command(args) -> None:
    """Compress a file or directory into a .tar.gz archive.

    Args:
        args: Command line arguments containing source and destination
    """
    compress(args.source, args.destination, xattrs=_xattr_bridge())
    print(f"Created {args.destination}")

def write_tar_command(args) -> None:
    """Write an uncompressed tar stream to a file or stdout."""
    bridge = _xattr_bridge()
    if args.output:
        with open(args.output, 'wb') as out:
            write_tar(args.source, out, xattrs=bridge)
        print(f"Created {args.output}", file=sys.stderr)
    else:
        write_tar(args.source, sys.stdout.buffer, xattrs=bridge)
        sys.stdout.buffer.flush()

def extract_command(args) -> None:
    """Extract an archive into a destination directory.

    Args:
        args: Command line arguments containing source, destination and format
    """
    extractor = get_extractor(args.format)
    extractor(args.source, args.destination, xattrs=_xattr_bridge())
    print(f"Extracted {args.source} to {args.destination}")

def pull_command(args) -> None:
    """Download an archive and extract it.

    Args:
        args: Command line arguments containing url, destination, format and timeout
    """
    global_config = config.load_global_config()
    timeout = args.timeout or global_config.get('download_timeout', 30)
    max_size = global_config.get('max_download_size') or None

    download.pull_bundle(
        args.url,
        Path(args.destination),
        extractor=get_extractor(args.format),
        timeout=timeout,
        max_size=max_size,
        xattrs=_xattr_bridge(),
    )
    print(f"Pulled {args.url} into {args.destination}")
