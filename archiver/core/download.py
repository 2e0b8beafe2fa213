"""Download functionality for archiver."""
import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlparse

import certifi
import requests

from .extractor import extract
from ..utils.exceptions import InvalidURLError, DownloadError

logger = logging.getLogger(__name__)

def format_bytes(size: float) -> str:
    """Convert bytes to human-readable format."""
    power = 2**10
    for unit in ("B", "KB", "MB", "GB"):
        if size < power:
            return f"{size:.1f} {unit}"
        size /= power
    return f"{size:.1f} TB"

def validate_url(url: str) -> None:
    """Validate a URL for download.

    Args:
        url: URL to validate

    Raises:
        InvalidURLError: If URL is invalid
    """
    try:
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("Invalid URL structure")
        if parsed.scheme not in ['http', 'https']:
            raise ValueError("Unsupported URL scheme")
        if re.search(r'[^\w\-\.:@]', parsed.netloc):
            raise ValueError("Invalid characters in domain")
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL '{url}': {e}")

def download_file(
    url: str,
    destination: Path,
    timeout: int = 30,
    max_size: Optional[int] = None
) -> None:
    """Stream a URL to `destination` through a temporary sibling file.

    Args:
        url: The URL to download from
        destination: Path where the file should be saved
        timeout: Request timeout in seconds
        max_size: Maximum allowed download size in bytes (None or 0 for no limit)

    Raises:
        InvalidURLError: If URL is invalid
        DownloadError: If download fails or exceeds max_size
    """
    validate_url(url)

    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp_file = destination.with_suffix(destination.suffix + ".tmp")
    total_downloaded = 0

    try:
        response = requests.get(
            url,
            stream=True,
            verify=certifi.where(),
            timeout=timeout
        )
        response.raise_for_status()

        total_size = int(response.headers.get('content-length', 0))
        if max_size and total_size > max_size:
            raise DownloadError(f"File size {total_size} exceeds limit {max_size}")

        with open(tmp_file, 'wb') as f:
            for chunk in response.iter_content(chunk_size=8192):
                if not chunk:
                    break
                f.write(chunk)
                total_downloaded += len(chunk)
                if max_size and total_downloaded > max_size:
                    raise DownloadError(f"File size exceeds limit {max_size}")

        tmp_file.replace(destination)
        logger.info("Downloaded %s from %s", format_bytes(total_downloaded), url)

    except requests.exceptions.RequestException as e:
        tmp_file.unlink(missing_ok=True)
        raise DownloadError(f"Download failed: {e}")
    except OSError as e:
        tmp_file.unlink(missing_ok=True)
        raise DownloadError(f"Download failed: {e}")
    except DownloadError:
        tmp_file.unlink(missing_ok=True)
        raise

def pull_bundle(
    url: str,
    destination_root: Path,
    extractor: Callable[..., None] = extract,
    timeout: int = 30,
    max_size: Optional[int] = None,
    **extract_kwargs
) -> None:
    """Download an archive and extract it into `destination_root`.

    The archive is kept in a temporary directory that is always removed,
    whether extraction succeeds or not.

    Raises:
        DownloadError: If the archive cannot be fetched
        ArchiverError: Whatever the extractor raises
    """
    staging = Path(tempfile.mkdtemp(prefix="archiver-pull-"))
    try:
        name = Path(urlparse(url).path).name or "bundle"
        archive = staging / name
        download_file(url, archive, timeout=timeout, max_size=max_size)
        extractor(archive, destination_root, **extract_kwargs)
    finally:
        shutil.rmtree(staging, ignore_errors=True)
