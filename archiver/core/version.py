"""Version lookup for archiver."""
from importlib import metadata


def get_version() -> str:
    """Return the installed distribution version.

    Source checkouts that were never installed fall back to the version
    declared in the package itself.
    """
    try:
        return metadata.version("archiver")
    except metadata.PackageNotFoundError:
        from archiver import __version__
        return __version__
