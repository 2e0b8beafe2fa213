"""Global constants and default configurations for archiver."""

# Global paths will be initialized by core.config
ARCHIVER_HOME = None
ARCHIVER_CONFIG_FILE = None

# Default configuration
DEFAULT_CONFIG = {
    "log_level": "INFO",
    "preserve_xattrs": True,
    "download_timeout": 30,
    "max_download_size": 0,  # 0 means unlimited
}

# Mode for parent directories created on demand during extraction
DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644

# PAX record prefix used by GNU tar and libarchive for extended attributes
PAX_XATTR_PREFIX = "SCHILY.xattr."

# Attribute namespaces captured when archiving (GNU tar's default)
XATTR_NAMESPACES = ("user.",)

# Upper bound on symlink expansions while joining a single entry path
MAX_SYMLINK_EXPANSIONS = 255

# Bytes read from the head of a file for format detection
SNIFF_LENGTH = 512

ZIP_SIGNATURES = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")
GZIP_SIGNATURE = b"\x1f\x8b\x08"
TAR_MAGIC_OFFSET = 257
TAR_MAGIC = b"ustar"

EXTRACTOR_KINDS = ("auto", "tar", "zip")
