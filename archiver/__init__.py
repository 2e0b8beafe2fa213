"""archiver - Safe packing and unpacking of application bundles."""
from .core.config import init_paths
from .core.compressor import compress, write_tar
from .core.detect import ArchiveFormat, detect_format
from .core.extractor import extract, extract_tar, extract_zip, get_extractor
from .core.securejoin import secure_join

# Initialize global paths
init_paths()

__version__ = "0.1.0"
__all__ = [
    'compress',
    'write_tar',
    'extract',
    'extract_tar',
    'extract_zip',
    'get_extractor',
    'detect_format',
    'ArchiveFormat',
    'secure_join',
]
