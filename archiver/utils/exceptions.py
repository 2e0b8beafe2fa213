"""
Custom exceptions for the archiver project
"""

class ArchiverError(Exception):
    """Base exception for all archiver-specific errors"""
    pass

class InvalidInputError(ArchiverError, ValueError):
    """Raised when invalid input is provided"""
    pass

class ConfigValidationError(ArchiverError):
    """Raised when configuration validation fails"""
    pass

class SecurityError(ArchiverError):
    """Raised for security-related issues"""
    pass

class PathEscapeError(SecurityError):
    """Raised when an archive entry would resolve outside the destination root"""
    pass

class UnsupportedFormatError(ArchiverError):
    """Raised when a source is not in the format a reader expects"""
    pass

class AttributeUnsupportedError(ArchiverError):
    """Raised when the filesystem refuses an extended attribute (ENOTSUP/EPERM)"""
    pass

class DownloadError(ArchiverError):
    """Raised for download-related errors"""
    pass

class InvalidURLError(InvalidInputError):
    """Raised when an invalid URL is provided"""
    pass
