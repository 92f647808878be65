"""
Exceptions raised by the scan engine

Every failure of a scan surfaces as a ScanError subclass so callers can
tell a bad configuration, a missing file, and a broken file apart.
"""

from typing import Optional


class ScanError(Exception):
    """Base class for all scan failures"""


class ConfigurationError(ScanError, ValueError):
    """The scan was configured incorrectly (raised before any I/O)"""


class NotFoundError(ScanError, FileNotFoundError):
    """A declared input path does not exist"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class SchemaReadError(ScanError):
    """The representative file could not be opened or its schema parsed"""


class SplitPlanningError(ScanError):
    """The format service failed to compute splits"""


class ReaderOpenError(ScanError):
    """A split could not be opened for reading"""


class ReadError(ScanError):
    """A row could not be read from an open split"""
