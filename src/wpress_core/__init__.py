"""wpress core - record header codec and shared stream helpers."""
from .errors import (
    ArchiveFilesystemError,
    DestinationExistsError,
    HeaderFieldError,
    MalformedHeaderError,
    TruncatedStreamError,
    WpressError,
)
from .header import Header

__all__ = [
    "Header",
    "WpressError",
    "HeaderFieldError",
    "MalformedHeaderError",
    "TruncatedStreamError",
    "ArchiveFilesystemError",
    "DestinationExistsError",
]
