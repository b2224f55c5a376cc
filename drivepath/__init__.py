"""Path-based file operations over ID-addressed storage backends."""

from drivepath.core.exceptions import (
    AlreadyExistsError,
    AmbiguousPathError,
    DrivePathError,
    InvalidPathError,
    MissingParamError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
)
from drivepath.schemas.records import FileKind, FileRecord
from drivepath.services.provider import DriveProvider
from drivepath.services.resolver import PathResolver

__version__ = "0.1.0"

__all__ = [
    "AlreadyExistsError",
    "AmbiguousPathError",
    "DrivePathError",
    "DriveProvider",
    "FileKind",
    "FileRecord",
    "InvalidPathError",
    "MissingParamError",
    "NotFoundError",
    "PathResolver",
    "UnauthorizedError",
    "UpstreamError",
]
