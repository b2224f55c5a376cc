"""Pydantic schemas for drive records."""

from drivepath.schemas.records import FOLDER_MIME_TYPE, DriveItem, FileKind, FileRecord

__all__ = [
    "DriveItem",
    "FOLDER_MIME_TYPE",
    "FileKind",
    "FileRecord",
]
