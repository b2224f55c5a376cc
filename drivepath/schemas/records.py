"""Pydantic schemas for backend-native and normalized file records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Reserved mime type the backend uses for folders
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


class FileKind(str, Enum):
    """Whether a record is a file or a folder."""

    FILE = "file"
    FOLDER = "folder"


class DriveItem(BaseModel):
    """One file or folder as returned by the Drive v2 API.

    Field aliases follow the wire names so raw response dicts can be
    validated directly.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str = ""
    mime_type: str = Field("", alias="mimeType")
    # Absent for Workspace documents, which have no stored bytes
    file_size: int | None = Field(None, alias="fileSize")
    created_date: datetime | None = Field(None, alias="createdDate")
    modified_date: datetime | None = Field(None, alias="modifiedDate")
    web_content_link: str | None = Field(None, alias="webContentLink")
    alternate_link: str | None = Field(None, alias="alternateLink")
    export_links: dict[str, str] = Field(default_factory=dict, alias="exportLinks")

    @property
    def is_folder(self) -> bool:
        """Check if this item is a folder."""
        return self.mime_type == FOLDER_MIME_TYPE


class FileRecord(BaseModel):
    """Provider-agnostic metadata for one file or folder.

    Serialize with ``model_dump(by_alias=True)`` to get the camelCase shape
    returned to callers.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    kind: FileKind
    provider: str
    path: str = Field(..., description="Fully qualified virtual path, including /Shared when shared")
    mime_type: str = Field(..., alias="mimeType")
    size: int | None = None
    created_at_time: datetime | None = Field(None, alias="createdAtTime")
    last_modified_time: datetime | None = Field(None, alias="lastModifiedTime")
    content_uri: str | None = Field(None, alias="contentURI")
