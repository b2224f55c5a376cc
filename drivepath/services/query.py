"""Filter and field-projection builder for Drive v2 ``files.list`` queries."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from drivepath.schemas.records import FOLDER_MIME_TYPE, FileKind


class Projection(str, Enum):
    """Field sets a caller can ask for."""

    ID = "id"  # Resolution lookups: just enough to adopt an ID
    FULL = "full"  # Listing and read: everything the normalizer consumes


# Field selectors per projection
FIELDS = {
    Projection.ID: "items(id, title)",
    Projection.FULL: (
        "nextPageToken, items(id, title, mimeType, fileSize, createdDate, "
        "modifiedDate, webContentLink, alternateLink, exportLinks)"
    ),
}


class DriveQuery(BaseModel):
    """A single lookup request: filter expression plus field selection."""

    filter: str
    fields: str


def escape(value: str) -> str:
    """Escape a literal for use inside a single-quoted query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_query(
    kind: FileKind,
    name: str,
    parent_id: str,
    shared: bool = False,
    projection: Projection = Projection.ID,
) -> DriveQuery:
    """Build the query that looks up one named item.

    When ``shared`` is set the parent is ignored: the backend's
    shared-with-me view is flat at the top level.

    Args:
        kind: Restrict to folders, or match any item.
        name: Exact item title to match.
        parent_id: ScopeID of the containing folder.
        shared: Match against items shared with the caller.
        projection: Which fields the response should carry.

    Returns:
        DriveQuery with the filter and fields to send.
    """
    clauses = [f"title = '{escape(name)}'"]
    if shared:
        clauses.append("sharedWithMe = true")
    else:
        clauses.insert(0, f"'{escape(parent_id)}' in parents")
    if kind == FileKind.FOLDER:
        clauses.append(f"mimeType = '{FOLDER_MIME_TYPE}'")
    clauses.append("trashed = false")
    return DriveQuery(filter=" and ".join(clauses), fields=FIELDS[projection])


def build_children_query(parent_id: str) -> DriveQuery:
    """Build the listing query for every child of a folder."""
    return DriveQuery(
        filter=f"'{escape(parent_id)}' in parents and trashed = false",
        fields=FIELDS[Projection.FULL],
    )


def build_shared_root_query() -> DriveQuery:
    """Build the listing query for everything shared with the caller."""
    return DriveQuery(
        filter="sharedWithMe = true and trashed = false",
        fields=FIELDS[Projection.FULL],
    )
