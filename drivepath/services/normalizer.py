"""Conversion of backend-native records into provider-agnostic FileRecords."""

from __future__ import annotations

from drivepath.schemas.records import DriveItem, FileKind, FileRecord
from drivepath.services.converters import ConverterTable, default_converters
from drivepath.utils.paths import join

# Special export types a caller may request instead of a mime type
EXPORT_MEDIA = "media"
EXPORT_VIEW = "view"

MEDIA_URL = "https://www.googleapis.com/drive/v3/files/{id}?alt=media"
VIEW_URL = "https://drive.google.com/open?id={id}"


def select_content_uri(
    raw: DriveItem,
    export_type: str | None,
    converters: ConverterTable = default_converters,
) -> str | None:
    """Pick the URI a caller can fetch the item's content from.

    Precedence:
        1. ``media`` on a non-convertible item: direct binary download.
        2. ``view``: interactive open link, for any item.
        3. Convertible item with an export link for ``export_type``: that link.
        4. Convertible item otherwise: link for the converter's default target.
        5. Anything else: the plain web download link.

    A convertible item asked for ``media`` skips rule 1 and lands on rule 4.
    """
    default_target = converters.export_type_for(raw.mime_type)

    if export_type == EXPORT_MEDIA and default_target is None:
        return MEDIA_URL.format(id=raw.id)
    if export_type == EXPORT_VIEW:
        return VIEW_URL.format(id=raw.id)
    if default_target is None:
        return raw.web_content_link
    if export_type and export_type in raw.export_links:
        return raw.export_links[export_type]
    return raw.export_links.get(default_target)


def normalize_record(
    raw: DriveItem,
    context_path: str,
    provider: str,
    export_type: str | None = None,
    converters: ConverterTable = default_converters,
) -> FileRecord:
    """Build the FileRecord for one raw item.

    Args:
        raw: Item as returned by the backend.
        context_path: Virtual path of the containing folder, already carrying
            the shared prefix when the item was reached through it.
        provider: Provider identifier to stamp on the record.
        export_type: ``media``, ``view``, a mime type, or None.
        converters: Export/import table.

    Returns:
        Normalized FileRecord.
    """
    return FileRecord(
        name=raw.title,
        kind=FileKind.FOLDER if raw.is_folder else FileKind.FILE,
        provider=provider,
        # Titles may contain slashes and are appended verbatim
        path=f"{join(context_path).rstrip('/')}/{raw.title}",
        mime_type=raw.mime_type,
        size=raw.file_size,
        created_at_time=raw.created_date,
        last_modified_time=raw.modified_date,
        content_uri=select_content_uri(raw, export_type, converters),
    )
