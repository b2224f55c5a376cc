"""Path-based file operations over a DriveBackend.

Every operation takes virtual paths, resolves them to backend IDs on the
spot and returns normalized FileRecords. Paths whose first segment is the
shared prefix address items shared with the caller.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from drivepath.core.config import Settings, settings
from drivepath.core.exceptions import InvalidPathError, MissingParamError, NotFoundError
from drivepath.core.logging import get_logger
from drivepath.schemas.records import DriveItem, FileRecord
from drivepath.services.backend import DriveBackend
from drivepath.services.converters import ConverterTable, default_converters
from drivepath.services.google_drive import GoogleDriveBackend
from drivepath.services.listing import list_all
from drivepath.services.normalizer import normalize_record
from drivepath.services.query import Projection, build_children_query, build_shared_root_query
from drivepath.services.resolver import PathResolver
from drivepath.services.sorting import sort_records
from drivepath.utils.paths import (
    is_shared_root,
    join,
    normalize,
    split_file_path,
    strip_shared,
)

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

Sorter = Callable[..., list[FileRecord]]


def _to_rfc3339(value: datetime | str) -> str:
    """Format a timestamp the way the Drive API expects it (UTC, milliseconds)."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class DriveProvider:
    """List, read, create, update and delete files by virtual path."""

    def __init__(
        self,
        backend: DriveBackend,
        config: Settings | None = None,
        converters: ConverterTable | None = None,
        sorter: Sorter = sort_records,
    ):
        """Initialize the provider.

        Args:
            backend: Backend client bound to the caller's credential.
            config: Settings to use instead of the global instance.
            converters: Export/import table for Workspace documents.
            sorter: Filter and sort collaborator applied to listings.
        """
        self.backend = backend
        self.config = config or settings
        self.converters = converters or default_converters
        self.sorter = sorter
        self.resolver = PathResolver(backend, self.config.ambiguity_policy)

    @classmethod
    def for_access_token(cls, access_token: str, config: Settings | None = None) -> DriveProvider:
        """Build a provider talking to Google Drive with the caller's token."""
        return cls(GoogleDriveBackend(access_token), config)

    # ========== Operations ==========

    async def list(
        self,
        folder_path: str,
        export_type: str | None = None,
        compare_with: str | None = None,
        operator: str | None = None,
        value: Any = None,
        order_by: str | None = None,
        direction: str | None = None,
    ) -> list[FileRecord]:
        """List the contents of a folder.

        Args:
            folder_path: Virtual folder path; ``/Shared`` lists everything
                shared with the caller.
            export_type: ``media``, ``view`` or an export mime type.
            compare_with: Field to filter on.
            operator: Comparison operator for the filter.
            value: Value to compare against.
            order_by: Field to sort by.
            direction: ``asc`` or ``desc``.

        Returns:
            Normalized records of every child.

        Raises:
            InvalidPathError: If the path contains relative segments.
            NotFoundError: If a folder in the path does not exist.
        """
        shared, segments = self._classify(normalize(folder_path))

        if shared and not segments:
            query = build_shared_root_query()
        else:
            folder_id = await self.resolver.resolve_folder(segments, shared=shared)
            query = build_children_query(folder_id)

        items = await list_all(
            self.backend,
            query,
            page_size=self.config.page_size,
            max_pages=self.config.max_pages,
        )
        context = self._context_path(shared, segments)
        records = [self._normalize(item, context, export_type) for item in items]

        logger.info("folder_listed", path=context, item_count=len(records))
        return self.sorter(
            records,
            compare_with=compare_with,
            operator=operator,
            value=value,
            order_by=order_by,
            direction=direction,
        )

    async def read(self, file_path: str, export_type: str | None = None) -> FileRecord:
        """Get a file's metadata and content URI.

        Raises:
            InvalidPathError: If the path is malformed.
            NotFoundError: If the file or one of its folders does not exist.
        """
        shared, folder_segments, file_name = self._classify_file(file_path)

        resolution = await self.resolver.resolve_file_match(
            join(*folder_segments, file_name),
            shared=shared,
            projection=Projection.FULL,
        )
        if resolution.item is None:
            raise NotFoundError(f"File {file_name} does not exist")

        context = self._context_path(shared, folder_segments)
        return self._normalize(resolution.item, context, export_type)

    async def create(
        self,
        file_path: str,
        content: bytes | None,
        mime_type: str | None = None,
        last_modified_time: datetime | str | None = None,
        export_type: str | None = None,
    ) -> FileRecord:
        """Create a file, creating any missing folders on its path.

        Office documents with an import mapping are converted into the
        matching Workspace type after upload; the uploaded original is
        deleted once the converted copy exists.

        Args:
            file_path: Virtual path of the new file.
            content: File bytes.
            mime_type: Content type; guessed from the file name if omitted.
            last_modified_time: Timestamp to record as the last modification.
            export_type: Export type for the returned content URI.

        Returns:
            The created file's record.

        Raises:
            MissingParamError: If no content is given.
            InvalidPathError: If the path is malformed or in the shared namespace.
            AlreadyExistsError: If a file with that name already exists.
        """
        if content is None:
            raise MissingParamError("Missing file content")

        shared, folder_segments, file_name = self._classify_file(file_path)
        if shared:
            raise InvalidPathError(f"Cannot create files under /{self.config.shared_prefix}")

        resolution = await self.resolver.resolve_file_match(
            join(*folder_segments, file_name),
            assert_absent=True,
            create_missing=True,
        )
        parent_id = resolution.parent_id

        content_type = mime_type or mimetypes.guess_type(file_name)[0] or DEFAULT_MIME_TYPE
        created = await self.backend.create_file({
            "title": file_name,
            "parents": [{"id": parent_id}],
            "mimeType": content_type,
        })
        result = await self.backend.upload_content(created.id, content, content_type)

        if self.converters.import_type_for(content_type):
            converted = await self.backend.copy_and_convert(result.id, title=file_name)
            await self.backend.delete_item(result.id)
            logger.info(
                "file_converted",
                name=file_name,
                source_id=result.id,
                file_id=converted.id,
                mime_type=converted.mime_type,
            )
            result = converted

        if last_modified_time is not None:
            result = await self.backend.patch_meta(
                result.id,
                {"modifiedDate": _to_rfc3339(last_modified_time)},
                modified_date_from_body=True,
            )

        logger.info("file_created", name=file_name, parent_id=parent_id, file_id=result.id)
        return self._normalize(result, self._context_path(False, folder_segments), export_type)

    async def update(
        self,
        file_path: str,
        content: bytes | None = None,
        name: str | None = None,
        path: str | None = None,
        last_modified_time: datetime | str | None = None,
        export_type: str | None = None,
    ) -> FileRecord:
        """Change a file's content, name, folder or modification time.

        Fields are applied in that order, each as its own backend call.

        Args:
            file_path: Virtual path of the file to update.
            content: New file bytes.
            name: New file name.
            path: Folder to move the file into; created if missing.
            last_modified_time: Timestamp to record as the last modification.
            export_type: Export type for the returned content URI.

        Returns:
            The record as returned by the last backend call.

        Raises:
            MissingParamError: If no field to update is given.
            InvalidPathError: If either path is malformed; nothing is written.
            NotFoundError: If the file does not exist.
        """
        if content is None and not name and path is None and last_modified_time is None:
            raise MissingParamError("Must specify a field to update")

        shared, folder_segments, file_name = self._classify_file(file_path)
        if path is not None:
            # Target is checked before any write
            target_shared, target_segments = self._classify(normalize(path))

        file_id = await self.resolver.resolve_file(
            join(*folder_segments, file_name),
            shared=shared,
        )
        context = self._context_path(shared, folder_segments)
        result: DriveItem | None = None

        if content is not None:
            content_type = mimetypes.guess_type(name or file_name)[0]
            result = await self.backend.upload_content(file_id, content, content_type)

        if name:
            result = await self.backend.patch_meta(file_id, {"title": name})

        if path is not None:
            target_id = await self.resolver.resolve_folder(
                target_segments,
                shared=target_shared,
                create_missing=True,
            )
            result = await self.backend.patch_meta(file_id, {"parents": [{"id": target_id}]})
            context = self._context_path(target_shared, target_segments)

        if last_modified_time is not None:
            result = await self.backend.patch_meta(
                file_id,
                {"modifiedDate": _to_rfc3339(last_modified_time)},
                modified_date_from_body=True,
            )

        logger.info("file_updated", path=file_path, file_id=file_id)
        return self._normalize(result, context, export_type)

    async def delete(self, path: str) -> None:
        """Delete a file, or a folder when the path ends with a slash.

        Raises:
            InvalidPathError: If the path is malformed or names the root.
            NotFoundError: If the item does not exist.
        """
        segments = normalize(path)

        if path.endswith("/") or not segments:
            shared, folder_segments = self._classify(segments)
            if not folder_segments:
                raise InvalidPathError("Cannot delete the root folder")
            item_id = await self.resolver.resolve_folder(folder_segments, shared=shared)
        else:
            shared, folder_segments, file_name = self._classify_file(path)
            item_id = await self.resolver.resolve_file(
                join(*folder_segments, file_name),
                shared=shared,
            )

        await self.backend.delete_item(item_id)
        logger.info("item_deleted", path=path, item_id=item_id)

    # ========== Private Helpers ==========

    def _classify(self, segments: list[str]) -> tuple[bool, list[str]]:
        """Split off the shared prefix: (shared, remaining segments)."""
        prefix = self.config.shared_prefix
        return is_shared_root(segments, prefix), strip_shared(segments, prefix)

    def _classify_file(self, file_path: str) -> tuple[bool, list[str], str]:
        folder_segments, file_name = split_file_path(file_path)
        shared, folder_segments = self._classify(folder_segments)
        return shared, folder_segments, file_name

    def _context_path(self, shared: bool, segments: list[str]) -> str:
        if shared:
            return join(self.config.shared_prefix, *segments)
        return join(*segments)

    def _normalize(self, item: DriveItem, context: str, export_type: str | None) -> FileRecord:
        return normalize_record(
            item,
            context,
            self.config.provider_name,
            export_type=export_type,
            converters=self.converters,
        )
