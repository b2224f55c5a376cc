"""Google Drive v2 backend client.

Implements the DriveBackend contract on top of google-api-python-client.
The caller's OAuth access token is bound when the client is built; token
acquisition and refresh happen elsewhere. Each call is one blocking API
request run in a worker thread, so awaiting it is the single suspension
point of the operation and cancelling the awaiting task abandons the
round trip.
"""

from __future__ import annotations

import asyncio
import io
import re
from typing import Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest, MediaIoBaseUpload

from drivepath.core.exceptions import NotFoundError, UnauthorizedError, UpstreamError
from drivepath.core.logging import get_logger
from drivepath.schemas.records import FOLDER_MIME_TYPE, DriveItem
from drivepath.services.backend import QueryPage

logger = get_logger(__name__)

# Fields requested on single-item responses (create, upload, patch, copy)
ITEM_FIELDS = (
    "id, title, mimeType, fileSize, createdDate, modifiedDate, "
    "webContentLink, alternateLink, exportLinks"
)

DEFAULT_UPLOAD_MIME_TYPE = "application/octet-stream"

# Authorization header scheme, if the caller passed the whole header value
_BEARER_REGEX = re.compile(r"^bearer(?:\s+|$)", re.IGNORECASE)


class GoogleDriveBackend:
    """DriveBackend backed by the Google Drive v2 REST API."""

    def __init__(self, access_token: str):
        """Initialize the client.

        Args:
            access_token: OAuth2 access token, with or without the
                ``Bearer`` prefix of an Authorization header.

        Raises:
            UnauthorizedError: If no access token is given.
        """
        token = _BEARER_REGEX.sub("", (access_token or "").strip()).strip()
        if not token:
            raise UnauthorizedError("No access token specified")

        self._token = token
        self._service: Any = None

    # ========== DriveBackend ==========

    async def query(
        self,
        filter: str,
        fields: str,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> QueryPage:
        """List items matching a Drive query expression.

        Args:
            filter: Drive v2 ``q`` expression.
            fields: Partial-response field selector.
            page_size: Maximum items in this page.
            page_token: Continuation token from the previous page.

        Returns:
            One QueryPage.
        """
        params: dict[str, Any] = {"q": filter, "fields": fields}
        if page_size:
            params["maxResults"] = page_size
        if page_token:
            params["pageToken"] = page_token

        request = self._get_drive_service().files().list(**params)
        result = await self._execute(request, "query")
        return QueryPage.model_validate(result or {})

    async def create_folder(self, name: str, parent_id: str) -> str | None:
        """Create a folder and return its ID (None if the response has none)."""
        body = {
            "title": name,
            "parents": [{"id": parent_id}],
            "mimeType": FOLDER_MIME_TYPE,
        }
        request = self._get_drive_service().files().insert(body=body, fields="id")
        result = await self._execute(request, "create_folder", name=name)
        return (result or {}).get("id")

    async def create_file(self, meta: dict[str, Any]) -> DriveItem:
        """Create a file's metadata entry without content."""
        request = self._get_drive_service().files().insert(body=meta, fields=ITEM_FIELDS)
        result = await self._execute(request, "create_file", name=meta.get("title"))
        return self._item(result, "create_file")

    async def upload_content(
        self, file_id: str, data: bytes, mime_type: str | None = None
    ) -> DriveItem:
        """Replace a file's content with the given bytes."""
        media = MediaIoBaseUpload(
            io.BytesIO(data),
            mimetype=mime_type or DEFAULT_UPLOAD_MIME_TYPE,
            resumable=False,
        )
        request = self._get_drive_service().files().update(
            fileId=file_id,
            media_body=media,
            fields=ITEM_FIELDS,
        )
        result = await self._execute(request, "upload_content", file_id=file_id, size=len(data))
        return self._item(result, "upload_content")

    async def patch_meta(
        self,
        file_id: str,
        fields: dict[str, Any],
        modified_date_from_body: bool = False,
    ) -> DriveItem:
        """Patch metadata fields (title, parents, modifiedDate)."""
        params: dict[str, Any] = {"fileId": file_id, "body": fields, "fields": ITEM_FIELDS}
        if modified_date_from_body:
            params["modifiedDateBehavior"] = "fromBody"

        request = self._get_drive_service().files().patch(**params)
        result = await self._execute(request, "patch_meta", file_id=file_id)
        return self._item(result, "patch_meta")

    async def delete_item(self, file_id: str) -> None:
        """Permanently delete a file or folder."""
        request = self._get_drive_service().files().delete(fileId=file_id)
        await self._execute(request, "delete_item", file_id=file_id)

    async def copy_and_convert(self, file_id: str, title: str | None = None) -> DriveItem:
        """Copy a file, converting it into the matching Workspace format."""
        body = {"title": title} if title else {}
        request = self._get_drive_service().files().copy(
            fileId=file_id,
            convert=True,
            body=body,
            fields=ITEM_FIELDS,
        )
        result = await self._execute(request, "copy_and_convert", file_id=file_id)
        return self._item(result, "copy_and_convert")

    # ========== Private Helpers ==========

    def _get_drive_service(self) -> Any:
        """Get the Drive v2 service, building it on first use."""
        if self._service is None:
            creds = Credentials(token=self._token)
            self._service = build("drive", "v2", credentials=creds, cache_discovery=False)
        return self._service

    async def _execute(self, request: HttpRequest, operation: str, **context: Any) -> Any:
        """Run one API request off the event loop and map its errors."""
        try:
            return await asyncio.to_thread(request.execute)
        except HttpError as e:
            status = e.resp.status
            logger.warning(
                "drive_request_failed",
                operation=operation,
                status=status,
                **context,
            )
            if status in (401, 403):
                raise UnauthorizedError(f"Access denied during {operation}") from e
            if status == 404:
                raise NotFoundError(f"Item not found during {operation}") from e
            raise UpstreamError(f"Google API error: {e}", status_code=status) from e

    @staticmethod
    def _item(result: Any, operation: str) -> DriveItem:
        if not result or not result.get("id"):
            raise UpstreamError(f"No response from Google Drive during {operation}")
        return DriveItem.model_validate(result)
