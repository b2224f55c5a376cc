"""Pytest configuration and fixtures."""

from __future__ import annotations

import itertools
import re
from typing import Any

import pytest

from drivepath.core.config import Settings
from drivepath.core.exceptions import NotFoundError
from drivepath.schemas.records import FOLDER_MIME_TYPE, DriveItem
from drivepath.services.backend import ROOT, QueryPage
from drivepath.services.converters import default_converters

_QUOTED = r"'((?:[^'\\]|\\.)*)'"
_PARENT_REGEX = re.compile(_QUOTED + r" in parents")
_TITLE_REGEX = re.compile(r"title = " + _QUOTED)


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


class FakeDriveBackend:
    """In-memory DriveBackend keyed by ID with parent pointers.

    Understands the filter clauses the query builder emits and paginates
    by offset, so resolver, listing and provider code can run end to end.
    Every call is recorded in ``calls``.
    """

    def __init__(self, page_size: int | None = None, folder_id_override: Any = ...):
        self.items: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.page_size = page_size
        self.folder_id_override = folder_id_override
        self._ids = itertools.count(1)

    # ========== Seeding ==========

    def add(
        self,
        title: str,
        parent: str = ROOT,
        mime_type: str = "text/plain",
        shared: bool = False,
        **extra: Any,
    ) -> str:
        """Add an item and return its ID."""
        item_id = f"id{next(self._ids)}"
        self.items[item_id] = {
            "id": item_id,
            "title": title,
            "mimeType": mime_type,
            "parents": [parent] if parent else [],
            "sharedWithMe": shared,
            "trashed": False,
            **extra,
        }
        return item_id

    def add_folder(self, title: str, parent: str = ROOT, shared: bool = False) -> str:
        """Add a folder and return its ID."""
        return self.add(title, parent, FOLDER_MIME_TYPE, shared)

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        """Get the recorded calls of one method."""
        return [call for call in self.calls if call[0] == method]

    # ========== DriveBackend ==========

    async def query(self, filter, fields, page_size=None, page_token=None) -> QueryPage:
        self.calls.append(("query", filter, fields, page_size, page_token))
        matches = [item for item in self.items.values() if self._matches(item, filter)]

        offset = int(page_token or 0)
        size = self.page_size or page_size or len(matches) or 1
        chunk = matches[offset:offset + size]
        next_token = str(offset + size) if offset + size < len(matches) else None
        return QueryPage(
            items=[DriveItem.model_validate(item) for item in chunk],
            next_page_token=next_token,
        )

    async def create_folder(self, name, parent_id):
        self.calls.append(("create_folder", name, parent_id))
        if self.folder_id_override is not ...:
            return self.folder_id_override
        return self.add_folder(name, parent_id)

    async def create_file(self, meta):
        self.calls.append(("create_file", meta))
        parents = [parent["id"] for parent in meta.get("parents", [])]
        item_id = self.add(meta["title"], parents[0] if parents else ROOT, meta.get("mimeType", ""))
        return DriveItem.model_validate(self.items[item_id])

    async def upload_content(self, file_id, data, mime_type=None):
        self.calls.append(("upload_content", file_id, data, mime_type))
        item = self._get(file_id)
        item["fileSize"] = len(data)
        if mime_type:
            item["mimeType"] = mime_type
        return DriveItem.model_validate(item)

    async def patch_meta(self, file_id, fields, modified_date_from_body=False):
        self.calls.append(("patch_meta", file_id, fields, modified_date_from_body))
        item = self._get(file_id)
        if "title" in fields:
            item["title"] = fields["title"]
        if "parents" in fields:
            item["parents"] = [parent["id"] for parent in fields["parents"]]
        if "modifiedDate" in fields:
            item["modifiedDate"] = fields["modifiedDate"]
        return DriveItem.model_validate(item)

    async def delete_item(self, file_id):
        self.calls.append(("delete_item", file_id))
        self._get(file_id)
        del self.items[file_id]

    async def copy_and_convert(self, file_id, title=None):
        self.calls.append(("copy_and_convert", file_id, title))
        source = self._get(file_id)
        native = default_converters.import_type_for(source["mimeType"]) or source["mimeType"]
        copy_id = self.add(title or source["title"], source["parents"][0], native)
        return DriveItem.model_validate(self.items[copy_id])

    # ========== Private Helpers ==========

    def _get(self, file_id: str) -> dict[str, Any]:
        try:
            return self.items[file_id]
        except KeyError:
            raise NotFoundError(f"No item {file_id}") from None

    @staticmethod
    def _matches(item: dict[str, Any], filter: str) -> bool:
        if "trashed = false" in filter and item["trashed"]:
            return False
        if "sharedWithMe = true" in filter and not item["sharedWithMe"]:
            return False
        if f"mimeType = '{FOLDER_MIME_TYPE}'" in filter and item["mimeType"] != FOLDER_MIME_TYPE:
            return False
        parent = _PARENT_REGEX.search(filter)
        if parent and _unescape(parent.group(1)) not in item["parents"]:
            return False
        title = _TITLE_REGEX.search(filter)
        if title and _unescape(title.group(1)) != item["title"]:
            return False
        return True


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def backend() -> FakeDriveBackend:
    """Create an empty in-memory backend."""
    return FakeDriveBackend()


@pytest.fixture
def test_settings() -> Settings:
    """Create settings independent of the environment."""
    return Settings(
        _env_file=None,
        provider_name="google_drive",
        shared_prefix="Shared",
        page_size=100,
        max_pages=1000,
        ambiguity_policy="first",
    )
