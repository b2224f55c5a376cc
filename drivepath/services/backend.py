"""Contract for ID-addressed storage backends.

The resolver, listing and provider layers only talk to a backend through
this protocol, so any store that addresses items by opaque ID and parent
pointers can be plugged in. The caller's credential is bound when the
backend instance is built; nothing here reads ambient state.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from drivepath.schemas.records import DriveItem

# Distinguished ScopeID of the backend's top-level container
ROOT = "root"


class QueryPage(BaseModel):
    """One page of a backend query."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    items: list[DriveItem] = Field(default_factory=list)
    next_page_token: str | None = Field(None, alias="nextPageToken")


@runtime_checkable
class DriveBackend(Protocol):
    """Remote calls the path engine depends on. Every method is one round trip."""

    async def query(
        self,
        filter: str,
        fields: str,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> QueryPage: ...

    async def create_folder(self, name: str, parent_id: str) -> str | None: ...

    async def create_file(self, meta: dict[str, Any]) -> DriveItem: ...

    async def upload_content(
        self, file_id: str, data: bytes, mime_type: str | None = None
    ) -> DriveItem: ...

    async def patch_meta(
        self,
        file_id: str,
        fields: dict[str, Any],
        modified_date_from_body: bool = False,
    ) -> DriveItem: ...

    async def delete_item(self, file_id: str) -> None: ...

    async def copy_and_convert(self, file_id: str, title: str | None = None) -> DriveItem: ...
