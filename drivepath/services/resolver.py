"""Path-to-ID resolution over an ID-addressed backend.

Folder paths are walked one segment at a time from the backend root; each
lookup depends on the ID resolved by the previous one, so the walk is
strictly sequential. Missing folders can be created along the way. Nothing
is cached between calls: every resolution reflects the backend as it is now.

Partial folder chains left behind by a failed deep create are not rolled
back. Re-resolving the same path finds the segments that already exist and
creates only the rest.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from drivepath.core.exceptions import (
    AlreadyExistsError,
    AmbiguousPathError,
    NotFoundError,
    UpstreamError,
)
from drivepath.core.logging import get_logger
from drivepath.schemas.records import DriveItem, FileKind
from drivepath.services.backend import ROOT, DriveBackend
from drivepath.services.query import Projection, build_query
from drivepath.utils.paths import normalize, split_file_path

logger = get_logger(__name__)

AmbiguityPolicy = Literal["first", "error"]


class Resolution(BaseModel):
    """Outcome of resolving a path.

    For files, ``parent_id`` is the containing folder and ``item`` the
    matched backend record (None when the file is absent).

    ``ambiguous`` lists the segment names that matched more than one item
    under the same parent; the first match was used for each of them. Two
    callers racing to create the same missing folder is the usual cause.
    """

    scope_id: str | None
    parent_id: str | None = None
    item: DriveItem | None = None
    ambiguous: list[str] = Field(default_factory=list)

    @property
    def is_ambiguous(self) -> bool:
        """Check if any segment had more than one match."""
        return bool(self.ambiguous)


class PathResolver:
    """Resolves virtual paths to backend IDs.

    Paths handed to the resolver are relative to the namespace selected by
    ``shared``: callers strip the ``Shared`` prefix first.
    """

    def __init__(self, backend: DriveBackend, ambiguity_policy: AmbiguityPolicy = "first"):
        """Initialize the resolver.

        Args:
            backend: Backend client bound to the caller's credential.
            ambiguity_policy: ``first`` takes the first of several matches,
                ``error`` raises AmbiguousPathError.
        """
        self.backend = backend
        self.ambiguity_policy = ambiguity_policy

    # ========== Folders ==========

    async def resolve_folder(
        self,
        path: str | list[str],
        shared: bool = False,
        create_missing: bool = False,
    ) -> str:
        """Get the ID of the deepest folder in a path.

        Args:
            path: Folder path, or its already-normalized segments.
            shared: The first segment is explicitly shared with the caller.
            create_missing: Create folders that do not exist yet.

        Returns:
            ScopeID of the last folder, or ROOT for the root path.

        Raises:
            InvalidPathError: If the path contains relative segments.
            NotFoundError: If a folder is missing and creation was not requested.
            UpstreamError: If the backend does not return an ID for a new folder.
        """
        resolution = await self.resolve_folder_match(path, shared, create_missing)
        return resolution.scope_id or ROOT

    async def resolve_folder_match(
        self,
        path: str | list[str],
        shared: bool = False,
        create_missing: bool = False,
    ) -> Resolution:
        """Resolve a folder path and report any ambiguous segments."""
        segments = normalize(path) if isinstance(path, str) else list(path)
        resolution = Resolution(scope_id=ROOT)

        if not segments:
            return resolution

        parent_id = ROOT
        for index, name in enumerate(segments):
            # Only the top entry can be explicitly shared; deeper folders are
            # ordinary children of the folder resolved before them. A shared top
            # entry cannot be created, only found.
            items = await self._lookup(FileKind.FOLDER, name, parent_id, shared and index == 0)

            if items:
                parent_id = self._pick(items, name, parent_id, resolution).id
            elif create_missing and not (shared and index == 0):
                parent_id = await self._create_folder(name, parent_id)
            else:
                raise NotFoundError(f"Folder {name} does not exist")

        resolution.scope_id = parent_id
        return resolution

    # ========== Files ==========

    async def resolve_file(
        self,
        path: str,
        shared: bool = False,
        assert_absent: bool = False,
        create_missing: bool = False,
    ) -> str | None:
        """Get the ID of a file from its full path.

        Args:
            path: File path; the last segment is the file name.
            shared: The path's top entry is explicitly shared with the caller.
            assert_absent: Succeed only if the file does not exist (used when
                creating a file).
            create_missing: Create missing parent folders.

        Returns:
            The file ID, or None when ``assert_absent`` is set and the file
            is absent.

        Raises:
            InvalidPathError: If the path is malformed or names no file.
            NotFoundError: If a parent folder or the file is missing.
            AlreadyExistsError: If ``assert_absent`` is set and the file exists.
        """
        resolution = await self.resolve_file_match(path, shared, assert_absent, create_missing)
        return resolution.scope_id

    async def resolve_file_match(
        self,
        path: str,
        shared: bool = False,
        assert_absent: bool = False,
        create_missing: bool = False,
        projection: Projection = Projection.ID,
    ) -> Resolution:
        """Resolve a file path and report any ambiguous segments.

        Use ``projection=Projection.FULL`` when the matched item's metadata is
        needed, not just its ID.
        """
        folder_segments, file_name = split_file_path(path)

        folder = await self.resolve_folder_match(folder_segments, shared, create_missing)
        parent_id = folder.scope_id or ROOT
        folder.parent_id = parent_id

        # A file directly under the namespace root carries the share itself;
        # deeper files inherit it from their top folder.
        file_shared = shared and not folder_segments
        items = await self._lookup(FileKind.FILE, file_name, parent_id, file_shared, projection)

        if not items:
            if assert_absent:
                folder.scope_id = None
                return folder
            raise NotFoundError(f"File {file_name} does not exist")

        if assert_absent:
            raise AlreadyExistsError(f"File {file_name} already exists")

        folder.item = self._pick(items, file_name, parent_id, folder)
        folder.scope_id = folder.item.id
        return folder

    # ========== Private Helpers ==========

    async def _lookup(
        self,
        kind: FileKind,
        name: str,
        parent_id: str,
        shared: bool,
        projection: Projection = Projection.ID,
    ) -> list[DriveItem]:
        query = build_query(kind, name, parent_id, shared=shared, projection=projection)
        page = await self.backend.query(query.filter, query.fields)
        return page.items

    def _pick(
        self,
        items: list[DriveItem],
        name: str,
        parent_id: str,
        resolution: Resolution,
    ) -> DriveItem:
        if len(items) > 1:
            logger.warning(
                "ambiguous_match",
                name=name,
                parent_id=parent_id,
                match_count=len(items),
                policy=self.ambiguity_policy,
            )
            if self.ambiguity_policy == "error":
                raise AmbiguousPathError(name, parent_id, len(items))
            resolution.ambiguous.append(name)
        return items[0]

    async def _create_folder(self, name: str, parent_id: str) -> str:
        folder_id = await self.backend.create_folder(name, parent_id)
        if not folder_id:
            raise UpstreamError(f"No response from backend. Could not create folder {name}")

        logger.info("folder_created", name=name, parent_id=parent_id, folder_id=folder_id)
        return folder_id
