"""Virtual path helpers.

Paths are slash-separated and always rooted. They are reduced to an ordered
list of segments before any backend lookup; relative traversal is rejected
outright instead of being resolved.
"""

from __future__ import annotations

from drivepath.core.exceptions import InvalidPathError

# Top-level segment for items shared with the caller
SHARED_PREFIX = "Shared"


def _check_traversal(path: str) -> None:
    # Checked on the raw string: any ".." is refused, even inside a name
    if ".." in path:
        raise InvalidPathError(f"Path {path!r} must not contain relative segments")


def normalize(path: str) -> list[str]:
    """Split a virtual path into its non-empty segments.

    Examples:
        normalize("//a//b/") -> ["a", "b"]
        normalize("/") -> []

    Raises:
        InvalidPathError: If the path contains ``..`` anywhere or a ``.`` segment.
    """
    _check_traversal(path)
    segments = [segment for segment in path.split("/") if segment]
    if "." in segments:
        raise InvalidPathError(f"Path {path!r} must not contain relative segments")
    return segments


def is_shared_root(path: str | list[str], shared_prefix: str = SHARED_PREFIX) -> bool:
    """Check whether a path or its segments lie in the shared namespace (case-sensitive)."""
    segments = normalize(path) if isinstance(path, str) else path
    return bool(segments) and segments[0] == shared_prefix


def strip_shared(segments: list[str], shared_prefix: str = SHARED_PREFIX) -> list[str]:
    """Drop the leading shared segment, if present."""
    if segments and segments[0] == shared_prefix:
        return segments[1:]
    return list(segments)


def join(*parts: str) -> str:
    """Join path parts into one rooted path with single slashes.

    Only used to build output paths; the result is never parsed back.

    Examples:
        join("/docs/", "a.txt") -> "/docs/a.txt"
        join() -> "/"
    """
    segments = [segment for part in parts if part for segment in part.split("/") if segment]
    return "/" + "/".join(segments)


def split_file_path(path: str) -> tuple[list[str], str]:
    """Split a file path into (folder segments, file name).

    Raises:
        InvalidPathError: On traversal, or when the path ends with a slash.
    """
    _check_traversal(path)
    head, _, file_name = path.rpartition("/")
    if not file_name:
        raise InvalidPathError(f"Path {path!r} does not name a file")
    if file_name == ".":
        raise InvalidPathError(f"Path {path!r} must not contain relative segments")
    return normalize(head), file_name
