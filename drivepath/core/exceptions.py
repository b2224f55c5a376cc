"""Error taxonomy for path resolution and drive operations."""

from __future__ import annotations


class DrivePathError(Exception):
    """Base exception for drivepath errors."""

    def __init__(self, message: str, code: str = "DRIVEPATH_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidPathError(DrivePathError):
    """Raised when a path contains relative traversal or a malformed segment.

    Always a client error; never worth retrying.
    """

    def __init__(self, message: str = "Paths must not contain relative segments"):
        super().__init__(message, "malformedUrl")


class NotFoundError(DrivePathError):
    """Raised when a folder or file does not exist and creation was not requested."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, "notFound")


class AlreadyExistsError(DrivePathError):
    """Raised when creating a file over an existing one."""

    def __init__(self, message: str = "File already exists"):
        super().__init__(message, "conflict")


class UnauthorizedError(DrivePathError):
    """Raised when the backend rejects the caller's credential."""

    def __init__(self, message: str = "Access token rejected by backend"):
        super().__init__(message, "unauthorized")


class UpstreamError(DrivePathError):
    """Raised when the backend returns an unusable response where one was required."""

    def __init__(self, message: str = "Invalid response from backend", status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message, "invalidResponse")


class MissingParamError(DrivePathError):
    """Raised when an operation is called without a required argument."""

    def __init__(self, message: str = "Missing required parameter"):
        super().__init__(message, "missingParam")


class AmbiguousPathError(DrivePathError):
    """Raised when several items share a name under one parent.

    Only raised when the ambiguity policy is set to ``"error"``.
    """

    def __init__(self, name: str, parent_id: str, match_count: int):
        self.name = name
        self.parent_id = parent_id
        self.match_count = match_count
        super().__init__(
            f"{match_count} items named {name!r} found under {parent_id}",
            "ambiguousPath",
        )
