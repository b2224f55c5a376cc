"""Bidirectional mapping between Workspace document types and interchange formats.

Export direction: a Workspace document has no bytes of its own, so reads
hand out an export link in some interchange format. Import direction: an
uploaded office document is converted into the matching Workspace type.
Both directions come from the same table.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

GOOGLE_DOCUMENT = "application/vnd.google-apps.document"
GOOGLE_SPREADSHEET = "application/vnd.google-apps.spreadsheet"
GOOGLE_PRESENTATION = "application/vnd.google-apps.presentation"
GOOGLE_DRAWING = "application/vnd.google-apps.drawing"
GOOGLE_APPS_SCRIPT = "application/vnd.google-apps.script+json"

# Native Workspace type -> default export target
DEFAULT_EXPORTS: Mapping[str, str] = MappingProxyType({
    GOOGLE_DOCUMENT: DOCX,
    GOOGLE_SPREADSHEET: XLSX,
    GOOGLE_PRESENTATION: PPTX,
    GOOGLE_DRAWING: "image/png",
    GOOGLE_APPS_SCRIPT: "application/json",
})

# Only these office formats are converted on upload
DEFAULT_IMPORTABLE = frozenset({DOCX, XLSX, PPTX})


class ConverterTable:
    """Export and import lookups derived from a single mapping.

    Args:
        exports: Native Workspace type to its default export mime type.
        importable: Export mime types that are converted back on upload.
            Each must be the export target of exactly one native type.
    """

    def __init__(
        self,
        exports: Mapping[str, str] = DEFAULT_EXPORTS,
        importable: frozenset[str] = DEFAULT_IMPORTABLE,
    ):
        self._exports = dict(exports)
        self._imports: dict[str, str] = {}
        for native, target in self._exports.items():
            if target not in importable:
                continue
            if target in self._imports:
                raise ValueError(f"Import type {target} maps to more than one native type")
            self._imports[target] = native

    def export_type_for(self, native_mime_type: str) -> str | None:
        """Get the default export target, or None if the type is not convertible."""
        return self._exports.get(native_mime_type)

    def import_type_for(self, mime_type: str) -> str | None:
        """Get the Workspace type an uploaded file converts into, or None."""
        return self._imports.get(mime_type)

    def is_convertible(self, native_mime_type: str) -> bool:
        """Check if a native type is a virtual document with a converter."""
        return native_mime_type in self._exports


default_converters = ConverterTable()
