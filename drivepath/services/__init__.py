"""Path resolution, listing, normalization and drive operations."""

from drivepath.services.backend import ROOT, DriveBackend, QueryPage
from drivepath.services.converters import ConverterTable, default_converters
from drivepath.services.listing import iter_pages, list_all
from drivepath.services.normalizer import normalize_record
from drivepath.services.provider import DriveProvider
from drivepath.services.resolver import PathResolver, Resolution

__all__ = [
    "ConverterTable",
    "DriveBackend",
    "DriveProvider",
    "PathResolver",
    "QueryPage",
    "ROOT",
    "Resolution",
    "default_converters",
    "iter_pages",
    "list_all",
    "normalize_record",
]
