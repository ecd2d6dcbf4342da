"""Version parsing, ordering and range filtering."""

from .models import (
    Candidate,
    ExtractionFailure,
    ExtractionReport,
    ProductLine,
    Version,
    VersionRange,
    in_range,
)
from .parser import build_version_range, parse_product_line, parse_range, parse_version

__all__ = [
    "Candidate",
    "ExtractionFailure",
    "ExtractionReport",
    "ProductLine",
    "Version",
    "VersionRange",
    "in_range",
    "build_version_range",
    "parse_product_line",
    "parse_range",
    "parse_version",
]
