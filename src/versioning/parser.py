"""Parsing utilities for versions, version ranges and product lines."""

import re
from typing import Optional

from common.errors import InvalidFormatError
from .models import ProductLine, Version, VersionRange

_RANGE_RE = re.compile(r"^\s*([\[\(])\s*([^,\s]*)\s*,\s*([^,\s\]\)]*)\s*([\]\)])\s*$")


def parse_version(text: str) -> Version:
    """Parse a lenient dotted version string."""
    return Version.parse(text)


def parse_optional_version(text: Optional[str]) -> Optional[Version]:
    """Parse ``text`` unless it is None or blank."""
    if text is None or not str(text).strip():
        return None
    return Version.parse(str(text))


def parse_product_line(name: str) -> ProductLine:
    """Map a product line name such as ``"2022"`` to a ProductLine.

    Raises:
        InvalidFormatError: for names that match no known product line.
    """
    try:
        return ProductLine(str(name).strip())
    except ValueError as exc:
        raise InvalidFormatError(f"Product line version {name} did not match any known values.") from exc


def parse_range(text: str) -> VersionRange:
    """Parse a vswhere style range expression.

    Accepted forms are ``[min,max)``, ``[min,)``, ``(,max)`` and a bare
    version, which means ``min`` inclusive with no upper bound. Only an
    inclusive lower bound and an exclusive upper bound can be expressed.

    Raises:
        InvalidFormatError: for any other shape or an unparsable bound.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidFormatError(f"Failed to parse {text!r} as a version range.")

    stripped = text.strip()
    if stripped[0] not in "[(":
        return VersionRange(min_version=Version.parse(stripped))

    match = _RANGE_RE.match(stripped)
    if not match:
        raise InvalidFormatError(f"Failed to parse {text!r} as a version range.")
    opening, lower, upper, closing = match.groups()

    if lower and opening != "[":
        raise InvalidFormatError(f"The lower bound of {text!r} must be inclusive, use '['.")
    if upper and closing != ")":
        raise InvalidFormatError(f"The upper bound of {text!r} must be exclusive, use ')'.")

    return VersionRange(
        max_version=Version.parse(upper) if upper else None,
        min_version=Version.parse(lower) if lower else None,
    )


def build_version_range(
    product_line: Optional[str] = None,
    range_expr: Optional[str] = None,
    min_text: Optional[str] = None,
    max_text: Optional[str] = None,
) -> VersionRange:
    """Combine the range inputs a caller may supply into a single VersionRange.

    A product line or a range expression fixes both bounds; explicit
    ``min_text``/``max_text`` then narrow the side they name.
    """
    if product_line and range_expr:
        raise InvalidFormatError("Specify either a product line or a range expression, not both.")

    if product_line:
        base = parse_product_line(product_line).version_range
    elif range_expr:
        base = parse_range(range_expr)
    else:
        base = VersionRange()

    max_version = parse_optional_version(max_text)
    min_version = parse_optional_version(min_text)
    return VersionRange(
        max_version=max_version if max_version is not None else base.max_version,
        min_version=min_version if min_version is not None else base.min_version,
    )
