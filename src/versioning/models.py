"""Data models for installation versions, ranges and candidates."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Sequence

from packaging import version as packaging_version

from common.errors import InvalidFormatError

_SEGMENT_RE = re.compile(r"^(\d+)(.*)$")


@functools.total_ordering
class Version:
    """Lenient dotted numeric version, e.g. ``17.12.35506.116`` or ``10.0.22621.0``.

    Each dot separated segment contributes its leading digit run. The first
    segment with a non-numeric suffix ends the numeric part; whatever follows
    is kept as ``trailer`` but takes no part in ordering. Ordering is
    component-wise with the shorter sequence zero padded, so ``1.0`` equals
    ``1.0.0.0``.
    """

    __slots__ = ("_text", "_components", "_trailer", "_key")

    def __init__(self, components: Sequence[int], trailer: str = "", text: Optional[str] = None):
        if not components:
            raise InvalidFormatError("A version needs at least one numeric component.")
        if any(int(c) < 0 for c in components):
            raise InvalidFormatError(f"Version components must be non-negative: {list(components)}")
        self._components = tuple(int(c) for c in components)
        self._trailer = trailer
        self._text = text if text is not None else ".".join(str(c) for c in self._components) + trailer
        # packaging drops trailing zero release components when comparing and hashing
        self._key = packaging_version.Version(".".join(str(c) for c in self._components))

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``text`` into a Version.

        Raises:
            InvalidFormatError: if ``text`` is not a string or its first
                segment has no leading digits.
        """
        if not isinstance(text, str):
            raise InvalidFormatError(f"Failed to parse {text!r} as a version: expected a string.")
        stripped = text.strip()
        if stripped[:1] in ("v", "V"):
            stripped = stripped[1:]

        components: List[int] = []
        trailer = ""
        segments = stripped.split(".")
        for index, segment in enumerate(segments):
            if segment == "" and components:
                components.append(0)
                continue
            match = _SEGMENT_RE.match(segment)
            if not match:
                trailer = "." + ".".join(segments[index:]) if components else ""
                break
            components.append(int(match.group(1)))
            if match.group(2):
                trailer = match.group(2) + "".join("." + rest for rest in segments[index + 1:])
                break

        if not components:
            raise InvalidFormatError(f"Failed to parse {text!r} as a version.")
        return cls(components, trailer, text.strip())

    @property
    def components(self) -> tuple:
        return self._components

    @property
    def trailer(self) -> str:
        return self._trailer

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key < other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Version({self._text!r})"


def in_range(version: Version, max_version: Optional[Version] = None, min_version: Optional[Version] = None) -> bool:
    """Check whether ``version`` lies in ``[min_version, max_version)``.

    The upper bound is exclusive and the lower bound inclusive, so the first
    version of the next product line never matches the previous one. Missing
    bounds are unbounded.
    """
    is_below_max = max_version is None or max_version > version
    is_above_min = min_version is None or version >= min_version
    return is_below_max and is_above_min


@dataclass(frozen=True)
class VersionRange:
    """Optional exclusive ``max_version`` and inclusive ``min_version``."""
    max_version: Optional[Version] = None
    min_version: Optional[Version] = None

    def contains(self, version: Version) -> bool:
        """Return True if ``version`` is in this range."""
        return in_range(version, self.max_version, self.min_version)

    @property
    def is_empty(self) -> bool:
        """True when both bounds are set and no version can satisfy them."""
        if self.max_version is None or self.min_version is None:
            return False
        return self.max_version <= self.min_version

    @classmethod
    def for_product_line(cls, product_line: "ProductLine") -> "VersionRange":
        return cls(product_line.installation_version_max, product_line.installation_version_min)

    def __str__(self) -> str:
        lower = f"[{self.min_version}" if self.min_version is not None else "("
        upper = f"{self.max_version})" if self.max_version is not None else ")"
        return f"{lower},{upper}"


UNBOUNDED = VersionRange()


class ProductLine(Enum):
    """Visual Studio product lines, each a major installation version bucket."""
    VS2017 = "2017"
    VS2019 = "2019"
    VS2022 = "2022"
    VS2026 = "2026"

    @property
    def installation_version_min(self) -> Version:
        """The inclusive min installation version of this product line."""
        return Version.parse(_PRODUCT_LINE_BOUNDS[self][0])

    @property
    def installation_version_max(self) -> Version:
        """The exclusive max installation version of this product line."""
        return Version.parse(_PRODUCT_LINE_BOUNDS[self][1])

    @property
    def version_range(self) -> VersionRange:
        return VersionRange.for_product_line(self)


_PRODUCT_LINE_BOUNDS = {
    ProductLine.VS2017: ("15.0.0.0", "16.0.0.0"),
    ProductLine.VS2019: ("16.0.0.0", "17.0.0.0"),
    ProductLine.VS2022: ("17.0.0.0", "18.0.0.0"),
    ProductLine.VS2026: ("18.0.0.0", "19.0.0.0"),
}


@dataclass(frozen=True)
class Candidate:
    """A (version, path) pair under consideration for selection."""
    version: Version
    path: Path


@dataclass
class ExtractionFailure:
    """A record that could not be turned into a Candidate, with the cause."""
    record: Any
    error: Exception


@dataclass
class ExtractionReport:
    """Outcome of batch extraction.

    ``candidates`` holds the in-range successes, ``out_of_range`` the parsed
    records rejected by the range filter and ``failures`` the records that
    could not be parsed at all.
    """
    candidates: List[Candidate] = field(default_factory=list)
    out_of_range: List[Candidate] = field(default_factory=list)
    failures: List[ExtractionFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.candidates) + len(self.out_of_range) + len(self.failures)
