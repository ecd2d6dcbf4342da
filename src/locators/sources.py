"""Instance sources: turn raw enumerations into (version, path) candidates.

Two strategies are provided. The list source consumes records already decoded
from vswhere's JSON output; the directory source scans a category directory
whose immediate subdirectories are named after versions (the Windows SDK
layout).
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional

from common.errors import InstallationNotFoundError, InvalidFormatError, MissingFieldError
from common.logging_utils import extra_context, is_debug_enabled
from common.paths import sub_directory
from constants import Constants
from versioning.models import (
    Candidate,
    ExtractionFailure,
    ExtractionReport,
    Version,
    in_range,
)

logger = logging.getLogger(__name__)

DirectoryCheck = Callable[[Path], bool]


class ListInstanceSource:
    """Extracts candidates from decoded instance records.

    Each record is expected to be a mapping exposing a version field and a
    path field (vswhere's ``installationVersion`` and ``installationPath``
    by default).
    """

    def __init__(
        self,
        version_field: str = Constants.VSWHERE_VERSION_FIELD,
        path_field: str = Constants.VSWHERE_PATH_FIELD,
    ):
        self.version_field = version_field
        self.path_field = path_field

    def _string_field(self, record: Mapping[str, Any], name: str) -> str:
        value = record.get(name)
        if not isinstance(value, str) or not value.strip():
            raise MissingFieldError(name)
        return value

    def extract(self, record: Any) -> Candidate:
        """Extract a Candidate from a single record.

        Raises:
            MissingFieldError: if the record is not a mapping, lacks either
                field, or carries a version that does not parse.
        """
        if not isinstance(record, Mapping):
            raise MissingFieldError(self.version_field, "Instance record is not an object.")
        version_text = self._string_field(record, self.version_field)
        try:
            version = Version.parse(version_text)
        except InvalidFormatError as exc:
            raise MissingFieldError(self.version_field) from exc
        path = Path(self._string_field(record, self.path_field))
        return Candidate(version=version, path=path)

    def validate_all(
        self,
        records: Iterable[Any],
        max_version: Optional[Version] = None,
        min_version: Optional[Version] = None,
    ) -> ExtractionReport:
        """Extract every record and keep the in-range candidates.

        A record that fails extraction is recorded in the report's
        ``failures`` and logged; it never aborts the batch.
        """
        report = ExtractionReport()
        for record in records:
            try:
                candidate = self.extract(record)
            except MissingFieldError as exc:
                logger.warning("Encountered an error during parsing of instance data: %s", exc)
                report.failures.append(ExtractionFailure(record=record, error=exc))
                continue

            if in_range(candidate.version, max_version, min_version):
                report.candidates.append(candidate)
            else:
                logger.debug(
                    "Instance %s (%s) is outside the requested range",
                    candidate.path,
                    candidate.version,
                )
                report.out_of_range.append(candidate)

        if is_debug_enabled(logger):
            logger.debug(
                "Validated instance records",
                extra=extra_context(
                    event="decision",
                    component="sources",
                    action="validate_all",
                    count=len(report.candidates),
                    skipped=len(report.out_of_range),
                    failed=len(report.failures),
                ),
            )
        return report


def _version_from_dir_name(path: Path) -> Optional[Version]:
    try:
        return Version.parse(path.name)
    except InvalidFormatError:
        return None


def versioned_candidates(
    parent: Path,
    child: str,
    max_version: Optional[Version] = None,
    min_version: Optional[Version] = None,
    is_valid: Optional[DirectoryCheck] = None,
) -> List[Candidate]:
    """Collect the versioned subdirectories of ``parent/child`` as candidates.

    Non-directories and names that do not parse as versions are skipped. The
    result is sorted by directory name.

    Raises:
        MissingDirectoryError: if ``parent/child`` is not a directory.
        InstallationNotFoundError: if no subdirectory is in range and valid.
    """
    search_dir = sub_directory(parent, child)
    found: List[Candidate] = []
    with os.scandir(search_dir) as entries:
        for entry in sorted(entries, key=lambda e: e.name):
            if not entry.is_dir():
                continue
            path = Path(entry.path)
            version = _version_from_dir_name(path)
            if version is None:
                logger.debug("Skipping %s: name is not a version", path)
                continue
            if not in_range(version, max_version, min_version):
                logger.debug("Skipping %s: version is outside the requested range", path)
                continue
            if is_valid is not None and not is_valid(path):
                logger.debug("Skipping %s: directory layout is incomplete", path)
                continue
            found.append(Candidate(version=version, path=path))

    if not found:
        raise InstallationNotFoundError(
            f"No versioned `{child}` directories in the specified version range "
            f"were found inside `{search_dir}` dir."
        )
    return found


def list_versioned_subdirs(
    parent: Path,
    child: str,
    max_version: Optional[Version] = None,
    min_version: Optional[Version] = None,
    is_valid: Optional[DirectoryCheck] = None,
) -> List[Path]:
    """Paths of the versioned subdirectories of ``parent/child``; see versioned_candidates."""
    return [c.path for c in versioned_candidates(parent, child, max_version, min_version, is_valid)]
