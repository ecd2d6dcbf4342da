"""Selection of a single installation among version-ranged candidates.

Resolution is a pure function of the candidate snapshot, the version range
and the optional override path. Nothing here reads the process environment.
"""
from __future__ import annotations

import logging
from pathlib import Path, PurePath
from typing import Any, Iterable, List, Optional, Sequence, Union

from common.errors import InstallationNotFoundError, OverrideMismatchError
from common.logging_utils import extra_context, is_debug_enabled
from common.paths import is_within
from versioning.models import UNBOUNDED, Candidate, VersionRange

from .sources import ListInstanceSource

logger = logging.getLogger(__name__)

OverridePath = Optional[Union[str, PurePath]]

NOT_FOUND_MESSAGE = "No instance found that matched requirements."


def filter_in_range(candidates: Iterable[Candidate], version_range: Optional[VersionRange] = None) -> List[Candidate]:
    """Keep the candidates whose version is inside ``version_range``, preserving order."""
    bounds = version_range or UNBOUNDED
    return [c for c in candidates if bounds.contains(c.version)]


def select(candidates: Sequence[Candidate], override_path: OverridePath = None) -> Path:
    """Pick one candidate from an already range-filtered set.

    With ``override_path`` set, the first candidate (in input order) whose
    path is an ancestor of, or equal to, the override wins. Otherwise the
    candidate with the highest version wins; among equal maxima the first in
    input order is returned.

    Raises:
        InstallationNotFoundError: if nothing can be selected.
    """
    if override_path:
        for candidate in candidates:
            if is_within(override_path, candidate.path):
                return candidate.path
        raise InstallationNotFoundError(NOT_FOUND_MESSAGE)

    if not candidates:
        raise InstallationNotFoundError(NOT_FOUND_MESSAGE)
    # max() keeps the first of equal elements
    return max(candidates, key=lambda c: c.version).path


def resolve(
    candidates: Iterable[Candidate],
    version_range: Optional[VersionRange] = None,
    override_path: OverridePath = None,
) -> Path:
    """Range filter ``candidates`` and select one of them.

    An override pointing at an installation outside the range is reported as
    an OverrideMismatchError naming the installation's version, rather than
    silently treated like any other miss.
    """
    if version_range is not None and version_range.is_empty:
        logger.warning("The version range %s cannot match any version", version_range)
    all_candidates = list(candidates)
    filtered = filter_in_range(all_candidates, version_range)
    try:
        return select(filtered, override_path)
    except InstallationNotFoundError:
        if override_path:
            _raise_override_mismatch(all_candidates, version_range, override_path)
        raise


def _raise_override_mismatch(
    candidates: Sequence[Candidate],
    version_range: Optional[VersionRange],
    override_path: OverridePath,
) -> None:
    for candidate in candidates:
        if is_within(override_path, candidate.path):
            message = (
                f"The override path {override_path} belongs to the installation {candidate.path} "
                f"with version {candidate.version}, which is outside the requested range "
                f"{version_range or UNBOUNDED}."
            )
            logger.warning(message)
            raise OverrideMismatchError(message)
    raise OverrideMismatchError(
        f"The override path {override_path} does not belong to any installation found."
    )


class InstallationResolver:
    """Resolves an installation root from decoded instance records.

    Wires list extraction, range filtering and selection together and logs
    the per-record diagnostics collected along the way.
    """

    def __init__(self, source: Optional[ListInstanceSource] = None):
        self.source = source or ListInstanceSource()

    def resolve_records(
        self,
        records: Iterable[Any],
        version_range: Optional[VersionRange] = None,
        override_path: OverridePath = None,
    ) -> Path:
        """Resolve the installation root for ``records``.

        Raises:
            InstallationNotFoundError: if no record survives filtering and
                selection (OverrideMismatchError when an override was given).
        """
        bounds = version_range or UNBOUNDED
        report = self.source.validate_all(records, bounds.max_version, bounds.min_version)
        if report.failures:
            logger.info(
                "Skipped %d of %d instance record(s) that could not be parsed",
                len(report.failures),
                report.total,
            )

        path = resolve(report.candidates + report.out_of_range, bounds, override_path)

        if is_debug_enabled(logger):
            logger.debug(
                "Selected installation",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="resolve_records",
                    outcome="override" if override_path else "latest",
                    target=str(path),
                    version_range=str(bounds),
                ),
            )
        return path
