"""Path validation helpers shared by the locators.

Every check hits the filesystem at call time; nothing is cached.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import Iterable, Union

from common.errors import MissingDirectoryError

logger = logging.getLogger(__name__)

PathLike = Union[str, PurePath]

_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def is_directory(path: PathLike) -> bool:
    """Return True if ``path`` exists and is a directory."""
    return Path(path).is_dir()


def sub_directory(parent: PathLike, name: str) -> Path:
    """Construct a verified path to the ``name`` directory inside ``parent``.

    Raises:
        MissingDirectoryError: if ``parent/name`` is not a directory.
    """
    sub_dir = Path(parent) / name
    if not sub_dir.is_dir():
        raise MissingDirectoryError(sub_dir, f"{parent} does not contain the {name} directory.")
    return sub_dir


def missing_sub_directories(parent: PathLike, names: Iterable[str]) -> list:
    """Return the names from ``names`` that are not directories under ``parent``."""
    base = Path(parent)
    return [name for name in names if not (base / name).is_dir()]


def has_sub_directories(parent: PathLike, names: Iterable[str]) -> bool:
    """Structural check: ``parent`` is a directory containing every name in ``names``."""
    if not is_directory(parent):
        return False
    missing = missing_sub_directories(parent, names)
    if missing:
        logger.debug("%s is missing required directories: %s", parent, ", ".join(missing))
        return False
    return True


def _looks_windows(path: PathLike) -> bool:
    if isinstance(path, PureWindowsPath):
        return True
    text = str(path)
    return "\\" in text or bool(_DRIVE_RE.match(text))


def is_within(path: PathLike, root: PathLike) -> bool:
    """Return True if ``root`` is an ancestor of, or equal to, ``path``.

    Comparison is by whole path components. Windows style paths are compared
    case-insensitively regardless of the host platform.
    """
    flavour = PureWindowsPath if _looks_windows(path) or _looks_windows(root) else PurePosixPath
    pure_path = flavour(str(path))
    pure_root = flavour(str(root))
    return pure_path == pure_root or pure_root in pure_path.parents
