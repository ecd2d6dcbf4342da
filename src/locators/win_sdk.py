"""Windows SDK discovery.

The SDK installation folder holds one directory per category, each with one
subdirectory per installed SDK version::

    <InstallationFolder>
    |-- Include
    |   |-- 10.0.20348.0
    |   |-- 10.0.22621.0
    |-- Lib
    |   |-- 10.0.22621.0

The newest ``Include/<version>`` directory in range whose layout is complete
is selected. Layout validity is checked on every call.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from common.errors import InstallationNotFoundError, InvalidOverrideError
from common.paths import has_sub_directories, is_directory, sub_directory
from constants import Constants
from versioning.models import UNBOUNDED, Version, VersionRange

from .settings import LocatorSettings
from .sources import versioned_candidates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WinSdkIncludes:
    """The include directories of one Windows SDK version."""
    cppwinrt: Path
    shared: Path
    ucrt: Path
    um: Path
    winrt: Path

    CPPWINRT_DIR = "cppwinrt"
    SHARED_DIR = "shared"
    UCRT_DIR = "ucrt"
    UM_DIR = "um"
    WINRT_DIR = "winrt"
    EXPECTED_DIRS = (CPPWINRT_DIR, SHARED_DIR, UCRT_DIR, UM_DIR, WINRT_DIR)

    @classmethod
    def create(cls, include_path: Path) -> "WinSdkIncludes":
        """Build from a versioned include directory.

        Raises:
            MissingDirectoryError: if one of the expected directories is missing.
        """
        return cls(
            cppwinrt=sub_directory(include_path, cls.CPPWINRT_DIR),
            shared=sub_directory(include_path, cls.SHARED_DIR),
            ucrt=sub_directory(include_path, cls.UCRT_DIR),
            um=sub_directory(include_path, cls.UM_DIR),
            winrt=sub_directory(include_path, cls.WINRT_DIR),
        )

    @classmethod
    def is_valid(cls, path: Path) -> bool:
        return has_sub_directories(path, cls.EXPECTED_DIRS)


def select_sdk_include_dir(installation_folder: Path, version_range: Optional[VersionRange] = None) -> Path:
    """Return the newest valid ``Include/<version>`` directory in ``version_range``.

    Raises:
        InstallationNotFoundError: if ``Include`` is missing or holds no
            valid version directory in range.
    """
    bounds = version_range or UNBOUNDED
    candidates = versioned_candidates(
        installation_folder,
        Constants.WIN_SDK_INCLUDE_DIR,
        bounds.max_version,
        bounds.min_version,
        is_valid=WinSdkIncludes.is_valid,
    )
    return max(candidates, key=lambda c: c.version).path


def _read_registry_installation_folder() -> str:
    # winreg only exists on Windows
    try:
        import winreg  # pylint: disable=import-outside-toplevel
    except ImportError as exc:
        raise InstallationNotFoundError("The Windows registry is not available on this platform.") from exc

    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, Constants.WIN_SDK_REG_PATH) as key:
            value, _ = winreg.QueryValueEx(key, Constants.WIN_SDK_REG_VALUE)
    except OSError as exc:
        raise InstallationNotFoundError(
            f"Failed to read `{Constants.WIN_SDK_REG_VALUE}` from HKLM\\{Constants.WIN_SDK_REG_PATH}: {exc}"
        ) from exc
    return str(value)


def installation_folder(settings: Optional[LocatorSettings] = None) -> Path:
    """Return the SDK installation folder from ``settings`` or the registry.

    Raises:
        InvalidOverrideError: if the override is set but not a directory.
        InstallationNotFoundError: if the registry has no usable folder.
    """
    settings = settings or LocatorSettings.from_environment()
    if settings.win_sdk_path:
        path = Path(settings.win_sdk_path)
        if not is_directory(path):
            raise InvalidOverrideError(
                f"`{Constants.ENV_WIN_SDK_PATH}` environment variable contained invalid data."
            )
        return path

    folder = _read_registry_installation_folder()
    if not is_directory(folder):
        raise InstallationNotFoundError(f"The InstallationFolder `{folder}` does not exist.")
    return Path(folder)


@dataclass(frozen=True)
class WinSdk:
    """A selected Windows SDK version and its include directories."""
    version: Version
    include_path: Path
    include_dirs: WinSdkIncludes

    @classmethod
    def find(cls, settings: Optional[LocatorSettings] = None) -> "WinSdk":
        """Find the newest Windows SDK."""
        return cls.find_in_range(None, settings)

    @classmethod
    def find_in_range(
        cls,
        version_range: Optional[VersionRange] = None,
        settings: Optional[LocatorSettings] = None,
    ) -> "WinSdk":
        """Find the newest Windows SDK with a version in ``version_range``."""
        folder = installation_folder(settings)
        include_path = select_sdk_include_dir(folder, version_range)
        sdk = cls(
            version=Version.parse(include_path.name),
            include_path=include_path,
            include_dirs=WinSdkIncludes.create(include_path),
        )
        logger.info("Using Windows SDK %s at %s", sdk.version, include_path)
        return sdk
