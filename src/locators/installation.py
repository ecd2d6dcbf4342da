"""Visual Studio / Build Tools installations and the tools inside them."""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from common.errors import InstallationNotFoundError, ToolError
from common.paths import sub_directory
from constants import Constants
from versioning.models import ProductLine, VersionRange
from versioning.parser import parse_product_line

from .resolver import InstallationResolver
from .settings import LocatorSettings
from .vswhere import VsWhere, parse_instances

logger = logging.getLogger(__name__)

ProductLineArg = Optional[Union[str, ProductLine]]


def _range_for(product_line: ProductLineArg) -> Optional[VersionRange]:
    if product_line is None:
        return None
    if not isinstance(product_line, ProductLine):
        product_line = parse_product_line(product_line)
    return product_line.version_range


@dataclass(frozen=True)
class VsInstallation:
    """The root directory of a resolved Visual Studio installation."""
    path: Path

    @classmethod
    def find(cls, product_line: ProductLineArg = None, settings: Optional[LocatorSettings] = None) -> "VsInstallation":
        """Find the newest installation of ``product_line``, or of any line when None."""
        return cls.find_in_range(_range_for(product_line), settings)

    @classmethod
    def find_in_range(
        cls,
        version_range: Optional[VersionRange] = None,
        settings: Optional[LocatorSettings] = None,
        vswhere: Optional[VsWhere] = None,
    ) -> "VsInstallation":
        """Find the installation with the highest version in ``version_range``.

        When ``settings.installation_path`` is set, the installation containing
        that path is chosen instead, provided it is in range.

        Example::

            VsInstallation.find_in_range(ProductLine.VS2022.version_range)
        """
        settings = settings or LocatorSettings.from_environment()
        vswhere = vswhere or VsWhere.find(settings)
        records = parse_instances(vswhere.run())
        path = InstallationResolver().resolve_records(records, version_range, settings.installation_path)
        logger.info("Using Visual Studio installation at %s", path)
        return cls(path)


class MsBuild:
    """Finds and runs the MSBuild executable of an installation."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def from_installation(cls, installation: VsInstallation) -> "MsBuild":
        return cls(installation.path / Constants.MSBUILD_RELATIVE_PATH)

    @classmethod
    def find(cls, product_line: ProductLineArg = None, settings: Optional[LocatorSettings] = None) -> "MsBuild":
        """Find MSBuild for ``product_line``; with None the newest installation is used."""
        return cls.from_installation(VsInstallation.find(product_line, settings))

    @classmethod
    def find_in_range(
        cls,
        version_range: Optional[VersionRange] = None,
        settings: Optional[LocatorSettings] = None,
    ) -> "MsBuild":
        """Find MSBuild in the installation with the highest version in ``version_range``."""
        return cls.from_installation(VsInstallation.find_in_range(version_range, settings))

    def run(self, project_path: Union[str, Path], args: Sequence[str] = ()) -> subprocess.CompletedProcess:
        """Run MSBuild in ``project_path`` with ``args``.

        Raises:
            InstallationNotFoundError: if the executable does not exist.
            ToolError: if MSBuild cannot be started or exits non-zero.
        """
        if not self.path.exists():
            raise InstallationNotFoundError(f"Could not find [{self.path}].")
        command = [str(self.path)] + list(args)
        logger.info("Running %s in %s", " ".join(command), project_path)
        try:
            completed = subprocess.run(
                command,
                cwd=str(project_path),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise ToolError(f"Failed to run msbuild: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ToolError(f"MSBuild output could not be decoded ({exc}).") from exc
        if completed.returncode != 0:
            raise ToolError(
                f"Failed to run msbuild: Exit code [{completed.returncode}]",
                returncode=completed.returncode,
                output=completed.stdout or "",
            )
        return completed


@dataclass(frozen=True)
class VsLlvm:
    """The LLVM directories shipped with the Visual C++ tools."""
    bin: Path
    lib: Path
    bin_x64: Path
    lib_x64: Path

    @classmethod
    def from_installation(cls, installation: VsInstallation) -> "VsLlvm":
        """Validate and collect the LLVM directories of ``installation``.

        Raises:
            MissingDirectoryError: if any of the directories is missing.
        """
        return cls(
            bin=sub_directory(installation.path, Constants.LLVM_BIN),
            lib=sub_directory(installation.path, Constants.LLVM_LIB),
            bin_x64=sub_directory(installation.path, Constants.LLVM_BIN_X64),
            lib_x64=sub_directory(installation.path, Constants.LLVM_LIB_X64),
        )
