"""Locating and running ``vswhere.exe``."""
from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, List, Optional, Sequence

from common.errors import InstallationNotFoundError, InvalidFormatError, ToolError
from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants

from .settings import LocatorSettings

logger = logging.getLogger(__name__)


class VsWhere:
    """Handle on a vswhere executable known to exist."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def find(cls, settings: Optional[LocatorSettings] = None) -> "VsWhere":
        """Locate vswhere from ``settings`` or its fixed default location.

        Raises:
            InstallationNotFoundError: if the executable does not exist.
        """
        settings = settings or LocatorSettings.from_environment()
        path = settings.vswhere_executable
        if not path.exists():
            raise InstallationNotFoundError(f"The path [{path}] does not exist.")
        return cls(path)

    def run(self, args: Optional[Sequence[str]] = None) -> str:
        """Run vswhere and return its decoded standard output.

        Raises:
            ToolError: if the process cannot be started, exits non-zero or
                writes output that is not UTF-8.
        """
        command: List[str] = [str(self.path)] + list(args if args is not None else Constants.VSWHERE_DEFAULT_ARGS)
        with Timer() as t:
            try:
                completed = subprocess.run(command, capture_output=True, check=False)
            except OSError as exc:
                raise ToolError(f"Failed to run {self.path}: {exc}") from exc

        if is_debug_enabled(logger):
            logger.debug(
                "vswhere finished",
                extra=extra_context(
                    event="process_exit",
                    component="vswhere",
                    action="run",
                    status_code=completed.returncode,
                    duration_ms=t.duration_ms(),
                ),
            )

        try:
            output = completed.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ToolError(f"Command output could not be parsed as UTF-8 ({exc}).") from exc

        if completed.returncode != 0:
            raise ToolError(
                f"vswhere exited with code {completed.returncode}",
                returncode=completed.returncode,
                output=output,
            )
        return output


def parse_instances(text: str) -> List[Any]:
    """Decode vswhere's JSON output into a list of instance records.

    Raises:
        InvalidFormatError: if ``text`` is not JSON or not a JSON array.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidFormatError(f"Failed to parse command output as json ({exc})") from exc
    if not isinstance(data, list):
        raise InvalidFormatError("json data did not contain any installation instances.")
    return data
