"""Injected configuration for the locators.

The locators never read the process environment themselves; callers build a
LocatorSettings (usually via ``from_environment``) and pass it in.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from constants import Constants


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class LocatorSettings:
    """Paths that override the locators' default discovery."""
    vswhere_path: Optional[str] = None
    installation_path: Optional[str] = None
    win_sdk_path: Optional[str] = None

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "LocatorSettings":
        """Read VS_WHERE_PATH, VS_INSTALLATION_PATH and WIN_SDK_PATH; blank values are ignored."""
        env = os.environ if environ is None else environ
        return cls(
            vswhere_path=_clean(env.get(Constants.ENV_VS_WHERE_PATH)),
            installation_path=_clean(env.get(Constants.ENV_VS_INSTALLATION_PATH)),
            win_sdk_path=_clean(env.get(Constants.ENV_WIN_SDK_PATH)),
        )

    def merged_over(self, fallback: "LocatorSettings") -> "LocatorSettings":
        """Return settings taking each value from self, else from ``fallback``."""
        return replace(
            fallback,
            **{
                name: value
                for name, value in (
                    ("vswhere_path", self.vswhere_path),
                    ("installation_path", self.installation_path),
                    ("win_sdk_path", self.win_sdk_path),
                )
                if value is not None
            },
        )

    @property
    def vswhere_executable(self) -> Path:
        return Path(self.vswhere_path or Constants.VSWHERE_DEFAULT_PATH)
