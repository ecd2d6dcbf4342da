"""CLI configuration: config file loading and override precedence.

Extracted from vslocate.py to keep the entrypoint slim. Settings are merged
with CLI flags taking precedence over the environment, which takes
precedence over the config file.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml

from common.errors import InvalidFormatError
from constants import Constants
from locators.settings import LocatorSettings

logger = logging.getLogger(__name__)


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load the ``locate`` section of a YAML or JSON config file.

    A missing file only logs a warning. When the document has no ``locate``
    section the whole document is used.

    Raises:
        InvalidFormatError: if the file cannot be parsed or is not a mapping.
    """
    if not path:
        return {}

    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise InvalidFormatError(f"Failed to load config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidFormatError(f"Config file {path} must contain a mapping.")

    section = data.get(Constants.CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise InvalidFormatError(f"The `{Constants.CONFIG_SECTION}` section of {path} must be a mapping.")

    unknown = sorted(set(section) - set(Constants.CONFIG_KEYS))
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
    return {key: section[key] for key in Constants.CONFIG_KEYS if section.get(key) is not None}


def settings_from_config(config: Mapping[str, Any]) -> LocatorSettings:
    """Build LocatorSettings from a loaded config mapping."""
    return LocatorSettings(
        vswhere_path=_as_str(config.get("vswhere_path")),
        installation_path=_as_str(config.get("installation_path")),
        win_sdk_path=_as_str(config.get("win_sdk_path")),
    )


def settings_from_args(args: Any) -> LocatorSettings:
    """Build LocatorSettings from the CLI override flags."""
    return LocatorSettings(
        vswhere_path=_as_str(getattr(args, "VSWHERE_PATH", None)),
        installation_path=_as_str(getattr(args, "INSTALLATION_PATH", None)),
        win_sdk_path=_as_str(getattr(args, "SDK_PATH", None)),
    )


def resolve_settings(
    args: Any,
    config: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> LocatorSettings:
    """Merge CLI flags over the environment over the config file."""
    from_config = settings_from_config(config or {})
    from_env = LocatorSettings.from_environment(environ)
    return settings_from_args(args).merged_over(from_env.merged_over(from_config))


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
