"""Locators for Visual Studio installations and Windows SDKs."""

from .installation import MsBuild, VsInstallation, VsLlvm
from .resolver import InstallationResolver, filter_in_range, resolve, select
from .settings import LocatorSettings
from .sources import ListInstanceSource, list_versioned_subdirs, versioned_candidates
from .vswhere import VsWhere, parse_instances
from .win_sdk import WinSdk, WinSdkIncludes, select_sdk_include_dir

__all__ = [
    "MsBuild",
    "VsInstallation",
    "VsLlvm",
    "InstallationResolver",
    "filter_in_range",
    "resolve",
    "select",
    "LocatorSettings",
    "ListInstanceSource",
    "list_versioned_subdirs",
    "versioned_candidates",
    "VsWhere",
    "parse_instances",
    "WinSdk",
    "WinSdkIncludes",
    "select_sdk_include_dir",
]
