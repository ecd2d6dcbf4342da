"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    NOT_FOUND = 1
    INVALID_INPUT = 2
    TOOL_ERROR = 3


class OutputFormats(Enum):
    """Output formats supported by the CLI.

    Args:
        Enum (string): Output formats supported by the CLI.
    """

    TEXT = "text"
    JSON = "json"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Environment variables
    ENV_VS_WHERE_PATH = "VS_WHERE_PATH"
    ENV_VS_INSTALLATION_PATH = "VS_INSTALLATION_PATH"
    ENV_WIN_SDK_PATH = "WIN_SDK_PATH"
    ENV_LOG_LEVEL = "VSLOCATE_LOG_LEVEL"

    # vswhere
    VSWHERE_DEFAULT_PATH = "C:\\Program Files (x86)\\Microsoft Visual Studio\\Installer\\vswhere.exe"
    VSWHERE_DEFAULT_ARGS = ["-legacy", "-prerelease", "-format", "json", "-products", "*"]
    VSWHERE_VERSION_FIELD = "installationVersion"
    VSWHERE_PATH_FIELD = "installationPath"

    # Installation layout
    MSBUILD_RELATIVE_PATH = "MSBuild/Current/Bin/MSBuild.exe"
    LLVM_BIN = "VC/Tools/Llvm/bin"
    LLVM_LIB = "VC/Tools/Llvm/lib"
    LLVM_BIN_X64 = "VC/Tools/Llvm/x64/bin"
    LLVM_LIB_X64 = "VC/Tools/Llvm/x64/lib"

    # Windows SDK
    WIN_SDK_REG_PATH = "SOFTWARE\\WOW6432Node\\Microsoft\\Microsoft SDKs\\Windows\\v10.0"
    WIN_SDK_REG_VALUE = "InstallationFolder"
    WIN_SDK_INCLUDE_DIR = "Include"

    # Config
    CONFIG_SECTION = "locate"
    CONFIG_KEYS = ["vswhere_path", "installation_path", "win_sdk_path", "product_line"]
    PRODUCT_LINES = ["2017", "2019", "2022", "2026"]

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
