"""vslocate - Locate Visual Studio, MSBuild and Windows SDK installations

    Returns:
        int: Exit code
"""
import json
import logging
import sys

from args import parse_args
from cli_config import load_config_file, resolve_settings
from common.errors import InstallationNotFoundError, InvalidFormatError, ToolError
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes, OutputFormats
from locators.installation import MsBuild, VsInstallation, VsLlvm
from locators.win_sdk import WinSdk
from versioning.parser import build_version_range

logger = logging.getLogger(__name__)


def _setup_logging(args):
    """Configure logging based on CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        add_file_handler(log_file)
        logger.info("Logging to file: %s", log_file)


def _version_range(args, config):
    """Build the requested range; CLI flags win over the config file's product line."""
    product_line = getattr(args, "PRODUCT_LINE", None)
    range_expr = getattr(args, "RANGE", None)
    if not product_line and not range_expr and args.action != "sdk":
        product_line = config.get("product_line")
    return build_version_range(
        product_line=str(product_line) if product_line else None,
        range_expr=range_expr,
        min_text=getattr(args, "MIN_VERSION", None),
        max_text=getattr(args, "MAX_VERSION", None),
    )


def _emit(args, payload, lines):
    """Print the result as JSON or as plain lines, unless quiet."""
    if args.QUIET:
        return
    if args.OUTPUT_FORMAT == OutputFormats.JSON.value:
        print(json.dumps(payload, indent=2))
    else:
        for line in lines:
            print(line)


def cmd_installation(args, settings, version_range):
    """Print the installation root."""
    installation = VsInstallation.find_in_range(version_range, settings)
    _emit(args, {"installation_path": str(installation.path)}, [str(installation.path)])


def cmd_msbuild(args, settings, version_range):
    """Print the MSBuild executable path."""
    installation = VsInstallation.find_in_range(version_range, settings)
    msbuild = MsBuild.from_installation(installation)
    _emit(
        args,
        {"installation_path": str(installation.path), "msbuild_path": str(msbuild.path)},
        [str(msbuild.path)],
    )


def cmd_llvm(args, settings, version_range):
    """Print the LLVM directories."""
    llvm = VsLlvm.from_installation(VsInstallation.find_in_range(version_range, settings))
    dirs = {
        "bin": str(llvm.bin),
        "lib": str(llvm.lib),
        "bin_x64": str(llvm.bin_x64),
        "lib_x64": str(llvm.lib_x64),
    }
    _emit(args, dirs, [f"{name}: {path}" for name, path in dirs.items()])


def cmd_sdk(args, settings, version_range):
    """Print the selected Windows SDK."""
    sdk = WinSdk.find_in_range(version_range, settings)
    includes = sdk.include_dirs
    dirs = {
        "cppwinrt": str(includes.cppwinrt),
        "shared": str(includes.shared),
        "ucrt": str(includes.ucrt),
        "um": str(includes.um),
        "winrt": str(includes.winrt),
    }
    payload = {"version": str(sdk.version), "include_path": str(sdk.include_path), "include_dirs": dirs}
    lines = [f"version: {sdk.version}"] + [f"{name}: {path}" for name, path in dirs.items()]
    _emit(args, payload, lines)


def cmd_build(args, settings, version_range):
    """Run MSBuild in the project directory."""
    msbuild_args = list(args.MSBUILD_ARGS or [])
    if msbuild_args and msbuild_args[0] == "--":
        msbuild_args = msbuild_args[1:]
    msbuild = MsBuild.find_in_range(version_range, settings)
    completed = msbuild.run(args.PROJECT_DIR, msbuild_args)
    _emit(
        args,
        {"msbuild_path": str(msbuild.path), "returncode": completed.returncode},
        [completed.stdout] if completed.stdout else [],
    )


COMMANDS = {
    "installation": cmd_installation,
    "msbuild": cmd_msbuild,
    "llvm": cmd_llvm,
    "sdk": cmd_sdk,
    "build": cmd_build,
}


def run(args):
    """Run the selected command and map errors to exit codes."""
    try:
        config = load_config_file(getattr(args, "CONFIG", None))
        settings = resolve_settings(args, config)
        version_range = _version_range(args, config)
        if is_debug_enabled(logger):
            logger.debug(
                "CLI start",
                extra=extra_context(
                    event="function_entry",
                    component="cli",
                    action=args.action,
                    version_range=str(version_range),
                ),
            )
        COMMANDS[args.action](args, settings, version_range)
    except InstallationNotFoundError as exc:
        logger.error("%s", exc)
        return ExitCodes.NOT_FOUND.value
    except InvalidFormatError as exc:
        logger.error("%s", exc)
        return ExitCodes.INVALID_INPUT.value
    except ToolError as exc:
        logger.error("%s", exc)
        if exc.output and not args.QUIET:
            sys.stdout.write(exc.output)
        return ExitCodes.TOOL_ERROR.value
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
