"""Argument parsing functionality for vslocate."""

import argparse

from constants import Constants, OutputFormats


def _common_parser():
    """Flags shared by every sub-command."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--vswhere-path",
                        dest="VSWHERE_PATH",
                        help="Path to vswhere.exe (overrides VS_WHERE_PATH)",
                        action="store",
                        type=str)
    parser.add_argument("--installation-path",
                        dest="INSTALLATION_PATH",
                        help="Pick the installation containing this path (overrides VS_INSTALLATION_PATH)",
                        action="store",
                        type=str)
    parser.add_argument("--sdk-path",
                        dest="SDK_PATH",
                        help="Windows SDK installation folder (overrides WIN_SDK_PATH)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (text or json, default: text)",
                        action="store",
                        type=str.lower,
                        choices=[f.value for f in OutputFormats],
                        default=OutputFormats.TEXT.value)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: VSLOCATE_LOG_LEVEL or WARNING)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")
    return parser


def _range_parser(with_product_line=True):
    """Version range flags."""
    parser = argparse.ArgumentParser(add_help=False)
    group = parser.add_mutually_exclusive_group()
    if with_product_line:
        group.add_argument("-p", "--product-line",
                           dest="PRODUCT_LINE",
                           help="Visual Studio product line, i.e: 2019, 2022",
                           action="store",
                           type=str,
                           choices=Constants.PRODUCT_LINES)
    group.add_argument("-r", "--range",
                       dest="RANGE",
                       help="Version range in vswhere notation, i.e: [17.0,18.0)",
                       action="store",
                       type=str)
    parser.add_argument("--min",
                        dest="MIN_VERSION",
                        help="Inclusive minimum version",
                        action="store",
                        type=str)
    parser.add_argument("--max",
                        dest="MAX_VERSION",
                        help="Exclusive maximum version",
                        action="store",
                        type=str)
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="vslocate",
        description="vslocate - Locate Visual Studio, MSBuild and Windows SDK installations",
        add_help=True,
    )
    common = _common_parser()
    vs_range = _range_parser()
    sdk_range = _range_parser(with_product_line=False)

    subparsers = parser.add_subparsers(dest="action", required=True)
    subparsers.add_parser("installation",
                          parents=[common, vs_range],
                          help="Print the root of the selected Visual Studio installation")
    subparsers.add_parser("msbuild",
                          parents=[common, vs_range],
                          help="Print the path of MSBuild.exe")
    subparsers.add_parser("llvm",
                          parents=[common, vs_range],
                          help="Print the LLVM directories of the selected installation")
    subparsers.add_parser("sdk",
                          parents=[common, sdk_range],
                          help="Print the selected Windows SDK include directories")
    build = subparsers.add_parser("build",
                                  parents=[common, vs_range],
                                  help="Run MSBuild in a project directory")
    build.add_argument("PROJECT_DIR",
                       help="Directory MSBuild is run in",
                       type=str)
    build.add_argument("MSBUILD_ARGS",
                       help="Arguments passed to MSBuild (after --)",
                       nargs=argparse.REMAINDER)

    return parser.parse_args(argv)
