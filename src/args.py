"""Argument parsing functionality for the PHP buildpack."""

import argparse
import os

from constants import Constants


def _add_staging_dirs(parser):
    parser.add_argument("BUILD_DIR", help="Application directory being staged")
    parser.add_argument("CACHE_DIR", help="Cache directory preserved between stagings")
    parser.add_argument("DEPS_DIR", help="Root of all buildpack dependency directories")
    parser.add_argument("DEPS_IDX", help="Index of this buildpack's directory inside DEPS_DIR")


def _add_common(parser):
    parser.add_argument("--buildpack-dir",
                        dest="BUILDPACK_DIR",
                        help="Buildpack root holding manifest.yml and bin/ (default: $BUILDPACK_DIR or cwd)",
                        action="store",
                        type=str,
                        default=os.environ.get(Constants.ENV_BUILDPACK_DIR) or os.getcwd())
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="php-buildpack",
        description="PHP buildpack - stage PHP and HTTPD for the platform",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    supply = subparsers.add_parser("supply", help="Install PHP/HTTPD and write their configuration")
    _add_staging_dirs(supply)
    _add_common(supply)

    finalize = subparsers.add_parser("finalize", help="Write the start script and release descriptor")
    _add_staging_dirs(finalize)
    _add_common(finalize)
    finalize.add_argument("--release-file",
                          dest="RELEASE_FILE",
                          help="Where to write the release descriptor YAML",
                          action="store",
                          type=str,
                          default=Constants.RELEASE_YAML)

    return parser.parse_args(argv)
