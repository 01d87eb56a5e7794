"""PHP buildpack entry point.

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from constants import Constants, ExitCodes
from common.errors import BuildpackError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from pipeline import Finalizer, Supplier
from staging import Command, Manifest, Stager


def run_supply(args) -> None:
    stager = Stager(args.BUILD_DIR, args.CACHE_DIR, args.DEPS_DIR, args.DEPS_IDX)
    manifest = Manifest(args.BUILDPACK_DIR)
    Supplier(manifest, stager, Command()).run()


def run_finalize(args) -> None:
    stager = Stager(args.BUILD_DIR, args.CACHE_DIR, args.DEPS_DIR, args.DEPS_IDX)
    Finalizer(stager, release_path=args.RELEASE_FILE).run()


ACTIONS = {
    "supply": run_supply,
    "finalize": run_finalize,
}


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(getattr(args, "LOG_FILE", None))

    logger = logging.getLogger(__name__)
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    try:
        ACTIONS[args.action](args)
    except BuildpackError as exc:
        logger.error("%s failed: %s", args.action, exc)
        return ExitCodes.FAILURE.value
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
