"""Command line tool for managing an Elasticsearch keystore."""

import argparse
import asyncio
import logging
import sys
import traceback

from es_keystore.exceptions import KeystoreException
from . import apply, common, get, plan

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for managing an Elasticsearch keystore.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )
    common.add_config_flags(parser)

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    get.GetAction.register(subparsers)
    plan.PlanAction.register(subparsers)
    apply.ApplyAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """es-keystore command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except KeystoreException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("es-keystore error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
