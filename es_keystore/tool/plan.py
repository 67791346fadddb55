"""es-keystore plan action."""

import logging
import pathlib
from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
)
from typing import cast, Any

from .format import PrintFormatter
from . import common


_LOGGER = logging.getLogger(__name__)


class PlanAction:
    """Print the operations a reconciliation pass would issue."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "plan",
                help="Show the changes needed for declared keystores",
                description="Compare declared keystores with the keystore on this "
                "host and print the operations that apply would run, without "
                "changing anything.",
            ),
        )
        common.add_resource_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(
        self,
        file: pathlib.Path,
        **kwargs: Any,
    ) -> None:
        """Async Action implementation."""
        reconciler = common.build_reconciler(**kwargs)
        results = await common.flush_all(reconciler, file, dry_run=True)
        if not (rows := common.operation_rows(results)):
            print("No changes")
            return
        PrintFormatter().print(rows)
