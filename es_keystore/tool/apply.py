"""es-keystore apply action."""

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


class ApplyAction:
    """Reconcile declared keystores."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "apply",
                help="Converge the keystore to the declared state",
                description="Create or remove the keystore and add or purge "
                "settings so the keystore on this host matches the declaration.",
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
        results = await common.flush_all(reconciler, file, dry_run=False)
        if rows := common.operation_rows(results):
            PrintFormatter().print(rows)
        else:
            print("No changes")
        for provider, _ in results:
            state = "present" if provider.exists() else "absent"
            print(f"{provider.name}: {state} ({len(provider.settings)} settings)")
