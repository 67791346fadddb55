"""es-keystore get action."""

import logging
import pathlib
from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
)
from typing import cast

from es_keystore.config import DEFAULT_CONFIG_DIR
from es_keystore.provider import instances

from .format import PrintFormatter, FORMATTERS
from . import common


_LOGGER = logging.getLogger(__name__)


class GetAction:
    """Get details about the keystore."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "get",
                help="Print the keystore and its setting names",
                description="Print the keystore discovered on this host. Setting "
                "values are never shown since the keystore tool cannot export them.",
            ),
        )
        args.add_argument(
            "--config-dir",
            type=pathlib.Path,
            default=DEFAULT_CONFIG_DIR,
            help="Config directory the keystore tool operates on",
        )
        args.add_argument(
            "--output",
            "-o",
            choices=["yaml", "json"],
            default=None,
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        config_dir: pathlib.Path,
        output: str | None,
        **kwargs,
    ) -> None:
        """Async Action implementation."""
        reconciler = common.build_reconciler(**kwargs)
        found = await instances(reconciler, config_dir)
        if not found:
            print("No keystore found")
            return
        if output in FORMATTERS:
            FORMATTERS[output]().print(
                [
                    {"name": name, **state.to_dict(), "config_dir": str(config_dir)}
                    for name, state in found.items()
                ]
            )
            return
        results = [
            {"name": name, "setting": setting}
            for name, state in found.items()
            for setting in state.setting_names
        ]
        if not results:
            print("No settings found")
            return
        PrintFormatter().print(results)
