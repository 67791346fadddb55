"""Common flags and helpers for es-keystore actions."""

from argparse import ArgumentParser
import logging
import pathlib
from typing import Any

from es_keystore.config import KeystoreConfig, detect_platform_family
from es_keystore.exceptions import InputException
from es_keystore.manifest import DesiredResource, read_resources
from es_keystore.provider import KeystoreProvider, prefetch
from es_keystore.reconciler import Reconciler, ReconcileResult

_LOGGER = logging.getLogger(__name__)


def add_config_flags(parser: ArgumentParser) -> None:
    """Add flags that build the process wide configuration."""
    parser.add_argument(
        "--platform-family",
        default=None,
        help="Host platform family used to locate the installation, e.g. RedHat "
        "(default: detected from the host)",
    )
    parser.add_argument(
        "--config-root",
        type=pathlib.Path,
        default=None,
        help="Configuration root holding elasticsearch.keystore",
    )
    parser.add_argument(
        "--user",
        default=None,
        help="User to run the keystore tool as (default: elasticsearch)",
    )
    parser.add_argument(
        "--group",
        default=None,
        help="Group to run the keystore tool as (default: elasticsearch)",
    )
    parser.add_argument(
        "--no-privilege-drop",
        action="store_true",
        default=False,
        help="Run the keystore tool as the current user and group",
    )


def add_resource_flags(parser: ArgumentParser) -> None:
    """Add flags for reading declared resources."""
    parser.add_argument(
        "--file",
        "-f",
        type=pathlib.Path,
        required=True,
        help="YAML file with one or more declared keystore resources",
    )


def build_reconciler(
    platform_family: str | None = None,
    config_root: pathlib.Path | None = None,
    user: str | None = None,
    group: str | None = None,
    no_privilege_drop: bool = False,
    **kwargs: Any,  # pylint: disable=unused-argument
) -> Reconciler:
    """Create the reconciler from the command line flags."""
    family = platform_family or detect_platform_family()
    overrides: dict[str, Any] = {}
    if config_root is not None:
        overrides["config_root"] = config_root
    if no_privilege_drop:
        overrides["user"] = None
        overrides["group"] = None
    else:
        if user is not None:
            overrides["user"] = user
        if group is not None:
            overrides["group"] = group
    config = KeystoreConfig.from_platform(family, **overrides)
    _LOGGER.debug("Using configuration %s", config)
    return Reconciler(config)


def load_resources(file: pathlib.Path) -> dict[str, DesiredResource]:
    """Load declared resources keyed by name."""
    resources: dict[str, DesiredResource] = {}
    for resource in read_resources(file):
        if resource.name in resources:
            raise InputException(f"Duplicate keystore resource '{resource.name}'")
        resources[resource.name] = resource
    return resources


async def flush_all(
    reconciler: Reconciler, file: pathlib.Path, dry_run: bool
) -> list[tuple[KeystoreProvider, ReconcileResult]]:
    """Run a pass for every declared resource in the file."""
    providers = await prefetch(reconciler, load_resources(file))
    results = []
    for provider in providers.values():
        results.append((provider, await provider.flush(dry_run=dry_run)))
    return results


def operation_rows(
    results: list[tuple[KeystoreProvider, ReconcileResult]],
) -> list[dict[str, str]]:
    """Return one output row per operation."""
    return [
        {"name": provider.name, "operation": str(operation)}
        for provider, result in results
        for operation in result.operations
    ]
