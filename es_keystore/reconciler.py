"""Module for reconciling a declared keystore against the observed keystore.

A reconciliation pass discovers the keystore, computes the operations needed
to reach the declared state, runs them in order and discovers the keystore
again so the returned state reflects what is actually on disk:
```python
from es_keystore.config import KeystoreConfig
from es_keystore.manifest import DesiredResource
from es_keystore.reconciler import Reconciler

reconciler = Reconciler(KeystoreConfig.from_platform("Debian"))
result = await reconciler.reconcile(
    DesiredResource(settings={"s3.client.default.access_key": "..."})
)
for op in result.operations:
    print(op)
```
Existing settings are never overwritten unless `overwrite` is requested, and
settings are only removed when `purge` is requested. Passes against the same
keystore are not coordinated with each other.
"""

from collections.abc import Sequence
from dataclasses import dataclass
import logging
from pathlib import Path

from . import discovery
from .config import KeystoreConfig
from .context import trace_context
from .keystore import Keystore
from .manifest import DesiredResource, Ensure, KeystoreState
from .operation import (
    AddSetting,
    CreateStore,
    DestroyStore,
    Operation,
    RemoveSetting,
)

__all__ = [
    "plan",
    "apply",
    "Reconciler",
    "ReconcileResult",
]

_LOGGER = logging.getLogger(__name__)


def plan(desired: DesiredResource, actual: KeystoreState) -> list[Operation]:
    """Return the ordered operations that converge the keystore."""
    if desired.ensure == Ensure.ABSENT:
        if actual.exists:
            return [DestroyStore()]
        return []

    operations: list[Operation] = []
    if not actual.exists:
        operations.append(CreateStore())

    existing = set(actual.setting_names)
    for key, value in desired.settings.items():
        if key not in existing or desired.overwrite:
            operations.append(AddSetting(key, value))

    if desired.purge and actual.setting_names:
        operations.extend(
            RemoveSetting(name)
            for name in actual.setting_names
            if name not in desired.settings
        )
    return operations


async def apply(keystore: Keystore, operations: Sequence[Operation]) -> None:
    """Run the operations in order, stopping at the first failure."""
    for operation in operations:
        _LOGGER.info("Keystore %s: %s", keystore.config_dir, operation)
        await operation.apply(keystore)


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a reconciliation pass."""

    operations: list[Operation]
    """Operations issued, in order."""

    state: KeystoreState
    """Keystore state observed after the operations ran."""


class Reconciler:
    """Runs reconciliation passes for declared keystores."""

    def __init__(self, config: KeystoreConfig) -> None:
        """Initialize Reconciler."""
        self._config = config

    def keystore(self, config_dir: Path) -> Keystore:
        """Return the keystore for a config directory."""
        return Keystore(self._config, config_dir)

    async def discover(self, config_dir: Path) -> KeystoreState:
        """Return the observed state of the keystore."""
        return await discovery.discover(self.keystore(config_dir))

    async def reconcile(
        self,
        desired: DesiredResource,
        actual: KeystoreState | None = None,
        dry_run: bool = False,
    ) -> ReconcileResult:
        """Converge the keystore to the declared state.

        The keystore is discovered first unless `actual` is given. With
        `dry_run` the operations are computed but not run, and the returned
        state is the state they were computed against.
        """
        keystore = self.keystore(desired.config_dir)
        with trace_context(f"Reconcile {desired.name}"):
            if actual is None:
                actual = await discovery.discover(keystore)
            operations = plan(desired, actual)
            if dry_run:
                return ReconcileResult(operations, actual)
            if not operations:
                _LOGGER.debug("Keystore %s is up to date", desired.config_dir)
            await apply(keystore, operations)
            state = await discovery.discover(keystore)
        return ReconcileResult(operations, state)
