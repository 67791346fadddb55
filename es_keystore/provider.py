"""Adapter between declared keystore resources and the reconciler.

Declared resources are matched to discovered keystores by name. There is only
one keystore per config directory, discovered under `KEYSTORE_NAME`, so a
declaration with any other name always starts from an absent keystore.
"""

from collections.abc import Mapping
import logging
from pathlib import Path

from .config import DEFAULT_CONFIG_DIR
from .manifest import KEYSTORE_NAME, DesiredResource, KeystoreState
from .reconciler import Reconciler, ReconcileResult

__all__ = [
    "KEYSTORE_NAME",
    "KeystoreProvider",
    "instances",
    "prefetch",
]

_LOGGER = logging.getLogger(__name__)


class KeystoreProvider:
    """Tracks the state of one declared keystore across a pass."""

    def __init__(
        self,
        reconciler: Reconciler,
        resource: DesiredResource,
        state: KeystoreState | None = None,
    ) -> None:
        """Initialize KeystoreProvider."""
        self._reconciler = reconciler
        self._resource = resource
        self._state = state if state is not None else KeystoreState.absent()

    @property
    def name(self) -> str:
        """Return the name of the declared resource."""
        return self._resource.name

    @property
    def resource(self) -> DesiredResource:
        """Return the declared resource."""
        return self._resource

    @property
    def state(self) -> KeystoreState:
        """Return the keystore state as last observed."""
        return self._state

    def exists(self) -> bool:
        """Return True if the keystore was present when last observed."""
        return self._state.exists

    @property
    def settings(self) -> list[str]:
        """Return the setting names observed in the keystore."""
        return list(self._state.setting_names)

    async def flush(self, dry_run: bool = False) -> ReconcileResult:
        """Run a reconciliation pass and keep the refreshed state."""
        result = await self._reconciler.reconcile(
            self._resource, self._state, dry_run=dry_run
        )
        self._state = result.state
        return result


async def instances(
    reconciler: Reconciler, config_dir: Path = DEFAULT_CONFIG_DIR
) -> dict[str, KeystoreState]:
    """Return the discovered keystores keyed by name."""
    state = await reconciler.discover(config_dir)
    if not state.exists:
        return {}
    return {KEYSTORE_NAME: state}


async def prefetch(
    reconciler: Reconciler, resources: Mapping[str, DesiredResource]
) -> dict[str, KeystoreProvider]:
    """Return providers for the declared resources with discovered state attached."""
    providers: dict[str, KeystoreProvider] = {}
    discovered: dict[Path, dict[str, KeystoreState]] = {}
    for name, resource in resources.items():
        if resource.config_dir not in discovered:
            discovered[resource.config_dir] = await instances(
                reconciler, resource.config_dir
            )
        state = discovered[resource.config_dir].get(name)
        if state is None:
            _LOGGER.debug("No discovered keystore matches resource %s", name)
        providers[name] = KeystoreProvider(reconciler, resource, state)
    return providers
