"""Library for discovering the observed state of a keystore."""

import logging

from .exceptions import DiscoveryIndeterminate, ExternalCommandError
from .keystore import Keystore
from .manifest import KeystoreState

__all__ = [
    "discover",
]

_LOGGER = logging.getLogger(__name__)


async def discover(keystore: Keystore) -> KeystoreState:
    """Return a fresh snapshot of the keystore and its setting names.

    The keystore tool is only invoked when the keystore file exists. A failure
    listing an existing keystore raises `DiscoveryIndeterminate`.
    """
    if not await keystore.exists():
        _LOGGER.debug("No keystore found at %s", keystore.path)
        return KeystoreState.absent()
    try:
        out = await keystore.list()
    except ExternalCommandError as err:
        raise DiscoveryIndeterminate(
            f"Unable to list settings in keystore {keystore.path}: {err}",
            output=err.output,
            returncode=err.returncode,
        ) from err
    state = KeystoreState.from_names(line for line in out.splitlines() if line)
    _LOGGER.debug(
        "Found keystore %s with %d settings", keystore.path, len(state.setting_names)
    )
    return state
