"""Operations that mutate a keystore.

Each operation is one invocation of the keystore tool, except `DestroyStore`
which removes the keystore file directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging

from .keystore import Keystore

__all__ = [
    "Operation",
    "CreateStore",
    "DestroyStore",
    "AddSetting",
    "RemoveSetting",
]

_LOGGER = logging.getLogger(__name__)


class Operation(ABC):
    """A single mutation of the keystore."""

    @abstractmethod
    async def apply(self, keystore: Keystore) -> None:
        """Perform the operation against the keystore."""


@dataclass(frozen=True)
class CreateStore(Operation):
    """Create a new empty keystore."""

    async def apply(self, keystore: Keystore) -> None:
        """Run `create`."""
        out = await keystore.create()
        _LOGGER.debug(out)

    def __str__(self) -> str:
        return "create"


@dataclass(frozen=True)
class DestroyStore(Operation):
    """Remove the keystore file."""

    async def apply(self, keystore: Keystore) -> None:
        """Delete the keystore file."""
        await keystore.destroy()

    def __str__(self) -> str:
        return "destroy"


@dataclass(frozen=True)
class AddSetting(Operation):
    """Add a setting with its secret value."""

    key: str
    value: str = field(repr=False)

    async def apply(self, keystore: Keystore) -> None:
        """Run `add`, sending the value on standard input."""
        out = await keystore.add(self.key, self.value)
        _LOGGER.debug(out)

    def __str__(self) -> str:
        return f"add {self.key}"


@dataclass(frozen=True)
class RemoveSetting(Operation):
    """Remove a setting."""

    key: str

    async def apply(self, keystore: Keystore) -> None:
        """Run `remove`."""
        out = await keystore.remove(self.key)
        _LOGGER.debug(out)

    def __str__(self) -> str:
        return f"remove {self.key}"
