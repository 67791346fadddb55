"""Library for running `elasticsearch-keystore` commands against a keystore.

Every invocation carries the same config directory so the tool targets the
right store, and runs as the user and group owning the keystore:
```python
from es_keystore.config import KeystoreConfig
from es_keystore.keystore import Keystore

keystore = Keystore(KeystoreConfig.from_platform("Debian"), Path("/etc/elasticsearch"))
if not await keystore.exists():
    await keystore.create()
await keystore.add("s3.client.default.access_key", "secret")
print(await keystore.list())
```
Secret values are sent on standard input through a private temporary file and
never appear in process arguments or logs.
"""

from collections.abc import Sequence
import logging
from pathlib import Path

import aiofiles.os
from aiofiles.ospath import exists

from .command import Command, run, secret_input_file
from .config import ExecutionContext, KeystoreConfig
from .exceptions import ExternalCommandError, FilesystemError

__all__ = [
    "Keystore",
]

_LOGGER = logging.getLogger(__name__)


class Keystore:
    """Library for issuing keystore tool commands for one config directory."""

    def __init__(self, config: KeystoreConfig, config_dir: Path) -> None:
        """Initialize Keystore."""
        self._config = config
        self._context = config.context(config_dir)

    @property
    def context(self) -> ExecutionContext:
        """Return the execution context used for every invocation."""
        return self._context

    @property
    def config_dir(self) -> Path:
        """Return the config directory targeted by the tool."""
        return self._context.config_dir

    @property
    def path(self) -> Path:
        """Return the host wide keystore file path."""
        return self._config.keystore_path

    async def exists(self) -> bool:
        """Return True if the keystore file is present."""
        return bool(await exists(self.path))

    async def run(self, args: Sequence[str], stdin: bytes | None = None) -> str:
        """Run the keystore tool with the arguments and return stdout verbatim."""
        if stdin is None:
            return await run(self._command(args))
        with secret_input_file(stdin) as stdin_path:
            return await run(self._command(args, stdin_path))

    def _command(self, args: Sequence[str], stdin_path: Path | None = None) -> Command:
        return Command(
            [str(self._context.executable), *args],
            exc=ExternalCommandError,
            env=self._context.env,
            user=self._context.user,
            group=self._context.group,
            stdin_path=stdin_path,
            timeout=self._context.timeout,
        )

    async def create(self) -> str:
        """Create a new empty keystore."""
        return await self.run(["create"])

    async def list(self) -> str:
        """Return the raw listing of setting names, one per line."""
        return await self.run(["list"])

    async def add(self, key: str, value: str) -> str:
        """Add a setting, replacing any existing value without prompting."""
        return await self.run(["add", "--force", "--stdin", key], value.encode("utf-8"))

    async def remove(self, key: str) -> str:
        """Remove a setting."""
        return await self.run(["remove", key])

    async def destroy(self) -> None:
        """Delete the keystore file directly, without the keystore tool."""
        _LOGGER.debug("Removing keystore file %s", self.path)
        try:
            await aiofiles.os.remove(self.path)
        except OSError as err:
            raise FilesystemError(
                f"Unable to remove keystore {self.path}: {err}"
            ) from err
