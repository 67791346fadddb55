"""Library for issuing commands using asyncio and returning the result."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Generator
from contextlib import contextmanager
import logging
import os
import shlex
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .exceptions import CommandException

_LOGGER = logging.getLogger(__name__)

# No public API
__all__: list[str] = []

SECRET_FILE_PREFIX = "elasticsearch-keystore"


class Task(ABC):
    """An instance of a async task to execute."""

    @abstractmethod
    async def run(self) -> bytes:
        """Execute the task and return the result."""


@contextmanager
def secret_input_file(payload: bytes) -> Generator[Path]:
    """Context manager for a private file holding a secret value.

    The file is readable only by the current user and is removed when the
    context exits, whether or not an exception was raised.
    """
    with tempfile.NamedTemporaryFile(prefix=SECRET_FILE_PREFIX) as temp_file:
        os.fchmod(temp_file.fileno(), 0o600)
        temp_file.write(payload)
        temp_file.flush()
        yield Path(temp_file.name)


@dataclass
class Command(Task):
    """An instance of a command to run."""

    cmd: list[str]
    """Array of command line arguments."""

    exc: type[CommandException] = CommandException
    """Exception to throw in case of an error."""

    env: dict[str, str] | None = None
    """Environment variables for the subprocess."""

    user: str | None = None
    """User to run the subprocess as."""

    group: str | None = None
    """Group to run the subprocess as."""

    stdin_path: Path | None = None
    """File whose contents are sent to the subprocess on standard input."""

    timeout: float | None = None
    """Seconds to wait before giving up, or None to wait forever."""

    @property
    def string(self) -> str:
        """Render the command as a single string."""
        return " ".join([shlex.quote(arg) for arg in self.cmd])

    def __str__(self) -> str:
        """Render as a debug string."""
        if self.user:
            return f"({self.user}) {self.string}"
        return self.string

    async def run(self) -> bytes:
        """Run the command, returning stdout."""
        _LOGGER.debug("Running command: %s", self)
        env = {
            **os.environ,
            **(self.env if self.env else {}),
        }
        if self.stdin_path is not None:
            with self.stdin_path.open("rb") as stdin:
                return await self._run(env, stdin)
        return await self._run(env, subprocess.DEVNULL)

    async def _run(self, env: dict[str, str], stdin: object) -> bytes:
        proc = await asyncio.create_subprocess_exec(
            *self.cmd,
            stdin=stdin,  # type: ignore[arg-type]
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=env,
            user=self.user,
            group=self.group,
        )
        try:
            out, err = await asyncio.wait_for(proc.communicate(), self.timeout)
        except asyncio.TimeoutError as err:
            proc.kill()
            await proc.wait()
            raise self.exc(f"Command '{self}' timed out") from err
        if proc.returncode:
            errors = [f"Command '{self}' failed with return code {proc.returncode}"]
            output = []
            if out:
                output.append(out.decode("utf-8"))
            if err:
                output.append(err.decode("utf-8"))
            errors.extend(output)
            _LOGGER.debug("\n".join(errors))
            raise self.exc(
                "\n".join(errors), output="".join(output), returncode=proc.returncode
            )
        return out


async def run(cmd: Task) -> str:
    """Run the specified command and return stdout."""
    out = await cmd.run()
    return out.decode("utf-8") if out else ""
