"""Exceptions related to es-keystore."""

__all__ = [
    "KeystoreException",
    "InputException",
    "CommandException",
    "ExternalCommandError",
    "DiscoveryIndeterminate",
    "FilesystemError",
]


class KeystoreException(Exception):
    """Generic base exception used for this library."""


class InputException(KeystoreException):
    """Raised when a declared resource is not formatted as expected."""


class CommandException(KeystoreException):
    """Raised when there is a failure running a subcommand."""

    def __init__(
        self, message: str, output: str = "", returncode: int | None = None
    ) -> None:
        super().__init__(message)
        self.output = output
        self.returncode = returncode


class ExternalCommandError(CommandException):
    """Raised when the keystore tool exits with a non-zero status.

    The `output` attribute holds the captured diagnostic text of the tool
    verbatim so it can be reported without reinterpretation.
    """


class DiscoveryIndeterminate(ExternalCommandError):
    """Raised when listing an existing keystore failed.

    This never means the keystore is absent.
    """


class FilesystemError(KeystoreException):
    """Raised when the keystore file could not be removed."""
