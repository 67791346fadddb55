"""Representation of the desired and observed state of a keystore.

A `DesiredResource` is parsed from a declared resource, either a YAML document
or the attributes passed from a configuration management layer:
```yaml
ensure: present
purge: true
configdir: /etc/elasticsearch
settings:
  s3.client.default.access_key: AKIA...
  s3.client.default.secret_key: ...
```
A `KeystoreState` is an immutable snapshot of what is on disk. It holds setting
names only since the keystore tool never exports values.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
import logging
from pathlib import Path
from typing import Any

from mashumaro import DataClassDictMixin
import yaml

from .config import DEFAULT_CONFIG_DIR
from .exceptions import InputException

__all__ = [
    "Ensure",
    "KeystoreState",
    "DesiredResource",
    "parse_resources",
    "read_resources",
    "KEYSTORE_NAME",
]

_LOGGER = logging.getLogger(__name__)

# There is only a single manageable keystore per host config directory
KEYSTORE_NAME = "elasticsearch_secrets"


class Ensure(StrEnum):
    """Whether the keystore should exist."""

    PRESENT = "present"
    ABSENT = "absent"


@dataclass(frozen=True)
class KeystoreState(DataClassDictMixin):
    """Observed state of the keystore."""

    exists: bool
    """True if the keystore file is present."""

    setting_names: tuple[str, ...] = ()
    """Names of the settings in the keystore in listing order."""

    def __post_init__(self) -> None:
        """Validate that an absent keystore holds no settings."""
        if not self.exists and self.setting_names:
            raise ValueError("A keystore that does not exist has no settings")

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "KeystoreState":
        """Create the state of an existing keystore from setting names."""
        return cls(exists=True, setting_names=tuple(dict.fromkeys(names)))

    @classmethod
    def absent(cls) -> "KeystoreState":
        """Create the state of a missing keystore."""
        return cls(exists=False)


def _normalize_settings(value: Any) -> dict[str, str]:
    """Return the settings as a single flat mapping.

    Settings may arrive wrapped in a list from multi-value attribute matching,
    in which case only the first element is used.
    """
    if isinstance(value, list):
        if len(value) > 1:
            _LOGGER.warning(
                "Found %d settings mappings, only the first is used", len(value)
            )
        value = value[0] if value else None
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InputException(f"Expected settings to be a mapping: {type(value)}")
    settings: dict[str, str] = {}
    for key, secret in value.items():
        if not isinstance(key, str) or not key:
            raise InputException(f"Invalid setting name: {key!r}")
        if isinstance(secret, (dict, list)) or secret is None:
            raise InputException(f"Setting '{key}' must have a scalar value")
        if isinstance(secret, bool):
            secret = "true" if secret else "false"
        settings[key] = str(secret)
    return settings


def _parse_bool(doc: dict[str, Any], key: str) -> bool:
    value = doc.get(key, False)
    if not isinstance(value, bool):
        raise InputException(f"Expected '{key}' to be a boolean: {value!r}")
    return value


@dataclass(frozen=True)
class DesiredResource:
    """Declared state of the keystore."""

    name: str = KEYSTORE_NAME
    """Name used to match the declaration to the discovered keystore."""

    ensure: Ensure = Ensure.PRESENT
    """Whether the keystore should exist."""

    settings: dict[str, str] = field(default_factory=dict, repr=False)
    """Setting names to secret values, in the order they are added."""

    purge: bool = False
    """Remove settings in the keystore that are not declared."""

    config_dir: Path = DEFAULT_CONFIG_DIR
    """Config directory the keystore tool operates on."""

    overwrite: bool = False
    """Replace the value of settings already in the keystore."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "DesiredResource":
        """Parse a declared resource from a document."""
        if not isinstance(doc, dict):
            raise InputException(f"Expected a mapping for the resource: {doc!r}")
        try:
            ensure = Ensure(str(doc.get("ensure", Ensure.PRESENT)))
        except ValueError as err:
            raise InputException(
                f"Invalid ensure value '{doc.get('ensure')}', expected one of "
                f"{', '.join(Ensure)}"
            ) from err
        config_dir = doc.get("configdir", DEFAULT_CONFIG_DIR)
        return cls(
            name=str(doc.get("name", KEYSTORE_NAME)),
            ensure=ensure,
            settings=_normalize_settings(doc.get("settings")),
            purge=_parse_bool(doc, "purge"),
            config_dir=Path(config_dir),
            overwrite=_parse_bool(doc, "overwrite"),
        )


def parse_resources(content: str) -> list[DesiredResource]:
    """Parse one or more YAML documents into declared resources."""
    try:
        docs = list(yaml.safe_load_all(content))
    except yaml.YAMLError as err:
        raise InputException(f"Unable to parse resource YAML: {err}") from err
    return [DesiredResource.parse_doc(doc) for doc in docs if doc is not None]


def read_resources(path: Path) -> list[DesiredResource]:
    """Read declared resources from a YAML file."""
    try:
        content = path.read_text()
    except OSError as err:
        raise InputException(f"Unable to read resource file {path}: {err}") from err
    return parse_resources(content)
