"""Configuration objects for es-keystore.

Installation paths depend on the host platform family. They are resolved once
at start up into an immutable `KeystoreConfig` that is passed explicitly to
the rest of the library:
```python
from es_keystore.config import KeystoreConfig

config = KeystoreConfig.from_platform("RedHat")
context = config.context(Path("/etc/elasticsearch"))
```
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path
import platform
import sys

__all__ = [
    "InstallPaths",
    "ExecutionContext",
    "KeystoreConfig",
    "resolve_install_paths",
    "detect_platform_family",
]

_LOGGER = logging.getLogger(__name__)

KEYSTORE_BIN = "elasticsearch-keystore"
KEYSTORE_FILENAME = "elasticsearch.keystore"
CONFIG_DIR_ENV = "ES_PATH_CONF"
DEFAULT_CONFIG_DIR = Path("/etc/elasticsearch")
DEFAULT_USER = "elasticsearch"
DEFAULT_GROUP = "elasticsearch"

REDHAT = "RedHat"
OPENBSD = "OpenBSD"
DEBIAN = "Debian"

# Values of ID / ID_LIKE in os-release that belong to the RedHat family
_REDHAT_IDS = {"rhel", "fedora", "centos", "rocky", "almalinux", "amzn", "ol"}


@dataclass(frozen=True)
class InstallPaths:
    """Locations of the Elasticsearch installation on the host."""

    defaults_dir: Path
    """Directory holding the service environment defaults file."""

    home_dir: Path
    """Elasticsearch home directory containing `bin/`."""


def resolve_install_paths(platform_family: str) -> InstallPaths:
    """Return the installation paths for a host platform family."""
    if platform_family == REDHAT:
        defaults_dir = Path("/etc/sysconfig")
    else:
        defaults_dir = Path("/etc/default")
    if platform_family == OPENBSD:
        home_dir = Path("/usr/local/elasticsearch")
    else:
        home_dir = Path("/usr/share/elasticsearch")
    return InstallPaths(defaults_dir=defaults_dir, home_dir=home_dir)


def detect_platform_family() -> str:
    """Make a best effort guess of the platform family of this host."""
    if sys.platform.startswith("openbsd"):
        return OPENBSD
    try:
        release = platform.freedesktop_os_release()
    except OSError:
        _LOGGER.debug("No os-release file found, assuming %s", DEBIAN)
        return DEBIAN
    ids = {release.get("ID", "")} | set(release.get("ID_LIKE", "").split())
    if ids & _REDHAT_IDS:
        return REDHAT
    return DEBIAN


@dataclass(frozen=True)
class ExecutionContext:
    """Everything needed to invoke the keystore tool against one store."""

    executable: Path
    """Resolved path of the keystore tool."""

    config_dir: Path
    """Config directory the tool operates on."""

    env: dict[str, str] = field(default_factory=dict)
    """Environment overrides, always including the config directory."""

    user: str | None = None
    """User to run the tool as, or None to keep the current user."""

    group: str | None = None
    """Group to run the tool as, or None to keep the current group."""

    timeout: float | None = None
    """Seconds to wait for the tool, or None to wait forever."""


@dataclass(frozen=True)
class KeystoreConfig:
    """Process wide configuration, created once at start up."""

    install_paths: InstallPaths
    """Installation paths resolved from the platform family."""

    config_root: Path = DEFAULT_CONFIG_DIR
    """Host configuration root holding the keystore file."""

    user: str | None = DEFAULT_USER
    """User that owns the keystore."""

    group: str | None = DEFAULT_GROUP
    """Group that owns the keystore."""

    timeout: float | None = None
    """Timeout for each keystore tool invocation."""

    @classmethod
    def from_platform(cls, platform_family: str, **kwargs: object) -> "KeystoreConfig":
        """Create a config for the specified platform family."""
        return cls(install_paths=resolve_install_paths(platform_family), **kwargs)  # type: ignore[arg-type]

    @property
    def executable(self) -> Path:
        """Path of the keystore tool."""
        return self.install_paths.home_dir / "bin" / KEYSTORE_BIN

    @property
    def keystore_path(self) -> Path:
        """Path of the keystore file, whose existence signals presence."""
        return self.config_root / KEYSTORE_FILENAME

    def context(self, config_dir: Path) -> ExecutionContext:
        """Return the execution context for a config directory."""
        return ExecutionContext(
            executable=self.executable,
            config_dir=config_dir,
            env={CONFIG_DIR_ENV: str(config_dir)},
            user=self.user,
            group=self.group,
            timeout=self.timeout,
        )
