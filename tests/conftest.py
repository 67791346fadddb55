"""Fixtures for es-keystore tests."""

from collections.abc import Callable, Generator
from pathlib import Path
import tempfile

import pytest

from es_keystore.config import InstallPaths, KeystoreConfig
from es_keystore.keystore import Keystore
from es_keystore.reconciler import Reconciler

# Stands in for elasticsearch-keystore, storing one setting name per line.
# Arguments of every call are appended to calls.log and added values to
# values.log in the config directory.
FAKE_KEYSTORE_TOOL = """#!/bin/sh
store="$ES_PATH_CONF/elasticsearch.keystore"
echo "$*" >> "$ES_PATH_CONF/calls.log"
case "$1" in
  create)
    : > "$store"
    echo "Created elasticsearch keystore in $ES_PATH_CONF"
    ;;
  list)
    if [ ! -f "$store" ]; then
      echo "ERROR: Elasticsearch keystore not found" >&2
      exit 65
    fi
    if [ -f "$ES_PATH_CONF/corrupt" ]; then
      echo "ERROR: Elasticsearch keystore has been corrupted or tampered with" >&2
      exit 78
    fi
    cat "$store"
    ;;
  add)
    if [ "$2" != "--force" ] || [ "$3" != "--stdin" ]; then
      echo "ERROR: expected --force --stdin" >&2
      exit 64
    fi
    value=$(cat)
    grep -v -x -F -e "$4" "$store" > "$store.tmp" 2>/dev/null || true
    echo "$4" >> "$store.tmp"
    mv "$store.tmp" "$store"
    echo "$4=$value" >> "$ES_PATH_CONF/values.log"
    ;;
  remove)
    if ! grep -q -x -F -e "$2" "$store" 2>/dev/null; then
      echo "ERROR: Setting [$2] does not exist in the keystore." >&2
      exit 78
    fi
    grep -v -x -F -e "$2" "$store" > "$store.tmp" || true
    mv "$store.tmp" "$store"
    ;;
  *)
    echo "ERROR: unknown command $1" >&2
    exit 64
    ;;
esac
"""


@pytest.fixture(name="home_dir")
def home_dir_fixture(tmp_path: Path) -> Path:
    """Fixture for an installation directory holding the fake keystore tool."""
    home_dir = tmp_path / "home"
    bin_dir = home_dir / "bin"
    bin_dir.mkdir(parents=True)
    tool = bin_dir / "elasticsearch-keystore"
    tool.write_text(FAKE_KEYSTORE_TOOL)
    tool.chmod(0o755)
    return home_dir


@pytest.fixture(name="config_dir")
def config_dir_fixture(tmp_path: Path) -> Path:
    """Fixture for the config directory, also used as the config root."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture(name="secret_tmp_dir", autouse=True)
def secret_tmp_dir_fixture(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Fixture that isolates temporary files so leftovers can be detected."""
    tmp_dir = tmp_path / "tmp"
    tmp_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_dir))
    yield tmp_dir


@pytest.fixture(name="config")
def config_fixture(tmp_path: Path, home_dir: Path, config_dir: Path) -> KeystoreConfig:
    """Fixture for a configuration that runs as the current user."""
    return KeystoreConfig(
        install_paths=InstallPaths(defaults_dir=tmp_path / "default", home_dir=home_dir),
        config_root=config_dir,
        user=None,
        group=None,
    )


@pytest.fixture(name="keystore")
def keystore_fixture(config: KeystoreConfig, config_dir: Path) -> Keystore:
    """Fixture for the keystore under test."""
    return Keystore(config, config_dir)


@pytest.fixture(name="reconciler")
def reconciler_fixture(config: KeystoreConfig) -> Reconciler:
    """Fixture for the reconciler under test."""
    return Reconciler(config)


@pytest.fixture(name="calls")
def calls_fixture(config_dir: Path) -> Callable[[], list[str]]:
    """Fixture returning a function that reads the recorded tool calls."""

    def read_calls() -> list[str]:
        log = config_dir / "calls.log"
        if not log.exists():
            return []
        return log.read_text().splitlines()

    return read_calls
