"""Tests for the keystore command runner and discovery."""

from collections.abc import Callable
from pathlib import Path

import pytest

from es_keystore.config import KeystoreConfig
from es_keystore.discovery import discover
from es_keystore.exceptions import (
    DiscoveryIndeterminate,
    ExternalCommandError,
    FilesystemError,
)
from es_keystore.keystore import Keystore
from es_keystore.manifest import KeystoreState


async def test_create_and_list(
    keystore: Keystore, calls: Callable[[], list[str]]
) -> None:
    """Test creating a keystore and listing its settings."""
    assert not await keystore.exists()
    result = await keystore.create()
    assert result.startswith("Created elasticsearch keystore")
    assert await keystore.exists()
    assert await keystore.list() == ""
    assert calls() == ["create", "list"]


async def test_add_sends_value_on_stdin(
    keystore: Keystore,
    config_dir: Path,
    secret_tmp_dir: Path,
    calls: Callable[[], list[str]],
) -> None:
    """Test the secret value is sent on stdin and not in the arguments."""
    await keystore.create()
    await keystore.add("s3.client.default.access_key", "hunter2")
    assert calls() == ["create", "add --force --stdin s3.client.default.access_key"]
    assert (config_dir / "values.log").read_text() == (
        "s3.client.default.access_key=hunter2\n"
    )
    assert list(secret_tmp_dir.iterdir()) == []
    assert await keystore.list() == "s3.client.default.access_key\n"


async def test_remove(keystore: Keystore) -> None:
    """Test removing a setting."""
    await keystore.create()
    await keystore.add("a", "x")
    await keystore.add("b", "y")
    await keystore.remove("a")
    assert await keystore.list() == "b\n"


async def test_remove_missing_setting(keystore: Keystore) -> None:
    """Test the diagnostic output of the tool is surfaced verbatim."""
    await keystore.create()
    with pytest.raises(ExternalCommandError) as exc_info:
        await keystore.remove("missing")
    assert exc_info.value.output == (
        "ERROR: Setting [missing] does not exist in the keystore.\n"
    )
    assert exc_info.value.returncode == 78


async def test_failed_add_removes_secret_file(
    keystore: Keystore, secret_tmp_dir: Path, home_dir: Path
) -> None:
    """Test the secret file is removed when the tool fails."""
    tool = home_dir / "bin" / "elasticsearch-keystore"
    tool.write_text("#!/bin/sh\necho 'ERROR: wrong password' >&2\nexit 1\n")
    with pytest.raises(ExternalCommandError, match="wrong password"):
        await keystore.add("a", "x")
    assert list(secret_tmp_dir.iterdir()) == []


async def test_config_dir_env(keystore: Keystore, home_dir: Path) -> None:
    """Test the tool is pointed at the config directory."""
    tool = home_dir / "bin" / "elasticsearch-keystore"
    tool.write_text('#!/bin/sh\necho "$ES_PATH_CONF"\n')
    assert await keystore.run(["list"]) == f"{keystore.config_dir}\n"


async def test_destroy(keystore: Keystore) -> None:
    """Test removing the keystore file."""
    await keystore.create()
    await keystore.destroy()
    assert not await keystore.exists()


async def test_destroy_missing(keystore: Keystore) -> None:
    """Test removing a keystore file that does not exist."""
    with pytest.raises(FilesystemError, match="Unable to remove keystore"):
        await keystore.destroy()


async def test_discover_absent(
    keystore: Keystore, calls: Callable[[], list[str]]
) -> None:
    """Test discovery does not run the tool when there is no keystore."""
    assert await discover(keystore) == KeystoreState(exists=False)
    assert calls() == []


async def test_discover_present(keystore: Keystore) -> None:
    """Test discovering the setting names of a keystore."""
    await keystore.create()
    assert await discover(keystore) == KeystoreState(exists=True)
    await keystore.add("b", "x")
    await keystore.add("a", "y")
    assert await discover(keystore) == KeystoreState(
        exists=True, setting_names=("b", "a")
    )


async def test_discover_list_failure(keystore: Keystore, config_dir: Path) -> None:
    """Test a listing failure is not treated as a missing keystore."""
    await keystore.create()
    (config_dir / "corrupt").touch()
    with pytest.raises(DiscoveryIndeterminate) as exc_info:
        await discover(keystore)
    assert "corrupted" in exc_info.value.output
    assert isinstance(exc_info.value.__cause__, ExternalCommandError)


def test_command_runs_as_keystore_owner() -> None:
    """Test every command runs as the owner of the keystore."""
    config = KeystoreConfig.from_platform("Debian")
    keystore = Keystore(config, Path("/opt/es/config"))
    for cmd in (keystore._command(["list"]), keystore._command(["create"])):
        assert cmd.user == "elasticsearch"
        assert cmd.group == "elasticsearch"
        assert cmd.env == {"ES_PATH_CONF": "/opt/es/config"}
        assert cmd.cmd[0] == "/usr/share/elasticsearch/bin/elasticsearch-keystore"
