# =============================================================================
# LIFECYCLE MANAGER TESTS
# =============================================================================
# Tests for deploy / remove / cleanup orchestration.
# =============================================================================

import asyncio
import os
import string
from unittest.mock import AsyncMock, MagicMock

import pytest

from tempdeploy.config import Settings
from tempdeploy.core.deployer import ServerlessCli
from tempdeploy.core.lifecycle import DEFAULT_ROOT, TempDeployments, random_string
from tempdeploy.core.stager import TargetStager
from tempdeploy.domain.models import Ok, SoftError, TempLocation
from tempdeploy.infra.shell import CommandError


@pytest.fixture
def stager():
    return MagicMock(spec=TargetStager)


@pytest.fixture
def cli():
    cli = MagicMock(spec=ServerlessCli)
    cli.deploy.return_value = "Service Information"
    cli.remove.return_value = "Service removed"
    return cli


@pytest.fixture
def manager(stager, cli, log, warn):
    return TempDeployments(
        root="/tmp/root",
        random=lambda: "rand0001",
        mkdirp=AsyncMock(return_value=Ok()),
        stager=stager,
        cli=cli,
        rmrf=AsyncMock(return_value=[]),
        ls=AsyncMock(return_value=[]),
        log=log,
        warn=warn,
    )


class TestRandomString:
    """Test instance id generation."""

    def test_default_length(self):
        """Ids are 8 characters by default."""
        assert len(random_string()) == 8

    def test_alphabet(self):
        """Ids are lowercase alphanumeric."""
        allowed = set(string.ascii_lowercase + string.digits)
        assert set(random_string(64)) <= allowed

    def test_ids_differ(self):
        """Consecutive ids are distinct."""
        assert random_string(16) != random_string(16)


class TestTempLocation:
    """Test location allocation."""

    def test_explicit_instance_id(self, manager):
        """A given id is joined to the root."""
        location = manager.temp_location("abc")
        assert location == TempLocation(instance_id="abc", destination=os.path.join("/tmp/root", "abc"))

    def test_generated_instance_id(self, manager):
        """Without an id the random generator is used."""
        location = manager.temp_location()
        assert location.instance_id == "rand0001"
        assert location.destination == os.path.join("/tmp/root", "rand0001")

    def test_default_root(self):
        """The default root is a namespace under the OS temp directory."""
        assert TempDeployments().root == DEFAULT_ROOT
        assert DEFAULT_ROOT.endswith("slsart-integration")


class TestDeployNewTarget:
    """Test the deploy pipeline."""

    @pytest.mark.asyncio
    async def test_success(self, manager, stager, cli, log):
        """All steps run in order and the result is True."""
        destination = os.path.join("/tmp/root", "rand0001")

        assert await manager.deploy_new_target() is True

        manager._mkdirp.assert_awaited_once_with(destination)
        stager.stage_target.assert_awaited_once_with(destination, "rand0001")
        cli.deploy.assert_awaited_once_with(destination)
        assert "Service Information" in log.messages

    @pytest.mark.asyncio
    async def test_explicit_location(self, manager, stager):
        """A caller-supplied location is used as-is."""
        location = TempLocation(instance_id="given", destination="/elsewhere/given")

        assert await manager.deploy_new_target(location) is True

        stager.stage_target.assert_awaited_once_with("/elsewhere/given", "given")

    @pytest.mark.asyncio
    async def test_mkdirp_soft_error_is_ignored(self, manager, cli):
        """A directory that already exists does not stop the deploy."""
        manager._mkdirp.return_value = SoftError(FileExistsError("exists"))

        assert await manager.deploy_new_target() is True
        cli.deploy.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_mkdirp_exception_is_ignored(self, manager, cli, warn):
        """Even a raising mkdirp only produces a warning."""
        manager._mkdirp.side_effect = RuntimeError("disk on fire")

        assert await manager.deploy_new_target() is True
        cli.deploy.assert_awaited_once()
        assert "disk on fire" in warn.joined()

    @pytest.mark.asyncio
    async def test_stage_failure(self, manager, stager, cli, warn):
        """Staging errors yield False with the stack in the warning."""
        stager.stage_target.side_effect = PermissionError("read-only destination")

        assert await manager.deploy_new_target() is False

        cli.deploy.assert_not_awaited()
        message = warn.joined()
        assert "failed to deploy a new target" in message
        assert "Traceback" in message
        assert "PermissionError: read-only destination" in message

    @pytest.mark.asyncio
    async def test_deploy_failure(self, manager, cli, warn):
        """CLI errors yield False, never an exception."""
        cli.deploy.side_effect = CommandError(
            "Command failed: sls deploy (exit 1) missing credentials", "sls deploy"
        )

        assert await manager.deploy_new_target() is False
        assert "missing credentials" in warn.joined()


class TestRemoveTempDeployment:
    """Test teardown of one deployment."""

    @pytest.mark.asyncio
    async def test_remove_then_delete(self, manager, cli, log):
        """The CLI remove runs before the local delete."""
        await manager.remove_temp_deployment("/tmp/root/abc")

        cli.remove.assert_awaited_once_with("/tmp/root/abc")
        manager._rmrf.assert_awaited_once_with("/tmp/root/abc")
        assert log.messages[-1] == "done"

    @pytest.mark.asyncio
    async def test_delete_despite_remove_failure(self, manager, cli, log, warn):
        """A failing CLI remove is a warning; the directory is still deleted."""
        cli.remove.side_effect = CommandError("Command failed: sls remove (exit 1) gone", "sls remove")

        await manager.remove_temp_deployment("/tmp/root/abc")

        manager._rmrf.assert_awaited_once_with("/tmp/root/abc")
        assert "failed to remove /tmp/root/abc" in warn.joined()
        assert log.messages[-1] == "done"


class TestCleanupDeployments:
    """Test bulk cleanup."""

    @pytest.mark.asyncio
    async def test_list_temp_deployments(self, manager):
        """Children of the root become full paths."""
        manager._ls.return_value = ["foo", "bar"]

        assert await manager.list_temp_deployments("/tmp/root") == [
            os.path.join("/tmp/root", "foo"),
            os.path.join("/tmp/root", "bar"),
        ]
        manager._ls.assert_awaited_once_with("/tmp/root")

    @pytest.mark.asyncio
    async def test_removes_sequentially(self, manager):
        """Each removal settles before the next one starts, in listed order."""
        manager._ls.return_value = ["foo", "bar"]
        events = []

        async def remove(directory):
            events.append(("start", os.path.basename(directory)))
            await asyncio.sleep(0)
            events.append(("end", os.path.basename(directory)))

        manager.remove_temp_deployment = remove

        await manager.cleanup_deployments("/tmp/root")

        assert events == [("start", "foo"), ("end", "foo"), ("start", "bar"), ("end", "bar")]

    @pytest.mark.asyncio
    async def test_empty_root(self, manager, cli):
        """Nothing to clean means nothing is removed."""
        await manager.cleanup_deployments("/tmp/root")
        cli.remove.assert_not_awaited()


class TestFromSettings:
    """Test wiring from Settings."""

    def test_wires_settings(self, tmp_path):
        """Root, source, tool and id length come from settings."""
        settings = Settings(
            root=str(tmp_path), source_path="/src/target", tool="serverless", instance_id_length=12
        )

        manager = TempDeployments.from_settings(settings)

        assert manager.root == str(tmp_path)
        assert len(manager.temp_location().instance_id) == 12
        assert manager._stager.source_path == "/src/target"
        assert manager._cli.tool == "serverless"


class TestEndToEnd:
    """Deploy and clean up against the real filesystem with a fake CLI."""

    @pytest.mark.asyncio
    async def test_deploy_and_cleanup(self, tmp_path, target_dir, log, warn):
        """A staged workspace is created, deployed and fully removed."""
        root = tmp_path / "deployments"
        exec_ = AsyncMock(return_value="ok")
        manager = TempDeployments(
            root=str(root),
            stager=TargetStager(source_path=str(target_dir)),
            cli=ServerlessCli(exec_=exec_),
            log=log,
            warn=warn,
        )
        location = manager.temp_location("e2e00001")

        assert await manager.deploy_new_target(location) is True

        workspace = root / "e2e00001"
        assert sorted(os.listdir(workspace)) == ["config.yml", "handler.js", "serverless.yml"]
        assert (workspace / "config.yml").read_text() == "instanceId: e2e00001"
        exec_.assert_awaited_once_with("sls deploy", cwd=str(workspace))

        await manager.cleanup_deployments(str(root))

        assert os.listdir(root) == []
        exec_.assert_awaited_with("sls remove", cwd=str(workspace))
        assert warn.messages == []
