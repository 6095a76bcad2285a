# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# THE LIFECYCLE MANAGER - ORCHESTRATOR
# -----------------------------------------------------------------------------
# Responsibility: Drive temp deployments from allocation to teardown.
#
# Deploy:   allocate location -> mkdirp -> stage -> sls deploy -> True
#           (mkdirp failures are ignored; stage/deploy failures -> False)
# Remove:   sls remove (failure only warns) -> rmrf (always) -> done
# Cleanup:  remove every deployment under a root, one after another
#
# Callers get booleans and log lines, never raw exceptions from a deploy.
# -----------------------------------------------------------------------------

import os
import secrets
import string
import tempfile
import traceback
from typing import TYPE_CHECKING, Awaitable, Callable

from rich.console import Console
from rich.markup import escape

from tempdeploy.core.deployer import ServerlessCli
from tempdeploy.core.stager import TargetStager
from tempdeploy.core.tree import rmrf as rmrf_tree
from tempdeploy.domain.models import Outcome, TempLocation
from tempdeploy.infra import fs

if TYPE_CHECKING:
    from tempdeploy.config import Settings

console = Console()

# Namespace segment under the OS temp directory
TEMP_NAMESPACE = "slsart-integration"
DEFAULT_ROOT = os.path.join(tempfile.gettempdir(), TEMP_NAMESPACE)
INSTANCE_ID_LENGTH = 8

ID_ALPHABET = string.ascii_lowercase + string.digits


def random_string(length: int = INSTANCE_ID_LENGTH) -> str:
    """Random lowercase alphanumeric id, safe for directory and stack names."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def log_info(message: str) -> None:
    console.print(f"[cyan][LIFECYCLE] {escape(message)}[/cyan]")


def log_warning(message: str) -> None:
    console.print(f"[yellow][LIFECYCLE] {escape(message)}[/yellow]")


class TempDeployments:
    """
    Deploys and tears down throwaway copies of the target service.

    Every collaborator is injectable; the defaults talk to the real
    filesystem and the real CLI.
    """

    def __init__(
        self,
        root: str = DEFAULT_ROOT,
        random: Callable[[], str] = random_string,
        mkdirp: Callable[[str], Awaitable[Outcome]] = fs.mkdirp,
        stager: TargetStager | None = None,
        cli: ServerlessCli | None = None,
        rmrf: Callable[[str], Awaitable[list[str]]] = rmrf_tree,
        ls: Callable[[str], Awaitable[list[str]]] = fs.ls,
        log: Callable[[str], None] = log_info,
        warn: Callable[[str], None] = log_warning,
    ) -> None:
        self.root = root
        self._random = random
        self._mkdirp = mkdirp
        self._stager = stager or TargetStager()
        self._cli = cli or ServerlessCli()
        self._rmrf = rmrf
        self._ls = ls
        self._log = log
        self._warn = warn

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TempDeployments":
        """Build a manager wired to the configured root, source and CLI."""
        return cls(
            root=settings.root,
            random=lambda: random_string(settings.instance_id_length),
            stager=TargetStager(
                source_path=settings.source_path, config_name=settings.config_name
            ),
            cli=ServerlessCli(tool=settings.tool),
        )

    def temp_location(self, instance_id: str | None = None) -> TempLocation:
        """Allocate a location under the root, generating an id if none is given."""
        if instance_id is None:
            instance_id = self._random()
        return TempLocation(
            instance_id=instance_id, destination=os.path.join(self.root, instance_id)
        )

    async def _ensure_directory(self, destination: str) -> None:
        """Create the workspace; failing here never stops the pipeline."""
        try:
            outcome = await self._mkdirp(destination)
        except Exception as e:
            self._warn(f"could not create {destination}: {e}")
            return
        if not outcome.ok:
            self._log(f"mkdirp {destination}: {outcome}")

    async def deploy_new_target(self, location: TempLocation | None = None) -> bool:
        """
        Stage and deploy a fresh copy of the target.

        Args:
            location: Where to deploy; a new random location when None.

        Returns:
            True if staging and deploying succeeded, False otherwise.
        """
        if location is None:
            location = self.temp_location()

        await self._ensure_directory(location.destination)

        try:
            self._log(f"staging target {location.instance_id} to {location.destination}")
            await self._stager.stage_target(location.destination, location.instance_id)
            self._log(f"deploying {location.destination}")
            output = await self._cli.deploy(location.destination)
            self._log(output)
            return True
        except Exception as e:
            stack = "".join(traceback.format_exception(type(e), e, e.__traceback__))
            self._warn(f"failed to deploy a new target: {stack}")
            return False

    async def remove_temp_deployment(self, directory: str) -> None:
        """
        Deprovision a deployment and delete its workspace.

        The workspace is deleted even when the remote removal fails, so
        local copies never pile up.
        """
        self._log(f"removing temp deployment {directory}")
        try:
            await self._cli.remove(directory)
        except Exception as e:
            self._warn(f"failed to remove {directory}: {e}")

        self._log(f"deleting {directory}")
        await self._rmrf(directory)
        self._log("done")

    async def list_temp_deployments(self, root: str) -> list[str]:
        names = await self._ls(root)
        return [os.path.join(root, name) for name in names]

    async def cleanup_deployments(self, root: str) -> None:
        """
        Remove every temp deployment under root, strictly one at a time.

        Args:
            root: Directory whose immediate children are deployments.
        """
        self._log(f"cleaning up deployments in {root}")
        for directory in await self.list_temp_deployments(root):
            await self.remove_temp_deployment(directory)
