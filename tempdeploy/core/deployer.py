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
# THE DEPLOYER - SERVERLESS CLI
# -----------------------------------------------------------------------------
# Responsibility: Provision and deprovision a staged workspace with the
# Serverless Framework CLI ("sls deploy" / "sls remove").
#
# The CLI reads serverless.yml and config.yml from its working directory,
# so both commands simply run inside the workspace. Credentials are the
# CLI's own business.
# -----------------------------------------------------------------------------

from typing import Awaitable, Callable

from rich.console import Console
from rich.markup import escape

from tempdeploy.infra.shell import exec_async

console = Console()

DEFAULT_TOOL = "sls"


class ServerlessCli:
    """Thin delegation to the external deploy tool."""

    def __init__(
        self,
        tool: str = DEFAULT_TOOL,
        exec_: Callable[..., Awaitable[str]] = exec_async,
    ) -> None:
        """
        Args:
            tool: Executable name of the deploy tool.
            exec_: Command runner; receives the command line and cwd.
        """
        self.tool = tool
        self._exec = exec_

    async def deploy(self, directory: str) -> str:
        """
        Run "<tool> deploy" inside directory.

        Returns:
            The tool's stdout.

        Raises:
            CommandError: If the tool fails.
        """
        console.print(f"[cyan][DEPLOYER] {self.tool} deploy in {escape(directory)}[/cyan]")
        return await self._exec(f"{self.tool} deploy", cwd=directory)

    async def remove(self, directory: str) -> str:
        """Run "<tool> remove" inside directory."""
        console.print(f"[cyan][DEPLOYER] {self.tool} remove in {escape(directory)}[/cyan]")
        return await self._exec(f"{self.tool} remove", cwd=directory)
