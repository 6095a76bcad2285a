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
# THE STAGER - TARGET MATERIALIZATION
# -----------------------------------------------------------------------------
# Responsibility: Copy the deployable unit's source files into a temp
# workspace and write the instance-specific config.yml next to them.
#
# Pipeline (strictly sequential):
#   find source files -> copy all (concurrently) -> write config
#
# Test files (*.spec.<ext>) never leave the source tree. Nested sources are
# flattened into the destination by base name.
# -----------------------------------------------------------------------------

import asyncio
import os
import re
from pathlib import Path
from typing import Awaitable, Callable

from rich.console import Console
from rich.markup import escape

from tempdeploy.domain.models import Outcome
from tempdeploy.infra import fs

console = Console()

# Default deployable unit, relative to the project root
DEFAULT_SOURCE_PATH = str(Path(__file__).parent.parent.parent / "target")
CONFIG_NAME = "config.yml"

SPEC_FILE_PATTERN = re.compile(r"\.spec\.[^.]+$")


def filter_out_spec_files(names: list[str]) -> list[str]:
    """Drop test files (e.g. handler.spec.js) from a listing."""
    return [name for name in names if not SPEC_FILE_PATTERN.search(name)]


def names_to_full_paths(directory: str, names: list[str]) -> list[str]:
    return [os.path.join(directory, name) for name in names]


def source_file_name_to(destination: str, source_file: str) -> str:
    """Re-root a source file into the destination folder by its base name."""
    return os.path.join(destination, os.path.basename(source_file))


class TargetStager:
    """
    Materializes the deployable unit into a workspace.

    All filesystem access goes through the injected primitives, so tests
    can stage against fakes.
    """

    def __init__(
        self,
        source_path: str = DEFAULT_SOURCE_PATH,
        ls: Callable[[str], Awaitable[list[str]]] = fs.ls,
        cp: Callable[[str, str], Awaitable[Outcome]] = fs.cp,
        write_file: Callable[[str, str], Awaitable[None]] = fs.write_file,
        config_name: str = CONFIG_NAME,
    ) -> None:
        self.source_path = source_path
        self.config_name = config_name
        self._ls = ls
        self._cp = cp
        self._write_file = write_file

    async def find_target_source_files(self) -> list[str]:
        """
        List the deployable unit's files, recomputed on every call.

        Returns:
            Full paths of every non-test entry in the source directory.
        """
        names = await self._ls(self.source_path)
        return names_to_full_paths(self.source_path, filter_out_spec_files(names))

    async def copy_to_folder(self, destination: str, source_file: str) -> Outcome:
        return await self._cp(source_file, source_file_name_to(destination, source_file))

    async def copy_all(self, destination: str, source_files: list[str]) -> None:
        """Copy every source file into destination and wait for all of them."""
        outcomes = await asyncio.gather(
            *(self.copy_to_folder(destination, source_file) for source_file in source_files)
        )
        for source_file, outcome in zip(source_files, outcomes):
            if not outcome.ok:
                console.print(
                    f"[yellow][STAGER] Could not copy {escape(source_file)}: "
                    f"{escape(str(outcome))}[/yellow]"
                )

    async def write_config(self, destination: str, instance_id: str) -> None:
        """
        Write the per-instance config next to the staged sources.

        Raises:
            OSError: If the config cannot be written.
        """
        await self._write_file(
            os.path.join(destination, self.config_name), f"instanceId: {instance_id}"
        )

    async def stage_target(self, destination: str, instance_id: str) -> None:
        """
        Stage the deployable unit into destination.

        Steps run in order and the first exception aborts the rest; nothing
        is retried.

        Args:
            destination: Workspace directory (must already exist).
            instance_id: Written into the generated config.
        """
        source_files = await self.find_target_source_files()
        console.print(
            f"[cyan][STAGER] Copying {len(source_files)} files to {escape(destination)}[/cyan]"
        )
        await self.copy_all(destination, source_files)
        await self.write_config(destination, instance_id)
