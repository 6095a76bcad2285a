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
# COMMAND RUNNER
# -----------------------------------------------------------------------------
# Responsibility: Run an external command without blocking the event loop and
# normalize its result: stdout text on success, CommandError on failure.
#
# The error message is "<underlying message> <stderr>" - it is the only
# diagnostic the layers above ever see.
# -----------------------------------------------------------------------------

import asyncio
from typing import Mapping


class CommandError(Exception):
    """Raised when an external command cannot start or exits non-zero."""

    def __init__(
        self,
        message: str,
        command: str,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _merge(message: str, stderr: str) -> str:
    return f"{message} {stderr}"


async def exec_async(
    command: str,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """
    Run a shell command and capture its output.

    Args:
        command: Full command line (e.g., "sls deploy").
        cwd: Working directory for the command.
        env: Environment for the child; inherits ours when None.

    Returns:
        Captured stdout as text.

    Raises:
        CommandError: If the process cannot be spawned or exits non-zero.
    """
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise CommandError(_merge(str(e), ""), command) from e

    out, err = await process.communicate()
    stdout = out.decode("utf-8", errors="replace")
    stderr = err.decode("utf-8", errors="replace")

    if process.returncode != 0:
        raise CommandError(
            _merge(f"Command failed: {command} (exit {process.returncode})", stderr),
            command,
            returncode=process.returncode,
            stdout=stdout,
            stderr=stderr,
        )

    return stdout
