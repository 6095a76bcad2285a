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
# FILESYSTEM PRIMITIVES
# -----------------------------------------------------------------------------
# Responsibility: Async wrappers around the handful of OS file operations the
# staging pipeline needs. Blocking calls run in worker threads.
#
# Failure conventions:
# - mkdir / mkdirp / cp / rm_file / rm_dir return an Outcome (Ok | SoftError)
# - ls returns [] when the directory cannot be read
# - write_file raises the underlying OSError
# -----------------------------------------------------------------------------

import asyncio
import os
import shutil

from tempdeploy.domain.models import Ok, Outcome, SoftError


async def _attempt(func, *args) -> Outcome:
    """Run a blocking OS call in a thread, folding OSError into a SoftError."""
    try:
        await asyncio.to_thread(func, *args)
    except OSError as e:
        return SoftError(e)
    return Ok()


async def mkdir(path: str) -> Outcome:
    """Create a single directory level."""
    return await _attempt(os.mkdir, path)


def progressive_paths(path: str) -> list[str]:
    """
    Decompose a path into its progressively longer prefixes.

    /a/b/c -> ['/a', '/a/b', '/a/b/c']
    a/b    -> ['a', 'a/b']
    """
    current = os.sep if os.path.isabs(path) else ""
    prefixes = []
    for part in path.split(os.sep):
        if not part:
            continue
        current = os.path.join(current, part) if current else part
        prefixes.append(current)
    return prefixes


async def mkdirp(path: str) -> Outcome:
    """
    Create a directory and any missing parents, one level at a time.

    Levels are created sequentially. Errors on intermediate levels (usually
    "already exists") are ignored; only the outcome of the last level is
    reported, which makes repeated calls harmless.
    """
    outcome: Outcome = Ok()
    for prefix in progressive_paths(path):
        outcome = await mkdir(prefix)
    return outcome


def _list_entries(path: str) -> list[str]:
    # Symlinks are leaves: a walk must never leave the tree it started in
    if os.path.islink(path):
        return []
    return os.listdir(path)


async def ls(path: str) -> list[str]:
    """List entry names of a directory, or [] if it cannot be listed."""
    try:
        return await asyncio.to_thread(_list_entries, path)
    except OSError:
        return []


async def cp(source: str, destination: str) -> Outcome:
    """Copy one file."""
    return await _attempt(shutil.copyfile, source, destination)


def _write_text(path: str, content: str) -> None:
    with open(path, "w") as f:
        f.write(content)


async def write_file(path: str, content: str) -> None:
    """
    Write text to a file, creating or truncating it.

    Raises:
        OSError: If the file cannot be written.
    """
    await asyncio.to_thread(_write_text, path, content)


async def rm_file(path: str) -> Outcome:
    """Delete one file (or symlink)."""
    return await _attempt(os.unlink, path)


async def rm_dir(path: str) -> Outcome:
    """Delete one empty directory."""
    return await _attempt(os.rmdir, path)
