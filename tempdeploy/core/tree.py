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
# DIRECTORY TREES - WALK & RMRF
# -----------------------------------------------------------------------------
# Responsibility: Enumerate every path below a root and delete them all,
# best effort.
#
# The walker never classifies nodes: listing a file yields nothing, so a
# file is simply a leaf. The remover compensates by trying "delete file"
# first and falling back to "delete empty directory".
# -----------------------------------------------------------------------------

import asyncio
import os
from collections import defaultdict
from typing import Awaitable, Callable

from rich.console import Console
from rich.markup import escape

from tempdeploy.domain.models import Outcome
from tempdeploy.infra import fs

console = Console()

Lister = Callable[[str], Awaitable[list[str]]]
Deleter = Callable[[str], Awaitable[Outcome]]


async def list_absolute_paths_recursively(root: str, ls: Lister = fs.ls) -> list[str]:
    """
    Collect the root and every path reachable below it.

    Children are walked concurrently, so the result has no defined order.
    """
    names = await ls(root)
    subtrees = await asyncio.gather(
        *(list_absolute_paths_recursively(os.path.join(root, name), ls) for name in names)
    )
    paths = [root]
    for subtree in subtrees:
        paths.extend(subtree)
    return paths


async def _delete(path: str, rm_file: Deleter, rm_dir: Deleter) -> None:
    outcome = await rm_file(path)
    if not outcome.ok:
        outcome = await rm_dir(path)
    if not outcome.ok:
        console.print(f"[dim][RMRF] Left {escape(path)}: {escape(str(outcome))}[/dim]")


def _by_depth(paths: list[str]) -> list[list[str]]:
    """Group paths by separator depth, deepest group first."""
    groups: dict[int, list[str]] = defaultdict(list)
    for path in paths:
        groups[path.rstrip(os.sep).count(os.sep)].append(path)
    return [groups[depth] for depth in sorted(groups, reverse=True)]


async def rmrf(
    directory: str,
    ls: Lister = fs.ls,
    rm_file: Deleter = fs.rm_file,
    rm_dir: Deleter = fs.rm_dir,
) -> list[str]:
    """
    Delete a directory tree, tolerating every individual failure.

    Each path is deleted as a file, then as an empty directory if that
    fails. Paths at the same depth are deleted concurrently; deeper paths
    go first so directories are empty by the time their turn comes.

    Args:
        directory: Root of the tree to delete (deleted too).
        ls: Directory lister used to discover the tree.
        rm_file: File deletion primitive.
        rm_dir: Empty-directory deletion primitive.

    Returns:
        Every path that was processed, the root included, whether or not
        its deletion succeeded.
    """
    paths = await list_absolute_paths_recursively(directory, ls)
    if directory not in paths:
        paths.append(directory)

    for group in _by_depth(paths):
        await asyncio.gather(*(_delete(path, rm_file, rm_dir) for path in group))

    return paths
