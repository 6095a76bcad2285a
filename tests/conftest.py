"""
Pytest configuration and fixtures for tempdeploy tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

ENV_NAMES = ("TEMPDEPLOY_ROOT", "TEMPDEPLOY_SOURCE", "TEMPDEPLOY_TOOL", "TEMPDEPLOY_ID_LENGTH")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer TEMPDEPLOY_* settings out of the tests."""
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def make_tree_lister(root: str, tree: dict):
    """
    Fake directory lister over a nested dict.

    Dict values are subdirectories; anything missing lists as empty,
    like a file or an unreadable path.
    """

    async def ls(path: str) -> list[str]:
        node = tree
        if path != root:
            for part in os.path.relpath(path, root).split(os.sep):
                if not isinstance(node, dict) or part not in node:
                    return []
                node = node[part]
        return list(node) if isinstance(node, dict) else []

    return ls


@pytest.fixture
def tree_lister():
    """Factory for fake listers (see make_tree_lister)."""
    return make_tree_lister


@pytest.fixture
def target_dir(tmp_path):
    """A deployable unit with one test file that must never be staged."""
    target = tmp_path / "target"
    target.mkdir()
    (target / "handler.js").write_text("module.exports.hello = () => 'hi'")
    (target / "serverless.yml").write_text("service: temp-${file(config.yml):instanceId}")
    (target / "handler.spec.js").write_text("describe('handler', () => {})")
    return target


class Recorder:
    """Collects log/warn messages."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def joined(self) -> str:
        return "\n".join(self.messages)


@pytest.fixture
def log():
    return Recorder()


@pytest.fixture
def warn():
    return Recorder()
