# -----------------------------------------------------------------------------
# INFRASTRUCTURE LAYER
# -----------------------------------------------------------------------------
# Contains low-level OS wrappers:
# - fs: async filesystem primitives with soft-failure outcomes
# - shell: async external command runner (CommandError on failure)
# -----------------------------------------------------------------------------

from . import fs
from .shell import CommandError, exec_async

__all__ = ["fs", "CommandError", "exec_async"]
