# -----------------------------------------------------------------------------
# CORE LAYER
# -----------------------------------------------------------------------------
# The staging and deployment lifecycle engine:
# - tree: recursive walk + best-effort rmrf
# - TargetStager: copies the deployable unit into a workspace
# - ServerlessCli: "sls deploy" / "sls remove" delegation
# - TempDeployments: deploy / remove / bulk cleanup orchestration
# -----------------------------------------------------------------------------

from .deployer import ServerlessCli
from .lifecycle import TempDeployments, random_string
from .stager import TargetStager
from .tree import list_absolute_paths_recursively, rmrf

__all__ = [
    "ServerlessCli",
    "TempDeployments", "random_string",
    "TargetStager",
    "list_absolute_paths_recursively", "rmrf",
]
