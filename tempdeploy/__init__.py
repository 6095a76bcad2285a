# -----------------------------------------------------------------------------
# TEMPDEPLOY
# -----------------------------------------------------------------------------
# Throwaway serverless deployments for integration tests: stage the target
# into a random temp workspace, deploy it, and tear it down again.
# -----------------------------------------------------------------------------

from tempdeploy.core import ServerlessCli, TargetStager, TempDeployments, rmrf
from tempdeploy.domain import TempLocation

__version__ = "1.0.0"

__all__ = ["ServerlessCli", "TargetStager", "TempDeployments", "TempLocation", "rmrf"]
