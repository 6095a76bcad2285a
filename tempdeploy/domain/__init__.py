# -----------------------------------------------------------------------------
# DOMAIN LAYER
# -----------------------------------------------------------------------------
# Value types shared by every layer:
# - TempLocation: instance id + destination of a temp deployment
# - Ok / SoftError / Outcome: results of best-effort filesystem primitives
# -----------------------------------------------------------------------------

from .models import Ok, Outcome, SoftError, TempLocation

__all__ = ["Ok", "Outcome", "SoftError", "TempLocation"]
