from enum import Enum
from typing import Any, Dict

class ShareClass(str, Enum):
    NPS = "NPS"         # Foundation delegation program (fixed commission)
    COMMON = "Common"   # Pays the operator-set commission

class ProtocolError(Exception):
    pass

class ValidationError(ProtocolError):
    pass

class PayoutError(ProtocolError):
    """
    Base class for failures that abort a whole payout run.

    Carries a short machine-readable kind and a context dict describing
    the offending block or delegator.
    """
    kind = "payout"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

class DataIntegrityError(PayoutError):
    kind = "data_integrity"

class WeightingInvariantError(PayoutError):
    kind = "weighting_invariant"

class AllocationCancelled(PayoutError):
    kind = "cancelled"

PAYOUT_ERRORS = {
    cls.kind: cls
    for cls in (DataIntegrityError, WeightingInvariantError, AllocationCancelled)
}
