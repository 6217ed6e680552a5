"""物流报价模块。"""

from .carriers import DEFAULT_CARRIERS, CarrierFeeRules, CarrierPolicy, find_carrier
from .engine import evaluate
from .models import (
    BillingBasis,
    BusinessLine,
    CargoType,
    CostBreakdown,
    QuoteOutcome,
    ShipmentRequest,
    TransportMode,
)
from .service import QuoteService

__all__ = [
    "BillingBasis",
    "BusinessLine",
    "CargoType",
    "CarrierFeeRules",
    "CarrierPolicy",
    "CostBreakdown",
    "DEFAULT_CARRIERS",
    "QuoteOutcome",
    "QuoteService",
    "ShipmentRequest",
    "TransportMode",
    "evaluate",
    "find_carrier",
]
