"""物流报价领域模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_CURRENCY = "CNY"


class BusinessLine(str, Enum):
    """事业部。"""

    SCI = "SCI"
    PHI = "PHI"
    PCI = "PCI"
    FBI = "FBI"


class CargoType(str, Enum):
    """货物类型：危险品 / 非危险品。"""

    DG = "DG"
    NDG = "NDG"


class TransportMode(str, Enum):
    """运输方式：零担 / 整车。"""

    LTL = "LTL"
    FTL = "FTL"


class BillingBasis(str, Enum):
    """结算口径，仅用于展示。"""

    NET = "Net"
    GROSS = "Gross"


@dataclass(frozen=True, slots=True)
class ShipmentRequest:
    """报价请求，单次计算内不可变。"""

    origin: str
    destination: str
    business_line: BusinessLine
    cargo_type: CargoType
    mode: TransportMode
    weight_kg: float
    volume_cbm: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "origin": self.origin,
            "destination": self.destination,
            "business_line": self.business_line.value,
            "cargo_type": self.cargo_type.value,
            "mode": self.mode.value,
            "weight_kg": self.weight_kg,
            "volume_cbm": self.volume_cbm,
        }


@dataclass(slots=True)
class CostBreakdown:
    """费用明细。"""

    base_freight: float = 0.0
    pickup_fee: float = 0.0
    delivery_fee: float = 0.0
    total: float = 0.0
    currency: str = DEFAULT_CURRENCY
    notes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_freight": self.base_freight,
            "pickup_fee": self.pickup_fee,
            "delivery_fee": self.delivery_fee,
            "total": self.total,
            "currency": self.currency,
            "notes": list(self.notes),
        }


@dataclass(slots=True)
class QuoteOutcome:
    """单个承运商的报价结果，可用或不可用（附原因）。"""

    carrier_name: str
    is_compatible: bool
    breakdown: CostBreakdown = field(default_factory=CostBreakdown)
    incompatibility_reason: str | None = None

    @property
    def total(self) -> float:
        return self.breakdown.total

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "carrier_name": self.carrier_name,
            "is_compatible": self.is_compatible,
            "breakdown": self.breakdown.to_dict(),
        }
        if not self.is_compatible:
            data["incompatibility_reason"] = self.incompatibility_reason
        return data
