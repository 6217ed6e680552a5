"""
承运商策略表
Carrier Registry

每个承运商是一条不可变记录：能力集合 + 内嵌的费用函数。
评估器只做全表扫描，新增承运商无需改动评估逻辑。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from src.modules.quote.models import BillingBasis, BusinessLine, CargoType, TransportMode

WeightFee = Callable[[float, CargoType], float]
ValueFee = Callable[[float], float]


def no_fee(*_args: object) -> float:
    return 0.0


def flat_fee(amount: float) -> WeightFee:
    """每票固定费用，与重量和货物类型无关。"""

    def _fee(_weight: float, _cargo_type: CargoType) -> float:
        return float(amount)

    return _fee


def tonnage_fee(below_tons: float, dg_fee: float, ndg_fee: float) -> WeightFee:
    """
    吨位阶梯费用

    计费重低于 below_tons 吨时按货物类型收费，达到阈值后免收。
    """

    def _fee(weight: float, cargo_type: CargoType) -> float:
        if weight / 1000 >= below_tons:
            return 0.0
        return float(dg_fee if cargo_type == CargoType.DG else ndg_fee)

    return _fee


@dataclass(frozen=True, slots=True)
class CarrierFeeRules:
    """承运商费用规则。"""

    description: str
    pickup: WeightFee = no_fee
    delivery: WeightFee = no_fee
    insurance: ValueFee = no_fee


@dataclass(frozen=True, slots=True)
class CarrierPolicy:
    """承运商策略记录。"""

    id: str
    name: str
    base_location: str
    billing_basis: BillingBasis
    split_point_kg: float
    supported_lines: frozenset[BusinessLine]
    supported_types: frozenset[CargoType]
    supported_modes: frozenset[TransportMode]
    rules: CarrierFeeRules = field(default_factory=lambda: CarrierFeeRules(description=""))
    notes: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "base_location": self.base_location,
            "billing_basis": self.billing_basis.value,
            "split_point_kg": self.split_point_kg,
            "supported_lines": sorted(line.value for line in self.supported_lines),
            "supported_types": sorted(cargo.value for cargo in self.supported_types),
            "supported_modes": sorted(mode.value for mode in self.supported_modes),
            "fee_rules": self.rules.description,
            "notes": self.notes,
        }


DEFAULT_CARRIERS: tuple[CarrierPolicy, ...] = (
    CarrierPolicy(
        id="kerry_zjg",
        name="Zhangjiagang Kerry (张家港嘉里)",
        base_location="Zhangjiagang",
        billing_basis=BillingBasis.NET,
        split_point_kg=500,
        supported_lines=frozenset({BusinessLine.SCI, BusinessLine.PHI}),
        supported_types=frozenset({CargoType.DG, CargoType.NDG}),
        supported_modes=frozenset({TransportMode.FTL, TransportMode.LTL}),
        rules=CarrierFeeRules(description="Integrated warehousing/distribution. No separate pickup/delivery fees."),
        notes="For large weights (8-10t), FTL is suggested.",
    ),
    CarrierPolicy(
        id="lianqiang",
        name="Lianqiang (联强)",
        base_location="Shanghai",
        billing_basis=BillingBasis.GROSS,
        split_point_kg=500,
        supported_lines=frozenset({BusinessLine.SCI, BusinessLine.PCI, BusinessLine.FBI, BusinessLine.PHI}),
        supported_types=frozenset({CargoType.DG, CargoType.NDG}),
        supported_modes=frozenset({TransportMode.FTL, TransportMode.LTL}),
        rules=CarrierFeeRules(
            description="Separate pickup/delivery fees based on weight tiers.",
            pickup=tonnage_fee(5, dg_fee=400, ndg_fee=300),
            delivery=tonnage_fee(5, dg_fee=350, ndg_fee=200),
        ),
    ),
    CarrierPolicy(
        id="rongyun",
        name="Rongyun (嵘芸)",
        base_location="Shanghai",
        billing_basis=BillingBasis.NET,
        split_point_kg=500,
        supported_lines=frozenset({BusinessLine.SCI}),
        supported_types=frozenset({CargoType.NDG}),
        supported_modes=frozenset({TransportMode.LTL}),
        rules=CarrierFeeRules(description="Integrated warehousing. No separate fees."),
    ),
    CarrierPolicy(
        id="xinhong_south",
        name="Xinhong South China (鑫虹华南)",
        base_location="Guangzhou",
        billing_basis=BillingBasis.NET,
        split_point_kg=499,
        supported_lines=frozenset({BusinessLine.SCI}),
        supported_types=frozenset({CargoType.DG, CargoType.NDG}),
        supported_modes=frozenset({TransportMode.FTL, TransportMode.LTL}),
        rules=CarrierFeeRules(
            description="Pickup fee <3t. Delivery fee applies per ticket.",
            pickup=tonnage_fee(3, dg_fee=400, ndg_fee=300),
            delivery=flat_fee(150),
        ),
    ),
    CarrierPolicy(
        id="xinhong_jinan",
        name="Xinhong Jinan (鑫虹济南)",
        base_location="Jinan",
        billing_basis=BillingBasis.NET,
        split_point_kg=500,
        supported_lines=frozenset({BusinessLine.SCI}),
        supported_types=frozenset({CargoType.DG, CargoType.NDG}),
        supported_modes=frozenset({TransportMode.LTL}),
        rules=CarrierFeeRules(
            description="Pickup fee <3t. No delivery fee.",
            pickup=tonnage_fee(3, dg_fee=400, ndg_fee=300),
        ),
    ),
    CarrierPolicy(
        id="sinotrans",
        name="Sinotrans (中外运)",
        base_location="Shanghai",
        billing_basis=BillingBasis.GROSS,
        # 不按分界点区分小票，所有重量都走按公斤计价
        split_point_kg=0,
        supported_lines=frozenset({BusinessLine.FBI, BusinessLine.PCI}),
        supported_types=frozenset({CargoType.NDG}),
        supported_modes=frozenset({TransportMode.FTL, TransportMode.LTL}),
        rules=CarrierFeeRules(description="Fixed delivery fee 200/ticket.", delivery=flat_fee(200)),
    ),
    CarrierPolicy(
        id="anji",
        name="Anji (安吉)",
        base_location="Shanghai",
        billing_basis=BillingBasis.NET,
        split_point_kg=0,
        supported_lines=frozenset({BusinessLine.SCI}),
        supported_types=frozenset({CargoType.NDG}),
        supported_modes=frozenset({TransportMode.LTL}),
        rules=CarrierFeeRules(
            description="Per kg pricing. Pickup fee <5t 150 RMB.",
            pickup=tonnage_fee(5, dg_fee=150, ndg_fee=150),
        ),
    ),
)


def find_carrier(registry: Iterable[CarrierPolicy], carrier_id: str) -> CarrierPolicy | None:
    key = (carrier_id or "").strip().lower()
    for carrier in registry:
        if carrier.id == key:
            return carrier
    return None
