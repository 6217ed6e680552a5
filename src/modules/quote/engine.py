"""报价评估引擎：承运商兼容性过滤、费用计算与排序。"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from src.modules.quote.carriers import CarrierPolicy
from src.modules.quote.models import CostBreakdown, QuoteOutcome, ShipmentRequest

# 1 CBM ≈ 333.33 kg（1:3 体积重换算）
VOLUMETRIC_KG_PER_CBM = 333.33

BASE_RATES: dict[str, float] = {
    "default": 1.5,
    "same_region": 0.8,
    "long_distance": 3.2,
}

SMALL_SHIPMENT_FLAT_FEE = 150.0
SMALL_SHIPMENT_RATE_PER_KG = 0.5
RATE_EXEMPT_BASE = "Shanghai"
SOUTH_CHINA_ORIGINS = ("Guangzhou", "Shenzhen")

_TWO_PLACES = Decimal("0.01")


def round_money(value: float) -> float:
    """按十进制表示四舍五入到分（324.975 -> 324.98）。"""
    if not math.isfinite(value):
        return value
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def chargeable_weight(request: ShipmentRequest) -> float:
    volumetric_weight = request.volume_cbm * VOLUMETRIC_KG_PER_CBM
    return max(request.weight_kg, volumetric_weight)


def select_rate(request: ShipmentRequest, carrier: CarrierPolicy) -> float:
    """
    选择每公斤基础运价

    同城优先；上海基地的承运商永远不走长途价。
    """
    if request.origin == request.destination:
        return BASE_RATES["same_region"]
    if request.origin != carrier.base_location and carrier.base_location != RATE_EXEMPT_BASE:
        return BASE_RATES["long_distance"]
    return BASE_RATES["default"]


def check_compatibility(request: ShipmentRequest, carrier: CarrierPolicy) -> list[str]:
    """返回不兼容原因列表，空列表表示可承运。"""
    reasons: list[str] = []

    if request.business_line not in carrier.supported_lines:
        reasons.append(f"Does not support business line {request.business_line.value}")
    if request.cargo_type not in carrier.supported_types:
        reasons.append(f"Does not support cargo type {request.cargo_type.value}")
    if request.mode not in carrier.supported_modes:
        reasons.append(f"Does not support mode {request.mode.value}")

    # 地域绑定按承运商名称匹配，只校验始发地
    name = carrier.name
    if "Zhangjiagang" in name and "Zhangjiagang" not in request.origin:
        reasons.append("Carrier operates primarily from Zhangjiagang")
    if "Jinan" in name and "Jinan" not in request.origin:
        reasons.append("Carrier operates primarily from Jinan")
    if "South China" in name and request.origin not in SOUTH_CHINA_ORIGINS:
        reasons.append("Carrier operates primarily from South China (Guangzhou/Shenzhen)")

    return reasons


def price_carrier(request: ShipmentRequest, carrier: CarrierPolicy) -> CostBreakdown:
    weight = chargeable_weight(request)
    rate = select_rate(request, carrier)
    notes: list[str] = []

    if weight <= carrier.split_point_kg:
        base_freight = SMALL_SHIPMENT_FLAT_FEE + weight * SMALL_SHIPMENT_RATE_PER_KG
        notes.append("Applied 'Small Shipment' fixed pricing structure.")
    else:
        base_freight = weight * rate
        notes.append(f"LTL pricing: {weight:.2f}kg @ {rate} RMB/kg")

    pickup_fee = carrier.rules.pickup(weight, request.cargo_type)
    delivery_fee = carrier.rules.delivery(weight, request.cargo_type)

    if pickup_fee > 0:
        notes.append(f"Pickup Fee: {_format_amount(pickup_fee)}")
    if delivery_fee > 0:
        notes.append(f"Delivery Fee: {_format_amount(delivery_fee)}")
    if carrier.notes:
        notes.append(f"Note: {carrier.notes}")

    return CostBreakdown(
        base_freight=round_money(base_freight),
        pickup_fee=pickup_fee,
        delivery_fee=delivery_fee,
        total=round_money(base_freight + pickup_fee + delivery_fee),
        notes=notes,
    )


def evaluate_carrier(request: ShipmentRequest, carrier: CarrierPolicy) -> QuoteOutcome:
    reasons = check_compatibility(request, carrier)
    if reasons:
        return QuoteOutcome(
            carrier_name=carrier.name,
            is_compatible=False,
            incompatibility_reason=", ".join(reasons),
        )
    return QuoteOutcome(
        carrier_name=carrier.name,
        is_compatible=True,
        breakdown=price_carrier(request, carrier),
    )


def evaluate(request: ShipmentRequest, registry: Iterable[CarrierPolicy]) -> list[QuoteOutcome]:
    """
    对每个承运商给出一条报价结果并排序

    可用结果在前并按总价升序，不可用结果保持承运商表中的原始顺序。
    纯函数：不修改输入，不做 I/O。
    """
    outcomes = [evaluate_carrier(request, carrier) for carrier in registry]
    return sorted(outcomes, key=_ranking_key)


def _ranking_key(outcome: QuoteOutcome) -> tuple[bool, float]:
    if outcome.is_compatible:
        return False, outcome.breakdown.total
    return True, 0.0


def _format_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
