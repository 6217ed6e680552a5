"""
报价服务
Quote Service

边界层：把表单/命令行的原始输入整理为 ShipmentRequest，注入承运商表后调用评估引擎
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Mapping, Sequence, TypeVar

from src.core.error_handler import QuoteRequestError
from src.core.logger import get_logger
from src.modules.quote.carriers import DEFAULT_CARRIERS, CarrierPolicy
from src.modules.quote.engine import evaluate
from src.modules.quote.models import (
    BusinessLine,
    CargoType,
    QuoteOutcome,
    ShipmentRequest,
    TransportMode,
)

E = TypeVar("E", bound=Enum)


class QuoteService:
    """物流报价服务。"""

    def __init__(self, registry: Sequence[CarrierPolicy] | None = None):
        self.logger = get_logger()
        self.registry: tuple[CarrierPolicy, ...] = tuple(registry) if registry is not None else DEFAULT_CARRIERS

    def build_request(self, raw: Mapping[str, Any]) -> ShipmentRequest:
        """
        校验并构造报价请求

        Args:
            raw: 原始字段，键名与 ShipmentRequest 一致

        Returns:
            ShipmentRequest

        Raises:
            QuoteRequestError: 任一字段缺失或非法
        """
        errors: dict[str, str] = {}

        origin = str(raw.get("origin") or "").strip()
        destination = str(raw.get("destination") or "").strip()
        if not origin:
            errors["origin"] = "origin is required"
        if not destination:
            errors["destination"] = "destination is required"

        business_line = self._parse_enum(BusinessLine, raw.get("business_line"), "business_line", errors)
        cargo_type = self._parse_enum(CargoType, raw.get("cargo_type"), "cargo_type", errors)
        mode = self._parse_enum(TransportMode, raw.get("mode"), "mode", errors)

        weight_kg = self._parse_number(raw.get("weight_kg"), "weight_kg", errors)
        if weight_kg is not None and weight_kg <= 0:
            errors["weight_kg"] = "weight_kg must be greater than 0"

        raw_volume = raw.get("volume_cbm")
        volume_cbm = 0.0 if raw_volume in (None, "") else self._parse_number(raw_volume, "volume_cbm", errors)
        if volume_cbm is not None and volume_cbm < 0:
            errors["volume_cbm"] = "volume_cbm must not be negative"

        if errors:
            self.logger.warning(f"Rejected quote request: {errors}")
            raise QuoteRequestError("Invalid shipment request", details=errors)

        return ShipmentRequest(
            origin=origin,
            destination=destination,
            business_line=business_line,
            cargo_type=cargo_type,
            mode=mode,
            weight_kg=weight_kg,
            volume_cbm=volume_cbm,
        )

    def quote(self, request: ShipmentRequest) -> list[QuoteOutcome]:
        outcomes = evaluate(request, self.registry)
        compatible = self.compatible(outcomes)
        best = self.best(outcomes)
        self.logger.info(
            f"Quoted {request.origin}->{request.destination} "
            f"{request.weight_kg}kg/{request.volume_cbm}cbm "
            f"{request.business_line.value}/{request.cargo_type.value}/{request.mode.value}: "
            f"{len(compatible)}/{len(outcomes)} carriers available"
            + (f", best {best.carrier_name} {best.total:.2f} {best.breakdown.currency}" if best else "")
        )
        return outcomes

    def quote_raw(self, raw: Mapping[str, Any]) -> tuple[ShipmentRequest, list[QuoteOutcome]]:
        request = self.build_request(raw)
        return request, self.quote(request)

    @staticmethod
    def compatible(outcomes: Sequence[QuoteOutcome]) -> list[QuoteOutcome]:
        return [item for item in outcomes if item.is_compatible]

    @staticmethod
    def best(outcomes: Sequence[QuoteOutcome]) -> QuoteOutcome | None:
        for item in outcomes:
            if item.is_compatible:
                return item
        return None

    @staticmethod
    def _parse_enum(enum_cls: type[E], value: Any, field_name: str, errors: dict[str, str]) -> E | None:
        if isinstance(value, enum_cls):
            return value
        text = str(value or "").strip().upper()
        for member in enum_cls:
            if member.value.upper() == text:
                return member
        allowed = ", ".join(member.value for member in enum_cls)
        errors[field_name] = f"{field_name} must be one of: {allowed}"
        return None

    @staticmethod
    def _parse_number(value: Any, field_name: str, errors: dict[str, str]) -> float | None:
        try:
            number = float(value)
        except (TypeError, ValueError):
            errors[field_name] = f"{field_name} must be a number"
            return None
        if not math.isfinite(number):
            errors[field_name] = f"{field_name} must be a finite number"
            return None
        return number
