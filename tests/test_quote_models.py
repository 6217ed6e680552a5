"""报价领域模型测试。"""

import dataclasses

import pytest

from src.modules.quote.models import (
    BusinessLine,
    CargoType,
    CostBreakdown,
    QuoteOutcome,
    TransportMode,
)


def test_shipment_request_is_immutable(make_request) -> None:
    request = make_request()

    with pytest.raises(dataclasses.FrozenInstanceError):
        request.weight_kg = 1.0  # type: ignore[misc]


def test_shipment_request_to_dict_uses_plain_values(make_request) -> None:
    data = make_request(business_line=BusinessLine.PHI, cargo_type=CargoType.NDG, mode=TransportMode.FTL).to_dict()

    assert data == {
        "origin": "Shanghai",
        "destination": "Guangzhou",
        "business_line": "PHI",
        "cargo_type": "NDG",
        "mode": "FTL",
        "weight_kg": 600.0,
        "volume_cbm": 1.5,
    }


def test_cost_breakdown_defaults_to_zeroed_cny() -> None:
    breakdown = CostBreakdown()

    assert breakdown.total == 0.0
    assert breakdown.currency == "CNY"
    assert breakdown.notes == []


def test_incompatible_outcome_to_dict_includes_reason() -> None:
    outcome = QuoteOutcome(
        carrier_name="Rongyun (嵘芸)",
        is_compatible=False,
        incompatibility_reason="Does not support cargo type DG",
    )

    data = outcome.to_dict()

    assert data["is_compatible"] is False
    assert data["incompatibility_reason"] == "Does not support cargo type DG"
    assert data["breakdown"]["total"] == 0.0


def test_compatible_outcome_to_dict_omits_reason() -> None:
    outcome = QuoteOutcome(
        carrier_name="Anji (安吉)",
        is_compatible=True,
        breakdown=CostBreakdown(base_freight=750.0, pickup_fee=150.0, total=900.0, notes=["Pickup Fee: 150"]),
    )

    data = outcome.to_dict()

    assert "incompatibility_reason" not in data
    assert outcome.total == 900.0
    assert data["breakdown"]["notes"] == ["Pickup Fee: 150"]
