"""Validation and persistence of bonus tiers and evaluation ranges."""
from __future__ import annotations

from decimal import Decimal

import pytest

from hrpanel.exceptions import ConfigurationError, InvalidInputError, RecordNotFoundError
from hrpanel.services import BonusConfigService


@pytest.fixture()
def service(session) -> BonusConfigService:
    return BonusConfigService(session)


def test_add_and_list_tiers(service) -> None:
    service.add_tier({"min_sales": "5000", "bonus_percent": "3"})
    service.add_tier({"min_sales": "1000", "bonus_percent": "2.5"})

    tiers = [(tier.min_sales, tier.bonus_percent) for tier in service.list_tiers()]

    assert tiers == [(Decimal("1000"), Decimal("2.5")), (Decimal("5000"), Decimal("3"))]


def test_duplicate_tier_threshold_is_rejected(service) -> None:
    service.add_tier({"min_sales": "1000", "bonus_percent": "2"})

    with pytest.raises(ConfigurationError) as excinfo:
        service.add_tier({"min_sales": "1000", "bonus_percent": "4"})

    assert "already exists" in excinfo.value.errors[0]


@pytest.mark.parametrize(
    "data",
    [
        {"min_sales": "-1", "bonus_percent": "2"},
        {"min_sales": "100", "bonus_percent": "101"},
        {"min_sales": "100", "bonus_percent": "-0.5"},
        {"min_sales": "", "bonus_percent": "2"},
        {"min_sales": "abc", "bonus_percent": "2"},
    ],
)
def test_invalid_tier_values_are_rejected(service, data) -> None:
    with pytest.raises(InvalidInputError):
        service.add_tier(data)
    assert service.list_tiers() == []


def test_invalid_tier_reports_every_field(service) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        service.add_tier({"min_sales": "-1", "bonus_percent": "150"})

    assert len(excinfo.value.errors) == 2
    assert excinfo.value.errors[0].startswith("Minimum sales")
    assert excinfo.value.errors[1].startswith("Bonus percentage")


def test_update_tier_can_change_threshold(service) -> None:
    service.add_tier({"min_sales": "1000", "bonus_percent": "2"})

    service.update_tier("1000", {"min_sales": "1500", "bonus_percent": "2.5"})

    tiers = [(tier.min_sales, tier.bonus_percent) for tier in service.list_tiers()]
    assert tiers == [(Decimal("1500"), Decimal("2.5"))]


def test_update_tier_rejects_existing_threshold(service) -> None:
    service.add_tier({"min_sales": "1000", "bonus_percent": "2"})
    service.add_tier({"min_sales": "2000", "bonus_percent": "3"})

    with pytest.raises(ConfigurationError):
        service.update_tier("1000", {"min_sales": "2000", "bonus_percent": "4"})


def test_update_missing_tier(service) -> None:
    with pytest.raises(RecordNotFoundError):
        service.update_tier("1000", {"min_sales": "1000", "bonus_percent": "4"})


def test_delete_tier(service) -> None:
    service.add_tier({"min_sales": "1000", "bonus_percent": "2"})

    service.delete_tier("1000")

    assert service.list_tiers() == []
    with pytest.raises(RecordNotFoundError):
        service.delete_tier("1000")


def test_add_ranges_and_reject_overlap(service) -> None:
    service.add_range({"min_value": "0", "max_value": "50", "amount": "10"})
    service.add_range({"min_value": "51", "max_value": "100", "amount": "50"})

    with pytest.raises(ConfigurationError) as excinfo:
        service.add_range({"min_value": "40", "max_value": "60", "amount": "20"})

    assert excinfo.value.errors == ("This range overlaps an existing range",)
    assert len(service.list_ranges()) == 2


def test_range_minimum_cannot_exceed_maximum(service) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        service.add_range({"min_value": "60", "max_value": "40", "amount": "20"})

    assert excinfo.value.errors == ("Minimum value cannot exceed maximum value",)


def test_update_range_ignores_its_own_bounds(service) -> None:
    service.add_range({"min_value": "0", "max_value": "50", "amount": "10"})
    range_id = service.list_ranges()[0].id

    service.update_range(str(range_id), {"min_value": "0", "max_value": "55", "amount": "15"})

    updated = service.list_ranges()[0]
    assert (updated.max_value, updated.amount) == (Decimal("55"), Decimal("15"))


def test_delete_range(service) -> None:
    service.add_range({"min_value": "0", "max_value": "50", "amount": "10"})
    range_id = service.list_ranges()[0].id

    service.delete_range(range_id)

    assert service.list_ranges() == []
    with pytest.raises(RecordNotFoundError):
        service.delete_range(range_id)
    with pytest.raises(ConfigurationError):
        service.delete_range("not-a-number")
