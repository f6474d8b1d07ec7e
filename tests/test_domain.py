from decimal import Decimal
from types import SimpleNamespace

import pytest

from cloud_kitchen.core.errors import InvalidTransitionError, ValidationError
from cloud_kitchen.domain.order_status import (
    OrderStatus,
    TRANSITIONS,
    assert_transition,
    can_transition,
    is_terminal,
)
from cloud_kitchen.domain.phone import normalize_phone
from cloud_kitchen.domain.pricing import format_amount, order_total, to_decimal, unit_price
from cloud_kitchen.domain.promotions import validate_promo


# --- money ---

@pytest.mark.parametrize("amount, expected", [
    (Decimal("350"), "350"),
    (Decimal("350.00"), "350"),
    (Decimal("199.50"), "199.5"),
    (Decimal("0.10"), "0.1"),
    (Decimal("1E+3"), "1000"),
])
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected


def test_order_total_is_exact():
    lines = [(Decimal("0.10"), 3), (Decimal("0.20"), 1)]
    assert order_total(lines) == Decimal("0.50")


@pytest.mark.parametrize("value", ["abc", "-5", "NaN", ""])
def test_to_decimal_rejects_bad_amounts(value):
    with pytest.raises(ValidationError):
        to_decimal(value)


def test_unit_price_uses_size_variant_when_selected():
    roti = SimpleNamespace(name="Rumali Roti", price="0",
                           sizes=[{"label": "2 pcs", "price": "40"}, {"label": "4 pcs", "price": "70"}])
    assert unit_price(roti, "4 pcs") == Decimal("70")
    with pytest.raises(ValidationError) as exc:
        unit_price(roti, None)
    assert exc.value.field == "items"


def test_unit_price_without_sizes_uses_base_price():
    rice = SimpleNamespace(name="Mandi Rice", price="120", sizes=None)
    assert unit_price(rice, None) == Decimal("120")


def test_unit_price_rejects_unknown_size():
    roti = SimpleNamespace(name="Rumali Roti", price="0", sizes=[{"label": "2 pcs", "price": "40"}])
    with pytest.raises(ValidationError) as exc:
        unit_price(roti, "10 pcs")
    assert exc.value.field == "items"


# --- phone numbers ---

@pytest.mark.parametrize("raw", [
    "9876543210",
    "09876543210",
    "+91 98765 43210",
    "+91-98765-43210",
    "0091 9876543210",
    "(+91) 98765.43210",
])
def test_equivalent_indian_numbers_share_one_key(raw):
    assert normalize_phone(raw) == "+919876543210"


def test_foreign_numbers_keep_their_country_code():
    assert normalize_phone("+44 20 7946 0958") == "+442079460958"


def test_default_country_code_is_configurable():
    assert normalize_phone("2025550143", default_country_code="1") == "+12025550143"


@pytest.mark.parametrize("raw", ["12345", "call me", "+91 98abc43210", ""])
def test_invalid_phone_numbers_are_rejected(raw):
    with pytest.raises(ValidationError) as exc:
        normalize_phone(raw)
    assert exc.value.field == "customerPhone"


# --- status machine ---

def test_happy_path_walks_the_whole_lifecycle():
    path = ["pending", "confirmed", "preparing", "ready", "out_for_delivery", "delivered"]
    for current, nxt in zip(path, path[1:]):
        assert assert_transition(current, nxt) == OrderStatus(nxt)


@pytest.mark.parametrize("status", [s for s in OrderStatus if not is_terminal(s)])
def test_every_open_status_can_be_cancelled(status):
    assert can_transition(status, OrderStatus.CANCELLED)


@pytest.mark.parametrize("current, requested", [
    ("pending", "delivered"),
    ("pending", "preparing"),
    ("ready", "confirmed"),
    ("delivered", "cancelled"),
    ("cancelled", "pending"),
    ("confirmed", "confirmed"),
])
def test_illegal_transitions_raise(current, requested):
    with pytest.raises(InvalidTransitionError) as exc:
        assert_transition(current, requested)
    assert exc.value.current == current
    assert exc.value.requested == requested
    assert exc.value.status_code == 409


def test_terminal_statuses():
    assert {s for s in TRANSITIONS if is_terminal(s)} == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


# --- promos ---

def test_promo_lookup_is_case_insensitive():
    promo = validate_promo(" first20 ")
    assert promo.code == "FIRST20"
    assert promo.discount == 20
    assert promo.is_percentage is True


def test_unknown_promo_is_rejected():
    with pytest.raises(ValidationError):
        validate_promo("FREEFOOD")
