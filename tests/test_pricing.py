from sonumarket.config import settings
from sonumarket.constants import FREE_SHIPPING_THRESHOLD, SHIPPING_FEE
from sonumarket.services.pricing import shipping_fee
from sonumarket.utils.formatters import amount, money


def test_shipping_charged_up_to_threshold():
    assert shipping_fee(0) == SHIPPING_FEE
    assert shipping_fee(FREE_SHIPPING_THRESHOLD) == SHIPPING_FEE


def test_shipping_free_above_threshold():
    assert shipping_fee(FREE_SHIPPING_THRESHOLD + 1) == 0


def test_amount_groups_thousands():
    assert amount(601000) == "601 000"
    assert amount(0) == "0"
    assert money(2000) == f"2 000 {settings.currency}"
