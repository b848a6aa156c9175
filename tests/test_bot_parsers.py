from datetime import date

import pytest

from sonumarket.bot.parsers import (
    command_args,
    parse_amount,
    parse_cv_details,
    parse_date,
    parse_payment,
    parse_price_range,
    parse_time,
    pick,
)


def test_pick_by_id_or_position(catalog):
    templates = catalog.cv_templates()
    assert pick("cv-classic", templates).id == "cv-classic"
    assert pick("3", templates).id == "cv-creative"
    assert pick("0", templates) is None
    assert pick("4", templates) is None
    assert pick("", templates) is None


def test_amount_and_range():
    assert parse_amount("150 000") == 150000
    assert parse_price_range(["1000", "5000"]) == (1000, 5000)
    with pytest.raises(ValueError):
        parse_amount("dix")
    with pytest.raises(ValueError):
        parse_price_range(["1000"])


def test_cv_details():
    assert parse_cv_details("Awa Ndiaye | Comptable | | 690000000") == {
        "full_name": "Awa Ndiaye",
        "job_title": "Comptable",
        "phone": "690000000",
    }
    assert parse_cv_details(" | Comptable") is None
    assert parse_cv_details("|".join("x" * 8)) is None


def test_dates_and_times():
    assert parse_date("2026-03-12") == date(2026, 3, 12)
    assert parse_date("12/03/2026") == date(2026, 3, 12)
    assert parse_date("demain") is None
    assert parse_time("9:00") == "09:00"
    assert parse_time("17h30") == "17:30"
    assert parse_time("12:00") is None


def test_payment():
    assert parse_payment("MoMo") == "momo"
    assert parse_payment("Airtel Money") == "airtel"
    assert parse_payment("visa") is None


def test_command_args():
    assert command_args("/price 1000 5000") == ["1000", "5000"]
    assert command_args("/cart") == []
    assert command_args(None) == []
