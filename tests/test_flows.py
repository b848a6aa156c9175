from datetime import date, datetime, timedelta

import pytest

from sonumarket.cart.engine import Cart
from sonumarket.constants import CONFIGURATOR_STEPS
from sonumarket.services.payments import ChargeOutcome
from sonumarket.wizard import flows
from sonumarket.wizard.machine import SubmitFailure, WizardStatus

PARTS = {
    "chassis": "cfg-chassis-14",
    "cpu-mobile": "cfg-cpu-i7",
    "ram-mobile": "cfg-ram-16",
    "storage": "cfg-ssd-512",
    "os": "cfg-os-none",
}


class FakeCharge:
    def __init__(self, outcome=ChargeOutcome.SUCCESS):
        self.outcome = outcome
        self.calls = []

    async def __call__(self, amount, method):
        self.calls.append((amount, method))
        return self.outcome


# ---------------- configurator ----------------

def test_configurator_auto_advances_through_parts(catalog):
    m = flows.configurator(Cart())
    assert m.steps == CONFIGURATOR_STEPS

    for step in CONFIGURATOR_STEPS[:-1]:
        assert m.select(step, catalog.product(PARTS[step]))
    assert m.current_step == "os"


def test_configurator_rejects_part_of_wrong_type(catalog):
    m = flows.configurator(Cart())
    assert m.select("chassis", catalog.product("cfg-cpu-i5")) is False
    assert m.select("chassis", catalog.product("1")) is False


@pytest.mark.asyncio
async def test_configurator_all_parts_added_to_cart(catalog):
    cart = Cart()
    m = flows.configurator(cart)
    for step in CONFIGURATOR_STEPS:
        m.select(step, catalog.product(PARTS[step]))

    assert m.is_complete
    assert m.amount() == 250000 + 260000 + 45000 + 40000 + 0

    assert await m.advance() is True
    assert m.status is WizardStatus.COMPLETE
    assert m.state.last_outcome.reference == "5 articles"
    assert [line.id for line in cart.lines] == [PARTS[s] for s in CONFIGURATOR_STEPS]


@pytest.mark.asyncio
async def test_configurator_missing_part_cannot_submit(catalog):
    cart = Cart()
    m = flows.configurator(cart)
    for step in CONFIGURATOR_STEPS[:-1]:
        m.select(step, catalog.product(PARTS[step]))
    # os left empty
    assert m.is_complete is False
    assert m.can_advance() is False
    assert await m.advance() is False
    assert m.status is WizardStatus.IN_PROGRESS
    assert cart.is_empty


# ---------------- redaction ----------------

def _redaction_to_upload(catalog, charge):
    m = flows.redaction_request(charge)
    m.select("option", catalog.redaction_option("letter"))
    return m


@pytest.mark.asyncio
async def test_redaction_upload_is_mandatory(catalog):
    m = _redaction_to_upload(catalog, FakeCharge())
    assert await m.advance()  # option -> instructions
    assert await m.advance()  # instructions are optional
    assert m.current_step == "upload"

    assert await m.advance() is False
    assert m.current_step == "upload"

    assert m.select("upload", flows.Attachment("rapport.docx", "file-1", 2048))
    assert await m.advance() is True
    assert m.current_step == "payment"


@pytest.mark.asyncio
async def test_redaction_attachment_can_be_replaced(catalog):
    m = _redaction_to_upload(catalog, FakeCharge())
    await m.advance()
    await m.advance()
    m.select("upload", flows.Attachment("v1.pdf", "f1"))

    assert m.clear("upload")
    assert await m.advance() is False
    assert m.select("upload", flows.Attachment("v2.pdf", "f2"))
    assert m.selections["upload"].name == "v2.pdf"


@pytest.mark.asyncio
async def test_redaction_charges_base_price(catalog):
    charge = FakeCharge()
    m = _redaction_to_upload(catalog, charge)
    await m.advance()
    m.select("instructions", "Courrier au maire")
    await m.advance()
    m.select("upload", flows.Attachment("brouillon.docx", "f1"))
    await m.advance()

    assert m.select("payment", "visa") is False
    assert m.select("payment", "airtel")
    assert await m.advance() is True

    assert charge.calls == [(3000, "airtel")]
    assert m.status is WizardStatus.COMPLETE
    assert m.state.last_outcome.reference.startswith("redaction-")


# ---------------- cv ----------------

async def _cv_at_details(catalog, charge):
    m = flows.cv_purchase(charge)
    m.select("template", catalog.cv_template("cv-creative"))
    await m.advance()
    return m


@pytest.mark.asyncio
async def test_cv_details_need_full_name(catalog):
    m = await _cv_at_details(catalog, FakeCharge())

    assert m.select("details", {"job_title": "Comptable"})
    assert await m.advance() is False

    assert m.select("details", {"full_name": "Awa Ndiaye", "job_title": "Comptable"})
    assert await m.advance() is True
    assert m.current_step == "photo"


def test_cv_details_reject_unknown_fields(catalog):
    m = flows.cv_purchase(FakeCharge())
    m.select("template", catalog.cv_template("cv-modern"))
    assert m.is_selection_valid("details", {"salaire": "beaucoup"}) is False
    assert m.is_selection_valid("details", "Awa") is False


@pytest.mark.asyncio
async def test_cv_photo_is_optional_and_pending_charge_rolls_back(catalog):
    charge = FakeCharge(ChargeOutcome.PENDING)
    m = await _cv_at_details(catalog, charge)
    m.select("details", {"full_name": "Awa Ndiaye"})
    await m.advance()
    assert await m.advance() is True  # skip photo
    assert m.current_step == "payment"

    assert await m.advance() is False  # no method yet
    m.select("payment", "momo")
    assert await m.advance() is True

    assert charge.calls == [(2500, "momo")]
    assert m.status is WizardStatus.IN_PROGRESS
    assert m.current_step == "payment"
    assert m.state.last_outcome == SubmitFailure("pending")

    charge.outcome = ChargeOutcome.SUCCESS
    assert await m.advance() is True
    assert m.status is WizardStatus.COMPLETE


# ---------------- booking ----------------

def test_booking_date_window(catalog):
    today = date(2026, 3, 10)
    m = flows.service_booking(lambda a: None, today)
    m.select("service", catalog.service("diag"))

    assert m.is_selection_valid("date", today) is False
    assert m.is_selection_valid("date", today + timedelta(days=1)) is True
    assert m.is_selection_valid("date", today + timedelta(days=7)) is True
    assert m.is_selection_valid("date", today + timedelta(days=8)) is False
    assert m.is_selection_valid("date", datetime(2026, 3, 11, 10, 0)) is False
    assert m.is_selection_valid("date", "2026-03-11") is False


@pytest.mark.asyncio
async def test_booking_records_appointment(catalog):
    booked = []
    today = date(2026, 3, 10)
    m = flows.service_booking(booked.append, today)

    m.select("service", catalog.service("cleaning"))
    await m.advance()
    m.select("date", date(2026, 3, 12))
    await m.advance()
    assert m.select("time", "12:00") is False
    m.select("time", "14:00")
    assert await m.advance() is True

    assert m.status is WizardStatus.COMPLETE
    assert len(booked) == 1
    appt = booked[0]
    assert (appt.kind, appt.title, appt.date, appt.time, appt.status) == (
        "service",
        "Nettoyage & Dépoussiérage",
        "2026-03-12",
        "14:00",
        "pending",
    )
    assert m.state.last_outcome.reference == appt.id
