"""Concrete guided flows built on WizardMachine."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Mapping

from sonumarket.cart.engine import Cart
from sonumarket.catalog.models import CVTemplate, Product, RedactionOption, Service
from sonumarket.constants import BOOKING_WINDOW_DAYS, CONFIGURATOR_STEPS, PAYMENT_CHANNELS, TIME_SLOTS
from sonumarket.profile import Appointment
from sonumarket.services.payments import Charge, ChargeOutcome
from sonumarket.wizard.machine import (
    FlowBuilder,
    FlowDefinition,
    Selections,
    Submit,
    SubmitFailure,
    SubmitRequest,
    SubmitResult,
    SubmitSuccess,
    WizardMachine,
    all_selected,
    always,
)

logger = logging.getLogger(__name__)

CONFIGURATOR = "configurator"
CV_PURCHASE = "cv_purchase"
REDACTION = "redaction"
BOOKING = "booking"

CV_FIELDS = ("full_name", "job_title", "email", "phone", "experience_years", "key_skills", "summary")


@dataclass(frozen=True)
class Attachment:
    """A user file; ``ref`` is whatever the upload transport hands back."""

    name: str
    ref: str
    size: int = 0


def _is_attachment(value: Any) -> bool:
    return isinstance(value, Attachment) and bool(value.name.strip())


def _is_payment_method(value: Any) -> bool:
    return isinstance(value, str) and value in PAYMENT_CHANNELS


def _is_part_for(step: str) -> Callable[[Any], bool]:
    def validator(value: Any) -> bool:
        return isinstance(value, Product) and value.type == step

    return validator


# ---------------- configurator ----------------

def _parts_total(selections: Selections) -> int:
    return sum(p.price for p in selections.values() if p is not None)


def configurator_flow() -> FlowDefinition:
    b = FlowBuilder(CONFIGURATOR).auto_advance().amount(_parts_total)
    for step in CONFIGURATOR_STEPS[:-1]:
        b.step(step, validator=_is_part_for(step))
    last = CONFIGURATOR_STEPS[-1]
    # ordering the laptop needs every part
    b.step(last, validator=_is_part_for(last), gate=all_selected)
    return b.build()


def add_parts_to_cart(cart: Cart) -> Submit:
    async def submit(request: SubmitRequest) -> SubmitResult:
        parts = [request.selections[s] for s in CONFIGURATOR_STEPS]
        _, count = cart.add_many(parts)
        return SubmitSuccess(reference=f"{count} articles")

    return submit


def configurator(cart: Cart) -> WizardMachine:
    return WizardMachine(configurator_flow(), add_parts_to_cart(cart))


# ---------------- document services ----------------

def _is_cv_details(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    return all(k in CV_FIELDS and isinstance(v, str) for k, v in value.items())


def _has_full_name(selections: Selections) -> bool:
    details = selections.get("details")
    return details is not None and bool(str(details.get("full_name", "")).strip())


def cv_flow() -> FlowDefinition:
    return (
        FlowBuilder(CV_PURCHASE)
        .step("template", validator=lambda v: isinstance(v, CVTemplate))
        .step("details", validator=_is_cv_details, gate=_has_full_name)
        .step("photo", validator=_is_attachment, gate=always, clearable=True)
        .step("payment", validator=_is_payment_method)
        .amount(lambda s: s["template"].price if s.get("template") else 0)
        .build()
    )


def redaction_flow() -> FlowDefinition:
    return (
        FlowBuilder(REDACTION)
        .step("option", validator=lambda v: isinstance(v, RedactionOption))
        .step("instructions", validator=lambda v: isinstance(v, str), gate=always)
        .step("upload", validator=_is_attachment, clearable=True)
        .step("payment", validator=_is_payment_method)
        .amount(lambda s: s["option"].base_price if s.get("option") else 0)
        .build()
    )


def charge_with(charge: Charge) -> Submit:
    async def submit(request: SubmitRequest) -> SubmitResult:
        outcome = await charge(request.amount, request.selections["payment"])
        if outcome is ChargeOutcome.SUCCESS:
            return SubmitSuccess(reference=f"{request.flow}-{uuid.uuid4().hex[:8]}")
        return SubmitFailure(reason=outcome.value)

    return submit


def cv_purchase(charge: Charge) -> WizardMachine:
    return WizardMachine(cv_flow(), charge_with(charge))


def redaction_request(charge: Charge) -> WizardMachine:
    return WizardMachine(redaction_flow(), charge_with(charge))


# ---------------- service booking ----------------

def booking_flow(today: date) -> FlowDefinition:
    last_day = today + timedelta(days=BOOKING_WINDOW_DAYS)

    def is_bookable_day(value: Any) -> bool:
        if not isinstance(value, date) or isinstance(value, datetime):
            return False
        return today < value <= last_day

    return (
        FlowBuilder(BOOKING)
        .step("service", validator=lambda v: isinstance(v, Service))
        .step("date", validator=is_bookable_day)
        .step("time", validator=lambda v: v in TIME_SLOTS)
        .amount(lambda s: s["service"].price if s.get("service") else 0)
        .build()
    )


def record_appointment(book: Callable[[Appointment], None]) -> Submit:
    async def submit(request: SubmitRequest) -> SubmitResult:
        service: Service = request.selections["service"]
        appointment = Appointment(
            id=uuid.uuid4().hex[:8],
            kind="service",
            title=service.name,
            date=request.selections["date"].isoformat(),
            time=request.selections["time"],
            status="pending",
            description=service.description,
        )
        book(appointment)
        logger.info("booked %s on %s %s", service.id, appointment.date, appointment.time)
        return SubmitSuccess(reference=appointment.id)

    return submit


def service_booking(book: Callable[[Appointment], None], today: date) -> WizardMachine:
    return WizardMachine(booking_flow(today), record_appointment(book))
