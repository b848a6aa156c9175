"""Turn chat text into flow selections and command arguments.

Every parser returns None on input it cannot read; the handler answers with
a hint and the flow stays where it is.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, TypeVar

from sonumarket.constants import PAYMENT_CHANNELS, TIME_SLOTS
from sonumarket.wizard.flows import CV_FIELDS

T = TypeVar("T")


def pick(text: str, items: Sequence[T], key: Callable[[T], str] = lambda x: x.id) -> Optional[T]:
    """Item by id, or by its 1-based position in the list shown to the user."""
    t = (text or "").strip()
    if not t:
        return None
    for item in items:
        if key(item) == t:
            return item
    if re.fullmatch(r"\d+", t):
        i = int(t)
        if 1 <= i <= len(items):
            return items[i - 1]
    return None


def parse_amount(text: str) -> int:
    """'150 000' / '150000' -> 150000. Raises ValueError."""
    t = (text or "").strip().replace(" ", "").replace(" ", "")
    if not re.fullmatch(r"\d+", t):
        raise ValueError(f"montant invalide: {text!r}")
    return int(t)


def parse_price_range(args: Sequence[str]) -> Tuple[int, int]:
    if len(args) != 2:
        raise ValueError("il faut deux montants: MIN MAX")
    return parse_amount(args[0]), parse_amount(args[1])


def parse_cv_details(text: str) -> Optional[Dict[str, str]]:
    """
    'Awa Ndiaye | Comptable | awa@mail.cm | 690000000' -> fields in CV_FIELDS order.
    Empty parts are skipped; the full name is mandatory.
    """
    parts = [p.strip() for p in (text or "").split("|")]
    if not parts or not parts[0] or len(parts) > len(CV_FIELDS):
        return None
    return {name: value for name, value in zip(CV_FIELDS, parts) if value}


def parse_date(text: str) -> Optional[date]:
    t = (text or "").strip()
    for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%d.%m.%Y"):
        try:
            return datetime.strptime(t, fmt).date()
        except ValueError:
            continue
    return None


def parse_time(text: str) -> Optional[str]:
    m = re.fullmatch(r"(\d{1,2})[:hH](\d{2})", (text or "").strip())
    if not m:
        return None
    slot = f"{int(m.group(1)):02d}:{m.group(2)}"
    return slot if slot in TIME_SLOTS else None


def parse_payment(text: str) -> Optional[str]:
    t = (text or "").strip().lower()
    if t in PAYMENT_CHANNELS:
        return t
    for key, label in PAYMENT_CHANNELS.items():
        if t and t in label.lower():
            return key
    return None


def command_args(text: Any) -> Sequence[str]:
    """'/price 1000 5000' -> ['1000', '5000']"""
    return str(text or "").split()[1:]
