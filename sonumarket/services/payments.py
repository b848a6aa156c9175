from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

from sonumarket.constants import PAYMENT_CHANNELS

logger = logging.getLogger(__name__)


class ChargeOutcome(str, Enum):
    SUCCESS = "success"
    PENDING = "pending"  # provider did not confirm; state unknown


# charge(amount, method) -> outcome
Charge = Callable[[int, str], Awaitable[ChargeOutcome]]


class SimulatedMobileMoney:
    """Stand-in for the MTN / Airtel mobile-money APIs.

    Waits ``delay`` seconds and confirms every charge.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay

    async def __call__(self, amount: int, method: str) -> ChargeOutcome:
        if method not in PAYMENT_CHANNELS:
            raise ValueError(f"unknown payment channel: {method}")
        logger.info("charging %s via %s", amount, method)
        await asyncio.sleep(self.delay)
        return ChargeOutcome.SUCCESS
