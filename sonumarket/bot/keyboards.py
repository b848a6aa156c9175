from typing import Iterable

from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

from sonumarket.constants import PAYMENT_CHANNELS


def main_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text="/catalog"), KeyboardButton(text="/cart")],
            [KeyboardButton(text="/configurator"), KeyboardButton(text="/booking")],
            [KeyboardButton(text="/cv"), KeyboardButton(text="/redaction")],
            [KeyboardButton(text="/help")],
        ],
        resize_keyboard=True,
    )


def flow_kb(extra: Iterable[str] = ()) -> ReplyKeyboardMarkup:
    rows = [[KeyboardButton(text=t)] for t in extra]
    rows.append(
        [
            KeyboardButton(text="/back"),
            KeyboardButton(text="/next"),
            KeyboardButton(text="/cancel"),
        ]
    )
    return ReplyKeyboardMarkup(keyboard=rows, resize_keyboard=True)


def payment_kb() -> ReplyKeyboardMarkup:
    return flow_kb(PAYMENT_CHANNELS.keys())
