from sonumarket.config import settings


def amount(v: int) -> str:
    return f"{int(v):,}".replace(",", " ")


def money(v: int) -> str:
    return f"{amount(v)} {settings.currency}"
