from sonumarket.constants import FREE_SHIPPING_THRESHOLD, SHIPPING_FEE


def shipping_fee(subtotal: int) -> int:
    return 0 if subtotal > FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
