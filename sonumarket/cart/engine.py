"""Cart engine.

The cart is an ordered tuple of lines, at most one per product id. Every
mutation builds a new tuple and swaps it in with a single assignment, then
hands the cart to ``on_change`` (persistence). A failing ``on_change`` is
logged and never reaches the caller.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from sonumarket.cart.models import CartLine, CartSummary
from sonumarket.catalog.models import Product
from sonumarket.services.pricing import shipping_fee

logger = logging.getLogger(__name__)

OnChange = Callable[["Cart"], None]


def _merge(lines: Iterable[CartLine]) -> Tuple[CartLine, ...]:
    merged: Dict[str, CartLine] = {}
    for line in lines:
        if line.quantity <= 0:
            continue
        prev = merged.get(line.id)
        if prev is None:
            merged[line.id] = line
        else:
            merged[line.id] = CartLine(prev.product, prev.quantity + line.quantity, prev.selected_variant)
    return tuple(merged.values())


class Cart:
    def __init__(self, lines: Iterable[CartLine] = (), on_change: Optional[OnChange] = None) -> None:
        self._lines: Tuple[CartLine, ...] = _merge(lines)
        self._on_change = on_change

    # ---------------- read ----------------

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def line(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self._lines if line.id == product_id), None)

    def subtotal(self) -> int:
        return sum(line.line_total for line in self._lines)

    def total(self) -> int:
        subtotal = self.subtotal()
        return subtotal + shipping_fee(subtotal)

    def summary(self) -> CartSummary:
        subtotal = self.subtotal()
        shipping = shipping_fee(subtotal)
        return CartSummary(
            item_count=self.item_count,
            subtotal=subtotal,
            shipping=shipping,
            total=subtotal + shipping,
        )

    # ---------------- mutate ----------------

    def add_one(self, product: Product, selected_variant: Optional[str] = None) -> "Cart":
        self._commit(self._with_added(self._lines, product, selected_variant))
        return self

    def add_many(self, products: Sequence[Product]) -> Tuple["Cart", int]:
        lines = self._lines
        count = 0
        for p in products:
            lines = self._with_added(lines, p)
            count += 1
        if count:
            self._commit(lines)
        return self, count

    def update_quantity(self, product_id: str, delta: int) -> "Cart":
        if self.line(product_id) is None:
            return self
        lines: List[CartLine] = []
        for line in self._lines:
            if line.id == product_id:
                qty = max(0, line.quantity + delta)
                if qty == 0:
                    continue
                line = CartLine(line.product, qty, line.selected_variant)
            lines.append(line)
        self._commit(tuple(lines))
        return self

    def remove(self, product_id: str) -> "Cart":
        if self.line(product_id) is None:
            return self
        self._commit(tuple(line for line in self._lines if line.id != product_id))
        return self

    def replace(self, lines: Iterable[CartLine]) -> "Cart":
        self._commit(_merge(lines))
        return self

    def take(self, lines: Iterable[CartLine]) -> "Cart":
        """Subtract the given quantities by product id, e.g. the lines of a paid order.

        Lines added or bumped since ``lines`` was read stay in the cart.
        """
        taken: Dict[str, int] = {}
        for line in lines:
            taken[line.id] = taken.get(line.id, 0) + line.quantity
        if not taken:
            return self
        kept: List[CartLine] = []
        for line in self._lines:
            qty = line.quantity - taken.get(line.id, 0)
            if qty > 0:
                kept.append(line if qty == line.quantity else CartLine(line.product, qty, line.selected_variant))
        self._commit(tuple(kept))
        return self

    # ---------------- snapshot ----------------

    def to_snapshot(self) -> Dict[str, Any]:
        return {"lines": [line.to_dict() for line in self._lines]}

    @staticmethod
    def lines_from_snapshot(payload: Dict[str, Any]) -> Tuple[CartLine, ...]:
        """Raises KeyError / TypeError / ValueError on a malformed payload."""
        return _merge(CartLine.from_dict(d) for d in payload["lines"])

    # ---------------- internals ----------------

    @staticmethod
    def _with_added(
        lines: Tuple[CartLine, ...], product: Product, selected_variant: Optional[str] = None
    ) -> Tuple[CartLine, ...]:
        for i, line in enumerate(lines):
            if line.id == product.id:
                bumped = CartLine(line.product, line.quantity + 1, line.selected_variant)
                return lines[:i] + (bumped,) + lines[i + 1:]
        return lines + (CartLine(product, 1, selected_variant),)

    def _commit(self, lines: Tuple[CartLine, ...]) -> None:
        self._lines = lines
        if self._on_change is None:
            return
        try:
            self._on_change(self)
        except Exception:
            logger.exception("cart change listener failed (items=%d)", self.item_count)
