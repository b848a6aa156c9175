from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from sonumarket.catalog.models import Product


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int = 1
    selected_variant: Optional[str] = None

    @property
    def id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> int:
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        d = self.product.to_dict()
        d["quantity"] = self.quantity
        d["selected_variant"] = self.selected_variant
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        return cls(
            product=Product.from_dict(data),
            quantity=int(data.get("quantity", 1)),
            selected_variant=data.get("selected_variant"),
        )


@dataclass(frozen=True)
class CartSummary:
    item_count: int
    subtotal: int
    shipping: int
    total: int


@dataclass
class Order:
    number: str  # CMD-2025-001
    created_at: str
    lines: Tuple[CartLine, ...]
    subtotal: int
    shipping: int
    total: int
    payment_method: str
    status: str = "pending"  # pending / processing / shipped / delivered / cancelled
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "created_at": self.created_at,
            "lines": [line.to_dict() for line in self.lines],
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "total": self.total,
            "payment_method": self.payment_method,
            "status": self.status,
        }
