from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Address:
    id: str
    label: str
    street: str
    city: str


@dataclass(frozen=True)
class PaymentMethod:
    id: str
    type: str  # momo / airtel / card
    provider: str  # MTN, Airtel, Visa, ...
    number: str  # masked number or phone
    holder_name: str
    expiry: Optional[str] = None  # cards only


@dataclass(frozen=True)
class Appointment:
    id: str
    kind: str  # service / document
    title: str
    date: str  # ISO date
    status: str  # pending / confirmed / processing / completed / cancelled
    description: str = ""
    time: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status not in ("completed", "cancelled")


@dataclass(frozen=True)
class UserProfile:
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    addresses: List[Address] = field(default_factory=list)
    payment_methods: List[PaymentMethod] = field(default_factory=list)
    wishlist: List[str] = field(default_factory=list)  # product ids
    appointments: List[Appointment] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            email=str(data["email"]),
            phone=data.get("phone"),
            avatar=data.get("avatar"),
            addresses=[Address(**a) for a in data.get("addresses") or []],
            payment_methods=[PaymentMethod(**m) for m in data.get("payment_methods") or []],
            wishlist=[str(x) for x in data.get("wishlist") or []],
            appointments=[Appointment(**a) for a in data.get("appointments") or []],
        )
