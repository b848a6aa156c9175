from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    icon: str = ""


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: int
    rating: float
    category: str
    description: str = ""
    reviews: int = 0
    specs: Dict[str, str] = field(default_factory=dict)
    discount: Optional[int] = None  # percentage
    type: Optional[str] = None  # chassis / cpu-mobile / ... / digital
    file_type: Optional[str] = None  # pdf / docx / xlsx / zip
    digital_contents: Tuple[str, ...] = ()
    image: str = ""
    is_new: bool = False
    socket: Optional[str] = None

    @property
    def is_digital(self) -> bool:
        return self.type == "digital"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "rating": self.rating,
            "category": self.category,
            "description": self.description,
            "reviews": self.reviews,
            "specs": dict(self.specs),
            "discount": self.discount,
            "type": self.type,
            "file_type": self.file_type,
            "digital_contents": list(self.digital_contents),
            "image": self.image,
            "is_new": self.is_new,
            "socket": self.socket,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        specs = data.get("specs") or {}
        if not isinstance(specs, Mapping):
            raise TypeError(f"specs must be a mapping, got {type(specs).__name__}")
        contents = data.get("digital_contents") or ()
        if isinstance(contents, str):
            raise TypeError("digital_contents must be a list of file names")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            price=int(data["price"]),
            rating=float(data.get("rating", 0)),
            category=str(data.get("category", "")),
            description=str(data.get("description", "")),
            reviews=int(data.get("reviews", 0)),
            specs={str(k): str(v) for k, v in specs.items()},
            discount=data.get("discount"),
            type=data.get("type"),
            file_type=data.get("file_type"),
            digital_contents=tuple(str(c) for c in contents),
            image=str(data.get("image", "")),
            is_new=bool(data.get("is_new", False)),
            socket=data.get("socket"),
        )


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    duration: int  # minutes
    price: int
    description: str = ""


@dataclass(frozen=True)
class CVTemplate:
    id: str
    name: str
    price: int
    style: str
    image: str = ""


@dataclass(frozen=True)
class RedactionOption:
    id: str
    title: str
    description: str
    base_price: int
    icon: str = ""
