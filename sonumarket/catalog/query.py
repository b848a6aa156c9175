"""Catalog filtering.

A query runs three stages over the static catalog, in order, as a strict
intersection: category, price range, free text. Output keeps catalog order.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Tuple

from sonumarket.catalog.models import Product
from sonumarket.catalog.store import CatalogStore
from sonumarket.constants import (
    CATEGORY_ALL,
    CATEGORY_KEYWORDS,
    CATEGORY_LABELS,
    CONFIGURATOR_CATEGORY,
    HOME_PILL_HINTS,
    PRICE_CEILING,
)
from sonumarket.utils.validators import require_non_negative, require_ordered


class InvalidFilterError(ValueError):
    """A FilterSpec that can never be satisfied, e.g. price_max < price_min."""


@dataclass(frozen=True)
class FilterSpec:
    category: str = CATEGORY_ALL
    price_min: int = 0
    price_max: int = PRICE_CEILING
    text: Optional[str] = None

    def __post_init__(self) -> None:
        try:
            require_non_negative(self.price_min, "price_min")
            require_ordered(self.price_min, self.price_max, "price_min", "price_max")
        except ValueError as e:
            raise InvalidFilterError(str(e)) from e

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())


@dataclass
class BrowseState:
    """Caller-side browsing state.

    ``touched`` tells "nothing selected yet" apart from "selected, nothing matched".
    """

    spec: FilterSpec = field(default_factory=FilterSpec)
    touched: bool = False

    def select_category(self, category: str) -> FilterSpec:
        return self._update(category=category)

    def set_price_range(self, price_min: int, price_max: int) -> FilterSpec:
        return self._update(price_min=price_min, price_max=price_max)

    def set_text(self, text: Optional[str]) -> FilterSpec:
        return self._update(text=text)

    def reset_prices(self) -> FilterSpec:
        return self._update(price_min=0, price_max=PRICE_CEILING)

    def _update(self, **changes) -> FilterSpec:
        # FilterSpec validates itself before it replaces the current one
        spec = replace(self.spec, **changes)
        self.spec = spec
        self.touched = True
        return spec


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


class CatalogQuery:
    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def query(self, spec: FilterSpec) -> List[Product]:
        products: Iterable[Product] = self.store.products()
        products = self._by_category(products, spec.category)
        products = (p for p in products if spec.price_min <= p.price <= spec.price_max)
        if spec.has_text:
            products = self._by_text(products, spec.text.strip())
        return list(products)

    def search(self, text: str) -> List[Product]:
        """Home search box: text stage only, over the whole catalog."""
        if not text or not text.strip():
            return []
        return list(self._by_text(self.store.products(), text.strip()))

    def top_sellers(self, limit: int = 4) -> List[Product]:
        return list(self.store.products()[:limit])

    def home_pills(self, category: str = CATEGORY_ALL) -> List[Product]:
        """Products behind a home page category pill.

        "all" shows the top sellers; the gaming pill matches on hints in the
        name or description rather than on the label. Unknown pills are empty.
        """
        if category == CATEGORY_ALL:
            return self.top_sellers()
        shelf = [p for p in self.store.products() if p.category != CONFIGURATOR_CATEGORY and not p.is_digital]
        hints = HOME_PILL_HINTS.get(category)
        if hints is not None:
            return [
                p
                for p in shelf
                if any(_contains(p.description, h) for h in hints["description"])
                or any(_contains(p.name, h) for h in hints["name"])
            ]
        labels = CATEGORY_LABELS.get(category)
        if labels is None:
            return []
        return [p for p in shelf if any(label in p.category for label in labels)]

    def parts_for(self, part_type: str) -> List[Product]:
        return [p for p in self.store.products() if p.type == part_type]

    def digital(self, category: str = CATEGORY_ALL) -> List[Product]:
        products = self.store.digital_products()
        if category == CATEGORY_ALL:
            return list(products)
        return [p for p in products if p.category == category]

    def digital_category_counts(self) -> List[Tuple[str, int]]:
        counts: dict[str, int] = {}
        for p in self.store.digital_products():
            counts[p.category] = counts.get(p.category, 0) + 1
        return list(counts.items())

    @staticmethod
    def _by_category(products: Iterable[Product], category: str) -> Iterable[Product]:
        if category == CATEGORY_ALL:
            return (p for p in products if p.category != CONFIGURATOR_CATEGORY)

        labels = CATEGORY_LABELS.get(category, (category,))
        keywords = CATEGORY_KEYWORDS.get(category, ())

        def matches(p: Product) -> bool:
            if any(label in p.category for label in labels):
                return True
            return any(_contains(p.description, kw) for kw in keywords)

        return (p for p in products if matches(p))

    @staticmethod
    def _by_text(products: Iterable[Product], text: str) -> Iterable[Product]:
        return (
            p
            for p in products
            if _contains(p.name, text) or _contains(p.category, text) or _contains(p.description, text)
        )
