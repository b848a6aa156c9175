from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from sonumarket.catalog import data
from sonumarket.catalog.models import Category, CVTemplate, Product, RedactionOption, Service


class CatalogStore:
    """Read-only access to the storefront reference data."""

    def __init__(
        self,
        products: Iterable[Product] = data.PRODUCTS,
        categories: Iterable[Category] = data.CATEGORIES,
        services: Iterable[Service] = data.SERVICES,
        cv_templates: Iterable[CVTemplate] = data.CV_TEMPLATES,
        redaction_options: Iterable[RedactionOption] = data.REDACTION_OPTIONS,
    ) -> None:
        self._products: Tuple[Product, ...] = tuple(products)
        self._categories: Tuple[Category, ...] = tuple(categories)
        self._services: Tuple[Service, ...] = tuple(services)
        self._cv_templates: Tuple[CVTemplate, ...] = tuple(cv_templates)
        self._redaction_options: Tuple[RedactionOption, ...] = tuple(redaction_options)
        self._by_id: Dict[str, Product] = {p.id: p for p in self._products}

    def products(self) -> Tuple[Product, ...]:
        return self._products

    def product(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def digital_products(self) -> Tuple[Product, ...]:
        return tuple(p for p in self._products if p.is_digital)

    def categories(self) -> Tuple[Category, ...]:
        return self._categories

    def browse_categories(self) -> Tuple[Category, ...]:
        # services have their own booking flow
        return tuple(c for c in self._categories if c.id != "services")

    def services(self) -> Tuple[Service, ...]:
        return self._services

    def service(self, service_id: str) -> Optional[Service]:
        return next((s for s in self._services if s.id == service_id), None)

    def cv_templates(self) -> Tuple[CVTemplate, ...]:
        return self._cv_templates

    def cv_template(self, template_id: str) -> Optional[CVTemplate]:
        return next((t for t in self._cv_templates if t.id == template_id), None)

    def redaction_options(self) -> Tuple[RedactionOption, ...]:
        return self._redaction_options

    def redaction_option(self, option_id: str) -> Optional[RedactionOption]:
        return next((o for o in self._redaction_options if o.id == option_id), None)
