"""The session-wide store.

One Session per device/user session. It owns the cart, the catalog query
engine and the signed-in profile, restores them at startup and writes a full
snapshot on every change. Shells (bot, web) receive it by injection.
"""
from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from sonumarket.cart.engine import Cart
from sonumarket.cart.models import Order
from sonumarket.catalog.models import Product
from sonumarket.catalog.query import BrowseState, CatalogQuery
from sonumarket.catalog.store import CatalogStore
from sonumarket.config import settings
from sonumarket.constants import CART_KEY, PAYMENT_CHANNELS, USER_KEY
from sonumarket.db.sqlite import SqliteStorage
from sonumarket.profile import Address, Appointment, PaymentMethod, UserProfile
from sonumarket.services.payments import Charge, ChargeOutcome, SimulatedMobileMoney
from sonumarket.wizard import flows
from sonumarket.wizard.machine import WizardMachine

logger = logging.getLogger(__name__)

# listener(topic) where topic is "cart" or "user"
Listener = Callable[[str], None]


class Session:
    def __init__(
        self,
        storage: SqliteStorage,
        catalog: Optional[CatalogStore] = None,
        charge: Optional[Charge] = None,
        cart: Optional[Cart] = None,
        user: Optional[UserProfile] = None,
    ) -> None:
        self.storage = storage
        self.catalog = catalog or CatalogStore()
        self.query = CatalogQuery(self.catalog)
        self.charge: Charge = charge or SimulatedMobileMoney(settings.charge_delay)
        self.cart = Cart(cart.lines if cart else (), on_change=self._cart_changed)
        self.user = user
        self.browse = BrowseState()
        self._listeners: List[Listener] = []

    @classmethod
    def restore(cls, storage: SqliteStorage, **kwargs: Any) -> "Session":
        storage.init_db()

        cart = None
        payload = storage.read_snapshot(CART_KEY)
        if payload is not None:
            try:
                cart = Cart(Cart.lines_from_snapshot(payload))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("cart snapshot ignored: %s", e)

        user = None
        payload = storage.read_snapshot(USER_KEY)
        if payload is not None:
            try:
                user = UserProfile.from_dict(payload)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("user snapshot ignored: %s", e)

        session = cls(storage, cart=cart, user=user, **kwargs)
        logger.info(
            "session restored: %d cart items, user=%s",
            session.cart.item_count,
            user.id if user else None,
        )
        return session

    # ---------------- subscribe / notify ----------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, topic: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(topic)
            except Exception:
                logger.exception("session listener failed (%s)", topic)

    def _persist(self, key: str, payload: Optional[Dict[str, Any]]) -> None:
        try:
            if payload is None:
                self.storage.delete_snapshot(key)
            else:
                self.storage.write_snapshot(key, payload)
        except Exception:
            logger.warning("could not persist %r snapshot", key, exc_info=True)

    def _cart_changed(self, cart: Cart) -> None:
        self._persist(CART_KEY, cart.to_snapshot())
        self._notify(CART_KEY)

    def _user_changed(self) -> None:
        self._persist(USER_KEY, self.user.to_dict() if self.user else None)
        self._notify(USER_KEY)

    # ---------------- user ----------------

    def login(self, profile: UserProfile) -> UserProfile:
        self.user = profile
        self._user_changed()
        logger.info("user %s signed in", profile.id)
        return profile

    def logout(self) -> None:
        if self.user is None:
            return
        logger.info("user %s signed out", self.user.id)
        self.user = None
        self._user_changed()

    def update_user(self, **changes: Any) -> Optional[UserProfile]:
        if self.user is None:
            return None
        self.user = dataclasses.replace(self.user, **changes)
        self._user_changed()
        return self.user

    def save_address(
        self, label: str, street: str, city: str, address_id: Optional[str] = None
    ) -> Optional[Address]:
        if self.user is None or not (label.strip() and street.strip() and city.strip()):
            return None
        address = Address(address_id or uuid.uuid4().hex[:8], label.strip(), street.strip(), city.strip())
        current = list(self.user.addresses)
        if address_id and any(a.id == address_id for a in current):
            current = [address if a.id == address_id else a for a in current]
        else:
            current.append(address)
        self.update_user(addresses=current)
        return address

    def delete_address(self, address_id: str) -> None:
        if self.user is None:
            return
        self.update_user(addresses=[a for a in self.user.addresses if a.id != address_id])

    def add_payment_method(
        self,
        type: str,
        provider: str,
        number: str,
        holder_name: str,
        expiry: Optional[str] = None,
    ) -> Optional[PaymentMethod]:
        if self.user is None or not number.strip() or not holder_name.strip():
            return None
        method = PaymentMethod(uuid.uuid4().hex[:8], type, provider, number.strip(), holder_name.strip(), expiry)
        self.update_user(payment_methods=[*self.user.payment_methods, method])
        return method

    def delete_payment_method(self, method_id: str) -> None:
        if self.user is None:
            return
        self.update_user(payment_methods=[m for m in self.user.payment_methods if m.id != method_id])

    def toggle_wishlist(self, product_id: str) -> bool:
        """Returns True when the product is in the wishlist afterwards."""
        if self.user is None or self.catalog.product(product_id) is None:
            return False
        wishlist = list(self.user.wishlist)
        if product_id in wishlist:
            wishlist.remove(product_id)
            added = False
        else:
            wishlist.append(product_id)
            added = True
        self.update_user(wishlist=wishlist)
        return added

    def wishlist_products(self) -> List[Product]:
        if self.user is None:
            return []
        products = (self.catalog.product(pid) for pid in self.user.wishlist)
        return [p for p in products if p is not None]

    # ---------------- guided flows ----------------

    def open_configurator(self) -> WizardMachine:
        return flows.configurator(self.cart)

    def open_cv_purchase(self) -> WizardMachine:
        return flows.cv_purchase(self.charge)

    def open_redaction(self) -> WizardMachine:
        return flows.redaction_request(self.charge)

    def open_booking(self, today: Optional[date] = None) -> WizardMachine:
        return flows.service_booking(self._book, today or date.today())

    def _book(self, appointment: Appointment) -> None:
        if self.user is None:
            logger.info("appointment %s booked without a signed-in user", appointment.id)
            return
        self.update_user(appointments=[*self.user.appointments, appointment])

    # ---------------- checkout ----------------

    async def checkout(self, method: str) -> Optional[Order]:
        """Charge the cart total and turn the cart into an order.

        Returns None (cart untouched) when the cart is empty, the method is
        unknown, or the provider does not confirm the charge.
        """
        if self.cart.is_empty or method not in PAYMENT_CHANNELS:
            return None

        lines = self.cart.lines
        summary = self.cart.summary()
        outcome = await self.charge(summary.total, method)
        if outcome is not ChargeOutcome.SUCCESS:
            logger.warning("checkout charge not confirmed (%s)", outcome.value)
            return None

        now = datetime.now()
        order = Order(
            number=self.storage.next_order_number(now.year),
            created_at=now.strftime("%Y-%m-%d %H:%M:%S"),
            lines=lines,
            subtotal=summary.subtotal,
            shipping=summary.shipping,
            total=summary.total,
            payment_method=method,
        )
        ok, res = self.storage.save_order(order)
        if ok:
            order.id = int(res)
        else:
            logger.error("order %s not saved: %s", order.number, res)

        # only what was charged leaves the cart
        self.cart.take(lines)
        logger.info("order %s placed (%s)", order.number, summary.total)
        return order

    def orders(self) -> List[Order]:
        return self.storage.list_orders()
