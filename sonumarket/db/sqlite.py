from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sonumarket.cart.models import CartLine, Order
from sonumarket.catalog.models import Product
from sonumarket.config import settings

logger = logging.getLogger(__name__)

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schema.sql")


class SqliteStorage:
    """Whole-state snapshots (cart, user) and the order history."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path or settings.db_path

    def _connect(self) -> sqlite3.Connection:
        dirname = os.path.dirname(self.db_path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        conn = self._connect()
        try:
            with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
                conn.executescript(f.read())
            conn.commit()
        finally:
            conn.close()

    # ---------------- snapshots ----------------

    def read_snapshot(self, key: str) -> Optional[Dict[str, Any]]:
        """Missing or unreadable data counts as absent."""
        conn = self._connect()
        try:
            row = conn.execute("SELECT payload FROM snapshots WHERE key = ?", (key,)).fetchone()
        except sqlite3.DatabaseError as e:
            logger.warning("snapshot %r unreadable: %s", key, e)
            return None
        finally:
            conn.close()

        if row is None:
            return None
        try:
            payload = json.loads(row["payload"])
        except ValueError as e:
            logger.warning("snapshot %r is corrupt: %s", key, e)
            return None
        if not isinstance(payload, dict):
            logger.warning("snapshot %r is not an object", key)
            return None
        return payload

    def write_snapshot(self, key: str, payload: Dict[str, Any]) -> None:
        updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        conn = self._connect()
        try:
            conn.execute(
                "INSERT INTO snapshots(key, payload, updated_at) VALUES(?,?,?) "
                "ON CONFLICT(key) DO UPDATE SET payload=excluded.payload, updated_at=excluded.updated_at",
                (key, json.dumps(payload, ensure_ascii=False), updated_at),
            )
            conn.commit()
        finally:
            conn.close()

    def delete_snapshot(self, key: str) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM snapshots WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    # ---------------- orders ----------------

    def next_order_number(self, year: int) -> str:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM orders WHERE number LIKE ?",
                (f"CMD-{year}-%",),
            ).fetchone()
            return f"CMD-{year}-{int(row['n']) + 1:03d}"
        finally:
            conn.close()

    def save_order(self, order: Order) -> Tuple[bool, Any]:
        """
        Writes orders + order_items in one transaction.
        Returns (True, order_id) or (False, error text).
        """
        conn = self._connect()
        try:
            conn.execute("BEGIN")
            cur = conn.execute(
                """
                INSERT INTO orders(number, created_at, subtotal, shipping, total, currency, payment_method, status)
                VALUES(?,?,?,?,?,?,?,?)
                """,
                (
                    order.number,
                    order.created_at,
                    order.subtotal,
                    order.shipping,
                    order.total,
                    settings.currency,
                    order.payment_method,
                    order.status,
                ),
            )
            order_id = int(cur.lastrowid)

            for line in order.lines:
                conn.execute(
                    """
                    INSERT INTO order_items(order_id, product_id, name, qty, price, line_total, product)
                    VALUES(?,?,?,?,?,?,?)
                    """,
                    (
                        order_id,
                        line.id,
                        line.product.name,
                        line.quantity,
                        line.product.price,
                        line.line_total,
                        json.dumps(line.product.to_dict(), ensure_ascii=False),
                    ),
                )

            conn.commit()
            return True, order_id
        except sqlite3.Error as e:
            conn.execute("ROLLBACK")
            return False, str(e)
        finally:
            conn.close()

    def list_orders(self) -> List[Order]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT * FROM orders ORDER BY id DESC").fetchall()
            orders = []
            for r in rows:
                items = conn.execute(
                    "SELECT qty, product FROM order_items WHERE order_id = ? ORDER BY id",
                    (r["id"],),
                ).fetchall()
                lines = tuple(
                    CartLine(Product.from_dict(json.loads(it["product"])), int(it["qty"])) for it in items
                )
                orders.append(
                    Order(
                        number=r["number"],
                        created_at=r["created_at"],
                        lines=lines,
                        subtotal=int(r["subtotal"]),
                        shipping=int(r["shipping"]),
                        total=int(r["total"]),
                        payment_method=r["payment_method"],
                        status=r["status"],
                        id=int(r["id"]),
                    )
                )
            return orders
        finally:
            conn.close()
