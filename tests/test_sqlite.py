from sonumarket.cart.models import CartLine, Order
from sonumarket.db.sqlite import SqliteStorage


def _order(number, *lines):
    subtotal = sum(line.line_total for line in lines)
    return Order(
        number=number,
        created_at="2026-03-10 12:00:00",
        lines=tuple(lines),
        subtotal=subtotal,
        shipping=5000,
        total=subtotal + 5000,
        payment_method="momo",
    )


def test_init_db_is_idempotent(tmp_path):
    s = SqliteStorage(str(tmp_path / "nested" / "shop.db"))
    s.init_db()
    s.init_db()
    assert s.read_snapshot("cart") is None


def test_snapshot_upsert_and_delete(storage):
    storage.write_snapshot("cart", {"lines": []})
    storage.write_snapshot("cart", {"lines": [{"id": "1"}]})
    assert storage.read_snapshot("cart") == {"lines": [{"id": "1"}]}

    storage.delete_snapshot("cart")
    assert storage.read_snapshot("cart") is None


def test_non_object_snapshot_is_absent(storage):
    conn = storage._connect()
    conn.execute("INSERT INTO snapshots(key, payload, updated_at) VALUES('cart', '[1, 2]', 'x')")
    conn.commit()
    conn.close()
    assert storage.read_snapshot("cart") is None


def test_missing_table_is_absent(tmp_path):
    s = SqliteStorage(str(tmp_path / "no_schema.db"))
    assert s.read_snapshot("user") is None


def test_order_numbers_count_per_year(storage, p1):
    assert storage.next_order_number(2026) == "CMD-2026-001"
    ok, _ = storage.save_order(_order("CMD-2026-001", CartLine(p1)))
    assert ok
    assert storage.next_order_number(2026) == "CMD-2026-002"
    assert storage.next_order_number(2027) == "CMD-2027-001"


def test_save_and_list_orders(storage, p1, p2):
    ok, order_id = storage.save_order(_order("CMD-2026-001", CartLine(p1, 2), CartLine(p2)))
    assert ok and isinstance(order_id, int)
    storage.save_order(_order("CMD-2026-002", CartLine(p2)))

    orders = storage.list_orders()
    assert [o.number for o in orders] == ["CMD-2026-002", "CMD-2026-001"]
    first = orders[1]
    assert first.id == order_id
    assert first.lines == (CartLine(p1, 2), CartLine(p2))
    assert first.total == 2000 + 600000 + 5000
    assert first.status == "pending"


def test_duplicate_order_number_is_rolled_back(storage, p1):
    storage.save_order(_order("CMD-2026-001", CartLine(p1)))
    ok, err = storage.save_order(_order("CMD-2026-001", CartLine(p1, 3)))

    assert ok is False
    assert "UNIQUE" in err
    assert len(storage.list_orders()) == 1
