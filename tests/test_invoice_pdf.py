import os

from sonumarket.cart.models import CartLine, Order
from sonumarket.catalog.models import Product
from sonumarket.services.invoice_pdf import generate_order_pdf


def test_pdf_written_to_export_dir(tmp_path, p1, p2):
    order = Order(
        number="CMD-2026-007",
        created_at="2026-03-10 12:00:00",
        lines=(CartLine(p1, 3), CartLine(p2)),
        subtotal=603000,
        shipping=0,
        total=603000,
        payment_method="airtel",
    )

    path = generate_order_pdf(order, str(tmp_path / "exports"))

    assert os.path.basename(path) == "order_CMD-2026-007.pdf"
    with open(path, "rb") as f:
        assert f.read(5) == b"%PDF-"


def test_long_order_spans_pages(tmp_path):
    lines = tuple(
        CartLine(Product(id=f"x{i}", name=f"Article {i}", price=100, rating=4, category="Divers"))
        for i in range(80)
    )
    order = Order("CMD-2026-008", "2026-03-10 12:00:00", lines, 8000, 5000, 13000, "momo")

    path = generate_order_pdf(order, str(tmp_path))
    assert os.path.getsize(path) > 0
