from __future__ import annotations

import os
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from sonumarket.cart.models import Order
from sonumarket.config import settings
from sonumarket.constants import PAYMENT_CHANNELS
from sonumarket.utils.formatters import amount, money


def generate_order_pdf(order: Order, export_dir: Optional[str] = None) -> str:
    export_dir = export_dir or settings.export_dir
    os.makedirs(export_dir, exist_ok=True)

    path = os.path.join(export_dir, f"order_{order.number}.pdf")

    c = canvas.Canvas(path, pagesize=A4)
    w, h = A4

    y = h - 50
    c.setFont("Helvetica-Bold", 14)
    c.drawString(40, y, f"SonuMarket - Commande {order.number}")
    y -= 20

    c.setFont("Helvetica", 11)
    c.drawString(40, y, f"Date: {order.created_at}")
    y -= 16
    c.drawString(40, y, f"Paiement: {PAYMENT_CHANNELS.get(order.payment_method, order.payment_method)}")
    y -= 16
    c.drawString(40, y, f"Devise: {settings.currency}")
    y -= 24

    # header
    c.setFont("Helvetica-Bold", 10)
    c.drawString(40, y, "Article")
    c.drawString(310, y, "Qté")
    c.drawString(360, y, "Prix")
    c.drawString(460, y, "Total")
    y -= 10
    c.line(40, y, 550, y)
    y -= 16

    c.setFont("Helvetica", 10)
    for line in order.lines:
        c.drawString(40, y, line.product.name[:45])
        c.drawRightString(340, y, str(line.quantity))
        c.drawRightString(440, y, amount(line.product.price))
        c.drawRightString(550, y, amount(line.line_total))
        y -= 14
        if y < 100:
            c.showPage()
            y = h - 50
            c.setFont("Helvetica", 10)

    y -= 10
    c.line(40, y, 550, y)
    y -= 18
    c.drawRightString(550, y, f"Sous-total: {money(order.subtotal)}")
    y -= 14
    shipping = "Offerte" if order.shipping == 0 else money(order.shipping)
    c.drawRightString(550, y, f"Livraison: {shipping}")
    y -= 18
    c.setFont("Helvetica-Bold", 12)
    c.drawRightString(550, y, f"TOTAL: {money(order.total)}")

    c.save()
    return path
