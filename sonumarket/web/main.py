from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from sonumarket.catalog.query import FilterSpec, InvalidFilterError
from sonumarket.config import settings
from sonumarket.constants import CATEGORY_ALL, PAYMENT_CHANNELS, PRICE_CEILING
from sonumarket.db.sqlite import SqliteStorage
from sonumarket.services.invoice_pdf import generate_order_pdf
from sonumarket.session import Session
from sonumarket.utils.formatters import money

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"

app = FastAPI(title="SonuMarket Web")

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["money"] = money

_session: Optional[Session] = None


def get_session() -> Session:
    global _session
    if _session is None:
        _session = Session.restore(SqliteStorage())
    return _session


def _render(request: Request, session: Session, name: str, ctx: dict[str, Any], status_code: int = 200) -> HTMLResponse:
    base = {
        "cart_count": session.cart.item_count,
        "categories": session.catalog.browse_categories(),
        "user": session.user,
    }
    base.update(ctx)
    return templates.TemplateResponse(request, name, base, status_code=status_code)


@app.get("/", response_class=HTMLResponse)
def index(request: Request, category: str = CATEGORY_ALL, session: Session = Depends(get_session)):
    return _render(
        request,
        session,
        "index.html",
        {"pill": category, "products": session.query.home_pills(category)},
    )


# ---------------- catalog ----------------

@app.get("/products", response_class=HTMLResponse)
def products(
    request: Request,
    category: str = CATEGORY_ALL,
    price_min: int = 0,
    price_max: int = PRICE_CEILING,
    q: Optional[str] = None,
    session: Session = Depends(get_session),
):
    try:
        spec = FilterSpec(category=category, price_min=price_min, price_max=price_max, text=q)
    except InvalidFilterError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _render(request, session, "products.html", {"spec": spec, "products": session.query.query(spec)})


@app.get("/products/{product_id}", response_class=HTMLResponse)
def product_detail(request: Request, product_id: str, session: Session = Depends(get_session)):
    product = session.catalog.product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="product not found")
    return _render(request, session, "product.html", {"product": product})


@app.get("/search", response_class=HTMLResponse)
def search(request: Request, q: str = "", session: Session = Depends(get_session)):
    return _render(request, session, "products.html", {"spec": None, "q": q, "products": session.query.search(q)})


# ---------------- cart ----------------

@app.get("/cart", response_class=HTMLResponse)
def cart(request: Request, msg: str = "", session: Session = Depends(get_session)):
    return _render(
        request,
        session,
        "cart.html",
        {
            "lines": session.cart.lines,
            "summary": session.cart.summary(),
            "channels": PAYMENT_CHANNELS,
            "message": msg,
        },
    )


@app.post("/cart/add")
def cart_add(product_id: str = Form(...), session: Session = Depends(get_session)):
    product = session.catalog.product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="product not found")
    session.cart.add_one(product)
    return RedirectResponse(url="/cart", status_code=303)


@app.post("/cart/update")
def cart_update(product_id: str = Form(...), delta: int = Form(...), session: Session = Depends(get_session)):
    session.cart.update_quantity(product_id, delta)
    return RedirectResponse(url="/cart", status_code=303)


@app.post("/cart/remove")
def cart_remove(product_id: str = Form(...), session: Session = Depends(get_session)):
    session.cart.remove(product_id)
    return RedirectResponse(url="/cart", status_code=303)


# ---------------- checkout ----------------

@app.post("/checkout")
async def checkout(method: str = Form(...), session: Session = Depends(get_session)):
    order = await session.checkout(method)
    if order is None:
        return RedirectResponse(url="/cart?msg=checkout_failed", status_code=303)
    try:
        generate_order_pdf(order, settings.export_dir)
    except Exception:
        # rebuilt on download
        logger.exception("invoice for %s failed", order.number)
    return RedirectResponse(url=f"/orders/{order.number}", status_code=303)


def _find_order(session: Session, number: str):
    order = next((o for o in session.orders() if o.number == number), None)
    if order is None:
        raise HTTPException(status_code=404, detail="order not found")
    return order


@app.get("/orders", response_class=HTMLResponse)
def orders(request: Request, session: Session = Depends(get_session)):
    return _render(request, session, "orders.html", {"orders": session.orders()})


@app.get("/orders/{number}", response_class=HTMLResponse)
def order_detail(request: Request, number: str, session: Session = Depends(get_session)):
    return _render(request, session, "order.html", {"order": _find_order(session, number)})


@app.get("/orders/{number}/invoice", response_class=FileResponse)
def order_invoice(number: str, session: Session = Depends(get_session)):
    order = _find_order(session, number)
    # only files inside export_dir are served
    p = Path(settings.export_dir) / f"order_{order.number}.pdf"
    if not p.exists():
        p = Path(generate_order_pdf(order, settings.export_dir))
    return FileResponse(str(p), filename=p.name, media_type="application/pdf")
