from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from aiogram import Router, html
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import FSInputFile, Message, ReplyKeyboardRemove

from sonumarket.bot.keyboards import flow_kb, main_kb, payment_kb
from sonumarket.bot.parsers import (
    command_args,
    parse_cv_details,
    parse_date,
    parse_payment,
    parse_price_range,
    parse_time,
    pick,
)
from sonumarket.bot.states import Flow
from sonumarket.catalog.models import Product, RedactionOption
from sonumarket.catalog.query import InvalidFilterError
from sonumarket.constants import CONFIGURATOR_STEPS, PAYMENT_CHANNELS, TIME_SLOTS
from sonumarket.profile import UserProfile
from sonumarket.services.invoice_pdf import generate_order_pdf
from sonumarket.session import Session
from sonumarket.utils.formatters import money
from sonumarket.wizard import flows
from sonumarket.wizard.machine import Retreat, SubmitFailure, WizardMachine, WizardStatus

logger = logging.getLogger(__name__)

router = Router()

# user id -> the flow that user is walking through
Wizards = Dict[int, WizardMachine]

FLOW_TITLES = {
    flows.CONFIGURATOR: "💻 Configurateur laptop",
    flows.CV_PURCHASE: "📄 CV professionnel",
    flows.REDACTION: "✍️ Rédaction & correction",
    flows.BOOKING: "🛠 Réservation de service",
}

STEP_LABELS = {
    "chassis": "Châssis",
    "cpu-mobile": "Processeur",
    "ram-mobile": "Mémoire vive",
    "storage": "Stockage",
    "os": "Système",
    "template": "Modèle de CV",
    "details": "Vos informations",
    "photo": "Photo (facultatif)",
    "option": "Prestation",
    "instructions": "Consignes (facultatif)",
    "upload": "Document à traiter",
    "service": "Service",
    "date": "Date",
    "time": "Heure",
    "payment": "Paiement",
}

STEP_HINTS = {
    "details": "Envoyez: Nom complet | Poste | Email | Téléphone | Années d'expérience | Compétences | Résumé",
    "photo": "Envoyez une photo, ou /next pour passer.",
    "instructions": "Écrivez vos consignes, ou /next pour passer.",
    "upload": "Envoyez le fichier (PDF, DOCX...).",
    "date": "Envoyez une date dans les 7 prochains jours (AAAA-MM-JJ).",
}


# ---------------- rendering ----------------

def _choices(session: Session, step: str) -> Optional[List[Tuple[Any, str]]]:
    if step in CONFIGURATOR_STEPS:
        return [(p, f"{p.name}: {money(p.price)}") for p in session.query.parts_for(step)]
    if step == "template":
        return [(t, f"{t.name} ({t.style}): {money(t.price)}") for t in session.catalog.cv_templates()]
    if step == "option":
        return [(o, f"{o.title}: dès {money(o.base_price)}") for o in session.catalog.redaction_options()]
    if step == "service":
        return [(s, f"{s.name} ({s.duration} min): {money(s.price)}") for s in session.catalog.services()]
    if step == "time":
        return [(t, t) for t in TIME_SLOTS]
    if step == "payment":
        return [(k, label) for k, label in PAYMENT_CHANNELS.items()]
    return None


def _describe(value: Any) -> str:
    if isinstance(value, RedactionOption):
        return value.title
    if isinstance(value, flows.Attachment):
        return f"📎 {value.name}"
    if isinstance(value, dict):
        return value.get("full_name", "")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return PAYMENT_CHANNELS.get(value, value)
    return getattr(value, "name", str(value))


def _prompt(session: Session, machine: WizardMachine) -> str:
    step = machine.current_step
    title = FLOW_TITLES.get(machine.flow.name, machine.flow.name)
    lines = [
        f"<b>{title}</b>",
        f"Étape {machine.current_index + 1}/{len(machine.steps)}: <b>{STEP_LABELS.get(step, step)}</b>",
    ]

    choices = _choices(session, step)
    if choices:
        lines.append("")
        for i, (_, label) in enumerate(choices, start=1):
            lines.append(f"{i}. {html.quote(label)}")
    if step in STEP_HINTS:
        lines.append(STEP_HINTS[step])

    current = machine.selections.get(step)
    if current is not None:
        lines.append(f"\nSélection: {html.quote(_describe(current))}")
    total = machine.amount()
    if total:
        lines.append(f"Montant: <b>{money(total)}</b>")
    if machine.is_last_step and machine.can_advance():
        lines.append("\n/next pour valider.")
    return "\n".join(lines)


def _prompt_kb(machine: WizardMachine):
    if machine.current_step == "payment":
        return payment_kb()
    return flow_kb()


def _cart_text(session: Session) -> str:
    cart = session.cart
    if cart.is_empty:
        return "🛒 Votre panier est vide."
    lines = ["🛒 <b>Panier</b>"]
    for line in cart.lines:
        lines.append(
            f"• {html.quote(line.product.name)} ×{line.quantity} = {money(line.line_total)} "
            f"<code>{html.quote(line.id)}</code>"
        )
    s = cart.summary()
    lines.append("")
    lines.append(f"Sous-total: {money(s.subtotal)}")
    lines.append(f"Livraison: {'Offerte' if s.shipping == 0 else money(s.shipping)}")
    lines.append(f"<b>Total: {money(s.total)}</b>")
    return "\n".join(lines)


def _product_list(products: Sequence[Product], title: str) -> str:
    if not products:
        return f"{title}\nAucun produit ne correspond."
    lines = [title]
    for p in products:
        lines.append(f"• {html.quote(p.name)}: {money(p.price)} <code>{html.quote(p.id)}</code>")
    return "\n".join(lines)


# ---------------- general ----------------

@router.message(Command("start"))
async def cmd_start(message: Message, session: Session):
    if session.user is None and message.from_user:
        u = message.from_user
        session.login(UserProfile(id=str(u.id), name=u.full_name, email=""))
    await message.answer("✅ Bienvenue sur SonuMarket", reply_markup=main_kb())


@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext, wizards: Wizards):
    wizards.pop(message.from_user.id, None)
    await state.clear()
    await message.answer("❎ Annulé.", reply_markup=main_kb())


@router.message(Command("help"))
async def cmd_help(message: Message):
    text = (
        "<b>SonuMarket: commandes</b>\n\n"
        "<b>Catalogue</b>\n"
        "/catalog [gaming|laptop|components|peripherals|all]\n"
        "/price MIN MAX: filtrer par prix\n"
        "/price: réinitialiser le prix\n"
        "/search TEXTE: rechercher\n"
        "/docs: documents numériques\n\n"
        "<b>Panier</b>\n"
        "/add ID, /plus ID, /minus ID, /remove ID\n"
        "/cart: afficher\n"
        "/checkout momo|airtel: payer + facture PDF\n"
        "/orders: historique\n\n"
        "<b>Parcours guidés</b>\n"
        "/configurator, /cv, /redaction, /booking\n"
        "/next, /back, /reset, /clear, /cancel\n\n"
        "<b>Compte</b>\n"
        "/wishlist [ID], /logout\n"
    )
    await message.answer(text)


@router.message(Command("logout"))
async def cmd_logout(message: Message, session: Session):
    session.logout()
    await message.answer("👋 Déconnecté.", reply_markup=ReplyKeyboardRemove())


# ---------------- catalog ----------------

@router.message(Command("catalog"))
async def cmd_catalog(message: Message, session: Session):
    args = command_args(message.text)
    if args:
        session.browse.select_category(args[0].lower())
    products = session.query.query(session.browse.spec)
    spec = session.browse.spec
    title = f"🗂 <b>Catalogue</b> ({html.quote(spec.category)}, {money(spec.price_min)} à {money(spec.price_max)})"
    await message.answer(_product_list(products, title))


@router.message(Command("price"))
async def cmd_price(message: Message, session: Session):
    args = command_args(message.text)
    if not args:
        session.browse.reset_prices()
        await message.answer("✅ Filtre de prix réinitialisé.")
        return
    try:
        low, high = parse_price_range(args)
        session.browse.set_price_range(low, high)
    except InvalidFilterError as e:
        await message.answer(f"❌ Filtre invalide: {html.quote(str(e))}")
        return
    except ValueError as e:
        await message.answer(f"❌ {html.quote(str(e))}\nExemple: /price 50000 900000")
        return
    products = session.query.query(session.browse.spec)
    await message.answer(_product_list(products, f"💰 {money(low)} à {money(high)}"))


@router.message(Command("search"))
async def cmd_search(message: Message, session: Session):
    text = " ".join(command_args(message.text))
    if not text:
        await message.answer("Exemple: /search rtx")
        return
    await message.answer(_product_list(session.query.search(text), f"🔎 «{html.quote(text)}»"))


@router.message(Command("docs"))
async def cmd_docs(message: Message, session: Session):
    args = command_args(message.text)
    category = args[0] if args else "all"
    counts = ", ".join(f"{html.quote(c)} ({n})" for c, n in session.query.digital_category_counts())
    products = session.query.digital(category)
    await message.answer(_product_list(products, f"📚 <b>Documents</b>\n{counts}"))


# ---------------- cart ----------------

def _arg_product(session: Session, message: Message) -> Optional[Product]:
    args = command_args(message.text)
    return session.catalog.product(args[0]) if args else None


@router.message(Command("add"))
async def cmd_add(message: Message, session: Session):
    product = _arg_product(session, message)
    if product is None:
        await message.answer("❌ Produit introuvable. Exemple: /add 1")
        return
    session.cart.add_one(product)
    await message.answer(f"✅ Ajouté: {html.quote(product.name)}\n\n{_cart_text(session)}")


@router.message(Command("plus"))
async def cmd_plus(message: Message, session: Session):
    args = command_args(message.text)
    if args:
        session.cart.update_quantity(args[0], 1)
    await message.answer(_cart_text(session))


@router.message(Command("minus"))
async def cmd_minus(message: Message, session: Session):
    args = command_args(message.text)
    if args:
        session.cart.update_quantity(args[0], -1)
    await message.answer(_cart_text(session))


@router.message(Command("remove"))
async def cmd_remove(message: Message, session: Session):
    args = command_args(message.text)
    if args:
        session.cart.remove(args[0])
    await message.answer(_cart_text(session))


@router.message(Command("cart"))
async def cmd_cart(message: Message, session: Session):
    await message.answer(_cart_text(session))


@router.message(Command("checkout"))
async def cmd_checkout(message: Message, session: Session):
    if session.cart.is_empty:
        await message.answer("🛒 Votre panier est vide.")
        return
    args = command_args(message.text)
    method = parse_payment(" ".join(args)) if args else None
    if method is None:
        await message.answer("Choisissez le paiement: /checkout momo ou /checkout airtel", reply_markup=payment_kb())
        return

    await message.answer(f"⏳ Paiement de {money(session.cart.total())} via {PAYMENT_CHANNELS[method]}...")
    order = await session.checkout(method)
    if order is None:
        await message.answer("⚠️ Paiement non confirmé. Votre panier est conservé.")
        return

    await message.answer(f"✅ Commande {order.number} confirmée: {money(order.total)}", reply_markup=main_kb())
    try:
        pdf_path = generate_order_pdf(order)
        await message.answer_document(FSInputFile(pdf_path))
    except Exception as e:
        logger.exception("invoice for %s failed", order.number)
        await message.answer(f"❌ Erreur PDF: {html.quote(str(e))}")


@router.message(Command("orders"))
async def cmd_orders(message: Message, session: Session):
    orders = session.orders()
    if not orders:
        await message.answer("Aucune commande pour l'instant.")
        return
    lines = ["📦 <b>Commandes</b>"]
    for o in orders:
        lines.append(f"• {o.number} ({o.created_at}): {money(o.total)}, {o.status}")
    await message.answer("\n".join(lines))


@router.message(Command("wishlist"))
async def cmd_wishlist(message: Message, session: Session):
    if session.user is None:
        await message.answer("Connectez-vous d'abord: /start")
        return
    args = command_args(message.text)
    if args:
        added = session.toggle_wishlist(args[0])
        await message.answer("❤️ Ajouté aux favoris." if added else "💔 Retiré des favoris.")
        return
    await message.answer(_product_list(session.wishlist_products(), "❤️ <b>Favoris</b>"))


# ---------------- guided flows ----------------

async def _open(message: Message, state: FSMContext, session: Session, wizards: Wizards, machine: WizardMachine):
    wizards[message.from_user.id] = machine
    await state.set_state(Flow.active)
    await message.answer(_prompt(session, machine), reply_markup=_prompt_kb(machine))


@router.message(Command("configurator"))
async def cmd_configurator(message: Message, state: FSMContext, session: Session, wizards: Wizards):
    await _open(message, state, session, wizards, session.open_configurator())


@router.message(Command("cv"))
async def cmd_cv(message: Message, state: FSMContext, session: Session, wizards: Wizards):
    await _open(message, state, session, wizards, session.open_cv_purchase())


@router.message(Command("redaction"))
async def cmd_redaction(message: Message, state: FSMContext, session: Session, wizards: Wizards):
    await _open(message, state, session, wizards, session.open_redaction())


@router.message(Command("booking"))
async def cmd_booking(message: Message, state: FSMContext, session: Session, wizards: Wizards):
    await _open(message, state, session, wizards, session.open_booking())


async def _close(message: Message, state: FSMContext, wizards: Wizards) -> None:
    wizards.pop(message.from_user.id, None)
    await state.clear()


@router.message(Flow.active, Command("next"))
async def flow_next(message: Message, state: FSMContext, session: Session, wizards: Wizards):
    machine = wizards.get(message.from_user.id)
    if machine is None:
        await state.clear()
        return

    submitting = machine.is_last_step
    if submitting and machine.can_advance():
        await message.answer("⏳ Validation en cours...")
    if not await machine.advance():
        await message.answer("⚠️ Complétez cette étape d'abord.\n\n" + _prompt(session, machine))
        return

    if machine.status is WizardStatus.COMPLETE:
        ref = machine.state.last_outcome.reference or ""
        await _close(message, state, wizards)
        if machine.flow.name == flows.CONFIGURATOR:
            await message.answer(f"✅ Configuration ajoutée au panier ({ref}).\n\n{_cart_text(session)}", reply_markup=main_kb())
        else:
            await message.answer(f"✅ Demande enregistrée. Référence: <code>{html.quote(ref)}</code>", reply_markup=main_kb())
        return

    if submitting and isinstance(machine.state.last_outcome, SubmitFailure):
        await message.answer("⚠️ Paiement non confirmé. Réessayez avec /next ou changez de moyen de paiement.")
    await message.answer(_prompt(session, machine), reply_markup=_prompt_kb(machine))


@router.message(Flow.active, Command("back"))
async def flow_back(message: Message, state: FSMContext, session: Session, wizards: Wizards):
    machine = wizards.get(message.from_user.id)
    if machine is None:
        await state.clear()
        return
    result = machine.retreat()
    if result is Retreat.REJECTED:
        await message.answer("⏳ Paiement en cours, patientez.")
    elif result is Retreat.EXIT_FLOW:
        await _close(message, state, wizards)
        await message.answer("❎ Parcours fermé.", reply_markup=main_kb())
    else:
        await message.answer(_prompt(session, machine), reply_markup=_prompt_kb(machine))


@router.message(Flow.active, Command("reset"))
async def flow_reset(message: Message, session: Session, wizards: Wizards):
    machine = wizards.get(message.from_user.id)
    if machine is not None and machine.reset():
        await message.answer("🔄 Parcours réinitialisé.\n\n" + _prompt(session, machine), reply_markup=_prompt_kb(machine))


@router.message(Flow.active, Command("clear"))
async def flow_clear(message: Message, session: Session, wizards: Wizards):
    machine = wizards.get(message.from_user.id)
    if machine is None:
        return
    if machine.clear(machine.current_step):
        await message.answer("🗑 Fichier retiré.\n\n" + _prompt(session, machine))
    else:
        await message.answer("⚠️ Rien à retirer à cette étape.")


def _value_from_message(session: Session, step: str, message: Message) -> Any:
    if message.document:
        d = message.document
        return flows.Attachment(d.file_name or "document", d.file_id, d.file_size or 0)
    if message.photo:
        p = message.photo[-1]
        return flows.Attachment("photo.jpg", p.file_id, p.file_size or 0)

    text = (message.text or "").strip()
    if not text:
        return None
    if step == "details":
        return parse_cv_details(text)
    if step == "instructions":
        return text
    if step == "date":
        return parse_date(text)
    if step == "time":
        return parse_time(text) or pick(text, TIME_SLOTS, key=lambda t: t)
    if step == "payment":
        return parse_payment(text) or pick(text, list(PAYMENT_CHANNELS), key=lambda k: k)

    choices = _choices(session, step)
    if choices is None:
        return None
    return pick(text, [value for value, _ in choices])


@router.message(Flow.active)
async def flow_input(message: Message, state: FSMContext, session: Session, wizards: Wizards):
    machine = wizards.get(message.from_user.id)
    if machine is None:
        await state.clear()
        return
    if (message.text or "").startswith("/"):
        await message.answer("Commande inconnue dans ce parcours. /next, /back ou /cancel")
        return

    step = machine.current_step
    value = _value_from_message(session, step, message)
    if value is None or not machine.select(step, value):
        await message.answer("❌ Choix invalide.\n\n" + _prompt(session, machine), reply_markup=_prompt_kb(machine))
        return
    await message.answer("✅ " + _prompt(session, machine), reply_markup=_prompt_kb(machine))
