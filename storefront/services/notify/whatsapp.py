"""
Order message for the store's WhatsApp chat.

The shopper's browser opens a wa.me deep link carrying this text, so the
store receives every order as a chat message.
"""
from typing import Optional
from urllib.parse import quote

from storefront.core.config import settings
from .money import format_brl

PAYMENT_LABELS = {
    "cartao": "💳 Cartão",
    "dinheiro": "💵 Dinheiro",
    "pix": "📱 PIX",
}

# combo sides: fries keep their own icon, anything else is a drink
FRIES_ADDON_ID = "batata"

# characters encodeURIComponent leaves alone
_URI_SAFE = "-_.!~*'()"


def _side_label(side: dict) -> str:
    icon = "🍟" if side.get("addon_id") == FRIES_ADDON_ID else "🥤"
    return f"{icon} {side['name']}"


def _item_line(item) -> str:
    line = f"\n➡ {item.quantity}x {item.product_name}"
    addons = item.addons or []
    sides = [a for a in addons if a.get("is_side")]
    if sides:
        line += f" ({', '.join(_side_label(s) for s in sides)})"
    elif item.extras:
        line += f" ({item.extras})"
    extra = [a for a in addons if not a.get("is_side")]
    if extra:
        listed = ", ".join(f"{a['quantity']}x {a['name']}" for a in extra)
        line += f"\n   ➕ Adicionais: {listed}"
    return line


def compose_order_message(order, eta_minutes: Optional[int] = None) -> str:
    eta = settings.DELIVERY_ETA_MINUTES if eta_minutes is None else eta_minutes

    message = f"Pedido nº {order.number}\n\n👤 *{order.customer_name}*\n📞 {order.customer_phone}\n\nItens:\n"
    for item in order.items:
        message += _item_line(item)

    message += f"\n\n{PAYMENT_LABELS.get(order.payment_method, order.payment_method)}"
    if order.coupon_code:
        message += f"\n🏷️ Cupom: {order.coupon_code} (-{format_brl(order.discount)})"
    elif order.discount and order.discount > 0:
        message += f"\n🎁 Desconto: -{format_brl(order.discount)}"

    if order.delivery_type == "delivery":
        message += f"\n\n🛵 Delivery (taxa de: {format_brl(order.delivery_fee)})"
        if order.address:
            message += f"\n\n🏠 {order.address}"
        if order.reference_point:
            message += f"\n📍 Ref: {order.reference_point}"
        message += f"\n\n(Estimativa: {eta} minutos)"
    else:
        message += "\n\n🏪 Retirada na loja"

    if order.observation:
        message += f"\n\n📝 *Obs:* {order.observation}"

    message += f"\n\nTotal: {format_brl(order.total)}"
    message += "\n\nObrigado pela preferência, se precisar de algo é só chamar! 😉"
    return message


def whatsapp_link(message: str, phone: Optional[str] = None) -> str:
    phone = phone or settings.STORE_WHATSAPP_PHONE
    return f"https://wa.me/{phone}?text={quote(message, safe=_URI_SAFE)}"
