from typing import List

from storefront.services.coupons.store import normalize_phone

PHONE_DIGITS = 11


def validate_checkout_form(form) -> List[str]:
    """names of the checkout fields that still block confirmation (empty list = ok)."""
    missing = []
    if not form.payment_method:
        missing.append("payment_method")
    if not form.delivery_type:
        missing.append("delivery_type")
    if not (form.customer_name or "").strip():
        missing.append("customer_name")
    if len(normalize_phone(form.customer_phone)) != PHONE_DIGITS:
        missing.append("customer_phone")
    if form.delivery_type == "delivery":
        for field in ("street", "house_number", "neighborhood"):
            if not (getattr(form, field) or "").strip():
                missing.append(field)
    return missing


def full_address(form) -> str:
    """'Rua X, Nº 10, Apto 2 - Centro' for deliveries, empty for pickups."""
    if form.delivery_type != "delivery":
        return ""
    complement = form.complement.strip()
    return (
        f"{form.street.strip()}, Nº {form.house_number.strip()}"
        f"{', ' + complement if complement else ''} - {form.neighborhood.strip()}"
    )
