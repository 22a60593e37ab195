"""Turn raw contact and order bodies into canonical submissions."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union
from schemas import ContactForm, OrderForm, Submission, SubmissionKind

ADDRESS_NOT_PROVIDED = "Not provided"
ITEMS_NOT_SPECIFIED = "Not specified"

# Declared order is the order missing fields are reported in
REQUIRED_FIELDS = {
    SubmissionKind.CONTACT: ("name", "email", "message"),
    SubmissionKind.ORDER: ("name", "email", "phone"),
}

FORMS = {
    SubmissionKind.CONTACT: ContactForm,
    SubmissionKind.ORDER: OrderForm,
}

class SubmissionValidationError(Exception):
    """One or more required fields are missing."""

    def __init__(self, kind: SubmissionKind, missing: list[str]):
        self.kind = kind
        self.missing = missing
        super().__init__(f"The following fields are required: {', '.join(missing)}")

def resolve_name(primary: Optional[str], alias: Optional[str]) -> Optional[str]:
    return primary or alias or None

def parse_quantity(value: Optional[str]) -> Union[int, str]:
    """Whole-number quantities become ints; zero or absent means 1.

    Anything else (``"2.5"``, ``"two"``) is kept as the text that was sent.
    """
    if not value:
        return 1
    try:
        return int(value) or 1
    except ValueError:
        return value

def resolve_items(items: Optional[str], product_name: Optional[str], quantity: Optional[str]) -> str:
    """Explicit ``items`` wins; otherwise build ``"<product> x <qty>"``."""
    if items:
        return items
    if product_name:
        return f"{product_name} x {parse_quantity(quantity)}"
    return ITEMS_NOT_SPECIFIED

def parse_form(raw: Mapping[str, Any], kind: SubmissionKind) -> Union[ContactForm, OrderForm]:
    return FORMS[kind].model_validate(raw)

def missing_fields(values: Mapping[str, Optional[str]], kind: SubmissionKind) -> list[str]:
    return [field for field in REQUIRED_FIELDS[kind] if not values.get(field)]

def normalize(raw: Mapping[str, Any], kind: SubmissionKind, now: Optional[datetime] = None) -> Submission:
    """Build a Submission from a raw request body.

    Raises SubmissionValidationError listing every missing required field.
    Bodies that cannot be read as the expected shape at all raise pydantic's
    ValidationError.
    """
    form = parse_form(raw, kind)
    created_at = now or datetime.now(timezone.utc)

    if isinstance(form, ContactForm):
        values = {"name": form.name, "email": form.email, "message": form.message}
        missing = missing_fields(values, kind)
        if missing:
            raise SubmissionValidationError(kind, missing)
        return Submission(
            kind=kind,
            name=form.name,
            email=form.email,
            phone=form.phone or None,
            details=form.message,
            address=ADDRESS_NOT_PROVIDED,
            created_at=created_at,
        )

    name = resolve_name(form.name, form.customer_name)
    values = {"name": name, "email": form.email, "phone": form.phone}
    missing = missing_fields(values, kind)
    if missing:
        raise SubmissionValidationError(kind, missing)
    return Submission(
        kind=kind,
        name=name,
        email=form.email,
        phone=form.phone,
        details=resolve_items(form.items, form.product_name, form.quantity),
        address=form.address or ADDRESS_NOT_PROVIDED,
        notes=form.notes or "",
        created_at=created_at,
        product_id=form.product_id or None,
        product_name=form.product_name or None,
        quantity=parse_quantity(form.quantity) if form.product_name or form.quantity else None,
    )
