from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Incoming request shapes. Everything is optional here; required fields
# are checked by the normalizer so all missing ones can be reported together.

class ContactForm(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, str_strip_whitespace=True)

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None

class OrderForm(BaseModel):
    """Order body in either the current or the legacy storefront format.

    Current: ``name``, ``items``. Legacy: ``customerName``, ``productName``
    and ``quantity`` (plus an optional ``productId``).
    """
    model_config = ConfigDict(
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    name: Optional[str] = None
    customer_name: Optional[str] = Field(None, alias="customerName")
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    items: Optional[str] = None
    product_id: Optional[str] = Field(None, alias="productId")
    product_name: Optional[str] = Field(None, alias="productName")
    # Free text; only used to describe the order
    quantity: Optional[str] = None
    notes: Optional[str] = None

class SubmissionKind(str, Enum):
    CONTACT = "contact"
    ORDER = "order"

class Submission(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: SubmissionKind
    name: str
    email: str
    phone: Optional[str] = None
    # Message text for contacts, requested products for orders
    details: str
    address: str
    notes: str = ""
    created_at: datetime
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    # Whole numbers are stored as int, anything else as the text sent
    quantity: Optional[Union[int, str]] = None

class OutboundMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    recipient: str
    subject: str
    body: str

# Stored records

class OrderRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    # Legacy readers still look for customerName
    customer_name: str
    email: str
    phone: str
    address: str
    items: str
    notes: str = ""
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    quantity: Optional[Union[int, str]] = None
    status: str = "pending"
    order_date: datetime

class User(BaseModel):
    id: int
    name: str
    email: str

class UserIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
