"""
Receipt Schemas for Cafe POS
============================

ReceiptInput is the exact payload handed to the receipt generator. It
accepts both snake_case and camelCase keys (venue_name / venueName) so the
same model serves Python callers and JSON clients.

ReceiptPreview is the generator's structured response. An empty
``receipt_preview`` is not an error: it tells the caller to render the local
fallback template instead.
"""

from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..services.billing import clamp_discount


class ReceiptLine(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)


class ReceiptInput(BaseModel):
    """
    Order data for one receipt.

    Attributes:
        venue_name: Receipt header
        items: Lines with unit price; line totals are derived
        discount: Discount percentage, clamped to 0-20
        subtotal: Item total before discount and tax
        total: Amount payable
        tax_rate: Optional fractional tax rate (0.05 = 5%)
        tax_amount: Optional tax amount; a Tax line is printed when non-zero
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    venue_name: str
    items: List[ReceiptLine]
    discount: Decimal = Decimal("0")
    subtotal: Decimal
    total: Decimal
    tax_rate: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None

    @field_validator("discount", mode="before")
    @classmethod
    def clamp(cls, value):
        return clamp_discount(value)


class ReceiptPreview(BaseModel):
    """Structured response from the receipt generator."""

    receipt_preview: str = Field(
        default="",
        description="The complete formatted receipt as plain monospaced text.",
    )


class ReceiptOut(BaseModel):
    """Receipt returned to API clients, with where the text came from."""

    text: str
    source: Literal["generated", "local"]
