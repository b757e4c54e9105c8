"""
Receipt Formatting
==================

Receipts come from two tiers:

1. **Generated**: llm_client.generate_receipt() asks an LLM for the text.
2. **Local**: render_local_receipt() builds the same layout from a fixed
   template with no network access.

resolve_receipt() tries the generated tier and substitutes the local
template whenever it comes back empty. The local template is deterministic:
identical input always produces byte-identical text, so a receipt can be
issued even when the generator is down.

Layout:
-------
    *************************
        Up & Above Cafe
    *************************

    Order Details:
    1. 2 x Latte               Rs.178.00
    2. 1 x Croissant            Rs.90.00

    -------------------------
    Subtotal:                  Rs.268.00
    Discount (10%):            -Rs.26.80
    Tax (5%):                   Rs.13.40
    -------------------------
    Total:                     Rs.254.60

       Thank you for dining!
    *************************

Labels are padded to 25 columns and amounts right-aligned in 10. A longer
label (e.g. "1. 1 x Alfredo Pasta (Veg)") or amount widens its column for
the whole receipt, so the amounts always line up. The Discount line only appears for a non-zero discount and the Tax line only
when a tax amount is supplied.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .. import config, llm_client
from ..schemas.receipt import ReceiptInput, ReceiptLine
from .billing import BillTotals, format_percent, round_money
from .cart import LineItem

logger = logging.getLogger(__name__)

LABEL_WIDTH = 25
AMOUNT_WIDTH = 10
STAR_RULE = "*" * 25
DASH_RULE = "-" * 25
FOOTER = "   Thank you for dining!"

SOURCE_GENERATED = "generated"
SOURCE_LOCAL = "local"


@dataclass(frozen=True)
class ResolvedReceipt:
    text: str
    source: str


def _money(amount, currency: str) -> str:
    value = round_money(amount)
    if value < 0:
        return f"-{currency}{-value:.2f}"
    return f"{currency}{value:.2f}"


def _row(label: str, amount: str, label_width: int = LABEL_WIDTH, amount_width: int = AMOUNT_WIDTH) -> str:
    return f"{label:<{label_width}} {amount:>{amount_width}}"


def render_local_receipt(receipt_input: ReceiptInput, currency: Optional[str] = None) -> str:
    """Render the receipt from the fixed template."""
    currency = currency or config.CURRENCY_SYMBOL

    item_rows = [
        (f"{index}. {item.quantity} x {item.name}", _money(item.price * item.quantity, currency))
        for index, item in enumerate(receipt_input.items, start=1)
    ]

    summary_rows = [("Subtotal:", _money(receipt_input.subtotal, currency))]
    if receipt_input.discount > 0:
        discount_amount = round_money(receipt_input.subtotal * receipt_input.discount / 100)
        summary_rows.append((f"Discount ({format_percent(receipt_input.discount)}%):", _money(-discount_amount, currency)))
    if receipt_input.tax_amount:
        rate = format_percent((receipt_input.tax_rate or 0) * 100)
        summary_rows.append((f"Tax ({rate}%):", _money(receipt_input.tax_amount, currency)))

    total_row = ("Total:", _money(receipt_input.total, currency))

    # One width per column for the whole receipt, so every amount ends in the same place
    all_rows = item_rows + summary_rows + [total_row]
    label_width = max([LABEL_WIDTH] + [len(label) for label, _ in all_rows])
    amount_width = max([AMOUNT_WIDTH] + [len(amount) for _, amount in all_rows])

    def row(pair: Tuple[str, str]) -> str:
        return _row(pair[0], pair[1], label_width, amount_width)

    lines = [
        STAR_RULE,
        f"    {receipt_input.venue_name}",
        STAR_RULE,
        "",
        "Order Details:",
    ]
    lines.extend(row(pair) for pair in item_rows)
    lines.append("")
    lines.append(DASH_RULE)
    lines.extend(row(pair) for pair in summary_rows)
    lines.append(DASH_RULE)
    lines.append(row(total_row))
    lines.append("")
    lines.append(FOOTER)
    lines.append(STAR_RULE)

    return "\n".join(lines)


def build_receipt_input(
    items: Iterable[LineItem],
    totals: BillTotals,
    venue_name: Optional[str] = None,
    include_tax: bool = True,
) -> ReceiptInput:
    """Assemble the receipt payload from order lines and computed totals."""
    return ReceiptInput(
        venue_name=venue_name or config.VENUE_NAME,
        items=[ReceiptLine(name=item.name, quantity=item.quantity, price=item.price) for item in items],
        discount=totals.discount_percent,
        subtotal=totals.subtotal,
        total=totals.total,
        tax_rate=totals.tax_rate if include_tax else None,
        tax_amount=totals.tax_amount if include_tax else None,
    )


async def resolve_receipt(
    receipt_input: ReceiptInput,
    use_generator: Optional[bool] = None,
    client=None,
    currency: Optional[str] = None,
) -> ResolvedReceipt:
    """
    Produce receipt text, preferring the generator.

    An empty generated preview is the signal to use the local template.
    This never raises for generator problems.
    """
    if use_generator is None:
        use_generator = config.RECEIPT_GENERATION_ENABLED

    if use_generator:
        preview = await llm_client.generate_receipt(receipt_input, client=client, currency=currency)
        if preview.receipt_preview:
            return ResolvedReceipt(text=preview.receipt_preview, source=SOURCE_GENERATED)
        logger.info("Using local receipt template for %s", receipt_input.venue_name)

    return ResolvedReceipt(text=render_local_receipt(receipt_input, currency), source=SOURCE_LOCAL)
