"""
Receipt generation via OpenAI.

The generator asks an LLM for a nicely formatted receipt. It is strictly
best-effort: every failure mode (missing API key, network error, timeout,
empty answer, or text that breaks the formatting rules) comes back as an
empty ReceiptPreview, which tells the caller to render the local template
in services/receipt.py. Nothing in here raises to the caller.
"""

import asyncio
import logging
import os
from typing import Optional

import instructor
from openai import AsyncOpenAI

from . import config
from .schemas.receipt import ReceiptInput, ReceiptPreview
from .services.billing import format_percent, round_money

logger = logging.getLogger(__name__)

FORBIDDEN_CURRENCY_SYMBOLS = ("$", "₹")

RECEIPT_SYSTEM_PROMPT = """
You are a point-of-sale (POS) assistant for a cafe. Your task is to generate a receipt preview.
The receipt must be well-formatted, easy to read, and professional.

Receipt structure:
1. A header with the venue name.
2. An "Order Details" section with a numbered list of items. Each line shows the quantity,
   the item name, and the line total (quantity * unit price).
3. A summary section with "Subtotal", "Discount" (only if applicable), "Tax" (only if given),
   and the final "Total".
4. A footer, for example a thank-you message.

Formatting rules:
- Lay the receipt out for a monospaced font.
- Right-align every price.
- Separate the summary section with lines.
- CRITICAL: If the discount percentage is 0, do NOT show a "Discount" line at all.
- CRITICAL: Always use "{currency}" as the currency symbol. Never use "$" or "₹".

Example with a discount (venue "Up & Above Cafe"):
*************************
    Up & Above Cafe
*************************

Order Details:
1. 2 x Latte               {currency}178.00
2. 1 x Croissant            {currency}90.00

-------------------------
Subtotal:                 {currency}268.00
Discount (10%):           -{currency}26.80
-------------------------
Total:                    {currency}241.20

   Thank you for dining!
*************************

Return the finished receipt text in the "receipt_preview" field.
""".strip()


def build_receipt_prompt(receipt_input: ReceiptInput, currency: str) -> str:
    """Render the order data section of the request."""
    lines = [
        f"Venue Name: {receipt_input.venue_name}",
        f"Discount Percentage: {format_percent(receipt_input.discount)}%",
        f"Subtotal: {currency}{round_money(receipt_input.subtotal)}",
    ]
    if receipt_input.tax_amount:
        rate = format_percent((receipt_input.tax_rate or 0) * 100)
        lines.append(f"Tax ({rate}%): {currency}{round_money(receipt_input.tax_amount)}")
    lines.append(f"Total: {currency}{round_money(receipt_input.total)}")
    lines.append("")
    lines.append("Items:")
    for item in receipt_input.items:
        lines.append(f"- {item.quantity} x {item.name} (at {currency}{round_money(item.price)} each)")
    lines.append("")
    lines.append(f"Generate the receipt using {receipt_input.venue_name} as the header.")
    return "\n".join(lines)


def is_usable_receipt(text: Optional[str], receipt_input: ReceiptInput) -> bool:
    """
    Check generated text against the hard formatting rules.

    Rejects empty text, foreign currency symbols, and a Discount line on an
    undiscounted order.
    """
    if not text or not text.strip():
        return False
    if any(symbol in text for symbol in FORBIDDEN_CURRENCY_SYMBOLS):
        return False
    if receipt_input.discount == 0:
        for line in text.splitlines():
            if line.strip().lower().startswith("discount"):
                return False
    return True


def get_instructor_client() -> instructor.AsyncInstructor:
    """Get an instructor-wrapped async OpenAI client."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ValueError("OPENAI_API_KEY not set")
    # Retries are disabled; a failed call falls back to the local template instead
    return instructor.from_openai(AsyncOpenAI(api_key=api_key, max_retries=0))


async def generate_receipt(
    receipt_input: ReceiptInput,
    client: Optional[instructor.AsyncInstructor] = None,
    model: Optional[str] = None,
    timeout: Optional[float] = None,
    currency: Optional[str] = None,
) -> ReceiptPreview:
    """
    Ask the LLM for a formatted receipt.

    Args:
        receipt_input: Order data for the receipt
        client: Optional pre-created instructor client
        model: Model name (defaults to config.RECEIPT_MODEL)
        timeout: Deadline in seconds (defaults to config.RECEIPT_TIMEOUT_SECONDS)
        currency: Currency literal (defaults to config.CURRENCY_SYMBOL)

    Returns:
        ReceiptPreview with the text, or with an empty string when the
        generated receipt is unavailable or unusable
    """
    model = model or config.RECEIPT_MODEL
    timeout = config.RECEIPT_TIMEOUT_SECONDS if timeout is None else timeout
    currency = currency or config.CURRENCY_SYMBOL

    try:
        if client is None:
            client = get_instructor_client()

        result = await asyncio.wait_for(
            client.chat.completions.create(
                model=model,
                response_model=ReceiptPreview,
                messages=[
                    {"role": "system", "content": RECEIPT_SYSTEM_PROMPT.format(currency=currency)},
                    {"role": "user", "content": build_receipt_prompt(receipt_input, currency)},
                ],
                max_retries=0,
                temperature=0.0,
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning("Receipt generation timed out after %.1fs, falling back to local format", timeout)
        return ReceiptPreview(receipt_preview="")
    except Exception as e:
        logger.error("AI receipt generation failed, falling back to local format: %s", e)
        return ReceiptPreview(receipt_preview="")

    text = result.receipt_preview if result is not None else ""
    if not is_usable_receipt(text, receipt_input):
        logger.warning("Generated receipt was empty or broke formatting rules, discarding it")
        logger.debug("Discarded receipt text: %s", (text or "(empty)")[:500])
        return ReceiptPreview(receipt_preview="")

    return ReceiptPreview(receipt_preview=text)
