"""Decoding of the structured-extraction payload returned by the language model.

The model is asked for a bare JSON object but routinely wraps it in a
Markdown code fence or returns it as a JSON-encoded string. Decoding is a
pure function that yields either a ``ParsedReceipt`` or an
``ExtractionFallback`` carrying the reason; ``resolve_extraction`` turns
either variant into the final ``ExtractionResult``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from budgetbuddy.domain.currency.value_objects import DEFAULT_RECEIPT_CURRENCY
from budgetbuddy.domain.receipts.services.receipt_date_parser import (
    find_receipt_date,
)
from budgetbuddy.domain.receipts.value_objects import (
    FALLBACK_DESCRIPTION,
    MAX_DESCRIPTION_LENGTH,
    ExtractionResult,
)
from budgetbuddy.domain.shared.time import format_receipt_date, today_local


@dataclass(frozen=True)
class ParsedReceipt:
    """Fields the model returned, coerced but not yet defaulted."""

    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    category_name: Optional[str] = None


@dataclass(frozen=True)
class ExtractionFallback:
    """The payload could not be trusted; the fixed fallback result applies."""

    reason: str


ReceiptDecoding = Union[ParsedReceipt, ExtractionFallback]


def strip_code_fence(text: str) -> str:
    """Remove Markdown code-fence markers and surrounding whitespace."""
    return text.replace("```json", "").replace("```", "").strip()


def coerce_amount(value: Any) -> Optional[Decimal]:
    """
    Accept a JSON number, or a string using either ``.`` or ``,`` as decimal
    separator. Anything else yields None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Decimal)):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.replace(",", ".").strip()
        if not cleaned:
            return None
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite():
        return None
    return amount


def _optional_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


def decode_receipt_payload(payload: Optional[str]) -> ReceiptDecoding:
    """
    Decode the model's answer into receipt fields.

    Parameters
    ----------
    payload
        The ``response`` text of the inference envelope

    Returns
    -------
    ParsedReceipt when the payload is a JSON object, ExtractionFallback otherwise
    """
    if payload is None:
        return ExtractionFallback("inference payload missing")

    text = strip_code_fence(payload)

    # Some models JSON-encode the object a second time
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        try:
            text = json.loads(text)
        except json.JSONDecodeError as e:
            return ExtractionFallback(f"quoted payload is not valid JSON: {e.msg}")
        if not isinstance(text, str):
            return ExtractionFallback("quoted payload did not decode to text")
        text = strip_code_fence(text)

    try:
        data = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as e:
        return ExtractionFallback(f"payload is not valid JSON: {e.msg}")
    except RecursionError:
        return ExtractionFallback("payload is nested too deeply")

    if not isinstance(data, dict):
        return ExtractionFallback(
            f"payload is a JSON {type(data).__name__}, expected an object",
        )

    currency = _optional_text(data.get("currency"))
    return ParsedReceipt(
        amount=coerce_amount(data.get("amount")),
        currency=currency.strip().upper() if currency else None,
        description=_optional_text(data.get("description")),
        date=_optional_text(data.get("date")),
        category_name=_optional_text(data.get("categoryName")),
    )


def resolve_extraction(
    decoding: ReceiptDecoding,
    raw_text: str,
    receipt_image_url: Optional[str] = None,
    today: Optional[date] = None,
) -> ExtractionResult:
    """
    Apply the defaulting rules to a decoded payload.

    Missing currency becomes the default receipt currency, an empty
    description the placeholder, and a missing date is looked up in the raw
    text before falling back to today.
    """
    if isinstance(decoding, ExtractionFallback):
        return ExtractionResult.fallback(raw_text, receipt_image_url, today)

    description = (decoding.description or "").strip()[:MAX_DESCRIPTION_LENGTH]
    receipt_date = (
        decoding.date
        or find_receipt_date(raw_text)
        or format_receipt_date(today or today_local())
    )

    return ExtractionResult(
        amount=decoding.amount,
        currency=decoding.currency or DEFAULT_RECEIPT_CURRENCY,
        description=description or FALLBACK_DESCRIPTION,
        date=receipt_date,
        raw_text=raw_text,
        category_name=decoding.category_name,
        receipt_image_url=receipt_image_url,
    )
