"""
Checkout form checks.

Each check returns a dict with a ``passed`` flag and a human readable
``reason`` so callers can show the message without parsing exceptions.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

REQUIRED_ADDRESS_FIELDS = (
    "first_name",
    "last_name",
    "address_line1",
    "city",
    "state",
    "postal_code",
    "country",
)

_LABELS = {
    "first_name": "first name",
    "last_name": "last name",
    "address_line1": "address",
    "city": "city",
    "state": "state",
    "postal_code": "zip code",
    "country": "country",
    "card_number": "card number",
    "card_expiry": "expiry date",
    "cvc": "CVC",
}

CARD_NUMBER_PATTERN = r"^\d{12,19}$"
EXPIRY_PATTERN = r"^(0[1-9]|1[0-2])/\d{2}$"
CVC_PATTERN = r"^\d{3,4}$"


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check_address(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Verify the required shipping fields are present.

    Returns:
        dict: {
            'passed': bool,
            'reason': str,
            'missing_fields': list[str]
        }
    """
    missing = [field for field in REQUIRED_ADDRESS_FIELDS if _blank(data.get(field))]
    if not missing:
        return {"passed": True, "reason": "Address complete", "missing_fields": []}

    labels = ", ".join(_LABELS[field] for field in missing)
    return {
        "passed": False,
        "reason": f"Please fill in: {labels}",
        "missing_fields": missing,
    }


def check_payment_card(number: str | None, expiry: str | None, cvc: str | None) -> dict[str, Any]:
    """
    Check the optional card form.

    All three fields blank means no card was entered, which passes; a
    partially filled form fails on the missing or malformed fields.
    """
    values = {"card_number": number, "card_expiry": expiry, "cvc": cvc}
    if all(_blank(v) for v in values.values()):
        return {"passed": True, "reason": "No card supplied", "invalid_fields": []}

    digits = re.sub(r"[\s-]", "", number or "")
    invalid = []
    if not re.match(CARD_NUMBER_PATTERN, digits):
        invalid.append("card_number")
    if not re.match(EXPIRY_PATTERN, (expiry or "").strip()):
        invalid.append("card_expiry")
    if not re.match(CVC_PATTERN, (cvc or "").strip()):
        invalid.append("cvc")

    if not invalid:
        return {"passed": True, "reason": "Card details look valid", "invalid_fields": []}

    labels = ", ".join(_LABELS[field] for field in invalid)
    return {"passed": False, "reason": f"Check your {labels}", "invalid_fields": invalid}
