"""Regex tables for recognising UPI and bank transaction SMS"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Pattern, Tuple

# Ordered capture alternatives for amount patterns: free-text form first,
# then the stricter "Your account X debited/credited" form.
AMOUNT_GROUPS: Tuple[str, ...] = ("amount", "account_amount")
MERCHANT_GROUPS: Tuple[str, ...] = ("merchant",)

_AMOUNT = r"₹(?P<amount>[\d,]+\.?\d*)"
_UPI_MERCHANT = r"to\s+(?P<merchant>[A-Za-z\s]+?)(?:\s+on|$)"


@dataclass(frozen=True)
class SourcePatterns:
    """Debit, credit and merchant patterns for one source app"""

    debit: Pattern[str]
    credit: Pattern[str]
    merchant: Pattern[str]


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


# First source whose debit or credit pattern matches wins.
SOURCE_ORDER: Tuple[str, ...] = ("phonepe", "googlepay", "paytm", "bank")

SOURCE_PATTERNS: Mapping[str, SourcePatterns] = MappingProxyType(
    {
        "phonepe": SourcePatterns(
            debit=_compile(r"PhonePe.*?(?:paid|sent).*?" + _AMOUNT),
            credit=_compile(r"PhonePe.*?(?:received|credited).*?" + _AMOUNT),
            merchant=_compile(_UPI_MERCHANT),
        ),
        "googlepay": SourcePatterns(
            debit=_compile(r"Google Pay.*?(?:paid|sent).*?" + _AMOUNT),
            credit=_compile(r"Google Pay.*?(?:received|credited).*?" + _AMOUNT),
            merchant=_compile(_UPI_MERCHANT),
        ),
        "paytm": SourcePatterns(
            debit=_compile(r"Paytm.*?(?:payment|transferred).*?" + _AMOUNT),
            credit=_compile(r"Paytm.*?(?:received|credited).*?" + _AMOUNT),
            merchant=_compile(_UPI_MERCHANT),
        ),
        "bank": SourcePatterns(
            debit=_compile(
                r"(?:debited|withdrawn|transferred).*?" + _AMOUNT
                + r"|Your\s+account\s+[A-Z0-9]+\s+debited\s+(?:with\s+)?₹(?P<account_amount>[\d,]+\.?\d*)"
            ),
            credit=_compile(
                r"(?:credited|deposited|received).*?" + _AMOUNT
                + r"|Your\s+account\s+[A-Z0-9]+\s+credited\s+(?:with\s+)?₹(?P<account_amount>[\d,]+\.?\d*)"
            ),
            merchant=_compile(r"(?:from|to|at)\s+(?P<merchant>[A-Za-z\s&.]+?)(?:\s+on|\s+reference|$)"),
        ),
    }
)


def first_group(match: "re.Match[str]", groups: Tuple[str, ...]) -> Optional[str]:
    """Return the first non-empty named group, in the given order"""
    for name in groups:
        value = match.group(name)
        if value:
            return value
    return None


def match_amount(text: str, source: str) -> Optional[Tuple[str, str]]:
    """
    Test the debit then credit pattern of a source against text.

    Returns:
        (direction, amount string) where direction is "debit" or "credit",
        or None if neither pattern produced an amount.
    """
    patterns = SOURCE_PATTERNS[source]
    for direction, pattern in (("debit", patterns.debit), ("credit", patterns.credit)):
        match = pattern.search(text)
        if match:
            amount = first_group(match, AMOUNT_GROUPS)
            return (direction, amount) if amount else None
    return None


def extract_merchant(text: str, source: str) -> Optional[str]:
    """Extract merchant name; run against original-case text to keep casing"""
    match = SOURCE_PATTERNS[source].merchant.search(text)
    if not match:
        return None
    value = first_group(match, MERCHANT_GROUPS) or match.group(0)
    return value.strip() or None
