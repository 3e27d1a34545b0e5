"""SMS transaction parsing and duplicate detection"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence
from fintrack_gateway.domain.models import ExistingTransaction, ParsedTransaction, SmsRawData
from fintrack_gateway.domain.patterns import SOURCE_ORDER, extract_merchant, match_amount

DUPLICATE_WINDOW = timedelta(minutes=5)


def clean_amount(amount_str: str) -> float:
    """Strip thousands separators and parse. Raises ValueError on garbage."""
    return float(amount_str.replace(",", ""))


def parse_sms_transaction(sms_text: str) -> Optional[ParsedTransaction]:
    """
    Parse a single bank/UPI SMS into a transaction.

    Sources are tried in SOURCE_ORDER; the first whose debit or credit
    pattern yields a numeric amount wins. Debit maps to expense, credit
    to income. Returns None when no source matches.
    """
    text = sms_text.lower()

    for source in SOURCE_ORDER:
        matched = match_amount(text, source)
        if matched is None:
            continue

        direction, amount_str = matched
        try:
            amount = clean_amount(amount_str)
        except ValueError:
            continue

        merchant = extract_merchant(sms_text, source) or source

        return ParsedTransaction(
            amount=amount,
            type="expense" if direction == "debit" else "income",
            merchant=merchant,
            description=f"{source.upper()} transaction",
            raw_data=SmsRawData(
                sms_text=sms_text,
                source_app=source,
                parsed_at=datetime.now(timezone.utc),
            ),
        )

    return None


def parse_multiple_sms(sms_list: Iterable[str]) -> List[ParsedTransaction]:
    """Parse messages in order, dropping the unparseable ones"""
    parsed = (parse_sms_transaction(sms) for sms in sms_list)
    return [txn for txn in parsed if txn is not None]


def split_sms_blob(text: str) -> List[str]:
    """Split pasted SMS text into messages separated by blank lines"""
    return [msg.strip() for msg in text.split("\n\n") if msg.strip()]


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from the store are UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def detect_duplicate_transaction(
    new_transaction: ParsedTransaction,
    existing_transactions: Sequence[ExistingTransaction],
    now: Optional[datetime] = None,
) -> bool:
    """
    Check a parsed transaction against a window of recent transactions.

    Duplicate iff amount, type and merchant are exactly equal and the
    existing row was created less than DUPLICATE_WINDOW away from *now*.
    The new transaction's own parse time is not used, so latency between
    parsing and checking narrows the effective window.
    """
    now = _as_utc(now or datetime.now(timezone.utc))

    return any(
        txn.amount == new_transaction.amount
        and txn.type == new_transaction.type
        and txn.merchant == new_transaction.merchant
        and abs(now - _as_utc(txn.created_at)) < DUPLICATE_WINDOW
        for txn in existing_transactions
    )
