"""Batch SMS import - parse, de-duplicate and store messages in order"""

from datetime import datetime, timezone
from typing import Callable, List, Optional, Protocol, Sequence
from fintrack_gateway.domain.exceptions import PersistenceError
from fintrack_gateway.domain.models import (
    ExistingTransaction,
    ImportDuplicate,
    ImportFailed,
    ImportStoreError,
    ImportSuccess,
    ImportSummary,
    ParsedTransaction,
)
from fintrack_gateway.domain.sms_parser import detect_duplicate_transaction, parse_sms_transaction

SNIPPET_LENGTH = 50


class TransactionStore(Protocol):
    """Persistence collaborator for imported transactions"""

    def record_transaction(self, account_id: str, transaction: ParsedTransaction) -> str:
        """
        Insert the transaction and apply its balance delta to the account.

        Returns the new transaction id. Raises PersistenceError on failure.
        """
        ...


def import_sms_messages(
    messages: Sequence[str],
    existing: Sequence[ExistingTransaction],
    store: TransactionStore,
    account_id: str,
    clock: Optional[Callable[[], datetime]] = None,
) -> ImportSummary:
    """
    Import a batch of SMS messages into one account.

    Messages are handled strictly in order: each stored transaction and
    its balance update complete before the next message is looked at.
    Stored transactions join the duplicate window, so a message repeated
    later in the batch is reported as a duplicate. A store failure is
    recorded against that message only and the batch carries on.
    """
    clock = clock or (lambda: datetime.now(timezone.utc))
    window: List[ExistingTransaction] = list(existing)
    summary = ImportSummary()

    for sms in messages:
        snippet = sms[:SNIPPET_LENGTH]
        parsed = parse_sms_transaction(sms)

        if parsed is None:
            summary.outcomes.append(ImportFailed(sms=snippet))
            continue

        if detect_duplicate_transaction(parsed, window, now=clock()):
            summary.outcomes.append(ImportDuplicate(sms=snippet))
            continue

        try:
            transaction_id = store.record_transaction(account_id, parsed)
        except PersistenceError:
            summary.outcomes.append(ImportStoreError(sms=snippet))
            continue

        summary.imported += 1
        summary.outcomes.append(
            ImportSuccess(sms=snippet, amount=parsed.amount, type=parsed.type, transaction_id=transaction_id)
        )
        window.insert(
            0,
            ExistingTransaction(
                amount=parsed.amount,
                type=parsed.type,
                merchant=parsed.merchant,
                created_at=clock(),
            ),
        )

    return summary
