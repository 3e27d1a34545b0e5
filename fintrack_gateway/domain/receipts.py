"""Receipt scanning - upload, placeholder recognition and expense recording"""

import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Protocol, Sequence
from fintrack_gateway.domain.exceptions import PersistenceError, StorageError
from fintrack_gateway.domain.models import ParsedReceipt, ScanError, ScanOutcome, ScanSuccess


@dataclass
class ReceiptFile:
    file_name: str
    content: bytes
    content_type: str = "application/octet-stream"


class FileStorage(Protocol):
    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store bytes at path and return their public URL. Raises StorageError."""
        ...


class ReceiptStore(Protocol):
    def save_receipt(self, image_url: str, file_name: str, receipt: ParsedReceipt) -> str:
        """Insert a processed receipt row and return its id"""
        ...

    def record_receipt_expense(self, account_id: str, receipt_id: str, receipt: ParsedReceipt) -> str:
        """Insert the expense transaction, debit the account and return the transaction id"""
        ...


def simulate_ocr(file_name: str, today: Optional[date] = None) -> ParsedReceipt:
    """Placeholder recognition: always returns the same canned receipt"""
    return ParsedReceipt(
        merchant="Detected Merchant",
        amount="250.00",
        date=today or date.today(),
        items=["Item 1", "Item 2", "Item 3"],
        confidence=0.85,
    )


def receipt_storage_path(user_id: str, file_name: str, timestamp_ms: int) -> str:
    return f"receipts/{user_id}/{timestamp_ms}-{file_name}"


async def scan_receipts(
    files: Sequence[ReceiptFile],
    user_id: str,
    account_id: str,
    storage: FileStorage,
    store: ReceiptStore,
    clock: Optional[Callable[[], int]] = None,
) -> List[ScanOutcome]:
    """
    Scan uploaded receipts one at a time.

    Each file is uploaded, recognised, saved as a receipt and recorded as
    an expense against the account before the next file starts. Any step
    failing marks that file as an error and moves on.

    Each file is stored under its own epoch-millisecond timestamp; stamps
    strictly increase within a batch so repeated file names never share a
    storage path.
    """
    clock = clock or (lambda: int(time.time() * 1000))
    outcomes: List[ScanOutcome] = []
    last_stamp = None

    for upload in files:
        stamp = clock()
        if last_stamp is not None and stamp <= last_stamp:
            stamp = last_stamp + 1
        last_stamp = stamp

        path = receipt_storage_path(user_id, upload.file_name, stamp)
        try:
            image_url = await storage.upload(path, upload.content, upload.content_type)
        except StorageError:
            outcomes.append(ScanError(file=upload.file_name, reason="Failed to upload receipt"))
            continue

        parsed = simulate_ocr(upload.file_name)

        try:
            receipt_id = store.save_receipt(image_url, upload.file_name, parsed)
        except PersistenceError:
            outcomes.append(ScanError(file=upload.file_name, reason="Failed to save receipt"))
            continue

        try:
            store.record_receipt_expense(account_id, receipt_id, parsed)
        except PersistenceError:
            outcomes.append(ScanError(file=upload.file_name, reason="Failed to create transaction"))
            continue

        outcomes.append(
            ScanSuccess(
                file=upload.file_name,
                merchant=parsed.merchant,
                amount=parsed.amount,
                confidence=parsed.confidence,
                image_url=image_url,
            )
        )

    return outcomes
