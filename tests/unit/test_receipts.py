"""Unit tests for receipt scanning orchestration"""

from datetime import date
from fintrack_gateway.domain.models import ScanError, ScanSuccess
from fintrack_gateway.domain.receipts import ReceiptFile, receipt_storage_path, scan_receipts, simulate_ocr


def _files(*names):
    return [ReceiptFile(file_name=name, content=b"\x89PNG", content_type="image/png") for name in names]


def test_simulate_ocr_returns_placeholder_receipt():
    receipt = simulate_ocr("lunch.png", today=date(2024, 3, 12))

    assert receipt.merchant == "Detected Merchant"
    assert receipt.amount == "250.00"
    assert receipt.date == date(2024, 3, 12)
    assert receipt.items == ["Item 1", "Item 2", "Item 3"]
    assert receipt.confidence == 0.85


def test_receipt_storage_path():
    assert receipt_storage_path("user_1", "a.png", 1710230400000) == "receipts/user_1/1710230400000-a.png"


async def test_scan_receipts_success(make_storage, make_store):
    storage, store = make_storage(), make_store()

    outcomes = await scan_receipts(_files("a.png", "b.png"), "user_1", "acct-1", storage, store, clock=lambda: 42)

    assert all(isinstance(o, ScanSuccess) for o in outcomes)
    assert outcomes[0].image_url == "https://storage.test/public/receipts/user_1/42-a.png"
    assert outcomes[1].amount == "250.00"
    assert list(storage.uploads) == ["receipts/user_1/42-a.png", "receipts/user_1/43-b.png"]
    assert len(store.receipts) == 2
    assert [account for account, _ in store.recorded] == ["acct-1", "acct-1"]


async def test_scan_receipts_upload_failure_skips_file(make_storage, make_store):
    storage, store = make_storage(fail_on=("bad.png",)), make_store()

    outcomes = await scan_receipts(_files("bad.png", "good.png"), "user_1", "acct-1", storage, store, clock=lambda: 1)

    assert outcomes[0] == ScanError(file="bad.png", reason="Failed to upload receipt")
    assert outcomes[1].status == "success"
    assert len(store.receipts) == 1


async def test_scan_receipts_store_failures(make_storage, make_store):
    # Call 1 saves the first receipt, call 2 fails its expense, call 3 fails the second receipt
    store = make_store(fail_calls=(2, 3))

    outcomes = await scan_receipts(_files("a.png", "b.png"), "user_1", "acct-1", make_storage(), store, clock=lambda: 1)

    assert [o.reason for o in outcomes] == ["Failed to create transaction", "Failed to save receipt"]


async def test_repeated_file_names_get_distinct_paths(make_storage, make_store):
    storage = make_storage()
    files = [ReceiptFile(file_name="r.jpg", content=b"a"), ReceiptFile(file_name="r.jpg", content=b"b")]

    await scan_receipts(files, "u", "a", storage, make_store(), clock=lambda: 1000)

    assert storage.uploads == {"receipts/u/1000-r.jpg": b"a", "receipts/u/1001-r.jpg": b"b"}


async def test_each_file_takes_a_fresh_timestamp(make_storage, make_store):
    storage = make_storage()
    stamps = iter([5000, 7000])

    await scan_receipts(_files("a.png", "b.png"), "u", "a", storage, make_store(), clock=lambda: next(stamps))

    assert list(storage.uploads) == ["receipts/u/5000-a.png", "receipts/u/7000-b.png"]
