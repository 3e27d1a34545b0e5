"""POST /v1/receipts/scan - upload and record receipt images"""

import time
import logging
from typing import List
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from fintrack_gateway.api.v1.schemas import ReceiptScanResponse, ScanErrorSchema, ScanSuccessSchema
from fintrack_gateway.api.dependencies import get_request_id, get_storage_client
from fintrack_gateway.infrastructure.clients.storage import StorageClient
from fintrack_gateway.infrastructure.database.session import get_db
from fintrack_gateway.infrastructure.database.repositories import AccountRepository, SqlTransactionStore
from fintrack_gateway.domain.models import ScanSuccess
from fintrack_gateway.domain.receipts import ReceiptFile, scan_receipts
from fintrack_gateway.infrastructure.observability.metrics import record_scan_outcomes
from fintrack_gateway.infrastructure.observability.logging import log_receipt_scan

router = APIRouter()


@router.post("/receipts/scan", response_model=ReceiptScanResponse)
async def scan_receipt_files(
    request: Request,
    user_id: str = Form(..., min_length=1),
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client),
):
    """
    Scan receipts into expense transactions on the default account.

    Each file is uploaded to object storage, recognised, stored as a
    receipt and recorded as an expense, one file at a time.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    accounts = AccountRepository(db).get_active_accounts(user_id)
    if not accounts:
        logging.warning("Receipt scan without account", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail="Please create at least one account first")

    uploads = [
        ReceiptFile(
            file_name=upload.filename or "receipt",
            content=await upload.read(),
            content_type=upload.content_type or "application/octet-stream",
        )
        for upload in files
    ]

    try:
        outcomes = await scan_receipts(
            uploads,
            user_id=user_id,
            account_id=str(accounts[0].id),
            storage=storage,
            store=SqlTransactionStore(db, user_id),
        )
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    succeeded = sum(1 for outcome in outcomes if isinstance(outcome, ScanSuccess))
    record_scan_outcomes(outcome.status for outcome in outcomes)
    log_receipt_scan(request_id, user_id, len(uploads), succeeded, (time.time() - start_time) * 1000)

    return ReceiptScanResponse(
        user_id=user_id,
        scanned=succeeded,
        results=[
            ScanSuccessSchema(
                status=outcome.status,
                file=outcome.file,
                merchant=outcome.merchant,
                amount=outcome.amount,
                confidence=outcome.confidence,
                image_url=outcome.image_url,
            )
            if isinstance(outcome, ScanSuccess)
            else ScanErrorSchema(status=outcome.status, file=outcome.file, reason=outcome.reason)
            for outcome in outcomes
        ],
    )
