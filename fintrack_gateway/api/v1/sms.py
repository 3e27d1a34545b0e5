"""POST /v1/sms/parse and /v1/sms/import - bank/UPI SMS ingestion"""

import time
import logging
from collections import Counter
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from fintrack_gateway.api.v1.schemas import (
    ImportProblemSchema,
    ImportSuccessSchema,
    ParsedTransactionSchema,
    SmsBatchRequest,
    SmsImportRequest,
    SmsImportResponse,
    SmsParseResponse,
)
from fintrack_gateway.api.dependencies import get_request_id
from fintrack_gateway.config import settings
from fintrack_gateway.infrastructure.database.session import get_db
from fintrack_gateway.infrastructure.database.repositories import (
    AccountRepository,
    SqlTransactionStore,
    TransactionRepository,
)
from fintrack_gateway.domain.exceptions import NoActiveAccountError
from fintrack_gateway.domain.importer import import_sms_messages
from fintrack_gateway.domain.models import ImportSuccess
from fintrack_gateway.domain.sms_parser import parse_multiple_sms, split_sms_blob
from fintrack_gateway.infrastructure.observability.metrics import record_import_outcomes
from fintrack_gateway.infrastructure.observability.logging import log_sms_import

router = APIRouter()


def collect_messages(request_body: SmsBatchRequest) -> list[str]:
    """Explicit messages first, then any pasted blob split on blank lines"""
    messages = [msg.strip() for msg in request_body.messages if msg.strip()]
    if request_body.text:
        messages.extend(split_sms_blob(request_body.text))
    return messages


@router.post("/sms/parse", response_model=SmsParseResponse)
def parse_sms(request_body: SmsBatchRequest):
    """Dry run: parse messages without storing anything"""
    messages = collect_messages(request_body)
    parsed = parse_multiple_sms(messages)

    return SmsParseResponse(
        received=len(messages),
        transactions=[
            ParsedTransactionSchema(
                amount=txn.amount,
                type=txn.type,
                merchant=txn.merchant,
                description=txn.description,
                source=txn.source,
                source_app=txn.raw_data.source_app,
                parsed_at=txn.raw_data.parsed_at,
            )
            for txn in parsed
        ],
    )


@router.post("/sms/import", response_model=SmsImportResponse)
def import_sms(
    request_body: SmsImportRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Import SMS messages into the user's default account.

    Flow:
    1. Fetch recent sms transactions (duplicate window)
    2. Resolve the default (first active) account
    3. Parse, de-duplicate and store each message in order
    4. Return per-message outcomes
    """
    start_time = time.time()
    request_id = get_request_id(request)
    messages = collect_messages(request_body)

    try:
        # 1. Duplicate window
        window = TransactionRepository(db).get_duplicate_window(
            request_body.user_id, limit=settings.sms_duplicate_lookback
        )

        # 2. Default account
        accounts = AccountRepository(db).get_active_accounts(request_body.user_id)
        if not accounts:
            raise NoActiveAccountError("Please create at least one account first")
        account_id = str(accounts[0].id)

        # 3. Sequential import
        store = SqlTransactionStore(db, request_body.user_id)
        summary = import_sms_messages(messages, window, store, account_id)

    except NoActiveAccountError as e:
        logging.warning(f"SMS import without account: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    for index, outcome in enumerate(summary.outcomes):
        if outcome.status == "error":
            logging.warning(
                "SMS import item failed to store",
                extra={"request_id": request_id, "item_index": index, "reason": outcome.reason},
            )

    statuses = [outcome.status for outcome in summary.outcomes]
    duration_ms = (time.time() - start_time) * 1000
    record_import_outcomes(statuses)
    log_sms_import(request_id, request_body.user_id, len(messages), summary.imported, dict(Counter(statuses)), duration_ms)

    return SmsImportResponse(
        user_id=request_body.user_id,
        account_id=account_id,
        imported=summary.imported,
        results=[
            ImportSuccessSchema(
                status=outcome.status,
                sms=outcome.sms,
                amount=outcome.amount,
                type=outcome.type,
                transaction_id=outcome.transaction_id,
            )
            if isinstance(outcome, ImportSuccess)
            else ImportProblemSchema(status=outcome.status, sms=outcome.sms, reason=outcome.reason)
            for outcome in summary.outcomes
        ],
    )
