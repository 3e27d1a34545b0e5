"""/v1/accounts - minimal account management for import targets"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fintrack_gateway.api.v1.schemas import AccountCreateRequest, AccountListResponse, AccountSchema
from fintrack_gateway.infrastructure.database.models import Account
from fintrack_gateway.infrastructure.database.session import get_db
from fintrack_gateway.infrastructure.database.repositories import AccountRepository

router = APIRouter()


def _to_schema(account: Account) -> AccountSchema:
    return AccountSchema(
        account_id=str(account.id),
        name=account.name,
        balance=account.balance,
        is_active=account.is_active,
    )


@router.post("/accounts", response_model=AccountSchema, status_code=201)
def create_account(request_body: AccountCreateRequest, db: Session = Depends(get_db)):
    account = AccountRepository(db).create_account(
        user_id=request_body.user_id,
        name=request_body.name,
        balance=request_body.balance,
    )
    db.commit()
    return _to_schema(account)


@router.get("/accounts", response_model=AccountListResponse)
def list_accounts(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Active accounts; the first one listed receives SMS and receipt imports"""
    accounts = AccountRepository(db).get_active_accounts(user_id)
    return AccountListResponse(user_id=user_id, accounts=[_to_schema(a) for a in accounts])
