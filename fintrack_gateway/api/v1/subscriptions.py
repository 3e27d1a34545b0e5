"""/v1/subscriptions - recurring payments and spend summary"""

import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from fintrack_gateway.api.v1.schemas import (
    SubscriptionCreateRequest,
    SubscriptionListResponse,
    SubscriptionSchema,
    SubscriptionSummaryResponse,
)
from fintrack_gateway.infrastructure.database import models
from fintrack_gateway.infrastructure.database.session import get_db
from fintrack_gateway.infrastructure.database.repositories import SubscriptionRepository
from fintrack_gateway.domain.models import Subscription
from fintrack_gateway.domain.subscriptions import (
    days_until_billing,
    monthly_spend,
    subscription_recommendations,
    yearly_spend,
)

router = APIRouter()


def _to_schema(subscription: models.Subscription) -> SubscriptionSchema:
    return SubscriptionSchema(
        subscription_id=str(subscription.id),
        name=subscription.name,
        amount=subscription.amount,
        billing_cycle=subscription.billing_cycle,
        next_billing_date=subscription.next_billing_date,
        merchant=subscription.merchant,
        description=subscription.description,
        days_until_billing=days_until_billing(subscription.next_billing_date),
    )


@router.post("/subscriptions", response_model=SubscriptionSchema, status_code=201)
def create_subscription(request_body: SubscriptionCreateRequest, db: Session = Depends(get_db)):
    subscription = SubscriptionRepository(db).create_subscription(
        user_id=request_body.user_id,
        name=request_body.name,
        amount=request_body.amount,
        billing_cycle=request_body.billing_cycle,
        next_billing_date=request_body.next_billing_date,
        merchant=request_body.merchant,
        description=request_body.description,
    )
    db.commit()
    return _to_schema(subscription)


@router.get("/subscriptions", response_model=SubscriptionListResponse)
def list_subscriptions(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    subscriptions = SubscriptionRepository(db).get_active_subscriptions(user_id)
    return SubscriptionListResponse(user_id=user_id, subscriptions=[_to_schema(s) for s in subscriptions])


@router.get("/subscriptions/summary", response_model=SubscriptionSummaryResponse)
def subscription_summary(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Monthly/yearly spend across active subscriptions plus savings tips"""
    subscriptions = [
        Subscription(
            id=str(s.id),
            name=s.name,
            amount=s.amount,
            billing_cycle=s.billing_cycle,
            next_billing_date=s.next_billing_date,
            merchant=s.merchant,
        )
        for s in SubscriptionRepository(db).get_active_subscriptions(user_id)
    ]

    return SubscriptionSummaryResponse(
        user_id=user_id,
        active=len(subscriptions),
        monthly_spend=monthly_spend(subscriptions),
        yearly_spend=yearly_spend(subscriptions),
        recommendations=subscription_recommendations(subscriptions),
    )


@router.delete("/subscriptions/{subscription_id}", status_code=204)
def delete_subscription(
    subscription_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    try:
        subscription_uuid = uuid.UUID(subscription_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid subscription ID format")

    if not SubscriptionRepository(db).deactivate_subscription(subscription_uuid, user_id):
        raise HTTPException(status_code=404, detail="Subscription not found")

    db.commit()
