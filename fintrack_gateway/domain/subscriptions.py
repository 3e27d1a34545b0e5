"""Subscription spend heuristics"""

import math
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence
from fintrack_gateway.domain.models import Subscription
from fintrack_gateway.utils.date_utils import days_between
from fintrack_gateway.utils.money import format_inr

# Multipliers converting one billing-period charge into monthly / yearly spend
MONTHLY_MULTIPLIERS = {"daily": 30, "weekly": 4.3, "monthly": 1, "quarterly": 0.33, "yearly": 0.083}
YEARLY_MULTIPLIERS = {"daily": 365, "weekly": 52, "monthly": 12, "quarterly": 4, "yearly": 1}

HIGH_YEARLY_SPEND = 50_000
EXPENSIVE_SUBSCRIPTION = 500


def monthly_spend(subscriptions: Sequence[Subscription]) -> float:
    return sum(s.amount * MONTHLY_MULTIPLIERS.get(s.billing_cycle, 1) for s in subscriptions)


def yearly_spend(subscriptions: Sequence[Subscription]) -> float:
    return sum(s.amount * YEARLY_MULTIPLIERS.get(s.billing_cycle, 1) for s in subscriptions)


def days_until_billing(next_billing_date: date, now: Optional[datetime] = None) -> int:
    """Days until the next charge; negative once the date has passed"""
    return math.ceil(days_between(now or datetime.now(timezone.utc), next_billing_date))


def subscription_recommendations(
    subscriptions: Sequence[Subscription],
    now: Optional[datetime] = None,
) -> List[str]:
    recommendations = []

    if yearly_spend(subscriptions) > HIGH_YEARLY_SPEND:
        recommendations.append(
            "Your total subscription spend exceeds ₹50,000/year. Review and cancel unused subscriptions."
        )

    far_off = [s for s in subscriptions if days_until_billing(s.next_billing_date, now) > 30]
    if far_off:
        recommendations.append(
            f"You have {len(far_off)} subscription(s) with billing date more than 30 days away. "
            "These might be unused."
        )

    expensive = sorted(
        (s for s in subscriptions if s.amount > EXPENSIVE_SUBSCRIPTION),
        key=lambda s: s.amount,
        reverse=True,
    )[:3]
    if expensive:
        total = sum(s.amount for s in expensive)
        recommendations.append(
            f"Your top 3 expensive subscriptions cost ₹{format_inr(total)}/billing period. Consider alternatives."
        )

    return recommendations
