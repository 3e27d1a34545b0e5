"""Budget heuristics - alert levels, adjustment suggestions and pacing"""

import math
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence, Union
from fintrack_gateway.domain.models import AlertLevel, BudgetAdjustment, BudgetData, BudgetPriority, PaceWarning
from fintrack_gateway.utils.date_utils import days_between, period_end
from fintrack_gateway.utils.money import format_pct

DateLike = Union[date, datetime]

WARNING_THRESHOLD = 80
DANGER_THRESHOLD = 100


def calculate_budget_percentage(budget: BudgetData) -> float:
    """
    Percentage of the budget limit already spent (unbounded above 100).

    A zero limit has no meaningful ratio: it reads as 0% until anything
    is spent, then as fully used.
    """
    if budget.amount <= 0:
        return 0.0 if budget.spent <= 0 else 100.0
    return (budget.spent / budget.amount) * 100


def get_alert_level(percentage: float) -> AlertLevel:
    if percentage >= DANGER_THRESHOLD:
        return "danger"
    if percentage >= WARNING_THRESHOLD:
        return "warning"
    return "safe"


def get_alert_message(percentage: float, budget_name: str) -> str:
    if percentage >= DANGER_THRESHOLD:
        return f'"{budget_name}" budget exceeded! You\'ve spent {format_pct(percentage)}% of your limit.'
    if percentage >= WARNING_THRESHOLD:
        return (
            f'"{budget_name}" budget is at {format_pct(percentage)}% of limit. '
            f"Only {format_pct(100 - percentage)}% remaining."
        )
    return f'"{budget_name}" budget usage: {format_pct(percentage)}% of limit.'


def suggest_budget_adjustment(
    current_budget: float,
    spent: float,
    historical_expenses: Sequence[float],
) -> BudgetAdjustment:
    """
    Suggest a new budget limit from past monthly expenses.

    Requirements:
    - At least 2 months of history, otherwise the budget is unchanged
    - Suggested = ceil(average * 1.1)
    - With 3+ months, trend = (last - first) / first picks the reason:
      >0.2 increasing, <-0.2 decreasing, else average with buffer

    `spent` is accepted for call-site symmetry with the other helpers
    and does not influence the suggestion.
    """
    if len(historical_expenses) < 2:
        return BudgetAdjustment(suggested=current_budget, reason="Insufficient data for adjustment")

    avg_spending = sum(historical_expenses) / len(historical_expenses)

    trend = 0.0
    first, last = historical_expenses[0], historical_expenses[-1]
    if len(historical_expenses) >= 3 and first != 0:
        trend = (last - first) / first

    suggested_amount = math.ceil(avg_spending * 1.1)

    if trend > 0.2:
        reason = "Expenses are increasing. Budget adjusted upward to accommodate the trend."
    elif trend < -0.2:
        reason = "Expenses are decreasing. Budget adjusted downward to maintain discipline."
    else:
        reason = "Budget adjusted based on historical spending average with 10% buffer."

    return BudgetAdjustment(suggested=suggested_amount, reason=reason)


def get_days_remaining_in_period(
    period: str,
    start_date: DateLike,
    end_date: Optional[DateLike] = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Whole days left until the period ends, never negative.

    Without an explicit end the period advances from start by one day,
    week, month or year. A custom period without an end ends at start.
    """
    end = period_end(period, start_date, end_date)
    now = now or datetime.now(timezone.utc)
    return max(0, math.ceil(days_between(now, end)))


def estimate_daily_budget(
    total_budget: float,
    period: str,
    start_date: DateLike,
    end_date: Optional[DateLike] = None,
    now: Optional[datetime] = None,
) -> float:
    days_remaining = get_days_remaining_in_period(period, start_date, end_date, now=now)
    if days_remaining == 0:
        return 0.0
    return total_budget / days_remaining


def warn_if_on_track_to_exceed(
    spent: float,
    daily_budget: float,
    days_remaining: int,
    total_budget: float,
) -> PaceWarning:
    """Project end-of-period spend at the current daily pace"""
    if days_remaining == 0:
        return PaceWarning(warning=False, message="Budget period has ended")

    projected = spent + daily_budget * days_remaining
    overage = math.ceil(projected - total_budget)

    if total_budget <= 0:
        if projected > 0:
            return PaceWarning(warning=True, message=f"At current pace, you'll exceed budget by ₹{overage}")
        return PaceWarning(warning=False, message="")

    projected_pct = (projected / total_budget) * 100

    if projected > total_budget:
        return PaceWarning(
            warning=True,
            message=f"At current pace, you'll exceed budget by ₹{overage} (projected {format_pct(projected_pct)}%)",
        )

    if projected_pct > 80:
        return PaceWarning(
            warning=True,
            message=f"At current pace, you'll use {format_pct(projected_pct)}% of budget",
        )

    return PaceWarning(warning=False, message="")


def _priority_for(percentage: float) -> tuple[int, str]:
    if percentage >= 100:
        return 1, "Exceeded budget limit"
    elif percentage >= 90:
        return 2, "Critical - nearing limit"
    elif percentage >= 75:
        return 3, "Warning - approaching limit"
    else:
        return 4, "On track"


def prioritize_budgets(budgets: Sequence[BudgetData]) -> List[BudgetPriority]:
    """Rank budgets most urgent first; equal tiers keep input order"""
    ranked = []
    for budget in budgets:
        priority, reason = _priority_for(calculate_budget_percentage(budget))
        ranked.append(BudgetPriority(budget=budget, priority=priority, reason=reason))
    return sorted(ranked, key=lambda item: item.priority)
