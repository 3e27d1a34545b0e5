"""/v1/budgets - budget alerts, suggestions, pacing and prioritisation"""

from fastapi import APIRouter, HTTPException

from fintrack_gateway.api.v1.schemas import (
    BudgetPaceRequest,
    BudgetPaceResponse,
    BudgetPrioritizeRequest,
    BudgetPrioritizeResponse,
    BudgetPriorityItem,
    BudgetSchema,
    BudgetStatusResponse,
    BudgetSuggestionRequest,
    BudgetSuggestionResponse,
)
from fintrack_gateway.domain.budgets import (
    calculate_budget_percentage,
    estimate_daily_budget,
    get_alert_level,
    get_alert_message,
    get_days_remaining_in_period,
    prioritize_budgets,
    suggest_budget_adjustment,
    warn_if_on_track_to_exceed,
)
from fintrack_gateway.domain.exceptions import InvalidPeriodError

router = APIRouter()


@router.post("/budgets/status", response_model=BudgetStatusResponse)
def budget_status(request_body: BudgetSchema):
    percentage = calculate_budget_percentage(request_body.to_domain())
    return BudgetStatusResponse(
        percentage=percentage,
        alert_level=get_alert_level(percentage),
        message=get_alert_message(percentage, request_body.name),
    )


@router.post("/budgets/suggestion", response_model=BudgetSuggestionResponse)
def budget_suggestion(request_body: BudgetSuggestionRequest):
    adjustment = suggest_budget_adjustment(
        request_body.current_budget,
        request_body.spent,
        request_body.historical_expenses,
    )
    return BudgetSuggestionResponse(suggested=adjustment.suggested, reason=adjustment.reason)


@router.post("/budgets/pace", response_model=BudgetPaceResponse)
def budget_pace(request_body: BudgetPaceRequest):
    """
    Daily allowance for the rest of the period and an overspend warning.

    The daily allowance is the whole budget spread over the days left,
    so the projection is spent-so-far plus that allowance per day.
    """
    try:
        days_remaining = get_days_remaining_in_period(
            request_body.period, request_body.start_date, request_body.end_date
        )
        daily_budget = estimate_daily_budget(
            request_body.total_budget, request_body.period, request_body.start_date, request_body.end_date
        )
    except InvalidPeriodError as e:
        raise HTTPException(status_code=422, detail=str(e))

    pace = warn_if_on_track_to_exceed(request_body.spent, daily_budget, days_remaining, request_body.total_budget)

    return BudgetPaceResponse(
        days_remaining=days_remaining,
        daily_budget=daily_budget,
        warning=pace.warning,
        message=pace.message,
    )


@router.post("/budgets/prioritize", response_model=BudgetPrioritizeResponse)
def budget_prioritize(request_body: BudgetPrioritizeRequest):
    ranked = prioritize_budgets([budget.to_domain() for budget in request_body.budgets])
    return BudgetPrioritizeResponse(
        budgets=[
            BudgetPriorityItem(
                budget=BudgetSchema(
                    id=item.budget.id,
                    name=item.budget.name,
                    amount=item.budget.amount,
                    spent=item.budget.spent,
                    historical_average=item.budget.historical_average,
                ),
                priority=item.priority,
                reason=item.reason,
            )
            for item in ranked
        ]
    )
