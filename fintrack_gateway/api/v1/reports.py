"""/v1/reports - narrative financial report, health score and prediction"""

from fastapi import APIRouter, Request

from fintrack_gateway.api.v1.schemas import (
    CategoryShareSchema,
    MonthlyMetricsResponse,
    PredictionRequest,
    ReportRequest,
    ReportResponse,
    ScoreRequest,
    ScoreResponse,
)
from fintrack_gateway.api.dependencies import get_request_id
from fintrack_gateway.domain.reports import (
    calculate_financial_score,
    generate_financial_report,
    predict_future_spending,
)
from fintrack_gateway.infrastructure.observability.metrics import record_report
from fintrack_gateway.infrastructure.observability.logging import log_report

router = APIRouter()


@router.post("/reports/financial", response_model=ReportResponse)
def financial_report(request_body: ReportRequest, request: Request):
    current = request_body.current_month.to_domain()
    total_expense = request_body.total_expense if request_body.total_expense is not None else current.expense

    insights = generate_financial_report(
        current,
        request_body.previous_month.to_domain(),
        request_body.category_spending,
        total_expense,
        as_of=request_body.as_of,
    )

    record_report(insights.financial_score)
    log_report(get_request_id(request), insights.financial_score, len(insights.risk_factors))

    return ReportResponse(
        summary=insights.summary,
        top_categories=[
            CategoryShareSchema(category=c.category, amount=c.amount, percentage=c.percentage)
            for c in insights.top_categories
        ],
        monthly_trend=insights.monthly_trend,
        budget_status=insights.budget_status,
        recommendations=insights.recommendations,
        risk_factors=insights.risk_factors,
        financial_score=insights.financial_score,
    )


@router.post("/reports/score", response_model=ScoreResponse)
def financial_score(request_body: ScoreRequest):
    score = calculate_financial_score(request_body.metrics.to_domain(), request_body.expense_variance)
    return ScoreResponse(financial_score=score)


@router.post("/reports/prediction", response_model=MonthlyMetricsResponse)
def spending_prediction(request_body: PredictionRequest):
    predicted = predict_future_spending([month.to_domain() for month in request_body.months])
    return MonthlyMetricsResponse(
        income=predicted.income,
        expense=predicted.expense,
        savings=predicted.savings,
        savings_rate=predicted.savings_rate,
    )
