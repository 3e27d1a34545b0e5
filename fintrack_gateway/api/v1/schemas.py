"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime
from typing import List, Literal, Optional, Union
from fintrack_gateway.domain.models import BudgetData, MonthlyMetrics


# Accounts


class AccountCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="User identifier")
    name: str = Field(..., min_length=1)
    balance: float = 0.0


class AccountSchema(BaseModel):
    account_id: str
    name: str
    balance: float
    is_active: bool


class AccountListResponse(BaseModel):
    user_id: str
    accounts: List[AccountSchema]


# SMS


class SmsBatchRequest(BaseModel):
    """Messages either as a list or as one pasted blob separated by blank lines"""

    messages: List[str] = Field(default_factory=list)
    text: Optional[str] = None

    @model_validator(mode="after")
    def require_input(self):
        if not self.messages and not (self.text and self.text.strip()):
            raise ValueError("Provide messages or text")
        return self


class SmsImportRequest(SmsBatchRequest):
    user_id: str = Field(..., min_length=1, description="User identifier")


class ParsedTransactionSchema(BaseModel):
    amount: float
    type: str
    merchant: str
    description: str
    source: str
    source_app: str
    parsed_at: datetime


class SmsParseResponse(BaseModel):
    received: int
    transactions: List[ParsedTransactionSchema]


class ImportSuccessSchema(BaseModel):
    status: Literal["success"]
    sms: str
    amount: float
    type: str
    transaction_id: str


class ImportProblemSchema(BaseModel):
    status: Literal["duplicate", "failed", "error"]
    sms: str
    reason: str


class SmsImportResponse(BaseModel):
    user_id: str
    account_id: str
    imported: int
    results: List[Union[ImportSuccessSchema, ImportProblemSchema]]


# Receipts


class ScanSuccessSchema(BaseModel):
    status: Literal["success"]
    file: str
    merchant: str
    amount: str
    confidence: float
    image_url: str


class ScanErrorSchema(BaseModel):
    status: Literal["error"]
    file: str
    reason: str


class ReceiptScanResponse(BaseModel):
    user_id: str
    scanned: int
    results: List[Union[ScanSuccessSchema, ScanErrorSchema]]


# Budgets


class BudgetSchema(BaseModel):
    id: Optional[str] = None
    name: str = ""
    amount: float = Field(..., ge=0, description="Budget limit")
    spent: float = Field(..., ge=0)
    historical_average: Optional[float] = None

    def to_domain(self) -> BudgetData:
        return BudgetData(
            amount=self.amount,
            spent=self.spent,
            historical_average=self.historical_average,
            name=self.name,
            id=self.id,
        )


class BudgetStatusResponse(BaseModel):
    percentage: float
    alert_level: Literal["safe", "warning", "danger"]
    message: str


class BudgetSuggestionRequest(BaseModel):
    current_budget: float = Field(..., ge=0)
    spent: float = Field(0.0, ge=0)
    historical_expenses: List[float] = Field(default_factory=list)


class BudgetSuggestionResponse(BaseModel):
    suggested: float
    reason: str


class BudgetPaceRequest(BaseModel):
    total_budget: float = Field(..., ge=0)
    spent: float = Field(..., ge=0)
    period: Literal["daily", "weekly", "monthly", "yearly", "custom"]
    start_date: datetime
    end_date: Optional[datetime] = None


class BudgetPaceResponse(BaseModel):
    days_remaining: int
    daily_budget: float
    warning: bool
    message: str


class BudgetPrioritizeRequest(BaseModel):
    budgets: List[BudgetSchema]


class BudgetPriorityItem(BaseModel):
    budget: BudgetSchema
    priority: int
    reason: str


class BudgetPrioritizeResponse(BaseModel):
    budgets: List[BudgetPriorityItem]


# Reports


class MonthlyMetricsSchema(BaseModel):
    """Either full metrics or just income/expense (savings derived)"""

    income: float = Field(..., ge=0)
    expense: float = Field(..., ge=0)
    savings: Optional[float] = None
    savings_rate: Optional[float] = None

    def to_domain(self) -> MonthlyMetrics:
        derived = MonthlyMetrics.from_totals(self.income, self.expense)
        return MonthlyMetrics(
            income=self.income,
            expense=self.expense,
            savings=derived.savings if self.savings is None else self.savings,
            savings_rate=derived.savings_rate if self.savings_rate is None else self.savings_rate,
        )


class ReportRequest(BaseModel):
    current_month: MonthlyMetricsSchema
    previous_month: MonthlyMetricsSchema
    category_spending: dict[str, float] = Field(default_factory=dict)
    total_expense: Optional[float] = Field(None, ge=0, description="Defaults to current month expense")
    as_of: Optional[date] = None


class CategoryShareSchema(BaseModel):
    category: str
    amount: float
    percentage: float


class ReportResponse(BaseModel):
    summary: str
    top_categories: List[CategoryShareSchema]
    monthly_trend: str
    budget_status: str
    recommendations: List[str]
    risk_factors: List[str]
    financial_score: int


class ScoreRequest(BaseModel):
    metrics: MonthlyMetricsSchema
    expense_variance: float = 0.0


class ScoreResponse(BaseModel):
    financial_score: int


class PredictionRequest(BaseModel):
    months: List[MonthlyMetricsSchema] = Field(default_factory=list)


class MonthlyMetricsResponse(BaseModel):
    income: float
    expense: float
    savings: float
    savings_rate: float


# Subscriptions


class SubscriptionCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    billing_cycle: Literal["daily", "weekly", "monthly", "quarterly", "yearly"] = "monthly"
    next_billing_date: date
    merchant: Optional[str] = None
    description: Optional[str] = None


class SubscriptionSchema(BaseModel):
    subscription_id: str
    name: str
    amount: float
    billing_cycle: str
    next_billing_date: date
    merchant: Optional[str] = None
    description: Optional[str] = None
    days_until_billing: int


class SubscriptionListResponse(BaseModel):
    user_id: str
    subscriptions: List[SubscriptionSchema]


class SubscriptionSummaryResponse(BaseModel):
    user_id: str
    active: int
    monthly_spend: float
    yearly_spend: float
    recommendations: List[str]
