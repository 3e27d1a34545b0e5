"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Literal, Optional, Union

TransactionType = Literal["income", "expense", "transfer"]
AlertLevel = Literal["safe", "warning", "danger"]
PeriodKind = Literal["daily", "weekly", "monthly", "yearly", "custom"]


@dataclass(frozen=True)
class SmsRawData:
    """Audit trail kept alongside a parsed SMS transaction"""

    sms_text: str
    source_app: str
    parsed_at: datetime

    def to_dict(self) -> dict:
        return {
            "sms_text": self.sms_text,
            "source_app": self.source_app,
            "parsed_at": self.parsed_at.isoformat(),
        }


@dataclass(frozen=True)
class ParsedTransaction:
    """Transaction extracted from a bank/UPI SMS"""

    amount: float
    type: TransactionType
    merchant: str
    description: str
    raw_data: SmsRawData
    source: str = "sms"


@dataclass
class ExistingTransaction:
    """Stored transaction as seen by the duplicate detector"""

    amount: float
    type: str
    merchant: Optional[str]
    created_at: datetime


@dataclass
class MonthlyMetrics:
    """Income/expense aggregates for one month"""

    income: float
    expense: float
    savings: float
    savings_rate: float

    @classmethod
    def from_totals(cls, income: float, expense: float) -> "MonthlyMetrics":
        savings = income - expense
        savings_rate = (savings / income) * 100 if income > 0 else 0.0
        return cls(income=income, expense=expense, savings=savings, savings_rate=savings_rate)


@dataclass
class BudgetData:
    """Budget limit and spend so far"""

    amount: float
    spent: float
    historical_average: Optional[float] = None
    name: str = ""
    id: Optional[str] = None


@dataclass
class BudgetAdjustment:
    suggested: float
    reason: str


@dataclass
class PaceWarning:
    warning: bool
    message: str


@dataclass
class BudgetPriority:
    budget: BudgetData
    priority: int  # 1 = most urgent
    reason: str


@dataclass
class CategoryShare:
    category: str
    amount: float
    percentage: float


@dataclass
class FinancialInsights:
    """Narrative report for a month"""

    summary: str
    top_categories: List[CategoryShare]
    monthly_trend: str
    budget_status: str
    recommendations: List[str]
    risk_factors: List[str]
    financial_score: int


@dataclass
class ParsedReceipt:
    """Output of receipt recognition"""

    merchant: str
    amount: str
    date: date
    items: List[str]
    confidence: float


@dataclass
class Subscription:
    name: str
    amount: float
    billing_cycle: str
    next_billing_date: date
    merchant: Optional[str] = None
    id: Optional[str] = None


# Per-item batch outcomes. Each case carries only the fields relevant to it.


@dataclass
class ImportSuccess:
    sms: str
    amount: float
    type: str
    transaction_id: str
    status: Literal["success"] = "success"


@dataclass
class ImportDuplicate:
    sms: str
    reason: str = "Similar transaction found"
    status: Literal["duplicate"] = "duplicate"


@dataclass
class ImportFailed:
    sms: str
    reason: str = "Could not parse"
    status: Literal["failed"] = "failed"


@dataclass
class ImportStoreError:
    sms: str
    reason: str = "Database error"
    status: Literal["error"] = "error"


ImportOutcome = Union[ImportSuccess, ImportDuplicate, ImportFailed, ImportStoreError]


@dataclass
class ImportSummary:
    imported: int = 0
    outcomes: List[ImportOutcome] = field(default_factory=list)


@dataclass
class ScanSuccess:
    file: str
    merchant: str
    amount: str
    confidence: float
    image_url: str
    status: Literal["success"] = "success"


@dataclass
class ScanError:
    file: str
    reason: str
    status: Literal["error"] = "error"


ScanOutcome = Union[ScanSuccess, ScanError]
