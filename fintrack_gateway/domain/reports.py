"""Narrative financial report generation from monthly aggregates"""

from datetime import date
from typing import List, Mapping, Optional, Sequence
from fintrack_gateway.domain.models import CategoryShare, FinancialInsights, MonthlyMetrics
from fintrack_gateway.utils.money import format_inr, format_pct

EMERGENCY_FUND_INCOME_THRESHOLD = 50_000
TOP_CATEGORY_LIMIT = 5


def generate_financial_report(
    current_month: MonthlyMetrics,
    previous_month: MonthlyMetrics,
    category_spending: Mapping[str, float],
    total_expense: float,
    as_of: Optional[date] = None,
) -> FinancialInsights:
    """
    Main entry point: turn two months of metrics into a readable report.

    Flow:
    1. Month-over-month deltas for income and expense
    2. Summary, trend and budget status prose
    3. Top spending categories with share of total expense
    4. Recommendations, risk factors and a 0-100 health score
    """
    month_name = (as_of or date.today()).strftime("%B %Y")

    income_trend = current_month.income - previous_month.income
    expense_trend = current_month.expense - previous_month.expense

    top_categories = rank_top_categories(category_spending, total_expense)

    return FinancialInsights(
        summary=generate_summary(current_month, month_name, income_trend),
        top_categories=top_categories,
        monthly_trend=generate_trend_analysis(current_month, previous_month, expense_trend),
        budget_status=generate_budget_status(current_month.savings_rate),
        recommendations=generate_recommendations(current_month, top_categories, expense_trend),
        risk_factors=generate_risk_factors(current_month, previous_month, expense_trend),
        financial_score=calculate_financial_score(
            current_month, expense_variance(current_month, previous_month)
        ),
    )


def generate_summary(metrics: MonthlyMetrics, month: str, income_trend: float) -> str:
    rate = metrics.savings_rate
    parts = [
        f"In {month}, you earned ₹{format_inr(metrics.income)} and spent ₹{format_inr(metrics.expense)}.",
        f"Your net savings were ₹{format_inr(metrics.savings)}.",
    ]

    if rate > 30:
        parts.append(
            f"Excellent job maintaining a savings rate of {format_pct(rate, 1)}%! Keep up this disciplined approach."
        )
    elif rate > 20:
        parts.append(f"Your savings rate of {format_pct(rate, 1)}% is solid. You're on the right track.")
    elif rate > 10:
        parts.append(f"Your savings rate is {format_pct(rate, 1)}%. Consider increasing it for better financial security.")
    elif rate >= 0:
        parts.append(f"Your savings rate is only {format_pct(rate, 1)}%. Focus on reducing discretionary spending.")
    else:
        parts.append("Warning: You spent more than you earned! Start reviewing your expenses.")

    if income_trend > 0:
        parts.append(f"Income increased by ₹{format_inr(income_trend)}.")
    elif income_trend < 0:
        parts.append(f"Income decreased by ₹{format_inr(abs(income_trend))}.")

    return " ".join(parts)


def rank_top_categories(category_spending: Mapping[str, float], total_expense: float) -> List[CategoryShare]:
    """Largest categories first, at most five, with percentage of total expense"""
    ranked = sorted(category_spending.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryShare(
            category=category,
            amount=amount,
            percentage=(amount / total_expense) * 100 if total_expense > 0 else 0.0,
        )
        for category, amount in ranked[:TOP_CATEGORY_LIMIT]
    ]


def generate_trend_analysis(current: MonthlyMetrics, previous: MonthlyMetrics, expense_trend: float) -> str:
    analysis = "Month-over-Month Analysis: "

    # Only report expense moves larger than 10% of last month
    if previous.expense > 0:
        change = expense_trend / previous.expense
        if change > 0.1:
            analysis += f"Expenses increased by {format_pct(change * 100, 1)}%. "
        elif change < -0.1:
            analysis += f"Expenses decreased by {format_pct(abs(change) * 100, 1)}%. "

    if current.savings_rate > previous.savings_rate:
        analysis += (
            f"Your savings improved by {format_pct(current.savings_rate - previous.savings_rate, 1)} percentage points."
        )
    elif current.savings_rate < previous.savings_rate:
        analysis += (
            f"Your savings decreased by {format_pct(previous.savings_rate - current.savings_rate, 1)} percentage points."
        )
    else:
        analysis += "Your savings rate remained stable."

    return analysis


def generate_budget_status(savings_rate: float) -> str:
    if savings_rate > 35:
        return (
            "Budget Status: Excellent - You are on track to meet your financial goals. "
            "Consider allocating surplus towards investments or emergency fund."
        )
    elif savings_rate > 25:
        return "Budget Status: Good - Your spending is well-controlled. Maintain this discipline."
    elif savings_rate > 15:
        return "Budget Status: Fair - You have room to optimize. Review discretionary expenses."
    elif savings_rate > 0:
        return "Budget Status: Needs Attention - Cut non-essential expenses to improve your financial health."
    else:
        return (
            "Budget Status: Critical - Your expenses exceed income. "
            "Immediate action required to address deficit spending."
        )


def generate_recommendations(
    metrics: MonthlyMetrics,
    top_categories: Sequence[CategoryShare],
    expense_trend: float,
) -> List[str]:
    recommendations = []

    if top_categories and top_categories[0].percentage > 30:
        top = top_categories[0]
        recommendations.append(
            f"Your top spending category ({top.category}) accounts for {format_pct(top.percentage, 1)}% of expenses. "
            "Consider setting a strict limit for this category."
        )

    if expense_trend > 0:
        recommendations.append(
            "Your monthly expenses are increasing. Review recent transactions to identify "
            "unnecessary spending patterns."
        )

    if metrics.savings_rate < 20:
        recommendations.append(
            "Aim to save at least 20% of your income. Start by tracking and reducing discretionary spending."
        )

    if metrics.income < EMERGENCY_FUND_INCOME_THRESHOLD:
        recommendations.append("Consider building a 3-month emergency fund as a priority before major investments.")

    recommendations.append("Review subscriptions and recurring expenses monthly to eliminate unused services.")

    return recommendations


def generate_risk_factors(current: MonthlyMetrics, previous: MonthlyMetrics, expense_trend: float) -> List[str]:
    risks = []

    if current.savings < 0:
        risks.append("Deficit spending detected - spending exceeds income")

    if expense_trend > previous.expense * 0.2:
        risks.append("Sharp increase in expenses - possible unusual spending")

    if current.savings_rate <= 0:
        risks.append("Zero savings rate - no financial cushion being built")

    if current.expense > current.income * 1.2:
        risks.append("Expenses significantly exceed income - requires attention")

    return risks


def expense_variance(current: MonthlyMetrics, previous: MonthlyMetrics) -> float:
    """Relative change in expense vs last month (0 without a baseline)"""
    if previous.expense <= 0:
        return 0.0
    return (current.expense - previous.expense) / previous.expense


def calculate_financial_score(metrics: MonthlyMetrics, expense_variance: float) -> int:
    """
    Financial health score, clamped to 0-100.

    Adjustments from a base of 100:
    - Savings rate: <15 -30, <25 -15, >=35 +10
    - Expense variance: >0.3 -10, <-0.2 -5
    - Expense above 110% of income: -25
    """
    score = 100

    if metrics.savings_rate < 15:
        score -= 30
    elif metrics.savings_rate < 25:
        score -= 15
    elif metrics.savings_rate >= 35:
        score += 10

    if expense_variance > 0.3:
        score -= 10
    if expense_variance < -0.2:
        score -= 5

    if metrics.expense > metrics.income * 1.1:
        score -= 25

    return max(0, min(100, score))


def predict_future_spending(monthly_data: Sequence[MonthlyMetrics]) -> MonthlyMetrics:
    """
    Predict next month from history.

    Income is the historical average. Expense is the average nudged by
    half the relative expense change across the last (up to) 3 months.
    """
    if not monthly_data:
        return MonthlyMetrics(income=0.0, expense=0.0, savings=0.0, savings_rate=0.0)

    avg_income = sum(m.income for m in monthly_data) / len(monthly_data)
    avg_expense = sum(m.expense for m in monthly_data) / len(monthly_data)

    recent = monthly_data[-3:]
    trend = 0.0
    if len(recent) > 1 and recent[0].expense != 0:
        trend = (recent[-1].expense - recent[0].expense) / recent[0].expense

    predicted_expense = avg_expense * (1 + trend * 0.5)
    predicted_savings = avg_income - predicted_expense
    predicted_rate = (predicted_savings / avg_income) * 100 if avg_income > 0 else 0.0

    return MonthlyMetrics(
        income=avg_income,
        expense=predicted_expense,
        savings=predicted_savings,
        savings_rate=predicted_rate,
    )
