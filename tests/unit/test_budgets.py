"""Unit tests for budget heuristics"""

import math
import pytest
from datetime import date, datetime, timedelta, timezone
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
from fintrack_gateway.domain.models import BudgetData


def test_calculate_budget_percentage():
    assert calculate_budget_percentage(BudgetData(amount=1000, spent=500)) == 50
    assert calculate_budget_percentage(BudgetData(amount=1000, spent=1500)) == 150


def test_zero_limit_budget_percentage():
    assert calculate_budget_percentage(BudgetData(amount=0, spent=0)) == 0.0
    assert calculate_budget_percentage(BudgetData(amount=0, spent=10)) == 100.0


@pytest.mark.parametrize(
    "percentage, level",
    [(0, "safe"), (50, "safe"), (79.99, "safe"), (80, "warning"), (85, "warning"), (100, "danger"), (140, "danger")],
)
def test_get_alert_level_thresholds(percentage, level):
    assert get_alert_level(percentage) == level


def test_get_alert_messages():
    assert get_alert_message(120, "Food") == '"Food" budget exceeded! You\'ve spent 120% of your limit.'
    assert get_alert_message(85, "Food") == '"Food" budget is at 85% of limit. Only 15% remaining.'
    assert get_alert_message(40, "Food") == '"Food" budget usage: 40% of limit.'


def test_alert_messages_round_half_up():
    assert get_alert_message(82.5, "Food") == '"Food" budget is at 83% of limit. Only 18% remaining.'
    assert get_alert_message(100.5, "Food") == '"Food" budget exceeded! You\'ve spent 101% of your limit.'


def test_suggest_adjustment_insufficient_data():
    adjustment = suggest_budget_adjustment(1000, 900, [])

    assert adjustment.suggested == 1000
    assert adjustment.reason == "Insufficient data for adjustment"
    assert suggest_budget_adjustment(1000, 900, [800]).suggested == 1000


def test_suggest_adjustment_two_months_uses_buffer():
    adjustment = suggest_budget_adjustment(1000, 900, [900, 1300])

    assert adjustment.suggested == math.ceil(1100 * 1.1)
    assert "10% buffer" in adjustment.reason


def test_suggest_adjustment_increasing_trend():
    adjustment = suggest_budget_adjustment(1000, 900, [1000, 1100, 1300])

    assert adjustment.suggested == math.ceil((3400 / 3) * 1.1)
    assert adjustment.reason.startswith("Expenses are increasing")


def test_suggest_adjustment_decreasing_trend():
    adjustment = suggest_budget_adjustment(1000, 900, [1000, 900, 700])
    assert adjustment.reason.startswith("Expenses are decreasing")


def test_suggest_adjustment_zero_first_month_has_no_trend():
    adjustment = suggest_budget_adjustment(1000, 900, [0, 500, 1000])
    assert "10% buffer" in adjustment.reason


@pytest.fixture
def start() -> datetime:
    return datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "period, expected",
    [("daily", 0), ("weekly", 4), ("monthly", 28), ("yearly", 362)],
)
def test_days_remaining_by_period(start, period, expected):
    now = start + timedelta(days=3, hours=1)
    assert get_days_remaining_in_period(period, start, now=now) == expected


def test_days_remaining_rounds_partial_day_up(start):
    now = start + timedelta(hours=12)
    assert get_days_remaining_in_period("weekly", start, now=now) == 7


def test_days_remaining_explicit_end_wins(start):
    assert get_days_remaining_in_period("monthly", start, date(2024, 3, 11), now=start) == 10


def test_days_remaining_custom_without_end_has_ended(start):
    assert get_days_remaining_in_period("custom", start, now=start + timedelta(hours=1)) == 0


def test_days_remaining_never_negative(start):
    assert get_days_remaining_in_period("weekly", start, now=start + timedelta(days=30)) == 0


def test_days_remaining_accepts_plain_dates():
    now = datetime(2024, 1, 31, tzinfo=timezone.utc)
    # Month arithmetic clamps to the last day of February
    assert get_days_remaining_in_period("monthly", date(2024, 1, 31), now=now) == 29


def test_unknown_period_rejected(start):
    with pytest.raises(InvalidPeriodError):
        get_days_remaining_in_period("fortnightly", start, now=start)


def test_estimate_daily_budget(start):
    assert estimate_daily_budget(7000, "weekly", start, now=start) == 1000
    assert estimate_daily_budget(7000, "weekly", start, now=start + timedelta(days=8)) == 0


def test_pace_period_ended():
    pace = warn_if_on_track_to_exceed(500, 100, 0, 1000)

    assert pace.warning is False
    assert pace.message == "Budget period has ended"


def test_pace_projected_overage():
    pace = warn_if_on_track_to_exceed(600, 100, 5, 1000)

    assert pace.warning is True
    assert pace.message == "At current pace, you'll exceed budget by ₹100 (projected 110%)"


def test_pace_high_usage_warning():
    pace = warn_if_on_track_to_exceed(400, 100, 5, 1000)

    assert pace.warning is True
    assert pace.message == "At current pace, you'll use 90% of budget"


def test_pace_on_track():
    pace = warn_if_on_track_to_exceed(100, 50, 5, 1000)
    assert pace.warning is False
    assert pace.message == ""


def test_pace_zero_budget():
    assert warn_if_on_track_to_exceed(0, 0, 5, 0).warning is False

    pace = warn_if_on_track_to_exceed(50, 0, 5, 0)
    assert pace.warning is True
    assert "%" not in pace.message


def test_prioritize_budgets_exceeded_first():
    budgets = [BudgetData(amount=1000, spent=500, name="Fun"), BudgetData(amount=1000, spent=1100, name="Food")]

    ranked = prioritize_budgets(budgets)

    assert [item.budget.name for item in ranked] == ["Food", "Fun"]
    assert ranked[0].priority == 1
    assert ranked[0].reason == "Exceeded budget limit"
    assert ranked[1].priority == 4


def test_prioritize_budgets_tiers_and_stable_order():
    budgets = [
        BudgetData(amount=100, spent=10, name="a"),
        BudgetData(amount=100, spent=76, name="b"),
        BudgetData(amount=100, spent=90, name="c"),
        BudgetData(amount=100, spent=20, name="d"),
        BudgetData(amount=100, spent=75, name="e"),
    ]

    ranked = prioritize_budgets(budgets)

    assert [(item.budget.name, item.priority) for item in ranked] == [
        ("c", 2),
        ("b", 3),
        ("e", 3),
        ("a", 4),
        ("d", 4),
    ]
