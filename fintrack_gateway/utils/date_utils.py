"""Date manipulation utilities"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union
from dateutil.relativedelta import relativedelta
from fintrack_gateway.domain.exceptions import InvalidPeriodError

PERIOD_STEPS = {
    "daily": relativedelta(days=1),
    "weekly": relativedelta(days=7),
    "monthly": relativedelta(months=1),
    "yearly": relativedelta(years=1),
    "custom": relativedelta(),  # requires an explicit end date
}


def to_utc_datetime(value: Union[date, datetime]) -> datetime:
    """Dates become midnight UTC; naive datetimes are taken as UTC"""
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def period_end(period: str, start: Union[date, datetime], end: Optional[Union[date, datetime]] = None) -> datetime:
    """Resolve the end of a budget period (explicit end wins)"""
    if end is not None:
        return to_utc_datetime(end)
    if period not in PERIOD_STEPS:
        raise InvalidPeriodError(f"Unknown budget period: {period}")
    return to_utc_datetime(start) + PERIOD_STEPS[period]


def days_between(start: Union[date, datetime], end: Union[date, datetime]) -> float:
    """Fractional days from start to end (negative if end is earlier)"""
    delta: timedelta = to_utc_datetime(end) - to_utc_datetime(start)
    return delta.total_seconds() / 86400
