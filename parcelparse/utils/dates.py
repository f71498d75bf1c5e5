"""Business-day calendar used for shipping-method delivery estimates."""

from datetime import date, timedelta

SATURDAY = 5
SUNDAY = 6


def is_business_day(day: date) -> bool:
    """A business day is any day that is not Saturday or Sunday."""
    return day.weekday() not in (SATURDAY, SUNDAY)


def add_business_days(start: date, num_days: int) -> date:
    """
    Advance ``start`` by ``num_days`` business days.

    Counts forward one calendar day at a time and only counts weekdays, so
    the result for ``num_days > 0`` is never a Saturday or Sunday.
    ``num_days <= 0`` returns ``start`` unchanged.
    """
    if num_days <= 0:
        return start

    current = start
    days_added = 0

    while days_added < num_days:
        current += timedelta(days=1)
        if is_business_day(current):
            days_added += 1

    return current
