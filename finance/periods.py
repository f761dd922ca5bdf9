"""
Resolution of reporting periods into closed ranges of aware datetimes.

Every range starts at local midnight and ends at the last representable
instant of a local day, in the project's ``TIME_ZONE``.
"""
from datetime import date, datetime, time, timedelta
from typing import Iterator, NamedTuple, Optional

from django.utils import timezone
from django.utils.dateparse import parse_date

from .exceptions import InvalidDateRange

PERIODS = ('today', 'week', 'month', 'custom')

# Inclusive window lengths, today included
PERIOD_DAYS = {
    'today': 1,
    'week': 7,
    'month': 30,
}


class DateRange(NamedTuple):
    start_date: datetime
    end_date: datetime

    def days(self) -> Iterator[date]:
        """Local calendar days covered by the range, oldest first"""
        day = timezone.localtime(self.start_date).date()
        last = timezone.localtime(self.end_date).date()
        while day <= last:
            yield day
            day += timedelta(days=1)

    def __str__(self):
        return f"{self.start_date.date().isoformat()}..{self.end_date.date().isoformat()}"


def start_of_day(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def end_of_day(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.max))


def _as_local_date(value) -> date:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidDateRange(f"Expected a date, got {value!r}.")


def get_date_range(period: str, custom_range=None, now: Optional[datetime] = None) -> DateRange:
    """
    Map a period token to a closed ``DateRange``.

    ``today``, ``week`` (7 days) and ``month`` (30 days) all end at the end
    of the current local day. ``custom`` needs ``custom_range``, a pair of
    dates or datetimes, each widened to whole local days.
    """
    today = timezone.localtime(now).date()

    if period in PERIOD_DAYS:
        first = today - timedelta(days=PERIOD_DAYS[period] - 1)
        return DateRange(start_of_day(first), end_of_day(today))

    if period == 'custom':
        if not custom_range or len(custom_range) != 2 or None in tuple(custom_range):
            raise InvalidDateRange('Custom date range is required.')
        first, last = (_as_local_date(value) for value in custom_range)
        if first > last:
            raise InvalidDateRange('Start date must not be after end date.')
        return DateRange(start_of_day(first), end_of_day(last))

    raise InvalidDateRange(f"Unknown period '{period}'. Expected one of: {', '.join(PERIODS)}.")


def trend_range(days: int, now: Optional[datetime] = None) -> DateRange:
    """Inclusive window of ``days`` local days ending today"""
    if days < 1:
        raise InvalidDateRange('Trend needs at least one day.')
    today = timezone.localtime(now).date()
    return DateRange(start_of_day(today - timedelta(days=days - 1)), end_of_day(today))


def range_from_query(params, default='today') -> Optional[DateRange]:
    """
    Build a range from ``period`` / ``start_date`` / ``end_date`` query params.

    Dates without a period imply ``custom``. Returns None when nothing is
    given and ``default`` is None.
    """
    start = params.get('start_date')
    end = params.get('end_date')
    period = params.get('period') or ('custom' if start or end else default)
    if period is None:
        return None

    if period != 'custom':
        return get_date_range(period)

    parsed = []
    for name, raw in (('start_date', start), ('end_date', end)):
        if not raw:
            raise InvalidDateRange(f"'{name}' is required for a custom period.")
        try:
            value = parse_date(raw)
        except ValueError:
            value = None
        if value is None:
            raise InvalidDateRange(f"'{name}' must be a date in YYYY-MM-DD format.")
        parsed.append(value)
    return get_date_range('custom', tuple(parsed))
