from datetime import date, datetime, timedelta
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT


def today() -> date:
    return date.today()


def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def current_month_str() -> str:
    return format_month(date.today())


def parse_date(date_str: str) -> date | None:
    """Parse a zero-padded YYYY-MM-DD string, returning None on failure."""
    if not date_str or not isinstance(date_str, str):
        return None
    try:
        parsed = datetime.strptime(date_str, DATE_FORMAT).date()
    except ValueError:
        return None
    # strptime also takes '2025-1-5'; stored dates must compare as strings
    return parsed if format_date(parsed) == date_str else None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str or not isinstance(month_str, str):
        return None
    try:
        parsed = datetime.strptime(month_str, MONTH_FORMAT).date()
    except ValueError:
        return None
    return parsed if format_month(parsed) == month_str else None


def month_key(date_str: str) -> str:
    """'2025-02-10' -> '2025-02'."""
    return date_str[:7]


def friendly_month(month_str: str) -> str:
    """Convert YYYY-MM to e.g. 'February 2026'."""
    d = parse_month(month_str)
    if d is None:
        return month_str
    return d.strftime("%B %Y")


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def _shift_month(d: date, n: int) -> tuple[int, int]:
    month = d.month - 1 + n
    return d.year + month // 12, month % 12 + 1


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    year, month = _shift_month(d, n)
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def add_months_rolling(d: date, n: int) -> date:
    """Add n months to date d; a day past the target month's end spills into
    the following month (Jan 31 + 1 -> Mar 3, or Mar 2 in a leap year)."""
    year, month = _shift_month(d, n)
    last_day = calendar.monthrange(year, month)[1]
    if d.day <= last_day:
        return date(year, month, d.day)
    return date(year, month, last_day) + timedelta(days=d.day - last_day)


def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)
