"""Field checks shared by the transaction, recurring and import paths."""
from utils.constants import FREQUENCIES, TRANSACTION_TYPES
from utils.date_helpers import parse_date
from utils.errors import ValidationError


def clean_description(description) -> str:
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("Description is required.")
    return description.strip()


def parse_amount(amount) -> float:
    """Accept a number or numeric string; return its magnitude."""
    if amount is None or isinstance(amount, bool) or (isinstance(amount, str) and not amount.strip()):
        raise ValidationError("Amount is required.")
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValidationError(f"Amount must be a number, got {amount!r}.") from None
    if value != value or value in (float("inf"), float("-inf")):
        raise ValidationError("Amount must be a finite number.")
    if value == 0:
        raise ValidationError("Amount cannot be zero.")
    return abs(value)


def signed_amount(magnitude: float, type_: str) -> float:
    """Expenses are stored negative, income positive."""
    return -abs(magnitude) if type_ == "expense" else abs(magnitude)


def check_type(type_: str) -> str:
    if type_ not in TRANSACTION_TYPES:
        raise ValidationError(f"Type must be one of {', '.join(TRANSACTION_TYPES)}.")
    return type_


def check_date(date_str: str, label: str = "Date") -> str:
    if not parse_date(date_str):
        raise ValidationError(f"{label} must use the YYYY-MM-DD format.")
    return date_str


def check_frequency(frequency: str) -> str:
    if frequency not in FREQUENCIES:
        raise ValidationError(f"Frequency must be one of {', '.join(FREQUENCIES)}.")
    return frequency
