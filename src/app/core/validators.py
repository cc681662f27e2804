"""Input validators shared by the project services."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Final

from src.app.core.errors import ValidationError

PROJECT_CODE_REGEX: Final[str] = r"^(\d+)-(\d{4})$"
HOURS_MAX_DIGITS: Final[int] = 10
HOURS_DECIMAL_PLACES: Final[int] = 2
HOURS_QUANTUM: Final[Decimal] = Decimal("0.01")
# Largest magnitude a NUMERIC(10, 2) hours column can store
MAX_HOURS: Final[Decimal] = Decimal("99999999.99")

_PROJECT_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(PROJECT_CODE_REGEX)


def validate_reason(reason: str | None, *, min_length: int) -> str:
    """Return the stripped reason or raise if it is missing or too short."""
    cleaned = (reason or "").strip()
    if len(cleaned) < min_length:
        raise ValidationError(
            f"Reason is required (minimum {min_length} characters)",
            {"min_length": min_length},
        )
    return cleaned


def to_hours(value: Decimal | int | float | str) -> Decimal:
    """Coerce a numeric value to hours with two decimal places.

    Raises:
        ValidationError: Not a number, not finite, or beyond +/- MAX_HOURS.
    """
    try:
        hours = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError("Hours must be a number") from e
    if not hours.is_finite():
        raise ValidationError("Hours must be a finite number")
    # Bounded before quantize, which raises past 28 significant digits
    if abs(hours) > MAX_HOURS:
        raise ValidationError(f"Hours must not exceed {MAX_HOURS}", {"max_hours": str(MAX_HOURS)})
    return hours.quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def parse_project_code(code: str) -> tuple[int, int] | None:
    """Split '<sequence>-<year>' into (sequence, year); None if malformed."""
    match = _PROJECT_CODE_PATTERN.match(code)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def format_project_code(sequence: int, year: int) -> str:
    return f"{sequence}-{year}"
