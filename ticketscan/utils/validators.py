"""
Search parameter validation shared by the HTTP API and the CLI.

Every function raises ``ValueError`` with a message fit for the end user;
the API turns it into a 400 response and the CLI into a bad-parameter error.
"""

from datetime import date
from typing import List, Optional

from ticketscan.utils.date_utils import parse_date


def validate_airport_code(value: Optional[str], field: str = "Airport code") -> str:
    """
    Validate an airport IATA code.

    Must be exactly 3 alphabetic characters (case-insensitive).

    Returns:
        Uppercase airport code

    Raises:
        ValueError: If the code is missing or malformed
    """
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")

    value = value.strip()
    if len(value) != 3:
        raise ValueError(
            f"{field} must be exactly 3 characters (got '{value}' with {len(value)} characters)"
        )
    if not value.isalpha():
        raise ValueError(f"{field} must contain only letters (got '{value}')")

    return value.upper()


def validate_airport_codes_list(value: Optional[str], field: str = "destinations") -> List[str]:
    """
    Validate a comma-separated list of airport codes.

    Duplicates are dropped, first occurrence kept.

    Raises:
        ValueError: If the list is empty or any code is invalid
    """
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")

    codes: List[str] = []
    for raw in value.split(","):
        if not raw.strip():
            continue
        code = validate_airport_code(raw, field="Destination")
        if code not in codes:
            codes.append(code)

    if not codes:
        raise ValueError(f"{field} must contain at least one airport code")
    return codes


def validate_date(value: Optional[str], field: str) -> date:
    """
    Parse a YYYY-MM-DD date.

    Raises:
        ValueError: If the date is missing or not a real calendar date
    """
    if value is None or not str(value).strip():
        raise ValueError(f"{field} is required")
    try:
        return parse_date(str(value).strip())
    except ValueError:
        raise ValueError(
            f"Invalid {field}. Expected YYYY-MM-DD (e.g., 2025-12-25), got '{value}'"
        )


def validate_trip_dates(departure_date: date, return_date: date) -> None:
    """
    Raises:
        ValueError: If the return date is before the departure date
    """
    if return_date < departure_date:
        raise ValueError(
            f"return_date ({return_date}) must not be before departure_date ({departure_date})"
        )


def validate_travelers(adults: int, infants: int) -> None:
    """
    Check traveler counts: at least one adult, no negative infants.

    Raises:
        ValueError: If a count is out of range
    """
    if adults < 1:
        raise ValueError(f"adults must be at least 1 (got {adults})")
    if infants < 0:
        raise ValueError(f"infants must not be negative (got {infants})")
