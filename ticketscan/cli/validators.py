"""
Typer callbacks for CLI options.
Wrap the shared validators so bad input is reported as a bad parameter.
"""

from typing import Optional

import typer

from ticketscan.utils import validators


def validate_date_string(value: Optional[str]) -> Optional[str]:
    """
    Validate a YYYY-MM-DD date string.

    Returns:
        The validated date string (unchanged) or None if value is None

    Raises:
        typer.BadParameter: If the date is invalid
    """
    if value is None:
        return None
    try:
        validators.validate_date(value, "date")
    except ValueError as e:
        raise typer.BadParameter(str(e))
    return value


# Typer callback functions for use with Option/Argument
def airport_code_callback(value: Optional[str]) -> Optional[str]:
    """Callback for validating airport codes in Typer options."""
    if value is None:
        return None
    try:
        return validators.validate_airport_code(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def date_callback(value: Optional[str]) -> Optional[str]:
    """Callback for validating dates in Typer options."""
    return validate_date_string(value)


def airport_codes_list_callback(value: Optional[str]) -> Optional[str]:
    """Callback for validating comma-separated airport code lists."""
    if value is None:
        return None
    try:
        return ",".join(validators.validate_airport_codes_list(value))
    except ValueError as e:
        raise typer.BadParameter(str(e))


def adults_callback(value: int) -> int:
    if value < 1:
        raise typer.BadParameter(f"adults must be at least 1 (got {value})")
    return value


def infants_callback(value: int) -> int:
    if value < 0:
        raise typer.BadParameter(f"infants must not be negative (got {value})")
    return value
