"""
Fare utility functions for TicketScan.

Derives lap-infant fares from adult fares, builds family price breakdowns and
formats prices for display. Everything here is pure and synchronous.

Rounding rule: fares are whole currency units and are rounded half-up
(``decimal.ROUND_HALF_UP``), so 2.5 becomes 3. Python's built-in ``round``
(banker's rounding) is not used anywhere in pricing.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Optional

DEFAULT_INFANT_FARE_RATE = 0.10

# Lap-infant fare as a fraction of the adult fare, keyed by carrier code.
INFANT_FARE_RATES: Dict[str, float] = {
    # Japanese carriers
    "JAL": 0.10,
    "ANA": 0.10,
    # Asian carriers
    "KE": 0.10,
    "OZ": 0.10,
    "CI": 0.10,
    "BR": 0.10,
    "CX": 0.10,
    "SQ": 0.10,
    "TG": 0.10,
    # North American and European carriers
    "UA": 0.10,
    "AA": 0.10,
    "DL": 0.10,
    "BA": 0.10,
    "AF": 0.10,
    "LH": 0.10,
    # Low-cost carriers (lap infants may be priced close to adults when a seat is required)
    "MM": 0.10,
    "JW": 0.10,
    "7C": 0.10,
    "TW": 0.10,
}

CURRENCY_SYMBOLS: Dict[str, str] = {
    "JPY": "¥",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "KRW": "₩",
    "CNY": "CN¥",
    "HKD": "HK$",
    "TWD": "NT$",
    "SGD": "SGD ",
    "THB": "THB ",
    "AUD": "A$",
}


@dataclass(frozen=True)
class PriceBreakdown:
    """Family price for one offer."""

    adult_price: float
    infant_price: int
    adult_count: int
    infant_count: int
    adult_total: float
    infant_total: int
    grand_total: float
    currency: str


def _coerce_amount(value: Any) -> float:
    """
    Read a fare permissively.

    None, non-numeric strings, NaN/inf and negative numbers all read as 0.

    Examples:
        >>> _coerce_amount("50000")
        50000.0
        >>> _coerce_amount(None)
        0.0
        >>> _coerce_amount("abc")
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0

    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0

    if not math.isfinite(amount) or amount < 0:
        return 0.0

    return amount


def _coerce_count(value: Any) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, count)


def _quantize(value: Decimal) -> int:
    try:
        return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return 0


def round_fare(amount: Any) -> int:
    """
    Round a fare to whole currency units, half-up.

    Args:
        amount: Fare amount (int, float or numeric string)

    Returns:
        Rounded fare as int (0 for malformed input)

    Examples:
        >>> round_fare(2.5)
        3
        >>> round_fare(5000.4)
        5000
        >>> round_fare("1234.5")
        1235
    """
    return _quantize(Decimal(str(_coerce_amount(amount))))


def get_infant_fare_rate(airline_code: Optional[str] = None) -> float:
    """
    Get the lap-infant fare rate for a carrier.

    Unknown, empty or missing carrier codes use DEFAULT_INFANT_FARE_RATE.

    Examples:
        >>> get_infant_fare_rate("JAL")
        0.1
        >>> get_infant_fare_rate("ZZ") == get_infant_fare_rate(None)
        True
    """
    if not airline_code:
        return DEFAULT_INFANT_FARE_RATE
    return INFANT_FARE_RATES.get(airline_code.strip().upper(), DEFAULT_INFANT_FARE_RATE)


def derive_infant_fare(adult_fare: Any, airline_code: Optional[str] = None) -> int:
    """
    Derive the lap-infant fare from the adult fare.

    Args:
        adult_fare: Adult fare in whole currency units
        airline_code: Carrier code used to look up the infant rate (optional)

    Returns:
        round_fare(adult_fare * rate)

    Examples:
        >>> derive_infant_fare(50000, "JAL")
        5000
        >>> derive_infant_fare(12345)
        1235
    """
    rate = Decimal(str(get_infant_fare_rate(airline_code)))
    return _quantize(Decimal(str(_coerce_amount(adult_fare))) * rate)


def compute_family_price(
    adult_fare: Any,
    adult_count: int,
    infant_count: int,
    currency: str,
    airline_code: Optional[str] = None,
) -> PriceBreakdown:
    """
    Build the full family price breakdown for one offer.

    Never raises: a missing or zero adult fare yields zero totals.

    Args:
        adult_fare: Fare per adult
        adult_count: Number of adults
        infant_count: Number of lap infants
        currency: Currency code passed through untouched
        airline_code: Carrier code for the infant rate (optional)

    Returns:
        PriceBreakdown where grand_total == adult_total + infant_total

    Examples:
        >>> breakdown = compute_family_price(50000, 2, 1, "JPY", "JAL")
        >>> breakdown.grand_total
        105000
    """
    adult_price = _coerce_amount(adult_fare)
    if adult_price.is_integer():
        adult_price = int(adult_price)

    adults = _coerce_count(adult_count)
    infants = _coerce_count(infant_count)

    infant_price = derive_infant_fare(adult_price, airline_code)
    adult_total = adult_price * adults
    infant_total = infant_price * infants

    return PriceBreakdown(
        adult_price=adult_price,
        infant_price=infant_price,
        adult_count=adults,
        infant_count=infants,
        adult_total=adult_total,
        infant_total=infant_total,
        grand_total=adult_total + infant_total,
        currency=currency,
    )


def format_price(amount: Any, currency: str = "JPY") -> str:
    """
    Format a price with its currency symbol, thousands separators and no
    fractional digits.

    Args:
        amount: Price in whole currency units
        currency: ISO currency code (default: 'JPY')

    Returns:
        Formatted price string

    Examples:
        >>> format_price(105000)
        '¥105,000'
        >>> format_price(1234.6, "USD")
        '$1,235'
        >>> format_price(900, "CHF")
        'CHF 900'
    """
    value = round_fare(amount)
    code = (currency or "JPY").upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    return f"{symbol}{value:,}"
