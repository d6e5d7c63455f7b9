"""
Conversion between major currency units (349.00) and Stripe's integer
minor units (34900).
"""

from decimal import ROUND_HALF_UP, Decimal

# Currencies Stripe charges without a fractional unit
# See: https://docs.stripe.com/currencies#zero-decimal
ZERO_DECIMAL_CURRENCIES = frozenset(
    {
        "bif",
        "clp",
        "djf",
        "gnf",
        "jpy",
        "kmf",
        "krw",
        "mga",
        "pyg",
        "rwf",
        "ugx",
        "vnd",
        "vuv",
        "xaf",
        "xof",
        "xpf",
    }
)


def _exponent(currency: str) -> int:
    return 0 if currency.lower() in ZERO_DECIMAL_CURRENCIES else 2


def to_minor_units(amount: Decimal | int | str, currency: str) -> int:
    """
    Convert a major-unit amount to an integer minor-unit amount.

    Rounds half up to the nearest minor unit, e.g. 10.005 BRL -> 1001.
    """
    scaled = Decimal(str(amount)) * (10 ** _exponent(currency))
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major_units(amount: int, currency: str) -> Decimal:
    """Convert an integer minor-unit amount back to major units."""
    exponent = _exponent(currency)
    return (Decimal(amount) / (10**exponent)).quantize(Decimal(1).scaleb(-exponent))
