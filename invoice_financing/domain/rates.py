"""Rate model - banking constants and rounding rules for financing calculations"""

from decimal import Decimal, ROUND_HALF_UP

# Banking year used to prorate annual rates
BANKING_YEAR_DAYS = 360

# 1 bps = 0.01% = 1/10_000
BPS_DENOMINATOR = 10_000

# Invoices evaluated per page when no batch size is configured
DEFAULT_BATCH_SIZE = 500


def round_half_up(numerator: int, denominator: int) -> int:
    """
    Round numerator/denominator to the nearest integer, halves away from zero.

    Computed exactly on integers, so 4.5 -> 5 and 3.3333 -> 3 with no float drift.

    Example:
        round_half_up(1500, 360) -> 4   (4.1666...)
        round_half_up(1800, 400) -> 5   (4.5)
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    quotient = Decimal(numerator) / Decimal(denominator)
    return int(quotient.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def prorate_rate(annual_rate_bps: int, term_days: int) -> int:
    """
    Scale an annual rate down to the financing term using a 360-day year.

    Example:
        50 bps annual, 30 days -> round(50 * 30 / 360) = round(4.17) = 4
    """
    return round_half_up(annual_rate_bps * term_days, BANKING_YEAR_DAYS)


def calculate_interest_cents(value_cents: int, rate_bps: int) -> int:
    """Financier's interest: round(value * rate * 0.0001)"""
    return round_half_up(value_cents * rate_bps, BPS_DENOMINATOR)


def calculate_early_payment_cents(value_cents: int, rate_bps: int) -> int:
    """
    Amount paid to the issuer today: face value minus the financier's interest.

    The rate is already rounded (see prorate_rate); the interest is rounded
    again here, independently.
    """
    return value_cents - calculate_interest_cents(value_cents, rate_bps)
