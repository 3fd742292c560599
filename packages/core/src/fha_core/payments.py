"""Amortization, MIP and PITI calculations for FHA loans.

All functions are pure. Rates passed as ``annual_interest_rate`` are percents
(7.0 means 7%); MIP and DTI rates are fractions (0.0055, 0.43).
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .exceptions import ValidationError
from .fha_standards import (
    DEFAULT_INSURANCE_RATE,
    DEFAULT_LOAN_TERM_YEARS,
    DEFAULT_PROPERTY_TAX_RATE,
    MAX_DTI_WITH_FACTORS,
    MAX_TYPICAL_TERM_YEARS,
    MIN_TYPICAL_TERM_YEARS,
    NATIONAL_HIGH_COST_LIMIT,
    TYPICAL_MAX_LTV,
    UPFRONT_MIP_RATE,
    get_annual_mip_rate,
    get_estimated_mip_rate,
)
from .models import MIPRates, PITIBreakdown

WHOLE = Decimal("1")
CENTS = Decimal("0.01")
RATIO_PLACES = Decimal("0.0001")
LTV_LOOKUP_PLACES = Decimal("0.00000001")


# =============================================================================
# ROUNDING
# =============================================================================

def round_currency(value: Decimal) -> Decimal:
    """Round to whole dollars, half up."""
    return value.quantize(WHOLE, rounding=ROUND_HALF_UP)


def round_cents(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def round_ratio(value: Decimal) -> Decimal:
    """Round a fractional ratio to 4 places (0.4300)."""
    return value.quantize(RATIO_PLACES, rounding=ROUND_HALF_UP)


def loan_to_value(loan_amount: Decimal, home_price: Decimal) -> Decimal:
    """LTV percent at 8 places, which drops Decimal division residue only."""
    return ((loan_amount / home_price) * 100).quantize(LTV_LOOKUP_PLACES, rounding=ROUND_HALF_UP)


# =============================================================================
# AMORTIZATION
# =============================================================================

def amortized_payment(principal: Decimal, monthly_rate: Decimal, num_payments: int) -> Decimal:
    """Fully amortizing payment: P * r(1+r)^n / ((1+r)^n - 1)."""
    if monthly_rate == 0:
        return principal / num_payments
    growth = (1 + monthly_rate) ** num_payments
    return principal * (monthly_rate * growth) / (growth - 1)


def principal_from_payment(payment: Decimal, monthly_rate: Decimal, num_payments: int) -> Decimal:
    """Invert the annuity formula to find the principal a payment supports."""
    if monthly_rate == 0:
        return payment * num_payments
    growth = (1 + monthly_rate) ** num_payments
    return payment * (growth - 1) / (monthly_rate * growth)


def _check_term(term_years: int) -> None:
    if term_years <= 0:
        raise ValidationError(
            "Loan term must be positive",
            field="term_years",
            value=term_years,
            constraint="term_years > 0",
        )


# =============================================================================
# MORTGAGE INSURANCE
# =============================================================================

def compute_mip(
    loan_amount: Decimal,
    home_price: Decimal,
    loan_term_years: int = DEFAULT_LOAN_TERM_YEARS,
) -> MIPRates:
    """Calculate upfront and monthly FHA mortgage insurance.

    Upfront MIP is 1.75% of the loan amount for every term and LTV. The
    annual rate is looked up by term, base loan amount and the unrounded LTV
    band, then spread over 12 months. Both premiums and the reported LTV are
    rounded to cents.

    Args:
        loan_amount: Base loan amount
        home_price: Purchase price
        loan_term_years: Loan term in years

    Returns:
        MIPRates with upfront and monthly premiums
    """
    ltv = loan_to_value(loan_amount, home_price)
    annual_rate = get_annual_mip_rate(loan_amount, ltv, loan_term_years)

    upfront = loan_amount * UPFRONT_MIP_RATE
    monthly = loan_amount * annual_rate / 12

    return MIPRates(
        upfront_mip=round_cents(upfront),
        monthly_mip=round_cents(monthly),
        annual_rate=annual_rate,
        ltv=round_cents(ltv),
    )


def validate_mip_inputs(
    loan_amount: Decimal,
    home_price: Decimal,
    loan_term_years: int = DEFAULT_LOAN_TERM_YEARS,
) -> tuple[bool, list[str]]:
    """Sanity-check MIP inputs.

    Returns:
        Tuple of (is_valid, warnings)
    """
    warnings: list[str] = []
    is_valid = True

    if loan_amount <= 0 or home_price <= 0:
        is_valid = False
        warnings.append("Loan amount and home price must be greater than zero")
        return is_valid, warnings

    if loan_amount >= home_price:
        is_valid = False
        warnings.append("Loan amount cannot equal or exceed home price")

    ltv = loan_to_value(loan_amount, home_price)
    if ltv > TYPICAL_MAX_LTV:
        warnings.append(f"LTV exceeds typical FHA maximum of {TYPICAL_MAX_LTV}%")

    if loan_term_years < MIN_TYPICAL_TERM_YEARS or loan_term_years > MAX_TYPICAL_TERM_YEARS:
        warnings.append("Unusual loan term - verify MIP rates apply")

    if loan_amount > NATIONAL_HIGH_COST_LIMIT:
        warnings.append("Loan amount may exceed FHA limits in your area")

    return is_valid, warnings


# =============================================================================
# PITI
# =============================================================================

def compute_piti(
    loan_amount: Decimal,
    home_price: Decimal,
    annual_interest_rate: Decimal,
    property_tax_monthly: Optional[Decimal] = None,
    insurance_monthly: Optional[Decimal] = None,
    term_years: int = DEFAULT_LOAN_TERM_YEARS,
) -> PITIBreakdown:
    """Calculate principal, interest, taxes, insurance and MIP.

    Property tax and insurance fall back to 1.2% and 0.3% of the home price
    per year when not supplied (None or zero). Every component is rounded to
    whole dollars except MIP, which keeps cents.

    Raises:
        ValidationError: If ``term_years`` is not positive.
    """
    _check_term(term_years)

    monthly_rate = annual_interest_rate / 100 / 12
    principal_and_interest = amortized_payment(loan_amount, monthly_rate, term_years * 12)

    mip = compute_mip(loan_amount, home_price, term_years).monthly_mip

    tax = property_tax_monthly or (home_price * DEFAULT_PROPERTY_TAX_RATE / 12)
    insurance = insurance_monthly or (home_price * DEFAULT_INSURANCE_RATE / 12)

    total = principal_and_interest + tax + insurance + mip

    return PITIBreakdown(
        principal_and_interest=round_currency(principal_and_interest),
        property_tax=round_currency(tax),
        insurance=round_currency(insurance),
        mip=mip,
        total=round_currency(total),
    )


# =============================================================================
# MAXIMUM LOAN
# =============================================================================

def max_loan_amount(
    income: Decimal,
    dti_ceiling: Decimal,
    monthly_debts: Decimal,
    annual_interest_rate: Decimal,
    term_years: int = DEFAULT_LOAN_TERM_YEARS,
) -> Decimal:
    """Largest principal whose payment fits under the DTI ceiling.

    Housing capacity is monthly income times the ceiling, less existing
    debts. The annuity is inverted once at the note rate to estimate the loan
    size, which picks an estimated MIP rate (0.50% or 0.70% a year), and then
    inverted again at note rate plus MIP. The MIP tier is not re-solved
    against the final LTV.

    Args:
        income: Annual gross income
        dti_ceiling: Allowed DTI as a fraction (0.43)
        monthly_debts: Existing monthly debt payments
        annual_interest_rate: Note rate in percent
        term_years: Loan term in years

    Returns:
        Unrounded principal, or 0 when there is no housing capacity
    """
    _check_term(term_years)

    monthly_income = income / 12
    housing_capacity = monthly_income * dti_ceiling - monthly_debts
    if housing_capacity <= 0:
        return Decimal("0")

    monthly_rate = annual_interest_rate / 100 / 12
    num_payments = term_years * 12

    base_loan = principal_from_payment(housing_capacity, monthly_rate, num_payments)

    adjusted_rate = monthly_rate + get_estimated_mip_rate(base_loan) / 12
    adjusted_loan = principal_from_payment(housing_capacity, adjusted_rate, num_payments)

    return max(Decimal("0"), adjusted_loan)


def calculate_max_dti(base_dti: Decimal, compensating_factor_increase: Decimal) -> Decimal:
    """Base DTI plus factor increase, capped at 56.99%."""
    return round_ratio(min(base_dti + compensating_factor_increase, MAX_DTI_WITH_FACTORS))
