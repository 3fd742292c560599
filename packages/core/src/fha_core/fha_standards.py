"""FHA program standards for borrowing-power calculations.

This module contains the FHA mortgage insurance premium table, credit and
down-payment requirements, DTI compensating-factor definitions, and the
residual-income thresholds used by the factor evaluator.

Sources:
- MIP: HUD Mortgagee Letter 2023-05 (effective March 20, 2023)
- Credit / down payment: HUD Handbook 4000.1, II.A.2
- Compensating factors: HUD Handbook 4000.1, II.A.5.d (manual underwriting)
- Residual income: approximation of VA residual guidance, 1-2 unit properties

Updated: 2024
"""

from decimal import Decimal
from typing import Optional

from .models import CompensatingFactor, FactorCategory, USRegion


# =============================================================================
# VERSION TRACKING
# =============================================================================

FHA_STANDARDS_VERSION = "2024-ML-2023-05"


def get_fha_standards_version() -> str:
    """Return current FHA standards version."""
    return FHA_STANDARDS_VERSION


# =============================================================================
# MORTGAGE INSURANCE PREMIUM (MIP)
# =============================================================================
# Annual rates by term, base loan amount and LTV band. Upfront MIP is 1.75%
# for every loan regardless of term or LTV.

MIP_LOAN_AMOUNT_THRESHOLD = Decimal("726200")
UPFRONT_MIP_RATE = Decimal("0.0175")

# Loans with terms <= 15 years
MIP_SHORT_TERM_BASE_LTV_90_OR_LESS = Decimal("0.0015")
MIP_SHORT_TERM_BASE_LTV_OVER_90 = Decimal("0.0040")
MIP_SHORT_TERM_HIGH_LTV_78_OR_LESS = Decimal("0.0015")
MIP_SHORT_TERM_HIGH_LTV_78_TO_90 = Decimal("0.0040")
MIP_SHORT_TERM_HIGH_LTV_OVER_90 = Decimal("0.0065")

# Loans with terms > 15 years
MIP_LONG_TERM_BASE_LTV_95_OR_LESS = Decimal("0.0050")
MIP_LONG_TERM_BASE_LTV_OVER_95 = Decimal("0.0055")
MIP_LONG_TERM_HIGH_LTV_95_OR_LESS = Decimal("0.0070")
MIP_LONG_TERM_HIGH_LTV_OVER_95 = Decimal("0.0075")

SHORT_TERM_MAX_YEARS = 15

# One-shot MIP estimates used by the max-loan solver before the LTV is known
ESTIMATED_MIP_RATE_BASE = Decimal("0.0050")
ESTIMATED_MIP_RATE_HIGH = Decimal("0.0070")


def get_annual_mip_rate(loan_amount: Decimal, ltv: Decimal, loan_term_years: int) -> Decimal:
    """Look up the annual MIP rate.

    Args:
        loan_amount: Base loan amount
        ltv: Loan-to-value in percent (e.g. 96.5)
        loan_term_years: Loan term in years

    Returns:
        Annual MIP rate as a fraction of the loan amount
    """
    is_base_loan_amount = loan_amount <= MIP_LOAN_AMOUNT_THRESHOLD

    if loan_term_years <= SHORT_TERM_MAX_YEARS:
        if is_base_loan_amount:
            if ltv <= 90:
                return MIP_SHORT_TERM_BASE_LTV_90_OR_LESS
            return MIP_SHORT_TERM_BASE_LTV_OVER_90
        if ltv <= 78:
            return MIP_SHORT_TERM_HIGH_LTV_78_OR_LESS
        if ltv <= 90:
            return MIP_SHORT_TERM_HIGH_LTV_78_TO_90
        return MIP_SHORT_TERM_HIGH_LTV_OVER_90

    if ltv <= 95:
        return MIP_LONG_TERM_BASE_LTV_95_OR_LESS if is_base_loan_amount else MIP_LONG_TERM_HIGH_LTV_95_OR_LESS
    return MIP_LONG_TERM_BASE_LTV_OVER_95 if is_base_loan_amount else MIP_LONG_TERM_HIGH_LTV_OVER_95


def get_estimated_mip_rate(base_loan_amount: Decimal) -> Decimal:
    """Annual MIP rate assumed before the final LTV tier is known."""
    if base_loan_amount <= MIP_LOAN_AMOUNT_THRESHOLD:
        return ESTIMATED_MIP_RATE_BASE
    return ESTIMATED_MIP_RATE_HIGH


# =============================================================================
# CREDIT AND DOWN PAYMENT REQUIREMENTS
# =============================================================================

MIN_FICO_FOR_3_5_PERCENT = 580
MIN_FICO_FOR_10_PERCENT = 500
MIN_DOWN_PAYMENT_3_5 = Decimal("3.5")
MIN_DOWN_PAYMENT_10 = Decimal("10.0")
DEFAULT_LOAN_TERM_YEARS = 30


def get_min_down_payment(fico: int) -> Decimal:
    """Minimum down payment percent for a credit score."""
    if fico >= MIN_FICO_FOR_3_5_PERCENT:
        return MIN_DOWN_PAYMENT_3_5
    return MIN_DOWN_PAYMENT_10


# =============================================================================
# PROPERTY TAX AND INSURANCE FALLBACKS
# =============================================================================
# Used only when the tax / insurance estimators have not produced a value.

DEFAULT_PROPERTY_TAX_RATE = Decimal("0.012")  # 1.2% of price per year
DEFAULT_INSURANCE_RATE = Decimal("0.003")  # 0.3% of price per year


# =============================================================================
# MIP INPUT SANITY LIMITS
# =============================================================================

TYPICAL_MAX_LTV = Decimal("96.5")
MIN_TYPICAL_TERM_YEARS = 8
MAX_TYPICAL_TERM_YEARS = 30
NATIONAL_HIGH_COST_LIMIT = Decimal("1149825")  # 2024 ceiling


# =============================================================================
# DTI COMPENSATING FACTORS
# =============================================================================

BASE_DTI = Decimal("0.43")
MAX_DTI_WITH_FACTORS = Decimal("0.5699")
MAX_TOTAL_INCREASE = Decimal("0.1399")

MIN_CASH_RESERVE_MONTHS = Decimal("6")
MIN_HIGH_FICO = 740
MIN_LARGE_DOWN_PAYMENT = Decimal("10.0")
MAX_PAYMENT_INCREASE_PERCENT = Decimal("5.0")
MAX_DISCRETIONARY_DEBT_PERCENT = Decimal("10")

CASH_RESERVES = "cash_reserves"
MINIMAL_PAYMENT_INCREASE = "minimal_payment_increase"
RESIDUAL_INCOME = "residual_income"
NO_DISCRETIONARY_DEBT = "no_discretionary_debt"
HIGH_FICO = "high_fico"
LARGE_DOWN_PAYMENT = "large_down_payment"

# Factor templates in evaluation order; active copies are realized per run
COMPENSATING_FACTORS: dict[str, CompensatingFactor] = {
    CASH_RESERVES: CompensatingFactor(
        id=CASH_RESERVES,
        name="Cash Reserves",
        description="6+ months of mortgage payments in reserves",
        dti_increase=Decimal("0.03"),
        category=FactorCategory.FINANCIAL,
    ),
    MINIMAL_PAYMENT_INCREASE: CompensatingFactor(
        id=MINIMAL_PAYMENT_INCREASE,
        name="Minimal Payment Increase",
        description="New payment is minimal increase from current housing costs",
        dti_increase=Decimal("0.02"),
        category=FactorCategory.PAYMENT,
    ),
    RESIDUAL_INCOME: CompensatingFactor(
        id=RESIDUAL_INCOME,
        name="Adequate Residual Income",
        description="Sufficient income after all obligations",
        dti_increase=Decimal("0.02"),
        category=FactorCategory.FINANCIAL,
    ),
    NO_DISCRETIONARY_DEBT: CompensatingFactor(
        id=NO_DISCRETIONARY_DEBT,
        name="Low Revolving Balances",
        description="Credit card utilization under ~10% and limited non-essential payments",
        dti_increase=Decimal("0.02"),
        category=FactorCategory.FINANCIAL,
    ),
    HIGH_FICO: CompensatingFactor(
        id=HIGH_FICO,
        name="High Credit Score",
        description="FICO score of 740 or higher",
        dti_increase=Decimal("0.02"),
        category=FactorCategory.CREDIT,
    ),
    LARGE_DOWN_PAYMENT: CompensatingFactor(
        id=LARGE_DOWN_PAYMENT,
        name="Large Down Payment",
        description="Down payment of 10% or more",
        dti_increase=Decimal("0.02"),
        category=FactorCategory.PAYMENT,
    ),
}


# =============================================================================
# AUTOMATED UNDERWRITING (AUS) FRONTIER
# =============================================================================

AUS_DEFAULT_DTI = Decimal("0.45")
AUS_MID_DTI = Decimal("0.50")
AUS_MID_SCORE = Decimal("3")
AUS_TOP_SCORE = Decimal("5")
AUS_NO_CURRENT_PAYMENT_SHOCK = Decimal("999")


def get_aus_frontier_dti(signal_points: Decimal) -> Decimal:
    """Map an AUS signal score to its DTI tier."""
    if signal_points >= AUS_TOP_SCORE:
        return MAX_DTI_WITH_FACTORS
    if signal_points >= AUS_MID_SCORE:
        return AUS_MID_DTI
    return AUS_DEFAULT_DTI


# =============================================================================
# RESIDUAL INCOME
# =============================================================================
# Thresholds by region and household size (index 0 = 1 person, 7 = 8+).

RESIDUAL_INCOME_TABLE: dict[USRegion, list[Decimal]] = {
    USRegion.NORTHEAST: [Decimal(v) for v in (500, 850, 1000, 1150, 1250, 1350, 1450, 1550)],
    USRegion.MIDWEST: [Decimal(v) for v in (450, 800, 950, 1100, 1200, 1300, 1400, 1500)],
    USRegion.SOUTH: [Decimal(v) for v in (440, 780, 920, 1070, 1170, 1270, 1370, 1470)],
    USRegion.WEST: [Decimal(v) for v in (520, 900, 1050, 1200, 1300, 1400, 1500, 1600)],
}

MAX_RESIDUAL_HOUSEHOLD_SIZE = 8

# Simplified national threshold used when no region is known
NATIONAL_RESIDUAL_BASE = Decimal("492")
NATIONAL_RESIDUAL_PER_ADDITIONAL_MEMBER = Decimal("301")


def get_residual_income_threshold(region: USRegion, household_size: int) -> Decimal:
    """Get the regional residual-income threshold.

    Args:
        region: Census region
        household_size: People in the household; clamped to 1-8

    Returns:
        Minimum monthly residual income
    """
    size = max(1, min(MAX_RESIDUAL_HOUSEHOLD_SIZE, household_size or 1))
    return RESIDUAL_INCOME_TABLE[region][size - 1]


def get_national_residual_income_threshold(household_size: int) -> Decimal:
    """Simplified national residual-income threshold."""
    return NATIONAL_RESIDUAL_BASE + (household_size - 1) * NATIONAL_RESIDUAL_PER_ADDITIONAL_MEMBER


# =============================================================================
# REGIONS
# =============================================================================

_NORTHEAST = {"CT", "ME", "MA", "NH", "RI", "VT", "NJ", "NY", "PA"}
_MIDWEST = {"IL", "IN", "MI", "OH", "WI", "IA", "KS", "MN", "MO", "NE", "ND", "SD"}
_SOUTH = {
    "DE", "FL", "GA", "MD", "NC", "SC", "VA", "DC", "WV",
    "AL", "KY", "MS", "TN", "AR", "LA", "OK", "TX",
}
_WEST = {"AZ", "CO", "ID", "MT", "NV", "NM", "UT", "WY", "AK", "CA", "HI", "OR", "WA"}


def get_region_for_state(state: Optional[str]) -> Optional[USRegion]:
    """Get the census region for a two-letter state code.

    Unknown codes (territories, typos) return None, which sends the evaluator
    to the national residual threshold.
    """
    if not state:
        return None
    abbr = state.strip().upper()

    if abbr in _NORTHEAST:
        return USRegion.NORTHEAST
    elif abbr in _MIDWEST:
        return USRegion.MIDWEST
    elif abbr in _SOUTH:
        return USRegion.SOUTH
    elif abbr in _WEST:
        return USRegion.WEST
    return None
