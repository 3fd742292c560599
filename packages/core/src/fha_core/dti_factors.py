"""DTI compensating factors for manually underwritten FHA loans.

Six independent rules may each raise the allowed DTI above the 43% base.
There is no partial credit: a factor contributes its full increment or
nothing. The combined increment is capped at 13.99 points and the ceiling at
56.99%. An optional AUS heuristic scores the same signals and can only
tighten the additive ceiling.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import structlog

from .fha_standards import (
    AUS_NO_CURRENT_PAYMENT_SHOCK,
    BASE_DTI,
    CASH_RESERVES,
    COMPENSATING_FACTORS,
    HIGH_FICO,
    LARGE_DOWN_PAYMENT,
    MAX_DISCRETIONARY_DEBT_PERCENT,
    MAX_DTI_WITH_FACTORS,
    MAX_PAYMENT_INCREASE_PERCENT,
    MAX_TOTAL_INCREASE,
    MIN_CASH_RESERVE_MONTHS,
    MIN_HIGH_FICO,
    MIN_LARGE_DOWN_PAYMENT,
    MINIMAL_PAYMENT_INCREASE,
    NO_DISCRETIONARY_DEBT,
    RESIDUAL_INCOME,
    get_aus_frontier_dti,
    get_national_residual_income_threshold,
    get_residual_income_threshold,
)
from .models import (
    CompensatingFactor,
    DTICalculationResult,
    DTIFactorState,
    DTIProgress,
    DTIProgressStep,
    FactorOptions,
    USRegion,
)
from .payments import round_cents, round_currency, round_ratio

logger = structlog.get_logger()

ZERO = Decimal("0")


# =============================================================================
# INDIVIDUAL FACTORS
# =============================================================================

def evaluate_cash_reserves(reserves: Decimal, monthly_payment: Decimal) -> tuple[Decimal, bool]:
    """Months of housing payment covered by reserves.

    Returns:
        Tuple of (months rounded to 0.1, qualifies)
    """
    months = reserves / monthly_payment if monthly_payment > 0 else ZERO
    qualifies = months >= MIN_CASH_RESERVE_MONTHS
    return months.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP), qualifies


def evaluate_minimal_payment_increase(
    current_housing_payment: Decimal,
    new_mortgage_payment: Decimal,
) -> tuple[Decimal, bool]:
    """Payment shock from the current housing payment to the new one.

    A new payment at most 5% above the current one qualifies, and so does a
    lower payment. Without a current housing payment the factor never applies.

    Returns:
        Tuple of (increase percent rounded to cents, qualifies)
    """
    if current_housing_payment <= 0:
        return ZERO, False

    increase_percent = (new_mortgage_payment - current_housing_payment) / current_housing_payment * 100
    qualifies = increase_percent <= MAX_PAYMENT_INCREASE_PERCENT
    return round_cents(increase_percent), qualifies


def get_min_residual_income(household_size: int, region: Optional[USRegion] = None) -> Decimal:
    """Residual-income threshold, regional when a region is known."""
    if region is not None:
        return get_residual_income_threshold(region, household_size)
    return get_national_residual_income_threshold(household_size)


def evaluate_residual_income(
    monthly_income: Decimal,
    total_monthly_obligations: Decimal,
    household_size: int = 1,
    monthly_taxes: Optional[Decimal] = None,
    childcare_expense: Optional[Decimal] = None,
    region: Optional[USRegion] = None,
) -> tuple[Decimal, Decimal, bool]:
    """Income left after taxes, obligations and childcare.

    Returns:
        Tuple of (residual amount rounded to dollars, threshold, qualifies)
    """
    residual = (
        monthly_income
        - (monthly_taxes or ZERO)
        - total_monthly_obligations
        - (childcare_expense or ZERO)
    )
    threshold = get_min_residual_income(household_size, region)
    return round_currency(residual), threshold, residual >= threshold


def evaluate_discretionary_debt(
    total_monthly_debts: Decimal,
    necessary_debts: Decimal,
) -> tuple[Decimal, bool]:
    """Share of monthly debt that is discretionary (revolving, non-essential).

    Returns:
        Tuple of (discretionary debt rounded to dollars, qualifies)
    """
    discretionary = max(ZERO, total_monthly_debts - necessary_debts)
    percent = discretionary / total_monthly_debts * 100 if total_monthly_debts > 0 else ZERO
    return round_currency(discretionary), percent <= MAX_DISCRETIONARY_DEBT_PERCENT


def evaluate_high_fico(fico: int) -> bool:
    return fico >= MIN_HIGH_FICO


def evaluate_large_down_payment(down_payment_percent: Decimal) -> bool:
    return down_payment_percent >= MIN_LARGE_DOWN_PAYMENT


def cap_increase(factors: Iterable[CompensatingFactor]) -> Decimal:
    """Sum factor increments, capped at 13.99 points."""
    raw_increase = sum((factor.dti_increase for factor in factors), ZERO)
    return min(raw_increase, MAX_TOTAL_INCREASE)


# =============================================================================
# AUS HEURISTIC
# =============================================================================

def score_aus_signals(
    reserve_months: Decimal,
    payment_shock_percent: Decimal,
    positive_rent_history: bool,
    residual_income_qualifies: bool,
    fico: int,
    down_payment_percent: Decimal,
    low_discretionary_debt: bool,
) -> Decimal:
    """Weighted signal score approximating an automated underwriting decision."""
    points = ZERO

    if reserve_months >= 6:
        points += 2
    elif reserve_months >= 3:
        points += 1

    if payment_shock_percent <= 0:
        points += 2
    elif payment_shock_percent <= MAX_PAYMENT_INCREASE_PERCENT:
        points += 1

    if positive_rent_history:
        points += 1
    if residual_income_qualifies:
        points += 1
    if fico >= MIN_HIGH_FICO:
        points += 1
    if down_payment_percent >= MIN_LARGE_DOWN_PAYMENT:
        points += Decimal("0.5")
    if low_discretionary_debt:
        points += Decimal("0.5")

    return points


# =============================================================================
# COMBINED EVALUATION
# =============================================================================

def calculate_dti_factors(
    income: Decimal,
    total_monthly_debts: Decimal,
    necessary_debts: Decimal,
    reserves: Decimal,
    current_housing_payment: Decimal,
    new_mortgage_payment: Decimal,
    fico: int,
    down_payment_percent: Decimal,
    household_size: int = 1,
    options: Optional[FactorOptions] = None,
) -> DTICalculationResult:
    """Evaluate all compensating factors against an actual housing payment.

    Args:
        income: Annual gross income
        total_monthly_debts: All monthly debt payments, excluding housing
        necessary_debts: Non-discretionary part of ``total_monthly_debts``
        reserves: Liquid cash reserves
        current_housing_payment: Rent or mortgage before the purchase
        new_mortgage_payment: Proposed total PITI + MIP payment
        fico: Credit score
        down_payment_percent: Requested down payment in percent
        household_size: People in the household
        options: AUS mode, rent history, taxes, childcare and region

    Returns:
        DTICalculationResult with the allowed DTI ceiling
    """
    options = options or FactorOptions()
    monthly_income = income / 12

    reserve_months, reserves_ok = evaluate_cash_reserves(reserves, new_mortgage_payment)
    increase_percent, payment_ok = evaluate_minimal_payment_increase(
        current_housing_payment, new_mortgage_payment
    )
    residual_amount, residual_threshold, residual_ok = evaluate_residual_income(
        monthly_income,
        total_monthly_debts + new_mortgage_payment,
        household_size,
        monthly_taxes=options.monthly_taxes,
        childcare_expense=options.childcare_expense,
        region=options.region,
    )
    discretionary_debt, discretionary_ok = evaluate_discretionary_debt(
        total_monthly_debts, necessary_debts
    )
    fico_ok = evaluate_high_fico(fico)
    down_payment_ok = evaluate_large_down_payment(down_payment_percent)

    qualified = {
        CASH_RESERVES: reserves_ok,
        MINIMAL_PAYMENT_INCREASE: payment_ok,
        RESIDUAL_INCOME: residual_ok,
        NO_DISCRETIONARY_DEBT: discretionary_ok,
        HIGH_FICO: fico_ok,
        LARGE_DOWN_PAYMENT: down_payment_ok,
    }
    active_factors = [
        template.model_copy(update={"is_active": True})
        for factor_id, template in COMPENSATING_FACTORS.items()
        if qualified[factor_id]
    ]

    total_increase = cap_increase(active_factors)
    additive_dti = min(BASE_DTI + total_increase, MAX_DTI_WITH_FACTORS)

    aus_frontier_dti: Optional[Decimal] = None
    aus_points: Optional[Decimal] = None
    max_allowed_dti = additive_dti
    if options.aus_mode:
        raw_months = reserves / new_mortgage_payment if new_mortgage_payment > 0 else ZERO
        if current_housing_payment > 0:
            shock = (new_mortgage_payment - current_housing_payment) / current_housing_payment * 100
        else:
            shock = AUS_NO_CURRENT_PAYMENT_SHOCK
        aus_points = score_aus_signals(
            raw_months,
            shock,
            options.positive_rent_history,
            residual_ok,
            fico,
            down_payment_percent,
            discretionary_ok,
        )
        aus_frontier_dti = get_aus_frontier_dti(aus_points)
        max_allowed_dti = min(additive_dti, aus_frontier_dti)

    progress = total_increase / MAX_TOTAL_INCREASE * 100
    remaining = MAX_TOTAL_INCREASE - total_increase

    logger.debug(
        "dti_factors_evaluated",
        new_payment=str(new_mortgage_payment),
        active=[factor.id for factor in active_factors],
        total_increase=str(total_increase),
        max_allowed_dti=str(max_allowed_dti),
        aus_mode=options.aus_mode,
    )

    return DTICalculationResult(
        base_dti=BASE_DTI,
        total_increase=round_ratio(total_increase),
        max_allowed_dti=round_ratio(max_allowed_dti),
        active_factors=active_factors,
        factor_state=DTIFactorState(
            reserve_months=reserve_months,
            cash_reserves_qualifies=reserves_ok,
            current_payment=current_housing_payment,
            new_payment=new_mortgage_payment,
            payment_increase_percent=increase_percent,
            minimal_payment_increase_qualifies=payment_ok,
            residual_amount=residual_amount,
            residual_income_threshold=residual_threshold,
            residual_income_qualifies=residual_ok,
            discretionary_debt=discretionary_debt,
            low_discretionary_debt_qualifies=discretionary_ok,
            fico=fico,
            high_fico_qualifies=fico_ok,
            down_payment_percent=down_payment_percent,
            large_down_payment_qualifies=down_payment_ok,
        ),
        progress_percentage=round_cents(progress),
        remaining_capacity=round_ratio(remaining),
        aus_mode_applied=options.aus_mode,
        aus_frontier_dti=round_ratio(aus_frontier_dti) if aus_frontier_dti is not None else None,
        aus_signal_points=aus_points,
    )


# =============================================================================
# PRESENTATION DATA
# =============================================================================

def get_dti_progress(dti_result: DTICalculationResult) -> DTIProgress:
    """Cumulative DTI ladder: base, one step per active factor, then headroom."""
    steps = [DTIProgressStep(label="Base DTI (43%)", value=BASE_DTI, is_active=True)]

    level = BASE_DTI
    for factor in dti_result.active_factors:
        level += factor.dti_increase
        steps.append(DTIProgressStep(label=factor.name, value=level, is_active=True))

    if dti_result.remaining_capacity > 0:
        steps.append(
            DTIProgressStep(label="Potential Additional", value=MAX_DTI_WITH_FACTORS, is_active=False)
        )

    return DTIProgress(
        current_dti=dti_result.max_allowed_dti,
        max_dti=MAX_DTI_WITH_FACTORS,
        steps=steps,
    )


def get_dti_recommendations(
    dti_result: DTICalculationResult,
    reserves: Decimal,
    fico: int,
    down_payment_percent: Decimal,
    new_mortgage_payment: Decimal,
    total_monthly_debts: Decimal,
    necessary_debts: Decimal,
) -> list[str]:
    """Suggest actions that would activate missing factors."""
    recommendations: list[str] = []
    active_ids = set(dti_result.active_factor_ids)

    if CASH_RESERVES not in active_ids:
        needed = MIN_CASH_RESERVE_MONTHS * new_mortgage_payment
        additional = max(ZERO, needed - reserves)
        if additional > 0:
            recommendations.append(
                f"Build cash reserves: Save an additional ${int(round_currency(additional)):,} "
                f"to reach {MIN_CASH_RESERVE_MONTHS} months of mortgage payments"
            )

    if NO_DISCRETIONARY_DEBT not in active_ids:
        discretionary = max(ZERO, total_monthly_debts - necessary_debts)
        if discretionary > 0:
            recommendations.append(
                f"Reduce discretionary debt: Pay down ${int(round_currency(discretionary)):,} "
                f"in credit cards or other non-essential debts"
            )

    if HIGH_FICO not in active_ids and fico < MIN_HIGH_FICO:
        recommendations.append(
            f"Improve credit score: Increase FICO score to {MIN_HIGH_FICO}+ "
            f"(currently {fico}) for additional DTI capacity"
        )

    if LARGE_DOWN_PAYMENT not in active_ids and down_payment_percent < MIN_LARGE_DOWN_PAYMENT:
        recommendations.append(
            f"Increase down payment: Save for at least {MIN_LARGE_DOWN_PAYMENT}% down "
            f"(currently {down_payment_percent:.1f}%) to qualify for DTI boost"
        )

    return recommendations
