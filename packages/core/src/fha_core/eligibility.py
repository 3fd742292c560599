"""FHA credit score and down payment eligibility."""

from decimal import Decimal

import structlog

from .fha_standards import (
    MIN_DOWN_PAYMENT_3_5,
    MIN_DOWN_PAYMENT_10,
    MIN_FICO_FOR_3_5_PERCENT,
    MIN_FICO_FOR_10_PERCENT,
)
from .models import EligibilityResult

logger = structlog.get_logger()


def validate_eligibility(fico: int, down_payment_percent: Decimal) -> EligibilityResult:
    """Gate a borrower on FICO score and down payment.

    Only a FICO below 500 makes the borrower ineligible. A down payment below
    the score-conditioned minimum (10% under 580, otherwise 3.5%) adds a
    warning and leaves the borrower eligible.

    Args:
        fico: Representative credit score
        down_payment_percent: Down payment in percent

    Returns:
        EligibilityResult with the minimum down payment for the score
    """
    warnings: list[str] = []
    is_eligible = True
    min_down_payment = MIN_DOWN_PAYMENT_3_5

    if fico < MIN_FICO_FOR_10_PERCENT:
        is_eligible = False
        warnings.append(
            f"Minimum FICO score of {MIN_FICO_FOR_10_PERCENT} required for FHA loans"
        )
    elif fico < MIN_FICO_FOR_3_5_PERCENT:
        min_down_payment = MIN_DOWN_PAYMENT_10
        if down_payment_percent < min_down_payment:
            warnings.append(
                f"FICO score {fico} requires minimum {min_down_payment}% down payment"
            )
    elif down_payment_percent < MIN_DOWN_PAYMENT_3_5:
        warnings.append(f"Minimum down payment of {MIN_DOWN_PAYMENT_3_5}% required")

    logger.debug(
        "eligibility_checked",
        fico=fico,
        down_payment_percent=str(down_payment_percent),
        is_eligible=is_eligible,
        warnings=len(warnings),
    )

    return EligibilityResult(
        is_eligible=is_eligible,
        warnings=warnings,
        min_down_payment=min_down_payment,
    )
