#!/usr/bin/env python3
"""
FHA Borrowing Power Demonstration

This script walks through a borrowing-power analysis:
1. Calculate the base FHA loan at a 43% DTI ceiling
2. Solve with compensating factors
3. Compare borrowing power and check local loan limits

Run: python packages/core/examples/borrowing_power_demo.py
"""

from decimal import Decimal

from fha_core import (
    CompensatingFactorInputs,
    FHACalculator,
    LoanParameters,
    StaticRateProvider,
    USRegion,
)
from fha_core.dti_factors import get_dti_progress
from fha_core.loan_limits import calculate_max_home_price_with_limits, get_alternative_loan_programs


def create_sample_borrower() -> tuple[LoanParameters, CompensatingFactorInputs]:
    """Create a sample borrower with realistic data."""
    params = LoanParameters(
        income=Decimal("98000"),
        monthly_debts=Decimal("650"),
        fico=752,
        down_payment_percent=Decimal("10"),
        region=USRegion.WEST,
        state="WA",
        county="King",
        positive_rent_history=True,
    )
    factor_inputs = CompensatingFactorInputs(
        necessary_debts=Decimal("610"),
        cash_reserves=Decimal("42000"),
        current_housing_payment=Decimal("2900"),
        household_size=3,
    )
    return params, factor_inputs


def main():
    """Run the borrowing power demonstration."""
    print("=" * 70)
    print("FHA CORE - Borrowing Power Demo")
    print("=" * 70)
    print()

    params, factor_inputs = create_sample_borrower()
    calculator = FHACalculator(rate_provider=StaticRateProvider(Decimal("6.875"), source="demo"))

    # Step 1: Base calculation
    print("Step 1: Base FHA loan at 43% DTI...")
    base = calculator.calculate_loan(params)
    print(f"  - Max Loan: ${base.max_loan_amount:,.0f}")
    print(f"  - Max Home Price: ${base.max_home_price:,.0f}")
    print(f"  - Monthly Payment (PITI + MIP): ${base.total_monthly_payment:,.0f}")
    print()

    # Step 2: Compensating factors
    print("Step 2: Solving with compensating factors...")
    result = calculator.solve(params, factor_inputs)
    print(f"  - Converged: {result.converged} after {result.iterations} iterations")
    print(f"  - DTI Ceiling: {result.debt_to_income_ratio}%")
    print(f"  - Max Loan: ${result.max_loan_amount:,.0f}")
    print(f"  - Max Home Price: ${result.max_home_price:,.0f}")
    print(f"  - Upfront MIP: ${result.upfront_mip:,.2f}")
    print(f"  - Monthly MIP: ${result.monthly_mip:,.2f}")
    print()

    print("  DTI progress:")
    for step in get_dti_progress(result.dti_factors).steps:
        marker = "x" if step.is_active else " "
        print(f"    [{marker}] {step.label}: {step.value * 100:.2f}%")
    print()

    for warning in result.warnings:
        print(f"  ! {warning}")
    for recommendation in result.recommendations:
        print(f"  * {recommendation}")
    print()

    # Step 3: Comparison and limits
    print("Step 3: Borrowing power change and loan limits...")
    change = calculator.borrowing_power_change(
        params, params, Decimal("0.43"), result.converged_dti
    )
    print(f"  - Loan Change: ${change.loan_amount_change:,.0f} ({change.loan_amount_change_percent}%)")
    print(f"  - Payment Change: ${change.monthly_payment_change:,.0f}/month")

    limits = calculate_max_home_price_with_limits(
        params.down_payment_percent, county=params.county, state=params.state
    )
    print(f"  - FHA Limit ({limits.location}): ${limits.fha_limit:,.0f}")
    print(f"  - Max Price at Limit: ${limits.max_home_price:,.0f}")

    if result.max_loan_amount > limits.fha_limit:
        print("  - Alternatives:")
        for program in get_alternative_loan_programs(result.max_loan_amount):
            print(f"    - {program.program}: {program.description}")

    print()
    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
