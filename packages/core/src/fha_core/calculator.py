"""FHA borrowing-power calculations.

This module provides the FHACalculator, which combines the max-loan solver,
PITI and MIP calculations, the eligibility gate and the compensating-factor
evaluator. ``solve`` runs the fixed-point iteration that settles the DTI
ceiling against the payment it produces.
"""

from decimal import Decimal
from typing import Optional

import structlog

from .config import FHACoreConfig
from .convergence import ConvergenceDriver
from .dti_factors import calculate_dti_factors, get_dti_recommendations
from .eligibility import validate_eligibility
from .exceptions import ConfigurationError
from .fha_standards import (
    BASE_DTI,
    FHA_STANDARDS_VERSION,
    MAX_DTI_WITH_FACTORS,
    MAX_TOTAL_INCREASE,
    get_min_down_payment,
    get_region_for_state,
)
from .loan_limits import validate_loan_amount
from .models import (
    AuditEntry,
    BorrowingPowerChange,
    CompensatingFactorInputs,
    DTICalculationResult,
    FHALoanResult,
    FHALoanWithFactorsResult,
    LoanParameters,
    RateQuote,
    SolverState,
)
from .payments import (
    compute_mip,
    compute_piti,
    max_loan_amount,
    round_cents,
    round_currency,
    validate_mip_inputs,
)
from .rates import RateProvider, StaticRateProvider

logger = structlog.get_logger()

ZERO = Decimal("0")
MAX_DTI_PERCENT = MAX_DTI_WITH_FACTORS * 100

FALLBACK_RATE_WARNING = "Interest rate is a default estimate; results may differ from current market rates"
NO_CAPACITY_WARNING = "Current income and debts do not qualify for any loan amount"


class FHACalculator:
    """
    Calculate maximum FHA borrowing power.

    The calculator holds only its rate provider and configuration. Warnings
    and the audit trail are built per call, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        rate_provider: Optional[RateProvider] = None,
        config: Optional[FHACoreConfig] = None,
    ):
        """
        Initialize calculator.

        Args:
            rate_provider: Source of the current FHA rate (default: configured static rate)
            config: Engine configuration (default: loaded from environment)

        Raises:
            ConfigurationError: If the convergence threshold is not smaller
                than the DTI headroom above the base ceiling
        """
        self.config = config or FHACoreConfig()
        self.rate_provider = rate_provider or StaticRateProvider(config=self.config.rates)

        threshold = self.config.solver.convergence_threshold
        if threshold >= MAX_TOTAL_INCREASE:
            raise ConfigurationError(
                "Convergence threshold is too coarse to distinguish DTI ceilings",
                config_key="solver.convergence_threshold",
                expected=f"< {MAX_TOTAL_INCREASE}",
                actual=str(threshold),
            )

    def _log_step(
        self,
        audit: list[AuditEntry],
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None,
    ) -> None:
        """Add an entry to the audit log."""
        entry = AuditEntry(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        )
        audit.append(entry)
        logger.info(
            "calculation_step",
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )

    def _term_years(self, params: LoanParameters) -> int:
        return params.loan_term_years or self.config.solver.loan_term_years

    def _empty_result(
        self,
        down_payment_percent: Decimal,
        interest_rate: Decimal,
        debt_to_income_ratio: Decimal,
        warnings: list[str],
    ) -> FHALoanResult:
        return FHALoanResult(
            max_loan_amount=ZERO,
            max_home_price=ZERO,
            down_payment_amount=ZERO,
            down_payment_percent=down_payment_percent,
            monthly_payment=ZERO,
            total_monthly_payment=ZERO,
            piti=None,
            upfront_mip=ZERO,
            monthly_mip=ZERO,
            debt_to_income_ratio=debt_to_income_ratio,
            loan_to_value_ratio=ZERO,
            interest_rate=interest_rate,
            meets_minimum_requirements=False,
            warnings=warnings,
        )

    def _limit_warnings(self, params: LoanParameters, loan_amount: Decimal) -> list[str]:
        warnings: list[str] = []

        if params.zip_code or params.state or params.county:
            check = validate_loan_amount(
                loan_amount,
                zip_code=params.zip_code,
                county=params.county,
                state=params.state,
            )
            if not check.is_valid:
                warnings.append(
                    f"Loan amount exceeds the FHA limit of ${int(check.limit):,} "
                    f"for {check.location} by ${int(check.exceeds_by):,}"
                )

        if params.loan_amount is not None and params.loan_amount > loan_amount:
            warnings.append(
                f"Requested loan amount of ${int(round_currency(params.loan_amount)):,} "
                f"exceeds the maximum qualifying amount of ${int(loan_amount):,}"
            )

        return warnings

    def _calculate_loan(
        self,
        params: LoanParameters,
        max_dti: Decimal,
        quote: RateQuote,
        audit: list[AuditEntry],
    ) -> FHALoanResult:
        term_years = self._term_years(params)
        interest_rate = quote.rate
        warnings: list[str] = []

        # Step 1: Enforce the credit-score-based down payment minimum
        min_down_payment = get_min_down_payment(params.fico)
        down_payment_percent = params.down_payment_percent
        if down_payment_percent < min_down_payment:
            warnings.append(
                f"Down payment increased to FHA minimum of {min_down_payment}% based on credit score"
            )
            down_payment_percent = min_down_payment

        # Step 2: Eligibility gate
        eligibility = validate_eligibility(params.fico, down_payment_percent)
        warnings.extend(eligibility.warnings)

        if not eligibility.is_eligible:
            self._log_step(
                audit,
                step="eligibility",
                input_value=f"fico={params.fico}, down_payment={down_payment_percent}%",
                output_value="ineligible",
                source=f"FHA Standards {FHA_STANDARDS_VERSION}",
            )
            return self._empty_result(down_payment_percent, interest_rate, ZERO, warnings)

        # Step 3: Maximum loan at this DTI ceiling
        loan = max_loan_amount(
            params.income, max_dti, params.monthly_debts, interest_rate, term_years
        )
        self._log_step(
            audit,
            step="max_loan_amount",
            input_value=(
                f"income={params.income}, dti={max_dti}, debts={params.monthly_debts}, "
                f"rate={interest_rate}%, term={term_years}y"
            ),
            output_value=f"loan={round_currency(loan)}",
            source="Annuity inversion with estimated MIP",
        )

        if loan <= 0:
            warnings.append(NO_CAPACITY_WARNING)
            monthly_income = params.monthly_income
            current_dti = params.monthly_debts / monthly_income * 100 if monthly_income > 0 else ZERO
            return self._empty_result(
                down_payment_percent, interest_rate, round_cents(current_dti), warnings
            )

        # Step 4: Price, payment and insurance
        home_price = loan / (1 - down_payment_percent / 100)
        down_payment_amount = home_price * down_payment_percent / 100

        piti = compute_piti(
            loan,
            home_price,
            interest_rate,
            property_tax_monthly=params.property_tax_monthly,
            insurance_monthly=params.insurance_monthly,
            term_years=term_years,
        )
        mip = compute_mip(loan, home_price, term_years)

        self._log_step(
            audit,
            step="piti",
            input_value=f"loan={round_currency(loan)}, price={round_currency(home_price)}",
            output_value=f"total={piti.total}, mip={piti.mip}",
            source="PITI + MIP",
            notes=f"annual MIP rate {mip.annual_rate}, LTV {mip.ltv}%",
        )

        _, mip_warnings = validate_mip_inputs(loan, home_price, term_years)
        warnings.extend(mip_warnings)

        rounded_loan = round_currency(loan)
        warnings.extend(self._limit_warnings(params, rounded_loan))

        if quote.was_fallback_used:
            warnings.append(FALLBACK_RATE_WARNING)

        dti_percent = round_cents(max_dti * 100)

        return FHALoanResult(
            max_loan_amount=rounded_loan,
            max_home_price=round_currency(home_price),
            down_payment_amount=round_currency(down_payment_amount),
            down_payment_percent=down_payment_percent,
            monthly_payment=piti.principal_and_interest,
            total_monthly_payment=piti.total,
            piti=piti,
            upfront_mip=mip.upfront_mip,
            monthly_mip=mip.monthly_mip,
            debt_to_income_ratio=dti_percent,
            loan_to_value_ratio=mip.ltv,
            interest_rate=interest_rate,
            meets_minimum_requirements=eligibility.is_eligible and dti_percent <= MAX_DTI_PERCENT,
            warnings=warnings,
        )

    def calculate_loan(
        self,
        params: LoanParameters,
        max_dti: Decimal = BASE_DTI,
        rate_quote: Optional[RateQuote] = None,
    ) -> FHALoanResult:
        """
        Calculate the maximum FHA loan for a fixed DTI ceiling.

        Args:
            params: Borrower and loan inputs
            max_dti: DTI ceiling as a fraction (default 0.43)
            rate_quote: Rate to use (default: fetched from the rate provider)

        Returns:
            FHALoanResult; business-rule failures are reported through
            ``meets_minimum_requirements`` and ``warnings``
        """
        quote = rate_quote or self.rate_provider.get_current_rate()
        return self._calculate_loan(params, max_dti, quote, [])

    def solve(
        self,
        params: LoanParameters,
        factor_inputs: Optional[CompensatingFactorInputs] = None,
    ) -> FHALoanWithFactorsResult:
        """
        Calculate borrowing power with compensating factors.

        The DTI ceiling and the payment it supports depend on each other, so
        the ceiling is iterated from 43% until it stops moving or the
        configured iteration cap is reached. Non-convergence is reported on
        the result, never raised.

        Args:
            params: Borrower and loan inputs
            factor_inputs: Reserves, housing payment and household data

        Returns:
            FHALoanWithFactorsResult with factors, recommendations and audit trail

        Raises:
            RateProviderError: If the rate provider cannot supply a rate
        """
        factor_inputs = factor_inputs or CompensatingFactorInputs()
        solver_config = self.config.solver
        audit: list[AuditEntry] = []

        quote = self.rate_provider.get_current_rate()
        self._log_step(
            audit,
            step="interest_rate",
            input_value=f"provider={type(self.rate_provider).__name__}",
            output_value=f"rate={quote.rate}%",
            source=quote.source,
            notes="fallback default" if quote.was_fallback_used else None,
        )

        options = params.factor_options()
        if options.region is None and params.state:
            options = options.model_copy(update={"region": get_region_for_state(params.state)})
        loan_result: Optional[FHALoanResult] = None
        dti_result: Optional[DTICalculationResult] = None

        def step(ceiling: Decimal) -> Decimal:
            nonlocal loan_result, dti_result
            loan_result = self._calculate_loan(params, ceiling, quote, audit)
            dti_result = calculate_dti_factors(
                income=params.income,
                total_monthly_debts=params.monthly_debts,
                necessary_debts=factor_inputs.necessary_debts,
                reserves=factor_inputs.cash_reserves,
                current_housing_payment=factor_inputs.current_housing_payment,
                new_mortgage_payment=loan_result.total_monthly_payment,
                fico=params.fico,
                down_payment_percent=params.down_payment_percent,
                household_size=factor_inputs.household_size,
                options=options,
            )
            self._log_step(
                audit,
                step="dti_factors",
                input_value=f"ceiling={ceiling}, payment={loan_result.total_monthly_payment}",
                output_value=f"max_allowed_dti={dti_result.max_allowed_dti}",
                source="FHA compensating factors",
                notes=", ".join(dti_result.active_factor_ids) or None,
            )
            return dti_result.max_allowed_dti

        driver = ConvergenceDriver(
            step,
            initial=BASE_DTI,
            threshold=solver_config.convergence_threshold,
            max_iterations=solver_config.max_iterations,
        )
        state = driver.run()

        warnings: list[str] = []
        if state == SolverState.MAX_ITERATIONS_REACHED:
            loan_result = self._calculate_loan(params, driver.current, quote, audit)
            warnings.append(
                f"DTI did not converge after {driver.iterations} iterations; "
                f"using last ceiling of {round_cents(driver.current * 100)}%"
            )

        recommendations = get_dti_recommendations(
            dti_result,
            reserves=factor_inputs.cash_reserves,
            fico=params.fico,
            down_payment_percent=params.down_payment_percent,
            new_mortgage_payment=loan_result.total_monthly_payment,
            total_monthly_debts=params.monthly_debts,
            necessary_debts=factor_inputs.necessary_debts,
        )

        self._log_step(
            audit,
            step="solve_complete",
            input_value=f"iterations={driver.iterations}",
            output_value=f"loan={loan_result.max_loan_amount}, dti={driver.current}",
            source=f"FHA Standards {FHA_STANDARDS_VERSION}",
            notes=state.value,
        )

        return FHALoanWithFactorsResult(
            **loan_result.model_dump(exclude={"warnings", "piti"}),
            piti=loan_result.piti,
            warnings=loan_result.warnings + warnings,
            dti_factors=dti_result,
            converged_dti=driver.current,
            iterations=driver.iterations,
            converged=driver.converged,
            solver_state=state,
            rate_source=quote.source,
            recommendations=recommendations,
            audit_log=audit,
        )

    def borrowing_power_change(
        self,
        base_params: LoanParameters,
        updated_params: LoanParameters,
        base_dti: Decimal = BASE_DTI,
        updated_dti: Decimal = BASE_DTI,
    ) -> BorrowingPowerChange:
        """
        Compare borrowing power between two scenarios.

        Both scenarios use the same rate quote. Percent changes are 0 when
        the base scenario has no borrowing power.
        """
        quote = self.rate_provider.get_current_rate()
        base = self.calculate_loan(base_params, base_dti, quote)
        updated = self.calculate_loan(updated_params, updated_dti, quote)

        loan_change = updated.max_loan_amount - base.max_loan_amount
        loan_change_percent = (
            loan_change / base.max_loan_amount * 100 if base.max_loan_amount > 0 else ZERO
        )
        price_change = updated.max_home_price - base.max_home_price
        price_change_percent = (
            price_change / base.max_home_price * 100 if base.max_home_price > 0 else ZERO
        )

        return BorrowingPowerChange(
            loan_amount_change=round_currency(loan_change),
            loan_amount_change_percent=round_cents(loan_change_percent),
            home_price_change=round_currency(price_change),
            home_price_change_percent=round_cents(price_change_percent),
            monthly_payment_change=round_currency(
                updated.total_monthly_payment - base.total_monthly_payment
            ),
        )
