"""Tests for the FHA borrowing-power calculator.

These tests exercise the full calculation path:
- Single-pass loan calculation at a fixed DTI ceiling
- Fixed-point solve with compensating factors
- Eligibility and zero-capacity outcomes
- Warnings, audit trail and borrowing-power comparisons
"""

from decimal import Decimal

import pytest

from fha_core import (
    CompensatingFactorInputs,
    ConfigurationError,
    FHACalculator,
    FHACoreConfig,
    FHALoanWithFactorsResult,
    LoanParameters,
    RateProviderError,
    RateQuote,
    SolverConfig,
    SolverState,
    StaticRateProvider,
    USRegion,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def calculator() -> FHACalculator:
    """Calculator with a fixed 7.0% rate."""
    return FHACalculator(rate_provider=StaticRateProvider(Decimal("7.0"), source="test"))


@pytest.fixture
def baseline_params() -> LoanParameters:
    """$75,000 income, $300 debts, FICO 680, 3.5% down."""
    return LoanParameters(
        income=Decimal("75000"),
        monthly_debts=Decimal("300"),
        fico=680,
        down_payment_percent=Decimal("3.5"),
    )


@pytest.fixture
def no_factor_inputs() -> CompensatingFactorInputs:
    """Large household with no reserves or current payment."""
    return CompensatingFactorInputs(household_size=8)


@pytest.fixture
def maxed_params() -> LoanParameters:
    """Baseline borrower with FICO 760 and 15% down."""
    return LoanParameters(
        income=Decimal("75000"),
        monthly_debts=Decimal("300"),
        fico=760,
        down_payment_percent=Decimal("15"),
    )


@pytest.fixture
def maxed_inputs() -> CompensatingFactorInputs:
    """Reserves, housing payment and debts that qualify every factor."""
    return CompensatingFactorInputs(
        necessary_debts=Decimal("300"),
        cash_reserves=Decimal("60000"),
        current_housing_payment=Decimal("4000"),
        household_size=1,
    )


class FailingRateProvider:
    """Rate provider whose feed is down."""

    def get_current_rate(self) -> RateQuote:
        raise RateProviderError("Rate feed unavailable", provider="FailingRateProvider")


# =============================================================================
# CONFIGURATION
# =============================================================================

class TestCalculatorSetup:
    """Test suite for calculator construction."""

    def test_default_provider_uses_fallback_rate(self, baseline_params: LoanParameters):
        result = FHACalculator().calculate_loan(baseline_params)

        assert result.interest_rate == Decimal("7.0")
        assert "Interest rate is a default estimate; results may differ from current market rates" in result.warnings

    def test_coarse_threshold_rejected(self):
        config = FHACoreConfig(solver=SolverConfig(convergence_threshold=Decimal("0.2")))

        with pytest.raises(ConfigurationError) as exc_info:
            FHACalculator(config=config)

        assert exc_info.value.config_key == "solver.convergence_threshold"
        assert not exc_info.value.recoverable

    def test_provider_error_propagates(self, baseline_params: LoanParameters):
        calculator = FHACalculator(rate_provider=FailingRateProvider())

        with pytest.raises(RateProviderError) as exc_info:
            calculator.solve(baseline_params)

        assert exc_info.value.recoverable


# =============================================================================
# SINGLE PASS
# =============================================================================

class TestCalculateLoan:
    """Test suite for calculate_loan."""

    def test_baseline(self, calculator: FHACalculator, baseline_params: LoanParameters):
        result = calculator.calculate_loan(baseline_params)

        assert result.max_loan_amount > 0
        assert result.debt_to_income_ratio == Decimal("43.00")
        assert result.loan_to_value_ratio == Decimal("96.50")
        assert result.meets_minimum_requirements
        assert result.warnings == []

    def test_upfront_mip_is_175_basis_points(self, calculator, baseline_params):
        result = calculator.calculate_loan(baseline_params)

        expected = result.max_loan_amount * Decimal("0.0175")
        assert abs(result.upfront_mip - expected) < Decimal("0.02")

    def test_price_and_down_payment_consistent(self, calculator, baseline_params):
        result = calculator.calculate_loan(baseline_params)

        assert result.max_home_price > result.max_loan_amount
        assert abs(result.max_home_price - result.max_loan_amount - result.down_payment_amount) <= 1
        assert result.loan_to_value_ratio < 100

    def test_piti_breakdown(self, calculator, baseline_params):
        result = calculator.calculate_loan(baseline_params)

        assert result.piti is not None
        assert result.monthly_payment == result.piti.principal_and_interest
        assert result.total_monthly_payment == result.piti.total
        assert result.monthly_mip == result.piti.mip

    def test_supplied_tax_and_insurance(self, calculator, baseline_params):
        params = baseline_params.model_copy(
            update={"property_tax_monthly": Decimal("425"), "insurance_monthly": Decimal("140")}
        )
        result = calculator.calculate_loan(params)

        assert result.piti.property_tax == Decimal("425")
        assert result.piti.insurance == Decimal("140")

    def test_higher_ceiling_increases_loan(self, calculator, baseline_params):
        base = calculator.calculate_loan(baseline_params, Decimal("0.43"))
        raised = calculator.calculate_loan(baseline_params, Decimal("0.50"))

        assert raised.max_loan_amount > base.max_loan_amount
        assert raised.debt_to_income_ratio == Decimal("50.00")

    def test_below_credit_floor(self, calculator, baseline_params):
        params = baseline_params.model_copy(update={"fico": 499})
        result = calculator.calculate_loan(params)

        assert result.max_loan_amount == 0
        assert not result.meets_minimum_requirements
        assert result.down_payment_percent == Decimal("10.0")
        assert result.warnings == [
            "Down payment increased to FHA minimum of 10.0% based on credit score",
            "Minimum FICO score of 500 required for FHA loans",
        ]

    def test_low_score_raises_down_payment(self, calculator, baseline_params):
        params = baseline_params.model_copy(update={"fico": 550})
        result = calculator.calculate_loan(params)

        assert result.meets_minimum_requirements
        assert result.down_payment_percent == Decimal("10.0")
        assert result.loan_to_value_ratio == Decimal("90.00")
        assert "Down payment increased to FHA minimum of 10.0% based on credit score" in result.warnings

    def test_zero_capacity(self, calculator):
        params = LoanParameters(income=Decimal("30000"), monthly_debts=Decimal("1200"), fico=700)
        result = calculator.calculate_loan(params)

        assert result.max_loan_amount == 0
        assert result.piti is None
        assert not result.meets_minimum_requirements
        assert result.debt_to_income_ratio == Decimal("48.00")
        assert "Current income and debts do not qualify for any loan amount" in result.warnings

    def test_requested_amount_above_maximum(self, calculator, baseline_params):
        params = baseline_params.model_copy(update={"loan_amount": Decimal("500000")})
        result = calculator.calculate_loan(params)

        assert any(w.startswith("Requested loan amount of $500,000 exceeds") for w in result.warnings)

    def test_requested_amount_within_maximum(self, calculator, baseline_params):
        params = baseline_params.model_copy(update={"loan_amount": Decimal("200000")})
        assert calculator.calculate_loan(params).warnings == []

    def test_loan_limit_warning(self, calculator):
        params = LoanParameters(income=Decimal("200000"), fico=720, state="TX")
        result = calculator.calculate_loan(params)

        assert result.max_loan_amount > Decimal("498250")
        assert any("exceeds the FHA limit of $498,250 for TX" in w for w in result.warnings)

    def test_high_cost_county_has_no_limit_warning(self, calculator):
        params = LoanParameters(income=Decimal("200000"), fico=720, zip_code="94102")
        result = calculator.calculate_loan(params)

        assert not any("FHA limit" in w for w in result.warnings)

    def test_explicit_rate_quote(self, calculator, baseline_params):
        quote = RateQuote(rate=Decimal("6.0"), source="override")
        cheaper = calculator.calculate_loan(baseline_params, rate_quote=quote)
        standard = calculator.calculate_loan(baseline_params)

        assert cheaper.interest_rate == Decimal("6.0")
        assert cheaper.max_loan_amount > standard.max_loan_amount

    def test_short_term(self, calculator, baseline_params):
        params = baseline_params.model_copy(update={"loan_term_years": 15})
        short = calculator.calculate_loan(params)
        long = calculator.calculate_loan(baseline_params)

        assert short.max_loan_amount < long.max_loan_amount


# =============================================================================
# FIXED-POINT SOLVE
# =============================================================================

class TestSolve:
    """Test suite for solve."""

    def test_baseline_without_factors(self, calculator, baseline_params, no_factor_inputs):
        params = baseline_params.model_copy(update={"monthly_taxes": Decimal("1200")})
        result = calculator.solve(params, no_factor_inputs)

        assert isinstance(result, FHALoanWithFactorsResult)
        assert result.converged
        assert result.solver_state == SolverState.CONVERGED
        assert result.iterations == 1
        assert result.converged_dti == Decimal("0.43")
        assert result.dti_factors.active_factors == []
        assert result.max_loan_amount > 0
        assert result.rate_source == "test"

    def test_maxed_factors(self, calculator, baseline_params, maxed_params, maxed_inputs, no_factor_inputs):
        baseline = calculator.solve(
            baseline_params.model_copy(update={"monthly_taxes": Decimal("1200")}),
            no_factor_inputs,
        )
        result = calculator.solve(maxed_params, maxed_inputs)

        assert len(result.dti_factors.active_factors) == 6
        assert result.converged
        assert result.iterations == 2
        # six increments sum to 0.13, below the 0.1399 cap
        assert result.converged_dti == Decimal("0.56")
        assert result.debt_to_income_ratio == Decimal("56.00")
        assert result.meets_minimum_requirements
        assert result.max_loan_amount > baseline.max_loan_amount
        assert result.recommendations == []

    def test_region_follows_state(self, calculator, baseline_params):
        inputs = CompensatingFactorInputs(household_size=4)
        national = calculator.solve(baseline_params, inputs)
        western = calculator.solve(baseline_params.model_copy(update={"state": "CA"}), inputs)

        assert national.dti_factors.factor_state.residual_income_threshold == Decimal("1395")
        assert western.dti_factors.factor_state.residual_income_threshold == Decimal("1200")

    def test_explicit_region_wins_over_state(self, calculator, baseline_params):
        params = baseline_params.model_copy(update={"state": "CA", "region": USRegion.SOUTH})
        result = calculator.solve(params, CompensatingFactorInputs(household_size=4))

        assert result.dti_factors.factor_state.residual_income_threshold == Decimal("1070")

    def test_converged_dti_bounds(self, calculator, baseline_params, maxed_params, maxed_inputs):
        for params, inputs in ((baseline_params, None), (maxed_params, maxed_inputs)):
            result = calculator.solve(params, inputs)
            assert Decimal("0.43") <= result.converged_dti <= Decimal("0.5699")

    def test_never_exceeds_iteration_cap(self, baseline_params, maxed_params, maxed_inputs):
        calculator = FHACalculator(rate_provider=StaticRateProvider(Decimal("7.0")))

        for params, inputs in ((baseline_params, None), (maxed_params, maxed_inputs)):
            assert calculator.solve(params, inputs).iterations <= 10

    def test_cap_reached_returns_result(self, maxed_params, maxed_inputs):
        config = FHACoreConfig(solver=SolverConfig(max_iterations=1))
        calculator = FHACalculator(
            rate_provider=StaticRateProvider(Decimal("7.0")), config=config
        )
        result = calculator.solve(maxed_params, maxed_inputs)

        assert not result.converged
        assert result.solver_state == SolverState.MAX_ITERATIONS_REACHED
        assert result.iterations == 1
        assert result.debt_to_income_ratio == Decimal("56.00")
        assert "DTI did not converge after 1 iterations; using last ceiling of 56.00%" in result.warnings

    def test_ineligible_borrower_still_returns(self, calculator, baseline_params):
        params = baseline_params.model_copy(update={"fico": 499})
        result = calculator.solve(params)

        assert result.max_loan_amount == 0
        assert not result.meets_minimum_requirements
        assert result.iterations <= 10

    def test_zero_capacity_still_returns(self, calculator):
        params = LoanParameters(income=Decimal("30000"), monthly_debts=Decimal("1200"), fico=700)
        result = calculator.solve(params)

        assert result.max_loan_amount == 0
        assert "Current income and debts do not qualify for any loan amount" in result.warnings

    def test_idempotent(self, calculator, maxed_params, maxed_inputs):
        first = calculator.solve(maxed_params, maxed_inputs)
        second = calculator.solve(maxed_params, maxed_inputs)

        assert first == second

    def test_aus_mode(self, calculator, maxed_params, maxed_inputs):
        params = maxed_params.model_copy(update={"aus_mode": True})
        result = calculator.solve(params, maxed_inputs)

        assert result.dti_factors.aus_mode_applied
        assert result.dti_factors.aus_frontier_dti == Decimal("0.5699")
        assert result.converged_dti == Decimal("0.56")

    def test_recommendations_for_weak_profile(self, calculator, baseline_params, no_factor_inputs):
        result = calculator.solve(baseline_params, no_factor_inputs)

        assert any(r.startswith("Build cash reserves") for r in result.recommendations)
        assert any(r.startswith("Improve credit score") for r in result.recommendations)

    def test_audit_log(self, calculator, maxed_params, maxed_inputs):
        result = calculator.solve(maxed_params, maxed_inputs)
        steps = [entry.step for entry in result.audit_log]

        assert steps[0] == "interest_rate"
        assert steps[-1] == "solve_complete"
        assert steps.count("dti_factors") == result.iterations
        assert result.audit_log[-1].notes == "converged"

    def test_audit_log_is_per_call(self, calculator, baseline_params, maxed_params, maxed_inputs):
        calculator.solve(maxed_params, maxed_inputs)
        result = calculator.solve(baseline_params)

        assert sum(1 for e in result.audit_log if e.step == "interest_rate") == 1


# =============================================================================
# BORROWING POWER CHANGE
# =============================================================================

class TestBorrowingPowerChange:
    """Test suite for borrowing_power_change."""

    def test_raised_ceiling(self, calculator, baseline_params):
        change = calculator.borrowing_power_change(
            baseline_params, baseline_params, Decimal("0.43"), Decimal("0.50")
        )

        assert change.loan_amount_change > 0
        assert change.loan_amount_change_percent > 0
        assert change.home_price_change > 0
        assert change.monthly_payment_change > 0

    def test_identical_scenarios(self, calculator, baseline_params):
        change = calculator.borrowing_power_change(baseline_params, baseline_params)

        assert change.loan_amount_change == 0
        assert change.home_price_change_percent == 0
        assert change.monthly_payment_change == 0

    def test_from_zero_capacity(self, calculator, baseline_params):
        broke = LoanParameters(income=Decimal("30000"), monthly_debts=Decimal("1200"), fico=700)
        change = calculator.borrowing_power_change(broke, baseline_params)

        assert change.loan_amount_change > 0
        assert change.loan_amount_change_percent == 0
