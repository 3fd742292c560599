"""Data models for FHA borrowing-power calculations.

Inputs (LoanParameters, CompensatingFactorInputs, FactorOptions) and results
(FHALoanResult, FHALoanWithFactorsResult, DTICalculationResult) are frozen
pydantic models: each calculation builds them once and never mutates them.
Money and ratios are Decimal throughout.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


# =============================================================================
# ENUMERATIONS
# =============================================================================

class USRegion(str, Enum):
    """Census regions used for residual-income thresholds."""
    NORTHEAST = "northeast"
    MIDWEST = "midwest"
    SOUTH = "south"
    WEST = "west"


class FactorCategory(str, Enum):
    """Grouping of compensating factors."""
    FINANCIAL = "financial"
    CREDIT = "credit"
    PAYMENT = "payment"
    EMPLOYMENT = "employment"


class SolverState(str, Enum):
    """States of the DTI fixed-point iteration."""
    INITIAL = "initial"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


# =============================================================================
# INPUT MODELS
# =============================================================================

class FactorOptions(BaseModel):
    """Optional borrower data consulted by the compensating-factor evaluator."""

    model_config = ConfigDict(frozen=True)

    aus_mode: bool = False
    positive_rent_history: bool = False
    monthly_taxes: Optional[Decimal] = Field(default=None, ge=0)
    childcare_expense: Optional[Decimal] = Field(default=None, ge=0)
    region: Optional[USRegion] = None


class LoanParameters(BaseModel):
    """Borrower and loan inputs for one FHA calculation."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "income": "75000",
                    "monthly_debts": "300",
                    "fico": 680,
                    "down_payment_percent": "3.5",
                }
            ]
        },
    )

    income: Decimal = Field(ge=0, description="Annual gross income")
    monthly_debts: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Total recurring monthly debt payments, excluding housing",
    )
    fico: int = Field(ge=300, le=850, description="Representative FICO score")
    down_payment_percent: Decimal = Field(
        default=Decimal("3.5"),
        ge=0,
        lt=100,
        description="Requested down payment as a percentage of price",
    )
    loan_amount: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Explicitly requested loan amount, checked against the maximum",
    )
    property_tax_monthly: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Monthly property tax from the tax estimator",
    )
    insurance_monthly: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Monthly homeowners insurance from the insurance estimator",
    )
    aus_mode: bool = False
    positive_rent_history: bool = False
    region: Optional[USRegion] = None
    monthly_taxes: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Monthly income-tax withholding for residual income",
    )
    childcare_expense: Optional[Decimal] = Field(default=None, ge=0)
    zip_code: Optional[str] = None
    state: Optional[str] = Field(default=None, min_length=2, max_length=2)
    county: Optional[str] = None
    loan_term_years: Optional[int] = Field(
        default=None,
        ge=1,
        le=40,
        description="Loan term; the configured default is used when omitted",
    )

    @computed_field
    @property
    def monthly_income(self) -> Decimal:
        """Gross monthly income."""
        return self.income / 12

    def factor_options(self) -> FactorOptions:
        """Project the factor-related fields into a FactorOptions struct."""
        return FactorOptions(
            aus_mode=self.aus_mode,
            positive_rent_history=self.positive_rent_history,
            monthly_taxes=self.monthly_taxes,
            childcare_expense=self.childcare_expense,
            region=self.region,
        )


class CompensatingFactorInputs(BaseModel):
    """Secondary borrower data used only by the factor evaluator."""

    model_config = ConfigDict(frozen=True)

    necessary_debts: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Non-discretionary monthly debts (car, student loans, etc.)",
    )
    cash_reserves: Decimal = Field(default=Decimal("0"), ge=0)
    current_housing_payment: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Current rent or mortgage before the purchase",
    )
    household_size: int = Field(default=1, ge=1)


class RateQuote(BaseModel):
    """An annual FHA interest rate supplied by a rate provider."""

    model_config = ConfigDict(frozen=True)

    rate: Decimal = Field(gt=0, le=25, description="Annual rate in percent, e.g. 6.875")
    source: str = "default"
    as_of: Optional[datetime] = None
    was_fallback_used: bool = False


# =============================================================================
# COMPONENT RESULTS
# =============================================================================

class MIPRates(BaseModel):
    """Upfront and monthly FHA mortgage insurance premiums."""

    model_config = ConfigDict(frozen=True)

    upfront_mip: Decimal
    monthly_mip: Decimal
    annual_rate: Decimal
    ltv: Decimal


class PITIBreakdown(BaseModel):
    """Monthly housing payment components."""

    model_config = ConfigDict(frozen=True)

    principal_and_interest: Decimal
    property_tax: Decimal
    insurance: Decimal
    mip: Decimal
    total: Decimal


class EligibilityResult(BaseModel):
    """FICO / down-payment gating outcome."""

    model_config = ConfigDict(frozen=True)

    is_eligible: bool
    warnings: list[str] = Field(default_factory=list)
    min_down_payment: Decimal


class CompensatingFactor(BaseModel):
    """A compensating factor that raises the DTI ceiling when active."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    dti_increase: Decimal
    category: FactorCategory
    is_active: bool = False


class DTIFactorState(BaseModel):
    """Metrics behind each factor decision."""

    model_config = ConfigDict(frozen=True)

    reserve_months: Decimal
    cash_reserves_qualifies: bool
    current_payment: Decimal
    new_payment: Decimal
    payment_increase_percent: Decimal
    minimal_payment_increase_qualifies: bool
    residual_amount: Decimal
    residual_income_threshold: Decimal
    residual_income_qualifies: bool
    discretionary_debt: Decimal
    low_discretionary_debt_qualifies: bool
    fico: int
    high_fico_qualifies: bool
    down_payment_percent: Decimal
    large_down_payment_qualifies: bool


class DTICalculationResult(BaseModel):
    """DTI ceiling produced by the compensating-factor evaluator."""

    model_config = ConfigDict(frozen=True)

    base_dti: Decimal
    total_increase: Decimal
    max_allowed_dti: Decimal
    active_factors: list[CompensatingFactor] = Field(default_factory=list)
    factor_state: DTIFactorState
    progress_percentage: Decimal
    remaining_capacity: Decimal
    aus_mode_applied: bool = False
    aus_frontier_dti: Optional[Decimal] = None
    aus_signal_points: Optional[Decimal] = None

    @computed_field
    @property
    def active_factor_ids(self) -> list[str]:
        """IDs of the active factors, in evaluation order."""
        return [factor.id for factor in self.active_factors]


class DTIProgressStep(BaseModel):
    """One step of the cumulative DTI progress ladder."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: Decimal
    is_active: bool


class DTIProgress(BaseModel):
    """Cumulative DTI ladder from base ceiling to the current one."""

    model_config = ConfigDict(frozen=True)

    current_dti: Decimal
    max_dti: Decimal
    steps: list[DTIProgressStep]


class AuditEntry(BaseModel):
    """Audit log entry for calculation transparency."""

    model_config = ConfigDict(frozen=True)

    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None


# =============================================================================
# CALCULATION RESULTS
# =============================================================================

class FHALoanResult(BaseModel):
    """Maximum FHA loan for one DTI ceiling."""

    model_config = ConfigDict(frozen=True)

    max_loan_amount: Decimal
    max_home_price: Decimal
    down_payment_amount: Decimal
    down_payment_percent: Decimal
    monthly_payment: Decimal  # principal and interest only
    total_monthly_payment: Decimal  # PITI + MIP
    piti: Optional[PITIBreakdown] = None
    upfront_mip: Decimal
    monthly_mip: Decimal
    debt_to_income_ratio: Decimal  # percent, e.g. 43.00
    loan_to_value_ratio: Decimal  # percent
    interest_rate: Decimal
    meets_minimum_requirements: bool
    warnings: list[str] = Field(default_factory=list)


class FHALoanWithFactorsResult(FHALoanResult):
    """Converged FHA loan result including compensating factors."""

    dti_factors: DTICalculationResult
    converged_dti: Decimal
    iterations: int
    converged: bool
    solver_state: SolverState
    rate_source: str
    recommendations: list[str] = Field(default_factory=list)
    audit_log: list[AuditEntry] = Field(default_factory=list)


class BorrowingPowerChange(BaseModel):
    """Difference in borrowing power between two scenarios."""

    model_config = ConfigDict(frozen=True)

    loan_amount_change: Decimal
    loan_amount_change_percent: Decimal
    home_price_change: Decimal
    home_price_change_percent: Decimal
    monthly_payment_change: Decimal


# =============================================================================
# LOAN LIMIT MODELS
# =============================================================================

class LoanLimitLocation(BaseModel):
    """FHA loan limit resolved for a ZIP code."""

    model_config = ConfigDict(frozen=True)

    limit: Decimal
    county: str
    state: str
    is_high_cost: bool


class LoanLimitCheck(BaseModel):
    """Result of checking a loan amount against the local FHA limit."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    limit: Decimal
    exceeds_by: Decimal
    location: str


class AlternativeLoanProgram(BaseModel):
    """A non-FHA program suggested when the FHA limit is exceeded."""

    model_config = ConfigDict(frozen=True)

    program: str
    description: str
    max_loan_amount: Optional[Decimal] = None  # None means no program limit
    requirements: list[str] = Field(default_factory=list)


class MaxHomePriceWithLimits(BaseModel):
    """Highest home price reachable at the local FHA limit."""

    model_config = ConfigDict(frozen=True)

    max_home_price: Decimal
    max_loan_amount: Decimal
    fha_limit: Decimal
    location: str
