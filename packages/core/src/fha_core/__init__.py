"""FHA Core - FHA borrowing-power calculations."""

__version__ = "0.1.0"

from .calculator import FHACalculator
from .config import FHACoreConfig, RateConfig, SolverConfig
from .exceptions import (
    ConfigurationError,
    FHACoreError,
    RateProviderError,
    ValidationError,
)
from .models import (
    CompensatingFactorInputs,
    FHALoanResult,
    FHALoanWithFactorsResult,
    LoanParameters,
    RateQuote,
    SolverState,
    USRegion,
)
from .rates import RateProvider, StaticRateProvider

__all__ = [
    "FHACalculator",
    "FHACoreConfig",
    "SolverConfig",
    "RateConfig",
    "FHACoreError",
    "ValidationError",
    "ConfigurationError",
    "RateProviderError",
    "LoanParameters",
    "CompensatingFactorInputs",
    "FHALoanResult",
    "FHALoanWithFactorsResult",
    "RateQuote",
    "SolverState",
    "USRegion",
    "RateProvider",
    "StaticRateProvider",
]
