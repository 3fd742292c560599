"""Configuration system for the FHA borrowing-power engine.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the solver and the default
interest rate.

Usage:
    from fha_core.config import FHACoreConfig

    # Load from environment variables and .env file
    config = FHACoreConfig()

    print(config.solver.max_iterations)
    print(config.rates.default_interest_rate)
"""

from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SolverConfig(BaseSettings):
    """Fixed-point solver settings.

    Environment Variables:
        FHA_SOLVER_MAX_ITERATIONS: Iteration cap for the DTI fixed-point loop
        FHA_SOLVER_CONVERGENCE_THRESHOLD: DTI delta treated as converged
        FHA_SOLVER_LOAN_TERM_YEARS: Default amortization term
    """

    model_config = SettingsConfigDict(
        env_prefix="FHA_SOLVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_iterations: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum fixed-point iterations before giving up",
    )
    convergence_threshold: Decimal = Field(
        default=Decimal("0.001"),
        gt=0,
        description="Absolute DTI difference treated as converged (0.001 = 0.1 point)",
    )
    loan_term_years: int = Field(
        default=30,
        ge=1,
        le=40,
        description="Default loan term in years",
    )


class RateConfig(BaseSettings):
    """Interest-rate defaults.

    Environment Variables:
        FHA_RATE_DEFAULT_INTEREST_RATE: Annual rate (percent) used when no
            provider-supplied rate is available
    """

    model_config = SettingsConfigDict(
        env_prefix="FHA_RATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_interest_rate: Decimal = Field(
        default=Decimal("7.0"),
        gt=0,
        le=25,
        description="Conservative default annual FHA rate in percent",
    )


class FHACoreConfig(BaseSettings):
    """Root configuration for the engine.

    Environment Variables:
        FHA_ENV: Environment name (development, staging, production, test)
        FHA_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = FHACoreConfig(
            solver=SolverConfig(max_iterations=20),
            rates=RateConfig(default_interest_rate=Decimal("6.5")),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="FHA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    solver: SolverConfig = Field(default_factory=SolverConfig)
    rates: RateConfig = Field(default_factory=RateConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"
