"""Fixed-point iteration for the DTI ceiling.

The payment that decides "cash reserves" and "minimal payment increase"
depends on the loan amount, and the loan amount depends on the DTI ceiling
those same factors set. ConvergenceDriver resolves the cycle by iterating a
step function ``ceiling -> new ceiling`` until it stops moving.

States:
    INITIAL -> ITERATING -> CONVERGED
                         -> MAX_ITERATIONS_REACHED
"""

from decimal import Decimal
from typing import Callable, Optional

import structlog

from .exceptions import ValidationError
from .fha_standards import BASE_DTI
from .models import SolverState

logger = structlog.get_logger()

DEFAULT_CONVERGENCE_THRESHOLD = Decimal("0.001")
DEFAULT_MAX_ITERATIONS = 10

_TERMINAL_STATES = {SolverState.CONVERGED, SolverState.MAX_ITERATIONS_REACHED}


class ConvergenceDriver:
    """
    Iterate a DTI step function to a fixed point.

    The driver never runs more than ``max_iterations`` steps. Reaching the
    cap is a terminal state, not an error; callers inspect ``state`` or
    ``converged`` and decide how to report it.
    """

    def __init__(
        self,
        step: Callable[[Decimal], Decimal],
        initial: Decimal = BASE_DTI,
        threshold: Decimal = DEFAULT_CONVERGENCE_THRESHOLD,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ):
        """
        Initialize the driver.

        Args:
            step: Maps the current ceiling to the next one
            initial: Starting ceiling (base DTI)
            threshold: Absolute change below which the ceiling has converged
            max_iterations: Hard cap on step evaluations

        Raises:
            ValidationError: If the threshold or iteration cap is not positive
        """
        if threshold <= 0:
            raise ValidationError(
                "Convergence threshold must be positive",
                field="threshold",
                value=str(threshold),
                constraint="threshold > 0",
            )
        if max_iterations < 1:
            raise ValidationError(
                "At least one iteration is required",
                field="max_iterations",
                value=max_iterations,
                constraint="max_iterations >= 1",
            )

        self.step = step
        self.threshold = threshold
        self.max_iterations = max_iterations
        self.state = SolverState.INITIAL
        self.current = initial
        self.previous: Optional[Decimal] = None
        self.iterations = 0
        self.history: list[Decimal] = [initial]

    @property
    def is_terminal(self) -> bool:
        return self.state in _TERMINAL_STATES

    @property
    def converged(self) -> bool:
        return self.state == SolverState.CONVERGED

    def advance(self) -> SolverState:
        """Run one step and update the state. No-op once terminal."""
        if self.is_terminal:
            return self.state

        self.state = SolverState.ITERATING
        self.iterations += 1

        new_value = self.step(self.current)
        self.previous, self.current = self.current, new_value
        self.history.append(new_value)

        delta = abs(new_value - self.previous)
        if delta < self.threshold:
            self.state = SolverState.CONVERGED
        elif self.iterations >= self.max_iterations:
            self.state = SolverState.MAX_ITERATIONS_REACHED

        logger.debug(
            "dti_iteration",
            iteration=self.iterations,
            previous=str(self.previous),
            current=str(new_value),
            delta=str(delta),
            state=self.state.value,
        )
        return self.state

    def run(self) -> SolverState:
        """Advance until converged or the iteration cap is hit."""
        while not self.is_terminal:
            self.advance()

        if self.state == SolverState.MAX_ITERATIONS_REACHED:
            logger.warning(
                "dti_not_converged",
                iterations=self.iterations,
                last_value=str(self.current),
                previous=str(self.previous),
            )
        else:
            logger.info(
                "dti_converged",
                iterations=self.iterations,
                value=str(self.current),
            )
        return self.state
