# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Error types raised by the light-time solvers.

Plain values that fail validation raise ConfigurationError, which is a
ValueError so callers catching ValueError keep working.
"""


class LightTimeError(Exception):
    """Base class for light-time solution errors."""


class ConfigurationError(LightTimeError, ValueError):
    """Solver, link-end or ancillary configuration is invalid."""


class LightTimeDivergenceError(LightTimeError, RuntimeError):
    """Light-time iteration hit its iteration limit without converging."""

    def __init__(
        self,
        residual: float,
        correction: float,
        time: float,
        iterations: int,
    ) -> None:
        self.residual = residual
        self.correction = correction
        self.time = time
        self.iterations = iterations
        super().__init__(
            f"light time unconverged at level {residual!r}; "
            f"current light-time corrections are: {correction!r} "
            f"and current time was {time!r} "
            f"(after {iterations} iterations)"
        )
