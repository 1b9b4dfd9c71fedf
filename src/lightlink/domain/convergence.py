# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Convergence criteria for the light-time iteration.

Holds the iteration limit, the absolute tolerance on successive light-time
estimates and the behaviour when the limit is reached, plus the function
that decides whether a single iteration has converged.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

import numpy as np

from lightlink.domain.exceptions import (
    ConfigurationError,
    LightTimeDivergenceError,
)

logger = logging.getLogger(__name__)


class LightTimeFailureHandling(Enum):
    """What to do when the iteration limit is reached unconverged."""
    ACCEPT_WITHOUT_WARNING = "accept_without_warning"
    PRINT_WARNING_AND_ACCEPT = "print_warning_and_accept"
    THROW_EXCEPTION = "throw_exception"


def default_light_time_tolerance(scalar_type: type = np.float64) -> float:
    """
    Default absolute light-time tolerance (s) for a floating-point type.

    float64 resolves ~1e-12 s on interplanetary light times; an extended
    long double resolves ~1e-15 s. Other types scale with their epsilon.

    Args:
        scalar_type: numpy floating type used for the light-time arithmetic.

    Returns:
        Tolerance in seconds.
    """
    dtype = np.dtype(scalar_type)
    if dtype == np.float64:
        return 1.0e-12
    if dtype == np.longdouble and np.finfo(np.longdouble).eps < np.finfo(np.float64).eps:
        return 1.0e-15
    return float(1.0e4 * np.finfo(dtype).eps)


@dataclass(frozen=True)
class LightTimeConvergenceCriteria:
    """
    Settings for the light-time iteration.

    iterate_corrections=False evaluates the corrections once and refreshes
    them only to confirm an apparently converged solution. An
    absolute_tolerance of None selects default_light_time_tolerance for the
    solver's scalar type.
    """
    iterate_corrections: bool = False
    maximum_number_of_iterations: int = 50
    absolute_tolerance: float | None = None
    failure_handling: LightTimeFailureHandling = LightTimeFailureHandling.ACCEPT_WITHOUT_WARNING

    def __post_init__(self) -> None:
        if self.maximum_number_of_iterations < 1:
            raise ConfigurationError(
                f"maximum_number_of_iterations must be >= 1, "
                f"got {self.maximum_number_of_iterations}"
            )
        if self.absolute_tolerance is not None and not self.absolute_tolerance > 0.0:
            raise ConfigurationError(
                f"absolute_tolerance must be > 0, got {self.absolute_tolerance}"
            )
        if not isinstance(self.failure_handling, LightTimeFailureHandling):
            raise ConfigurationError(
                f"failure_handling must be a LightTimeFailureHandling, "
                f"got {self.failure_handling!r}"
            )

    def get_absolute_tolerance(self, scalar_type: type = np.float64) -> float:
        """Explicit tolerance, or the default for scalar_type."""
        if self.absolute_tolerance is not None:
            return self.absolute_tolerance
        return default_light_time_tolerance(scalar_type)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "LightTimeConvergenceCriteria":
        """
        Build criteria from a plain mapping, e.g. a parsed configuration file.

        Keys are case-insensitive. failure_handling is given by member name
        ("throw_exception") or value. Unknown keys are ignored with a warning;
        a missing or None mapping gives the defaults.

        Raises:
            ConfigurationError: If a value cannot be interpreted.
        """
        if raw is None:
            return cls()

        kwargs: dict[str, Any] = {}
        for raw_key, value in raw.items():
            key = str(raw_key).lower()
            if key not in cls.__dataclass_fields__:
                logger.warning(
                    "Ignoring attribute %s of %s :: not a convergence setting",
                    key, cls.__name__,
                )
                continue
            if value is None:
                continue
            if key == "failure_handling":
                kwargs[key] = _parse_failure_handling(value)
            elif key == "iterate_corrections":
                if not isinstance(value, bool):
                    raise ConfigurationError(
                        f"iterate_corrections must be a boolean, got {value!r}"
                    )
                kwargs[key] = value
            elif key == "maximum_number_of_iterations":
                if isinstance(value, bool) or not isinstance(value, (int, float)) \
                        or not float(value).is_integer():
                    raise ConfigurationError(
                        f"maximum_number_of_iterations must be an integer, got {value!r}"
                    )
                kwargs[key] = int(value)
            else:
                try:
                    kwargs[key] = float(value)
                except (TypeError, ValueError) as e:
                    raise ConfigurationError(
                        f"absolute_tolerance must be a number, got {value!r}"
                    ) from e

        return cls(**kwargs)


def _parse_failure_handling(value: Any) -> LightTimeFailureHandling:
    if isinstance(value, LightTimeFailureHandling):
        return value
    name = str(value).strip()
    if name.upper() in LightTimeFailureHandling.__members__:
        return LightTimeFailureHandling[name.upper()]
    try:
        return LightTimeFailureHandling(name.lower())
    except ValueError as e:
        options = ", ".join(m.value for m in LightTimeFailureHandling)
        raise ConfigurationError(
            f"Invalid failure handling {value!r}, expected one of: {options}"
        ) from e


def is_light_time_solution_converged(
    criteria: LightTimeConvergenceCriteria,
    previous_light_time: float,
    new_light_time: float,
    number_of_iterations: int,
    current_correction: float,
    current_time: float,
    update_corrections: bool,
    scalar_type: type = np.float64,
) -> tuple[bool, bool]:
    """
    Decide whether the light-time iteration has converged.

    When the change drops below tolerance while corrections are not being
    refreshed every iteration, the first result is False and the returned
    flag is switched on: one more pass recomputes the corrections and must
    also satisfy the tolerance.

    Args:
        criteria: Convergence settings.
        previous_light_time: Estimate from the previous iteration (s).
        new_light_time: Estimate from this iteration (s).
        number_of_iterations: 1-based index of this iteration.
        current_correction: Summed light-time correction in use (s).
        current_time: Reference time of the solve (s), for diagnostics.
        update_corrections: Whether corrections are refreshed each pass.
        scalar_type: numpy type used for the default tolerance.

    Returns:
        (converged, update_corrections) with the possibly switched flag.

    Raises:
        LightTimeDivergenceError: Limit reached under THROW_EXCEPTION.
    """
    residual = abs(new_light_time - previous_light_time)

    if residual < criteria.get_absolute_tolerance(scalar_type):
        if not update_corrections:
            return False, True
        return True, update_corrections

    if number_of_iterations < criteria.maximum_number_of_iterations:
        return False, update_corrections

    handling = criteria.failure_handling
    if handling is LightTimeFailureHandling.ACCEPT_WITHOUT_WARNING:
        return True, update_corrections
    if handling is LightTimeFailureHandling.PRINT_WARNING_AND_ACCEPT:
        logger.warning(
            "Warning, light time unconverged at level %r; current light-time "
            "corrections are: %r and current time was %r",
            float(residual), float(current_correction), float(current_time),
        )
        return True, update_corrections
    raise LightTimeDivergenceError(
        residual=float(residual),
        correction=float(current_correction),
        time=float(current_time),
        iterations=number_of_iterations,
    )
