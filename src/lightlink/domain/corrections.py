# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Light-time correction models.

A correction adds a (possibly negative) delay in seconds to the Euclidean
light time of one leg, as a function of the transmitter and receiver
states and the transmission and reception times. Corrections of one leg
are summed.

Provided:
- LightTimeCorrectionFunctionWrapper: adapts a plain callable
- FirstOrderRelativisticCorrection: Shapiro delay of point masses
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

import numpy as np

from lightlink.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_C_LIGHT: float = 299792458.0  # m/s

LightTimeCorrectionFunction = Callable[[np.ndarray, np.ndarray, float, float], float]


class LightTimeCorrectionType(Enum):
    """Kind of light-time correction."""
    FIRST_ORDER_RELATIVISTIC = "first_order_relativistic"
    TROPOSPHERIC = "tropospheric"
    FUNCTION_WRAPPER = "function_wrapper"


class LightTimeCorrectionFunctionWrapper:
    """Light-time correction computed by a user-supplied function.

    The function receives (transmitter_state, receiver_state,
    transmission_time, reception_time) and returns the delay in seconds.
    Partial derivatives of an arbitrary function are unknown; the partial
    methods return zero and log a warning the first time either is called.
    """

    correction_type = LightTimeCorrectionType.FUNCTION_WRAPPER

    def __init__(self, correction_function: LightTimeCorrectionFunction) -> None:
        if not callable(correction_function):
            raise ConfigurationError(
                f"correction_function must be callable, got {correction_function!r}"
            )
        self._correction_function = correction_function
        self._is_warning_provided = False

    @property
    def correction_function(self) -> LightTimeCorrectionFunction:
        return self._correction_function

    def calculate_light_time_correction(
        self,
        transmitter_state: np.ndarray,
        receiver_state: np.ndarray,
        transmission_time: float,
        reception_time: float,
    ) -> float:
        return float(self._correction_function(
            transmitter_state, receiver_state, transmission_time, reception_time,
        ))

    def calculate_light_time_correction_partial_wrt_link_end_time(
        self,
        transmitter_state: np.ndarray,
        receiver_state: np.ndarray,
        transmission_time: float,
        reception_time: float,
        is_partial_wrt_receiver: bool,
    ) -> float:
        self._warn_partial_unavailable()
        return 0.0

    def calculate_light_time_correction_partial_wrt_link_end_position(
        self,
        transmitter_state: np.ndarray,
        receiver_state: np.ndarray,
        transmission_time: float,
        reception_time: float,
        is_partial_wrt_receiver: bool,
    ) -> np.ndarray:
        self._warn_partial_unavailable()
        return np.zeros(3)

    def _warn_partial_unavailable(self) -> None:
        if not self._is_warning_provided:
            logger.warning(
                "Light-time partial not implemented for custom correction "
                "function %r; using zero",
                self._correction_function,
            )
            self._is_warning_provided = True


@dataclass(frozen=True)
class FirstOrderRelativisticCorrection:
    """First-order (Shapiro) relativistic light-time delay.

    For each perturbing point mass b:
        dt_b = (1 + gamma) * GM_b / c^3 * ln((r_t + r_r + r) / (r_t + r_r - r))

    r_t, r_r: distances of transmitter and receiver to the body,
    r: transmitter-receiver distance. Body positions are evaluated at the
    mid-point between transmission and reception time.

    Magnitude for a grazing Earth-Sun-Mars signal: tens of microseconds.
    """

    perturbing_body_state_functions: tuple[Callable[[float], np.ndarray], ...]
    gravitational_parameters: tuple[float, ...]
    ppn_gamma: float = 1.0
    c: float = _C_LIGHT

    correction_type = LightTimeCorrectionType.FIRST_ORDER_RELATIVISTIC

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "perturbing_body_state_functions",
            tuple(self.perturbing_body_state_functions),
        )
        object.__setattr__(
            self, "gravitational_parameters",
            tuple(float(gm) for gm in self.gravitational_parameters),
        )
        if len(self.perturbing_body_state_functions) != len(self.gravitational_parameters):
            raise ConfigurationError(
                f"Got {len(self.perturbing_body_state_functions)} perturbing body state "
                f"functions but {len(self.gravitational_parameters)} gravitational parameters"
            )
        if any(gm < 0.0 for gm in self.gravitational_parameters):
            raise ConfigurationError("gravitational parameters must be non-negative")

    def calculate_light_time_correction(
        self,
        transmitter_state: np.ndarray,
        receiver_state: np.ndarray,
        transmission_time: float,
        reception_time: float,
    ) -> float:
        evaluation_time = 0.5 * (transmission_time + reception_time)
        tx = np.asarray(transmitter_state, dtype=np.float64)[:3]
        rx = np.asarray(receiver_state, dtype=np.float64)[:3]
        link_distance = float(np.linalg.norm(rx - tx))

        total = 0.0
        for state_function, gm in zip(
            self.perturbing_body_state_functions, self.gravitational_parameters,
        ):
            body = np.asarray(state_function(evaluation_time), dtype=np.float64)[:3]
            r_t = float(np.linalg.norm(tx - body))
            r_r = float(np.linalg.norm(rx - body))
            denominator = r_t + r_r - link_distance
            if denominator <= 0.0:
                raise ValueError(
                    "Signal path passes through a perturbing body centre; "
                    "relativistic correction undefined"
                )
            total += (
                (1.0 + self.ppn_gamma) * gm / self.c**3
                * math.log((r_t + r_r + link_distance) / denominator)
            )
        return total


def total_light_time_correction(
    corrections: Sequence,
    transmitter_state: np.ndarray,
    receiver_state: np.ndarray,
    transmission_time: float,
    reception_time: float,
) -> float:
    """Sum of all corrections of one leg (s); 0.0 for an empty list."""
    total = 0.0
    for correction in corrections:
        total += float(correction.calculate_light_time_correction(
            transmitter_state, receiver_state, transmission_time, reception_time,
        ))
    return total
