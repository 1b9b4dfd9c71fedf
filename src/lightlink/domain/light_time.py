# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Single-leg light-time solution.

Solves the light-time equation between a transmitter and a receiver,
both given as state functions of time:

    t_r - t_t = |r_r(t_r) - r_t(t_t)| / c + dt_corr(t_t, t_r)

One of t_t, t_r is fixed at the reference time; the other follows by
fixed-point iteration, so the motion of both link ends during the signal
flight is taken into account.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from lightlink.domain.convergence import (
    LightTimeConvergenceCriteria,
    is_light_time_solution_converged,
)
from lightlink.domain.corrections import (
    LightTimeCorrectionFunctionWrapper,
    total_light_time_correction,
)
from lightlink.domain.exceptions import ConfigurationError
from lightlink.ports import LightTimeCorrection, StateFunction

logger = logging.getLogger(__name__)

_C_LIGHT: float = 299792458.0  # m/s (exact, SI definition)


@dataclass(frozen=True)
class LegBoundaryGuess:
    """Initial guess of the link-end times of one leg (warm start).

    Only the time of the free end is used; the end held at the reference
    time is always evaluated at that time.
    """
    transmission_time: float
    reception_time: float


@dataclass(frozen=True, eq=False)
class LightTimeSolution:
    """Converged (or accepted) solution of one leg."""
    light_time: float
    transmitter_state: np.ndarray  # at transmission_time, (6,)
    receiver_state: np.ndarray     # at reception_time, (6,)
    transmission_time: float
    reception_time: float
    ideal_light_time: float        # distance / c, without corrections
    correction: float              # summed corrections used in light_time
    iterations: int

    @property
    def relative_range_vector(self) -> np.ndarray:
        """Receiver position minus transmitter position (m)."""
        return self.receiver_state[:3] - self.transmitter_state[:3]

    def as_boundary_guess(self) -> LegBoundaryGuess:
        return LegBoundaryGuess(
            transmission_time=self.transmission_time,
            reception_time=self.reception_time,
        )


class LightTimeCalculator:
    """
    Light time between two link ends given their state functions.

    Corrections are objects with calculate_light_time_correction(...) or
    plain callables (transmitter_state, receiver_state, transmission_time,
    reception_time) -> seconds; callables are wrapped.

    The values of the last solve stay available as current_ideal_light_time
    and current_correction. An instance is not meant to be shared between
    threads; every solve also returns them in its LightTimeSolution.
    """

    def __init__(
        self,
        transmitter_state_function: StateFunction,
        receiver_state_function: StateFunction,
        corrections: Sequence[LightTimeCorrection | Callable] = (),
        convergence_criteria: LightTimeConvergenceCriteria | None = None,
        speed_of_light: float = _C_LIGHT,
        scalar_type: type = np.float64,
    ) -> None:
        if not callable(transmitter_state_function) or not callable(receiver_state_function):
            raise ConfigurationError("Link-end state functions must be callable")
        if not speed_of_light > 0.0:
            raise ConfigurationError(f"speed_of_light must be > 0, got {speed_of_light}")

        self._transmitter_state_function = transmitter_state_function
        self._receiver_state_function = receiver_state_function
        self._corrections = tuple(
            correction if hasattr(correction, "calculate_light_time_correction")
            else LightTimeCorrectionFunctionWrapper(correction)
            for correction in corrections
        )
        self._criteria = (
            convergence_criteria if convergence_criteria is not None
            else LightTimeConvergenceCriteria()
        )
        self._scalar_type = np.dtype(scalar_type).type
        self._speed_of_light = self._scalar_type(speed_of_light)

        self._current_ideal_light_time = self._scalar_type(np.nan)
        self._current_correction = self._scalar_type(0.0)

    @property
    def corrections(self) -> tuple:
        return self._corrections

    @property
    def convergence_criteria(self) -> LightTimeConvergenceCriteria:
        return self._criteria

    @property
    def speed_of_light(self) -> float:
        return self._speed_of_light

    @property
    def scalar_type(self) -> type:
        return self._scalar_type

    @property
    def current_ideal_light_time(self):
        """Uncorrected light time of the last solve (NaN before the first)."""
        return self._current_ideal_light_time

    @property
    def current_correction(self):
        """Summed correction of the last solve or partial evaluation."""
        return self._current_correction

    def solve(
        self,
        reference_time: float,
        is_reference_reception: bool = True,
        initial_guess: LegBoundaryGuess | None = None,
    ) -> LightTimeSolution:
        """
        Solve the light-time equation for this leg.

        Args:
            reference_time: Time held fixed (s).
            is_reference_reception: True if reference_time is the reception
                time, False if it is the transmission time.
            initial_guess: Optional warm start for the free link end.

        Returns:
            LightTimeSolution with states and times of both link ends.

        Raises:
            LightTimeDivergenceError: Limit reached under THROW_EXCEPTION.
        """
        time = self._scalar_type(reference_time)
        if not np.isfinite(time):
            raise ValueError(f"reference_time must be finite, got {reference_time}")

        transmission_time = time
        reception_time = time
        if initial_guess is not None:
            if is_reference_reception:
                transmission_time = self._scalar_type(initial_guess.transmission_time)
            else:
                reception_time = self._scalar_type(initial_guess.reception_time)

        transmitter_state = self._transmitter_state(transmission_time)
        receiver_state = self._receiver_state(reception_time)

        correction = self._total_correction(
            transmitter_state, receiver_state, transmission_time, reception_time,
        )
        ideal_light_time = self._ideal_light_time(transmitter_state, receiver_state)
        previous_light_time = ideal_light_time + correction

        update_corrections = self._criteria.iterate_corrections
        is_converged = False
        iterations = 0

        while not is_converged:
            iterations += 1

            if update_corrections:
                correction = self._total_correction(
                    transmitter_state, receiver_state, transmission_time, reception_time,
                )

            if is_reference_reception:
                transmission_time = time - previous_light_time
                transmitter_state = self._transmitter_state(transmission_time)
            else:
                reception_time = time + previous_light_time
                receiver_state = self._receiver_state(reception_time)

            ideal_light_time = self._ideal_light_time(transmitter_state, receiver_state)
            new_light_time = ideal_light_time + correction

            is_converged, update_corrections = is_light_time_solution_converged(
                self._criteria,
                previous_light_time,
                new_light_time,
                iterations,
                correction,
                time,
                update_corrections,
                self._scalar_type,
            )
            previous_light_time = new_light_time

        self._current_ideal_light_time = ideal_light_time
        self._current_correction = correction

        logger.debug(
            "Light time %.18g s (correction %.6g s) after %d iterations",
            float(new_light_time), float(correction), iterations,
        )

        return LightTimeSolution(
            light_time=new_light_time,
            transmitter_state=_read_only(transmitter_state),
            receiver_state=_read_only(receiver_state),
            transmission_time=transmission_time,
            reception_time=reception_time,
            ideal_light_time=ideal_light_time,
            correction=correction,
            iterations=iterations,
        )

    def calculate_light_time(
        self, time: float, is_reference_reception: bool = True,
    ) -> float:
        """Light time (s) for a reference time at reception or transmission."""
        return self.solve(time, is_reference_reception).light_time

    def calculate_relative_range_vector(
        self, time: float, is_reference_reception: bool = True,
    ) -> np.ndarray:
        """Vector from transmitter (at t_t) to receiver (at t_r), in meters."""
        return self.solve(time, is_reference_reception).relative_range_vector

    def partial_of_light_time_wrt_link_end_position(
        self,
        transmitter_state: np.ndarray,
        receiver_state: np.ndarray,
        transmission_time: float,
        reception_time: float,
        is_partial_wrt_receiver: bool,
    ) -> np.ndarray:
        """
        Closed-form position partial of the (range-scaled) light time.

            d/dr = unit(r_r - r_t) * (1 + dt_corr / |r_r - r_t|) * (+1 | -1)

        The correction is re-evaluated at the given states and times first,
        and becomes current_correction. Sign is +1 for the receiver and -1
        for the transmitter.

        Returns:
            Row partial, shape (3,).

        Raises:
            ValueError: If both link ends coincide.
        """
        transmitter_state = self._as_state(transmitter_state)
        receiver_state = self._as_state(receiver_state)
        self._current_correction = self._total_correction(
            transmitter_state, receiver_state, transmission_time, reception_time,
        )

        relative_position = receiver_state[:3] - transmitter_state[:3]
        distance = np.sqrt(np.sum(relative_position * relative_position))
        if distance == 0.0:
            raise ValueError("Link ends coincide; light-time partial undefined")

        sign = 1.0 if is_partial_wrt_receiver else -1.0
        return (
            relative_position / distance
            * (1.0 + self._current_correction / distance)
            * sign
        )

    def _ideal_light_time(self, transmitter_state: np.ndarray, receiver_state: np.ndarray):
        relative_position = receiver_state[:3] - transmitter_state[:3]
        return np.sqrt(np.sum(relative_position * relative_position)) / self._speed_of_light

    def _total_correction(self, transmitter_state, receiver_state, transmission_time, reception_time):
        if not self._corrections:
            return self._scalar_type(0.0)
        return self._scalar_type(total_light_time_correction(
            self._corrections,
            transmitter_state.astype(np.float64),
            receiver_state.astype(np.float64),
            float(transmission_time),
            float(reception_time),
        ))

    def _transmitter_state(self, time) -> np.ndarray:
        return self._as_state(self._transmitter_state_function(time))

    def _receiver_state(self, time) -> np.ndarray:
        return self._as_state(self._receiver_state_function(time))

    def _as_state(self, state) -> np.ndarray:
        state = np.asarray(state, dtype=self._scalar_type)
        if state.shape != (6,):
            raise ValueError(f"Link-end state must have shape (6,), got {state.shape}")
        return state


def _read_only(state: np.ndarray) -> np.ndarray:
    state = state.copy()
    state.setflags(write=False)
    return state
