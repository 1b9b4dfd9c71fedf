# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Multi-leg light-time solution.

Chains single-leg solutions along a signal path of N legs and N + 1 link
ends (e.g. station -> spacecraft -> station for two-way range). Starting
at the reference link end, legs towards the transmitter are solved with
the reception time fixed, legs towards the receiver with the
transmission time fixed. Each solved time becomes the boundary condition
of the next leg, offset by the retransmission delay of the shared link
end.

Link-end times and states are returned per leg, transmitter first:
[t_0, r_0, t_1, r_1, ...], so an interior link end appears twice (as
receiver of one leg and transmitter of the next).
"""
import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from lightlink.domain.ancillary_settings import ObservationAncillarySettingsType
from lightlink.domain.convergence import LightTimeConvergenceCriteria
from lightlink.domain.exceptions import ConfigurationError
from lightlink.domain.light_time import (
    LegBoundaryGuess,
    LightTimeCalculator,
    LightTimeSolution,
)
from lightlink.domain.link_ends import (
    LinkEndType,
    get_n_way_link_index_from_link_end_type,
)
from lightlink.ports import AncillarySettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MultiLegLightTimeSolution:
    """Solution of a full signal path."""
    light_time: float                       # total, including delays
    link_end_times: tuple[float, ...]       # 2 * number_of_legs
    link_end_states: tuple[np.ndarray, ...]  # 2 * number_of_legs, each (6,)
    leg_solutions: tuple[LightTimeSolution, ...]
    retransmission_delays: tuple[float, ...]  # number_of_legs + 1
    reference_link_end_index: int

    @property
    def number_of_legs(self) -> int:
        return len(self.leg_solutions)

    @property
    def ideal_light_time(self) -> float:
        return sum(leg.ideal_light_time for leg in self.leg_solutions)

    @property
    def light_time_corrections(self) -> float:
        return sum(leg.correction for leg in self.leg_solutions)


def resolve_retransmission_delays(
    ancillary_settings: AncillarySettings | None,
    number_of_link_ends: int,
) -> tuple[float, ...]:
    """
    Retransmission delay (s) at every link end of a path.

    A vector of length number_of_link_ends is used as-is; one of length
    number_of_link_ends - 2 covers the interior link ends only and gets
    zero delay at the outermost transmitter and receiver. Without
    ancillary settings, or without a delay entry, all delays are zero.

    Raises:
        ConfigurationError: For any other vector length.
    """
    if ancillary_settings is None:
        return (0.0,) * number_of_link_ends

    delays = ancillary_settings.get_double_vector_data(
        ObservationAncillarySettingsType.RETRANSMISSION_DELAYS, throw_exception=False,
    )
    if delays is None:
        return (0.0,) * number_of_link_ends

    delays = [float(delay) for delay in delays]
    if len(delays) == number_of_link_ends:
        return tuple(delays)
    if len(delays) == number_of_link_ends - 2:
        return tuple([0.0] + delays + [0.0])
    raise ConfigurationError(
        f"Error when computing multi-leg light time: size of retransmission "
        f"delays ({len(delays)}) is invalid, should be {number_of_link_ends} "
        f"or {number_of_link_ends - 2}."
    )


class MultiLegLightTimeCalculator:
    """
    Light time along a chain of legs, one LightTimeCalculator per leg.

    Leg i connects link end i (transmitter) to link end i + 1 (receiver).
    """

    def __init__(
        self,
        light_time_calculators: Sequence[LightTimeCalculator],
        convergence_criteria: LightTimeConvergenceCriteria | None = None,
    ) -> None:
        if len(light_time_calculators) == 0:
            raise ConfigurationError("At least one light-time calculator is required")
        self._light_time_calculators = tuple(light_time_calculators)
        self._criteria = (
            convergence_criteria if convergence_criteria is not None
            else LightTimeConvergenceCriteria()
        )

    @property
    def light_time_calculators(self) -> tuple[LightTimeCalculator, ...]:
        return self._light_time_calculators

    @property
    def convergence_criteria(self) -> LightTimeConvergenceCriteria:
        return self._criteria

    @property
    def number_of_legs(self) -> int:
        return len(self._light_time_calculators)

    @property
    def number_of_link_ends(self) -> int:
        return len(self._light_time_calculators) + 1

    @property
    def total_ideal_light_time(self) -> float:
        """Sum of the per-leg uncorrected light times of the last solve."""
        return sum(calc.current_ideal_light_time for calc in self._light_time_calculators)

    @property
    def total_light_time_corrections(self) -> float:
        """Sum of the per-leg corrections of the last solve."""
        return sum(calc.current_correction for calc in self._light_time_calculators)

    def reference_link_end_index(self, reference_link_end: int | LinkEndType) -> int:
        """Index in [0, number_of_legs] of a link end given by role or index."""
        if isinstance(reference_link_end, LinkEndType):
            return get_n_way_link_index_from_link_end_type(
                reference_link_end, self.number_of_link_ends,
            )
        if isinstance(reference_link_end, bool) or not isinstance(reference_link_end, (int, np.integer)):
            raise ConfigurationError(
                f"Reference link end must be a LinkEndType or an index, got {reference_link_end!r}"
            )
        index = int(reference_link_end)
        if not 0 <= index < self.number_of_link_ends:
            raise ConfigurationError(
                f"Reference link end index {index} out of range for "
                f"{self.number_of_link_ends} link ends"
            )
        return index

    def solve(
        self,
        reference_time: float,
        reference_link_end: int | LinkEndType,
        ancillary_settings: AncillarySettings | None = None,
        initial_guess: MultiLegLightTimeSolution | None = None,
    ) -> MultiLegLightTimeSolution:
        """
        Solve all legs of the path.

        Args:
            reference_time: Time at the reference link end (s). At an
                outermost link end with a retransmission delay, this is the
                time at the antenna before/after the delay.
            reference_link_end: LinkEndType or index of the link end at
                which reference_time applies.
            ancillary_settings: Optional settings providing
                RETRANSMISSION_DELAYS.
            initial_guess: Optional earlier solution of this path used to
                warm-start every leg.

        Returns:
            MultiLegLightTimeSolution.

        Raises:
            ConfigurationError: Invalid delays or reference link end; raised
                before any leg is solved.
            LightTimeDivergenceError: From the first leg that diverges.
        """
        number_of_link_ends = self.number_of_link_ends
        delays = resolve_retransmission_delays(ancillary_settings, number_of_link_ends)
        start_index = self.reference_link_end_index(reference_link_end)

        if 0 < start_index < number_of_link_ends - 1 and delays[start_index] != 0.0:
            raise ConfigurationError(
                "Error when computing light time with reference link end that is not "
                "receiver or transmitter: non-zero retransmission delays at the "
                "reference link end are not supported, as this would require "
                "distinguishing between reception and transmission delays."
            )

        if initial_guess is not None and initial_guess.number_of_legs != self.number_of_legs:
            raise ConfigurationError(
                f"Initial guess has {initial_guess.number_of_legs} legs, "
                f"expected {self.number_of_legs}"
            )

        leg_solutions: list[LightTimeSolution | None] = [None] * self.number_of_legs
        total_light_time = delays[start_index]

        # Towards the transmitter: each leg anchored at its reception time.
        current_reception_time = reference_time - delays[start_index]
        for current_index in range(start_index, 0, -1):
            leg = current_index - 1
            solution = self._light_time_calculators[leg].solve(
                current_reception_time,
                is_reference_reception=True,
                initial_guess=_leg_guess(initial_guess, leg),
            )
            leg_solutions[leg] = solution

            current_light_time = solution.light_time + delays[leg]
            current_reception_time = current_reception_time - current_light_time
            total_light_time += current_light_time

        # Towards the receiver: each leg anchored at its transmission time.
        current_transmission_time = reference_time + delays[start_index]
        for current_index in range(start_index, number_of_link_ends - 1):
            leg = current_index
            solution = self._light_time_calculators[leg].solve(
                current_transmission_time,
                is_reference_reception=False,
                initial_guess=_leg_guess(initial_guess, leg),
            )
            leg_solutions[leg] = solution

            current_light_time = solution.light_time + delays[leg + 1]
            current_transmission_time = current_transmission_time + current_light_time
            total_light_time += current_light_time

        link_end_times: list[float] = []
        link_end_states: list[np.ndarray] = []
        for solution in leg_solutions:
            link_end_times.extend([
                float(solution.transmission_time), float(solution.reception_time),
            ])
            link_end_states.extend([solution.transmitter_state, solution.receiver_state])

        logger.debug(
            "Multi-leg light time %.18g s over %d legs (reference link end %d)",
            float(total_light_time), self.number_of_legs, start_index,
        )

        return MultiLegLightTimeSolution(
            light_time=total_light_time,
            link_end_times=tuple(link_end_times),
            link_end_states=tuple(link_end_states),
            leg_solutions=tuple(leg_solutions),
            retransmission_delays=delays,
            reference_link_end_index=start_index,
        )

    def calculate_light_time(
        self,
        reference_time: float,
        reference_link_end: int | LinkEndType,
        ancillary_settings: AncillarySettings | None = None,
    ) -> float:
        """Total light time (s) of the path, including retransmission delays."""
        return self.solve(reference_time, reference_link_end, ancillary_settings).light_time


def _leg_guess(
    initial_guess: MultiLegLightTimeSolution | None, leg: int,
) -> LegBoundaryGuess | None:
    if initial_guess is None:
        return None
    return initial_guess.leg_solutions[leg].as_boundary_guess()
