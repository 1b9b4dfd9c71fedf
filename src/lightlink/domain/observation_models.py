# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Ideal tracking observables built on the light-time solution.

One-way range, n-way range and angular position (right ascension,
declination) of the transmitter as seen from the receiver. No biases,
noise or media corrections beyond those inside the light-time models.
"""
import math
from dataclasses import dataclass

import numpy as np

from lightlink.domain.exceptions import ConfigurationError
from lightlink.domain.light_time import LightTimeCalculator, LightTimeSolution
from lightlink.domain.link_ends import LinkEndType
from lightlink.domain.multi_leg_light_time import MultiLegLightTimeCalculator


@dataclass(frozen=True, eq=False)
class ObservationResult:
    """Observable values with the link-end times/states they were computed from."""
    values: tuple[float, ...]
    link_end_times: tuple[float, ...]
    link_end_states: tuple[np.ndarray, ...]


def _is_time_at_reception(reference_link_end: LinkEndType) -> bool:
    if reference_link_end is LinkEndType.RECEIVER:
        return True
    if reference_link_end is LinkEndType.TRANSMITTER:
        return False
    raise ConfigurationError(
        f"One-way observable requires the transmitter or receiver as reference "
        f"link end, got {reference_link_end!r}"
    )


def _one_way_result(values: tuple[float, ...], solution: LightTimeSolution) -> ObservationResult:
    return ObservationResult(
        values=values,
        link_end_times=(float(solution.transmission_time), float(solution.reception_time)),
        link_end_states=(solution.transmitter_state, solution.receiver_state),
    )


class OneWayRangeObservationModel:
    """Range c * light time of a single leg (m)."""

    def __init__(self, light_time_calculator: LightTimeCalculator) -> None:
        self._light_time_calculator = light_time_calculator

    @property
    def light_time_calculator(self) -> LightTimeCalculator:
        return self._light_time_calculator

    def compute_observation(
        self, time: float, reference_link_end: LinkEndType = LinkEndType.RECEIVER,
    ) -> ObservationResult:
        solution = self._light_time_calculator.solve(
            time, _is_time_at_reception(reference_link_end),
        )
        range_m = float(solution.light_time * self._light_time_calculator.speed_of_light)
        return _one_way_result((range_m,), solution)


class NWayRangeObservationModel:
    """Range c * total light time of a multi-leg path (m), delays included."""

    def __init__(self, multi_leg_calculator: MultiLegLightTimeCalculator) -> None:
        self._multi_leg_calculator = multi_leg_calculator

    @property
    def multi_leg_calculator(self) -> MultiLegLightTimeCalculator:
        return self._multi_leg_calculator

    def compute_observation(
        self,
        time: float,
        reference_link_end: int | LinkEndType = LinkEndType.RECEIVER,
        ancillary_settings=None,
    ) -> ObservationResult:
        solution = self._multi_leg_calculator.solve(time, reference_link_end, ancillary_settings)
        speed_of_light = self._multi_leg_calculator.light_time_calculators[0].speed_of_light
        return ObservationResult(
            values=(float(solution.light_time * speed_of_light),),
            link_end_times=solution.link_end_times,
            link_end_states=solution.link_end_states,
        )


class AngularPositionObservationModel:
    """Right ascension and declination (rad) of the transmitter seen from the receiver.

    Angles are those of r_t(t_t) - r_r(t_r), i.e. the apparent direction
    including light-time, in the frame of the state functions.
    Right ascension in (-pi, pi], declination in [-pi/2, pi/2].
    """

    def __init__(self, light_time_calculator: LightTimeCalculator) -> None:
        self._light_time_calculator = light_time_calculator

    @property
    def light_time_calculator(self) -> LightTimeCalculator:
        return self._light_time_calculator

    def compute_observation(
        self, time: float, reference_link_end: LinkEndType = LinkEndType.RECEIVER,
    ) -> ObservationResult:
        solution = self._light_time_calculator.solve(
            time, _is_time_at_reception(reference_link_end),
        )
        x, y, z = (float(v) for v in -solution.relative_range_vector)
        distance = math.sqrt(x * x + y * y + z * z)
        if distance == 0.0:
            raise ValueError("Link ends coincide; angular position undefined")

        right_ascension = math.atan2(y, x)
        declination = math.asin(max(-1.0, min(1.0, z / distance)))
        return _one_way_result((right_ascension, declination), solution)
