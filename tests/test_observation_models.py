# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for ideal range and angular-position observables."""

import math

import numpy as np
import pytest

from lightlink.domain.ancillary_settings import retransmission_delay_settings
from lightlink.domain.exceptions import ConfigurationError
from lightlink.domain.light_time import LightTimeCalculator
from lightlink.domain.link_ends import LinkEndType
from lightlink.domain.multi_leg_light_time import MultiLegLightTimeCalculator
from lightlink.domain.observation_models import (
    AngularPositionObservationModel,
    NWayRangeObservationModel,
    ObservationResult,
    OneWayRangeObservationModel,
)
from lightlink.domain.state_providers import (
    constant_state_function,
    linear_motion_state_function,
)


C = 299792458.0


def _stationary(x, y=0.0, z=0.0):
    return constant_state_function([x, y, z, 0.0, 0.0, 0.0])


class TestOneWayRange:

    def test_range_equals_distance(self):
        model = OneWayRangeObservationModel(
            LightTimeCalculator(_stationary(3.0e7, 4.0e7), _stationary(0.0)),
        )
        result = model.compute_observation(100.0)
        assert isinstance(result, ObservationResult)
        assert result.values[0] == pytest.approx(5.0e7, rel=1e-12)

    def test_link_end_times(self):
        model = OneWayRangeObservationModel(LightTimeCalculator(_stationary(C), _stationary(0.0)))
        received = model.compute_observation(100.0, LinkEndType.RECEIVER)
        sent = model.compute_observation(100.0, LinkEndType.TRANSMITTER)
        assert received.link_end_times == pytest.approx((99.0, 100.0), abs=1e-12)
        assert sent.link_end_times == pytest.approx((100.0, 101.0), abs=1e-12)
        assert len(received.link_end_states) == 2

    def test_interior_reference_rejected(self):
        model = OneWayRangeObservationModel(LightTimeCalculator(_stationary(C), _stationary(0.0)))
        with pytest.raises(ConfigurationError):
            model.compute_observation(0.0, LinkEndType.REFLECTOR1)


class TestNWayRange:

    def test_two_way_range_with_delay(self):
        station, spacecraft = _stationary(0.0), _stationary(C)
        model = NWayRangeObservationModel(MultiLegLightTimeCalculator([
            LightTimeCalculator(station, spacecraft),
            LightTimeCalculator(spacecraft, station),
        ]))
        result = model.compute_observation(
            10.0, LinkEndType.RECEIVER, retransmission_delay_settings([1.0e-6]),
        )
        assert result.values[0] == pytest.approx(C * (2.0 + 1.0e-6), rel=1e-12)
        assert len(result.link_end_times) == 4


class TestAngularPosition:

    def _model(self, transmitter):
        return AngularPositionObservationModel(LightTimeCalculator(transmitter, _stationary(0.0)))

    def test_along_x(self):
        ra, dec = self._model(_stationary(1.0e9)).compute_observation(0.0).values
        assert ra == pytest.approx(0.0, abs=1e-15)
        assert dec == pytest.approx(0.0, abs=1e-15)

    def test_along_y(self):
        ra, dec = self._model(_stationary(0.0, 1.0e9)).compute_observation(0.0).values
        assert ra == pytest.approx(math.pi / 2)
        assert dec == pytest.approx(0.0, abs=1e-15)

    def test_pole(self):
        _, dec = self._model(_stationary(0.0, 0.0, -1.0e9)).compute_observation(0.0).values
        assert dec == pytest.approx(-math.pi / 2)

    def test_uses_retarded_transmitter_position(self):
        """Direction is to where the transmitter was at emission, not at reception."""
        transmitter = linear_motion_state_function([C, 0.0, 0.0, 0.0, 1.0e5, 0.0])
        result = self._model(transmitter).compute_observation(1.0)
        ra, _ = result.values
        t_t = result.link_end_times[0]
        expected = math.atan2(1.0e5 * t_t, C)
        assert t_t == pytest.approx(0.0, abs=1e-6)
        assert ra == pytest.approx(expected, abs=1e-12)

    def test_transmitter_reference(self):
        result = self._model(_stationary(0.0, 1.0e9)).compute_observation(0.0, LinkEndType.TRANSMITTER)
        assert result.link_end_times[0] == 0.0
        assert result.values[0] == pytest.approx(math.pi / 2)

    def test_coincident_link_ends(self):
        with pytest.raises(ValueError):
            self._model(_stationary(0.0)).compute_observation(0.0)

    def test_states_returned(self):
        result = self._model(_stationary(0.0, 1.0e9)).compute_observation(0.0)
        np.testing.assert_array_equal(result.link_end_states[0][:3], [0.0, 1.0e9, 0.0])
