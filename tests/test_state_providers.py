# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for closed-form link-end state functions."""

import math

import numpy as np
import pytest

from lightlink.domain.exceptions import ConfigurationError
from lightlink.domain.state_providers import (
    MU_EARTH,
    constant_state_function,
    kepler_to_cartesian,
    keplerian_state_function,
    linear_motion_state_function,
)
from lightlink.ports import StateFunction


R_LEO = 6_371_000 + 500_000


class TestConstant:

    def test_same_state_any_time(self):
        fn = constant_state_function([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        np.testing.assert_array_equal(fn(0.0), fn(1.0e9))

    def test_returns_copies(self):
        fn = constant_state_function(np.zeros(6))
        fn(0.0)[0] = 99.0
        assert fn(0.0)[0] == 0.0

    def test_wrong_length(self):
        with pytest.raises(ConfigurationError):
            constant_state_function([1.0, 2.0, 3.0])

    def test_satisfies_port(self):
        assert isinstance(constant_state_function(np.zeros(6)), StateFunction)


class TestLinearMotion:

    def test_position_advances(self):
        fn = linear_motion_state_function([0.0, 0.0, 0.0, 1.0, -2.0, 0.5], epoch=10.0)
        np.testing.assert_allclose(fn(14.0), [4.0, -8.0, 2.0, 1.0, -2.0, 0.5])
        np.testing.assert_allclose(fn(10.0)[:3], [0.0, 0.0, 0.0])


class TestKepler:

    def test_circular_radius_and_speed(self):
        state = kepler_to_cartesian(R_LEO, 0.0, 0.9, 0.3, 0.0, 1.2)
        assert np.linalg.norm(state[:3]) == pytest.approx(R_LEO, rel=1e-12)
        assert np.linalg.norm(state[3:]) == pytest.approx(math.sqrt(MU_EARTH / R_LEO), rel=1e-12)

    def test_periapsis(self):
        a, e = 10_000_000.0, 0.2
        fn = keplerian_state_function(a, e, 0.1, 0.2, 0.3, 0.0)
        assert np.linalg.norm(fn(0.0)[:3]) == pytest.approx(a * (1 - e), rel=1e-12)

    def test_periodic(self):
        a = 7_000_000.0
        fn = keplerian_state_function(a, 0.05, 0.5, 1.0, 2.0, 0.4, epoch=100.0)
        period = 2.0 * math.pi * math.sqrt(a**3 / MU_EARTH)
        np.testing.assert_allclose(fn(100.0 + period), fn(100.0), rtol=0, atol=1e-3)

    def test_velocity_matches_finite_difference(self):
        fn = keplerian_state_function(8_000_000.0, 0.1, 0.7, 0.0, 1.0, 2.0)
        dt = 0.01
        numerical = (fn(50.0 + dt)[:3] - fn(50.0 - dt)[:3]) / (2 * dt)
        np.testing.assert_allclose(numerical, fn(50.0)[3:], rtol=1e-6, atol=1e-4)

    def test_central_body_offset(self):
        offset = np.array([1.0e11, 0.0, 0.0, 0.0, 3.0e4, 0.0])
        bare = keplerian_state_function(R_LEO, 0.0, 0.0, 0.0, 0.0, 0.0)
        helio = keplerian_state_function(
            R_LEO, 0.0, 0.0, 0.0, 0.0, 0.0,
            central_body_state_function=constant_state_function(offset),
        )
        np.testing.assert_allclose(helio(30.0) - bare(30.0), offset)

    def test_invalid_elements(self):
        with pytest.raises(ConfigurationError):
            keplerian_state_function(-1.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        with pytest.raises(ConfigurationError):
            keplerian_state_function(R_LEO, 1.0, 0.0, 0.0, 0.0, 0.0)
