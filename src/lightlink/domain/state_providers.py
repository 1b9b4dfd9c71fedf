# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Simple link-end state functions.

Closed-form state providers for stations, test geometries and two-body
spacecraft. Each returns a callable time (s) -> state (6,) in meters and
meters per second, with no internal state.
"""
import math
from typing import Callable

import numpy as np

from lightlink.domain.exceptions import ConfigurationError

MU_EARTH: float = 3.986004418e14  # m³/s², Earth gravitational parameter
MU_SUN: float = 1.32712440041e20  # m³/s²

_KEPLER_TOLERANCE = 1e-14
_KEPLER_MAX_ITERATIONS = 50


def _as_state(state) -> np.ndarray:
    state = np.array(state, dtype=np.float64)
    if state.shape != (6,):
        raise ConfigurationError(f"State must have 6 components, got shape {state.shape}")
    return state


def constant_state_function(state) -> Callable[[float], np.ndarray]:
    """State function returning the same state at all times."""
    fixed = _as_state(state)

    def state_function(time: float) -> np.ndarray:
        return fixed.copy()

    return state_function


def linear_motion_state_function(
    state, epoch: float = 0.0,
) -> Callable[[float], np.ndarray]:
    """State function for uniform rectilinear motion from state at epoch."""
    initial = _as_state(state)

    def state_function(time: float) -> np.ndarray:
        result = initial.copy()
        result[:3] += initial[3:] * (float(time) - epoch)
        return result

    return state_function


def kepler_to_cartesian(
    a: float,
    e: float,
    i_rad: float,
    omega_big_rad: float,
    omega_small_rad: float,
    nu_rad: float,
    mu: float = MU_EARTH,
) -> np.ndarray:
    """
    Convert Keplerian orbital elements to a Cartesian state.

    Args:
        a: Semi-major axis (m)
        e: Eccentricity, 0 <= e < 1
        i_rad: Inclination (radians)
        omega_big_rad: RAAN / longitude of ascending node (radians)
        omega_small_rad: Argument of periapsis (radians)
        nu_rad: True anomaly (radians)
        mu: Gravitational parameter of the central body (m³/s²)

    Returns:
        State [x, y, z, vx, vy, vz] in m and m/s.
    """
    cos_nu = math.cos(nu_rad)
    sin_nu = math.sin(nu_rad)

    r = a * (1 - e**2) / (1 + e * cos_nu)

    p_factor = math.sqrt(mu / (a * (1 - e**2)))
    pos_pqw = np.array([r * cos_nu, r * sin_nu, 0.0])
    vel_pqw = np.array([
        -p_factor * sin_nu,
        p_factor * (e + cos_nu),
        0.0,
    ])

    cO = math.cos(omega_big_rad)
    sO = math.sin(omega_big_rad)
    co = math.cos(omega_small_rad)
    so = math.sin(omega_small_rad)
    ci = math.cos(i_rad)
    si = math.sin(i_rad)

    rotation = np.array([
        [cO * co - sO * so * ci, -cO * so - sO * co * ci, sO * si],
        [sO * co + cO * so * ci, -sO * so + cO * co * ci, -cO * si],
        [so * si, co * si, ci],
    ])

    return np.concatenate([rotation @ pos_pqw, rotation @ vel_pqw])


def _eccentric_anomaly(mean_anomaly: float, e: float) -> float:
    """Solve Kepler's equation M = E - e sin E by Newton-Raphson."""
    ecc_anomaly = mean_anomaly if e < 0.8 else math.pi
    for _ in range(_KEPLER_MAX_ITERATIONS):
        f = ecc_anomaly - e * math.sin(ecc_anomaly) - mean_anomaly
        step = f / (1.0 - e * math.cos(ecc_anomaly))
        ecc_anomaly -= step
        if abs(step) < _KEPLER_TOLERANCE:
            break
    return ecc_anomaly


def keplerian_state_function(
    a: float,
    e: float,
    i_rad: float,
    omega_big_rad: float,
    omega_small_rad: float,
    mean_anomaly_at_epoch_rad: float,
    epoch: float = 0.0,
    mu: float = MU_EARTH,
    central_body_state_function: Callable[[float], np.ndarray] | None = None,
) -> Callable[[float], np.ndarray]:
    """
    Two-body state function on an elliptical orbit.

    The mean anomaly advances at n = sqrt(mu / a³). If a central-body
    state function is given, the returned state is offset by it (e.g. a
    spacecraft orbiting a planet, expressed relative to the Sun).

    Raises:
        ConfigurationError: If a <= 0 or e is outside [0, 1).
    """
    if a <= 0.0:
        raise ConfigurationError(f"a must be positive, got {a}")
    if not 0.0 <= e < 1.0:
        raise ConfigurationError(f"eccentricity must be in [0, 1), got {e}")

    mean_motion = math.sqrt(mu / a**3)
    half_angle_factor = math.sqrt((1.0 + e) / (1.0 - e))

    def state_function(time: float) -> np.ndarray:
        mean_anomaly = math.fmod(
            mean_anomaly_at_epoch_rad + mean_motion * (float(time) - epoch), 2.0 * math.pi,
        )
        ecc_anomaly = _eccentric_anomaly(mean_anomaly, e)
        nu = 2.0 * math.atan(half_angle_factor * math.tan(0.5 * ecc_anomaly))
        state = kepler_to_cartesian(a, e, i_rad, omega_big_rad, omega_small_rad, nu, mu)
        if central_body_state_function is not None:
            state = state + np.asarray(central_body_state_function(time), dtype=np.float64)
        return state

    return state_function
