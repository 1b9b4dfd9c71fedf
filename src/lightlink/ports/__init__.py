# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces consumed by the light-time solvers.

Ephemerides, correction models and ancillary configuration live outside
the domain; they implement these protocols structurally.
"""
from typing import Any, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class StateFunction(Protocol):
    """Port for a link-end state provider: time (s) -> 6-vector (m, m/s)."""

    def __call__(self, time: float) -> np.ndarray:
        ...


@runtime_checkable
class LightTimeCorrection(Protocol):
    """Port for a light-time correction model (delay in seconds)."""

    correction_type: Any

    def calculate_light_time_correction(
        self,
        transmitter_state: np.ndarray,
        receiver_state: np.ndarray,
        transmission_time: float,
        reception_time: float,
    ) -> float:
        """Compute the delay contribution for one leg."""
        ...


@runtime_checkable
class AncillarySettings(Protocol):
    """Port for keyed per-observation settings (retransmission delays, ...)."""

    def get_double_vector_data(
        self, key: Any, throw_exception: bool = True,
    ) -> list[float] | None:
        """Look up a vector-valued setting."""
        ...
