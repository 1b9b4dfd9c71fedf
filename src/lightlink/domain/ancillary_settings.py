# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Ancillary observation settings.

A keyed bag of per-observation parameters that are not part of the state
or correction models: retransmission delays, Doppler integration time,
reference frequencies.
"""
from enum import Enum


class ObservationAncillarySettingsType(Enum):
    """Keys of ancillary observation settings."""
    RETRANSMISSION_DELAYS = "retransmission_delays"
    DOPPLER_INTEGRATION_TIME = "doppler_integration_time"
    DOPPLER_REFERENCE_FREQUENCY = "doppler_reference_frequency"
    FREQUENCY_BANDS = "frequency_bands"


class ObservationAncillarySimulationSettings:
    """Scalar and vector ancillary settings, keyed by ObservationAncillarySettingsType."""

    def __init__(self) -> None:
        self._double_data: dict[ObservationAncillarySettingsType, float] = {}
        self._double_vector_data: dict[ObservationAncillarySettingsType, list[float]] = {}

    def set_double_data(self, key: ObservationAncillarySettingsType, value: float) -> None:
        self._double_data[key] = float(value)

    def set_double_vector_data(
        self, key: ObservationAncillarySettingsType, values,
    ) -> None:
        self._double_vector_data[key] = [float(v) for v in values]

    def get_double_data(
        self, key: ObservationAncillarySettingsType, throw_exception: bool = True,
    ) -> float | None:
        """
        Scalar setting for key.

        Raises:
            KeyError: If absent and throw_exception is True.
        """
        if key in self._double_data:
            return self._double_data[key]
        if throw_exception:
            raise KeyError(f"Ancillary setting not found: {key.value}")
        return None

    def get_double_vector_data(
        self, key: ObservationAncillarySettingsType, throw_exception: bool = True,
    ) -> list[float] | None:
        """
        Vector setting for key (a copy).

        Raises:
            KeyError: If absent and throw_exception is True.
        """
        if key in self._double_vector_data:
            return list(self._double_vector_data[key])
        if throw_exception:
            raise KeyError(f"Ancillary setting not found: {key.value}")
        return None


def retransmission_delay_settings(delays) -> ObservationAncillarySimulationSettings:
    """Ancillary settings holding only a retransmission-delay vector (s)."""
    settings = ObservationAncillarySimulationSettings()
    settings.set_double_vector_data(
        ObservationAncillarySettingsType.RETRANSMISSION_DELAYS, delays,
    )
    return settings
