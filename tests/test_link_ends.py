# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for link-end roles and ancillary observation settings."""

import pytest

from lightlink.domain.ancillary_settings import (
    ObservationAncillarySettingsType,
    ObservationAncillarySimulationSettings,
    retransmission_delay_settings,
)
from lightlink.domain.exceptions import ConfigurationError
from lightlink.domain.link_ends import (
    LinkEndType,
    get_link_end_type_from_n_way_index,
    get_n_way_link_index_from_link_end_type,
)
from lightlink.ports import AncillarySettings


# ── Link-end indices ───────────────────────────────────────────

class TestNWayIndex:

    def test_transmitter_is_first(self):
        assert get_n_way_link_index_from_link_end_type(LinkEndType.TRANSMITTER, 2) == 0
        assert get_n_way_link_index_from_link_end_type(LinkEndType.TRANSMITTER, 5) == 0

    def test_receiver_is_last(self):
        assert get_n_way_link_index_from_link_end_type(LinkEndType.RECEIVER, 2) == 1
        assert get_n_way_link_index_from_link_end_type(LinkEndType.RECEIVER, 5) == 4

    def test_reflectors(self):
        assert get_n_way_link_index_from_link_end_type(LinkEndType.REFLECTOR1, 3) == 1
        assert get_n_way_link_index_from_link_end_type(LinkEndType.REFLECTOR3, 5) == 3
        assert get_n_way_link_index_from_link_end_type(LinkEndType.REFLECTOR4, 6) == 4

    def test_reflector_outside_path(self):
        with pytest.raises(ConfigurationError):
            get_n_way_link_index_from_link_end_type(LinkEndType.REFLECTOR1, 2)
        with pytest.raises(ConfigurationError):
            get_n_way_link_index_from_link_end_type(LinkEndType.REFLECTOR3, 4)

    def test_retransmitter_only_two_legs(self):
        assert get_n_way_link_index_from_link_end_type(LinkEndType.RETRANSMITTER, 3) == 1
        with pytest.raises(ConfigurationError):
            get_n_way_link_index_from_link_end_type(LinkEndType.RETRANSMITTER, 4)

    def test_too_few_link_ends(self):
        with pytest.raises(ConfigurationError):
            get_n_way_link_index_from_link_end_type(LinkEndType.TRANSMITTER, 1)

    @pytest.mark.parametrize("n_link_ends", [2, 3, 4, 6])
    def test_inverse(self, n_link_ends):
        for index in range(n_link_ends):
            link_end = get_link_end_type_from_n_way_index(index, n_link_ends)
            assert get_n_way_link_index_from_link_end_type(link_end, n_link_ends) == index

    def test_inverse_out_of_range(self):
        with pytest.raises(ConfigurationError):
            get_link_end_type_from_n_way_index(3, 3)


# ── Ancillary settings ─────────────────────────────────────────

class TestAncillarySettings:

    def test_vector_round_trip_is_copy(self):
        settings = ObservationAncillarySimulationSettings()
        settings.set_double_vector_data(ObservationAncillarySettingsType.RETRANSMISSION_DELAYS, [1e-6, 2e-6])
        delays = settings.get_double_vector_data(ObservationAncillarySettingsType.RETRANSMISSION_DELAYS)
        delays.append(3.0)
        assert settings.get_double_vector_data(
            ObservationAncillarySettingsType.RETRANSMISSION_DELAYS
        ) == [1e-6, 2e-6]

    def test_scalar(self):
        settings = ObservationAncillarySimulationSettings()
        settings.set_double_data(ObservationAncillarySettingsType.DOPPLER_INTEGRATION_TIME, 60)
        assert settings.get_double_data(ObservationAncillarySettingsType.DOPPLER_INTEGRATION_TIME) == 60.0

    def test_missing_raises(self):
        settings = ObservationAncillarySimulationSettings()
        with pytest.raises(KeyError):
            settings.get_double_vector_data(ObservationAncillarySettingsType.RETRANSMISSION_DELAYS)
        with pytest.raises(KeyError):
            settings.get_double_data(ObservationAncillarySettingsType.DOPPLER_REFERENCE_FREQUENCY)

    def test_missing_without_exception(self):
        settings = ObservationAncillarySimulationSettings()
        assert settings.get_double_vector_data(
            ObservationAncillarySettingsType.FREQUENCY_BANDS, throw_exception=False,
        ) is None
        assert settings.get_double_data(
            ObservationAncillarySettingsType.DOPPLER_INTEGRATION_TIME, throw_exception=False,
        ) is None

    def test_retransmission_delay_settings(self):
        settings = retransmission_delay_settings((0.0, 1e-3, 0.0))
        assert settings.get_double_vector_data(
            ObservationAncillarySettingsType.RETRANSMISSION_DELAYS
        ) == [0.0, 1e-3, 0.0]

    def test_satisfies_port(self):
        assert isinstance(ObservationAncillarySimulationSettings(), AncillarySettings)
