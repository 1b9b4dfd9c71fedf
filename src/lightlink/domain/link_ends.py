# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Link-end roles along a signal path.

A path of N legs has N + 1 link ends, indexed 0 (outermost transmitter)
to N (outermost receiver); interior ends are reflectors.
"""
from enum import Enum

from lightlink.domain.exceptions import ConfigurationError


class LinkEndType(Enum):
    """Role of a link end in an observation."""
    TRANSMITTER = "transmitter"
    REFLECTOR1 = "reflector1"
    REFLECTOR2 = "reflector2"
    REFLECTOR3 = "reflector3"
    REFLECTOR4 = "reflector4"
    RETRANSMITTER = "retransmitter"
    RECEIVER = "receiver"


_REFLECTOR_INDICES: dict[LinkEndType, int] = {
    LinkEndType.REFLECTOR1: 1,
    LinkEndType.REFLECTOR2: 2,
    LinkEndType.REFLECTOR3: 3,
    LinkEndType.REFLECTOR4: 4,
}


def get_n_way_link_index_from_link_end_type(
    link_end_type: LinkEndType,
    number_of_link_ends: int,
) -> int:
    """
    Index of a link end role in an n-way path.

    Args:
        link_end_type: Role of the link end.
        number_of_link_ends: Link ends in the path (legs + 1), at least 2.

    Returns:
        Index in [0, number_of_link_ends - 1].

    Raises:
        ConfigurationError: If the role does not exist in such a path.
    """
    if number_of_link_ends < 2:
        raise ConfigurationError(
            f"number_of_link_ends must be >= 2, got {number_of_link_ends}"
        )

    if link_end_type is LinkEndType.TRANSMITTER:
        return 0
    if link_end_type is LinkEndType.RECEIVER:
        return number_of_link_ends - 1
    if link_end_type is LinkEndType.RETRANSMITTER:
        if number_of_link_ends != 3:
            raise ConfigurationError(
                "Retransmitter link end is only defined for a two-leg path, "
                f"got {number_of_link_ends} link ends"
            )
        return 1

    index = _REFLECTOR_INDICES.get(link_end_type)
    if index is None:
        raise ConfigurationError(f"Unknown link end type: {link_end_type!r}")
    if index > number_of_link_ends - 2:
        raise ConfigurationError(
            f"Link end {link_end_type.value} does not exist in a path with "
            f"{number_of_link_ends} link ends"
        )
    return index


def get_link_end_type_from_n_way_index(
    index: int,
    number_of_link_ends: int,
) -> LinkEndType:
    """Inverse of get_n_way_link_index_from_link_end_type (reflector naming)."""
    if not 0 <= index < number_of_link_ends:
        raise ConfigurationError(
            f"Link end index {index} out of range for {number_of_link_ends} link ends"
        )
    if index == 0:
        return LinkEndType.TRANSMITTER
    if index == number_of_link_ends - 1:
        return LinkEndType.RECEIVER
    for link_end_type, reflector_index in _REFLECTOR_INDICES.items():
        if reflector_index == index:
            return link_end_type
    raise ConfigurationError(f"No link end type for interior index {index}")
