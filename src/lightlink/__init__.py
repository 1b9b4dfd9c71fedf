"""
lightlink

Light-time solutions for tracking observables. Solves the light-time
equation between moving link ends given as state functions of time,
with pluggable delay corrections, convergence and failure policies,
multi-leg signal paths with retransmission delays, and ideal range and
angular-position observables built on top.
"""

from lightlink.domain.exceptions import (
    LightTimeError,
    ConfigurationError,
    LightTimeDivergenceError,
)
from lightlink.domain.convergence import (
    LightTimeFailureHandling,
    LightTimeConvergenceCriteria,
    default_light_time_tolerance,
    is_light_time_solution_converged,
)
from lightlink.domain.corrections import (
    LightTimeCorrectionType,
    LightTimeCorrectionFunctionWrapper,
    FirstOrderRelativisticCorrection,
    total_light_time_correction,
)
from lightlink.domain.light_time import (
    LegBoundaryGuess,
    LightTimeSolution,
    LightTimeCalculator,
)
from lightlink.domain.multi_leg_light_time import (
    MultiLegLightTimeSolution,
    MultiLegLightTimeCalculator,
    resolve_retransmission_delays,
)
from lightlink.domain.link_ends import (
    LinkEndType,
    get_n_way_link_index_from_link_end_type,
    get_link_end_type_from_n_way_index,
)
from lightlink.domain.ancillary_settings import (
    ObservationAncillarySettingsType,
    ObservationAncillarySimulationSettings,
    retransmission_delay_settings,
)
from lightlink.domain.state_providers import (
    constant_state_function,
    linear_motion_state_function,
    keplerian_state_function,
    kepler_to_cartesian,
)
from lightlink.domain.observation_models import (
    ObservationResult,
    OneWayRangeObservationModel,
    NWayRangeObservationModel,
    AngularPositionObservationModel,
)

__version__ = "0.1.0"

__all__ = [
    "LightTimeError",
    "ConfigurationError",
    "LightTimeDivergenceError",
    "LightTimeFailureHandling",
    "LightTimeConvergenceCriteria",
    "default_light_time_tolerance",
    "is_light_time_solution_converged",
    "LightTimeCorrectionType",
    "LightTimeCorrectionFunctionWrapper",
    "FirstOrderRelativisticCorrection",
    "total_light_time_correction",
    "LegBoundaryGuess",
    "LightTimeSolution",
    "LightTimeCalculator",
    "MultiLegLightTimeSolution",
    "MultiLegLightTimeCalculator",
    "resolve_retransmission_delays",
    "LinkEndType",
    "get_n_way_link_index_from_link_end_type",
    "get_link_end_type_from_n_way_index",
    "ObservationAncillarySettingsType",
    "ObservationAncillarySimulationSettings",
    "retransmission_delay_settings",
    "constant_state_function",
    "linear_motion_state_function",
    "keplerian_state_function",
    "kepler_to_cartesian",
    "ObservationResult",
    "OneWayRangeObservationModel",
    "NWayRangeObservationModel",
    "AngularPositionObservationModel",
]
