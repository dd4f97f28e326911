'''Flight profile planner.
Chooses between a mini-brachistochrone (accelerate to the midpoint, then
brake) and a burn-coast-burn profile for a one-way leg, and exposes the
travel-time and fuel estimators every other layer must reuse.'''

import logging
import math
from dataclasses import dataclass
from typing import Optional
from .config import config
from .propulsion import fuel_mass_required
from .ship import EngineDefinition, ShipCapability, ShipClass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlightProfile:
    """
    Burn/coast timing for one leg.

    Attributes
    ----------
    burn_time : float
        Duration of each burn [s] (the acceleration burn and the
        deceleration burn are equal)
    coast_time : float
        Duration of the unpowered cruise [s]; 0 for a mini-brachistochrone
    total_time : float
        Leg duration [s]
    acceleration : float
        Acceleration used for planning [m/s^2]
    allocated_delta_v : float
        Delta-v budget the leg was planned against [m/s]
    """
    burn_time: float
    coast_time: float
    total_time: float
    acceleration: float
    allocated_delta_v: float

    @property
    def is_brachistochrone(self) -> bool:
        """True if the leg never coasts."""
        return self.coast_time == 0

    @property
    def cruise_velocity(self) -> float:
        """Peak velocity reached at the end of the first burn [m/s]"""
        return self.acceleration * self.burn_time

    @property
    def required_delta_v(self) -> float:
        """Delta-v actually spent on the leg, both burns [m/s]"""
        return 2.0 * self.cruise_velocity


def _fallback(acceleration: float, allocated_delta_v: float,
              dt: float) -> FlightProfile:
    return FlightProfile(burn_time=0.0, coast_time=0.0, total_time=dt,
                         acceleration=acceleration,
                         allocated_delta_v=allocated_delta_v)


def compute_flight_timing(distance_m: float, acceleration: float,
                          allocated_delta_v: float,
                          dt: Optional[float] = None) -> FlightProfile:
    """
    Plan burn and coast durations for a leg.

    Parameters
    ----------
    distance_m : float
        One-way distance [m]
    acceleration : float
        Thrust-limited acceleration [m/s^2]
    allocated_delta_v : float
        Delta-v budget for the leg [m/s]
    dt : float, optional
        Fallback duration (default: config.SECONDS_PER_TICK)

    Returns
    -------
    FlightProfile

    Notes
    -----
    A brachistochrone (thrust to the midpoint, then brake) needs
    dv = 2*sqrt(d*a). If that fits in the budget the leg never coasts and
    takes 2*sqrt(d/a). Otherwise half the budget is spent reaching a cruise
    velocity of allocated/2, the ship coasts, and the other half brakes.

    Zero acceleration, an empty budget, or a non-finite result returns a
    profile lasting one tick quantum instead of an infinite or NaN time.
    """
    if dt is None:
        dt = config.SECONDS_PER_TICK
    if acceleration <= 0 or allocated_delta_v <= 0:
        return _fallback(acceleration, allocated_delta_v, dt)

    distance_m = max(distance_m, 0.0)
    brachistochrone_dv = 2.0 * math.sqrt(distance_m * acceleration)

    if brachistochrone_dv <= allocated_delta_v:
        total_time = 2.0 * math.sqrt(distance_m / acceleration)
        profile = FlightProfile(burn_time=total_time / 2.0, coast_time=0.0,
                                total_time=total_time, acceleration=acceleration,
                                allocated_delta_v=allocated_delta_v)
    else:
        v_cruise = allocated_delta_v / 2.0
        burn_time = v_cruise / acceleration
        burn_distance = 0.5 * acceleration * burn_time * burn_time
        coast_distance = max(0.0, distance_m - 2.0 * burn_distance)
        coast_time = coast_distance / v_cruise
        profile = FlightProfile(burn_time=burn_time, coast_time=coast_time,
                                total_time=2.0 * burn_time + coast_time,
                                acceleration=acceleration,
                                allocated_delta_v=allocated_delta_v)

    if (not math.isfinite(profile.total_time) or profile.total_time <= 0
            or not math.isfinite(profile.burn_time)
            or not math.isfinite(profile.coast_time)):
        return _fallback(acceleration, allocated_delta_v, dt)
    return profile


def plan_flight(distance_m: float, capability: ShipCapability,
                burn_fraction: float = 1.0,
                delta_v_fraction: Optional[float] = None) -> FlightProfile:
    """
    Plan a leg for a ship.

    Parameters
    ----------
    distance_m : float
        One-way distance [m]
    capability : ShipCapability
    burn_fraction : float, optional
        Share of the leg budget to use, clamped to
        [config.MIN_BURN_FRACTION, 1]. Lower values coast more and save
        propellant. Default: 1.0
    delta_v_fraction : float, optional
        Share of available delta-v allocated to the leg
        (default: config.ONE_WAY_DELTA_V_FRACTION)

    Returns
    -------
    FlightProfile
    """
    allocated = capability.allocated_delta_v(burn_fraction, delta_v_fraction)
    profile = compute_flight_timing(distance_m, capability.acceleration, allocated)
    logger.debug("Planned %.0f m leg: %s, total %.0f s",
                 distance_m,
                 'brachistochrone' if profile.is_brachistochrone else 'burn-coast-burn',
                 profile.total_time)
    return profile


def estimate_travel_time(distance_km: float, capability: ShipCapability,
                         burn_fraction: float = 1.0) -> float:
    """Travel time [s] for a one-way leg of ``distance_km``."""
    return plan_flight(distance_km * 1000.0, capability, burn_fraction).total_time


def one_leg_fuel_kg(capability: ShipCapability, distance_km: float,
                    burn_fraction: float = 1.0) -> float:
    """
    Propellant [kg] burned on a one-way leg.

    The leg spends the brachistochrone delta-v when it fits in the budget
    and the full allocation otherwise, so ships that coast are not charged
    for a brachistochrone they never fly. The charge is computed against
    the ship's dry mass.
    """
    distance_m = distance_km * 1000.0
    allocated = capability.allocated_delta_v(burn_fraction)
    brachistochrone_dv = 2.0 * math.sqrt(max(distance_m, 0.0)
                                         * capability.acceleration)
    leg_delta_v = min(brachistochrone_dv, allocated)
    return fuel_mass_required(capability.dry_mass, leg_delta_v,
                              capability.specific_impulse)


def distance_in_time(total_time: float, acceleration: float,
                     allocated_delta_v: float) -> float:
    """
    Farthest distance [m] a leg can cover in ``total_time``.

    Inverse of compute_flight_timing: when the whole time fits inside the
    two burns the leg is a mini-brachistochrone covering a*T^2/4; otherwise
    both burns run to the cruise velocity allocated/2 and the rest of the
    time is spent coasting. Non-positive inputs give 0.
    """
    if total_time <= 0 or acceleration <= 0 or allocated_delta_v <= 0:
        return 0.0
    v_cruise = allocated_delta_v / 2.0
    burn_time = v_cruise / acceleration
    if total_time <= 2.0 * burn_time:
        return 0.25 * acceleration * total_time * total_time
    coast_time = total_time - 2.0 * burn_time
    return acceleration * burn_time * burn_time + v_cruise * coast_time


def max_range_km(ship_class: ShipClass,
                 engine: Optional[EngineDefinition] = None) -> float:
    """
    Maximum one-way range of a fully fuelled, empty hull [km].

    Parameters
    ----------
    ship_class : ShipClass
    engine : EngineDefinition, optional
        Fitted engine (defaults to the class's default engine)

    Returns
    -------
    float
        Distance coverable within the class's mission endurance using the
        same one-way delta-v allocation as plan_flight

    Raises
    ------
    UnknownComponentError
        If no engine is given and the default engine is not registered
    """
    from .defaults import get_engine_definition

    if engine is None:
        engine = get_engine_definition(ship_class.default_engine_id)
    capability = ShipCapability(
        dry_mass=ship_class.mass,
        current_mass=ship_class.mass + ship_class.fuel_tank_capacity,
        thrust=engine.thrust,
        specific_impulse=engine.specific_impulse,
        max_delta_v=engine.max_delta_v,
        name=ship_class.name,
    )
    distance_m = distance_in_time(ship_class.mission_endurance,
                                  capability.acceleration,
                                  capability.allocated_delta_v())
    return distance_m / 1000.0
