"""
Perihelion: Orbital Positions and Flight Trajectories

A Python package for hierarchical Keplerian body positions, intercept
solving, launch-window analysis and tick-based brachistochrone flight
planning in a 2D orbital plane.
"""

# Configuration
from .config import config, temp_config

# Core classes
from .vectors import Vec2
from .bodies import OrbitalParams, Orbiting, Fixed, Body
from .world import World
from .intercept import InterceptResult, solve_intercept
from .launch_window import AlignmentQuality, LaunchWindow, compute_launch_window
from .ship import EngineDefinition, ShipClass, ShipCapability
from .flight_profile import (FlightProfile, plan_flight, compute_flight_timing,
                             max_range_km)
from .flight import (FlightPhase, FlightState, initialize_flight, advance_flight,
                     redirect_flight)

# Orbital math
from .kepler import eccentric_anomaly, true_anomaly, true_anomaly_from_mean

# Errors
from .utils import UnknownComponentError

# Default world and registries
from .defaults import solar_system, get_engine_definition, get_ship_class

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from perihelion import *"
__all__ = [
    # Configuration
    "config",
    "temp_config",
    # Classes
    "Vec2",
    "OrbitalParams",
    "Orbiting",
    "Fixed",
    "Body",
    "World",
    "InterceptResult",
    "AlignmentQuality",
    "LaunchWindow",
    "EngineDefinition",
    "ShipClass",
    "ShipCapability",
    "FlightProfile",
    "FlightPhase",
    "FlightState",
    # Functions
    "solve_intercept",
    "compute_launch_window",
    "plan_flight",
    "compute_flight_timing",
    "max_range_km",
    "initialize_flight",
    "advance_flight",
    "redirect_flight",
    "eccentric_anomaly",
    "true_anomaly",
    "true_anomaly_from_mean",
    "solar_system",
    "get_engine_definition",
    "get_ship_class",
    # Errors
    "UnknownComponentError",
]
