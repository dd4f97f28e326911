"""
Default Bodies, Engines and Ship Classes
========================================

Predefined orbital parameters for a compact inner solar system, plus the
engine and ship-class registries that ShipCapability.from_registry resolves.

World objects carry a mutable per-tick position cache, so worlds are built on
demand by factory functions instead of being shared module constants.

Examples
--------
>>> from perihelion.defaults import solar_system
>>> world = solar_system()
>>> world.update_positions(0.0)
>>> world.get('mars').distance_from_reference
"""
import math
from typing import List
from .bodies import Body, OrbitalParams
from .ship import EngineDefinition, ShipClass
from .utils import UnknownComponentError
from .world import World

_DAY = 86400.0

"""
Predefined orbits for world creation
Heliocentric values are rounded J2000 elements; planet-centric stations
use in-game orbit radii measured from the planet's center of mass.
Units are km and seconds
"""
EARTH_ORBIT = OrbitalParams(
    orbital_radius_km=149_597_870.0,
    eccentricity=0.0167,
    orbital_period_sec=365.25 * _DAY,
)

MARS_ORBIT = OrbitalParams(
    orbital_radius_km=227_939_200.0,
    eccentricity=0.0934,
    orbital_period_sec=686.98 * _DAY,
)

JUPITER_ORBIT = OrbitalParams(
    orbital_radius_km=778_547_200.0,
    eccentricity=0.0489,
    orbital_period_sec=4332.59 * _DAY,
)

GATEWAY_ORBIT = OrbitalParams(
    orbital_radius_km=400.0,
    orbital_period_sec=5544.0,
    parent_id='earth',
)

MERIDIAN_ORBIT = OrbitalParams(
    orbital_radius_km=20_000.0,
    orbital_period_sec=43_080.0,
    initial_angle_rad=math.pi / 2,
    parent_id='earth',
)

FORGE_ORBIT = OrbitalParams(
    orbital_radius_km=384_400.0,
    orbital_period_sec=18.5 * _DAY,
    initial_angle_rad=math.pi / 4,
    parent_id='earth',
)

FREEPORT_ORBIT = OrbitalParams(
    orbital_radius_km=1_200_000.0,
    orbital_period_sec=60.0 * _DAY,
    initial_angle_rad=math.pi / 3,
    parent_id='earth',
)

SCATTER_ORBIT = OrbitalParams(
    orbital_radius_km=2_500_000.0,
    eccentricity=0.05,
    orbital_period_sec=150.0 * _DAY,
    initial_angle_rad=4.0,
    parent_id='earth',
)

JUPITER_STATION_ORBIT = OrbitalParams(
    orbital_radius_km=421_700.0,
    orbital_period_sec=1.769 * _DAY,
    parent_id='jupiter',
)


def solar_system_bodies() -> List[Body]:
    """Fresh Body instances for the default world."""
    return [
        Body('earth', EARTH_ORBIT, name='Earth'),
        Body('leo_station', GATEWAY_ORBIT, name='Gateway Station'),
        Body('meo_depot', MERIDIAN_ORBIT, name='Meridian Depot'),
        Body('forge_station', FORGE_ORBIT, name='Forge Station'),
        Body('freeport_station', FREEPORT_ORBIT, name='Freeport Station'),
        Body('the_scatter', SCATTER_ORBIT, name='The Scatter'),
        Body('mars', MARS_ORBIT, name='Mars'),
        Body('jupiter', JUPITER_ORBIT, name='Jupiter'),
        Body('jupiter_station', JUPITER_STATION_ORBIT, name='Jupiter Station'),
    ]


def solar_system() -> World:
    """
    Create the default world.

    Earth, Mars and Jupiter orbit the star; stations orbit Earth or
    Jupiter. Distances are cached against Earth.

    Returns
    -------
    World
        New world with positions cached at t = 0
    """
    world = World(solar_system_bodies(), reference_id='earth')
    world.update_positions(0.0)
    return world


"""
Engine registry
Thrust and rated delta-v per drive; specific impulse follows from the type
"""
ENGINE_DEFINITIONS = (
    EngineDefinition('chemical_bipropellant', 'RS-44 Bipropellant',
                     'Chemical Bipropellant', thrust=1500.0, max_delta_v=1000.0),
    EngineDefinition('ntr_mk1', 'NTR-200 Fission Drive',
                     'Nuclear Fission', thrust=4000.0, max_delta_v=20000.0),
    EngineDefinition('ntr_mk2', 'NTR-450 Fission Drive',
                     'Nuclear Fission', thrust=10000.0, max_delta_v=30000.0),
    EngineDefinition('ntr_heavy', 'NTR-800 Heavy Fission Drive',
                     'Nuclear Fission', thrust=20000.0, max_delta_v=40000.0),
    EngineDefinition('ntr_stealth', 'NTR-S Shadow Drive',
                     'Nuclear Fission', thrust=7500.0, max_delta_v=25000.0),
    EngineDefinition('fdr_sunfire', 'Sunfire Fusion Drive',
                     'Fusion (D-D)', thrust=50000.0, max_delta_v=150000.0),
    EngineDefinition('fdr_hellion', 'Hellion Fusion Drive',
                     'Fusion (D-He3)', thrust=80000.0, max_delta_v=300000.0),
    EngineDefinition('fdr_torch', 'Torch Fusion Drive',
                     'Fusion (D-He3)', thrust=100000.0, max_delta_v=500000.0),
    EngineDefinition('unas_m1_colossus', 'M1 Colossus',
                     'Advanced Fusion (Military)', thrust=500000.0,
                     max_delta_v=1000000.0),
)

"""
Ship class registry
Hull masses in kg; cargo capacity is the shared fuel/cargo volume
"""
SHIP_CLASSES = (
    ShipClass('station_keeper', 'Station Keeper', mass=50_000.0,
              cargo_capacity=5_000.0, max_crew=3,
              default_engine_id='chemical_bipropellant'),
    ShipClass('wayfarer', 'Wayfarer', mass=200_000.0,
              cargo_capacity=40_000.0, max_crew=6, default_engine_id='ntr_mk1'),
    ShipClass('phantom', 'Phantom', mass=250_000.0,
              cargo_capacity=30_000.0, max_crew=4, default_engine_id='ntr_stealth'),
    ShipClass('corsair', 'Corsair', mass=350_000.0,
              cargo_capacity=60_000.0, max_crew=8, default_engine_id='ntr_mk2'),
    ShipClass('dreadnought', 'Dreadnought', mass=500_000.0,
              cargo_capacity=120_000.0, max_crew=12, default_engine_id='ntr_heavy'),
    ShipClass('firebrand', 'Firebrand', mass=400_000.0,
              cargo_capacity=80_000.0, max_crew=10, default_engine_id='fdr_sunfire'),
)

_ENGINES_BY_ID = {engine.id: engine for engine in ENGINE_DEFINITIONS}
_SHIP_CLASSES_BY_ID = {ship_class.id: ship_class for ship_class in SHIP_CLASSES}


def get_engine_definition(engine_id: str) -> EngineDefinition:
    """
    Look up an engine by id.

    Raises
    ------
    UnknownComponentError
        If no engine has this id
    """
    try:
        return _ENGINES_BY_ID[engine_id]
    except KeyError:
        raise UnknownComponentError(
            f"Engine definition not found: {engine_id}") from None


def get_ship_class(class_id: str) -> ShipClass:
    """
    Look up a ship class by id.

    Raises
    ------
    UnknownComponentError
        If no ship class has this id
    """
    try:
        return _SHIP_CLASSES_BY_ID[class_id]
    except KeyError:
        raise UnknownComponentError(f"Unknown ship class: {class_id}") from None
