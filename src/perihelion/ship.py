'''Ship capability and component definitions.
ShipCapability is the propulsion summary the flight planner consumes;
EngineDefinition and ShipClass describe the registry entries it can be
built from.'''

import math
import numpy as np
from dataclasses import dataclass
from typing import Optional
from .config import config
from .propulsion import G0, delta_v

# Mass assumptions shared by every estimator that builds a capability
CREW_MASS_KG = 80.0
# Fuel tanks and cargo holds share one internal volume: 70% fuel, 30% cargo
FUEL_CARGO_SPLIT = 0.7
# The non-fuel share of that volume is stocked with consumables for endurance
CONSUMABLE_FRACTION = 0.3
PROVISIONS_KG_PER_CREW_PER_DAY = 15.0


def clamp_burn_fraction(burn_fraction: float) -> float:
    """Clamp a burn fraction to [config.MIN_BURN_FRACTION, 1]."""
    return max(config.MIN_BURN_FRACTION, min(1.0, burn_fraction))


@dataclass(frozen=True)
class EngineDefinition:
    """
    Immutable engine registry entry.

    Attributes
    ----------
    id : str
        Registry identifier
    name : str
        Display name
    type : str
        Engine family, e.g. 'Chemical Bipropellant', 'Nuclear Fission',
        'Fusion (D-D)'. Determines specific impulse.
    thrust : float
        Thrust [N]
    max_delta_v : float
        Rated delta-v ceiling [m/s]
    """
    id: str
    name: str
    type: str
    thrust: float
    max_delta_v: float

    def __post_init__(self):
        if self.thrust < 0:
            raise ValueError(f"Thrust must be non-negative, got {self.thrust}")
        if self.max_delta_v <= 0:
            raise ValueError(f"Max delta-v must be positive, got {self.max_delta_v}")

    @property
    def specific_impulse(self) -> float:
        """Specific impulse [s] by engine family."""
        if 'Chemical' in self.type:
            return 450.0        # LOX/LH2 bipropellant
        if 'Fission' in self.type:
            return 900.0        # nuclear thermal rocket
        if 'Fusion (D-D)' in self.type:
            return 50000.0
        if 'Fusion (D-He3)' in self.type:
            return 100000.0
        if 'Military' in self.type:
            return 200000.0
        # Unknown family: assume the rated delta-v comes from a 4:1 mass ratio
        return self.max_delta_v / (G0 * math.log(4))


@dataclass(frozen=True)
class ShipClass:
    """
    Immutable hull registry entry.

    Attributes
    ----------
    id : str
        Registry identifier
    name : str
        Display name
    mass : float
        Empty hull mass [kg]
    cargo_capacity : float
        Shared fuel/cargo volume expressed as mass [kg]
    max_crew : int
        Crew berths
    default_engine_id : str
        Engine fitted when none is specified
    """
    id: str
    name: str
    mass: float
    cargo_capacity: float
    max_crew: int
    default_engine_id: str

    def __post_init__(self):
        if self.mass <= 0:
            raise ValueError(f"Hull mass must be positive, got {self.mass}")
        if self.cargo_capacity < 0:
            raise ValueError(f"Cargo capacity must be non-negative, "
                             f"got {self.cargo_capacity}")
        if self.max_crew < 1:
            raise ValueError(f"Max crew must be at least 1, got {self.max_crew}")

    @property
    def fuel_tank_capacity(self) -> float:
        """Propellant capacity [kg]"""
        return self.cargo_capacity * FUEL_CARGO_SPLIT

    @property
    def available_cargo_capacity(self) -> float:
        """Cargo capacity left after the fuel allocation [kg]"""
        return self.cargo_capacity * (1 - FUEL_CARGO_SPLIT)

    @property
    def mission_endurance(self) -> float:
        """
        Time a full crew can stay out on stocked consumables [s].

        Consumables take CONSUMABLE_FRACTION of the cargo volume and are eaten
        at PROVISIONS_KG_PER_CREW_PER_DAY per berth.
        """
        consumables_kg = self.cargo_capacity * CONSUMABLE_FRACTION
        endurance_days = consumables_kg / (self.max_crew * PROVISIONS_KG_PER_CREW_PER_DAY)
        return endurance_days * config.SECONDS_PER_DAY


class ShipCapability:
    """
    Propulsion summary of a ship at a moment in time.

    Parameters
    ----------
    dry_mass : float
        Mass without propellant [kg], including crew, cargo and provisions
    current_mass : float
        Mass with the propellant currently aboard [kg]
    thrust : float
        Engine thrust [N]
    specific_impulse : float
        Engine specific impulse [s]
    max_delta_v : float
        Rated delta-v ceiling of the engine [m/s]
    name : str, optional
        Identifier for display
    """
    # ========== CLASS CONSTANTS ==========
    _EQUALITY_RTOL = 1e-12
    _EQUALITY_ATOL = 1e-14
    _HASH_DECIMALS = 6

    def __init__(
        self,
        dry_mass: float,
        current_mass: float,
        thrust: float,
        specific_impulse: float,
        max_delta_v: float,
        name: Optional[str] = None
    ):
        values = dict(dry_mass=dry_mass, current_mass=current_mass, thrust=thrust,
                      specific_impulse=specific_impulse, max_delta_v=max_delta_v)
        for key, value in values.items():
            if not math.isfinite(value):
                raise ValueError(f"{key} must be finite, got {value}")
        if dry_mass <= 0:
            raise ValueError(f"Dry mass must be positive, got {dry_mass}")
        if current_mass < dry_mass:
            raise ValueError(f"Current mass ({current_mass}) must be at least "
                             f"the dry mass ({dry_mass})")
        if thrust < 0:
            raise ValueError(f"Thrust must be non-negative, got {thrust}")
        if specific_impulse < 0:
            raise ValueError(f"Specific impulse must be non-negative, "
                             f"got {specific_impulse}")
        if max_delta_v < 0:
            raise ValueError(f"Max delta-v must be non-negative, got {max_delta_v}")

        self._dry_mass = float(dry_mass)
        self._current_mass = float(current_mass)
        self._thrust = float(thrust)
        self._specific_impulse = float(specific_impulse)
        self._max_delta_v = float(max_delta_v)
        self._name = name

    # ========== ALTERNATE CONSTRUCTORS ==========
    @classmethod
    def from_registry(cls, class_id: str, engine_id: Optional[str] = None,
                      fuel_kg: Optional[float] = None, crew_count: int = 0,
                      cargo_kg: float = 0.0, provisions_kg: float = 0.0,
                      name: Optional[str] = None) -> "ShipCapability":
        """
        Build a capability from the ship-class and engine registries.

        Parameters
        ----------
        class_id : str
            Ship class identifier
        engine_id : str, optional
            Engine identifier (defaults to the class's default engine)
        fuel_kg : float, optional
            Propellant aboard [kg] (defaults to a full tank)
        crew_count : int, optional
        cargo_kg : float, optional
        provisions_kg : float, optional

        Raises
        ------
        UnknownComponentError
            If either identifier is not registered
        """
        from .defaults import get_engine_definition, get_ship_class

        ship_class = get_ship_class(class_id)
        engine = get_engine_definition(engine_id or ship_class.default_engine_id)
        if fuel_kg is None:
            fuel_kg = ship_class.fuel_tank_capacity

        dry_mass = (ship_class.mass + crew_count * CREW_MASS_KG
                    + cargo_kg + provisions_kg)
        return cls(
            dry_mass=dry_mass,
            current_mass=dry_mass + fuel_kg,
            thrust=engine.thrust,
            specific_impulse=engine.specific_impulse,
            max_delta_v=engine.max_delta_v,
            name=name or ship_class.name,
        )

    def with_fuel(self, fuel_kg: float) -> "ShipCapability":
        """Copy of this capability carrying a different propellant load."""
        return ShipCapability(self.dry_mass, self.dry_mass + fuel_kg, self.thrust,
                              self.specific_impulse, self.max_delta_v, self.name)

    # ========== PROPERTY ACCESS ==========
    @property
    def dry_mass(self) -> float:
        """Mass without propellant [kg]"""
        return self._dry_mass

    @property
    def current_mass(self) -> float:
        """Mass with current propellant [kg]"""
        return self._current_mass

    @property
    def thrust(self) -> float:
        """Engine thrust [N]"""
        return self._thrust

    @property
    def specific_impulse(self) -> float:
        """Specific impulse [s]"""
        return self._specific_impulse

    @property
    def max_delta_v(self) -> float:
        """Rated delta-v ceiling [m/s]"""
        return self._max_delta_v

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def fuel_mass(self) -> float:
        """Propellant aboard [kg]"""
        return self._current_mass - self._dry_mass

    @property
    def acceleration(self) -> float:
        """Acceleration at current mass [m/s^2]"""
        return self._thrust / self._current_mass

    @property
    def available_delta_v(self) -> float:
        """Delta-v of the propellant aboard [m/s]"""
        return delta_v(self._current_mass, self._dry_mass, self._specific_impulse)

    def allocated_delta_v(self, burn_fraction: float = 1.0,
                          delta_v_fraction: Optional[float] = None) -> float:
        """
        Delta-v budget for one leg [m/s].

        The leg gets ``delta_v_fraction`` (default
        config.ONE_WAY_DELTA_V_FRACTION) of the available delta-v, never more
        than the same fraction of the engine's rated ceiling, scaled by the
        clamped burn fraction.
        """
        if delta_v_fraction is None:
            delta_v_fraction = config.ONE_WAY_DELTA_V_FRACTION
        budget = min(self.available_delta_v * delta_v_fraction,
                     self._max_delta_v * delta_v_fraction)
        return budget * clamp_burn_fraction(burn_fraction)

    # ========== SPECIAL METHODS ==========
    def __repr__(self) -> str:
        name_str = f"'{self.name}'" if self.name else "unnamed"
        return (f"ShipCapability({name_str}, dry={self.dry_mass:.0f} kg, "
                f"wet={self.current_mass:.0f} kg, F={self.thrust:.0f} N, "
                f"Isp={self.specific_impulse:.0f} s)")

    def __eq__(self, other) -> bool:
        if not isinstance(other, ShipCapability):
            return NotImplemented
        mine = (self.dry_mass, self.current_mass, self.thrust,
                self.specific_impulse, self.max_delta_v)
        theirs = (other.dry_mass, other.current_mass, other.thrust,
                  other.specific_impulse, other.max_delta_v)
        return (bool(np.allclose(mine, theirs, rtol=self._EQUALITY_RTOL,
                                 atol=self._EQUALITY_ATOL))
                and self.name == other.name)

    def __hash__(self) -> int:
        return hash((round(self.dry_mass, self._HASH_DECIMALS),
                     round(self.current_mass, self._HASH_DECIMALS),
                     round(self.thrust, self._HASH_DECIMALS),
                     round(self.specific_impulse, self._HASH_DECIMALS),
                     round(self.max_delta_v, self._HASH_DECIMALS),
                     self.name))
