"""
Test suite for ShipCapability and the component registries.

Tests cover:
- Registry lookups and errors
- Construction from registries
- Parameter validation
- Derived quantities
- Delta-v allocation
- Special methods (__repr__, __eq__, __hash__)
"""

import math
import pytest
from perihelion import (ShipCapability, EngineDefinition, UnknownComponentError,
                        get_engine_definition, get_ship_class, temp_config)
from perihelion.defaults import ENGINE_DEFINITIONS, SHIP_CLASSES
from perihelion.propulsion import G0
from perihelion.ship import CREW_MASS_KG, ShipClass, clamp_burn_fraction


class TestRegistries:
    """Test engine and ship class lookup."""

    def test_engine_lookup(self):
        """Registered engines resolve by id."""
        engine = get_engine_definition('ntr_mk1')
        assert engine.thrust == 4000.0
        assert engine.specific_impulse == 900.0

    def test_ship_class_lookup(self):
        """Registered ship classes resolve by id."""
        ship_class = get_ship_class('wayfarer')
        assert ship_class.mass == 200_000.0
        assert ship_class.default_engine_id == 'ntr_mk1'

    def test_unknown_engine(self):
        """Unknown engine ids raise UnknownComponentError."""
        with pytest.raises(UnknownComponentError, match="Engine definition not found"):
            get_engine_definition('warp_drive')

    def test_unknown_ship_class(self):
        """Unknown class ids raise UnknownComponentError."""
        with pytest.raises(UnknownComponentError, match="Unknown ship class"):
            get_ship_class('battlestar')

    def test_default_engines_registered(self):
        """Every ship class's default engine exists."""
        for ship_class in SHIP_CLASSES:
            get_engine_definition(ship_class.default_engine_id)

    def test_unique_ids(self):
        """Registry ids are unique."""
        assert len({e.id for e in ENGINE_DEFINITIONS}) == len(ENGINE_DEFINITIONS)
        assert len({s.id for s in SHIP_CLASSES}) == len(SHIP_CLASSES)

    @pytest.mark.parametrize("engine_type, isp", [
        ('Chemical Bipropellant', 450.0),
        ('Nuclear Fission', 900.0),
        ('Fusion (D-D)', 50000.0),
        ('Fusion (D-He3)', 100000.0),
        ('Advanced Fusion (Military)', 200000.0),
    ])
    def test_specific_impulse_by_type(self, engine_type, isp):
        """Specific impulse follows the engine family."""
        engine = EngineDefinition('x', 'X', engine_type, thrust=1.0, max_delta_v=1.0)
        assert engine.specific_impulse == isp

    def test_unknown_type_specific_impulse(self):
        """Unknown families assume a 4:1 mass ratio."""
        engine = EngineDefinition('x', 'X', 'Ion', thrust=1.0, max_delta_v=1000.0)
        assert engine.specific_impulse == pytest.approx(1000.0 / (G0 * math.log(4)))

    def test_fuel_cargo_split(self):
        """Tanks take 70% of the shared volume."""
        ship_class = get_ship_class('wayfarer')
        assert ship_class.fuel_tank_capacity == pytest.approx(28_000.0)
        assert ship_class.available_cargo_capacity == pytest.approx(12_000.0)

    def test_mission_endurance(self):
        """Consumables are 30% of cargo volume at 15 kg per crew per day."""
        ship_class = get_ship_class('wayfarer')
        expected_days = 40_000.0 * 0.3 / (6 * 15.0)
        assert ship_class.mission_endurance == pytest.approx(expected_days * 86400.0)

    def test_crewless_class_rejected(self):
        """A class needs at least one berth."""
        with pytest.raises(ValueError, match="crew"):
            ShipClass('drone', 'Drone', mass=1000.0, cargo_capacity=10.0,
                      max_crew=0, default_engine_id='ntr_mk1')


class TestFromRegistry:
    """Test building capabilities from the registries."""

    def test_full_tank_default(self):
        """Without fuel_kg the tank is full."""
        ship = ShipCapability.from_registry('wayfarer')
        assert ship.dry_mass == 200_000.0
        assert ship.fuel_mass == pytest.approx(28_000.0)
        assert ship.specific_impulse == 900.0
        assert ship.max_delta_v == 20_000.0

    def test_payload_adds_to_dry_mass(self):
        """Crew, cargo and provisions count as dry mass."""
        ship = ShipCapability.from_registry('wayfarer', fuel_kg=0.0, crew_count=2,
                                            cargo_kg=1000.0, provisions_kg=500.0)
        assert ship.dry_mass == pytest.approx(200_000.0 + 2 * CREW_MASS_KG + 1500.0)
        assert ship.current_mass == ship.dry_mass

    def test_engine_override(self):
        """A different engine can be fitted."""
        ship = ShipCapability.from_registry('wayfarer', engine_id='fdr_torch')
        assert ship.thrust == 100_000.0

    def test_unknown_ids_propagate(self):
        """Registry misses surface to the caller."""
        with pytest.raises(UnknownComponentError):
            ShipCapability.from_registry('battlestar')
        with pytest.raises(UnknownComponentError):
            ShipCapability.from_registry('wayfarer', engine_id='warp_drive')


class TestValidation:
    """Test ShipCapability parameter validation."""

    def test_current_below_dry(self):
        """Current mass cannot be below dry mass."""
        with pytest.raises(ValueError, match="at least"):
            ShipCapability(1000.0, 900.0, 100.0, 450.0, 1000.0)

    def test_zero_dry_mass(self):
        """Dry mass must be positive."""
        with pytest.raises(ValueError, match="Dry mass"):
            ShipCapability(0.0, 10.0, 100.0, 450.0, 1000.0)

    def test_non_finite(self):
        """NaN values are rejected."""
        with pytest.raises(ValueError, match="finite"):
            ShipCapability(1000.0, 2000.0, float('nan'), 450.0, 1000.0)

    def test_negative_thrust(self):
        """Thrust cannot be negative."""
        with pytest.raises(ValueError, match="Thrust"):
            ShipCapability(1000.0, 2000.0, -1.0, 450.0, 1000.0)


class TestDerived:
    """Test derived quantities."""

    def test_acceleration_uses_current_mass(self):
        """a = F / m_current."""
        ship = ShipCapability(1000.0, 2000.0, 500.0, 450.0, 5000.0)
        assert ship.acceleration == pytest.approx(0.25)

    def test_available_delta_v(self):
        """Available delta-v is the rocket equation on the current load."""
        ship = ShipCapability(1000.0, 2000.0, 500.0, 450.0, 5000.0)
        assert ship.available_delta_v == pytest.approx(450.0 * G0 * math.log(2))

    def test_with_fuel(self):
        """with_fuel keeps the hull and changes the load."""
        ship = ShipCapability(1000.0, 2000.0, 500.0, 450.0, 5000.0, name='Test')
        lighter = ship.with_fuel(250.0)
        assert lighter.current_mass == 1250.0
        assert lighter.name == 'Test'


class TestAllocation:
    """Test per-leg delta-v allocation."""

    def test_half_of_available(self):
        """Each leg gets half the available delta-v by default."""
        ship = ShipCapability(1000.0, 2000.0, 500.0, 450.0, 1e6)
        assert ship.allocated_delta_v() == pytest.approx(0.5 * ship.available_delta_v)

    def test_capped_by_engine_rating(self):
        """Allocation never exceeds half the engine's rated ceiling."""
        ship = ShipCapability(1000.0, 2000.0, 500.0, 450.0, 100.0)
        assert ship.allocated_delta_v() == pytest.approx(50.0)

    def test_burn_fraction_scales(self):
        """Burn fraction scales the allocation linearly."""
        ship = ShipCapability(1000.0, 2000.0, 500.0, 450.0, 1e6)
        assert ship.allocated_delta_v(0.5) == pytest.approx(0.5 * ship.allocated_delta_v())

    def test_burn_fraction_clamped(self):
        """Burn fractions are clamped to [0.1, 1]."""
        assert clamp_burn_fraction(0.01) == 0.1
        assert clamp_burn_fraction(3.0) == 1.0
        ship = ShipCapability(1000.0, 2000.0, 500.0, 450.0, 1e6)
        assert ship.allocated_delta_v(0.0) == pytest.approx(0.1 * ship.allocated_delta_v())

    def test_policy_from_config(self):
        """The one-way fraction comes from configuration."""
        ship = ShipCapability(1000.0, 2000.0, 500.0, 450.0, 1e6)
        with temp_config(ONE_WAY_DELTA_V_FRACTION=1.0):
            assert ship.allocated_delta_v() == pytest.approx(ship.available_delta_v)

    def test_no_fuel_no_budget(self):
        """An empty tank has nothing to allocate."""
        ship = ShipCapability(1000.0, 1000.0, 500.0, 450.0, 1e6)
        assert ship.allocated_delta_v() == 0.0


class TestSpecialMethods:
    """Test __repr__, __eq__ and __hash__."""

    def test_repr(self):
        """repr includes the name and masses."""
        ship = ShipCapability.from_registry('wayfarer')
        text = repr(ship)
        assert 'Wayfarer' in text
        assert 'dry=200000 kg' in text

    def test_equality(self):
        """Capabilities with equal values compare equal and hash alike."""
        a = ShipCapability.from_registry('corsair')
        b = ShipCapability.from_registry('corsair')
        assert a == b
        assert hash(a) == hash(b)

    def test_inequality(self):
        """Different loads compare unequal."""
        a = ShipCapability.from_registry('corsair')
        assert a != a.with_fuel(0.0)
