"""Tests for the rocket equation helpers."""

import math
import pytest
from perihelion.propulsion import G0, delta_v, fuel_mass_required, fuel_flow_rate


class TestDeltaV:
    """Test the Tsiolkovsky equation."""

    def test_mass_ratio_two(self):
        """Doubling the mass gives Isp * g0 * ln 2."""
        assert delta_v(2000.0, 1000.0, 450.0) == pytest.approx(450.0 * G0 * math.log(2))

    def test_no_propellant(self):
        """No propellant means no delta-v."""
        assert delta_v(1000.0, 1000.0, 450.0) == 0.0

    def test_non_positive_dry_mass(self):
        """Non-positive dry mass is degenerate."""
        assert delta_v(1000.0, 0.0, 450.0) == 0.0


class TestFuelMass:
    """Test the inverse rocket equation."""

    def test_inverse_of_delta_v(self):
        """Fuel for a delta-v reproduces the wet mass."""
        dv = delta_v(3000.0, 1000.0, 900.0)
        assert fuel_mass_required(1000.0, dv, 900.0) == pytest.approx(2000.0)

    @pytest.mark.parametrize("dv, isp", [(0.0, 450.0), (-5.0, 450.0), (100.0, 0.0)])
    def test_degenerate_inputs(self, dv, isp):
        """Zero or negative delta-v, or no Isp, needs no fuel."""
        assert fuel_mass_required(1000.0, dv, isp) == 0.0

    def test_monotonic(self):
        """More delta-v needs more fuel."""
        assert fuel_mass_required(1000.0, 2000.0, 450.0) > \
            fuel_mass_required(1000.0, 1000.0, 450.0)


class TestFlowRate:
    """Test propellant flow rate."""

    def test_flow_rate(self):
        """dm/dt = F / (Isp * g0)."""
        assert fuel_flow_rate(G0 * 1000.0, 1000.0) == pytest.approx(1.0)

    def test_zero_isp(self):
        """Zero Isp returns zero rather than dividing by zero."""
        assert fuel_flow_rate(1000.0, 0.0) == 0.0
