'''Rocket equation helpers.
Tsiolkovsky delta-v, its inverse for propellant mass, and propellant
flow rate under constant thrust.'''

import math

# Standard gravity for Isp conversions [m/s^2]
G0 = 9.81


def delta_v(wet_mass: float, dry_mass: float, specific_impulse: float) -> float:
    """
    Tsiolkovsky rocket equation.

    dv = Isp * g0 * ln(m_wet / m_dry)

    Parameters
    ----------
    wet_mass : float
        Initial mass including propellant [kg]
    dry_mass : float
        Final mass without propellant [kg]
    specific_impulse : float
        Specific impulse [s]

    Returns
    -------
    float
        Delta-v [m/s]; 0 when there is no propellant or the dry mass is not
        positive
    """
    if wet_mass <= dry_mass or dry_mass <= 0:
        return 0.0
    return specific_impulse * G0 * math.log(wet_mass / dry_mass)


def fuel_mass_required(dry_mass: float, required_delta_v: float,
                       specific_impulse: float) -> float:
    """
    Propellant mass needed to impart a delta-v [kg].

    Inverse rocket equation: m_fuel = m_dry * (exp(dv / (Isp * g0)) - 1).
    Returns 0 for non-positive delta-v or specific impulse.
    """
    if required_delta_v <= 0 or specific_impulse <= 0:
        return 0.0
    mass_ratio = math.exp(required_delta_v / (specific_impulse * G0))
    return dry_mass * (mass_ratio - 1.0)


def fuel_flow_rate(thrust: float, specific_impulse: float) -> float:
    """Propellant consumption while burning, dm/dt = F / (Isp * g0) [kg/s]."""
    if specific_impulse <= 0:
        return 0.0
    return thrust / (specific_impulse * G0)
