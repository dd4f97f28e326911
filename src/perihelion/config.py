"""
Global Configuration for Perihelion Package
===========================================

This module provides package-wide configuration settings that users can modify
to control the simulation tick quantum, flight-planning policy, solver bounds
and default plotting options.

Examples
--------
View current configuration:

>>> import perihelion
>>> print(perihelion.config)

Modify settings:

>>> perihelion.config.SECONDS_PER_TICK = 60  # Finer simulation ticks
>>> perihelion.config.ONE_WAY_DELTA_V_FRACTION = 0.4  # Keep more in reserve

Reset to defaults:

>>> perihelion.config.reset()

Temporarily modify settings:

>>> with perihelion.temp_config(INTERCEPT_MAX_ITERATIONS=3):
...     # Cheaper intercept solves for this block only
...     result = perihelion.solve_intercept(...)

Notes
-----
These settings affect package-wide behavior. Every planner, estimator and
advancer reads the same instance, so changing a policy value here changes it
for all call sites at once.
"""

from dataclasses import dataclass
from contextlib import contextmanager


@dataclass
class PerihelionConfig:
    """
    Global configuration for Perihelion package.

    Attributes
    ----------
    SECONDS_PER_TICK : float
        Simulated seconds advanced by one tick of the surrounding simulation.
        Also the fallback duration for degenerate flights.
        Default: 180.0
    SECONDS_PER_DAY : float
        Simulated seconds per day. Default: 86400.0
    DAYS_PER_YEAR : float
        Days per simulated year. Default: 365.0
    ONE_WAY_DELTA_V_FRACTION : float
        Fraction of the ship's delta-v allocated to a single leg. The
        remainder is reserved for the return leg and maneuvering margin.
        Default: 0.5
    MIN_BURN_FRACTION : float
        Lower clamp for the burn fraction selected per flight.
        Default: 0.1
    KEPLER_MAX_ITERATIONS : int
        Hard cap on Newton-Raphson iterations for Kepler's equation.
        Default: 6
    KEPLER_TOLERANCE : float
        Update magnitude below which the Kepler iteration stops early.
        Default: 1e-10
    INTERCEPT_MAX_ITERATIONS : int
        Hard cap on intercept refinement rounds. Default: 10
    INTERCEPT_RTOL : float
        Relative distance change accepted as intercept convergence.
        Default: 1e-3
    LAUNCH_WINDOW_MIN_SAMPLES : int
        Minimum number of separation samples over the look-ahead horizon.
        Default: 100
    LAUNCH_WINDOW_MAX_SAMPLES : int
        Maximum number of separation samples. Default: 1000
    LAUNCH_WINDOW_MAX_YEARS : float
        Cap on the launch-window look-ahead horizon. Default: 10.0
    LAUNCH_WINDOW_MIN_DROP : float
        Fractional drop below the starting distance required before a local
        minimum is reported. Default: 0.05
    REFERENCE_BODY_ID : str
        Body that cached ``distance_from_reference`` values are measured from.
        Default: 'earth'
    STRICT_VALIDATION : bool
        If True, world validation failures raise exceptions.
        If False, validation failures issue warnings.
        Default: True
    DEFAULT_ORBIT_POINTS : int
        Number of points used to draw an orbit ring. Default: 360
    DEFAULT_BODY_COLOR : str
        Marker color for bodies in plots. Default: 'lightblue'
    DEFAULT_ORBIT_COLOR : str
        Line color for orbit rings in plots. Default: 'gray'
    DEFAULT_STAR_COLOR : str
        Marker color for the primary star. Default: 'gold'
    """

    # Simulation clock
    SECONDS_PER_TICK: float = 180.0
    SECONDS_PER_DAY: float = 86400.0
    DAYS_PER_YEAR: float = 365.0

    # Flight planning policy
    ONE_WAY_DELTA_V_FRACTION: float = 0.5
    MIN_BURN_FRACTION: float = 0.1

    # Solver bounds
    KEPLER_MAX_ITERATIONS: int = 6
    KEPLER_TOLERANCE: float = 1e-10
    INTERCEPT_MAX_ITERATIONS: int = 10
    INTERCEPT_RTOL: float = 1e-3

    # Launch window sampling
    LAUNCH_WINDOW_MIN_SAMPLES: int = 100
    LAUNCH_WINDOW_MAX_SAMPLES: int = 1000
    LAUNCH_WINDOW_MAX_YEARS: float = 10.0
    LAUNCH_WINDOW_MIN_DROP: float = 0.05

    # World defaults
    REFERENCE_BODY_ID: str = 'earth'

    # Validation behavior
    STRICT_VALIDATION: bool = True

    # Plotting defaults
    DEFAULT_ORBIT_POINTS: int = 360
    DEFAULT_BODY_COLOR: str = 'lightblue'
    DEFAULT_ORBIT_COLOR: str = 'gray'
    DEFAULT_STAR_COLOR: str = 'gold'

    @property
    def SECONDS_PER_YEAR(self) -> float:
        """Simulated seconds per year, derived from the day settings."""
        return self.SECONDS_PER_DAY * self.DAYS_PER_YEAR

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import perihelion
        >>> perihelion.config.SECONDS_PER_TICK = 60  # Modify
        >>> perihelion.config.reset()  # Back to defaults
        >>> perihelion.config.SECONDS_PER_TICK
        180.0
        """
        defaults = PerihelionConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["PerihelionConfig:"]
        lines.append("  Simulation Clock:")
        lines.append(f"    SECONDS_PER_TICK = {self.SECONDS_PER_TICK}")
        lines.append(f"    SECONDS_PER_DAY = {self.SECONDS_PER_DAY}")
        lines.append(f"    DAYS_PER_YEAR = {self.DAYS_PER_YEAR}")
        lines.append("  Flight Policy:")
        lines.append(f"    ONE_WAY_DELTA_V_FRACTION = {self.ONE_WAY_DELTA_V_FRACTION}")
        lines.append(f"    MIN_BURN_FRACTION = {self.MIN_BURN_FRACTION}")
        lines.append("  Solver Bounds:")
        lines.append(f"    KEPLER_MAX_ITERATIONS = {self.KEPLER_MAX_ITERATIONS}")
        lines.append(f"    KEPLER_TOLERANCE = {self.KEPLER_TOLERANCE}")
        lines.append(f"    INTERCEPT_MAX_ITERATIONS = {self.INTERCEPT_MAX_ITERATIONS}")
        lines.append(f"    INTERCEPT_RTOL = {self.INTERCEPT_RTOL}")
        lines.append("  Launch Windows:")
        lines.append(f"    LAUNCH_WINDOW_MIN_SAMPLES = {self.LAUNCH_WINDOW_MIN_SAMPLES}")
        lines.append(f"    LAUNCH_WINDOW_MAX_SAMPLES = {self.LAUNCH_WINDOW_MAX_SAMPLES}")
        lines.append(f"    LAUNCH_WINDOW_MAX_YEARS = {self.LAUNCH_WINDOW_MAX_YEARS}")
        lines.append(f"    LAUNCH_WINDOW_MIN_DROP = {self.LAUNCH_WINDOW_MIN_DROP}")
        lines.append("  Behavior:")
        lines.append(f"    REFERENCE_BODY_ID = '{self.REFERENCE_BODY_ID}'")
        lines.append(f"    STRICT_VALIDATION = {self.STRICT_VALIDATION}")
        lines.append("  Plotting:")
        lines.append(f"    DEFAULT_ORBIT_POINTS = {self.DEFAULT_ORBIT_POINTS}")
        lines.append(f"    DEFAULT_BODY_COLOR = '{self.DEFAULT_BODY_COLOR}'")
        lines.append(f"    DEFAULT_ORBIT_COLOR = '{self.DEFAULT_ORBIT_COLOR}'")
        lines.append(f"    DEFAULT_STAR_COLOR = '{self.DEFAULT_STAR_COLOR}'")
        return "\n".join(lines)


# Global configuration instance
config = PerihelionConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import perihelion
    >>> with perihelion.temp_config(SECONDS_PER_TICK=60.0):
    ...     perihelion.advance_flight(flight)  # advances 60 s
    >>> perihelion.config.SECONDS_PER_TICK
    180.0

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(
                f"PerihelionConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
