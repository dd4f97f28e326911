'''Celestial body definitions and per-body orbital geometry.
A body either follows a Keplerian orbit about the star or another body,
or sits at a fixed point in the orbital plane.'''

import math
import numpy as np
from dataclasses import dataclass
from typing import Optional, Union
from .kepler import TWO_PI, true_anomaly_from_mean
from .vectors import Vec2

"""
Immutable dataclasses describing how a body moves.
Orbiting and Fixed form a tagged variant: every consumer checks which of the
two it holds instead of testing for missing orbital parameters.
"""
@dataclass(frozen=True)
class OrbitalParams:
    """
    Immutable orbital parameters attached to a body.

    Attributes
    ----------
    orbital_radius_km : float
        Semi-major axis [km]
    orbital_period_sec : float
        Orbital period [s]. Zero or negative marks a static body that stays
        at its initial angle.
    initial_angle_rad : float, optional
        Mean anomaly at epoch t = 0 [rad]. Default: 0
    eccentricity : float, optional
        Orbital eccentricity, 0 <= e < 1. Default: 0 (circular)
    parent_id : str, optional
        Id of the body this one orbits. None means it orbits the primary
        star directly.
    """
    orbital_radius_km: float
    orbital_period_sec: float
    initial_angle_rad: float = 0.0
    eccentricity: float = 0.0
    parent_id: Optional[str] = None

    def __post_init__(self):
        for name in ('orbital_radius_km', 'orbital_period_sec',
                     'initial_angle_rad', 'eccentricity'):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite, got {getattr(self, name)}")
        if self.orbital_radius_km < 0:
            raise ValueError(f"Orbital radius must be non-negative, "
                             f"got {self.orbital_radius_km}")
        if not 0 <= self.eccentricity < 1:
            raise ValueError(f"Eccentricity must be in [0, 1), got {self.eccentricity}")

    @property
    def is_static(self) -> bool:
        """True if the body never moves along its orbit."""
        return self.orbital_period_sec <= 0

    def to_dict(self) -> dict:
        return {
            'orbital_radius_km': self.orbital_radius_km,
            'orbital_period_sec': self.orbital_period_sec,
            'initial_angle_rad': self.initial_angle_rad,
            'eccentricity': self.eccentricity,
            'parent_id': self.parent_id,
        }


@dataclass(frozen=True)
class Orbiting:
    """Body following a Keplerian orbit."""
    params: OrbitalParams


@dataclass(frozen=True)
class Fixed:
    """Body pinned at a fixed point in the orbital plane [km]."""
    x: float
    y: float

    @property
    def position(self) -> Vec2:
        return Vec2(self.x, self.y)


Motion = Union[Orbiting, Fixed]


class Body:
    """
    A named location in the world.

    Parameters
    ----------
    id : str
        Unique identifier used for parent references
    motion : Orbiting or Fixed
        How the body moves. An OrbitalParams instance is accepted and
        wrapped in Orbiting.
    name : str, optional
        Display name (defaults to id)

    Notes
    -----
    ``x``, ``y`` and ``distance_from_reference`` are a per-tick cache written
    by World.update_positions. They are never ground truth for orbiting
    bodies. Fixed bodies start with the cache at their fixed point.
    """

    def __init__(self, id: str, motion: Union[Motion, OrbitalParams],
                 name: Optional[str] = None):
        if isinstance(motion, OrbitalParams):
            motion = Orbiting(motion)
        if not isinstance(motion, (Orbiting, Fixed)):
            raise TypeError(f"motion must be Orbiting, Fixed or OrbitalParams, "
                            f"got {type(motion).__name__}")
        self._id = id
        self._name = name if name is not None else id
        self._motion = motion

        if isinstance(motion, Fixed):
            self.x = float(motion.x)
            self.y = float(motion.y)
        else:
            self.x = 0.0
            self.y = 0.0
        self.distance_from_reference = 0.0

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def motion(self) -> Motion:
        return self._motion

    @property
    def orbital(self) -> Optional[OrbitalParams]:
        """Orbital parameters, or None for a fixed body."""
        if isinstance(self._motion, Orbiting):
            return self._motion.params
        return None

    @property
    def is_fixed(self) -> bool:
        return isinstance(self._motion, Fixed)

    @property
    def cached_position(self) -> Vec2:
        """Position written by the last World.update_positions call."""
        return Vec2(self.x, self.y)

    def __repr__(self) -> str:
        kind = 'fixed' if self.is_fixed else 'orbiting'
        return f"Body('{self.id}', {kind})"


# ========== PER-BODY GEOMETRY ==========
def mean_anomaly(orbital: OrbitalParams, t):
    """Mean anomaly [rad] in [0, 2*pi) at time t [s]."""
    M = orbital.initial_angle_rad + TWO_PI * t / orbital.orbital_period_sec
    return M % TWO_PI


def angle_at(orbital: OrbitalParams, t):
    """
    Orbital angle (true anomaly) [rad] at time t [s].

    Static bodies (period <= 0) stay at their initial angle. Circular orbits
    return the mean anomaly exactly.
    """
    if orbital.is_static:
        if np.ndim(t) == 0:
            return orbital.initial_angle_rad
        return np.full(np.shape(t), orbital.initial_angle_rad)
    return true_anomaly_from_mean(mean_anomaly(orbital, t), orbital.eccentricity)


def radius_at(a: float, e: float, theta):
    """Orbital radius [km] from the polar conic equation (a when e == 0)."""
    if e == 0:
        if np.ndim(theta) == 0:
            return a
        return np.full(np.shape(theta), a)
    return a * (1.0 - e * e) / (1.0 + e * np.cos(theta))


def local_offset(orbital: OrbitalParams, t):
    """
    Offset from the parent (or star) at time t, as (dx, dy) [km].

    Returns floats for scalar t and arrays for array t.
    """
    theta = angle_at(orbital, t)
    r = radius_at(orbital.orbital_radius_km, orbital.eccentricity, theta)
    if np.ndim(theta) == 0:
        return r * math.cos(theta), r * math.sin(theta)
    return r * np.cos(theta), r * np.sin(theta)
