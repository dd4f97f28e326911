'''Kepler's equation solver for elliptical orbits.
Converts mean anomaly to eccentric and true anomaly with a bounded
Newton-Raphson iteration, for scalars or numpy arrays of angles.'''

import numpy as np
from .config import config

TWO_PI = 2.0 * np.pi


def _as_output(value):
    """Return plain floats for scalar input, arrays otherwise."""
    if np.ndim(value) == 0:
        return float(value)
    return value


def kepler_residual(E, e, M):
    """Residual of Kepler's equation, E - e*sin(E) - M."""
    return _as_output(E - e * np.sin(E) - M)


def eccentric_anomaly(M, e, max_iterations=None, tolerance=None):
    """
    Solve Kepler's equation M = E - e*sin(E) for the eccentric anomaly.

    Parameters
    ----------
    M : float or np.ndarray
        Mean anomaly [rad]
    e : float
        Eccentricity, 0 <= e < 1
    max_iterations : int, optional
        Iteration cap (default: config.KEPLER_MAX_ITERATIONS)
    tolerance : float, optional
        Update magnitude that ends the iteration early
        (default: config.KEPLER_TOLERANCE)

    Returns
    -------
    float or np.ndarray
        Eccentric anomaly [rad], same shape as M

    Notes
    -----
    Circular orbits (e == 0) return M unchanged without iterating. Otherwise
    Newton-Raphson is seeded at E0 = M and runs at most ``max_iterations``
    times, so the cost per call is bounded regardless of convergence. For
    array input the largest update decides when to stop.
    """
    if e == 0:
        return M
    if max_iterations is None:
        max_iterations = config.KEPLER_MAX_ITERATIONS
    if tolerance is None:
        tolerance = config.KEPLER_TOLERANCE

    M = np.asarray(M, dtype=float)
    E = M.copy()
    for _ in range(max_iterations):
        delta = (M - E + e * np.sin(E)) / (1.0 - e * np.cos(E))
        E = E + delta
        if np.max(np.abs(delta)) < tolerance:
            break
    return _as_output(E)


def true_anomaly(E, e):
    """
    Convert eccentric anomaly to true anomaly.

    Uses the half-angle form
    theta = 2*atan2(sqrt(1+e)*sin(E/2), sqrt(1-e)*cos(E/2)),
    which stays well conditioned across the whole orbit. Returns E
    itself for circular orbits.
    """
    if e == 0:
        return E
    theta = 2.0 * np.arctan2(np.sqrt(1.0 + e) * np.sin(E / 2.0),
                             np.sqrt(1.0 - e) * np.cos(E / 2.0))
    return _as_output(theta)


def true_anomaly_from_mean(M, e):
    """True anomaly [rad] from mean anomaly [rad] (exactly M when e == 0)."""
    if e == 0:
        return M
    return true_anomaly(eccentric_anomaly(M, e), e)
