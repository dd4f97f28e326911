'''Launch window analysis.
Samples the separation between two orbiting bodies over a look-ahead
horizon to grade the current alignment and predict the next close
approach.'''

import math
import numpy as np
import pandas as pd
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
from .config import config
from .world import BodyRef, World


class AlignmentQuality(Enum):
    EXCELLENT = 'excellent'
    GOOD = 'good'
    MODERATE = 'moderate'
    POOR = 'poor'


@dataclass(frozen=True)
class LaunchWindow:
    """
    Departure advisory for a pair of bodies.

    Attributes
    ----------
    current_distance_km : float
        Separation at the query time [km]
    min_distance_km : float
        Smallest separation seen over the horizon (including now) [km]
    max_distance_km : float
        Largest separation seen over the horizon (including now) [km]
    alignment : AlignmentQuality
        Where the current separation sits within [min, max]
    next_optimal_time : float
        Simulated time of the next separation minimum [s]
    next_optimal_in_days : float
        Days from the query time to ``next_optimal_time``
    """
    current_distance_km: float
    min_distance_km: float
    max_distance_km: float
    alignment: AlignmentQuality
    next_optimal_time: float
    next_optimal_in_days: float


def classify_alignment(current_distance: float, min_distance: float,
                       max_distance: float) -> AlignmentQuality:
    """
    Grade the current distance by its position within [min, max].

    The lowest 20% of the range is excellent, up to 45% good, up to 70%
    moderate and the rest poor. A zero-width range (bodies that keep a
    constant separation) is always excellent.
    """
    span = max_distance - min_distance
    if span <= 0:
        return AlignmentQuality.EXCELLENT

    normalized = (current_distance - min_distance) / span
    if normalized <= 0.2:
        return AlignmentQuality.EXCELLENT
    if normalized <= 0.45:
        return AlignmentQuality.GOOD
    if normalized <= 0.7:
        return AlignmentQuality.MODERATE
    return AlignmentQuality.POOR


def synodic_period(period_a: float, period_b: float) -> float:
    """
    Time between successive alignments of two orbits [s].

    Falls back to the longer period when the periods are equal or either
    body is static.
    """
    if period_a > 0 and period_b > 0 and period_a != period_b:
        return 1.0 / abs(1.0 / period_a - 1.0 / period_b)
    return max(period_a, period_b, 0.0)


def look_ahead_seconds(period_a: float, period_b: float,
                       look_ahead_days: Optional[float] = None) -> float:
    """
    Sampling horizon [s]: twice the synodic period unless a positive
    look-ahead is given, capped at config.LAUNCH_WINDOW_MAX_YEARS.

    A look-ahead of zero or less selects the default horizon.
    """
    cap = config.LAUNCH_WINDOW_MAX_YEARS * config.SECONDS_PER_YEAR
    if look_ahead_days is not None and look_ahead_days > 0:
        horizon = look_ahead_days * config.SECONDS_PER_DAY
    else:
        horizon = 2.0 * synodic_period(period_a, period_b)
    return min(max(horizon, 0.0), cap)


def sample_count(horizon_sec: float) -> int:
    """About one sample per day, clamped to the configured sample bounds."""
    per_day = math.ceil(horizon_sec / config.SECONDS_PER_DAY)
    return max(config.LAUNCH_WINDOW_MIN_SAMPLES,
               min(config.LAUNCH_WINDOW_MAX_SAMPLES, per_day))


def _sample_separation(origin: BodyRef, destination: BodyRef, t: float,
                       world: World, horizon_sec: float
                       ) -> Tuple[np.ndarray, np.ndarray]:
    """Evenly spaced separation samples after t, excluding t itself."""
    n_samples = sample_count(horizon_sec)
    step = horizon_sec / n_samples
    times = t + step * np.arange(1, n_samples + 1)
    delta = world.positions_at(origin, times) - world.positions_at(destination, times)
    return times, np.hypot(delta[:, 0], delta[:, 1])


def _periods(origin: BodyRef, destination: BodyRef,
             world: World) -> Optional[Tuple[float, float]]:
    orbital_a = world.resolve(origin).orbital
    orbital_b = world.resolve(destination).orbital
    if orbital_a is None or orbital_b is None:
        return None
    return orbital_a.orbital_period_sec, orbital_b.orbital_period_sec


def compute_launch_window(origin: BodyRef, destination: BodyRef, t: float,
                          world: World,
                          look_ahead_days: Optional[float] = None
                          ) -> Optional[LaunchWindow]:
    """
    Compute the launch window for a pair of bodies at time t.

    Parameters
    ----------
    origin, destination : Body or str
        Both must be orbiting bodies
    t : float
        Query time [s]
    world : World
    look_ahead_days : float, optional
        Override for the sampling horizon [days]

    Returns
    -------
    LaunchWindow or None
        None if either body is fixed

    Notes
    -----
    The next optimal time is the first sample after which the separation
    starts growing again, provided that sample sits at least
    config.LAUNCH_WINDOW_MIN_DROP below the current separation. Without such
    a minimum the bodies are taken to be at (or past) their best alignment
    and the next optimal time is t.
    """
    periods = _periods(origin, destination, world)
    if periods is None:
        return None

    current = world.distance_between(origin, destination, t)
    horizon = look_ahead_seconds(*periods, look_ahead_days=look_ahead_days)
    if horizon <= 0:
        return LaunchWindow(current, current, current,
                            AlignmentQuality.EXCELLENT, t, 0.0)

    times, distances = _sample_separation(origin, destination, t, world, horizon)

    min_distance = current
    max_distance = current
    next_min_time = t
    prev = current
    found_minimum = False
    threshold = current * (1.0 - config.LAUNCH_WINDOW_MIN_DROP)
    for i, dist in enumerate(distances.tolist()):
        if dist < min_distance:
            min_distance = dist
        if dist > max_distance:
            max_distance = dist
        if not found_minimum and dist > prev and prev < threshold:
            # prev was the minimum; it sits one sample back
            next_min_time = t if i == 0 else float(times[i - 1])
            found_minimum = True
        prev = dist

    return LaunchWindow(
        current_distance_km=current,
        min_distance_km=min_distance,
        max_distance_km=max_distance,
        alignment=classify_alignment(current, min_distance, max_distance),
        next_optimal_time=next_min_time,
        next_optimal_in_days=max(0.0, (next_min_time - t) / config.SECONDS_PER_DAY),
    )


def separation_dataframe(origin: BodyRef, destination: BodyRef, t: float,
                         world: World,
                         look_ahead_days: Optional[float] = None) -> pd.DataFrame:
    """
    Export the sampled separation curve used by compute_launch_window.

    Returns
    -------
    pd.DataFrame
        Columns time, days_from_now and distance_km, starting at t
    """
    periods = _periods(origin, destination, world)
    if periods is None:
        raise ValueError("Separation sampling requires two orbiting bodies")
    horizon = look_ahead_seconds(*periods, look_ahead_days=look_ahead_days)

    current = world.distance_between(origin, destination, t)
    if horizon > 0:
        times, distances = _sample_separation(origin, destination, t, world, horizon)
    else:
        times, distances = np.empty(0), np.empty(0)
    times = np.concatenate(([t], times))
    distances = np.concatenate(([current], distances))
    return pd.DataFrame({
        'time': times,
        'days_from_now': (times - t) / config.SECONDS_PER_DAY,
        'distance_km': distances,
    })
