'''Orbital position engine.
World holds an arena-indexed table of bodies, resolves hierarchical
("orbits-an-orbiter") positions with an iterative parent walk, and
batch-updates cached positions once per simulation tick.'''

import logging
import numpy as np
import pandas as pd
import plotly.graph_objects as go
from typing import Dict, Iterable, List, Optional, Union
from .bodies import Body, Fixed, local_offset, radius_at
from .config import config
from .utils import validation_error
from .vectors import ORIGIN, Vec2, euclidean_distance

logger = logging.getLogger(__name__)

BodyRef = Union[Body, str]


class World:
    """
    Collection of bodies whose positions evolve with simulated time.

    Parameters
    ----------
    bodies : iterable of Body
        Bodies in the world. Ids must be unique.
    reference_id : str, optional
        Body that ``distance_from_reference`` is measured from
        (default: config.REFERENCE_BODY_ID)

    Notes
    -----
    The parent graph is validated once, at construction:

    - A parent id that matches no body is logged as a warning and the child
      is treated as orbiting the star. This never fails the load.
    - A parent cycle is reported through ``validation_error``. With
      STRICT_VALIDATION disabled the cycle is broken by detaching the body
      whose parent closes the loop.

    Each body's ancestor chain is then precomputed, so position queries are
    an iterative walk with no recursion and no cycle checks at query time.
    """

    # ========== CONSTRUCTION ==========
    def __init__(self, bodies: Iterable[Body], reference_id: Optional[str] = None):
        self._bodies: List[Body] = list(bodies)
        self._index: Dict[str, int] = {}
        for i, body in enumerate(self._bodies):
            if not isinstance(body, Body):
                raise TypeError(f"World entries must be Body, got {type(body).__name__}")
            if body.id in self._index:
                raise ValueError(f"Duplicate body id: '{body.id}'")
            self._index[body.id] = i

        self._reference_id = (reference_id if reference_id is not None
                              else config.REFERENCE_BODY_ID)
        self._parents = self._resolve_parents()
        self._chains = [self._build_chain(i) for i in range(len(self._bodies))]
        logger.debug("Loaded world with %d bodies (reference '%s')",
                     len(self._bodies), self._reference_id)

    def _resolve_parents(self) -> List[Optional[int]]:
        """Map each body to its parent's index, rejecting or breaking cycles."""
        parents: List[Optional[int]] = []
        for body in self._bodies:
            orbital = body.orbital
            if orbital is None or orbital.parent_id is None:
                parents.append(None)
            elif orbital.parent_id not in self._index:
                logger.warning("Body '%s' references unknown parent '%s'; "
                               "treating it as orbiting the primary",
                               body.id, orbital.parent_id)
                parents.append(None)
            else:
                parents.append(self._index[orbital.parent_id])

        # 0 = unvisited, 1 = on the current walk, 2 = known acyclic
        state = [0] * len(self._bodies)
        for start in range(len(self._bodies)):
            path = []
            i = start
            while i is not None and state[i] == 0:
                state[i] = 1
                path.append(i)
                i = parents[i]
            if i is not None and state[i] == 1:
                loop = path[path.index(i):]
                names = ' -> '.join(self._bodies[j].id for j in loop)
                validation_error(
                    f"Parent cycle detected: {names} -> {self._bodies[i].id}"
                )
                parents[path[-1]] = None
            for j in path:
                state[j] = 2
        return parents

    def _build_chain(self, idx: int) -> List[Body]:
        """Ancestors of a body followed by the body itself, root first."""
        chain = []
        i = idx
        while i is not None:
            chain.append(self._bodies[i])
            i = self._parents[i]
        chain.reverse()
        return chain

    def _chain_for(self, body: Body) -> List[Body]:
        idx = self._index.get(body.id)
        if idx is not None and self._bodies[idx] is body:
            return self._chains[idx]
        # Body not registered in this world: resolve its parent through the table
        orbital = body.orbital
        if orbital is None or orbital.parent_id not in self._index:
            return [body]
        return self._chains[self._index[orbital.parent_id]] + [body]

    # ========== PROPERTY ACCESS ==========
    @property
    def bodies(self) -> List[Body]:
        return list(self._bodies)

    @property
    def reference_id(self) -> str:
        return self._reference_id

    @property
    def reference(self) -> Optional[Body]:
        """The reference body, or None if the world has none."""
        return self.find(self._reference_id)

    def find(self, body_id: str) -> Optional[Body]:
        """Look up a body by id, returning None if absent."""
        idx = self._index.get(body_id)
        return None if idx is None else self._bodies[idx]

    def get(self, body_id: str) -> Body:
        """Look up a body by id, raising KeyError if absent."""
        body = self.find(body_id)
        if body is None:
            raise KeyError(f"No body with id '{body_id}'")
        return body

    def parent_of(self, body: BodyRef) -> Optional[Body]:
        """Resolved parent body (None when orbiting the star or fixed)."""
        chain = self._chain_for(self.resolve(body))
        return chain[-2] if len(chain) > 1 else None

    def resolve(self, body: BodyRef) -> Body:
        """Accept a Body or an id and return the Body."""
        if isinstance(body, Body):
            return body
        return self.get(body)

    def __len__(self):
        return len(self._bodies)

    def __iter__(self):
        return iter(self._bodies)

    def __contains__(self, body_id) -> bool:
        return body_id in self._index

    # ========== POSITIONS ==========
    def _xy_at(self, body: Body, t):
        """Walk the ancestor chain root first, summing local offsets."""
        x, y = 0.0, 0.0
        for link in self._chain_for(body):
            motion = link.motion
            if isinstance(motion, Fixed):
                # A fixed body anchors everything below it
                x, y = motion.x, motion.y
            else:
                dx, dy = local_offset(motion.params, t)
                x = x + dx
                y = y + dy
        return x, y

    def position_of(self, body: BodyRef, t: float) -> Vec2:
        """
        Position of a body at time t [km, star at origin].

        Fixed bodies return their fixed point. Orbiting bodies add their local
        orbital offset to the parent's position at the same t.
        """
        x, y = self._xy_at(self.resolve(body), t)
        return Vec2(float(x), float(y))

    def positions_at(self, body: BodyRef, times) -> np.ndarray:
        """
        Positions of a body at many times.

        Parameters
        ----------
        body : Body or str
        times : array-like
            Times [s]

        Returns
        -------
        np.ndarray
            Array of shape (n_times, 2) with x, y in km
        """
        times = np.asarray(times, dtype=float)
        x, y = self._xy_at(self.resolve(body), times)
        return np.column_stack((np.broadcast_to(x, times.shape),
                                np.broadcast_to(y, times.shape)))

    def distance_between(self, a: BodyRef, b: BodyRef, t: float) -> float:
        """Euclidean distance [km] between two bodies at time t."""
        return euclidean_distance(self.position_of(a, t), self.position_of(b, t))

    def update_positions(self, t: float) -> None:
        """
        Refresh every orbiting body's cached position and reference distance.

        The reference body's position is computed first so that each
        ``distance_from_reference`` is a single subtraction afterwards. Fixed
        bodies keep their cached values.
        """
        reference = self.reference
        reference_pos = ORIGIN
        if reference is not None:
            reference_pos = self.position_of(reference, t)

        for body in self._bodies:
            if body.is_fixed:
                continue
            pos = self.position_of(body, t)
            body.x = pos.x
            body.y = pos.y
            if body.id == self._reference_id:
                body.distance_from_reference = 0.0
            else:
                body.distance_from_reference = euclidean_distance(pos, reference_pos)

    # ========== EXPORT ==========
    def to_dataframe(self, t: float) -> pd.DataFrame:
        """
        Snapshot of all body positions at time t.

        Returns
        -------
        pd.DataFrame
            One row per body with columns id, name, parent_id, fixed,
            x_km, y_km and distance_from_reference_km
        """
        reference = self.reference
        reference_pos = ORIGIN if reference is None else self.position_of(reference, t)
        rows = []
        for body in self._bodies:
            pos = self.position_of(body, t)
            parent = self.parent_of(body)
            rows.append({
                'id': body.id,
                'name': body.name,
                'parent_id': None if parent is None else parent.id,
                'fixed': body.is_fixed,
                'x_km': pos.x,
                'y_km': pos.y,
                'distance_from_reference_km': euclidean_distance(pos, reference_pos),
            })
        return pd.DataFrame(rows)

    def plot(self, t: float = 0.0, show_orbits: bool = True,
             n_points: Optional[int] = None) -> go.Figure:
        """
        Create a 2D plot of the world at time t.

        Parameters:
            t: Simulated time to draw (default: 0)
            show_orbits: Whether to draw each orbit ring (default: True)
            n_points: Points per orbit ring (default: config.DEFAULT_ORBIT_POINTS)

        Returns:
            Plotly Figure object
        """
        if n_points is None:
            n_points = config.DEFAULT_ORBIT_POINTS

        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=[0.0], y=[0.0], mode='markers',
            marker=dict(color=config.DEFAULT_STAR_COLOR, size=14),
            name='Star'
        ))

        if show_orbits:
            theta = np.linspace(0, 2 * np.pi, n_points)
            for body in self._bodies:
                orbital = body.orbital
                if orbital is None:
                    continue
                parent = self.parent_of(body)
                center = ORIGIN if parent is None else self.position_of(parent, t)
                r = radius_at(orbital.orbital_radius_km, orbital.eccentricity, theta)
                fig.add_trace(go.Scatter(
                    x=center.x + r * np.cos(theta),
                    y=center.y + r * np.sin(theta),
                    mode='lines',
                    line=dict(color=config.DEFAULT_ORBIT_COLOR, width=1),
                    hoverinfo='skip',
                    showlegend=False
                ))

        positions = [self.position_of(body, t) for body in self._bodies]
        fig.add_trace(go.Scatter(
            x=[p.x for p in positions],
            y=[p.y for p in positions],
            mode='markers+text',
            marker=dict(color=config.DEFAULT_BODY_COLOR, size=8),
            text=[body.name for body in self._bodies],
            textposition='top center',
            name='Bodies',
            hovertemplate='%{text}<br>x: %{x:.0f} km<br>y: %{y:.0f} km<extra></extra>'
        ))

        fig.update_layout(
            xaxis_title='X [km]',
            yaxis_title='Y [km]',
            yaxis=dict(scaleanchor='x', scaleratio=1),
            title=f'World at t = {t:.0f} s',
            showlegend=True
        )
        return fig

    def __repr__(self):
        return f"World({len(self._bodies)} bodies, reference='{self._reference_id}')"


# ========== MODULE-LEVEL API ==========
def position_of(body: BodyRef, t: float, world: World) -> Vec2:
    """Position of a body at time t within a world."""
    return world.position_of(body, t)


def distance_between(a: BodyRef, b: BodyRef, t: float, world: World) -> float:
    """Distance [km] between two bodies at time t."""
    return world.distance_between(a, b, t)


def update_world_positions(world: World, t: float) -> None:
    """Per-tick batch update of cached body positions."""
    world.update_positions(t)
