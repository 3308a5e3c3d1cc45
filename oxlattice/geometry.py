"""Lattice constants and the periodic twist tables of both cadnano lattices.

Each table holds one helix period of step twists (degrees). The last step of
a period is not stored: it is the residual that closes the period on a whole
number of turns, so that long helices never drift out of register.
"""
import math

import numpy as np

from .errors import ConversionError
from .utils import BASE_BASE, rotate_vector_around_axis

SQ_LATTICE_SPACING = 2.6
HE_LATTICE_SPACING = 2.55

_SQ_TWIST = (
    [28, 28, 36, 54.375, 37]
    + [27.6666666666666] * 2 + [30.6666666666666]
    + [29.3333333333] * 2 + [34.3333333333, 54.5]
    + [28.91666666666] * 2 + [31.16666666666] * 4
    + [35.5, 52, 35.5, 27.5, 27.5, 35.5]
    + [30] * 3 + [52, 35.5, 30.91666666666, 30.91666666666]
)

_HE_TWIST = (
    [32.571, 36, 42, 42, 720 / 21]
    + [29.143] * 3 + [32, 44, 44, 720 / 21]
    + [28.571] * 3 + [720 / 21, 41.5, 41.5, 720 / 21, 28.476]
)


class Lattice:
    """Geometry of one cadnano lattice type."""

    def __init__(self, name, period, turns, table, spacing, perp_rotation):
        self.name = name
        self.period = period
        self.turns = turns
        self.spacing = spacing
        self.perp_rotation = perp_rotation
        step = [a * math.pi / 180 for a in table]
        step.append(2 * math.pi * turns - sum(step))
        self._period_angles = step

    def twist_angles(self, n_steps):
        """Twist angles (radians) for n_steps consecutive base steps."""
        return [self._period_angles[i % self.period] for i in range(n_steps)]

    def initial_perp(self, direction):
        perp = np.array([1, 0, 0], dtype=float)
        return rotate_vector_around_axis(
            perp, direction, self.perp_rotation * math.pi / 180)

    def helix_origin(self, vhelix):
        z = 0.0 if vhelix.num % 2 == 0 else (vhelix.len - 1) * BASE_BASE
        if self.name == 'sq':
            x = vhelix.col * self.spacing
            y = vhelix.row * self.spacing
        else:
            x = vhelix.col * math.sqrt(3) * self.spacing / 2
            y = 3 * vhelix.row * self.spacing / 2
            if vhelix.num % 2 == 1:
                y += self.spacing / 2
        return np.array([x, y, z], dtype=float)


SQUARE = Lattice('sq', 32, 3, _SQ_TWIST, SQ_LATTICE_SPACING, 15)
HONEYCOMB = Lattice('he', 21, 2, _HE_TWIST, HE_LATTICE_SPACING, 160)

_LATTICES = {
    'sq': SQUARE, 'square': SQUARE,
    'he': HONEYCOMB, 'honeycomb': HONEYCOMB, 'hex': HONEYCOMB,
}


def get_lattice(grid):
    try:
        return _LATTICES[grid.lower()]
    except (KeyError, AttributeError):
        raise ConversionError(
            f"grid must be 'sq' (square) or 'he' (honeycomb), "
            f"got {grid!r}") from None


def ideal_helix_frame(lattice, vhelix, direction, perp):
    """Start frame and generation-order twist array of one virtual helix.

    Odd helices are built top-down: direction and perp are flipped, the
    angles are read backwards and the first base is rotated back by the
    whole helix twist so both parities stay in register.
    Returns (angles, gen_angles, pos, direction, perp, rot) where ``angles``
    is in design order and ``gen_angles`` in generation order.
    """
    angles = lattice.twist_angles(vhelix.len - 1)
    pos = lattice.helix_origin(vhelix)
    if vhelix.num % 2 == 0:
        return angles, angles[:], pos, direction.copy(), perp.copy(), 0.0
    rot = -sum(angles) % (2 * math.pi)
    return angles, angles[::-1], pos, -direction, -perp, rot
