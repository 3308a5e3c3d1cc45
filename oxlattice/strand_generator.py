import math

import numpy as np

from .context import ConversionContext
from .errors import ConversionError
from .nucleotide import Nucleotide
from .strand import Strand
from .utils import (CM_CENTER_DS, BASE_BASE, normalize,
                    quaternion_from_axis_angle, apply_quaternion,
                    rotate_vector_around_axis)


class StrandGenerator:
    def __init__(self, context=None):
        self._context = context if context is not None else ConversionContext()

    def generate_or_sq(self, n_bp, pos=None, direction=None, perp=None,
                       double=True, rot=0.0, angle=None,
                       lengths=None, begin=None, end=None):
        """Generate a helix with per-base-pair twist angles.

        Args:
            n_bp: number of base pairs
            pos: starting position of the helix axis (np.array)
            direction: helix direction vector
            perp: perpendicular vector (backbone orientation)
            double: if True, generate both strands
            rot: initial rotation of perp about direction
            angle: list of n_bp - 1 twist angles, or a single float
            lengths: length change of each region (loops minus skips)
            begin: first step index of each region
            end: step index past the end of each region

        Inside a region with a length change the rise per step is rescaled
        so that the region keeps the length it had before the change.

        Returns [strand1, strand2], or strand1 when double is False.
        Nucleotide i of strand1 pairs with nucleotide n_bp - 1 - i of
        strand2.
        """
        if pos is None:
            pos = np.array([0, 0, 0], dtype=float)
        if direction is None:
            direction = np.array([0, 0, 1], dtype=float)
        lengths = list(lengths) if lengths is not None else []
        begin = list(begin) if begin is not None else []
        end = list(end) if end is not None else []

        if lengths and len(begin) != len(end):
            if len(end) + 1 == len(begin):
                self._context.warn(
                    f"begin ({len(begin)}) and end ({len(end)}) array "
                    f"lengths mismatched; using n_bp + 1 as the last end")
                end.append(n_bp + 1)
            else:
                raise ConversionError(
                    f"begin ({len(begin)}) and end ({len(end)}) "
                    f"array lengths unrecoverably mismatched")

        if angle is None:
            angle = [33.75 * math.pi / 180] * (n_bp - 1)
        elif isinstance(angle, (int, float)):
            angle = [angle] * (n_bp - 1)
        elif len(angle) != n_bp - 1:
            raise ConversionError(
                f"incorrect angle array length ({len(angle)}), "
                f"should be {n_bp - 1}")

        norm = np.linalg.norm(direction)
        if norm < 1e-10:
            self._context.warn(
                "direction must be a valid vector, defaulting to (0, 0, 1)")
            direction = np.array([0, 0, 1], dtype=float)
        else:
            direction = np.asarray(direction, dtype=float) / norm

        if perp is None:
            perp = np.random.random(3)
            perp -= direction * np.dot(direction, perp)
            perp = normalize(perp)
        else:
            perp = np.array(perp, dtype=float)

        rise = [BASE_BASE] * max(n_bp - 1, 0)
        for k, change in enumerate(lengths):
            span = end[k] - begin[k]
            if not change or span <= 0:
                continue
            for i in range(max(begin[k], 0), min(end[k], len(rise))):
                rise[i] -= BASE_BASE * change / span

        # one (axis point, a1) frame per base pair
        a1 = rotate_vector_around_axis(perp, direction, rot)
        axis = np.array(pos, dtype=float)
        frames = []
        for i in range(n_bp):
            frames.append((axis, a1))
            if i != n_bp - 1:
                q = quaternion_from_axis_angle(direction, angle[i])
                a1 = normalize(apply_quaternion(a1, q))
                axis = axis + direction * rise[i]

        strand1 = Strand(self._context)
        for axis, a1 in frames:
            strand1.add_nucleotide(Nucleotide(
                axis - a1 * CM_CENTER_DS, a1, direction, None))

        if not double:
            return strand1

        # complementary strand: same frames walked backwards, axes flipped
        strand2 = Strand(self._context)
        for i, (axis, a1) in enumerate(reversed(frames)):
            partner = strand1._nucleotides[n_bp - 1 - i]
            nuc = Nucleotide(axis + a1 * CM_CENTER_DS, -a1, -direction,
                             None, pair=partner.index)
            strand2.add_nucleotide(nuc)
            partner.pair = nuc.index

        return [strand1, strand2]
