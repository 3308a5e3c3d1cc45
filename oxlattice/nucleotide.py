import random

import numpy as np

from .utils import BASE_MAP, BASE_NAMES, POS_BACK, POS_BASE


class Nucleotide:
    """One oxDNA nucleotide: centre of mass plus the a1/a3 frame.

    ``pair`` is the index of the partner nucleotide in the owning system,
    not a reference to it. ``index`` stays -1 until the nucleotide is added
    to a strand.
    """

    def __init__(self, cm_pos, a1, a3, base=None, v=None, L=None,
                 pair=None, cluster=None, color=None, index=-1):
        self.index = index

        self.cm_pos = np.array(cm_pos, dtype=float)
        self._a1 = np.array(a1, dtype=float)
        norm = np.linalg.norm(self._a1)
        if norm > 1e-10:
            self._a1 /= norm
        self._a3 = np.array(a3, dtype=float)
        norm = np.linalg.norm(self._a3)
        if norm > 1e-10:
            self._a3 /= norm

        if base is None:
            base = random.randint(0, 3)
        if isinstance(base, str):
            base = BASE_MAP.get(base, 0)
        self._base = base

        self._v = np.array(v if v is not None else [0, 0, 0], dtype=float)
        self._L = np.array(L if L is not None else [0, 0, 0], dtype=float)
        self.pair = pair
        self.cluster = cluster
        self.color = color
        self.strand = None

    @property
    def pos_base(self):
        return self.cm_pos + self._a1 * POS_BASE

    @property
    def pos_back(self):
        return self.cm_pos + self._a1 * POS_BACK

    @property
    def a2(self):
        return np.cross(self._a3, self._a1)

    def get_base(self):
        if self._base in BASE_NAMES:
            return BASE_NAMES[self._base]
        return str(self._base)

    def distance(self, other):
        """Backbone-backbone distance vector."""
        return other.pos_back - self.pos_back

    def copy(self):
        """Copy without identity: the copy gets an index when it is added."""
        return Nucleotide(
            self.cm_pos.copy(), self._a1.copy(), self._a3.copy(),
            self._base, self._v.copy(), self._L.copy(),
            None, self.cluster, self.color
        )

    def to_oxdna_line(self):
        return ' '.join(
            ' '.join(repr(float(x)) for x in vec)
            for vec in (self.cm_pos, self._a1, self._a3, self._v, self._L))
