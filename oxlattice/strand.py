import math

import numpy as np

from .context import ConversionContext
from .utils import CIRCULAR_DIST_MAX


class Strand:
    def __init__(self, context=None):
        self._context = context if context is not None else ConversionContext()
        self.index = self._context.next_strand_index()
        self._nucleotides = []
        self._circular = False

    @property
    def N(self):
        return len(self._nucleotides)

    @property
    def nucleotides(self):
        return self._nucleotides

    def _prepare(self, strand_idx, nuc_start):
        self.index = strand_idx
        for i, nuc in enumerate(self._nucleotides):
            nuc.index = nuc_start + i
            nuc.strand = strand_idx
        return nuc_start + len(self._nucleotides)

    def add_nucleotide(self, nuc):
        if nuc.index < 0:
            nuc.index = self._context.next_nucleotide_index()
        nuc.strand = self.index
        self._nucleotides.append(nuc)

    def append(self, other):
        """Concatenate two strands into a new strand sharing the nucleotides."""
        s = Strand(self._context)
        for nuc in self._nucleotides:
            s.add_nucleotide(nuc)
        for nuc in other._nucleotides:
            s.add_nucleotide(nuc)
        return s

    def get_slice(self, start=0, end=None):
        if end is None:
            end = self.N
        s = Strand(self._context)
        for i in range(start, end):
            s.add_nucleotide(self._nucleotides[i].copy())
        return s

    def reversed(self):
        """Copy of the strand read from the other end.

        a3 is flipped so that it keeps pointing along the new 3'->5' order.
        """
        s = Strand(self._context)
        for nuc in reversed(self._nucleotides):
            rev = nuc.copy()
            rev._a3 = -rev._a3
            s.add_nucleotide(rev)
        s._circular = self._circular
        return s

    def make_circular(self, check=False):
        if check:
            diff = self._nucleotides[-1].distance(self._nucleotides[0])
            dist = math.sqrt(np.dot(diff, diff))
            if dist > CIRCULAR_DIST_MAX:
                self._context.warn(
                    f"Strand.make_circular(): ends of strand {self.index} "
                    f"seem too far apart ({dist:.3f})")
        self._circular = True

    def is_circular(self):
        return self._circular
