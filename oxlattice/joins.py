"""Crossover bookkeeping and the fixed-point resolution of join chains.

A chain is an ordered list of fragment indices (5' to 3') that end up in
the same strand. Chains grow while the lanes are scanned and are merged
afterwards until no chain starts where another one ends.
"""
import logging
import math
from collections import defaultdict

import numpy as np

from .utils import JOIN_DIST_MIN, JOIN_DIST_MAX

logger = logging.getLogger(__name__)


class JoinTracker:
    """Collects the join chains of one lane kind (scaffold or staple)."""

    def __init__(self):
        self.chains = []
        # (vhelix, position) a chain waits for -> chain indices
        self._waiting = defaultdict(list)

    def _attach(self, key, fragment, at_head):
        if key not in self._waiting:
            return False
        for c in self._waiting[key]:
            if at_head:
                self.chains[c].insert(0, fragment)
            else:
                self.chains[c].append(fragment)
        return True

    def _open(self, fragment, partner):
        self.chains.append([fragment])
        self._waiting[partner].append(len(self.chains) - 1)

    def crossover_out(self, fragment, num, pos, square):
        """Fragment leaves helix ``num`` at ``pos`` for (V_1, b_1)."""
        if not self._attach((num, pos), fragment, at_head=True):
            self._open(fragment, (square.V_1, square.b_1))

    def crossover_in(self, fragment, num, pos, square):
        """Fragment enters helix ``num`` at ``pos`` from (V_0, b_0)."""
        if not self._attach((num, pos), fragment, at_head=False):
            self._open(fragment, (square.V_0, square.b_0))


def _find_merge(chains):
    for i, head in enumerate(chains):
        for j, tail in enumerate(chains):
            if i != j and head[0] == tail[-1]:
                return i, j
    return None


def resolve_chains(chains):
    """Merge chains until no chain starts where another one ends.

    Returns new lists; the input is left untouched.
    """
    chains = [list(c) for c in chains if c]
    while True:
        merge = _find_merge(chains)
        if merge is None:
            return chains
        i, j = merge
        joined = chains[j] + chains[i][1:]
        chains = [joined if k == j else c
                  for k, c in enumerate(chains) if k != i]


def is_circular(chain):
    return len(chain) >= 2 and chain[0] == chain[-1]


def chain_members(chain):
    """Fragments of a chain, without the closing duplicate of a loop."""
    if is_circular(chain):
        return list(chain[:-1])
    return list(chain)


def backbone_distance(nuc1, nuc2):
    diff = nuc1.distance(nuc2)
    return math.sqrt(np.dot(diff, diff))


def check_join_distances(members, fragments, context=None):
    """Warn about consecutive fragments whose ends are implausibly far apart."""
    for a, b in zip(members, members[1:]):
        first, second = fragments[a], fragments[b]
        if first.N == 0 or second.N == 0:
            continue
        dist = backbone_distance(first.nucleotides[-1], second.nucleotides[0])
        if not JOIN_DIST_MIN <= dist <= JOIN_DIST_MAX:
            message = (f"backbone distance {dist:.4f} across the join of "
                       f"fragments {a} and {b} is out of range")
            if context is not None:
                context.warn(message)
            else:
                logger.warning(message)


def assemble_strand(chain, fragments, context=None):
    """Join the fragments of a resolved chain into one strand.

    Returns (strand, members) with members the fragment indices in strand
    order.
    """
    members = chain_members(chain)
    check_join_distances(members, fragments, context)
    strand = fragments[members[0]]
    for f in members[1:]:
        strand = strand.append(fragments[f])
    if is_circular(chain):
        strand.make_circular(check=True)
    return strand, members
