import numpy as np
import json
import math

from .context import ConversionContext
from .utils import JOIN_DIST_MAX


class System:
    def __init__(self, box, context=None):
        self._box = np.array(box, dtype=float)
        self._context = context if context is not None else ConversionContext()
        self._strands = []
        self._N = 0
        self._N_strands = 0
        self.time = 0

    @property
    def N(self):
        return self._N

    @property
    def N_strands(self):
        return self._N_strands

    @property
    def strands(self):
        return self._strands

    @property
    def box(self):
        return self._box

    @property
    def issues(self):
        return list(self._context.issues)

    def add_strand(self, strand):
        self._strands.append(strand)
        self._N += strand.N
        self._N_strands += 1
        return True

    def _prepare(self):
        idx = 0
        for i, strand in enumerate(self._strands):
            idx = strand._prepare(i, idx)

    def nucleotide_table(self):
        """Map nucleotide index -> nucleotide, after indices are prepared."""
        self._prepare()
        return {nuc.index: nuc
                for strand in self._strands for nuc in strand._nucleotides}

    def calc_clusters(self, threshold=JOIN_DIST_MAX):
        """Compute connected clusters based on backbone distance."""
        by_index = self.nucleotide_table()
        breaks = set()
        prev_map = {}
        next_map = {}

        for strand in self._strands:
            for i in range(len(strand._nucleotides) - 1):
                n1 = strand._nucleotides[i]
                n2 = strand._nucleotides[i + 1]
                prev_map[n2.index] = n1
                next_map[n1.index] = n2
                diff = n1.distance(n2)
                if math.sqrt(np.dot(diff, diff)) > threshold:
                    breaks.add(n1.index)
                    breaks.add(n2.index)

        if len(breaks) == 0:
            # No breaks: everything is cluster 1
            for nuc in by_index.values():
                nuc.cluster = 1
            return

        def neighbors(nuc):
            result = []
            if nuc.pair is not None and nuc.pair in by_index:
                result.append(by_index[nuc.pair])
            p = prev_map.get(nuc.index)
            if p is not None:
                result.append(p)
            n = next_map.get(nuc.index)
            if n is not None:
                result.append(n)
            return result

        def merge_clusters(c1, c2):
            target = min(c1, c2)
            for nuc in by_index.values():
                if nuc.cluster == c1 or nuc.cluster == c2:
                    nuc.cluster = target

        break_nucs = [by_index[i] for i in sorted(breaks)]
        for cluster_id, nuc in enumerate(break_nucs, start=1):
            nuc.cluster = cluster_id

        # Flood fill from every break, merging clusters that touch
        for nuc in break_nucs:
            stack = [nuc]
            while stack:
                current = stack.pop()
                for nbr in neighbors(current):
                    if nbr.cluster != current.cluster:
                        if nbr.cluster is None:
                            nbr.cluster = current.cluster
                            stack.append(nbr)
                        elif not (current.index in breaks and
                                  nbr.index in breaks):
                            merge_clusters(current.cluster, nbr.cluster)

    def to_oxview_dict(self):
        """Generate oxView JSON as a Python dict."""
        self._prepare()
        box = np.round(self._box).astype(int).tolist()

        strands_out = []
        for strand in self._strands:
            nucs = strand._nucleotides
            monomers = []
            for i, nuc in enumerate(nucs):
                m = {
                    'id': nuc.index,
                    'type': nuc.get_base(),
                    'class': 'DNA',
                    'p': nuc.cm_pos.tolist(),
                    'a1': nuc._a1.tolist(),
                    'a3': nuc._a3.tolist(),
                }
                n3, n5 = _neighbours(strand, i)
                if n3 >= 0:
                    m['n3'] = n3
                if n5 >= 0:
                    m['n5'] = n5
                if nuc.pair is not None:
                    m['bp'] = nuc.pair
                if nuc.cluster is not None:
                    m['cluster'] = nuc.cluster
                if nuc.color is not None:
                    m['color'] = nuc.color
                monomers.append(m)

            strands_out.append({
                'id': strand.index,
                'end3': nucs[0].index,
                'end5': nucs[-1].index,
                'class': 'NucleicAcidStrand',
                'monomers': monomers,
            })

        return {
            'box': box,
            'systems': [{'id': 0, 'strands': strands_out}]
        }

    def to_oxview_string(self):
        return json.dumps(self.to_oxview_dict())

    def to_oxdna(self):
        """Return the oxDNA (topology, configuration) file contents."""
        self._prepare()
        box = ' '.join(repr(float(x)) for x in self._box)
        conf = [f"t = {self.time}", f"b = {box}", "E = 0 0 0"]
        top = [f"{self.N} {self.N_strands}"]
        for strand in self._strands:
            for i, nuc in enumerate(strand._nucleotides):
                n3, n5 = _neighbours(strand, i)
                top.append(f"{strand.index + 1} {nuc.get_base()} {n3} {n5}")
                conf.append(nuc.to_oxdna_line())
        return '\n'.join(top) + '\n', '\n'.join(conf) + '\n'


def _neighbours(strand, i):
    """(n3, n5) indices of nucleotide i, -1 at the ends of linear strands."""
    nucs = strand._nucleotides
    if strand._circular:
        n3 = nucs[i - 1].index
        n5 = nucs[(i + 1) % len(nucs)].index
    else:
        n3 = -1 if i == 0 else nucs[i - 1].index
        n5 = -1 if i == len(nucs) - 1 else nucs[i + 1].index
    return n3, n5
