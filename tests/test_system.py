"""Tests for oxlattice.system."""
import json

import numpy as np

from oxlattice.context import ConversionContext
from oxlattice.nucleotide import Nucleotide
from oxlattice.strand import Strand
from oxlattice.system import System


def _make_strand(ctx, n=3, x_start=0):
    s = Strand(ctx)
    for i in range(n):
        s.add_nucleotide(
            Nucleotide([x_start + i * 0.5, 0, 0], [1, 0, 0], [0, 0, 1], i % 4))
    return s


class TestSystem:
    def setup_method(self):
        self.ctx = ConversionContext()

    def test_add_strand(self):
        sys = System([100, 100, 100], self.ctx)
        sys.add_strand(_make_strand(self.ctx, 5))
        assert sys.N == 5
        assert sys.N_strands == 1

    def test_multiple_strands(self):
        sys = System([100, 100, 100], self.ctx)
        sys.add_strand(_make_strand(self.ctx, 5))
        sys.add_strand(_make_strand(self.ctx, 3, x_start=10))
        assert sys.N == 8
        assert sys.N_strands == 2

    def test_issues_come_from_context(self):
        sys = System([10, 10, 10], self.ctx)
        self.ctx.warn("something odd")
        assert [i.message for i in sys.issues] == ["something odd"]

    def test_to_oxview_dict_structure(self):
        sys = System([50, 50, 50], self.ctx)
        sys.add_strand(_make_strand(self.ctx, 3))
        result = sys.to_oxview_dict()

        assert 'box' in result
        assert 'systems' in result
        assert len(result['systems']) == 1
        assert 'strands' in result['systems'][0]

    def test_to_oxview_dict_box(self):
        sys = System([123.4, 200, 300], self.ctx)
        sys.add_strand(_make_strand(self.ctx, 1))
        result = sys.to_oxview_dict()
        assert result['box'] == [123, 200, 300]

    def test_to_oxview_dict_monomer_fields(self):
        sys = System([50, 50, 50], self.ctx)
        sys.add_strand(_make_strand(self.ctx, 2))
        result = sys.to_oxview_dict()
        m = result['systems'][0]['strands'][0]['monomers'][0]

        assert m['class'] == 'DNA'
        for key in ('id', 'type', 'p', 'a1', 'a3'):
            assert key in m
        assert len(m['p']) == 3

    def test_to_oxview_dict_connectivity(self):
        sys = System([50, 50, 50], self.ctx)
        sys.add_strand(_make_strand(self.ctx, 3))
        result = sys.to_oxview_dict()
        strand = result['systems'][0]['strands'][0]
        monomers = strand['monomers']

        assert 'n3' not in monomers[0]
        assert monomers[0]['n5'] == monomers[1]['id']
        assert monomers[1]['n3'] == monomers[0]['id']
        assert monomers[1]['n5'] == monomers[2]['id']
        assert 'n5' not in monomers[2]
        assert strand['end3'] == monomers[0]['id']
        assert strand['end5'] == monomers[2]['id']

    def test_to_oxview_dict_circular_connectivity(self):
        sys = System([50, 50, 50], self.ctx)
        s = _make_strand(self.ctx, 3)
        s.make_circular()
        sys.add_strand(s)
        result = sys.to_oxview_dict()
        monomers = result['systems'][0]['strands'][0]['monomers']

        assert monomers[0]['n3'] == monomers[2]['id']
        assert monomers[2]['n5'] == monomers[0]['id']

    def test_to_oxview_dict_pair(self):
        sys = System([50, 50, 50], self.ctx)
        s = Strand(self.ctx)
        n1 = Nucleotide([0, 0, 0], [1, 0, 0], [0, 0, 1], 0)
        n2 = Nucleotide([1, 0, 0], [-1, 0, 0], [0, 0, -1], 3)
        s.add_nucleotide(n1)
        s2 = Strand(self.ctx)
        s2.add_nucleotide(n2)
        n1.pair = n2.index
        n2.pair = n1.index
        sys.add_strand(s)
        sys.add_strand(s2)
        result = sys.to_oxview_dict()
        m0 = result['systems'][0]['strands'][0]['monomers'][0]
        m1 = result['systems'][0]['strands'][1]['monomers'][0]
        assert m0['bp'] == m1['id']
        assert m1['bp'] == m0['id']

    def test_to_oxview_string_valid_json(self):
        sys = System([50, 50, 50], self.ctx)
        sys.add_strand(_make_strand(self.ctx, 3))
        parsed = json.loads(sys.to_oxview_string())
        assert 'box' in parsed

    def test_to_oxdna(self):
        sys = System([50, 50, 50], self.ctx)
        sys.add_strand(_make_strand(self.ctx, 3))
        sys.add_strand(_make_strand(self.ctx, 2, x_start=10))
        top, conf = sys.to_oxdna()

        top_lines = top.splitlines()
        assert top_lines[0] == "5 2"
        assert top_lines[1] == "1 A -1 1"
        assert top_lines[2] == "1 G 0 2"
        assert top_lines[3] == "1 C 1 -1"
        assert top_lines[4] == "2 A -1 4"

        conf_lines = conf.splitlines()
        assert conf_lines[0] == "t = 0"
        assert conf_lines[1] == "b = 50.0 50.0 50.0"
        assert conf_lines[2] == "E = 0 0 0"
        assert len(conf_lines) == 3 + 5
        np.testing.assert_allclose(
            [float(x) for x in conf_lines[3].split()[:3]], [0, 0, 0])

    def test_calc_clusters_single_strand(self):
        sys = System([50, 50, 50], self.ctx)
        sys.add_strand(_make_strand(self.ctx, 3))
        sys.calc_clusters()
        for s in sys.strands:
            for nuc in s.nucleotides:
                assert nuc.cluster == 1

    def test_calc_clusters_split_by_gap(self):
        sys = System([50, 50, 50], self.ctx)
        s = Strand(self.ctx)
        for x in (0, 0.5, 1.0, 10.0, 10.5):
            s.add_nucleotide(Nucleotide([x, 0, 0], [1, 0, 0], [0, 0, 1], 0))
        sys.add_strand(s)
        sys.calc_clusters()
        clusters = [n.cluster for n in s.nucleotides]
        assert clusters[0] == clusters[1] == clusters[2]
        assert clusters[3] == clusters[4]
        assert clusters[0] != clusters[3]
