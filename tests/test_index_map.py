"""Tests for oxlattice.index_map."""
from types import SimpleNamespace

from oxlattice.design import parse_cadnano_json
from oxlattice.index_map import (
    SCAFFOLD_COLOR, IndexRemapper, fragment_slots, spread_colors,
)

from designs import dump, full_helix


def _helix(length=4, skip=(), loop=()):
    vs = full_helix(0, length)
    for pos in skip:
        vs['skip'][pos] = -1
    for pos, val in loop:
        vs['loop'][pos] = val
    return parse_cadnano_json(dump(vs)).vhelices[0]


def _nucs(owners):
    return {i: SimpleNamespace(index=i, strand=s, pair=None, color=None)
            for i, s in enumerate(owners)}


class TestFragmentSlots:
    def test_plain(self):
        slots = fragment_slots(_helix(), 0, 0, 3)
        assert slots == [(0, [0]), (1, [1]), (2, [2]), (3, [3])]

    def test_skip(self):
        slots = fragment_slots(_helix(skip=[1]), 0, 0, 3)
        assert slots == [(0, [0]), (1, []), (2, [1]), (3, [2])]

    def test_loop(self):
        slots = fragment_slots(_helix(loop=[(1, 2)]), 0, 0, 3)
        assert slots == [(0, [0]), (1, [1, 2, 3]), (2, [4]), (3, [5])]

    def test_reverse_lane_loop(self):
        slots = fragment_slots(_helix(loop=[(1, 2)]), 1, 3, 0)
        assert slots == [(3, [0]), (2, [1]), (1, [2, 3, 4]), (0, [5])]

    def test_partial(self):
        slots = fragment_slots(_helix(8), 0, 2, 5)
        assert [pos for pos, _ in slots] == [2, 3, 4, 5]
        assert slots[0][1] == [0]


class FakeStrand:
    def __init__(self, start, n):
        self.nucleotides = [SimpleNamespace(index=start + i)
                            for i in range(n)]
        self.N = n


class TestIndexRemapper:
    def test_place_reverses_and_pairs(self):
        vh = _helix()
        remapper = IndexRemapper()
        remapper.add_fragment(0, vh, 0, 0, 3, 4)
        remapper.add_fragment(1, vh, 1, 3, 0, 4)
        remapper.place([[0], [1]], [FakeStrand(0, 4), FakeStrand(4, 4)])
        assert remapper.slots[(0, 0)] == {0: [3], 1: [4]}
        assert remapper.slots[(0, 3)] == {0: [0], 1: [7]}
        assert remapper.position[5] == (0, 1)

        nucs = _nucs([0] * 4 + [1] * 4)
        remapper.pair(nucs)
        for i in range(8):
            assert nucs[i].pair == 7 - i

    def test_place_joined_fragments(self):
        vh = _helix()
        remapper = IndexRemapper()
        remapper.add_fragment(0, vh, 0, 0, 1, 2)
        remapper.add_fragment(1, vh, 0, 2, 3, 2)
        remapper.place([[0, 1]], [FakeStrand(0, 4)])
        assert [remapper.slots[(0, p)][0] for p in range(4)] == \
            [[3], [2], [1], [0]]

    def test_loop_pairs_antiparallel(self):
        vh = _helix(loop=[(1, 2)])
        remapper = IndexRemapper()
        remapper.add_fragment(0, vh, 0, 0, 3, 6)
        remapper.add_fragment(1, vh, 1, 3, 0, 6)
        remapper.place([[0], [1]], [FakeStrand(0, 6), FakeStrand(6, 6)])
        nucs = _nucs([0] * 6 + [1] * 6)
        remapper.pair(nucs)
        for i in range(12):
            assert nucs[i].pair == 11 - i

    def test_elect_scaffold_majority(self):
        remapper = IndexRemapper()
        remapper.position = {0: (0, 0), 1: (0, 1), 2: (0, 1)}
        nucs = _nucs([1, 0, 0])
        assert remapper.elect_scaffold(nucs) == 0

    def test_elect_scaffold_tie_lowest(self):
        remapper = IndexRemapper()
        remapper.position = {0: (0, 0), 1: (0, 1)}
        nucs = _nucs([2, 1])
        assert remapper.elect_scaffold(nucs) == 1

    def test_elect_scaffold_empty(self):
        assert IndexRemapper().elect_scaffold({}) is None

    def test_color(self):
        remapper = IndexRemapper()
        remapper.slots[(0, 0)] = {0: [0], 1: [1]}
        remapper.slots[(0, 1)] = {0: [2]}
        nucs = _nucs([0, 1, 0])
        remapper.color(nucs, 0, {(0, 0): 555})
        assert nucs[0].color == SCAFFOLD_COLOR
        assert nucs[1].color == 555
        assert nucs[2].color is None


class TestSpreadColors:
    def test_first_color_wins(self):
        nucs = [SimpleNamespace(color=c) for c in (None, 5, 6)]
        strand = SimpleNamespace(nucleotides=nucs)
        spread_colors([strand])
        assert [n.color for n in nucs] == [5, 5, 5]

    def test_uncolored_strand(self):
        nucs = [SimpleNamespace(color=None) for _ in range(3)]
        spread_colors([SimpleNamespace(nucleotides=nucs)])
        assert all(n.color is None for n in nucs)
