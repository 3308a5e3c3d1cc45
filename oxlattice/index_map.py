"""Map design slots (virtual helix, position) to final nucleotide indices."""
from collections import Counter, defaultdict

SCAFFOLD_COLOR = 3633362


def fragment_slots(vhelix, lane, begin, end):
    """Local nucleotide offsets of every slot a fragment covers.

    ``begin`` and ``end`` are the 5' and 3' design positions. Returns a list
    of (position, offsets) in 5'->3' order; a skipped position has no
    offsets and a looped one has 1 + loop of them.
    """
    forward = vhelix.reads_forward(lane)
    lo, hi = (begin, end) if forward else (end, begin)
    change = sum(vhelix.loop[lo:hi + 1]) - sum(vhelix.skip[lo:hi + 1])
    count = hi - lo + 1 + change

    slots = []
    h = skips = loops = 0
    while h < count:
        if forward:
            o = begin + h + skips - loops
        else:
            o = begin - h - skips + loops
        if not lo <= o <= hi:
            break
        if vhelix.skip[o] == 1:
            slots.append((o, []))
            skips += 1
        else:
            n = 1 + vhelix.loop[o]
            slots.append((o, list(range(h, h + n))))
            h += n
            loops += vhelix.loop[o]
    return slots


class IndexRemapper:
    """Tracks which nucleotides sit on which design slot.

    Fragments are registered while they are cut from their helices; once the
    final (reversed) strands exist, ``place`` turns the local offsets into
    global nucleotide indices.
    """

    def __init__(self):
        self._fragments = {}
        # (vhelix, position) -> {lane: [nucleotide indices]}
        self.slots = defaultdict(dict)
        # nucleotide index -> (vhelix, position)
        self.position = {}

    def add_fragment(self, fragment, vhelix, lane, begin, end, size):
        self._fragments[fragment] = (
            vhelix.num, lane, size, fragment_slots(vhelix, lane, begin, end))

    def place(self, members, strands):
        """Resolve indices; ``members[k]`` are the fragments of strands[k].

        Fragments are listed in their pre-reversal order, so a local offset
        ``l`` of a strand starting at ``S`` lands on ``S + N - 1 - l``.
        """
        self.slots.clear()
        self.position.clear()
        for frags, strand in zip(members, strands):
            start = strand.nucleotides[0].index if strand.N else 0
            last = start + strand.N - 1
            base = 0
            for f in frags:
                num, lane, size, slots = self._fragments[f]
                for pos, offsets in slots:
                    ids = [last - (base + o) for o in offsets if o < size]
                    self.slots[(num, pos)].setdefault(lane, []).extend(ids)
                    for idx in ids:
                        self.position[idx] = (num, pos)
                base += size

    def pair(self, by_index, scaffold_lane=0, staple_lane=1):
        """Pair scaffold-lane and staple-lane occupants of every slot.

        Both lists run the same way, so the k-th scaffold nucleotide faces
        the k-th staple nucleotide counted from the other end.
        """
        for lanes in self.slots.values():
            scaf = lanes.get(scaffold_lane, [])
            stap = lanes.get(staple_lane, [])
            for a, b in zip(scaf, reversed(stap)):
                by_index[a].pair = b
                by_index[b].pair = a

    def elect_scaffold(self, by_index):
        """Index of the strand owning the most slot-indexed nucleotides.

        Ties go to the lowest strand index.
        """
        counts = Counter(by_index[idx].strand for idx in self.position)
        if not counts:
            return None
        return max(sorted(counts), key=counts.get)

    def color(self, by_index, scaffold, stap_colors):
        """Give staple slots their design colour and shared scaffold slots
        the scaffold colour.

        ``stap_colors`` maps (vhelix, position) to a colour.
        """
        for key, lanes in self.slots.items():
            occupants = [by_index[idx] for ids in lanes.values()
                         for idx in ids]
            staples = [n for n in occupants if n.strand != scaffold]
            if not staples:
                continue
            if key in stap_colors:
                for nuc in staples:
                    nuc.color = stap_colors[key]
            for nuc in occupants:
                if nuc.strand == scaffold:
                    nuc.color = SCAFFOLD_COLOR


def spread_colors(strands):
    """Every strand takes the first colour found along it."""
    for strand in strands:
        color = next((n.color for n in strand.nucleotides
                      if n.color is not None), None)
        if color is not None:
            for nuc in strand.nucleotides:
                nuc.color = color
