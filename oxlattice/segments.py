"""Effective strands: the runs of a virtual helix that deform as one unit.

Skips and loops change the number of bases between two junctions. The twist
and rise of everything between two boundaries are redistributed together,
so the boundaries have to sit where either lane has a junction.
"""
from .design import JunctionType

EMPTY = JunctionType.EMPTY
BEGIN = JunctionType.BEGIN
END = JunctionType.END
CONTINUE = JunctionType.CONTINUE

# (scaffold type, staple type) -> boundaries to emit as (kind, offset), the
# offset counted in design-direction steps from the current position.
BOUNDARY_TABLE = {
    (EMPTY, BEGIN): (('end', 0),),
    (EMPTY, END): (('begin', 0),),
    (BEGIN, EMPTY): (('begin', 0),),
    (BEGIN, CONTINUE): (('begin', 0), ('end', -1)),
    (BEGIN, BEGIN): (('begin', 1), ('end', -1)),
    (BEGIN, END): (('begin', 0),),
    (END, EMPTY): (('end', 0),),
    (END, CONTINUE): (('begin', 1), ('end', 0)),
    (END, BEGIN): (('end', 0),),
    (END, END): (('begin', 1), ('end', -1)),
    (CONTINUE, BEGIN): (('begin', 1), ('end', 0)),
    (CONTINUE, END): (('begin', 0), ('end', -1)),
}

_TERMINAL = (BEGIN, END)


class Segments:
    """Begin/end boundary positions of the effective strands of one helix."""

    def __init__(self):
        self.begin = set()
        self.end = set()

    def add_begin(self, val):
        self.begin.add(val)

    def add_end(self, val):
        self.end.add(val)

    def spans(self, vhelix):
        """(begin, end) design positions of every effective strand.

        Spans come out in generation order: low to high positions on even
        helices, high to low on odd ones.
        """
        reverse = not vhelix.is_even
        begins = sorted(self.begin, reverse=reverse)
        ends = sorted(self.end, reverse=reverse)
        return list(zip(begins, ends))


def _types_at(vhelix, pos):
    if 0 <= pos < len(vhelix.scaf):
        return (vhelix.scaf[pos].type(vhelix, pos),
                vhelix.stap[pos].type(vhelix, pos))
    return None, None


def _paired_terminal(types):
    scaf, stap = types
    return scaf == stap and scaf in _TERMINAL


def detect_segments(vhelix, context=None):
    """Build the effective strand boundaries of a virtual helix."""
    segments = Segments()
    direction = 1 if vhelix.is_even else -1

    for i in range(len(vhelix.scaf)):
        # next to a break shared by both lanes: already bounded there
        if (_paired_terminal(_types_at(vhelix, i - direction)) or
                _paired_terminal(_types_at(vhelix, i + direction))):
            continue

        types = _types_at(vhelix, i)
        if None in types:
            if context is not None:
                context.warn(
                    f"unexpected square array in virtual helix "
                    f"{vhelix.num} at position {i}")
            continue

        for kind, offset in BOUNDARY_TABLE.get(types, ()):
            pos = i + offset * direction
            if kind == 'begin':
                segments.add_begin(pos)
            else:
                segments.add_end(pos)

    return segments
