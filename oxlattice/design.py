"""cadnano design model: squares, virtual helices and the JSON parser."""
import enum
import json
from collections import namedtuple

from .errors import ConversionError
from .geometry import SQ_LATTICE_SPACING

BOX_FACTOR = 2

SCAFFOLD = 0
STAPLE = 1


class JunctionType(enum.Enum):
    EMPTY = 'empty'
    BEGIN = 'begin'
    END = 'end'
    CONTINUE = 'continue'


class Square(namedtuple('Square', ['V_0', 'b_0', 'V_1', 'b_1'])):
    """A [V_0, b_0, V_1, b_1] entry of a cadnano lane.

    (V_0, b_0) points at the 5' neighbour, (V_1, b_1) at the 3' neighbour;
    -1 means there is none.
    """
    __slots__ = ()

    def __new__(cls, V_0=-1, b_0=-1, V_1=-1, b_1=-1):
        return super().__new__(cls, V_0, b_0, V_1, b_1)

    def type(self, vhelix, pos):
        return junction_type(self, vhelix.num, pos)

    @property
    def has_prev(self):
        return not (self.V_0 == -1 and self.b_0 == -1)

    @property
    def has_next(self):
        return not (self.V_1 == -1 and self.b_1 == -1)


def junction_type(square, num, pos):
    """Classify a square at position ``pos`` of helix ``num``.

    Returns a JunctionType, or None when the pointers do not describe a
    valid junction.
    """
    prev_adjacent = square.V_0 == num and abs(square.b_0 - pos) == 1
    next_adjacent = square.V_1 == num and abs(square.b_1 - pos) == 1

    if not square.has_prev:
        if not square.has_next:
            return JunctionType.EMPTY
        if next_adjacent:
            return JunctionType.BEGIN
        return None
    if prev_adjacent:
        if next_adjacent:
            return JunctionType.CONTINUE
        # plain 3' end or a crossover out
        return JunctionType.END
    if next_adjacent:
        # crossover in
        return JunctionType.BEGIN
    return None


class VirtualHelix:
    """Represents a virtual helix from cadnano."""

    def __init__(self):
        self.stap_loop = []
        self.scaf_loop = []
        self.skip = []
        self.loop = []
        self.stap_colors = []
        self.row = 0
        self.col = 0
        self.num = 0
        self.stap = []
        self.scaf = []
        self.skiploop_bases = 0

    @property
    def len(self):
        return max(len(self.scaf), len(self.stap))

    @property
    def is_even(self):
        return self.num % 2 == 0

    def lane(self, lane):
        return self.scaf if lane == SCAFFOLD else self.stap

    def reads_forward(self, lane):
        """True when the lane runs 5'->3' from low to high positions."""
        return (self.num % 2 + lane) % 2 == 0


class CadnanoDesign:
    """Collection of virtual helices."""

    def __init__(self):
        self.vhelices = []

    def add_vhelix(self, vh):
        self.vhelices.append(vh)

    def bbox(self):
        rows = [vh.row for vh in self.vhelices]
        cols = [vh.col for vh in self.vhelices]
        lengths = [vh.len for vh in self.vhelices]
        dr = SQ_LATTICE_SPACING * (max(rows) - min(rows) + 2)
        dc = SQ_LATTICE_SPACING * (max(cols) - min(cols) + 2)
        dl = 0.34 * (max(lengths) + 2)
        return 2 * max(dr, dc, dl) * BOX_FACTOR

    def detect_lattice(self):
        """Guess the lattice from the first helix length.

        Returns 'sq' for a multiple of 32, 'he' for a multiple of 21 and
        None when neither applies.
        """
        if not self.vhelices:
            return 'sq'
        length = self.vhelices[0].len
        if length % 32 == 0:
            return 'sq'
        if length % 21 == 0:
            return 'he'
        return None


_KEY_MAP = {'stapLoop': 'stap_loop', 'scafLoop': 'scaf_loop'}


def _parse_vhelix(vs):
    vh = VirtualHelix()
    for key, val in vs.items():
        key = _KEY_MAP.get(key, key)
        if key == 'skip':
            vh.skip = [abs(x) for x in val]
        elif key in ('stap', 'scaf'):
            setattr(vh, key, [Square(*sq) for sq in val])
        elif key in ('loop', 'stap_colors', 'stap_loop', 'scaf_loop',
                     'row', 'col', 'num'):
            setattr(vh, key, val)

    n = vh.len
    vh.scaf = vh.scaf + [Square()] * (n - len(vh.scaf))
    vh.stap = vh.stap + [Square()] * (n - len(vh.stap))
    vh.skip = vh.skip + [0] * (n - len(vh.skip))
    vh.loop = vh.loop + [0] * (n - len(vh.loop))

    vh.skiploop_bases = len(vh.skip) + sum(vh.loop) - sum(vh.skip)
    return vh


def parse_cadnano_json(json_str):
    """Parse a cadnano JSON string into a CadnanoDesign."""
    design = CadnanoDesign()
    try:
        data = json.loads(json_str)
        for vs in data['vstrands']:
            design.add_vhelix(_parse_vhelix(vs))
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise ConversionError(f"Not a cadnano design: {e}") from e

    return design
