"""
Convert cadnano JSON designs to oxDNA/oxView systems.

Every virtual helix is built as an ideal double helix, corrected for skips
and loops, and cut into fragments at the strand ends and crossovers of each
lane. Fragments are then joined along their crossovers, the strands are
flipped to oxDNA's 3'->5' order and the design slots are used to pair,
colour and sequence the nucleotides.
"""
import logging

import numpy as np

from .context import ConversionContext
from .design import JunctionType, SCAFFOLD, STAPLE, parse_cadnano_json
from .errors import ConversionError
from .geometry import get_lattice, ideal_helix_frame
from .index_map import IndexRemapper, spread_colors
from .joins import JoinTracker, assemble_strand, resolve_chains
from .segments import detect_segments
from .skiploop import SkipLoopAdjuster
from .system import System
from .utils import BASE_MAP, COMPLEMENT, expand_iupac_sequence, random_bases

logger = logging.getLogger(__name__)


def _choose_lattice(design, grid, context):
    if grid is None:
        grid = design.detect_lattice()
        if grid is None:
            context.warn(
                f"Could not auto-detect lattice type from helix length "
                f"{design.vhelices[0].len} (not a multiple of 32 or 21). "
                f"Defaulting to square lattice.")
            grid = 'sq'
        else:
            logger.info("Auto-detected %s lattice", grid)
    return get_lattice(grid)


class _PendingFragment:
    """A fragment whose opening square has been seen but not its closing one.

    Crossover events wait here until the fragment gets its index.
    """

    def __init__(self, pos):
        self.pos = pos
        self.events = []


class CadnanoConverter:
    """Builds one System from a parsed design."""

    def __init__(self, design, lattice, box_side, context):
        self.design = design
        self.lattice = lattice
        self.box = np.array([box_side, box_side, box_side], dtype=float)
        self._context = context
        self.fragments = []
        self.remapper = IndexRemapper()
        self.joins = {SCAFFOLD: JoinTracker(), STAPLE: JoinTracker()}
        self.direction = np.array([0, 0, 1], dtype=float)
        self.perp = lattice.initial_perp(self.direction)

    def _scan_lane(self, vh, lane, adjuster):
        """Cut the fragments of one lane; returns how many were found."""
        forward = vh.reads_forward(lane)
        opening = JunctionType.BEGIN if forward else JunctionType.END
        closing = JunctionType.END if forward else JunctionType.BEGIN
        tracker = self.joins[lane]
        pending = None
        found = 0

        for pos, square in enumerate(vh.lane(lane)):
            kind = square.type(vh, pos)
            if kind is None:
                self._context.warn(
                    f"unexpected square array in virtual helix {vh.num} at "
                    f"position {pos}")
                continue
            if kind not in (opening, closing):
                continue

            if kind == JunctionType.BEGIN and square.has_prev:
                event = (tracker.crossover_in, square)
            elif kind == JunctionType.END and square.has_next:
                event = (tracker.crossover_out, square)
            else:
                event = None

            if kind == opening:
                if pending is not None:
                    self._context.warn(
                        f"strand opened at {pending.pos} of virtual helix "
                        f"{vh.num} is never closed")
                pending = _PendingFragment(pos)
                if event is not None:
                    pending.events.append((pos, event))
                continue

            if pending is None:
                self._context.warn(
                    f"strand closed at {pos} of virtual helix {vh.num} was "
                    f"never opened")
                continue
            if event is not None:
                pending.events.append((pos, event))

            begin, end = (pending.pos, pos) if forward else (pos, pending.pos)
            self._add_fragment(vh, lane, adjuster, begin, end, pending.events)
            pending = None
            found += 1

        if pending is not None:
            self._context.warn(
                f"strand opened at {pending.pos} of virtual helix {vh.num} "
                f"is never closed")
        return found

    def _add_fragment(self, vh, lane, adjuster, begin, end, events):
        fragment = adjuster.fragment(lane, begin, end)
        index = len(self.fragments)
        self.fragments.append(fragment)
        self.remapper.add_fragment(index, vh, lane, begin, end, fragment.N)
        for pos, (record, square) in events:
            record(index, vh.num, pos, square)

    def process_helix(self, vh):
        _, gen_angles, pos, direction, perp, rot = ideal_helix_frame(
            self.lattice, vh, self.direction, self.perp)
        segments = detect_segments(vh, self._context)
        adjuster = SkipLoopAdjuster(vh, segments, gen_angles, pos, direction,
                                    perp, rot, self._context)

        if self._scan_lane(vh, SCAFFOLD, adjuster) == 0:
            self._context.warn(
                f"No scaffold strand found in virtual helix n. {vh.num}: "
                f"staples-only virtual helices are not supported")
            return
        self._scan_lane(vh, STAPLE, adjuster)

    def assemble(self):
        """Join fragments into strands.

        Returns the system (5'->3' strands) and, per strand, its fragments.
        """
        chains = []
        for lane in (SCAFFOLD, STAPLE):
            chains.extend(resolve_chains(self.joins[lane].chains))
        chained = {f for chain in chains for f in chain}

        system = System(self.box, self._context)
        members = []
        for f, fragment in enumerate(self.fragments):
            if f not in chained:
                system.add_strand(fragment)
                members.append([f])
        for chain in chains:
            strand, frags = assemble_strand(chain, self.fragments,
                                            self._context)
            system.add_strand(strand)
            members.append(frags)
        return system, members

    def stap_colors(self):
        colors = {}
        for vh in self.design.vhelices:
            for pos, color in vh.stap_colors:
                colors[(vh.num, pos)] = color
        return colors

    def convert(self, sequence=None, default_val='N'):
        for vh in self.design.vhelices:
            self.process_helix(vh)

        forward_system, members = self.assemble()

        # oxDNA lists strands 3'->5'
        system = System(self.box, self._context)
        for strand in forward_system.strands:
            system.add_strand(strand.reversed())
        system._prepare()

        if system.N == 0:
            raise ConversionError("The generated configuration is empty")

        self.remapper.place(members, system.strands)
        by_index = system.nucleotide_table()
        self.remapper.pair(by_index, SCAFFOLD, STAPLE)
        scaffold = self.remapper.elect_scaffold(by_index)
        if scaffold is None:
            scaffold = 0
        self.remapper.color(by_index, scaffold, self.stap_colors())
        spread_colors(system.strands)
        system.calc_clusters()

        apply_sequence(system, system.strands[scaffold], by_index, sequence,
                       default_val, self._context)
        return system


def _expand(seq, what):
    try:
        return expand_iupac_sequence(seq, is_dna=True)
    except ValueError as e:
        raise ConversionError(f"Invalid {what}: {e}") from e


def apply_sequence(system, scaffold, by_index, sequence, default_val,
                   context):
    """Sequence the scaffold 3'->5' and complement its partners.

    Unpaired nucleotides of the other strands get ``default_val``.
    """
    if len(default_val) != 1:
        raise ConversionError(
            f"default base must be a single IUPAC code, got {default_val!r}")
    _expand(default_val, 'default base')

    bases = None
    if sequence:
        expanded = _expand(sequence, 'scaffold sequence')
        if len(expanded) < scaffold.N:
            context.warn(
                f"Provided scaffold sequence is {len(expanded)}nt but needs "
                f"to be at least {scaffold.N}; applying a random sequence")
        else:
            logger.info("Applying custom sequence")
            bases = [BASE_MAP[c] for c in expanded]
    if bases is None:
        logger.info("Applying random sequence")
        bases = random_bases(scaffold.N)

    n = scaffold.N
    for i, nuc in enumerate(scaffold.nucleotides):
        nuc._base = bases[n - 1 - i]
        if nuc.pair is not None:
            by_index[nuc.pair]._base = COMPLEMENT[nuc._base]

    for strand in system.strands:
        if strand is scaffold:
            continue
        for nuc in strand.nucleotides:
            if nuc.pair is None:
                nuc._base = BASE_MAP[_expand(default_val, 'default base')]


def convert_cadnano(json_str, grid=None, sequence=None, box_side=None,
                    default_val='N', context=None):
    """Convert a cadnano JSON string to an oxView System.

    Args:
        json_str: cadnano JSON as a string
        grid: 'sq'/'square' or 'he'/'honeycomb', or None to auto-detect
              from the helix length
        sequence: optional scaffold sequence (IUPAC codes allowed)
        box_side: optional box side length (derived from the design if None)
        default_val: base for unpaired staple nucleotides ('N' = random)
        context: ConversionContext to use; it is reset first

    Returns:
        System object that can produce oxView JSON via to_oxview_string()
        and oxDNA files via to_oxdna(). Warnings are listed in
        ``system.issues``.

    Raises:
        ConversionError: the design cannot be converted.
    """
    context = context if context is not None else ConversionContext()
    context.reset()

    design = parse_cadnano_json(json_str)
    if not design.vhelices:
        raise ConversionError("The generated configuration is empty")

    lattice = _choose_lattice(design, grid, context)

    if box_side is None:
        box_side = design.bbox()
        logger.info("Using default box size (%.1f), a factor 2 larger than "
                    "the cadnano system", box_side)

    converter = CadnanoConverter(design, lattice, box_side, context)
    return converter.convert(sequence, default_val)
