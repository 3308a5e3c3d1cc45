"""Apply cadnano skips (deletions) and loops (insertions) to a helix.

Within every effective strand the twist is first re-averaged over the number
of steps the strand will have once its skips and loops are applied, so the
total twist of the strand is unchanged. Steps are then removed or inserted at
the start of the effective strand, which is safe because every step in it
now has the same twist.
"""
import math

from .errors import ConversionError
from .strand_generator import StrandGenerator

DEFAULT_TWIST = 33.75 * math.pi / 180


class Span:
    """One effective strand in both index spaces.

    lo/hi: inclusive design positions (lo <= hi).
    bg/eg: generation-order step range [bg, eg) before the adjustment.
    """

    __slots__ = ('lo', 'hi', 'bg', 'eg', 'skips', 'loops', 'change', 'mean')

    def __init__(self, lo, hi, bg, eg, skips, loops):
        self.lo = lo
        self.hi = hi
        self.bg = bg
        self.eg = eg
        self.skips = skips
        self.loops = loops
        self.change = 0
        self.mean = None


def span_ranges(vhelix, segments, context=None):
    """Spans of a helix in generation order."""
    pairs = segments.spans(vhelix)
    if context is not None and len(segments.begin) != len(segments.end):
        context.warn(
            f"virtual helix {vhelix.num}: {len(segments.begin)} effective "
            f"strand begins but {len(segments.end)} ends")

    spans = []
    for b, e in pairs:
        if vhelix.is_even:
            lo, hi, bg, eg = b, e, b, e
        else:
            lo, hi = e, b
            bg, eg = vhelix.len - b - 1, vhelix.len - e - 1
        if hi < lo:
            if context is not None:
                context.warn(
                    f"virtual helix {vhelix.num}: effective strand ends at "
                    f"{e} before it begins at {b}")
            continue
        spans.append(Span(lo, hi, bg, eg,
                          sum(vhelix.skip[lo:hi + 1]),
                          sum(vhelix.loop[lo:hi + 1])))
    return spans


def adjust_angles(spans, gen_angles, context=None):
    """Re-average and resize a generation-order twist array.

    Fills in ``change`` and ``mean`` of every span and returns
    (angles, lengths, region_begin, region_end), the last three being the
    rise-compensation regions for StrandGenerator.generate_or_sq.
    """
    if gen_angles:
        helix_mean = sum(gen_angles) / len(gen_angles)
    else:
        helix_mean = DEFAULT_TWIST

    working = list(gen_angles)
    lengths, region_begin, region_end = [], [], []
    total = 0
    for span in spans:
        if span.eg > span.bg:
            span.change = span.loops - span.skips
            steps = span.eg - span.bg + span.change
            if steps > 0:
                span.mean = sum(gen_angles[span.bg:span.eg]) / steps
                working[span.bg:span.eg] = [span.mean] * (span.eg - span.bg)
            else:
                if context is not None:
                    context.warn(
                        f"effective strand [{span.lo}, {span.hi}] loses all "
                        f"of its steps to skips")
                span.mean = helix_mean
        else:
            span.change = 0
            span.mean = helix_mean

        lengths.append(span.change)
        region_begin.append(span.bg + total)
        region_end.append(span.eg + total + span.change)
        total += span.change

    resized = []
    cursor = 0
    for span in spans:
        start = max(span.bg, cursor)
        resized.extend(working[cursor:start])
        resized.extend([span.mean] * span.loops)
        cursor = start + span.skips
    resized.extend(working[cursor:])

    return resized, lengths, region_begin, region_end


class SkipLoopAdjuster:
    """Skip/loop corrected geometry of one virtual helix, sliced per lane."""

    def __init__(self, vhelix, segments, gen_angles, pos, direction, perp,
                 rot, context=None):
        self.vhelix = vhelix
        self._context = context
        self.spans = span_ranges(vhelix, segments, context)
        (self.angles, self.lengths,
         self.region_begin, self.region_end) = adjust_angles(
            self.spans, gen_angles, context)
        self._frame = (pos, direction, perp, rot)
        self._covered = [False] * vhelix.len
        for span in self.spans:
            for p in range(span.lo, min(span.hi, vhelix.len - 1) + 1):
                self._covered[p] = True
        self._strands = None

    @property
    def n_bp(self):
        return len(self.angles) + 1

    def strands(self):
        if self._strands is None:
            pos, direction, perp, rot = self._frame
            gen = StrandGenerator(self._context)
            self._strands = gen.generate_or_sq(
                self.n_bp, pos, direction, perp, double=True, rot=rot,
                angle=self.angles, lengths=self.lengths,
                begin=self.region_begin, end=self.region_end)
        return self._strands

    def _delta(self, positions):
        vh = self.vhelix
        return sum(vh.loop[p] - vh.skip[p]
                   for p in positions if self._covered[p])

    def slice_bounds(self, lane, begin, end):
        """[start, stop) of the lane fragment from begin to end.

        begin/end are the design positions of the 5' and 3' ends.
        """
        vh = self.vhelix
        if vh.reads_forward(lane):
            start = begin + self._delta(range(0, begin))
            stop = end + 1 + self._delta(range(0, end + 1))
        else:
            start = vh.len - begin - 1 + self._delta(range(begin + 1, vh.len))
            stop = vh.len - end + self._delta(range(end, vh.len))
        return start, stop

    def fragment(self, lane, begin, end):
        if not (0 <= begin < self.vhelix.len and 0 <= end < self.vhelix.len):
            raise ConversionError(
                f"virtual helix {self.vhelix.num}: fragment {begin}-{end} "
                f"lies outside the helix")
        start, stop = self.slice_bounds(lane, begin, end)
        if not 0 <= start < stop <= self.n_bp:
            raise ConversionError(
                f"virtual helix {self.vhelix.num}: fragment {begin}-{end} "
                f"maps to [{start}, {stop}) outside the {self.n_bp} "
                f"generated bases")
        return self.strands()[lane].get_slice(start, stop)
