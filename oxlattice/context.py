"""Per-conversion state: identity counters and collected warnings."""
import logging

from .errors import ConversionIssue, Severity

logger = logging.getLogger(__name__)


class ConversionContext:
    """Hands out nucleotide and strand indices for one conversion run.

    A fresh context (or a reset one) must be used for every top-level
    conversion so that indices never leak between runs.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        self._next_nucleotide = 0
        self._next_strand = 0
        self.issues = []

    def next_nucleotide_index(self):
        idx = self._next_nucleotide
        self._next_nucleotide += 1
        return idx

    def next_strand_index(self):
        idx = self._next_strand
        self._next_strand += 1
        return idx

    def warn(self, message):
        logger.warning(message)
        self.issues.append(ConversionIssue(message, Severity.WARNING))

    @property
    def warnings(self):
        return [i for i in self.issues if i.severity == Severity.WARNING]
