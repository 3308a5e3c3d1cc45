"""Error and warning types raised or recorded during a conversion."""
import enum
from collections import namedtuple


class Severity(enum.IntEnum):
    WARNING = 2
    CRITICAL = 3


ConversionIssue = namedtuple('ConversionIssue', ['message', 'severity'])


class ConversionError(Exception):
    """A fatal problem: the conversion stops and nothing is returned."""

    def __init__(self, message, severity=Severity.CRITICAL):
        super().__init__(message)
        self.message = message
        self.severity = severity

    def __str__(self):
        return f"{self.severity.name}: {self.message}"
