"""Convert cadnano lattice designs into oxDNA/oxView nucleotide models."""
from .cadnano_reader import convert_cadnano
from .context import ConversionContext
from .errors import ConversionError, ConversionIssue, Severity
from .system import System

__all__ = [
    'convert_cadnano',
    'ConversionContext',
    'ConversionError',
    'ConversionIssue',
    'Severity',
    'System',
]
