"""
PokerNow to PokerStars hand history converter.
"""

from .errors import ConversionError, InputFormatError, LogParseError, SpectatorLogError
from .parse import convert, convert_file, ConversionResult, PlayerCountFilter
from .config import ConvertOptions, load_options

__version__ = "0.1.0"

__all__ = [
    'convert',
    'convert_file',
    'ConversionResult',
    'ConvertOptions',
    'PlayerCountFilter',
    'load_options',
    'ConversionError',
    'InputFormatError',
    'LogParseError',
    'SpectatorLogError',
]
