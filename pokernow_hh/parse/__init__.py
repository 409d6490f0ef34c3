"""
PokerNow hand reconstruction module.
Rebuilds structured hands from CSV logs and JSON hand histories.
"""

from .schemas import Hand, Player, Action, Board, Winner, LogEntry, SkippedHandInfo, ActionType, Street
from .filters import PlayerCountFilter
from .interfaces import HandReader
from .result import ConversionResult, ParseOutcome
from .site_pokernow import PokerNowParser
from .site_ohh import OHHReader
from .runner import ConversionRunner, convert, convert_file

__all__ = [
    'Hand',
    'Player',
    'Action',
    'Board',
    'Winner',
    'LogEntry',
    'SkippedHandInfo',
    'ActionType',
    'Street',
    'PlayerCountFilter',
    'HandReader',
    'ConversionResult',
    'ParseOutcome',
    'PokerNowParser',
    'OHHReader',
    'ConversionRunner',
    'convert',
    'convert_file',
]
