"""
Reader interface definitions using Python Protocol.
Defines the contract shared by the CSV log parser and the JSON reader.
"""

from typing import Protocol
from .filters import PlayerCountFilter
from .result import ParseOutcome


class HandReader(Protocol):
    """
    Protocol that every input reader implements.
    The runner picks the reader from the detected input format.
    """

    def parse(self, text: str, player_filter: PlayerCountFilter) -> ParseOutcome:
        """
        Reconstruct all hands from an export.

        Args:
            text: Complete export text
            player_filter: Accepted table sizes

        Returns:
            ParseOutcome with hands and skip diagnostics
        """
        ...
