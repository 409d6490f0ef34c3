"""
Exception types raised during a conversion.
Business-rule skips are not errors; they are reported as SkippedHandInfo.
"""

from typing import Optional


class ConversionError(Exception):
    """Base class for every failure surfaced by a conversion call"""
    pass


class InputFormatError(ConversionError):
    """Raised when the input is structurally invalid (header, row, JSON shape, enum)"""
    pass


class LogParseError(InputFormatError):
    """
    Raised when a recognized log marker carries a field that cannot be parsed.

    A corrupt numeric field aborts the whole run, unlike an oversized hand
    which is skipped.
    """

    def __init__(self, field: str, value: str, hand_number: Optional[str] = None):
        self.field = field
        self.value = value
        self.hand_number = hand_number
        where = f"hand #{hand_number}" if hand_number else "log"
        super().__init__(f"{where}: invalid {field} {value!r}")


class SpectatorLogError(ConversionError):
    """Raised when hands were reconstructed but none of them has hero cards"""

    def __init__(self, message: str = "spectator log detected: no hero cards found in any hand"):
        super().__init__(message)
