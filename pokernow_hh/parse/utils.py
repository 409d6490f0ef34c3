"""
Utility functions for PokerNow hand reconstruction.
Provides card, player name, seat and hand identifier normalization.
"""

import hashlib
import logging
from typing import List, Optional

from .schemas import Hand, Player
from ..errors import LogParseError, SpectatorLogError

logger = logging.getLogger(__name__)

# Unicode suit glyphs used by PokerNow
SUIT_MAP = {
    '♥': 'h', '♦': 'd', '♣': 'c', '♠': 's',
}

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def convert_card(card: str) -> str:
    """
    Convert a single PokerNow card into two-character notation.

    "A♥" -> "Ah", "10♦" -> "Td". Already normalized tokens pass through.
    """
    card = card.strip()

    for unicode_suit, letter in SUIT_MAP.items():
        card = card.replace(unicode_suit, letter)

    return card.replace('10', 'T')


def parse_cards(card_string: str) -> List[str]:
    """
    Parse a comma separated card list.

    "A♥, 4♦" -> ["Ah", "4d"]
    """
    return [convert_card(part) for part in card_string.split(',')]


def extract_display_name(full_name: str) -> str:
    """
    Extract the display name from a PokerNow identity string.

    Everything before the last "@" is kept, spaces are removed, CSV doubled
    quotes are collapsed and one layer of surrounding quotes is stripped:
    - "whywaita @ DtjzvbAuKs" -> "whywaita"
    - "spa @ ces @ ZQfm6ZDMPO" -> "spa@ces"
    - "@atsymbols@@@ @ 3mid0aO0hZ" -> "@atsymbols@@@"
    """
    last_at = full_name.rfind('@')
    if last_at == -1:
        return full_name

    name = full_name[:last_at]
    name = name.replace(' ', '')
    name = name.replace('""', '')
    return name.strip('"')


def normalize_player_seats(players: List[Player]) -> List[Player]:
    """
    Renumber seats 1..N in original seat order.

    Analysis tools treat the highest seat specially and do not accept gaps,
    so "#3, #7, #10" becomes "1, 2, 3". The input list is left untouched.
    """
    ordered = sorted(players, key=lambda p: p.seat_number)
    return [
        player.model_copy(update={'seat_number': index})
        for index, player in enumerate(ordered, start=1)
    ]


def _is_int64(value: str) -> bool:
    try:
        number = int(value, 10)
    except ValueError:
        return False
    # int() tolerates underscores and surrounding whitespace
    if value != value.strip() or '_' in value:
        return False
    return INT64_MIN <= number <= INT64_MAX


def coerce_hand_id(hand_id: str) -> str:
    """
    Return a numeric hand identifier.

    Numeric identifiers are kept. Anything else is hashed with sha256 and
    the first 8 bytes are read as a big-endian unsigned integer, so the same
    identifier always maps to the same number.
    """
    if _is_int64(hand_id):
        return hand_id

    digest = hashlib.sha256(hand_id.encode('utf-8')).digest()
    return str(int.from_bytes(digest[:8], 'big'))


def parse_int_field(value: str, field: str, hand_number: Optional[str] = None) -> int:
    """
    Parse an integer captured from a log marker.

    Args:
        value: Captured text
        field: Field name for the error message
        hand_number: Hand the marker belongs to

    Returns:
        Parsed integer

    Raises:
        LogParseError: if the value is not a base-10 integer
    """
    if not _is_int64(value):
        logger.error(f"Invalid {field} '{value}' in hand #{hand_number}")
        raise LogParseError(field, value, hand_number)
    return int(value)


def ensure_hero_perspective(hands: List[Hand]) -> None:
    """
    Reject a result that has hands but no hero cards in any of them.

    Raises:
        SpectatorLogError: if the log was captured by a spectator
    """
    if hands and not any(hand.hero_cards for hand in hands):
        logger.warning(f"No hero cards in any of {len(hands)} hands")
        raise SpectatorLogError()
