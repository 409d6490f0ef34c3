"""
Player-count rules applied to every reconstructed roster.
"""

import enum
from typing import Optional, Tuple

# Hands with more seats than this are always dropped
MAX_PLAYERS = 10


class PlayerCountFilter(enum.IntFlag):
    """
    Bitset of accepted table sizes.

    ALL (zero) accepts any size up to MAX_PLAYERS. The other flags can be
    combined with ``|``: HU accepts 2 players, SPIN_AND_GO 3, MTT 4 to 9.
    """
    ALL = 0
    HU = 1
    SPIN_AND_GO = 2
    MTT = 4

    def allows(self, player_count: int) -> bool:
        """Check whether a table of ``player_count`` players passes this filter."""
        if self == PlayerCountFilter.ALL:
            return True

        if self & PlayerCountFilter.HU and player_count == 2:
            return True
        if self & PlayerCountFilter.SPIN_AND_GO and player_count == 3:
            return True
        if self & PlayerCountFilter.MTT and 4 <= player_count <= 9:
            return True

        return False

    @classmethod
    def from_names(cls, names) -> "PlayerCountFilter":
        """Build a filter from names such as ``["hu", "mtt"]``."""
        result = cls.ALL
        for name in names:
            key = str(name).strip().upper().replace("-", "_")
            if key not in cls.__members__:
                raise ValueError(f"Unknown player count filter: {name}")
            result |= cls[key]
        return result


def check_roster(player_count: int, player_filter: PlayerCountFilter) -> Optional[Tuple[str, str]]:
    """
    Decide whether a roster of ``player_count`` players may be kept.

    Returns:
        None when the hand is accepted, otherwise a (reason, detail) pair
    """
    if player_count > MAX_PLAYERS:
        return (
            "too_many_players",
            f"{player_count} players exceeds the maximum of {MAX_PLAYERS}",
        )

    if not player_filter.allows(player_count):
        return (
            "filtered_out",
            f"{player_count} players does not match player count filter {int(player_filter)}",
        )

    return None
