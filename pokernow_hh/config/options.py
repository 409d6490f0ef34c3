"""
Options for one conversion call.
"""

from datetime import tzinfo
from typing import Literal, Optional, Union, List

from dateutil import tz
from pydantic import BaseModel, field_validator

from ..parse.filters import PlayerCountFilter

GameType = Literal["tournament", "cash"]


class ConvertOptions(BaseModel):
    """Caller supplied settings; reconstruction only looks at player_count_filter."""
    hero_name: str = ""
    site_name: Optional[str] = None             # Falls back to the hand's site, then PokerStars
    timezone: str = "UTC"
    tournament_name: str = ""
    tournament_id: str = ""                     # Defaults to the first hand's id
    player_count_filter: PlayerCountFilter = PlayerCountFilter.ALL
    game_type: GameType = "tournament"
    rake_percent: float = 0.0                   # Cash games, e.g. 5.0 for 5%
    rake_cap_bb: float = 0.0                    # Cash games, cap in big blinds

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if tz.gettz(value) is None:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("player_count_filter", mode="before")
    @classmethod
    def _coerce_filter(cls, value: Union[int, str, List[str], None]):
        if value is None:
            return PlayerCountFilter.ALL
        if isinstance(value, str):
            return PlayerCountFilter.from_names(value.split(","))
        if isinstance(value, (list, tuple)):
            return PlayerCountFilter.from_names(value)
        return PlayerCountFilter(int(value))

    @field_validator("rake_percent", "rake_cap_bb")
    @classmethod
    def _not_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    def time_zone(self) -> Optional[tzinfo]:
        return tz.gettz(self.timezone)
