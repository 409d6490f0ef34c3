"""
Pydantic schemas for reconstructed poker hands.
Defines log entries, hands, players, actions, winners and skip diagnostics.
"""

from datetime import datetime
from typing import Literal, List, Optional
from pydantic import BaseModel, Field

# Type definitions
ActionType = Literal[
    "POST_SB", "POST_BB", "POST_ANTE",
    "FOLD", "CHECK", "CALL",
    "BET", "RAISE",
    "SHOW", "COLLECT", "UNCALLED"
]

Street = Literal["preflop", "flop", "turn", "river", "showdown"]

# Streets in dealing order; a hand never moves back down this list
STREET_ORDER: List[str] = ["preflop", "flop", "turn", "river", "showdown"]

SkipReason = Literal["incomplete_hand", "too_many_players", "filtered_out", "invalid_record"]


class LogEntry(BaseModel):
    """One row of the site's event log."""
    entry: str
    at: datetime
    order: int


class Player(BaseModel):
    """Represents a player seated in a hand."""
    seat_number: int
    name: str                            # Raw identity, "<name> @ <id>"
    display_name: str
    stack: float = 0


class Action(BaseModel):
    """Represents a single player action in a hand."""
    player: str
    action_type: ActionType
    amount: float = 0                    # Zero for fold, check and show
    street: Street
    is_all_in: bool = False


class Board(BaseModel):
    """Community cards, filled flop first."""
    flop: List[str] = []
    turn: str = ""
    river: str = ""

    def cards(self) -> List[str]:
        cards = list(self.flop)
        if self.turn:
            cards.append(self.turn)
        if self.river:
            cards.append(self.river)
        return cards


class Winner(BaseModel):
    """A player who won (or showed down for) part of the pot."""
    player: str
    amount: float = 0
    hand_cards: List[str] = []


class Hand(BaseModel):
    """Complete reconstructed hand."""
    # Identity
    hand_number: str
    hand_id: str                         # Always numeric
    dealer: str = ""                     # Empty for a dead button
    start_time: Optional[datetime] = None

    # Table
    players: List[Player] = []
    small_blind: float = 0
    big_blind: float = 0
    ante: float = 0

    # Play
    actions: List[Action] = []
    board: Board = Field(default_factory=Board)
    winners: List[Winner] = []
    hero_cards: List[str] = []

    # Metadata carried over from JSON inputs
    table_name: str = ""
    site_name: str = ""
    currency: str = ""


class SkippedHandInfo(BaseModel):
    """Diagnostic record for a hand left out of the output."""
    hand_id: str = ""
    hand_number: str = ""
    reason: SkipReason
    detail: str = ""
    player_count: Optional[int] = None
    raw_input: Optional[List[str]] = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)
