"""
Pydantic schemas for JSON hand-history inputs.
Covers the simplified camelCase export and the Open Hand History envelope.
"""

from datetime import datetime
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

Identifier = Union[str, int]


# Simplified export: {"version": ..., "hands": [...]}

class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SimpleBlinds(_CamelModel):
    small_blind: float = Field(0, alias="smallBlind")
    big_blind: float = Field(0, alias="bigBlind")


class SimplePlayer(_CamelModel):
    seat_number: int = Field(alias="seatNumber")
    name: str
    stack: float = 0


class SimpleSeatRef(_CamelModel):
    seat_number: int = Field(0, alias="seatNumber")


class SimpleBoard(_CamelModel):
    flop: List[str] = []
    turn: str = ""
    river: str = ""


class SimpleAction(_CamelModel):
    player: str
    action_type: str = Field(alias="actionType")   # fold, check, call, bet, raise, postSB, ...
    amount: float = 0
    street: str                                    # preflop, flop, turn, river, showdown
    is_all_in: bool = Field(False, alias="isAllIn")


class SimpleWinner(_CamelModel):
    player: str
    amount: float = 0
    hand_cards: List[str] = Field([], alias="handCards")


class SimpleHand(_CamelModel):
    hand_id: Identifier = Field("", alias="handId")
    hand_number: Identifier = Field("", alias="handNumber")
    game_type: str = Field("", alias="gameType")
    table_name: str = Field("", alias="tableName")
    start_time: Optional[datetime] = Field(None, alias="startTime")
    blinds: SimpleBlinds = Field(default_factory=SimpleBlinds)
    ante: float = 0
    players: List[SimplePlayer] = []
    dealer: SimpleSeatRef = Field(default_factory=SimpleSeatRef)
    hero_cards: List[str] = Field([], alias="heroCards")
    board: SimpleBoard = Field(default_factory=SimpleBoard)
    actions: List[SimpleAction] = []
    winners: List[SimpleWinner] = []


class SimpleDocument(BaseModel):
    version: str = ""
    hands: List[SimpleHand] = []


# Open Hand History: {"id": ..., "ohh": {...}}

class OHHPlayer(BaseModel):
    id: int
    seat: int
    name: str
    display: str = ""
    starting_stack: float = 0
    cards: Optional[List[str]] = None


class OHHAction(BaseModel):
    action_number: int = 0
    player_id: int = 0
    action: str
    amount: float = 0
    is_allin: bool = False
    cards: Optional[List[str]] = None


class OHHRound(BaseModel):
    id: int = 0
    street: str
    cards: Optional[List[str]] = None
    actions: List[OHHAction] = []


class OHHPlayerWin(BaseModel):
    player_id: int
    win_amount: float = 0
    contributed_rake: float = 0


class OHHPot(BaseModel):
    number: int = 0
    amount: float = 0
    rake: float = 0
    player_wins: List[OHHPlayerWin] = []


class OHHHand(BaseModel):
    spec_version: str = ""
    site_name: str = ""
    network_name: str = ""
    internal_version: str = ""
    game_number: Identifier = ""
    start_date_utc: Optional[datetime] = None
    table_name: str = ""
    table_handle: str = ""
    game_type: str = ""
    table_size: int = 0
    currency: str = ""
    dealer_seat: int = 0
    small_blind_amount: float = 0
    big_blind_amount: float = 0
    ante_amount: float = 0
    hero_player_id: Optional[int] = None
    flags: List[str] = []
    players: List[OHHPlayer] = []
    rounds: List[OHHRound] = []
    pots: List[OHHPot] = []


class OHHDocument(BaseModel):
    id: Optional[Identifier] = None
    ohh: OHHHand
