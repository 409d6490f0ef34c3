"""
PokerNow log parser.
Rebuilds hands from the chronological entries of a PokerNow CSV export.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Callable, List, NamedTuple, Optional, Pattern

from .schemas import Hand, Player, Action, Winner, LogEntry, SkippedHandInfo, STREET_ORDER
from .filters import PlayerCountFilter, check_roster
from .result import ParseOutcome
from .utils import (
    convert_card, parse_cards, extract_display_name,
    normalize_player_seats, coerce_hand_id, parse_int_field,
    ensure_hero_perspective
)
from ..upload.ingest import read_log_entries

logger = logging.getLogger(__name__)

RE_HAND_START = re.compile(
    r'^-- starting hand #(\d+)\s+(?:\(id: ([a-z0-9]+)\)\s+)?'
    r'\(No Limit Texas Hold\'em\)\s+(?:\(dealer: "(.+?)"\)|\(dead button\)) --$'
)
RE_HAND_END = re.compile(r'^-- ending hand #(\d+) --$')
RE_PLAYER_STACKS = re.compile(r'^Player stacks: (.+)$')
RE_STACK_ITEM = re.compile(r'#(\d+) "(.+?)" \(([^)]*)\)')


@dataclass
class ParseContext:
    """Mutable state of one pass over the log."""
    entries: List[LogEntry]
    player_filter: PlayerCountFilter = PlayerCountFilter.ALL
    index: int = 0
    hand: Optional[Hand] = None
    hand_start: int = 0
    street: str = "preflop"
    hands: List[Hand] = field(default_factory=list)
    skipped: List[SkippedHandInfo] = field(default_factory=list)

    @property
    def entry(self) -> LogEntry:
        return self.entries[self.index]

    def add_action(self, player: str, action_type: str, amount: float = 0,
                   street: Optional[str] = None, is_all_in: bool = False) -> None:
        self.hand.actions.append(Action(
            player=player,
            action_type=action_type,
            amount=amount,
            street=street or self.street,
            is_all_in=is_all_in,
        ))

    def parse_int(self, value: str, field_name: str) -> int:
        return parse_int_field(value, field_name, self.hand.hand_number if self.hand else None)

    def raw_lines(self, start: int, stop: int) -> List[str]:
        return [e.entry for e in self.entries[start:stop]]

    def abandon(self, reason: str, detail: str, stop: int, player_count: Optional[int] = None) -> None:
        """Drop the open hand and record why."""
        hand = self.hand
        logger.warning(f"Skipping hand #{hand.hand_number} ({reason}): {detail}")
        self.skipped.append(SkippedHandInfo(
            hand_id=hand.hand_id,
            hand_number=hand.hand_number,
            reason=reason,
            detail=detail,
            player_count=player_count,
            raw_input=self.raw_lines(self.hand_start, stop) or None,
        ))
        self.hand = None

    def find_hand_end(self, hand_number: str) -> int:
        """Index just past the end marker of ``hand_number``, or the end of input."""
        for j in range(self.index + 1, len(self.entries)):
            m = RE_HAND_END.match(self.entries[j].entry)
            if m and m.group(1) == hand_number:
                return j + 1
        return len(self.entries)

    def advance_street(self, street: str) -> bool:
        if STREET_ORDER.index(street) <= STREET_ORDER.index(self.street):
            logger.warning(
                f"Ignoring {street} marker in hand #{self.hand.hand_number}: already on {self.street}"
            )
            return False
        self.street = street
        return True


Handler = Callable[[ParseContext, "re.Match"], None]


class Recognizer(NamedTuple):
    name: str
    pattern: Pattern
    handler: Handler
    needs_hand: bool = True


# Boundary markers

def _on_hand_start(ctx: ParseContext, m: "re.Match") -> None:
    hand_number = m.group(1)

    if ctx.hand is not None:
        ctx.abandon(
            "incomplete_hand",
            f"hand #{ctx.hand.hand_number} has no ending marker before hand #{hand_number} starts",
            stop=ctx.index,
            player_count=len(ctx.hand.players) or None,
        )

    dealer = extract_display_name(m.group(3)) if m.group(3) else ""
    ctx.hand = Hand(
        hand_number=hand_number,
        hand_id=coerce_hand_id(m.group(2) or hand_number),
        dealer=dealer,
        start_time=ctx.entry.at,
    )
    ctx.hand_start = ctx.index
    ctx.street = "preflop"


def _on_hand_end(ctx: ParseContext, m: "re.Match") -> None:
    if ctx.hand is None:
        return
    ctx.hands.append(ctx.hand)
    logger.debug(f"Sealed hand #{ctx.hand.hand_number} with {len(ctx.hand.actions)} actions")
    ctx.hand = None


# Hand setup

def _on_player_stacks(ctx: ParseContext, m: "re.Match") -> None:
    players = []
    for seat, name, stack in RE_STACK_ITEM.findall(m.group(1)):
        players.append(Player(
            seat_number=int(seat),
            name=name,
            display_name=extract_display_name(name),
            stack=ctx.parse_int(stack, "stack"),
        ))

    rejection = check_roster(len(players), ctx.player_filter)
    if rejection:
        reason, detail = rejection
        stop = ctx.find_hand_end(ctx.hand.hand_number)
        ctx.abandon(reason, detail, stop=stop, player_count=len(players))
        return

    ctx.hand.players = normalize_player_seats(players)


def _on_hero_cards(ctx: ParseContext, m: "re.Match") -> None:
    ctx.hand.hero_cards = parse_cards(m.group(1))


def _forced_bet(action_type: str, attribute: str) -> Handler:
    def handler(ctx: ParseContext, m: "re.Match") -> None:
        amount = ctx.parse_int(m.group(2), attribute)
        setattr(ctx.hand, attribute, amount)
        ctx.add_action(extract_display_name(m.group(1)), action_type, amount,
                       is_all_in=bool(m.group(3)))
    return handler


# Board

def _on_flop(ctx: ParseContext, m: "re.Match") -> None:
    if not ctx.advance_street("flop"):
        return
    cards = parse_cards(m.group(1))
    if len(cards) >= 3:
        ctx.hand.board.flop = cards[:3]


def _on_turn(ctx: ParseContext, m: "re.Match") -> None:
    if not ctx.hand.board.flop:
        logger.warning(f"Ignoring turn without flop in hand #{ctx.hand.hand_number}")
        return
    if ctx.advance_street("turn"):
        ctx.hand.board.turn = convert_card(m.group(1))


def _on_river(ctx: ParseContext, m: "re.Match") -> None:
    if not ctx.hand.board.turn:
        logger.warning(f"Ignoring river without turn in hand #{ctx.hand.hand_number}")
        return
    if ctx.advance_street("river"):
        ctx.hand.board.river = convert_card(m.group(1))


# Voluntary actions

def _no_amount(action_type: str) -> Handler:
    def handler(ctx: ParseContext, m: "re.Match") -> None:
        ctx.add_action(extract_display_name(m.group(1)), action_type)
    return handler


def _with_amount(action_type: str, is_all_in: bool = False) -> Handler:
    def handler(ctx: ParseContext, m: "re.Match") -> None:
        amount = ctx.parse_int(m.group(2), f"{action_type.lower()} amount")
        ctx.add_action(extract_display_name(m.group(1)), action_type, amount, is_all_in=is_all_in)
    return handler


# Showdown and pot

def _find_winner(hand: Hand, player: str) -> Optional[Winner]:
    for winner in hand.winners:
        if winner.player == player:
            return winner
    return None


def _on_show(ctx: ParseContext, m: "re.Match") -> None:
    player = extract_display_name(m.group(1))
    cards = parse_cards(m.group(2))
    ctx.add_action(player, "SHOW", street="showdown")

    winner = _find_winner(ctx.hand, player)
    if winner is None:
        ctx.hand.winners.append(Winner(player=player, hand_cards=cards))
    else:
        winner.hand_cards = cards


def _on_collect(ctx: ParseContext, m: "re.Match") -> None:
    player = extract_display_name(m.group(1))
    amount = ctx.parse_int(m.group(2), "collected amount")
    ctx.add_action(player, "COLLECT", amount, street="showdown")

    winner = _find_winner(ctx.hand, player)
    if winner is None:
        ctx.hand.winners.append(Winner(player=player, amount=amount))
    else:
        # Side pots are collected one line at a time
        winner.amount += amount


def _on_uncalled(ctx: ParseContext, m: "re.Match") -> None:
    amount = ctx.parse_int(m.group(1), "uncalled amount")
    ctx.add_action(extract_display_name(m.group(2)), "UNCALLED", amount)


# Dispatch order matters: first match wins, all-in variants before plain ones
RECOGNIZERS: List[Recognizer] = [
    Recognizer("hand_start", RE_HAND_START, _on_hand_start, needs_hand=False),
    Recognizer("hand_end", RE_HAND_END, _on_hand_end, needs_hand=False),
    Recognizer("player_stacks", RE_PLAYER_STACKS, _on_player_stacks),
    Recognizer("hero_cards", re.compile(r'^Your hand is (.+)$'), _on_hero_cards),
    Recognizer("ante", re.compile(r'^"(.+?)" posts an ante of (\S+)( and go all in)?$'),
               _forced_bet("POST_ANTE", "ante")),
    Recognizer("small_blind", re.compile(r'^"(.+?)" posts a small blind of (\S+)( and go all in)?$'),
               _forced_bet("POST_SB", "small_blind")),
    Recognizer("big_blind", re.compile(r'^"(.+?)" posts a big blind of (\S+)( and go all in)?$'),
               _forced_bet("POST_BB", "big_blind")),
    Recognizer("flop", re.compile(r'^Flop:\s+\[([^\]]+)\]$'), _on_flop),
    Recognizer("turn", re.compile(r'^Turn: [^\[]+\[([^\]]+)\]$'), _on_turn),
    Recognizer("river", re.compile(r'^River: [^\[]+\[([^\]]+)\]$'), _on_river),
    Recognizer("fold", re.compile(r'^"(.+?)" folds$'), _no_amount("FOLD")),
    Recognizer("check", re.compile(r'^"(.+?)" checks$'), _no_amount("CHECK")),
    Recognizer("call_all_in", re.compile(r'^"(.+?)" calls (\S+) and go all in$'), _with_amount("CALL", True)),
    Recognizer("call", re.compile(r'^"(.+?)" calls (\S+)$'), _with_amount("CALL")),
    Recognizer("bet_all_in", re.compile(r'^"(.+?)" bets (\S+) and go all in$'), _with_amount("BET", True)),
    Recognizer("bet", re.compile(r'^"(.+?)" bets (\S+)$'), _with_amount("BET")),
    Recognizer("raise_all_in", re.compile(r'^"(.+?)" raises to (\S+) and go all in$'), _with_amount("RAISE", True)),
    Recognizer("raise", re.compile(r'^"(.+?)" raises to (\S+)$'), _with_amount("RAISE")),
    Recognizer("show", re.compile(r'^"(.+?)" shows a (.+)\.$'), _on_show),
    Recognizer("collect", re.compile(r'^"(.+?)" collected (\S+) from pot'), _on_collect),
    Recognizer("uncalled", re.compile(r'^Uncalled bet of (\S+) returned to "(.+?)"$'), _on_uncalled),
]


class PokerNowParser:
    """Parser for PokerNow full-log CSV exports."""

    def __init__(self, recognizers: Optional[List[Recognizer]] = None):
        self.recognizers = recognizers or RECOGNIZERS

    def parse(self, text: str, player_filter: PlayerCountFilter = PlayerCountFilter.ALL) -> ParseOutcome:
        """
        Parse CSV log text into hands.

        Args:
            text: CSV export text
            player_filter: Accepted table sizes

        Returns:
            ParseOutcome with hands and skip diagnostics
        """
        return self.parse_entries(read_log_entries(text), player_filter)

    def parse_entries(
        self,
        entries: List[LogEntry],
        player_filter: PlayerCountFilter = PlayerCountFilter.ALL
    ) -> ParseOutcome:
        """
        Run the hand state machine over chronological log entries.

        Args:
            entries: Entries oldest first
            player_filter: Accepted table sizes

        Returns:
            ParseOutcome with hands in log order and skip diagnostics

        Raises:
            LogParseError: if a recognized marker holds a malformed number
            SpectatorLogError: if hands were found but none has hero cards
        """
        ctx = ParseContext(entries=entries, player_filter=player_filter)

        for index in range(len(entries)):
            ctx.index = index
            self._dispatch(ctx)

        if ctx.hand is not None:
            ctx.abandon(
                "incomplete_hand",
                f"hand #{ctx.hand.hand_number} has no ending marker before the end of the log",
                stop=len(entries),
                player_count=len(ctx.hand.players) or None,
            )

        logger.info(f"Reconstructed {len(ctx.hands)} hands, skipped {len(ctx.skipped)}")
        ensure_hero_perspective(ctx.hands)
        return ParseOutcome(hands=ctx.hands, skipped=ctx.skipped)

    def _dispatch(self, ctx: ParseContext) -> None:
        text = ctx.entry.entry
        for recognizer in self.recognizers:
            if recognizer.needs_hand and ctx.hand is None:
                # Noise between hands
                return
            m = recognizer.pattern.match(text)
            if m:
                recognizer.handler(ctx, m)
                return

        if ctx.hand is not None:
            logger.debug(f"Unrecognized entry in hand #{ctx.hand.hand_number}: {text}")
