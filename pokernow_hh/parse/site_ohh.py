"""
JSON hand-history reader.
Converts the simplified export and Open Hand History documents (single
object or JSON Lines) into the same Hand model as the CSV log parser.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .schemas import Hand, Player, Action, Board, Winner, SkippedHandInfo, STREET_ORDER
from .ohh_schemas import SimpleDocument, SimpleHand, OHHDocument, OHHHand, OHHPlayer
from .filters import PlayerCountFilter, check_roster
from .result import ParseOutcome
from .utils import convert_card, normalize_player_seats, coerce_hand_id, ensure_hero_perspective
from ..errors import InputFormatError

logger = logging.getLogger(__name__)

# Upper bound on JSON Lines records read from one input
MAX_JSONL_LINES = 100000

# Lower-cased action names from both dialects
ACTION_TYPES = {
    'fold': 'FOLD',
    'check': 'CHECK',
    'call': 'CALL',
    'bet': 'BET',
    'raise': 'RAISE',
    'postsb': 'POST_SB',
    'post sb': 'POST_SB',
    'postbb': 'POST_BB',
    'post bb': 'POST_BB',
    'postante': 'POST_ANTE',
    'post ante': 'POST_ANTE',
    'show': 'SHOW',
    'shows cards': 'SHOW',
    'collect': 'COLLECT',
    'uncalled': 'UNCALLED',
}

# Table bookkeeping recorded by OHH writers; carries no betting information
IGNORED_ACTIONS = {
    'dealt cards', 'mucks cards', 'sits down', 'stands up', 'added chips', 'add to stack',
}


def convert_action_type(value: str) -> Optional[str]:
    """
    Map a JSON action name onto an ActionType.

    Returns:
        The ActionType, or None for bookkeeping actions that are dropped

    Raises:
        InputFormatError: for any other unknown name
    """
    key = value.strip().lower()
    if key in ACTION_TYPES:
        return ACTION_TYPES[key]
    if key in IGNORED_ACTIONS:
        return None
    raise InputFormatError(f"unknown action type: {value!r}")


def convert_street(value: str) -> str:
    """Map a JSON street name onto a Street, case-insensitively."""
    key = value.strip().lower()
    if key not in STREET_ORDER:
        raise InputFormatError(f"unknown street: {value!r}")
    return key


def _build_board(flop: List[str], turn: str, river: str, hand_number: str) -> Board:
    board = Board()
    cards = [convert_card(c) for c in flop]
    if len(cards) >= 3:
        board.flop = cards[:3]
    if turn and board.flop:
        board.turn = convert_card(turn)
    if river and board.turn:
        board.river = convert_card(river)
    if (turn and not board.turn) or (river and not board.river):
        logger.warning(f"Hand #{hand_number}: board cards out of order were dropped")
    return board


def _dealer_name(players: List[Player], dealer_seat: int) -> str:
    for player in players:
        if player.seat_number == dealer_seat:
            return player.display_name
    return ""


class OHHReader:
    """Reader for JSON and JSON Lines hand histories."""

    def parse(self, text: str, player_filter: PlayerCountFilter = PlayerCountFilter.ALL) -> ParseOutcome:
        """
        Parse one JSON document.

        Raises:
            InputFormatError: on invalid JSON, an invalid document or an unknown enum
            SpectatorLogError: if hands were found but none has hero cards
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InputFormatError(f"failed to decode JSON: {e}")

        outcome = self.parse_document(data, player_filter)
        logger.info(f"Read {len(outcome.hands)} hands from JSON, skipped {outcome.skipped_hands}")
        ensure_hero_perspective(outcome.hands)
        return outcome

    def parse_lines(self, text: str, player_filter: PlayerCountFilter = PlayerCountFilter.ALL) -> ParseOutcome:
        """
        Parse JSON Lines, one document per line.

        A line that cannot be decoded or converted is skipped with reason
        ``invalid_record``. Input where not a single line decodes is rejected.

        Raises:
            InputFormatError: if no line is valid JSON
            SpectatorLogError: if hands were found but none has hero cards
        """
        outcome = ParseOutcome()
        decoded = 0
        processed = 0

        for line_no, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue

            if processed >= MAX_JSONL_LINES:
                logger.warning(f"JSON Lines input truncated after {MAX_JSONL_LINES} records")
                break
            processed += 1

            try:
                data = json.loads(line)
                decoded += 1
                line_outcome = self.parse_document(data, player_filter)
            except (json.JSONDecodeError, InputFormatError) as e:
                logger.warning(f"Skipping JSON Lines record {line_no}: {e}")
                outcome.skipped.append(SkippedHandInfo(
                    reason="invalid_record",
                    detail=f"line {line_no}: {e}",
                    raw_input=[line],
                ))
                continue

            outcome.hands.extend(line_outcome.hands)
            outcome.skipped.extend(line_outcome.skipped)

        if processed and not decoded:
            raise InputFormatError("failed to decode JSON Lines: no line holds valid JSON")

        logger.info(f"Read {len(outcome.hands)} hands from {processed} JSON Lines records, "
                    f"skipped {outcome.skipped_hands}")
        ensure_hero_perspective(outcome.hands)
        return outcome

    def parse_document(self, data: Any, player_filter: PlayerCountFilter = PlayerCountFilter.ALL) -> ParseOutcome:
        """
        Convert one decoded JSON object of either dialect.

        In a simplified document a hand with an unknown action or street is
        skipped with reason ``invalid_record`` and the other hands are kept.
        An OHH envelope holds a single hand, so the same error fails it.
        """
        if not isinstance(data, dict):
            raise InputFormatError(f"expected a JSON object, got {type(data).__name__}")

        outcome = ParseOutcome()
        try:
            if 'ohh' in data:
                document = OHHDocument.model_validate(data)
                candidates = [(self._convert_ohh(document), data)]
            else:
                simple = SimpleDocument.model_validate(data)
                candidates = []
                for source in simple.hands:
                    raw = source.model_dump(mode='json', by_alias=True)
                    try:
                        candidates.append((self._convert_simple(source), raw))
                    except InputFormatError as e:
                        hand_number = str(source.hand_number)
                        raw_id = str(source.hand_id) or hand_number or "1"
                        logger.warning(f"Skipping hand #{hand_number or raw_id}: {e}")
                        outcome.skipped.append(SkippedHandInfo(
                            hand_id=coerce_hand_id(raw_id),
                            hand_number=hand_number or raw_id,
                            reason="invalid_record",
                            detail=str(e),
                            raw_input=[json.dumps(raw, ensure_ascii=False)],
                        ))
        except ValidationError as e:
            raise InputFormatError(f"invalid hand history document: {e}")

        for hand, raw in candidates:
            rejection = check_roster(len(hand.players), player_filter)
            if rejection:
                reason, detail = rejection
                logger.warning(f"Skipping hand #{hand.hand_number} ({reason}): {detail}")
                outcome.skipped.append(SkippedHandInfo(
                    hand_id=hand.hand_id,
                    hand_number=hand.hand_number,
                    reason=reason,
                    detail=detail,
                    player_count=len(hand.players),
                    raw_input=[json.dumps(raw, ensure_ascii=False)],
                ))
                continue
            outcome.hands.append(hand)

        return outcome

    def _convert_simple(self, source: SimpleHand) -> Hand:
        hand_number = str(source.hand_number)
        raw_id = str(source.hand_id) or hand_number or "1"

        players = [
            Player(seat_number=p.seat_number, name=p.name, display_name=p.name, stack=p.stack)
            for p in source.players
        ]

        actions = []
        for a in source.actions:
            action_type = convert_action_type(a.action_type)
            if action_type is None:
                continue
            actions.append(Action(
                player=a.player,
                action_type=action_type,
                amount=a.amount,
                street=convert_street(a.street),
                is_all_in=a.is_all_in,
            ))

        winners = [
            Winner(player=w.player, amount=w.amount, hand_cards=[convert_card(c) for c in w.hand_cards])
            for w in source.winners
        ]

        return Hand(
            hand_number=hand_number or raw_id,
            hand_id=coerce_hand_id(raw_id),
            dealer=_dealer_name(players, source.dealer.seat_number),
            start_time=source.start_time,
            players=normalize_player_seats(players),
            small_blind=source.blinds.small_blind,
            big_blind=source.blinds.big_blind,
            ante=source.ante,
            actions=actions,
            board=_build_board(source.board.flop, source.board.turn, source.board.river, hand_number),
            winners=winners,
            hero_cards=[convert_card(c) for c in source.hero_cards],
            table_name=source.table_name,
        )

    def _convert_ohh(self, document: OHHDocument) -> Hand:
        ohh: OHHHand = document.ohh
        raw_id = str(ohh.game_number) or (str(document.id) if document.id is not None else "") or "1"

        by_id: Dict[int, OHHPlayer] = {p.id: p for p in ohh.players}
        players = [
            Player(seat_number=p.seat, name=p.name, display_name=p.name, stack=p.starting_stack)
            for p in ohh.players
        ]

        hero_cards: List[str] = []
        # ids start at 0; a missing hero_player_id means nobody is the hero
        hero = by_id.get(ohh.hero_player_id) if ohh.hero_player_id is not None else None
        if hero and hero.cards:
            hero_cards = [convert_card(c) for c in hero.cards]

        flop, turn, river = [], "", ""
        actions = []
        for rnd in ohh.rounds:
            street = convert_street(rnd.street)
            cards = rnd.cards or []
            if street == 'flop' and len(cards) >= 3:
                flop = cards[:3]
            elif street == 'turn' and cards:
                turn = cards[0]
            elif street == 'river' and cards:
                river = cards[0]

            for a in rnd.actions:
                action_type = convert_action_type(a.action)
                if action_type is None:
                    continue
                player = by_id.get(a.player_id)
                if player is None:
                    logger.debug(f"Hand {raw_id}: action {a.action_number} has unknown player {a.player_id}")
                    continue
                actions.append(Action(
                    player=player.name,
                    action_type=action_type,
                    amount=a.amount,
                    street=street,
                    is_all_in=a.is_allin,
                ))

        return Hand(
            hand_number=raw_id,
            hand_id=coerce_hand_id(raw_id),
            dealer=_dealer_name(players, ohh.dealer_seat),
            start_time=ohh.start_date_utc,
            players=normalize_player_seats(players),
            small_blind=ohh.small_blind_amount,
            big_blind=ohh.big_blind_amount,
            ante=ohh.ante_amount,
            actions=actions,
            board=_build_board(flop, turn, river, raw_id),
            winners=self._pot_winners(ohh, by_id),
            hero_cards=hero_cards,
            table_name=ohh.table_name,
            site_name=ohh.site_name,
            currency=ohh.currency,
        )

    def _pot_winners(self, ohh: OHHHand, by_id: Dict[int, OHHPlayer]) -> List[Winner]:
        """Flatten pots into one winner per player, cards attached when known."""
        winners: List[Winner] = []
        seen: Dict[str, Winner] = {}
        for pot in ohh.pots:
            for win in pot.player_wins:
                player = by_id.get(win.player_id)
                if player is None:
                    continue
                if player.name in seen:
                    seen[player.name].amount += win.win_amount
                    continue
                winner = Winner(
                    player=player.name,
                    amount=win.win_amount,
                    hand_cards=[convert_card(c) for c in (player.cards or [])],
                )
                seen[player.name] = winner
                winners.append(winner)
        return winners
