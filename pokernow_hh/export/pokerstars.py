"""
PokerStars hand history writer.
Renders reconstructed hands in the text format GTO Wizard imports.
"""

import logging
from typing import Dict, List, Optional

from dateutil import tz

from ..config.options import ConvertOptions
from ..parse.schemas import Hand, Player, Action

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y/%m/%d %H:%M:%S"
DEFAULT_SITE_NAME = "PokerStars"

FOLD_STREETS = {
    "preflop": "before Flop",
    "flop": "on the Flop",
    "turn": "on the Turn",
    "river": "on the River",
}


def format_number(amount: float) -> str:
    """Whole amounts print without decimals (1.0 -> "1"), others with two (0.5 -> "0.50")."""
    if float(amount).is_integer():
        return f"{amount:.0f}"
    return f"{amount:.2f}"


def is_chips_currency(currency: str) -> bool:
    return currency.lower() == "chips"


def calculate_total_pot(hand: Hand) -> float:
    """Sum of the amounts won; uncalled bets went back to their owner and are not counted."""
    return sum(winner.amount for winner in hand.winners)


def calculate_rake(total_pot: float, big_blind: float, rake_percent: float, rake_cap_bb: float) -> float:
    """
    Rake taken from a cash game pot.

    Args:
        total_pot: Pot size
        big_blind: Big blind, used to express the cap in chips
        rake_percent: Percentage of the pot, 0 disables rake
        rake_cap_bb: Cap in big blinds, 0 means uncapped

    Returns:
        Rake amount
    """
    if rake_percent <= 0:
        return 0

    rake = total_pot * rake_percent / 100.0
    cap = big_blind * rake_cap_bb
    if cap > 0 and rake > cap:
        rake = cap
    return rake


def get_dealer_seat(hand: Hand) -> int:
    for player in hand.players:
        if player.display_name == hand.dealer:
            return player.seat_number
    return 1


class PokerStarsFormatter:
    """Writes hands as PokerStars tournament or cash game histories."""

    def __init__(self, options: ConvertOptions):
        self.options = options
        self.is_cash = options.game_type == "cash"
        self.zone = options.time_zone() or tz.UTC

    def format_hands(self, hands: List[Hand]) -> str:
        """
        Render all hands, separated by blank lines.

        The tournament id defaults to the first hand's id.
        """
        tournament_id = ""
        if not self.is_cash:
            tournament_id = self.options.tournament_id
            if not tournament_id and hands:
                tournament_id = hands[0].hand_id

        return "\n\n".join(self.format_hand(hand, tournament_id) for hand in hands)

    def amount(self, value: float, hand: Hand) -> str:
        if self.is_cash and not is_chips_currency(hand.currency):
            return f"${format_number(value)}"
        return format_number(value)

    def format_hand(self, hand: Hand, tournament_id: str = "") -> str:
        lines: List[str] = []
        lines.extend(self._header(hand, tournament_id))

        for player in hand.players:
            lines.append(f"Seat {player.seat_number}: {player.display_name} "
                         f"({self.amount(player.stack, hand)} in chips)")

        lines.append("*** HOLE CARDS ***")
        if hand.hero_cards:
            lines.append(f"Dealt to {self.options.hero_name} [{' '.join(hand.hero_cards)}]")
        lines.extend(self._street_actions(hand, "preflop", None))

        board = hand.board
        if board.flop:
            flop = " ".join(board.flop)
            lines.extend(self._street_actions(hand, "flop", f"*** FLOP *** [{flop}]"))
            if board.turn:
                lines.extend(self._street_actions(hand, "turn", f"*** TURN *** [{flop}] [{board.turn}]"))
                if board.river:
                    lines.extend(self._street_actions(
                        hand, "river", f"*** RIVER *** [{flop} {board.turn}] [{board.river}]"))

        lines.extend(self._showdown(hand))
        lines.extend(self._summary(hand))
        return "\n".join(lines) + "\n"

    def _header(self, hand: Hand, tournament_id: str) -> List[str]:
        site = self.options.site_name or hand.site_name or DEFAULT_SITE_NAME
        sb = format_number(hand.small_blind)
        bb = format_number(hand.big_blind)
        timestamp = ""
        if hand.start_time is not None:
            start = hand.start_time
            if start.tzinfo is None:
                start = start.replace(tzinfo=tz.UTC)
            timestamp = start.astimezone(self.zone).strftime(TIME_FORMAT)

        table_size = len(hand.players)
        button = get_dealer_seat(hand)

        if not self.is_cash:
            return [
                f"{site} Hand #{hand.hand_id}:  Tournament #{tournament_id}, $0+$0 Hold'em No Limit - "
                f"Level 1 ({sb}/{bb}) - {timestamp}",
                f"Table 'PokerNow {tournament_id}' {table_size}-max Seat #{button} is the button",
            ]

        if is_chips_currency(hand.currency):
            stakes = f"({sb}/{bb})"
        else:
            stakes = f"(${sb}/${bb} USD)"

        table_name = "Poker Now"
        if hand.site_name and hand.table_name:
            table_name = f"{hand.site_name} - {hand.table_name}"
        elif hand.table_name:
            table_name = hand.table_name

        return [
            f"{site} Hand #{hand.hand_id}: Hold'em No Limit {stakes} - {timestamp} ET",
            f"Table '{table_name}' {table_size}-max Seat #{button} is the button",
        ]

    def _street_actions(self, hand: Hand, street: str, header: Optional[str]) -> List[str]:
        actions = [a for a in hand.actions if a.street == street]
        if not actions and street != "preflop":
            return []

        lines = [header] if header else []
        bets: Dict[str, float] = {}
        current_bet = 0.0

        for action in actions:
            line, current_bet = self._action_line(hand, action, bets, current_bet)
            if line:
                lines.append(line)
        return lines

    def _action_line(self, hand: Hand, action: Action, bets: Dict[str, float], current_bet: float):
        """Render one action and return it with the updated highest bet of the street."""
        player = action.player
        all_in = " and is all-in" if action.is_all_in else ""
        kind = action.action_type

        if kind in ("POST_SB", "POST_BB"):
            label = "small blind" if kind == "POST_SB" else "big blind"
            bets[player] = action.amount
            return f"{player}: posts {label} {self.amount(action.amount, hand)}", max(current_bet, action.amount)

        if kind == "POST_ANTE":
            return f"{player}: posts an ante of {self.amount(action.amount, hand)}", current_bet

        if kind == "FOLD":
            return f"{player}: folds", current_bet

        if kind == "CHECK":
            return f"{player}: checks", current_bet

        if kind == "CALL":
            # Only the chips added on top of this street's earlier bets
            to_call = current_bet - bets.get(player, 0)
            bets[player] = current_bet
            return f"{player}: calls {self.amount(to_call, hand)}{all_in}", current_bet

        if kind == "BET":
            bets[player] = action.amount
            return f"{player}: bets {self.amount(action.amount, hand)}{all_in}", action.amount

        if kind == "RAISE":
            raise_to = action.amount
            if action.is_all_in:
                raise_to += hand.ante
            bets[player] = raise_to
            if self.is_cash:
                raise_by = raise_to - current_bet
                return (f"{player}: raises {self.amount(raise_by, hand)} to "
                        f"{self.amount(raise_to, hand)}{all_in}"), raise_to
            return f"{player}: raises to {format_number(raise_to)}{all_in}", raise_to

        if kind == "UNCALLED":
            return f"Uncalled bet ({self.amount(action.amount, hand)}) returned to {player}", current_bet

        # SHOW and COLLECT are written in the showdown section
        return None, current_bet

    def _showdown(self, hand: Hand) -> List[str]:
        lines: List[str] = []
        shows = [a for a in hand.actions if a.action_type == "SHOW"]

        if shows:
            lines.append("*** SHOW DOWN ***")
            for action in shows:
                for winner in hand.winners:
                    if winner.player == action.player and winner.hand_cards:
                        lines.append(f"{action.player}: shows [{' '.join(winner.hand_cards)}]")
                        break
        else:
            for winner in hand.winners:
                if winner.amount > 0:
                    lines.append(f"{winner.player}: doesn't show hand")

        for winner in hand.winners:
            if winner.amount > 0:
                lines.append(f"{winner.player} collected {self.amount(winner.amount, hand)} from pot")
        return lines

    def _summary(self, hand: Hand) -> List[str]:
        total_pot = calculate_total_pot(hand)
        rake = calculate_rake(total_pot, hand.big_blind, self.options.rake_percent, self.options.rake_cap_bb)

        lines = [
            "*** SUMMARY ***",
            f"Total pot {self.amount(total_pot, hand)} | Rake {self.amount(rake, hand)}",
        ]
        if hand.board.flop:
            lines.append(f"Board [{' '.join(hand.board.cards())}]")

        for player in hand.players:
            lines.append(self._player_summary(hand, player))
        return lines

    def _player_summary(self, hand: Hand, player: Player) -> str:
        name = player.display_name

        role = ""
        if player.seat_number == get_dealer_seat(hand):
            role = " (button)"
        small_blind = next((a.player for a in reversed(hand.actions) if a.action_type == "POST_SB"), "")
        big_blind = next((a.player for a in reversed(hand.actions) if a.action_type == "POST_BB"), "")
        if name == small_blind:
            role = " (small blind)"
        elif name == big_blind:
            role = " (big blind)"

        folded_on = None
        did_bet = False
        showed = False
        for action in hand.actions:
            if action.player != name:
                continue
            if action.action_type == "FOLD":
                folded_on = action.street
            elif action.action_type in ("CALL", "BET", "RAISE"):
                did_bet = True
            elif action.action_type == "SHOW":
                showed = True

        won = next((w.amount for w in hand.winners if w.player == name), 0)

        outcome = ""
        if won > 0:
            outcome = f" collected ({self.amount(won, hand)})"
        elif showed:
            outcome = " showed and lost"
        elif folded_on is not None:
            outcome = f" folded {FOLD_STREETS.get(folded_on, 'before Flop')}"
            if not did_bet:
                outcome += " (didn't bet)"

        return f"Seat {player.seat_number}: {name}{role}{outcome}"
