"""
Pytest configuration and fixtures for tests
"""
import csv
import io
from datetime import datetime, timedelta, timezone

import pytest

from pokernow_hh.parse.schemas import LogEntry

BASE_TIME = datetime(2025, 11, 15, 5, 9, 14, 567000, tzinfo=timezone.utc)


def make_entries(lines, start=BASE_TIME):
    """Chronological LogEntry list, one second apart."""
    return [
        LogEntry(entry=line, at=start + timedelta(seconds=i), order=i + 1)
        for i, line in enumerate(lines)
    ]


def make_csv(lines, start=BASE_TIME):
    """CSV export text the way the site writes it: header first, newest row first."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["entry", "at", "order"])
    rows = []
    for i, line in enumerate(lines):
        at = (start + timedelta(seconds=i)).isoformat()
        rows.append([line, at, str(i + 1)])
    for row in reversed(rows):
        writer.writerow(row)
    return buffer.getvalue()


BASIC_HAND = [
    '-- starting hand #1 (id: test123) (No Limit Texas Hold\'em) (dealer: "player1 @ id1") --',
    'Player stacks: #1 "player1 @ id1" (1000) | #2 "player2 @ id2" (1000)',
    'Your hand is A♥, K♥',
    '"player1 @ id1" posts a small blind of 10',
    '"player2 @ id2" posts a big blind of 20',
    '"player1 @ id1" folds',
    '"player2 @ id2" collected 10 from pot',
    '-- ending hand #1 --',
]

FLOP_HAND = [
    '-- starting hand #2 (No Limit Texas Hold\'em) (dealer: "alice @ abc") --',
    'Player stacks: #1 "alice @ abc" (500) | #2 "bob @ def" (500)',
    'Your hand is 10♦, 10♣',
    '"alice @ abc" posts a small blind of 5',
    '"bob @ def" posts a big blind of 10',
    '"alice @ abc" calls 5',
    '"bob @ def" checks',
    'Flop: [A♥, K♦, Q♠]',
    '"alice @ abc" bets 20',
    '"bob @ def" folds',
    '"alice @ abc" collected 20 from pot',
    '-- ending hand #2 --',
]

SHOWDOWN_HAND = [
    '-- starting hand #3 (id: xyz789) (No Limit Texas Hold\'em) (dealer: "charlie @ ghi") --',
    'Player stacks: #1 "charlie @ ghi" (1000) | #2 "dave @ jkl" (1000)',
    'Your hand is A♠, 7♥',
    '"charlie @ ghi" posts a small blind of 10',
    '"dave @ jkl" posts a big blind of 20',
    '"charlie @ ghi" calls 10',
    '"dave @ jkl" checks',
    'Flop: [2♥, 3♦, 4♠]',
    '"charlie @ ghi" checks',
    '"dave @ jkl" bets 50',
    '"charlie @ ghi" calls 50',
    'Turn: 2♥, 3♦, 4♠ [5♣]',
    '"charlie @ ghi" checks',
    '"dave @ jkl" checks',
    'River: 2♥, 3♦, 4♠, 5♣ [6♥]',
    '"charlie @ ghi" bets 100',
    '"dave @ jkl" calls 100',
    '"charlie @ ghi" shows a A♠, 7♥.',
    '"dave @ jkl" shows a A♣, 8♦.',
    '"charlie @ ghi" collected 170 from pot',
    '"dave @ jkl" collected 170 from pot',
    '-- ending hand #3 --',
]

ALL_IN_HAND = [
    '-- starting hand #4 (No Limit Texas Hold\'em) (dealer: "eve @ mno") --',
    'Player stacks: #1 "eve @ mno" (100) | #2 "frank @ pqr" (200)',
    'Your hand is J♣, J♦',
    '"eve @ mno" posts a small blind of 10',
    '"frank @ pqr" posts a big blind of 20',
    '"eve @ mno" raises to 100 and go all in',
    '"frank @ pqr" calls 80',
    'Flop: [J♥, Q♦, K♠]',
    '"eve @ mno" shows a J♣, J♦.',
    '"frank @ pqr" shows a A♠, 10♠.',
    '"frank @ pqr" collected 200 from pot',
    '-- ending hand #4 --',
]

DEAD_BUTTON_HAND = [
    '-- starting hand #5 (id: deadbtn01) (No Limit Texas Hold\'em) (dead button) --',
    'Player stacks: #1 "grace @ stu" (500) | #2 "henry @ vwx" (500)',
    'Your hand is Q♥, Q♦',
    '"grace @ stu" posts a small blind of 10',
    '"henry @ vwx" posts a big blind of 20',
    '"grace @ stu" raises to 60',
    '"henry @ vwx" calls 40',
    'Flop: [2♣, 7♦, 9♠]',
    '"grace @ stu" bets 100',
    '"henry @ vwx" folds',
    '"grace @ stu" collected 120 from pot',
    '-- ending hand #5 --',
]

CALL_ALL_IN_HAND = [
    '-- starting hand #6 (id: callallin01) (No Limit Texas Hold\'em) (dealer: "iris @ yza") --',
    'Player stacks: #1 "iris @ yza" (1000) | #2 "john @ bcd" (300)',
    'Your hand is 9♥, 9♦',
    '"iris @ yza" posts a small blind of 10',
    '"john @ bcd" posts a big blind of 20',
    '"iris @ yza" raises to 60',
    '"john @ bcd" calls 280 and go all in',
    'Flop: [A♥, K♦, Q♠]',
    '"iris @ yza" shows a A♣, K♥.',
    '"john @ bcd" shows a 9♠, 9♣.',
    '"iris @ yza" collected 600 from pot',
    '-- ending hand #6 --',
]

GAPPED_SEATS_HAND = [
    '-- starting hand #7 (id: noncons01) (No Limit Texas Hold\'em) (dealer: "kate @ efg") --',
    'Player stacks: #3 "kate @ efg" (500) | #7 "leo @ hij" (600) | #10 "mike @ klm" (700)',
    'Your hand is 5♥, 6♦',
    '"kate @ efg" posts a small blind of 10',
    '"leo @ hij" posts a big blind of 20',
    '"mike @ klm" folds',
    '"kate @ efg" calls 10',
    '"leo @ hij" checks',
    'Flop: [5♥, 6♦, 7♠]',
    '"kate @ efg" checks',
    '"leo @ hij" bets 40',
    '"kate @ efg" folds',
    '"leo @ hij" collected 40 from pot',
    '-- ending hand #7 --',
]

ELEVEN_PLAYER_HAND = [
    '-- starting hand #8 (id: toomany01) (No Limit Texas Hold\'em) (dealer: "player1 @ p1") --',
    'Player stacks: ' + ' | '.join(f'#{i} "player{i} @ p{i}" (1000)' for i in range(1, 12)),
    '"player1 @ p1" posts a small blind of 10',
    '"player2 @ p2" posts a big blind of 20',
    '"player3 @ p3" folds',
    '-- ending hand #8 --',
]


def roster_hand(hand_number, player_count, hero_cards=True):
    """A short hand with ``player_count`` seated players that the first player wins."""
    stacks = ' | '.join(f'#{i} "p{i} @ x{i}" (1000)' for i in range(1, player_count + 1))
    lines = [
        f'-- starting hand #{hand_number} (No Limit Texas Hold\'em) (dealer: "p1 @ x1") --',
        f'Player stacks: {stacks}',
    ]
    if hero_cards:
        lines.append('Your hand is A♠, A♥')
    lines += [
        '"p1 @ x1" posts a small blind of 10',
        '"p2 @ x2" posts a big blind of 20',
        '"p2 @ x2" folds',
        '"p1 @ x1" collected 20 from pot',
        f'-- ending hand #{hand_number} --',
    ]
    return lines


def ohh_document(**overrides):
    body = {
        "spec_version": "1.4.6",
        "site_name": "PokerNow",
        "game_number": "ohh-42",
        "start_date_utc": "2025-11-15T05:08:29Z",
        "table_name": "Friday Game",
        "currency": "USD",
        "dealer_seat": 8,
        "small_blind_amount": 0.25,
        "big_blind_amount": 0.5,
        "ante_amount": 0,
        "hero_player_id": 1,
        "players": [
            {"id": 1, "seat": 4, "name": "hero", "starting_stack": 50, "cards": ["A♠", "K♠"]},
            {"id": 2, "seat": 8, "name": "villain", "starting_stack": 40},
        ],
        "rounds": [
            {"id": 0, "street": "Preflop", "actions": [
                {"action_number": 1, "player_id": 2, "action": "Post SB", "amount": 0.25},
                {"action_number": 2, "player_id": 1, "action": "Post BB", "amount": 0.5},
                {"action_number": 3, "player_id": 1, "action": "Dealt Cards", "cards": ["As", "Ks"]},
                {"action_number": 4, "player_id": 2, "action": "Call", "amount": 0.25},
                {"action_number": 5, "player_id": 1, "action": "Check"},
            ]},
            {"id": 1, "street": "Flop", "cards": ["2h", "7d", "Qs"], "actions": [
                {"action_number": 6, "player_id": 1, "action": "Bet", "amount": 1.5, "is_allin": False},
                {"action_number": 7, "player_id": 2, "action": "Fold"},
            ]},
        ],
        "pots": [
            {"number": 0, "amount": 2.5, "player_wins": [{"player_id": 1, "win_amount": 1.0}]},
            {"number": 1, "amount": 1.0, "player_wins": [{"player_id": 1, "win_amount": 1.0}]},
        ],
    }
    body.update(overrides)
    return {"id": "envelope-1", "ohh": body}


@pytest.fixture
def base_time():
    return BASE_TIME
