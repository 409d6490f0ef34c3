"""
Unit tests for card, name, seat and hand id normalization helpers.
"""

import pytest

from pokernow_hh.errors import LogParseError, SpectatorLogError
from pokernow_hh.parse.schemas import Hand, Player
from pokernow_hh.parse.utils import (
    convert_card, parse_cards, extract_display_name, normalize_player_seats,
    coerce_hand_id, parse_int_field, ensure_hero_perspective
)


@pytest.mark.parametrize("card,expected", [
    ("A♥", "Ah"),
    ("K♦", "Kd"),
    ("Q♣", "Qc"),
    ("J♠", "Js"),
    ("2♠", "2s"),
    ("10♠", "Ts"),
    ("10♣", "Tc"),
    ("Ah", "Ah"),
    ("Td", "Td"),
    ("  A♥", "Ah"),
    ("K♦  ", "Kd"),
    ("", ""),
])
def test_convert_card(card, expected):
    assert convert_card(card) == expected


def test_parse_cards():
    assert parse_cards("A♥, K♦") == ["Ah", "Kd"]
    assert parse_cards("10♦, 10♣") == ["Td", "Tc"]
    assert parse_cards("A♥,K♦, Q♠") == ["Ah", "Kd", "Qs"]
    assert parse_cards("J♣") == ["Jc"]


@pytest.mark.parametrize("raw,expected", [
    ("whywaita @ DtjzvbAuKs", "whywaita"),
    ("spa @ ces @ ZQfm6ZDMPO", "spa@ces"),
    ("@atsymbols@@@ @ 3mid0aO0hZ", "@atsymbols@@@"),
    ('""quotes""\' @ us2R6psQVF', "quotes'"),
    ("player name @ abc123", "playername"),
    ("x @ id1", "x"),
    ("simplename", "simplename"),
    ("", ""),
])
def test_extract_display_name(raw, expected):
    assert extract_display_name(raw) == expected


class TestNormalizePlayerSeats:

    def _player(self, seat, name, stack=1000):
        return Player(seat_number=seat, name=f"{name} @ id", display_name=name, stack=stack)

    def test_gapped_seats_are_renumbered(self):
        players = [self._player(3, "kate", 500), self._player(7, "leo", 600), self._player(10, "mike", 700)]

        result = normalize_player_seats(players)

        assert [p.seat_number for p in result] == [1, 2, 3]
        assert [p.display_name for p in result] == ["kate", "leo", "mike"]
        assert [p.stack for p in result] == [500, 600, 700]

    def test_reverse_order_is_sorted_by_original_seat(self):
        players = [self._player(9, "b"), self._player(5, "a")]

        result = normalize_player_seats(players)

        assert [(p.seat_number, p.display_name) for p in result] == [(1, "a"), (2, "b")]

    def test_input_list_is_not_mutated(self):
        players = [self._player(4, "a"), self._player(8, "b")]

        normalize_player_seats(players)

        assert [p.seat_number for p in players] == [4, 8]

    def test_empty(self):
        assert normalize_player_seats([]) == []


class TestCoerceHandId:

    def test_numeric_id_is_kept(self):
        assert coerce_hand_id("2") == "2"
        assert coerce_hand_id("1234567890") == "1234567890"

    @pytest.mark.parametrize("raw,expected", [
        ("test123", "17066136185775469334"),
        ("xyz789", "6504957911579380203"),
        ("deadbtn01", "8681563949085652710"),
        ("callallin01", "10168127831822994649"),
        ("noncons01", "13372294122307939540"),
    ])
    def test_non_numeric_id_is_hashed(self, raw, expected):
        assert coerce_hand_id(raw) == expected

    def test_hash_is_stable(self):
        assert coerce_hand_id("abc") == coerce_hand_id("abc")
        assert coerce_hand_id("abc") != coerce_hand_id("abd")

    def test_out_of_range_or_loose_numbers_are_hashed(self):
        assert coerce_hand_id("99999999999999999999") != "99999999999999999999"
        assert coerce_hand_id("1_000") != "1_000"
        assert coerce_hand_id(" 12") != " 12"


class TestParseIntField:

    def test_valid(self):
        assert parse_int_field("1000", "stack") == 1000

    @pytest.mark.parametrize("value", ["abc", "10.5", "", "1,000"])
    def test_invalid_raises_with_context(self, value):
        with pytest.raises(LogParseError) as exc_info:
            parse_int_field(value, "stack", "12")

        assert exc_info.value.field == "stack"
        assert exc_info.value.hand_number == "12"
        assert "hand #12" in str(exc_info.value)


class TestEnsureHeroPerspective:

    def test_empty_result_is_accepted(self):
        ensure_hero_perspective([])

    def test_one_hand_with_cards_is_enough(self):
        hands = [
            Hand(hand_number="1", hand_id="1"),
            Hand(hand_number="2", hand_id="2", hero_cards=["Ah", "Kh"]),
        ]
        ensure_hero_perspective(hands)

    def test_no_cards_anywhere_is_rejected(self):
        with pytest.raises(SpectatorLogError):
            ensure_hero_perspective([Hand(hand_number="1", hand_id="1")])
