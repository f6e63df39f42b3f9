import pytest

from card_game.cards import ACE, FACES, NUMBERS, Rank, build_deck, parse_cards, shuffled
from card_game.errors import IncomparableTokens, InvalidArgument
from card_game.evaluator import (
    PATTERNS,
    OfAKindMatcher,
    Straight,
    classify,
    evaluate_best,
)

from .helpers import classify_labels


def assert_beats(first: str, second: str) -> None:
    better, worse = classify_labels(first), classify_labels(second)
    assert better > worse, f"{first} did not rank higher than {second}"
    assert worse < better


def test_classify_identifies_all_hand_categories():
    cases = [
        (8, "straight_flush", "AH KH QH JH 10H"),
        (7, "four_of_a_kind", "AS AH AD AC KD"),
        (6, "full_house", "QC QD QS 9H 9S"),
        (5, "flush", "AH JH 9H 6H 2H"),
        (4, "straight", "9H 8D 7C 6S 5H"),
        (3, "three_of_a_kind", "8H 8D 8S QD JS"),
        (2, "two_pair", "7H 7D 4S 4C AS"),
        (1, "pair", "6H 6S QH 8D 4C"),
        (0, "high_card", "AS KD JH 9C 4D"),
    ]

    for expected_rank, expected_name, labels in cases:
        result = classify_labels(labels)
        assert result.rank == expected_rank, f"labels={labels}"
        assert result.name == expected_name


def test_patterns_are_listed_lowest_first():
    assert [matcher.rank for matcher in PATTERNS] == list(range(9))
    assert PATTERNS[0].name == "high_card"
    assert PATTERNS[-1].name == "straight_flush"


def test_classify_always_returns_a_pattern():
    assert classify(parse_cards("2H")).name == "high_card"
    assert classify([]).name == "high_card"


@pytest.mark.parametrize("better, worse", [
    ("3H", "2H"),
    ("AH", "2H"),
    ("AH", "KH"),
    ("KH", "QH"),
    ("QH", "JH"),
    ("JH", "10H"),
])
def test_high_card_wins_ace_high(better, worse):
    assert_beats(better, worse)


def test_high_card_tie_breaks_on_subsequent_cards():
    assert_beats("9S 8S", "9D 7C")
    assert_beats("9S 8S 7D", "9D 8C 6D")


def test_single_pair():
    assert_beats("9S 9D", "AD KC")
    assert_beats("9S 9D", "8D 8C")
    assert_beats("AS AD", "KD KC")
    assert_beats("9S 9D AD", "9C 9H KD")
    assert_beats("9S 9D AD KD", "9C 9H AH QD")


def test_two_pair():
    assert_beats("9S 9D 8D 8C", "AC AH KH QD")
    assert_beats("AC AH KH KD", "9S 9D 8D 8C")
    assert_beats("AC AH KH KD", "AS AD 8D 8C")
    assert_beats("AC AH KH KD QH", "AS AD KS KC JH")


def test_three_of_a_kind():
    assert_beats("9S 9D 9H", "AD AC KD KC")
    assert_beats("9S 9D 9C", "8D 8C 8H")
    assert_beats("AS AD AC", "KD KC KH")
    assert_beats("9S 9D 9C AD", "9C 9H 9D KD")
    assert_beats("9S 9D 9C AD KD", "9C 9H 9D AC QC")


def test_straight():
    assert_beats("2S 3H 4D 5C 6D", "9D 9C 9S")
    assert_beats("2S 3H 4D 5C 6D", "AH 2S 3H 4D 5C")
    assert_beats("10S JH QD KC AD", "9H 10S JH QD KC")


def test_wheel_straight_is_five_high():
    result = classify_labels("AH 2S 3H 4D 5C")
    assert result.name == "straight"
    assert result.pattern == Straight(Rank.numbered(5))


def test_straight_does_not_wrap_around_the_ace():
    assert classify_labels("QH KS AH 2D 3C").name == "high_card"


def test_flush():
    assert_beats("2S 7S 4S 5S KS", "2S 3H 4D 5C 6D")
    assert_beats("2S 7S 4S 5S AS", "2H 7H 4H 5H KH")
    assert_beats("2S 8S 4S 5S AS", "2H 7H 4H 5H AH")


def test_flush_requires_five_cards():
    assert classify_labels("2H 7H 4H 5H").name == "high_card"
    assert_beats("AS KH", "2H 7H 4H 5H")


def test_full_house():
    assert_beats("2S 2D 2H 3S 3H", "2D 3D 4D 5D 7D")
    assert_beats("3S 3D 3H 2S 2H", "2D 2H 2C AS AH")
    assert_beats("3D 3D 3D AS AH", "3S 3S 3S KS KH")


def test_four_of_a_kind():
    assert_beats("3S 3D 3H 3C 2H", "2D 2C 2H AS AH")
    assert_beats("3S 3D 3H 3C AH", "3S 3D 3H 3C KH")


def test_straight_flush():
    assert_beats("2H 3H 4H 5H 6H", "3S 3D 3H 3C AD")
    assert_beats("2H 3H 4H 5H 6H", "AS 2S 3S 4S 5S")
    assert_beats("10H JH QH KH AH", "9S 10S JS QS KS")


def test_royal_flush_is_an_ace_high_straight_flush():
    assert classify_labels("10H JH QH KH AH").is_royal
    assert not classify_labels("9S 10S JS QS KS").is_royal
    assert not classify_labels("10H JH QH KH AS").is_royal


def test_pattern_ordering_is_transitive_across_categories():
    ladder = [
        "AS KD JH 9C 4D",
        "6H 6S QH 8D 4C",
        "7H 7D 4S 4C AS",
        "8H 8D 8S QD JS",
        "9H 8D 7C 6S 5H",
        "AH JH 9H 6H 2H",
        "QC QD QS 9H 9S",
        "AS AH AD AC KD",
        "2H 3H 4H 5H 6H",
    ]
    ranked = [classify_labels(labels) for labels in ladder]
    for low in range(len(ranked)):
        for high in range(low + 1, len(ranked)):
            assert ranked[high] > ranked[low]
    assert sorted(reversed(ranked)) == ranked


def test_equal_hands_compare_equal_regardless_of_suits():
    first = classify_labels("9S 9D 4C 3H 2S")
    second = classify_labels("9H 9C 4D 3S 2H")
    assert first == second
    assert not first < second


def test_patterns_of_different_kinds_do_not_compare_directly():
    pair = classify_labels("6H 6S QH 8D 4C").pattern
    flush = classify_labels("AH JH 9H 6H 2H").pattern
    with pytest.raises(IncomparableTokens):
        pair < flush


def test_kinds_of_different_size_do_not_compare_directly():
    pair = classify_labels("6H 6S QH 8D 4C").pattern
    three = classify_labels("8H 8D 8S QD JS").pattern
    with pytest.raises(IncomparableTokens, match="different order"):
        pair > three


def test_of_a_kind_matcher_picks_the_best_group_of_exactly_n():
    match = OfAKindMatcher(2)(parse_cards("3H 3D KS KC KD 9H 9S"))
    assert match is not None
    assert match.rank == Rank.numbered(9)
    assert match.n == 2
    assert OfAKindMatcher(4)(parse_cards("3H 3D 3S")) is None
    with pytest.raises(InvalidArgument):
        OfAKindMatcher(1)


def test_evaluate_best_handles_wheel_straight_in_seven_cards():
    result = evaluate_best(parse_cards("AH 2D 3C 4S 5H 9D KD"))
    assert result.name == "straight"
    assert result.pattern == Straight(Rank.numbered(5))


def test_evaluate_best_compares_kickers_for_equal_pairs():
    hand_a = parse_cards("AH AD KC QS 9H 2D 3C")
    hand_b = parse_cards("AH AD QC JS 8H 2D 3C")
    assert evaluate_best(hand_a) > evaluate_best(hand_b)


def test_evaluate_best_finds_flush_among_seven_cards():
    result = evaluate_best(parse_cards("2H 9H KH 4H 7S 8H 8C"))
    assert result.name == "flush"


def test_evaluate_best_supports_many_seven_card_hands():
    deck = shuffled(build_deck(NUMBERS + FACES + (ACE,)), seed=777)
    for idx in range(0, 42, 7):
        result = evaluate_best(deck[idx : idx + 7])
        assert 0 <= result.rank <= 8
        assert result >= classify(deck[idx : idx + 5])
