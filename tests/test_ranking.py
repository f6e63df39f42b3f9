import pytest

from card_game import ranking
from card_game.cards import JOKER, Card, Suit, parse_cards, parse_label
from card_game.errors import IncomparableTokens, InvalidArgument, RankNotSupported


def test_ace_high_sorts_aces_above_kings():
    cards = parse_cards("AH 2D KC 10S")
    assert sorted(cards, key=ranking.ace_high()) == parse_cards("2D 10S KC AH")


def test_ace_low_sorts_aces_below_twos():
    cards = parse_cards("AH 2D KC")
    assert sorted(cards, key=ranking.ace_low()) == parse_cards("AH 2D KC")


def test_ace_orderings_are_singletons():
    assert ranking.ace_high() is ranking.ace_high()
    assert ranking.ace_high()(parse_label("AH")) > ranking.ace_high()(parse_label("KS"))


def test_suits_are_ignored_by_rank_orderings():
    scheme = ranking.ace_high()
    assert scheme(parse_label("9H")) == scheme(parse_label("9S"))
    assert scheme.compare(parse_label("9H"), parse_label("9S")) == 0


def test_tokens_are_reflexive_within_a_scheme():
    schemes = [
        ranking.ace_high(),
        ranking.ace_low(),
        ranking.suit(Suit.HEARTS),
        ranking.match(parse_label("JD")),
        ranking.composite(ranking.suit(Suit.SPADES), ranking.ace_high()),
    ]
    for scheme in schemes:
        for card in parse_cards("2H 10D JD QS AC"):
            assert scheme(card).compare(scheme(card)) == 0


def test_separately_built_suit_schemes_do_not_compare():
    first = ranking.suit(Suit.HEARTS)
    second = ranking.suit(Suit.HEARTS)
    card = parse_label("AH")
    with pytest.raises(IncomparableTokens, match="different orderings"):
        first(card) < second(card)


def test_ace_high_and_ace_low_tokens_do_not_compare():
    card = parse_label("AH")
    with pytest.raises(IncomparableTokens, match="different orderings"):
        ranking.ace_high()(card).compare(ranking.ace_low()(card))


def test_tokens_refuse_to_compare_with_non_tokens():
    with pytest.raises(IncomparableTokens):
        ranking.ace_high()(parse_label("AH")).compare(14)  # type: ignore[arg-type]


def test_array_ranking_rejects_unknown_ranks():
    with pytest.raises(RankNotSupported, match="Cannot order Jk"):
        ranking.ace_high()(Card.unsuited(JOKER))


def test_binary_schemes_score_matches_above_everything_else():
    hearts = ranking.suit(Suit.HEARTS)
    assert hearts(parse_label("2H")) > hearts(parse_label("AS"))
    assert hearts(parse_label("2H")) == hearts(parse_label("KH"))

    joker = Card.unsuited(JOKER)
    only_joker = ranking.match(joker)
    assert only_joker(joker) > only_joker(parse_label("AS"))


def test_suit_token_succ_reaches_the_matching_token_then_stops():
    offsuit = parse_label("AD")
    onsuit = parse_label("AH")
    ordering = ranking.suit(onsuit.suit)

    token = ordering(offsuit).succ()
    assert token == ordering(onsuit)
    assert token.succ() is None


def test_scheme_max_is_the_top_token():
    assert ranking.ace_high().max == ranking.ace_high()(parse_label("AS"))
    assert ranking.ace_low().max == ranking.ace_low()(parse_label("KS"))
    spades = ranking.suit(Suit.SPADES)
    assert spades.max == spades(parse_label("2S"))


def test_composite_left_most_child_dominates():
    scheme = ranking.composite(ranking.suit(Suit.SPADES), ranking.ace_high())
    cards = parse_cards("AH 2S KD 3S")
    assert sorted(cards, key=scheme) == parse_cards("KD AH 2S 3S")
    assert scheme.max == scheme(parse_label("AS"))


def test_composite_requires_children():
    with pytest.raises(InvalidArgument, match="at least one child"):
        ranking.composite()


def test_composite_defers_unsupported_ranks_until_compared():
    joker = Card.unsuited(JOKER)
    scheme = ranking.composite(ranking.match(joker), ranking.ace_high())

    # The first child already separates these, so the ace-high slot is never read.
    assert scheme(joker) > scheme(parse_label("AS"))
    assert max(parse_cards("AS KD") + [joker], key=scheme) == joker
    assert "Unrankable" in repr(scheme(joker))

    with pytest.raises(RankNotSupported, match="Cannot order Jk"):
        scheme(joker) == scheme(joker)
