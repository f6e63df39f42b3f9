import pytest

from card_game.errors import StateError
from card_game.state import State, frozen_map


def test_fetch_missing_field_raises_state_error():
    state = State.build(players=("a", "b"))
    assert state.fetch("players") == ("a", "b")
    with pytest.raises(StateError, match="dealer is not available in State"):
        state.fetch("dealer")


def test_get_falls_back_to_default():
    state = State.build(passes=2)
    assert state.get("passes") == 2
    assert state.get("bid") is None
    assert state.get("bid", "none") == "none"


def test_merge_returns_new_state_and_leaves_original_alone():
    original = State.build(passes=0)
    updated = original.merge(passes=1, bid="6H")

    assert original.fetch("passes") == 0
    assert "bid" not in original
    assert updated.fetch("passes") == 1
    assert updated.fetch("bid") == "6H"


def test_delete_drops_fields():
    state = State.build(bid="6H", bidder="a", passes=1)
    trimmed = state.delete("bid", "bidder")

    assert sorted(trimmed.keys()) == ["passes"]
    assert "bid" in state
    assert trimmed.delete("missing") == trimmed


def test_update_in_replaces_one_entry():
    state = State.build(scores=frozen_map({"a": 10}))
    updated = state.update_in("scores", "a", lambda n: n + 5)
    updated = updated.update_in("scores", "b", lambda n: (n or 0) - 20)

    assert dict(updated.fetch("scores")) == {"a": 15, "b": -20}
    assert dict(state.fetch("scores")) == {"a": 10}


def test_states_compare_by_value():
    assert State.build(a=1, b=2) == State.build(b=2, a=1)
    assert State.build(a=1) != State.build(a=2)


def test_subclasses_do_not_equal_base_states():
    class Other(State):
        pass

    assert Other.build(a=1) != State.build(a=1)
    assert isinstance(Other.build(a=1).merge(b=2), Other)


def test_states_are_unhashable():
    with pytest.raises(TypeError):
        hash(State.build(a=1))


def test_frozen_map_is_read_only():
    scores = frozen_map({"a": 1})
    with pytest.raises(TypeError):
        scores["a"] = 2  # type: ignore[index]


def test_repr_lists_fields():
    assert repr(State.build(passes=1)) == "<State passes=1>"
