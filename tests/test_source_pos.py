from hypothesis import given
from hypothesis import strategies as st

from pymona.Mona import (
    NO_VALUE, ErrorKind, ParseError, SourcePos, State, compare_positions, merge_errors,
)


def slow_reference_update(pos, text):
    curr = pos
    for char in text:
        curr = curr.update(char)
    return curr


@given(st.text())
def test_fast_pos_update_matches_reference(text):
    start = SourcePos(1, 0, "test")
    expected = slow_reference_update(start, text)
    actual = start.advance(text)
    assert actual == expected


def test_newline_resets_column():
    pos = SourcePos().advance("ab\ncd")
    assert (pos.line, pos.column) == (2, 2)
    assert SourcePos().advance("\n") == SourcePos(2, 0)


def test_position_name_is_not_compared():
    assert SourcePos(1, 3, "a.txt") == SourcePos(1, 3, "b.txt")
    assert str(SourcePos(2, 5, "a.txt")) == "a.txt, line 2, column 5"
    assert str(SourcePos(2, 5)) == "line 2, column 5"


@given(st.integers(1, 50), st.integers(0, 50), st.integers(1, 50), st.integers(0, 50))
def test_compare_positions_is_lexicographic(l1, c1, l2, c2):
    expected = 'lt' if (l1, c1) < (l2, c2) else 'gt' if (l1, c1) > (l2, c2) else 'eq'
    assert compare_positions(SourcePos(l1, c1), SourcePos(l2, c2)) == expected


# --- merge_errors ---

def err(line, column, *messages, kind="failure", was_eof=False):
    return ParseError(SourcePos(line, column), messages, kind, was_eof)


def test_merge_later_position_wins():
    early = err(1, 2, "early")
    late = err(1, 5, "late one", "late two")
    assert merge_errors(early, late) is late
    assert merge_errors(late, early) is late
    assert merge_errors(err(3, 0, "line three"), err(2, 9, "line two")).messages == ("line three",)


@given(st.lists(st.text(min_size=1), min_size=1), st.lists(st.text(min_size=1), min_size=1))
def test_merge_later_position_keeps_messages_verbatim(msgs1, msgs2):
    merged = merge_errors(err(1, 2, *msgs1), err(1, 5, *msgs2))
    assert merged.messages == tuple(msgs2)


def test_merge_same_position_unions_messages():
    merged = merge_errors(err(1, 3, "a", "b", kind="expectation"),
                          err(1, 3, "b", "c", was_eof=True))
    assert merged.messages == ("a", "b", "c")
    assert merged.was_eof is True
    assert merged.kind is ErrorKind.FAILURE
    assert merged.position == SourcePos(1, 3)


def test_merge_with_missing_side():
    e = err(1, 1, "x")
    assert merge_errors(None, e) is e
    assert merge_errors(e, None) is e
    assert merge_errors(err(9, 9), e) is e
    assert merge_errors(e, err(9, 9)) is e


def test_parse_error_message():
    e = ParseError(SourcePos(1, 0), ("foo", "bar"))
    assert str(e) == "(line 1, column 0) foo\nbar"
    assert e.kind is ErrorKind.FAILURE
    named = ParseError(SourcePos(3, 1, "in.txt"), ("baz",), "expectation")
    assert str(named) == "(in.txt, line 3, column 1) baz"
    assert named.kind is ErrorKind.EXPECTATION


# --- State ---

def test_state_failed_follows_error():
    state = State(NO_VALUE, "abc")
    assert not state.failed
    failed = state.replace(error=err(1, 0, "nope"))
    assert failed.failed
    assert not failed.succeed(1).failed
    assert state.remaining == "abc"
    assert state.replace(offset=2).remaining == "c"


def test_no_value_is_distinct_from_falsy_values():
    assert not NO_VALUE
    for falsy in (None, 0, "", False, []):
        assert NO_VALUE is not falsy
        assert NO_VALUE != falsy
    assert repr(NO_VALUE) == "NO_VALUE"
