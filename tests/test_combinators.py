import pytest
from hypothesis import given, strategies as st

from pymona.Mona import NO_VALUE, ParseError, ParserContractError
from pymona.Parse import parse, run_parser
from pymona.Prim import fail, token, value
from pymona.Char import alpha, string
from pymona.Numbers import integer
from pymona.Combinators import (
    and_, or_, maybe, not_, unless, sequence, join, followed_by,
    collect, exactly, split, split_end, between, skip, range_,
)


def run(parser, input_str):
    return run_parser(parser, input_str)


# --- and_ ---

def test_and_keeps_last_value():
    assert parse(and_(token(), token()), "ab") == "b"
    assert parse(string("a") > string("b"), "ab") == "b"


def test_and_stops_at_first_failure():
    calls = []
    res, err = run(and_(fail("boom"), token().map(calls.append)), "a")
    assert res is None
    assert err.messages == ("boom",)
    assert calls == []


def test_and_needs_parsers():
    with pytest.raises(ParserContractError):
        and_()
    with pytest.raises(ParserContractError):
        and_(token(), "not a parser")


# --- or_ ---

def test_or_first_success_wins():
    p = or_(string("a"), string("b"), string("c"))
    assert run(p, "a")[0] == "a"
    assert run(p, "b")[0] == "b"
    assert parse(string("x") | string("y"), "y") == "y"


def test_or_merges_errors():
    _, err = run(or_(string("abc"), string("abcd")), "abd")
    assert str(err) == ("(line 1, column 3) expected string matching {abc}\n"
                        "expected string matching {abcd}")


def test_or_later_failure_wins():
    _, err = run(or_(string("ab"), string("x")), "ac")
    assert err.messages == ("expected string matching {ab}",)
    assert err.position.column == 2


def test_or_trailing_label():
    _, err = run(or_(string("a"), string("b"), "a or b"), "c")
    assert err.messages == ("expected a or b",)


def test_or_needs_parsers():
    with pytest.raises(ParserContractError):
        or_()
    with pytest.raises(ParserContractError):
        or_("just a label")


# --- maybe / not_ / unless ---

def test_maybe():
    assert parse(maybe(string("a")), "a") == "a"
    assert parse(maybe(string("a")), "") is NO_VALUE
    assert parse(and_(maybe(string("a")), token()), "b") == "b"


def test_not():
    assert run(not_(string("a")), "b") == (True, None)
    _, err = run(not_(string("a")), "a")
    assert err.messages == ("expected parser to fail",)
    assert err.position.column == 0


def test_not_consumes_nothing():
    assert parse(and_(not_(string("a")), token()), "b") == "b"


def test_unless():
    assert parse(unless(string("a"), token()), "b") == "b"
    res, err = run(unless(string("a"), token()), "a")
    assert res is None
    assert err is not None


# --- sequence ---

def test_sequence_do_notation():
    @sequence
    def pair():
        key = yield token()
        yield string("=")
        val = yield token()
        return value((key, val))

    assert parse(pair, "a=b") == ("a", "b")


def test_sequence_stops_on_failure():
    reached = []

    def two_tokens():
        first = yield token()
        second = yield token()
        reached.append(second)
        return value(first + second)

    with pytest.raises(ParseError, match=r"^\(line 1, column 2\) unexpected eof$"):
        parse(sequence(two_tokens), "a")
    assert reached == []


def test_sequence_failure_position():
    def three_tokens():
        yield token()
        yield token()
        yield token()
        return value(None)

    with pytest.raises(ParseError, match=r"^\(line 1, column 3\) unexpected eof$"):
        parse(sequence(three_tokens), "ab")


def test_sequence_can_fail_from_return():
    def choosy():
        x = yield token()
        return value(x) if x == "y" else fail("wanted y")

    assert parse(sequence(choosy), "y") == "y"
    _, err = run(sequence(choosy), "n")
    assert err.messages == ("wanted y",)


def test_sequence_plain_function():
    assert parse(sequence(lambda: token(2)), "ab") == "ab"


def test_sequence_builder_takes_no_arguments():
    with pytest.raises(ParserContractError, match="must take no arguments"):
        sequence(lambda s: value(s))
    # defaulted parameters are fine
    assert parse(sequence(lambda n=2: token(n)), "ab") == "ab"


def test_sequence_must_return_a_parser():
    def no_parser():
        yield token()
        return "oops"

    with pytest.raises(ParserContractError, match="must return a parser"):
        parse(sequence(no_parser), "a")


def test_sequence_must_yield_parsers():
    def bad_yield():
        yield 42
        return value(None)

    with pytest.raises(ParserContractError):
        parse(sequence(bad_yield), "")


# --- join / followed_by ---

def test_join():
    assert parse(join(token(), token()), "ab") == ["a", "b"]
    res, err = run(join(token(), token()), "a")
    assert res is None
    assert err.messages == ("unexpected eof",)


def test_followed_by():
    assert parse(followed_by(token(), string("b")), "ab") == "a"
    assert parse(string("a") < string("b"), "ab") == "a"
    res, _ = run(followed_by(token(), string("b")), "ac")
    assert res is None


# --- collect / exactly ---

@given(st.integers(min_value=0, max_value=20))
def test_collect_greedy(n):
    res, err = run(collect(string("a")), "a" * n + "b")
    assert res == ["a"] * n
    assert err is None


def test_collect_bounds():
    assert run(collect(token(), max=2), "abc")[0] == ["a", "b"]
    assert parse(collect(token(), min=2), "abc") == ["a", "b", "c"]
    _, err = run(collect(token(), min=3), "ab")
    assert err.messages == ("unexpected eof",)
    assert err.position.column == 3
    assert run(collect(token(), min=2, max=4), "abcdef")[0] == ["a", "b", "c", "d"]


def test_collect_rejects_bad_bounds():
    with pytest.raises(ParserContractError):
        collect(token(), min=3, max=2)


def test_collect_zero_width_parser():
    with pytest.raises(ParserContractError):
        parse(collect(value(1)), "")
    # bounded repetition of an empty match is fine
    assert parse(collect(value(1), max=3), "") == [1, 1, 1]


def test_exactly():
    assert run(exactly(token(), 3), "abcd")[0] == ["a", "b", "c"]
    res, err = run(exactly(token(), 3), "ab")
    assert res is None
    assert err is not None


# --- split / split_end ---

def test_split():
    assert parse(split(alpha(), string(".")), "a.b.c") == ["a", "b", "c"]
    assert parse(split(alpha(), string(".")), "") == []
    assert parse(split(alpha(), string(".")), "a") == ["a"]


def test_split_max():
    assert run(split(alpha(), string("."), max=2), "a.b.c")[0] == ["a", "b"]
    assert run(split(alpha(), string("."), max=0), "a.b")[0] == []


def test_split_min():
    with pytest.raises(ParseError) as info:
        parse(split(alpha(), string("."), min=3), "a.b")
    assert str(info.value) == "(line 1, column 4) expected string matching {.}"


def test_split_end():
    assert parse(split_end(alpha(), string(";")), "a;b;") == ["a", "b"]
    assert parse(split_end(alpha(), string(";")), "") == []
    res, _ = run(split_end(alpha(), string(";")), "a;b")
    assert res == ["a"]


def test_split_end_optional_terminator():
    p = split_end(alpha(), string(";"), enforce_end=False)
    assert parse(p, "a;b") == ["a", "b"]
    assert parse(p, "a;b;") == ["a", "b"]
    assert run(split_end(alpha(), string(";"), enforce_end=False, max=1), "a;b")[0] == ["a"]


def test_split_end_min():
    _, err = run(split_end(alpha(), string(";"), min=2), "a;")
    assert err is not None
    _, err = run(split_end(alpha(), string(";"), enforce_end=False, min=3), "a;b")
    assert err is not None


# --- between / skip / range_ ---

def test_between():
    assert parse(between(string("("), string(")"), integer()), "(123)") == 123


def test_between_missing_close():
    with pytest.raises(ParseError) as info:
        parse(between(string("("), string(")"), integer()), "(123")
    assert info.value.messages == ("expected string matching {)}",)
    assert info.value.position.column == 5


def test_skip():
    assert parse(and_(skip(string("a")), token()), "aaab") == "b"
    assert parse(skip(string("a")), "") is NO_VALUE


def test_range():
    assert parse(range_("a", "c"), "b") == "b"
    assert parse(range_("a", "c"), "c") == "c"
    _, err = run(range_("a", "c"), "d")
    assert err.messages == ("expected value between {a} and {c}",)


def test_range_custom_predicate():
    p = range_(1, 9, integer(), predicate=lambda a, b: a < b)
    assert parse(p, "5") == 5
    assert run(p, "9")[1] is not None


def test_or_reports_every_alternative():
    _, err = run(or_(fail("a"), fail("b"), fail("c"), fail("d")), "")
    assert str(err) == "(line 1, column 0) a\nb\nc\nd"
    _, err = run(or_(fail("a"), fail("b"), fail("c"), fail("d"), "letter"), "")
    assert err.messages == ("expected letter",)


def test_or_furthest_alternatives_win():
    p = or_(fail("foo"), string("ad"), string("abc"), string("abcd"))
    _, err = run(p, "abd")
    assert err.position.column == 3
    assert err.messages == ("expected string matching {abc}",
                            "expected string matching {abcd}")
