import logging
from typing import Any, Callable, Hashable

from .Mona import (
    NO_VALUE, ErrorKind, ParseError, Parser, ParserContractError, SourcePos, State, T, U,
    check_parser, invoke, merge_errors,
)

log = logging.getLogger("pymona")

ParserFn = Callable[[State], State]


def value(val: Any = NO_VALUE) -> Parser[Any]:
    """Return a parser that succeeds with `val` without consuming input."""
    def parse(state: State) -> State:
        return state.succeed(val)
    return Parser(parse, "value")


def bind(parser: ParserFn, fun: Callable[[Any], ParserFn]) -> Parser[Any]:
    """
    Runs `parser`, then calls `fun` with its value and runs the parser `fun`
    returns. `fun` is never called if `parser` fails.
    """
    check_parser(parser, "bind()")
    def parse(state: State) -> State:
        new_state = invoke(parser, state)
        if new_state.failed:
            return new_state
        return invoke(fun(new_state.value), new_state)
    return Parser(parse, "bind")


def fail(msg: str = "parser error", kind: str = "failure") -> Parser[Any]:
    """A parser that always fails at the current position without consuming input."""
    kind = ErrorKind(kind)
    def parse(state: State) -> State:
        new_error = ParseError(state.position, (msg,), kind, kind is ErrorKind.EOF)
        return state.replace(error=merge_errors(state.error, new_error))
    return Parser(parse, "fail")


def label(parser: ParserFn, msg: str) -> Parser[Any]:
    """Replaces the messages of a failure of `parser` with 'expected <msg>'."""
    check_parser(parser, "label()")
    def parse(state: State) -> State:
        new_state = invoke(parser, state)
        if new_state.failed:
            error = new_state.error.with_messages((f"expected {msg}",), ErrorKind.EXPECTATION)
            return new_state.replace(error=error)
        return new_state
    return Parser(parse, f"label {msg!r}")


def token(count: int = 1) -> Parser[Any]:
    """
    Consumes `count` items of input and returns them as a slice. Fails with an
    'unexpected eof' error if fewer than `count` items are left.
    """
    count = count if count and count > 0 else 1
    def parse(state: State) -> State:
        data = state.input
        offset = state.offset
        new_offset = offset + count
        consumed = data[offset:new_offset]
        # Running off the end moves the position one column past the last item.
        position = state.position.advance(consumed)
        missing = new_offset - offset - len(consumed)
        if missing:
            position = SourcePos(position.line, position.column + 1, position.name)
            moved = state.replace(offset=new_offset, position=position)
            return fail("unexpected eof", "eof")(moved)
        return state.replace(value=consumed, offset=new_offset, position=position, error=None)
    return Parser(parse, "token")


def eof() -> Parser[bool]:
    """Succeeds with True if there is no more input to consume."""
    def parse(state: State) -> State:
        if len(state.input) == state.offset:
            return state.succeed(True)
        return fail("expected end of input", "expectation")(state)
    return Parser(parse, "eof")


def delay(constructor: Callable[..., ParserFn], *args: Any, **kwargs: Any) -> Parser[Any]:
    """
    Calls `constructor(*args, **kwargs)` only when the parser is applied, so that
    recursive grammars don't recurse forever while they are being built.
    """
    if not callable(constructor):
        raise ParserContractError(f"delay() expects a callable, got {constructor!r}")
    def parse(state: State) -> State:
        return invoke(constructor(*args, **kwargs), state)
    return Parser(parse, f"delay {getattr(constructor, '__name__', constructor)!s}")


def map_(transformer: Callable[[T], U], parser: ParserFn) -> Parser[U]:
    """Transforms the value of a successful `parser`."""
    return bind(parser, lambda result: value(transformer(result)))


def tag(parser: ParserFn, key: Hashable) -> Parser[dict]:
    """Wraps the value of `parser` in a single-key dict."""
    return map_(lambda x: {key: x}, parser)


def look_ahead(parser: ParserFn) -> Parser[Any]:
    """Runs `parser` without consuming input, keeping its verdict and value."""
    check_parser(parser, "look_ahead()")
    def parse(state: State) -> State:
        new_state = invoke(parser, state)
        return new_state.replace(offset=state.offset, position=state.position)
    return Parser(parse, "look_ahead")


def is_(predicate: Callable[[Any], bool], parser: ParserFn = None) -> Parser[Any]:
    """Succeeds with the value of `parser` (default token()) if `predicate` holds for it."""
    parser = token() if parser is None else parser
    return bind(parser, lambda x: value(x) if predicate(x) else fail())


def is_not(predicate: Callable[[Any], bool], parser: ParserFn = None) -> Parser[Any]:
    """Succeeds with the value of `parser` (default token()) if `predicate` does not hold."""
    return is_(lambda x: not predicate(x), parser)


def trace(parser: ParserFn, tag_name: str, level: int = logging.DEBUG) -> Parser[Any]:
    """Runs `parser` and logs the state before and after under `tag_name`."""
    check_parser(parser, "trace()")
    def parse(state: State) -> State:
        new_state = invoke(parser, state)
        log.log(level, "%s :: %r => %r", tag_name, state, new_state)
        return new_state
    return Parser(parse, f"trace {tag_name!r}")
