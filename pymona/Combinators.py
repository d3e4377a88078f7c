import inspect
import math
import operator
from functools import reduce
from typing import Any, Callable, List, Optional

from .Mona import (
    Parser, ParserContractError, State, check_parser, invoke, merge_errors,
)
from .Prim import ParserFn, bind, fail, label, token, value


def _check_all(parsers, where: str) -> None:
    if not parsers:
        raise ParserContractError(f"{where} requires at least one parser")
    for p in parsers:
        check_parser(p, where)


def _bounds(min: Optional[int], max: Optional[float], where: str):
    lo = min or 0
    hi = math.inf if max is None else max
    if lo > hi:
        raise ParserContractError(f"{where}: min must be less than or equal to max")
    return lo, hi


# 1. and_: Runs parsers one after the other, keeping the last value
def and_(*parsers: ParserFn) -> Parser[Any]:
    """
    Succeeds if all the parsers succeed, in order. Returns the state of the
    last one, or the first failure.
    """
    _check_all(parsers, "and_()")
    def parse(state: State) -> State:
        res = state
        for p in parsers:
            res = invoke(p, res)
            if res.failed:
                break
        return res
    return Parser(parse, "and")


# 2. or_: Tries parsers in order until one succeeds
def or_(*parsers: Any) -> Parser[Any]:
    """
    Tries each parser against the same incoming state and returns the first
    success. If they all fail, their errors are merged into one.

    If the last argument is a string, the merged failure is replaced by
    'expected <that string>'.
    """
    parsers = list(parsers)
    label_msg = parsers.pop() if parsers and isinstance(parsers[-1], str) else None
    _check_all(parsers, "or_()")
    def parse(state: State) -> State:
        errors = []
        for p in parsers:
            res = invoke(p, state)
            if not res.failed:
                return res
            errors.append(res.error)
        return res.replace(error=reduce(merge_errors, errors))
    combined = Parser(parse, "or")
    return label(combined, label_msg) if label_msg else combined


# 3. maybe: Optional parser, never fails
def maybe(parser: ParserFn) -> Parser[Any]:
    """Returns the value of `parser`, or NO_VALUE without consuming input if it fails."""
    return or_(parser, value())


# 4. not_: Negative lookahead
def not_(parser: ParserFn) -> Parser[bool]:
    """Succeeds with True, consuming nothing, if `parser` fails. Fails otherwise."""
    check_parser(parser, "not_()")
    def parse(state: State) -> State:
        if invoke(parser, state).failed:
            return value(True)(state)
        return fail("expected parser to fail", "expectation")(state)
    return Parser(parse, "not")


# 5. unless: Guards a sequence with a negative lookahead
def unless(parser: ParserFn, *more: ParserFn) -> Parser[Any]:
    """and_(not_(parser), *more)"""
    return and_(not_(parser), *more)


# 6. sequence: Do-notation over a generator
def sequence(builder: Callable[[], Any]) -> Parser[Any]:
    """
    Lets a grammar be written as straight-line code. `builder` is a generator
    function: every `yield p` runs parser `p` on the current state and evaluates
    to its value. The generator must `return` a parser, which produces the
    final result.

    If a yielded parser fails, the generator is closed right there (nothing
    after that `yield` runs) and the failure is the result.

        @sequence
        def pair():
            key = yield token()
            yield string("=")
            val = yield token()
            return value((key, val))

    A builder that is a plain function is called once per parse and its
    return value is used as the final parser.

    Either way `builder` is called with no arguments.
    """
    if not callable(builder):
        raise ParserContractError(f"sequence() expects a function, got {builder!r}")
    try:
        inspect.signature(builder).bind()
    except TypeError:
        raise ParserContractError(
            f"sequence() builder must take no arguments, got {builder!r}") from None
    except ValueError:
        # no signature available (some builtins); calling it will tell
        pass

    def parse(state: State) -> State:
        steps = builder()
        if not inspect.isgenerator(steps):
            return _finish(steps, state)
        current = state
        sent = None
        while True:
            try:
                step = steps.send(sent)
            except StopIteration as stop:
                return _finish(stop.value, current)
            if not callable(step):
                steps.close()
                raise ParserContractError(f"sequence() can only yield parsers, got {step!r}")
            current = invoke(step, current)
            if current.failed:
                steps.close()
                return current
            sent = current.value
    return Parser(parse, getattr(builder, '__name__', "sequence"))


def _finish(ret: Any, state: State) -> State:
    if not callable(ret):
        raise ParserContractError(f"sequence function must return a parser, got {ret!r}")
    new_state = ret(state)
    if not isinstance(new_state, State):
        raise ParserContractError("sequence function must return a parser")
    return new_state


# 7. join: Runs parsers in order, collecting all their values
def join(*parsers: ParserFn) -> Parser[List[Any]]:
    """Succeeds with the list of values of all the parsers, run in order."""
    _check_all(parsers, "join()")
    def parse(state: State) -> State:
        current = state
        results = []
        for p in parsers:
            current = invoke(p, current)
            if current.failed:
                return current
            results.append(current.value)
        return current.succeed(results)
    return Parser(parse, "join")


# 8. followed_by: Keeps the value of the first parser
def followed_by(parser: ParserFn, *more: ParserFn) -> Parser[Any]:
    """Returns the value of `parser` if it and all of `more` succeed, in order."""
    rest = and_(*more)
    return bind(parser, lambda result: bind(rest, lambda _: value(result)))


# 9. collect: Bounded greedy repetition
def collect(parser: ParserFn, min: int = 0, max: Optional[float] = None) -> Parser[List[Any]]:
    """
    Applies `parser` as many times as it succeeds, up to `max`, and returns the
    list of values. If fewer than `min` succeed, the failure of the last
    attempt is returned as is.
    """
    check_parser(parser, "collect()")
    lo, hi = _bounds(min, max, "collect()")
    unbounded = hi == math.inf
    def parse(state: State) -> State:
        results = []
        prev = state
        while len(results) < hi:
            current = invoke(parser, prev)
            if current.failed:
                if len(results) < lo:
                    return current
                break
            if unbounded and current.offset == prev.offset:
                raise ParserContractError(
                    "collect(): applied parser succeeded without consuming input")
            results.append(current.value)
            prev = current
        return prev.succeed(results)
    return Parser(parse, "collect")


# 10. exactly: Parses n occurrences of a parser
def exactly(parser: ParserFn, n: int) -> Parser[List[Any]]:
    return collect(parser, min=n, max=n)


# 11. split: Values separated by a separator
def split(parser: ParserFn, separator: ParserFn,
          min: int = 0, max: Optional[float] = None) -> Parser[List[Any]]:
    """
    Collects values of `parser` separated by `separator`. With `min` 0, no match
    at all gives an empty list.
    """
    _bounds(min, max, "split()")
    if max is not None and max < 1:
        return value([])
    if not min:
        return or_(split(parser, separator, min=1, max=max), value([]))
    rest = collect(and_(separator, parser),
                   min=min - 1,
                   max=None if max is None else max - 1)

    def split_items():
        first = yield parser
        others = yield rest
        return value([first] + others)
    return sequence(split_items)


# 12. split_end: Values each ended by a separator
def split_end(parser: ParserFn, separator: ParserFn, enforce_end: bool = True,
              min: int = 0, max: Optional[float] = None) -> Parser[List[Any]]:
    """
    Collects values of `parser`, each followed by `separator`. With
    `enforce_end=False` the last value may come without a separator.
    """
    if enforce_end:
        return collect(followed_by(parser, separator), min=min, max=max)
    check_parser(parser, "split_end()")
    check_parser(separator, "split_end()")
    lo, hi = _bounds(min, max, "split_end()")
    unbounded = hi == math.inf
    def parse(state: State) -> State:
        results = []
        current = state
        while len(results) < hi:
            item = invoke(parser, current)
            if item.failed:
                if len(results) < lo:
                    return item
                break
            ended = invoke(separator, item)
            results.append(item.value)
            if ended.failed:
                # An unterminated value can only be the last one.
                if len(results) < lo:
                    return ended
                current = item
                break
            if unbounded and ended.offset == current.offset:
                raise ParserContractError(
                    "split_end(): applied parsers succeeded without consuming input")
            current = ended
        return current.succeed(results)
    return Parser(parse, "split_end")


# 13. between: Parses an opening parser, a main parser, and a closing parser
def between(open: ParserFn, close: ParserFn, parser: ParserFn) -> Parser[Any]:
    """Parses `open`, then `parser`, then `close`, returning the value of `parser`."""
    return and_(open, followed_by(parser, close))


# 14. skip: Consumes as many matches as possible and drops them
def skip(parser: ParserFn) -> Parser[Any]:
    return and_(collect(parser), value())


# 15. range_: Value bounded by two others
def range_(start: Any, end: Any, parser: ParserFn = None,
           predicate: Callable[[Any, Any], bool] = operator.le) -> Parser[Any]:
    """
    Succeeds with the value of `parser` (default token()) if
    predicate(start, v) and predicate(v, end) both hold.
    """
    parser = token() if parser is None else parser
    checked = bind(parser,
                   lambda result: value(result)
                   if predicate(start, result) and predicate(result, end)
                   else fail())
    return label(checked, f"value between {{{start}}} and {{{end}}}")
