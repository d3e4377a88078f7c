import logging
from typing import Any, Optional, Tuple, Union

from .Mona import NO_VALUE, ParseError, SourcePos, State, invoke
from .Combinators import followed_by
from .Prim import ParserFn, eof

log = logging.getLogger("pymona")


def parse(parser: ParserFn,
          input: Any,
          throw_on_error: bool = True,
          allow_trailing: bool = False,
          file_name: Optional[str] = None,
          user_state: Any = None,
          position: Optional[SourcePos] = None,
          return_state: bool = False) -> Union[Any, State, ParseError]:
    """
    Runs `parser` over `input` and returns the result.

    Unless `allow_trailing` is set, the whole input has to be consumed.

    On failure, raises the ParseError, or returns it when `throw_on_error` is
    false. On success, returns the parser's value, or the final State when
    `throw_on_error` is false or `return_state` is set.

    `position` and `user_state` let a parse pick up where a previous one left
    off.
    """
    if not allow_trailing:
        parser = followed_by(parser, eof())
    initial_state = State(NO_VALUE,
                          input,
                          0,
                          position or SourcePos(name=file_name),
                          user_state)
    log.debug("parse: %d items from %s", len(input), initial_state.position)
    state = invoke(parser, initial_state)
    if state.failed:
        log.debug("parse failed: %s", state.error)
        if throw_on_error:
            raise state.error
        return state.error
    if not throw_on_error or return_state:
        return state
    return state.value


def run_parser(parser: ParserFn, input: Any, user_state: Any = None,
               source_name: Optional[str] = None) -> Tuple[Any, Optional[ParseError]]:
    """Parses a prefix of `input`, returning (value, error) with exactly one of them set."""
    result = parse(parser, input,
                   throw_on_error=False,
                   allow_trailing=True,
                   file_name=source_name,
                   user_state=user_state)
    if isinstance(result, ParseError):
        return None, result
    return result.value, None
