from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Generic, Optional, Tuple, TypeVar, Union

T = TypeVar('T')  # Generic type for parser results
U = TypeVar('U')


class MonaError(Exception):
    """Base class for errors caused by misusing the library (not by bad input)."""


class ParserContractError(MonaError, TypeError):
    """A combinator received something that is not a parser, or a parser broke its contract."""


class HandleClosedError(MonaError, RuntimeError):
    """An incremental parsing handle was used after done() or error()."""


class _NoValue:
    """The value of a parser that succeeded without producing anything."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_VALUE"

    def __reduce__(self):
        return (_NoValue, ())


NO_VALUE = _NoValue()


@dataclass(frozen=True)
class SourcePos:
    """Represents the current position in the input stream."""
    line: int = 1
    column: int = 0
    name: Optional[str] = field(default=None, compare=False)

    def update(self, token: Any) -> 'SourcePos':
        """Update position based on a single token (e.g., character)."""
        if token == '\n':
            return SourcePos(self.line + 1, 0, self.name)
        return SourcePos(self.line, self.column + 1, self.name)

    def advance(self, tokens) -> 'SourcePos':
        """Position after consuming every item of `tokens`."""
        if isinstance(tokens, str):
            newlines = tokens.count('\n')
            if not newlines:
                return SourcePos(self.line, self.column + len(tokens), self.name)
            tail = len(tokens) - tokens.rfind('\n') - 1
            return SourcePos(self.line + newlines, tail, self.name)
        pos = self
        for tok in tokens:
            pos = pos.update(tok)
        return pos

    def __str__(self) -> str:
        if self.name:
            return f"{self.name}, line {self.line}, column {self.column}"
        return f"line {self.line}, column {self.column}"


def compare_positions(pos1: SourcePos, pos2: SourcePos) -> str:
    """Compares two positions by line, then column. Returns 'lt', 'eq' or 'gt'."""
    key1 = (pos1.line, pos1.column)
    key2 = (pos2.line, pos2.column)
    if key1 < key2:
        return 'lt'
    if key1 > key2:
        return 'gt'
    return 'eq'


class ErrorKind(str, Enum):
    FAILURE = "failure"
    EXPECTATION = "expectation"
    EOF = "eof"


class ParseError(Exception):
    """
    Information about a parsing failure: where it happened, what was expected,
    and whether it happened because the input ran out.

    Inside the combinators a ParseError is an ordinary value carried by a failed
    State. Only `parse()` raises it.
    """

    def __init__(self,
                 position: SourcePos,
                 messages: Tuple[str, ...] = (),
                 kind: Union[ErrorKind, str] = ErrorKind.FAILURE,
                 was_eof: bool = False):
        self.position = position
        self.messages = tuple(messages)
        self.kind = ErrorKind(kind)
        self.was_eof = was_eof
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return f"({self.position}) " + "\n".join(self.messages)

    def with_messages(self, messages: Tuple[str, ...], kind: Union[ErrorKind, str]) -> 'ParseError':
        """A copy of this error with its messages replaced."""
        return ParseError(self.position, messages, kind, self.was_eof)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (f"ParseError({self.position!r}, {self.messages!r}, "
                f"{self.kind.value!r}, was_eof={self.was_eof})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.position == other.position
                and self.messages == other.messages
                and self.kind == other.kind
                and self.was_eof == other.was_eof)

    def __hash__(self) -> int:
        return hash((self.position, self.messages, self.kind, self.was_eof))


def merge_errors(err1: Optional[ParseError], err2: Optional[ParseError]) -> Optional[ParseError]:
    """
    Combines two failures into one.

    The failure further into the input wins. At the same position the message
    lists are joined (first occurrence kept), and the result is an eof failure
    if either side was.
    """
    if err1 is None or (not err1.messages and err2 is not None and err2.messages):
        return err2
    if err2 is None or (not err2.messages and err1.messages):
        return err1
    order = compare_positions(err1.position, err2.position)
    if order == 'gt':
        return err1
    if order == 'lt':
        return err2
    messages = tuple(dict.fromkeys(err1.messages + err2.messages))
    return ParseError(err2.position, messages, err2.kind, err1.was_eof or err2.was_eof)


@dataclass(frozen=True)
class State(Generic[T]):
    """Parser state: current value, full input, cursor, position, user state and error."""
    value: Any
    input: Any
    offset: int = 0
    position: SourcePos = field(default_factory=SourcePos)
    user_state: Any = None
    error: Optional[ParseError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def remaining(self):
        """The part of the input that has not been consumed yet."""
        return self.input[self.offset:]

    def replace(self, **changes) -> 'State':
        return replace(self, **changes)

    def succeed(self, value: Any) -> 'State':
        return replace(self, value=value, error=None)


def invoke(parser: Callable[[State], State], state: State) -> State:
    """Runs `parser` on `state`, checking that both sides keep the parser contract."""
    if not callable(parser):
        raise ParserContractError(f"Parser needs to be a function, but got {parser!r} instead")
    if not isinstance(state, State):
        raise ParserContractError("Expected state to be a State")
    new_state = parser(state)
    if not isinstance(new_state, State):
        raise ParserContractError("Parsers must return a State object")
    return new_state


def check_parser(parser: Any, where: str) -> None:
    if not callable(parser):
        raise ParserContractError(f"{where}: parser needs to be a function, but got {parser!r} instead")


class Parser(Generic[T]):
    """A parser: a function from State to State, with combinator sugar."""
    def __init__(self, parse_fn: Callable[[State], State], name: Optional[str] = None):
        self.parse_fn = parse_fn
        self.name = name

    def __call__(self, state: State) -> State:
        return self.parse_fn(state)

    def __repr__(self) -> str:
        return f"<Parser {self.name or getattr(self.parse_fn, '__qualname__', '?')}>"

    # Monadic bind (>>=)
    def bind(self, f: Callable[[T], Callable[[State], State]]) -> 'Parser[U]':
        from .Prim import bind
        return bind(self, f)

    def __rshift__(self, f: Callable[[T], Callable[[State], State]]) -> 'Parser[U]':
        return self.bind(f)

    # Alternative (<|>)
    def __or__(self, other: Callable[[State], State]) -> 'Parser[Any]':
        from .Combinators import or_
        return or_(self, other)

    # Sequence (*>), keeps the right value
    def __gt__(self, other: Callable[[State], State]) -> 'Parser[U]':
        from .Combinators import and_
        return and_(self, other)

    # Sequence (<*), keeps the left value
    def __lt__(self, other: Callable[[State], State]) -> 'Parser[T]':
        from .Combinators import followed_by
        return followed_by(self, other)

    def map(self, f: Callable[[T], U]) -> 'Parser[U]':
        from .Prim import map_
        return map_(f, self)

    # Label (<?>)
    def label(self, msg: str) -> 'Parser[T]':
        from .Prim import label
        return label(self, msg)
