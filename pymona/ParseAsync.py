import logging
import threading
from collections import deque
from enum import Enum
from typing import Any, Callable, Deque, Optional, Tuple

from .Mona import HandleClosedError, ParseError, SourcePos
from .Combinators import collect
from .Parse import parse
from .Prim import ParserFn

log = logging.getLogger("pymona")

# Node-style: callback(None, value) for each result, callback(error, None) on failure.
Callback = Callable[[Optional[BaseException], Any], Any]


class HandleState(Enum):
    OPEN = "open"
    CLOSED = "closed"


class AsyncHandle:
    """
    Feeds input to a parser a chunk at a time.

    Each call to `data()` appends to an internal buffer and applies the parser
    as many times as it matches, reporting every value through the callback.
    A failure that only happened because the buffer ran out is not reported;
    the handle waits for more data instead. `done()` says no more data is
    coming, so such failures are reported from then on.

    One handle owns one buffer. Every method takes the handle's lock while it
    parses, so a handle may be shared between threads, but chunks must still
    arrive in order from a single producer. Callbacks run outside the lock and
    in the order their results were parsed, even when a callback feeds the
    handle again.
    """

    def __init__(self, parser: ParserFn, callback: Callback,
                 file_name: Optional[str] = None,
                 user_state: Any = None,
                 position: Optional[SourcePos] = None):
        self._parser = collect(parser, min=1)
        self._callback = callback
        self._user_state = user_state
        self._position = position or SourcePos(name=file_name)
        self._buffer = ""
        self._state = HandleState.OPEN
        self._failure: Optional[ParseError] = None
        self._pending: Deque[Tuple[Optional[BaseException], Any]] = deque()
        self._dispatching = False
        self._lock = threading.RLock()

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is HandleState.CLOSED

    @property
    def position(self) -> SourcePos:
        """Position of the first item that has not been parsed yet."""
        return self._position

    @property
    def buffer(self) -> str:
        return self._buffer

    def _check_open(self) -> None:
        if self._state is HandleState.CLOSED:
            raise HandleClosedError("handle closed")

    def data(self, chunk: str) -> 'AsyncHandle':
        """Appends `chunk` to the buffer and parses as much of it as possible."""
        with self._lock:
            self._check_open()
            if self._failure is not None:
                log.debug("dropping %d items after failure at %s",
                          len(chunk), self._failure.position)
                return self
            self._buffer += chunk
            while self._exec():
                pass
        self._dispatch()
        return self

    def done(self) -> 'AsyncHandle':
        """Closes the handle and parses whatever is left in the buffer."""
        with self._lock:
            self._check_open()
            self._state = HandleState.CLOSED
            if self._failure is None:
                while self._exec():
                    pass
        self._dispatch()
        return self

    def error(self, err: BaseException) -> 'AsyncHandle':
        """Closes the handle and reports `err` through the callback."""
        with self._lock:
            self._check_open()
            self._state = HandleState.CLOSED
            self._pending.append((err, None))
        self._dispatch()
        return self

    def _dispatch(self) -> None:
        """Calls the callback for every queued result, unless a caller up the stack already is."""
        with self._lock:
            if self._dispatching:
                return
            self._dispatching = True
        try:
            while True:
                with self._lock:
                    if not self._pending:
                        self._dispatching = False
                        return
                    err, val = self._pending.popleft()
                self._callback(err, val)
        except BaseException:
            with self._lock:
                self._dispatching = False
            raise

    def _exec(self) -> bool:
        """One parsing pass over the buffer. Returns True if it made progress."""
        if self.closed and not self._buffer:
            return False
        try:
            state = parse(self._parser, self._buffer,
                          throw_on_error=True,
                          allow_trailing=True,
                          return_state=True,
                          user_state=self._user_state,
                          position=self._position)
        except ParseError as err:
            if err.was_eof and not self.closed:
                log.debug("waiting for more input at %s", err.position)
                return False
            self._failure = err
            self._pending.append((err, None))
            return False
        self._position = state.position
        self._buffer = state.input[state.offset:]
        self._pending.extend((None, val) for val in state.value)
        return True


def parse_async(parser: ParserFn, callback: Callback,
                file_name: Optional[str] = None,
                user_state: Any = None,
                position: Optional[SourcePos] = None) -> AsyncHandle:
    """
    Starts an incremental parse of `parser`, returning the handle used to feed
    it. `callback(None, value)` is called once per successful application of
    `parser`, and `callback(error, None)` once on failure.

        handle = parse_async(token(), lambda err, tok: print(tok))
        handle.data("foobarbaz").done()
    """
    return AsyncHandle(parser, callback,
                       file_name=file_name,
                       user_state=user_state,
                       position=position)
