import codecs
import logging
from collections import deque
from typing import Any, Deque, Iterable, Iterator, Optional, Union

from .Mona import SourcePos
from .ParseAsync import parse_async
from .Prim import ParserFn

log = logging.getLogger("pymona")

Chunk = Union[str, bytes]


def _chunks(source: Any, chunk_size: int) -> Iterator[Chunk]:
    if hasattr(source, 'read'):
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                return
            yield chunk
    else:
        yield from source


def parse_stream(parser: ParserFn,
                 source: Union[Iterable[Chunk], Any],
                 file_name: Optional[str] = None,
                 encoding: str = "utf-8",
                 chunk_size: int = 8192,
                 position: Optional[SourcePos] = None) -> Iterator[Any]:
    """
    Parses `parser` repeatedly over a stream and yields each value as soon as
    it is complete.

    `source` is either an iterable of text or byte chunks, or a file object
    which is read `chunk_size` at a time. Bytes are decoded with `encoding`,
    even when a character is split between two chunks.

    A parse failure is raised as ParseError from the generator.

        with open("data.csv", encoding="utf-8") as f:
            for row in parse_stream(csv_line(), f):
                ...
    """
    results: Deque[Any] = deque()
    failures: Deque[BaseException] = deque()

    def on_parse(err: Optional[BaseException], parsed: Any) -> None:
        if err is not None:
            failures.append(err)
        else:
            results.append(parsed)

    handle = parse_async(parser, on_parse, file_name=file_name, position=position)
    decoder = codecs.getincrementaldecoder(encoding)()

    def drain() -> Iterator[Any]:
        while results:
            yield results.popleft()
        if failures:
            raise failures.popleft()

    for chunk in _chunks(source, chunk_size):
        if isinstance(chunk, bytes):
            chunk = decoder.decode(chunk)
        log.debug("stream chunk of %d characters", len(chunk))
        handle.data(chunk)
        yield from drain()
    tail = decoder.decode(b"", final=True)
    if tail:
        handle.data(tail)
        yield from drain()
    handle.done()
    yield from drain()
