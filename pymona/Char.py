from typing import Iterable, List, Optional, Union

from .Mona import Parser
from .Prim import ParserFn, bind, fail, is_, label, token, value
from .Combinators import (
    and_, between, collect, followed_by, maybe, not_, or_, range_, sequence, skip,
)

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _as_list(matches: Union[str, Iterable[str]]) -> List[str]:
    return list(matches)


# Core function: Matches an exact string, one token at a time
def string(match_str: str, case_sensitive: bool = True) -> Parser[str]:
    """Parses the exact string `match_str` and returns the matched input."""
    def fold(x: str) -> str:
        return x if case_sensitive else x.lower()
    target = fold(match_str)

    def match_chars():
        matched = []
        for expected in target:
            c = yield is_(lambda x, expected=expected: fold(x) == expected)
            matched.append(c)
        return value("".join(matched))
    return label(sequence(match_chars), f"string matching {{{match_str}}}")


# 1. oneOf: Parses any of the given characters or strings
def one_of(matches: Union[str, Iterable[str]], case_sensitive: bool = True) -> Parser[str]:
    """
    Succeeds if the next input matches one of `matches`. A plain string is
    treated as a list of single characters.
    """
    options = _as_list(matches)
    return or_(*[string(m, case_sensitive) for m in options],
               f"one of {{{','.join(options)}}}")


# 2. noneOf: Fails if the next input matches any of the given characters or strings
def none_of(matches: Union[str, Iterable[str]], case_sensitive: bool = True,
            parser: Optional[ParserFn] = None) -> Parser[str]:
    """
    Succeeds with `parser` (default token()) if the next input does not match
    any of `matches`.
    """
    options = _as_list(matches)
    parser = token() if parser is None else parser
    return label(and_(not_(or_(*[string(m, case_sensitive) for m in options])), parser),
                 f"none of {{{','.join(options)}}}")


# 3. alphaUpper: Parses an uppercase ASCII letter
def alpha_upper() -> Parser[str]:
    return label(range_('A', 'Z'), "uppercase alphabetical character")


# 4. alphaLower: Parses a lowercase ASCII letter
def alpha_lower() -> Parser[str]:
    return label(range_('a', 'z'), "lowercase alphabetical character")


# 5. alpha: Parses an ASCII letter
def alpha() -> Parser[str]:
    return or_(alpha_lower(), alpha_upper(), "alphabetical character")


# 6. digit: Parses a digit in the given base
def digit(base: int = 10) -> Parser[str]:
    """Parses a single digit character valid in `base` (2 to 36)."""
    valid = _DIGITS[:base]
    return label(is_(lambda x: len(x) == 1 and x.lower() in valid), "digit")


# 7. alphanum: Parses a letter or a digit
def alphanum(base: int = 10) -> Parser[str]:
    return label(or_(alpha(), digit(base)), "alphanum")


# 8. space: Parses a whitespace character
def space() -> Parser[str]:
    return label(one_of(" \t\n\r"), "space")


# 9. spaces: Skips one or more whitespace characters
def spaces() -> Parser[str]:
    """Matches one or more whitespace characters and returns a single ' '."""
    return label(and_(space(), skip(space()), value(" ")), "spaces")


# 10. stringOf: Joins a list of strings
def string_of(parser: ParserFn) -> Parser[str]:
    """Concatenates the list of strings produced by `parser`."""
    return bind(parser,
                lambda xs: value("".join(xs)) if isinstance(xs, (list, tuple)) else fail())


# 11. text: Collects matches into a string
def text(parser: Optional[ParserFn] = None, min: int = 0,
         max: Optional[float] = None) -> Parser[str]:
    """collect() for strings: `parser` (default token()) from `min` to `max` times."""
    parser = token() if parser is None else parser
    return string_of(collect(parser, min=min, max=max))


# 12. trim: Ignores whitespace around a parser
def trim(parser: ParserFn) -> Parser[str]:
    return between(maybe(spaces()), maybe(spaces()), parser)


def trim_left(parser: ParserFn) -> Parser[str]:
    return and_(maybe(spaces()), parser)


def trim_right(parser: ParserFn) -> Parser[str]:
    return followed_by(parser, maybe(spaces()))
