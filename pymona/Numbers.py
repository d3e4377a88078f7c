from typing import Dict, List

from .Mona import Parser
from .Prim import fail, is_, map_, value
from .Combinators import and_, followed_by, maybe, or_, sequence
from .Char import digit, one_of, spaces, string, text


# 1. natural: Unsigned whole number
def natural(base: int = 10) -> Parser[int]:
    """Parses a number without sign or decimal point."""
    return map_(lambda digits: int(digits, base), text(digit(base), min=1))


# 2. sign: '+' or '-' as 1 or -1
def sign() -> Parser[int]:
    return or_(and_(string('+'), value(1)),
               and_(string('-'), value(-1)))


# 3. integer: Whole number with an optional sign
def integer(base: int = 10) -> Parser[int]:
    """Parses an integer, with an optional + or - sign."""
    def signed_natural():
        sig = yield or_(sign(), value(1))
        num = yield natural(base)
        return value(sig * num)
    return sequence(signed_natural)


# 4. real: Floating point number
def real() -> Parser[float]:
    """
    Parses a decimal number such as '12', '-1.25', '.5', '3.' or '1.25e-3'
    into a float.
    """
    def decimal():
        sig = yield or_(sign(), value(1))
        whole = yield text(digit())
        point = yield maybe(string('.'))
        fraction = (yield text(digit())) if point else ""
        if not whole and not fraction:
            return fail()
        exponent = yield or_(and_(string('e', False), integer()), value(0))
        return value(sig * float(f"{whole or 0}.{fraction or 0}e{exponent}"))
    return sequence(decimal)


float_ = real


# 5. cardinal/ordinal: English number words
CARDINALS: Dict[str, List[str]] = {
    '1-9': ['one', 'two', 'three', 'four', 'five', 'six',
            'seven', 'eight', 'nine'],
    '0-19': ['zero', 'one', 'two', 'three', 'four', 'five', 'six',
             'seven', 'eight', 'nine', 'ten', 'eleven', 'twelve',
             'thirteen', 'fourteen', 'fifteen', 'sixteen', 'seventeen',
             'eighteen', 'nineteen'],
    'tens': ['twenty', 'thirty', 'forty', 'fifty', 'sixty',
             'seventy', 'eighty', 'ninety'],
    'bigger': ['thousand', 'million', 'billion', 'trillion',
               'quadrillion', 'quintillion', 'sextillion', 'septillion',
               'octillion', 'nonillion', 'decillion', 'undecillion',
               'duodecillion', 'tredecillion'],
}

ORDINALS: Dict[str, List[str]] = {
    '1-9': ['first', 'second', 'third', 'fourth', 'fifth', 'sixth',
            'seventh', 'eighth', 'ninth'],
    '0-19': ['zeroeth', 'first', 'second', 'third', 'fourth', 'fifth',
             'sixth', 'seventh', 'eighth', 'ninth', 'tenth', 'eleventh',
             'twelfth', 'thirteenth', 'fourteenth', 'fifteenth',
             'sixteenth', 'seventeenth', 'eighteenth', 'nineteenth'],
    'tens': ['twentieth', 'thirtieth', 'fortieth', 'fiftieth',
             'sixtieth', 'seventieth', 'eightieth', 'ninetieth'],
}


def _longest_first(words: List[str]) -> List[str]:
    # Longer words go first so 'seventeen' is tried before 'seven'.
    return sorted(words, key=len, reverse=True)


def cardinal() -> Parser[int]:
    """Parses English cardinal numbers: parse(cardinal(), 'two thousand') == 2000"""
    return or_(_up_to_very_big(False), "cardinal")


def ordinal() -> Parser[int]:
    """Parses English ordinal numbers: parse(ordinal(), 'one-hundred and fifth') == 105"""
    return or_(_up_to_very_big(True), "ordinal")


def short_ordinal(strict: bool = True) -> Parser[int]:
    """
    Parses a number with an ordinal suffix, like '1st', '2nd', '3d' or '4th'.
    When not `strict`, any of the suffixes is accepted after any number.
    """
    if not strict:
        return followed_by(integer(), one_of(['th', 'st', 'nd', 'rd']))

    def suffixed():
        num = yield natural()
        if num % 100 in (11, 12, 13):
            yield string('th')
        elif num % 10 == 1:
            yield string('st')
        elif num % 10 == 2:
            yield one_of(['nd', 'd'])
        elif num % 10 == 3:
            yield one_of(['rd', 'd'])
        else:
            yield string('th')
        return value(num)
    return sequence(suffixed)


def _separator() -> Parser[str]:
    return or_(spaces(), string('-'))


def _up_to_very_big(ordinal_mode: bool) -> Parser[int]:
    def big_number():
        num_of_bigs = yield _up_to_three_nines(False)
        yield _separator()
        big_unit = yield one_of(_longest_first(CARDINALS['bigger']), False)
        multiplier = 10 ** ((CARDINALS['bigger'].index(big_unit.lower()) + 1) * 3)
        lesser = yield is_(
            lambda x: x is None or x < multiplier,
            or_(and_(or_(and_(string(','), spaces()), _separator()),
                     _up_to_very_big(ordinal_mode)),
                and_(_separator(), string('and'), _separator(),
                     _up_to_three_nines(ordinal_mode)),
                value(None)))
        if lesser is None:
            if ordinal_mode:
                yield string('th')
            lesser = 0
        return value(num_of_bigs * multiplier + lesser)
    return or_(sequence(big_number), _up_to_three_nines(ordinal_mode))


def _up_to_three_nines(ordinal_mode: bool) -> Parser[int]:
    return or_(_hundreds(_up_to_ninety_nine(ordinal_mode), ordinal_mode),
               _up_to_ninety_nine(ordinal_mode))


def _hundreds(rest: Parser[int], ordinal_mode: bool) -> Parser[int]:
    def hundreds():
        num_of_hundreds = yield _one_through_nine(False)
        yield _separator()
        yield string('hundred')
        small = yield or_(and_(_separator(),
                               maybe(and_(string('and'), _separator())),
                               rest),
                          value(None))
        if small is None:
            if ordinal_mode:
                yield string('th')
            small = 0
        return value(num_of_hundreds * 100 + small)
    return sequence(hundreds)


def _up_to_ninety_nine(ordinal_mode: bool) -> Parser[int]:
    def tens_and_ones():
        ten = yield one_of(_longest_first(CARDINALS['tens']), False)
        tens = (CARDINALS['tens'].index(ten.lower()) + 2) * 10
        ones = yield or_(and_(_separator(), _one_through_nine(ordinal_mode)),
                         value(0))
        return value(tens + ones)
    alternatives = [sequence(tens_and_ones)]
    if ordinal_mode:
        alternatives.append(map_(lambda x: (ORDINALS['tens'].index(x.lower()) + 2) * 10,
                                 one_of(_longest_first(ORDINALS['tens']), False)))
    alternatives.append(_up_to_nineteen(ordinal_mode))
    return or_(*alternatives)


def _one_through_nine(ordinal_mode: bool) -> Parser[int]:
    words = (ORDINALS if ordinal_mode else CARDINALS)['1-9']
    return map_(lambda x: words.index(x.lower()) + 1,
                one_of(_longest_first(words), False))


def _up_to_nineteen(ordinal_mode: bool) -> Parser[int]:
    words = (ORDINALS if ordinal_mode else CARDINALS)['0-19']
    return map_(lambda x: words.index(x.lower()),
                one_of(_longest_first(words), False))
