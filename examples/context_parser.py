from pymona.Mona import ParseError
from pymona.Prim import token, value
from pymona.Combinators import collect, sequence
from pymona.Char import digit, string, text
from pymona.Parse import parse

# Context-sensitive grammars: { a^n b^n c^n | n >= 1 } and generalizations.
# https://en.wikipedia.org/wiki/Context-sensitive_grammar


def symmetric_simple(a, b, c):
    def abc():
        # n >= 1, and the first run tells us n
        xs = yield text(string(a), min=1)
        count = len(xs)
        ys = yield text(string(b), min=count, max=count)
        zs = yield text(string(c), min=count, max=count)
        return value(xs + ys + zs)
    return sequence(abc)


def symmetric_n(*letters):
    """Any number of single-character letters, each repeated the same number of times."""
    def helper(n, letters):
        def run():
            xs = yield text(string(letters[0]), min=n or 1, max=n)
            more = "" if len(letters) == 1 else (yield helper(len(xs), letters[1:]))
            return value(xs + more)
        return sequence(run)
    return helper(None, letters)


def symmetric(*parsers):
    """Like symmetric_n, for arbitrary parsers. Returns the list of all values."""
    def helper(n, parsers):
        def run():
            xs = yield collect(parsers[0], min=n or 1, max=n)
            more = [] if len(parsers) == 1 else (yield helper(len(xs), parsers[1:]))
            return value(xs + more)
        return sequence(run)
    return helper(None, parsers)


def run_example(parser, source):
    try:
        print(f"parsing {source!r}:", parse(parser, source))
    except ParseError as e:
        print("Parser failure:", e)


if __name__ == "__main__":
    run_example(symmetric_simple("a", "b", "c"), "aaabbbccc")
    run_example(symmetric_n("a", "b", "c", "d"), "aaabbbcccddd")
    run_example(symmetric(string("foo"), string("bar"), digit()), "foofoobarbar11")

    # These fail
    run_example(symmetric_n("a", "b", "c", "d"), "aaabbbcccdd")
    # token() slurps up all the input
    run_example(symmetric(token(), token(), token()), "aaabbbccc")
