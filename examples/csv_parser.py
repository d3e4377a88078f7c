from pymona.Prim import eof, fail, value
from pymona.Combinators import and_, collect, followed_by, maybe, or_, sequence, split, unless
from pymona.Char import none_of, string, text
from pymona.Mona import NO_VALUE
from pymona.Parse import parse

# CSV, after the Parsec chapter of Real World Haskell


def csv():
    def rows():
        lines = yield collect(followed_by(line(), eol()))
        last = yield maybe(unless(eof(), line()))
        yield eof()
        return value(lines if last is NO_VALUE else lines + [last])
    return sequence(rows)


def line():
    return or_(split(cell(), string(",")), value([]))


def cell():
    return or_(quoted_cell(), text(none_of(",\n\r")))


def quoted_cell():
    def quoted():
        yield string('"')
        content = yield text(quoted_char())
        yield or_(string('"'), fail("expected quote at the end of cell"))
        return value(content)
    return sequence(quoted)


def quoted_char():
    return or_(none_of('"'), and_(string('""'), value('"')))


def eol():
    return or_(string("\n\r"), string("\r\n"), string("\n"), string("\r"),
               "end of line")


def parse_csv(source):
    return parse(csv(), source)


if __name__ == "__main__":
    print(parse_csv("l1c1,l1c2\nl2c1,l2c2\n"))
    print(parse_csv('"Product","Price"\n'
                    '"O\'Reilly Socks",10\n'
                    '"Shirt with ""Haskell"" text",20\n'
                    '"Shirt, ""O\'Reilly"" version",20\n'
                    '"Haskell Caps",15'))
