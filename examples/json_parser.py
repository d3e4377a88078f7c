from pymona.Prim import delay, map_, token, value
from pymona.Combinators import and_, between, exactly, or_, sequence, split
from pymona.Char import digit, none_of, string, text, trim
from pymona.Numbers import real
from pymona.Parse import parse

# JSON without eval(), with readable error messages.
# Grammar from http://www.json.org/


def json_value():
    return trim(or_(json_object(), json_array(), boolean(), null(), json_string(), number()))


def json_object():
    # { "key": value, ... }
    def key_and_value():
        key = yield json_string()
        yield trim(string(":"))
        val = yield json_value()
        return value((key, val))

    return map_(dict, between(trim(string("{")),
                              trim(string("}")),
                              split(sequence(key_and_value), trim(string(",")))))


def json_array():
    # [ value, value, ... ]
    return between(trim(string("[")),
                   trim(string("]")),
                   split(delay(json_value), trim(string(","))))


def boolean():
    return map_(lambda s: s == "true", or_(string("true"), string("false"), "boolean"))


def null():
    return or_(and_(string("null"), value(None)), "null")


def number():
    return real()


ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t"}


def escaped():
    def escape():
        yield string("\\")
        esc = yield token()
        if esc == "u":
            return unicode_hex()
        return value(ESCAPES.get(esc, esc))
    return sequence(escape)


def unicode_hex():
    return map_(lambda digits: chr(int("".join(digits), 16)), exactly(digit(16), 4))


def json_string():
    return between(string('"'),
                   string('"').label("closing double-quote"),
                   text(or_(escaped(), none_of('"'))))


def parse_json(source):
    return parse(json_value(), source)


if __name__ == "__main__":
    import json

    txt = json.dumps([{"foo": 1, "bar": "baz", "quux": ["a", -5, {"x": 1}]}])
    print("Parsing:")
    print(txt)
    print("=>")
    print(parse_json(txt))
