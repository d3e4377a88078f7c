from pymona.Prim import delay
from pymona.Combinators import between, or_, split
from pymona.Char import spaces, string
from pymona.Numbers import integer
from pymona.Parse import parse


def sexp():
    return or_(sexp_list(), atom())


def atom():
    return integer()


def sexp_list():
    return between(string("("), string(")"), split(delay(sexp), spaces()))


if __name__ == "__main__":
    source = "(1 23 (345 6) () 789 10)"
    print("Parsing", source, "=>", parse(sexp(), source))
