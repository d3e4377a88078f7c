# Core
from .Mona import (
    Parser, State, ParseError, SourcePos, ErrorKind, NO_VALUE,
    MonaError, ParserContractError, HandleClosedError,
    compare_positions, merge_errors, invoke,
)
from .Prim import (
    value, bind, token, eof, fail, label, delay, map_, tag,
    look_ahead, is_, is_not, trace,
)

# Combinators
from .Combinators import (
    and_, or_, maybe, not_, unless, sequence, join, followed_by,
    collect, exactly, split, split_end, between, skip, range_,
)

# Drivers
from .Parse import parse, run_parser
from .ParseAsync import parse_async, AsyncHandle, HandleState
from .Stream import parse_stream

# Strings
from .Char import (
    string, one_of, none_of, alpha_upper, alpha_lower, alpha,
    digit, alphanum, space, spaces, string_of, text,
    trim, trim_left, trim_right,
)

# Numbers
from .Numbers import (
    natural, sign, integer, real, float_,
    cardinal, ordinal, short_ordinal,
)
