from strand.data_structures import END_OF_FILE, IGNORE, Input, Results, combine_results
from strand.errors import ExpectedError, ExplicitError, ParseError, ZeroError
from strand.parsers import (
    EOF,
    Parser,
    any_,
    any_of,
    concat,
    fail,
    regexp,
    return_,
    satisfy,
    str_case_cmp,
    string,
)
from strand.result import Failure, Result, Success

__all__ = [
    "Parser",
    "EOF",
    "any_",
    "any_of",
    "concat",
    "fail",
    "regexp",
    "return_",
    "satisfy",
    "str_case_cmp",
    "string",
    "Input",
    "Results",
    "combine_results",
    "IGNORE",
    "END_OF_FILE",
    "Result",
    "Success",
    "Failure",
    "ParseError",
    "ExpectedError",
    "ExplicitError",
    "ZeroError",
]
