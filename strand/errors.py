"""
Defines errors which can be carried by a :py:class:`Failure <strand.result.Failure>`.

Errors are ordinary values: parsers return them inside a ``Failure`` and only
:py:meth:`Result.unwrap <strand.result.Result.unwrap>` raises them.
"""
from dataclasses import dataclass


@dataclass
class ParseError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ExpectedError(ParseError):
    """
    A leaf did not recognize the start of its input.

    >>> str(ExpectedError("expected end of file, got  you", "expected end of file", " you"))
    'expected end of file, got  you'
    """

    expected: str
    got: str


@dataclass
class ExplicitError(ParseError):
    pass


@dataclass
class ZeroError(ParseError):
    pass
