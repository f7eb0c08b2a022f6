"""
Defines :py:class:`Input <strand.data_structures.Input>`, the text that remains to be
parsed, and :py:class:`Results <strand.data_structures.Results>`, the flat list that
sequenced parsers combine their results into.
"""
from __future__ import annotations

import os
import typing
from dataclasses import dataclass
from typing import Callable, Generator, Iterable, Iterator, Type, TypeVar, overload

from pytypeclass import Monad, MonadPlus

from strand.errors import ExpectedError

MAX_GOT = int(os.environ.get("STRAND_MAX_GOT", 16))

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")


class Ignore:
    """
    Type of :py:data:`IGNORE`. Results equal to it are dropped when results are combined.
    """

    def __repr__(self) -> str:
        return "IGNORE"


class EndOfFile:
    """
    Type of :py:data:`END_OF_FILE`, the result of matching the end of the input.
    """

    def __repr__(self) -> str:
        return "END_OF_FILE"


IGNORE = Ignore()
END_OF_FILE = EndOfFile()


@dataclass(frozen=True)
class Input(typing.Sequence):
    """
    What remains to be parsed. Slicing produces a new ``Input``; nothing mutates one in place.

    >>> i = Input("hello you")
    >>> i[5:]
    Input(get=' you')
    >>> len(i)
    9
    >>> i[5:] == Input(" you")
    True
    """

    get: "str | bytes"

    @overload
    def __getitem__(self, i: int) -> "str | int":
        ...

    @overload
    def __getitem__(self, i: slice) -> "Input":
        ...

    def __getitem__(self, i: "int | slice") -> "str | int | Input":
        if isinstance(i, int):
            return self.get[i]
        return Input(self.get[i])

    def __len__(self) -> int:
        return len(self.get)

    def expected(self, msg: str, *args: object) -> ExpectedError:
        """
        Wraps an expectation with a snippet of this input.

        >>> str(Input("way too long so will be truncated").expected("expected string %s", "hi"))
        'expected string hi, got way too long so ...'
        """
        expected = msg % args if args else msg
        got = self.snippet()
        return ExpectedError(f"{expected}, got {got}", expected=expected, got=got)

    def snippet(self) -> str:
        got = self.get[:MAX_GOT]
        if isinstance(got, bytes):
            got = got.decode(errors="backslashreplace")
        if len(self.get) > MAX_GOT:
            got += "..."
        return got


def _flatten(results: Iterable) -> Iterator:
    for r in results:
        if isinstance(r, Results):
            yield from r.get
        elif not isinstance(r, Ignore):
            yield r


@dataclass
class Results(MonadPlus[A_co], typing.Sequence[A_co]):
    """
    The combined results of sequenced parsers. Nested ``Results`` are spliced in place
    and :py:data:`IGNORE` markers are dropped, so a ``Results`` is always flat:

    >>> Results(["a", Results(["b", IGNORE]), IGNORE, "c"])
    Results(get=['a', 'b', 'c'])
    >>> Results(["a"]) + Results(["b"])
    Results(get=['a', 'b'])
    >>> Results([1, 2]) >= (lambda x: Results([x, -x]))
    Results(get=[1, -1, 2, -2])
    """

    get: typing.Sequence[A_co]

    def __post_init__(self):
        self.get = list(_flatten(self.get))

    @overload
    def __getitem__(self, i: int) -> "A_co":
        ...

    @overload
    def __getitem__(self, i: slice) -> "Results[A_co]":
        ...

    def __getitem__(self, i: "int | slice") -> "A_co | Results[A_co]":
        if isinstance(i, int):
            return self.get[i]
        return Results(self.get[i])

    def __iter__(self) -> Generator[A_co, None, None]:
        yield from self.get

    def __len__(self) -> int:
        return len(self.get)

    def __or__(self, other: "Results[A]") -> "Results[A_co | A]":  # type: ignore[override]
        return Results([self, other])

    def __add__(self, other: "Results[A]") -> "Results[A_co | A]":
        return self | other

    def bind(self, f: Callable[[A_co], Monad[A]]) -> "Results[A]":  # type: ignore[override]
        def g() -> Iterator[Results[A]]:
            for a in self:
                y = f(a)
                assert isinstance(y, Results), y
                yield y

        return Results(list(g()))

    @staticmethod
    def return_(a: A) -> "Results[A]":  # type: ignore[override]
        """
        >>> Results.return_(1)
        Results(get=[1])
        """
        return Results([a])

    @classmethod
    def zero(cls: Type["Results[A_co]"]) -> "Results[A_co]":
        return Results([])


def combine_results(left: object, right: object) -> Results:
    """
    Flattens two results into one :py:class:`Results`, ``left`` first.

    >>> combine_results(Results(["hello", IGNORE]), " there")
    Results(get=['hello', ' there'])
    >>> combine_results(IGNORE, IGNORE)
    Results(get=[])
    """
    return Results([left, right])
