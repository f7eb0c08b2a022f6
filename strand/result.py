"""
Defines the `Result` dataclass, holding the `Success` or `Failure` output by parsers.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Generic, Iterator, Optional, Tuple, Type, TypeVar

from pytypeclass import Monad, MonadPlus

from strand.data_structures import Input
from strand.errors import ParseError, ZeroError

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")
B = TypeVar("B")


@dataclass(frozen=True)
class Success(Generic[A_co]):
    """
    Output of a parser that matched its input.

    Parameters
    ----------
    result : A
        The value produced by the parser
    remaining : Input
        What remains of the input after the match
    """

    result: A_co
    remaining: Input


@dataclass(frozen=True)
class Failure:
    """
    Output of a parser that did not match. ``input`` is the input at the point the
    failure is attributed to.
    """

    error: ParseError
    input: Input

    @property
    def message(self) -> str:
        return str(self.error)

    def rewrap(self, input: Input) -> "Failure":
        return replace(self, input=input)


@dataclass
class Result(MonadPlus[A_co]):
    """
    Exactly one of a :py:class:`Success` or a :py:class:`Failure`. Unpacks into the pair
    ``(success, failure)``:

    >>> success, failure = Result.return_(Success("a", Input("")))
    >>> success.result, failure
    ('a', None)
    >>> success, failure = Result.zero()
    >>> success, failure.message
    (None, 'zero')
    """

    get: "Success[A_co] | Failure"

    def __iter__(self) -> Iterator["Optional[Success[A_co]] | Optional[Failure]"]:
        yield from self.unpack()

    def __or__(self, other: "Result[B]") -> "Result[A_co | B]":  # type: ignore[override]
        """
        Keeps the first success, otherwise ``other``.

        >>> a = Result.return_(Success("a", Input("")))
        >>> (Result.zero() | a) == a
        True
        >>> (a | Result.zero()) == a
        True
        """
        return self if self.ok else other

    def __ge__(self, f: Callable[[Success[A_co]], Monad[B]]) -> "Result[B]":  # type: ignore[override]
        return self.bind(f)

    def bind(self, f: Callable[[Success[A_co]], Monad[B]]) -> "Result[B]":  # type: ignore[override]
        """
        Applies ``f`` to the success, short circuiting on failures.
        """
        x = self.get
        if isinstance(x, Failure):
            return Result(x)
        y = f(x)
        assert isinstance(y, Result), y
        return y

    def map_failure(self, f: Callable[[Failure], Failure]) -> "Result[A_co]":
        x = self.get
        if isinstance(x, Failure):
            return Result(f(x))
        return self

    @property
    def ok(self) -> bool:
        return isinstance(self.get, Success)

    def rewrap(self, input: Input) -> "Result[A_co]":
        """
        Attributes a failure to ``input`` without changing its error.
        """
        return self.map_failure(lambda failure: failure.rewrap(input))

    def unpack(self) -> "Tuple[Optional[Success[A_co]], Optional[Failure]]":
        x = self.get
        if isinstance(x, Failure):
            return None, x
        return x, None

    def unwrap(self) -> "Success[A_co]":
        """
        Returns the success or raises the failure's error.

        >>> Result.zero().unwrap()
        Traceback (most recent call last):
        ...
        strand.errors.ZeroError: zero
        """
        x = self.get
        if isinstance(x, Failure):
            raise x.error
        return x

    @classmethod
    def return_(cls: "Type[Result[A]]", a: "Success[A]") -> "Result[A]":  # type: ignore[override]
        return Result(a)

    @classmethod
    def zero(
        cls: "Type[Result[A]]",
        error: Optional[ParseError] = None,
        input: Input = Input(""),
    ) -> "Result[A]":
        return Result(Failure(ZeroError("zero") if error is None else error, input))
