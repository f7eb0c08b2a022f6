"""
Defines parsing functions and the
:py:class:`Parser <strand.parsers.Parser>`
class that they instantiate.
"""
# pyright: reportGeneralTypeIssues=false
from __future__ import annotations

import os
import re
from dataclasses import dataclass, replace
from functools import reduce
from typing import Any, Callable, List, Optional, TypeVar

from pytypeclass import Monad, MonadPlus

from strand.data_structures import END_OF_FILE, IGNORE, Input, Results, combine_results
from strand.errors import ExplicitError, ParseError, ZeroError
from strand.result import Failure, Result, Success

PRINTING = os.environ.get("STRAND_PRINTING", "1") != "0"

EXPECTED_END_OF_FILE = "expected end of file"
EXPECTED_PATTERN = "expected pattern: %s"
EXPECTED_STRING = "expected string %s"

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")
B = TypeVar("B")

Predicate = Callable[[Input], int]


@dataclass
class Parser(MonadPlus[A_co]):
    """
    Main class powering the combinators. Wraps a function from
    :py:class:`Input <strand.data_structures.Input>` to
    :py:class:`Result <strand.result.Result>`.
    """

    f: Callable[[Input], Result[A_co]]

    def __ge__(self, f: Callable[[A_co], Monad[B]]) -> "Parser[Results]":  # type: ignore[override]
        """Sugar for :py:meth:`Parser.bind <strand.parsers.Parser.bind>`."""
        return self.bind(f)

    def __or__(self, other: "Parser[B]") -> "Parser[A_co | B]":  # type: ignore[override]
        """
        Tries ``self``. If it fails, tries ``other`` against the same input.

        >>> p = EOF | (string("hello") >> EOF)
        >>> p.parse("hello").ok
        True
        >>> p.parse("").ok
        True
        >>> p.parse("hello there").get.message
        'expected end of file, got  there'
        """

        def f(i: Input) -> Result["A_co | B"]:
            result = self.parse(i)
            if result.ok:
                return result
            return other.parse(i)

        return Parser(f)

    def __rshift__(self, other: "Parser[B]") -> "Parser[Results]":
        """
        Applies parsers in sequence and flattens their results. If either parser fails,
        the whole thing fails.

        >>> p = string("hello") >> EOF
        >>> p.parse("hello")
        Result(get=Success(result=Results(get=['hello', END_OF_FILE]), remaining=Input(get='')))
        >>> p.parse("hell no").get.message
        'expected string hello, got hell no'
        >>> p.parse("hello you").get.message
        'expected end of file, got  you'
        """
        return self.bind(lambda _: other)

    def bind(self, f: Callable[[A_co], Monad[B]]) -> "Parser[Results]":  # type: ignore[override]
        """
        Returns a new parser that

        1. applies ``self``;
        2. if this succeeds, applies ``f`` to the result to choose the next parser;
        3. applies that parser to the remaining input and flattens both results.

        If the second parser fails, the failure is attributed to the input at the start
        of the bind.

        >>> def greet(word):
        ...     return string(" there!") if word == "hello" else fail("exploded")
        ...
        >>> p = any_of(string("hello"), string("explode")) >= greet
        >>> p.parse("hello there!").get.result
        Results(get=['hello', ' there!'])
        >>> p.parse("explode").get
        Failure(error=ExplicitError(message='exploded'), input=Input(get='explode'))
        """

        def g(i: Input) -> Result[Results]:
            def h(left: Success[A_co]) -> Result[Results]:
                p = f(left.result)
                assert isinstance(p, Parser), p

                def k(right: Success[Any]) -> Result[Results]:
                    result = combine_results(left.result, right.result)
                    return Result.return_(Success(result, right.remaining))

                return (p.parse(left.remaining) >= k).rewrap(i)

            return self.parse(i) >= h

        return Parser(g)

    def capture(self, f: Callable[[A_co], Any]) -> "Parser[A_co]":
        """
        Hands each successful result to ``f`` without changing it.

        >>> seen = []
        >>> string("a").capture(seen.append).zero_or_more().parse("aab").get.result
        Results(get=['a', 'a'])
        >>> seen
        ['a', 'a']
        """

        def g(a: A_co) -> A_co:
            f(a)
            return a

        return self.map(g)

    def combine(self, f: Callable[..., B]) -> "Parser[B]":
        """
        Passes the combined results to ``f`` as separate arguments, or the single result
        if nothing was combined.

        >>> p = (string("hello ") >> string("there") >> string("!")).combine(
        ...     lambda *words: "->".join(words)
        ... )
        >>> p.parse("hello there!").get.result
        'hello ->there->!'
        >>> string("hello").combine(lambda word: "{%s}" % word).parse("hello").get.result
        '{hello}'
        """

        def g(a: A_co) -> B:
            if isinstance(a, Results):
                return f(*a)
            return f(a)

        return self.map(g)

    def concat(self, other: "Parser[B]") -> "Parser[Results]":
        """
        Same as :py:meth:`>> <strand.parsers.Parser.__rshift__>`. Module level
        :py:func:`concat` chains any number of parsers.
        """
        return self >> other

    def default_to(self, emit: Callable[[], B]) -> "Parser[A_co | B]":
        """
        Never fails: if ``self`` fails, succeeds with ``emit()`` without consuming input.

        >>> string("hello").default_to(lambda: "nope").parse("doof")
        Result(get=Success(result='nope', remaining=Input(get='doof')))
        """

        def f(i: Input) -> Result["A_co | B"]:
            result = self.parse(i)
            if result.ok:
                return result
            return Result.return_(Success(emit(), i))

        return Parser(f)

    def delimited(self, delimiter: "Parser[Any]") -> "Parser[Results]":
        """
        Applies ``self`` one or more times, separated by ``delimiter``. Results of
        ``delimiter`` are never included.

        >>> regexp("[0-9]+").delimited(string(",")).parse("1,2,42").get.result
        Results(get=['1', '2', '42'])
        """
        return self >> (delimiter.ignore() >> self).zero_or_more()

    def eof(self) -> "Parser[Results]":
        return self >> EOF

    def fail(self, msg: str, *args: object) -> "Parser[Results]":
        return self >> fail(msg, *args)

    def ignore(self) -> "Parser[Any]":
        """
        Replaces the result with :py:data:`IGNORE <strand.data_structures.IGNORE>`, which
        is dropped when results are combined. The input is still consumed.

        >>> (string("(").ignore() >> regexp("[a-z]+") >> string(")").ignore()).parse("(x)").get.result
        Results(get=['x'])
        """
        return self.map(lambda _: IGNORE)

    def map(self, f: Callable[[A_co], B]) -> "Parser[B]":
        """
        Replaces the result of ``self`` with ``f(result)``.

        >>> regexp("[0-9]+").map(int).parse("1001")
        Result(get=Success(result=1001, remaining=Input(get='')))
        """

        def g(success: Success[A_co]) -> Result[B]:
            return Result.return_(replace(success, result=f(success.result)))

        return Parser(lambda i: self.parse(i) >= g)

    def map_error(self, f: Callable[[ParseError], ParseError]) -> "Parser[A_co]":
        def g(failure: Failure) -> Failure:
            return replace(failure, error=f(failure.error))

        return Parser(lambda i: self.parse(i).map_failure(g))

    def one_or_more(self) -> "Parser[Results]":
        """
        Applies ``self`` one or more times (like ``+`` in regexes).

        >>> p = string("hello").one_or_more()
        >>> p.parse("hellohellohello").get.result
        Results(get=['hello', 'hello', 'hello'])
        >>> p.parse("blah").get.message
        'expected string hello, got blah'
        """
        return self._n_or_more(1)

    def optional(self) -> "Parser[Optional[A_co]]":
        """
        Allows ``self`` to be absent:

        >>> p = string("hello").optional()
        >>> p.parse("hello")
        Result(get=Success(result='hello', remaining=Input(get='')))
        >>> p.parse("doof")
        Result(get=Success(result=None, remaining=Input(get='doof')))
        """
        return self.default_to(lambda: None)

    def or_(self, other: "Parser[B]") -> "Parser[A_co | B]":
        return self | other

    def parse(self, source: "str | bytes | Input") -> Result[A_co]:
        """
        Applies the parser to ``source``.
        """
        i = source if isinstance(source, Input) else Input(source)
        return self.f(i)

    def parse_text(
        self, source: "str | bytes | Input", allow_unparsed: bool = False
    ) -> "Optional[A_co]":
        """
        The main way a caller extracts a parsed value. Prints the error and returns
        ``None`` if parsing fails.

        Parameters
        ----------
        source : str | bytes | Input
            The text to parse.
        allow_unparsed : bool
            Whether to succeed when some of ``source`` is left unparsed.

        Examples
        --------

        >>> regexp("[0-9]+").map(int).parse_text("1001")
        1001
        >>> regexp("[0-9]+").map(int).parse_text("1001 bottles")
        expected end of file, got  bottles
        >>> regexp("[0-9]+").map(int).parse_text("1001 bottles", allow_unparsed=True)
        1001
        """
        result = self.parse(source)
        if not allow_unparsed:

            def done(success: Success[A_co]) -> Result[A_co]:
                return EOF.parse(success.remaining) >= (lambda _: Result.return_(success))

            result = result >= done
        success, failure = result.unpack()
        if failure is not None:
            self._print(failure.message)
            return None
        return success.result

    @staticmethod
    def _print(*args, **kwargs):
        if PRINTING:
            print(*args, **kwargs)

    def returns(self, a: B) -> "Parser[Results]":
        return self >> Parser.return_(a)

    @classmethod
    def return_(cls, a: A) -> "Parser[A]":  # type: ignore[override]
        """
        Consumes none of the input and always returns ``a`` as the result.

        >>> Parser.return_("hello").parse("this is a test")
        Result(get=Success(result='hello', remaining=Input(get='this is a test')))
        """

        def f(i: Input) -> Result[A]:
            return Result.return_(Success(a, i))

        return Parser(f)

    def satisfy(self, predicate: Predicate) -> "Parser[Results]":
        return self >> satisfy(predicate)

    def then(self, other: "Parser[B]") -> "Parser[Results]":
        return self >> other

    def wrap_error(self, error: ParseError) -> "Parser[A_co]":
        """
        >>> regexp("[0-9]+").wrap_error(ParseError("couldn't parse int")).parse("hello").get.message
        "couldn't parse int"
        """
        return self.map_error(lambda _: error)

    def zero_or_more(self) -> "Parser[Results]":
        """
        Applies ``self`` zero or more times (like ``*`` in regexes). Never fails.

        >>> string("hello").zero_or_more().parse("blah")
        Result(get=Success(result=Results(get=[]), remaining=Input(get='blah')))

        ``self`` must consume input whenever it succeeds, or this never terminates.
        """
        return self._n_or_more(0)

    def _n_or_more(self, minimum: int) -> "Parser[Results]":
        def f(i: Input) -> Result[Results]:
            results: List[Any] = []
            remaining = i
            while True:
                success, failure = self.parse(remaining).unpack()
                if failure is not None:
                    if len(results) < minimum:
                        return Result(failure)
                    return Result.return_(Success(Results(results), remaining))
                results.append(success.result)
                remaining = success.remaining

        return Parser(f)

    @classmethod
    def zero(cls, error: Optional[ParseError] = None) -> "Parser[A_co]":
        """
        This parser always fails. This method is necessary to make :py:class:`Parser`
        a ``MonadPlus``.

        >>> Parser.zero().parse("a").get.message
        'zero'
        >>> Parser.zero(error=ParseError("This is a test.")).parse("a").get.message
        'This is a test.'
        """
        return Parser(lambda i: Result.zero(error=error, input=i))


def any_of(*parsers: "Parser[A]") -> "Parser[A]":
    """
    Tries ``parsers`` in order against the same input and returns the first success.
    If all of them fail, returns the failure of the last one.

    >>> p = any_of(string("hello").eof(), string("ciao").eof(), EOF)
    >>> p.parse("ciao").ok
    True
    >>> p.parse("not").get.message
    'expected end of file, got not'
    """

    def f(i: Input) -> Result[A]:
        result: Result[A] = Result.zero(error=ZeroError("no alternatives"), input=i)
        for p in parsers:
            result = p.parse(i)
            if result.ok:
                return result
        return result

    return Parser(f)


any_ = any_of


def concat(first: "Parser[Any]", *rest: "Parser[Any]") -> "Parser[Any]":
    """
    Sequences parsers left to right, flattening all of their results.

    >>> concat(string("a"), string("b"), string("c")).parse("abc").get.result
    Results(get=['a', 'b', 'c'])
    """
    return reduce(Parser.concat, rest, first)


def fail(msg: str, *args: object) -> "Parser[Any]":
    """
    Always fails with ``msg % args``, consuming nothing.

    >>> fail("no %s here", "greeting").parse("hi").get
    Failure(error=ExplicitError(message='no greeting here'), input=Input(get='hi'))
    """
    message = msg % args if args else msg

    def f(i: Input) -> Result[Any]:
        return Result(Failure(ExplicitError(message), i))

    return Parser(f)


def return_(a: A) -> Parser[A]:
    return Parser.return_(a)


def satisfy(predicate: Predicate) -> Parser[Input]:
    """
    Consumes as much of the input as ``predicate`` says matched and returns the matched
    :py:class:`Input <strand.data_structures.Input>`. ``predicate`` signals a mismatch by
    raising a :py:exc:`ParseError <strand.errors.ParseError>`.

    >>> def digits(i):
    ...     n = len(i.get) - len(i.get.lstrip("0123456789"))
    ...     if n == 0:
    ...         raise i.expected("expected digits")
    ...     return n
    ...
    >>> satisfy(digits).parse("42abc")
    Result(get=Success(result=Input(get='42'), remaining=Input(get='abc')))
    >>> satisfy(digits).parse("abc").get.message
    'expected digits, got abc'
    """

    def f(i: Input) -> Result[Input]:
        try:
            n = predicate(i)
        except ParseError as e:
            return Result(Failure(e, i))
        return Result.return_(Success(i[:n], i[n:]))

    return Parser(f)


def _eof(i: Input) -> Result[Any]:
    if len(i) == 0:
        return Result.return_(Success(END_OF_FILE, i))
    return Result(Failure(i.expected(EXPECTED_END_OF_FILE), i))


EOF: Parser[Any] = Parser(_eof)
"""Matches the end of the input, returning :py:data:`END_OF_FILE <strand.data_structures.END_OF_FILE>`."""


def _text(i: Input) -> "str | bytes":
    return i.get


def _show(s: "str | bytes") -> str:
    if isinstance(s, bytes):
        return s.decode(errors="backslashreplace")
    return s


def _literal(s: "str | bytes", normalize: Callable) -> "Parser[str | bytes]":
    target = normalize(s)
    # compare as many input units as ``s`` has; ``upper`` may change the length
    size = len(s)

    def predicate(i: Input) -> int:
        if len(i) >= size and normalize(i.get[:size]) == target:
            return size
        raise i.expected(EXPECTED_STRING, _show(s))

    return satisfy(predicate).map(_text)


def string(s: "str | bytes") -> "Parser[str | bytes]":
    """
    Matches ``s`` exactly at the start of the input.

    >>> string("hello").parse("hello you")
    Result(get=Success(result='hello', remaining=Input(get=' you')))
    >>> string(b"GET").parse(b"GET /").get.result
    b'GET'
    """
    return _literal(s, lambda x: x)


def str_case_cmp(s: "str | bytes") -> "Parser[str | bytes]":
    """
    Matches ``s`` at the start of the input, ignoring case. The result is the text as it
    appears in the input.

    >>> str_case_cmp("hello").parse("HeLLo").get.result
    'HeLLo'
    """
    return _literal(s, lambda x: x.upper())


def regexp(pattern: "str | bytes") -> "Parser[str | bytes]":
    """
    Matches ``pattern`` anchored at the start of the input. A ``str`` pattern never
    matches ``bytes`` input and vice versa.

    >>> regexp("[0-9]+").parse("1001 bottles")
    Result(get=Success(result='1001', remaining=Input(get=' bottles')))
    >>> regexp("[0-9]+").parse("bottles").get.message
    'expected pattern: [0-9]+, got bottles'
    >>> regexp("(?i)hello").parse("HELLO there").get.result
    'HELLO'
    """
    compiled = re.compile(pattern)

    def predicate(i: Input) -> int:
        try:
            m = compiled.match(i.get)
        except TypeError:
            m = None
        if m is None:
            raise i.expected(EXPECTED_PATTERN, _show(pattern))
        return m.end()

    return satisfy(predicate).map(_text)
