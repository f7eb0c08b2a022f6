#! /usr/bin/env python
import doctest
import unittest
from abc import ABC, abstractmethod

import strand
from strand import data_structures, errors, parsers, result
from strand.data_structures import Input, Results
from strand.result import Result, Success


def load_tests(_, tests, __):

    parsers.PRINTING = True
    for mod in [
        data_structures,
        errors,
        parsers,
        result,
        strand,
    ]:
        tests.addTests(doctest.DocTestSuite(mod))
    return tests


class MonadLawTester(ABC):
    """
    Monad laws:
    ```haskell
    return a >>= f = f a
    p >>= return = p
    p >>= (\\a -> (f a >>= g)) = (p >>= (\\a -> f a)) >>= g
    ```
    """

    @abstractmethod
    def assertEqual(self, a, b):
        raise NotImplementedError

    @abstractmethod
    def f1(self, a):
        raise NotImplementedError

    @abstractmethod
    def f2(self, a):
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def return_(a):
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def unwrapped_values():
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def wrapped_values():
        raise NotImplementedError

    def test_law1(self):
        for a in self.unwrapped_values():
            self.assertEqual(self.return_(a) >= self.f1, self.f1(a))

    def test_law2(self):
        for p in self.wrapped_values():
            self.assertEqual(p >= self.return_, p)

    def test_law3(self):
        for p in self.wrapped_values():
            x1 = p >= (lambda a: self.f1(a) >= self.f2)
            x2 = (p >= self.f1) >= self.f2
            self.assertEqual(x1, x2)


class ResultsMonadTest(unittest.TestCase, MonadLawTester):
    def f1(self, a):
        return Results([a + 1, a])

    def f2(self, a):
        return Results([a * 2]) if a % 2 else Results([])

    @staticmethod
    def return_(a):
        return Results.return_(a)

    @staticmethod
    def unwrapped_values():
        return [0, 1, 7]

    @staticmethod
    def wrapped_values():
        return [Results([]), Results([1, 2]), Results([3])]


class ResultMonadTest(unittest.TestCase, MonadLawTester):
    def f1(self, a):
        return Result.return_(Success(a.result + 1, a.remaining))

    def f2(self, a):
        if a.result > 2:
            return Result.return_(Success(a.result * 2, a.remaining[1:]))
        return Result.zero(input=a.remaining)

    @staticmethod
    def return_(a):
        return Result.return_(a)

    @staticmethod
    def unwrapped_values():
        return [Success(1, Input("")), Success(5, Input("xy"))]

    @staticmethod
    def wrapped_values():
        return [
            Result.return_(Success(1, Input("a"))),
            Result.return_(Success(4, Input("abc"))),
            Result.zero(input=Input("abc")),
        ]


if __name__ == "__main__":
    unittest.main()
