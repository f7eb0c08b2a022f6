import sys
from random import Random
from typing import NamedTuple

from hypothesis import HealthCheck, given, register_random, settings
from hypothesis import strategies as st

from strand import (
    EOF,
    IGNORE,
    Input,
    Parser,
    Results,
    fail,
    regexp,
    return_,
    str_case_cmp,
    string,
)
from strand.result import Success

MAX_LEAVES = 6
MAX_TEXT = 12

st_text = st.text(alphabet="abAB ", max_size=MAX_TEXT)
st_word = st.text(alphabet="ab", max_size=3)


class StOutput(NamedTuple):
    parser: Parser
    consumes: bool
    repr: str


@st.composite
def st_string(draw) -> StOutput:
    s = draw(st_word)
    return StOutput(parser=string(s), consumes=bool(s), repr=f"string({repr(s)})")


@st.composite
def st_str_case_cmp(draw) -> StOutput:
    s = draw(st_word)
    return StOutput(
        parser=str_case_cmp(s), consumes=bool(s), repr=f"str_case_cmp({repr(s)})"
    )


@st.composite
def st_regexp(draw) -> StOutput:
    pattern, consumes = draw(
        st.sampled_from([("a+", True), ("[ab]", True), ("b*", False), (" *", False)])
    )
    return StOutput(
        parser=regexp(pattern), consumes=consumes, repr=f"regexp({repr(pattern)})"
    )


@st.composite
def st_return(draw) -> StOutput:
    a = draw(st.integers())
    return StOutput(parser=return_(a), consumes=False, repr=f"return_({a})")


@st.composite
def st_eof(_) -> StOutput:
    return StOutput(parser=EOF, consumes=False, repr="EOF")


@st.composite
def st_fail(_) -> StOutput:
    # never succeeds, so it can safely be repeated
    return StOutput(parser=fail("no"), consumes=True, repr='fail("no")')


@st.composite
def st_then(draw, _st_parser) -> StOutput:
    a = draw(_st_parser)
    b = draw(_st_parser)
    return StOutput(
        parser=a.parser >> b.parser,
        consumes=a.consumes or b.consumes,
        repr=f"({a.repr} >> {b.repr})",
    )


@st.composite
def st_or(draw, _st_parser) -> StOutput:
    a = draw(_st_parser)
    b = draw(_st_parser)
    return StOutput(
        parser=a.parser | b.parser,
        consumes=a.consumes and b.consumes,
        repr=f"({a.repr} | {b.repr})",
    )


@st.composite
def st_unary(draw, _st_parser) -> StOutput:
    p = draw(_st_parser)
    choices = [
        (p.parser.ignore(), p.consumes, f"{p.repr}.ignore()"),
        (p.parser.optional(), False, f"{p.repr}.optional()"),
        (p.parser.map(repr), p.consumes, f"{p.repr}.map(repr)"),
    ]
    if p.consumes:
        choices += [
            (p.parser.zero_or_more(), False, f"{p.repr}.zero_or_more()"),
            (p.parser.one_or_more(), True, f"{p.repr}.one_or_more()"),
            (
                p.parser.delimited(string(" ")),
                True,
                f"{p.repr}.delimited(string(' '))",
            ),
        ]
    parser, consumes, _repr = draw(st.sampled_from(choices))
    return StOutput(parser=parser, consumes=consumes, repr=_repr)


st_leaf = st.deferred(
    lambda: st_string()
    | st_str_case_cmp()
    | st_regexp()
    | st_return()
    | st_eof()
    | st_fail()
)

st_parser = st.recursive(
    st_leaf,
    lambda p: st_then(p) | st_or(p) | st_unary(p),
    max_leaves=MAX_LEAVES,
)


def contains_nested(result) -> bool:
    if not isinstance(result, Results):
        return False
    return any(isinstance(r, Results) or r is IGNORE for r in result)


@settings(deadline=2000, suppress_health_check=[HealthCheck.too_slow])
@given(st_parser, st_parser, st_parser, st_text)
def test_sequencing_is_associative(a, b, c, text):
    x1 = ((a.parser >> b.parser) >> c.parser).parse(text)
    x2 = (a.parser >> (b.parser >> c.parser)).parse(text)
    assert x1 == x2, (a.repr, b.repr, c.repr)


@settings(deadline=2000, suppress_health_check=[HealthCheck.too_slow])
@given(st_parser, st_parser, st_text)
def test_alternation_restarts_from_original_input(left, right, text):
    expected = left.parser.parse(text)
    if not expected.ok:
        expected = right.parser.parse(text)
    assert (left.parser | right.parser).parse(text) == expected, (left.repr, right.repr)


@settings(deadline=2000, suppress_health_check=[HealthCheck.too_slow])
@given(st_parser, st_text)
def test_quantifier_floor(p, text):
    if p.parser.parse(text).ok:
        return
    assert not p.parser.one_or_more().parse(text).ok, p.repr
    success, failure = p.parser.zero_or_more().parse(text)
    assert failure is None, p.repr
    assert success == Success(Results([]), Input(text)), p.repr


@settings(deadline=2000, suppress_health_check=[HealthCheck.too_slow])
@given(st_parser, st_text)
def test_optional_absorbs_failure(p, text):
    success, failure = p.parser.optional().parse(text)
    assert failure is None, p.repr
    if not p.parser.parse(text).ok:
        assert success.remaining == Input(text), p.repr
        assert success.result is None, p.repr


@settings(deadline=2000, suppress_health_check=[HealthCheck.too_slow])
@given(st_parser, st_parser, st_text)
def test_sequenced_results_are_flat(a, b, text):
    success, _ = (a.parser >> b.parser).parse(text)
    if success is not None:
        assert isinstance(success.result, Results)
        assert not contains_nested(success.result), (a.repr, b.repr)


@settings(deadline=2000, suppress_health_check=[HealthCheck.too_slow])
@given(st.text(max_size=40))
def test_snippet_is_truncated(text):
    _, failure = EOF.parse(text)
    if not text:
        assert failure is None
        return
    got = failure.error.got
    if len(text) > 16:
        assert got == text[:16] + "..."
    else:
        assert got == text
    assert failure.message == f"expected end of file, got {got}"


if __name__ == "__main__":
    register_random(Random(0))

    if sys.argv[1] == "associative":
        test_sequencing_is_associative()
    elif sys.argv[1] == "flat":
        test_sequenced_results_are_flat()
