from __future__ import annotations

from typing import List, Tuple

import pytest

from monke.ast import to_tree
from monke.parser import parse_source
from monke.types import MonkeInteger
from tests.support.harness import parse_errors, parse_ok, render, run_program

ERROR_CASES: List[Tuple[str, str, List[str]]] = [
    (
        "let-recovery-three-errors",
        "let x 5; let = 10; let 838383;",
        [
            "expected next token to be '=', got INT instead",
            "expected next token to be 'IDENT', got = instead",
            "expected next token to be 'IDENT', got INT instead",
        ],
    ),
    ("dangling-infix", "5 +", ["no prefix parse function for EOF found"]),
    ("stray-assign", "= 5;", ["no prefix parse function for = found"]),
    ("illegal-char", "@;", ["no prefix parse function for ILLEGAL found"]),
    (
        "int-overflow",
        "99999999999999999999",
        ['could not parse "99999999999999999999" as integer'],
    ),
    (
        "negative-literal-overflow",
        "-9223372036854775808",
        ['could not parse "9223372036854775808" as integer'],
    ),
    (
        "unclosed-group",
        "(1 + 2",
        ["expected next token to be ')', got EOF instead"],
    ),
    (
        "unclosed-call",
        "add(1, 2",
        ["expected next token to be ')', got EOF instead"],
    ),
    (
        "unclosed-block",
        "if (x) { x",
        ["expected next token to be '}', got EOF instead"],
    ),
    (
        "if-without-parens",
        "if x { 1 }",
        ["expected next token to be '(', got IDENT instead"],
    ),
    (
        "if-without-brace",
        "if (x) 1",
        ["expected next token to be '{', got INT instead"],
    ),
    (
        "else-without-brace",
        "if (x) { 1 } else 2",
        ["expected next token to be '{', got INT instead"],
    ),
    (
        "fn-literal-param",
        "fn(1) {}",
        ["expected next token to be 'IDENT', got INT instead"],
    ),
    (
        "fn-trailing-comma",
        "fn(a,) {}",
        ["expected next token to be 'IDENT', got ) instead"],
    ),
    (
        "fn-without-body",
        "fn(a);",
        ["expected next token to be '{', got ; instead"],
    ),
]


@pytest.mark.parametrize(
    "source, expected",
    [pytest.param(src, exp, id=name) for name, src, exp in ERROR_CASES],
)
def test_parse_error_messages(source: str, expected: List[str]) -> None:
    assert parse_errors(source) == expected


def test_failed_statements_are_dropped_and_parsing_resumes() -> None:
    program, errors = parse_source(") 1; let y = 2; 3")
    assert errors == ["no prefix parse function for ) found"]
    assert str(program) == "let y = 2;3"


def test_errors_reported_in_source_order() -> None:
    errors = parse_errors("let = 1; fn(1) {}; let x 2;")
    assert errors == [
        "expected next token to be 'IDENT', got = instead",
        "expected next token to be 'IDENT', got INT instead",
        "expected next token to be '=', got INT instead",
    ]


def test_recovery_inside_block_keeps_block_open() -> None:
    program, errors = parse_source("if (true) { let = 1; 5 }; 7")
    assert errors == ["expected next token to be 'IDENT', got = instead"]
    assert str(program) == "if(true){ 5; };7"


DETERMINISM_CASES = [
    "let x = 5;",
    "if (a < b) { a } else { b }",
    "let add = fn(a, b) { return a + b; }; add(1, 2 * 3);",
    "let x 5;",
]


@pytest.mark.parametrize("source", DETERMINISM_CASES, ids=lambda s: s)
def test_parsing_is_deterministic(source: str) -> None:
    first = parse_source(source)
    second = parse_source(source)
    assert first[0] == second[0]
    assert first[1] == second[1]


def test_source_positions_do_not_affect_equality() -> None:
    assert parse_ok("let x=1+2;") == parse_ok("let   x =\n 1 + 2 ;")


ROUND_TRIP_CASES = [
    "-a * b",
    "a + b * c + d / e - f",
    "!(true == !false)",
    "let x = 5;",
    "let a = if (x) { 1 } else { return; };",
    "if (true) { 2 } else { 3; return; }",
    "let a = fn(a, b) { a + b };",
    "let b = add(a, b); return 5;",
    "fn() {}",
    "let f = fn(x) { fn(y) { x + y } }; f(1)(2)",
    "if (a <= b) { let c = a >= b; c != true }",
]


@pytest.mark.parametrize("source", ROUND_TRIP_CASES, ids=lambda s: s)
def test_rendering_round_trip_is_stable(source: str) -> None:
    once = render(source)
    assert render(once) == once


def test_debug_tree_is_deterministic() -> None:
    source = "let f = fn(x) { if (x > 1) { x } }; f(2);"
    assert to_tree(parse_ok(source)) == to_tree(parse_ok(source))


def test_deep_nesting_within_host_budget_parses() -> None:
    program, errors = parse_source("-" * 1200 + "1")
    assert errors == []
    assert len(program.statements) == 1
    assert run_program("(" * 1200 + "1" + ")" * 1200) == MonkeInteger(1)


def test_runaway_nesting_reports_error_and_keeps_earlier_statements() -> None:
    program, errors = parse_source("let a = 1; " + "(" * 20000 + "1")
    assert errors == ["expression nested too deeply"]
    assert str(program) == "let a = 1;"

    _, errors = parse_source("!" * 20000 + "true")
    assert errors == ["expression nested too deeply"]
