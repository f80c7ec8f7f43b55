from __future__ import annotations

import sys
from textwrap import dedent

import pytest

from monke.evaluator import eval_program
from monke.types import Frame, MonkeFn
from tests.support.harness import (
    ParseError,
    parse_ok,
    run_program,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param(
        "fn(x) { x + 2; };",
        ("fn", "fn(x) { (x + 2); }"),
        None,
        id="fn-literal-value",
    ),
    pytest.param("fn() {}", ("fn", "fn() {  }"), None, id="fn-literal-empty"),
    pytest.param(
        "let identity = fn(x) { x; }; identity(5);",
        ("int", 5),
        None,
        id="identity-implicit",
    ),
    pytest.param(
        "let identity = fn(x) { return x; }; identity(5);",
        ("int", 5),
        None,
        id="identity-return",
    ),
    pytest.param(
        "let double = fn(x) { x * 2; }; double(5);",
        ("int", 10),
        None,
        id="double",
    ),
    pytest.param(
        "let add = fn(x, y) { x + y; }; add(5, 5);",
        ("int", 10),
        None,
        id="add",
    ),
    pytest.param(
        "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));",
        ("int", 20),
        None,
        id="add-nested-args",
    ),
    pytest.param("fn(x) { x; }(5)", ("int", 5), None, id="inline-call"),
    pytest.param("fn() { 1 }()", ("int", 1), None, id="inline-call-nullary"),
    pytest.param("let f = fn() {}; f()", ("null", None), None, id="empty-body-null"),
    pytest.param(
        "let f = fn() { return; }; f()", ("null", None), None, id="bare-return-null"
    ),
    pytest.param(
        "let f = fn() { return 1; 2 }; f() + 10",
        ("int", 11),
        None,
        id="return-unwrapped-at-call",
    ),
    pytest.param(
        dedent(
            """\
            let newAdder = fn(x) {
              fn(y) { x + y };
            };

            let addTwo = newAdder(2);
            addTwo(2);
        """
        ),
        ("int", 4),
        None,
        id="closure-adder",
    ),
    pytest.param(
        dedent(
            """\
            let add = fn(a, b) { a + b };
            let applyFunc = fn(a, b, func) { func(a, b) };
            applyFunc(2, 2, add);
        """
        ),
        ("int", 4),
        None,
        id="higher-order",
    ),
    pytest.param(
        dedent(
            """\
            let adder = fn(x) { fn(y) { x + y } };
            let addFive = adder(5);
            addFive(3)
        """
        ),
        ("int", 8),
        None,
        id="closure-adder-five",
    ),
    pytest.param(
        "let f = fn(x) { fn(y) { fn(z) { x + y + z } } }; f(1)(2)(3)",
        ("int", 6),
        None,
        id="curried-three-levels",
    ),
    pytest.param(
        dedent(
            """\
            let fib = fn(n) {
              if (n < 2) { return n; }
              fib(n - 1) + fib(n - 2)
            };
            fib(15)
        """
        ),
        ("int", 610),
        None,
        id="recursive-fib",
    ),
    pytest.param(
        dedent(
            """\
            let counter = fn(n) {
              if (n == 0) { return 0; }
              1 + counter(n - 1)
            };
            counter(50)
        """
        ),
        ("int", 50),
        None,
        id="recursion-depth",
    ),
    pytest.param(
        dedent(
            """\
            let sum = fn(n) {
              if (n == 0) { return 0; }
              n + sum(n - 1)
            };
            sum(500)
        """
        ),
        ("int", 125250),
        None,
        id="recursion-depth-deep",
    ),
    pytest.param(
        "let f = fn(x) { x }; f(1, 2)",
        ("error", "wrong number of arguments: want=1, got=2"),
        None,
        id="arity-too-many",
    ),
    pytest.param(
        "let f = fn(x, y) { x }; f(1)",
        ("error", "wrong number of arguments: want=2, got=1"),
        None,
        id="arity-too-few",
    ),
    pytest.param(
        "5(1)", ("error", "not a function: INTEGER"), None, id="call-integer"
    ),
    pytest.param(
        "let t = true; t()", ("error", "not a function: BOOLEAN"), None, id="call-boolean"
    ),
    pytest.param(
        "let f = fn(x) { x }; f(missing)",
        ("error", "identifier not found: missing"),
        None,
        id="argument-error-propagates",
    ),
    pytest.param(
        "nope(1)", ("error", "identifier not found: nope"), None, id="callee-not-found"
    ),
    pytest.param("fn(x, 1) { x }", None, ParseError, id="literal-param"),
    pytest.param("let f = fn(x { x }", None, ParseError, id="unclosed-params"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_arguments_evaluate_left_to_right_and_stop_at_first_error() -> None:
    result = run_program("let f = fn(a, b) { a }; f(first, second)")
    assert result.inspect() == "ERROR: identifier not found: first"


def test_function_value_captures_defining_frame() -> None:
    frame = Frame()
    eval_program(parse_ok("let make = fn() { fn() { 1 } }; let g = make();"), frame)
    g = frame.get("g")
    make = frame.get("make")

    assert isinstance(g, MonkeFn)
    assert isinstance(make, MonkeFn)
    assert make.frame is frame
    assert g.frame is not frame
    assert g.frame.parent is frame


def test_unbounded_recursion_reports_error() -> None:
    result = run_program("let f = fn(n) { f(n + 1) }; f(0)")
    assert result.inspect() == "ERROR: maximum recursion depth exceeded"


def test_recursion_limit_restored_after_evaluation() -> None:
    before = sys.getrecursionlimit()
    run_program("let f = fn(n) { f(n + 1) }; f(0)")
    run_program("1 + 1")
    assert sys.getrecursionlimit() == before
