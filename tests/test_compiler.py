"""Tests for compile_expression, safe evaluation and show-when reduction."""

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor

import pytest

from showwhen import (
    UNDEFINED,
    CompiledExpression,
    ExpressionSecurityError,
    ExpressionSyntaxError,
    compile_expression,
    evaluate_show_when,
    safe_evaluate_expression,
    validate_expression_syntax,
)
from showwhen.expressions.compiler import compile_cached


class ExplodingContext(Mapping):
    """Context whose lookups fail with a non-expression error."""

    def __getitem__(self, key):
        raise RuntimeError("backing store unavailable")

    def __iter__(self):
        return iter(())

    def __len__(self):
        return 0


class CountingContext(Mapping):
    def __init__(self, data):
        self.data = data
        self.reads = []

    def __getitem__(self, key):
        self.reads.append(key)
        return self.data[key]

    def __iter__(self):
        return iter(self.data)

    def __len__(self):
        return len(self.data)


# =============================================================================
# compile_expression
# =============================================================================


class TestCompileExpression:
    """Tests for compiling once and evaluating many times."""

    def test_compile_returns_reusable_callable(self):
        is_button = compile_expression("element.tag === 'button'")

        assert isinstance(is_button, CompiledExpression)
        assert is_button.source == "element.tag === 'button'"
        assert is_button({"element": {"tag": "button"}}) is True
        assert is_button({"element": {"tag": "div"}}) is False

    def test_literal_scenarios(self):
        context = {"element": {"tag": "button", "childCount": 3, "component": "X"}}

        assert compile_expression("['button','a','input'].includes(element.tag)")(context) is True
        assert compile_expression("element.childCount == '3'")(context) is True
        assert compile_expression("element.component.doesNotExist")(context) is UNDEFINED

    def test_syntax_errors_raise_at_compile_time(self):
        with pytest.raises(ExpressionSyntaxError):
            compile_expression("invalid!!!syntax")
        with pytest.raises(ExpressionSyntaxError):
            compile_expression("element.tag === ")
        with pytest.raises(ExpressionSyntaxError):
            compile_expression("element.childCount ** 2")

    def test_security_errors_raise_at_call_time(self):
        evaluate = compile_expression("window.location")

        with pytest.raises(ExpressionSecurityError) as exc_info:
            evaluate({})
        assert str(exc_info.value) == "Access to 'window' is not allowed"

    def test_security_depends_on_context(self):
        evaluate = compile_expression("window.location")
        assert evaluate({"window": {"location": "/home"}}) == "/home"

    def test_disallowed_method_names_the_method(self):
        evaluate = compile_expression("element.tag.replace('a','b')")

        with pytest.raises(ExpressionSecurityError) as exc_info:
            evaluate({"element": {"tag": "button"}})
        assert "replace" in str(exc_info.value)

    def test_deep_expression_fails_as_expression_error(self):
        source = "a" + ".b" * 1200
        evaluate = compile_expression(source)

        with pytest.raises(ExpressionSyntaxError):
            evaluate({"a": {"b": None}})
        assert safe_evaluate_expression(source, {"a": {"b": None}}) is False

    def test_unterminated_string_compiles(self):
        assert compile_expression("'unterminated\\")({}) == "unterminated"

    def test_compiled_expression_is_shareable_across_threads(self):
        evaluate = compile_expression("tree.depth > 2 && ['a', 'b'].includes(element.tag)")
        contexts = [
            {"tree": {"depth": depth}, "element": {"tag": tag}}
            for depth in range(6)
            for tag in ("a", "b", "c")
        ]
        expected = [c["tree"]["depth"] > 2 and c["element"]["tag"] in ("a", "b") for c in contexts]

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(evaluate, contexts))

        assert [bool(r) for r in results] == expected

    def test_compile_cached_reuses_compiled_expression(self):
        assert compile_cached("a && b") is compile_cached("a && b")


# =============================================================================
# safe_evaluate_expression
# =============================================================================


class TestSafeEvaluateExpression:
    """Tests for evaluation that never raises."""

    def test_returns_false_on_syntax_error(self):
        assert safe_evaluate_expression("invalid!!!syntax", {}) is False

    def test_returns_false_on_security_violation(self):
        assert safe_evaluate_expression("window.location", {}) is False

    def test_returns_result_for_valid_expression(self):
        context = {"element": {"tag": "button"}}
        assert safe_evaluate_expression("element.tag === 'button'", context) is True

    def test_returns_value_without_coercion(self):
        context = {"element": {"tag": "button"}}
        assert safe_evaluate_expression("element.tag", context) == "button"

    def test_returns_false_on_unexpected_errors(self):
        assert safe_evaluate_expression("anything", ExplodingContext()) is False

    def test_logs_swallowed_failures(self, caplog):
        caplog.set_level(logging.DEBUG, logger="showwhen.expressions.compiler")

        safe_evaluate_expression("window.location", {})

        assert "Access to 'window' is not allowed" in caplog.text


# =============================================================================
# validate_expression_syntax
# =============================================================================


class TestValidateExpressionSyntax:
    """Tests for syntax-only validation."""

    def test_returns_none_for_valid_expressions(self):
        assert validate_expression_syntax("element.tag === 'button'") is None
        assert validate_expression_syntax("['a', 'b'].includes(element.tag)") is None
        assert validate_expression_syntax("true") is None

    def test_returns_message_for_invalid_expressions(self):
        assert validate_expression_syntax("===") == "Unexpected token: '==='"
        assert validate_expression_syntax("element.tag ===  ") is not None
        assert validate_expression_syntax("a @ b") == "Unexpected character: '@' at position 2"

    def test_never_evaluates(self):
        assert validate_expression_syntax("window.location") is None
        assert validate_expression_syntax("element.tag.replace('a', 'b')") is None

    @pytest.mark.parametrize(
        "source",
        [
            "a",
            "a.b.c()",
            "(a",
            "a b",
            "!",
            "[1, 2].includes(x)",
            "x === 'y",
            "a < b < c",
            "",
            "a = b",
        ],
    )
    def test_agrees_with_compile_expression(self, source):
        try:
            compile_expression(source)
            compiles = True
        except ExpressionSyntaxError:
            compiles = False

        assert (validate_expression_syntax(source) is None) == compiles


# =============================================================================
# evaluate_show_when
# =============================================================================


class TestEvaluateShowWhen:
    """Tests for OR-ing show-when expression lists."""

    def test_no_expressions_means_shown(self):
        assert evaluate_show_when([], {}) is True
        assert evaluate_show_when(None, {}) is True

    def test_any_matching_expression_shows(self):
        context = {"element": {"tag": "button"}}
        expressions = ["element.tag === 'div'", "element.tag === 'button'"]

        assert evaluate_show_when(expressions, context) is True

    def test_no_matching_expression_hides(self):
        context = {"element": {"tag": "span"}}
        expressions = ["element.tag === 'div'", "element.tag === 'button'"]

        assert evaluate_show_when(expressions, context) is False

    def test_failing_expressions_count_as_false(self):
        context = {"element": {"tag": "button"}}

        assert evaluate_show_when(["window.x", "element.tag === 'button'"], context) is True
        assert evaluate_show_when(["invalid!!!", "nope"], context) is False

    def test_result_is_a_bool(self):
        context = {"element": {"tag": "button", "count": 0}}

        assert evaluate_show_when(["element.tag"], context) is True
        assert evaluate_show_when(["element.count"], context) is False

    def test_stops_at_first_truthy_expression(self):
        context = CountingContext({"a": 1, "b": 1})

        assert evaluate_show_when(["a", "b"], context) is True
        assert "b" not in context.reads

    def test_single_string_is_one_expression(self):
        context = {"element": {"tag": "button"}}

        assert evaluate_show_when("element.tag === 'button'", context) is True
        assert evaluate_show_when("element.tag === 'div'", context) is False
        assert evaluate_show_when("", context) is False
