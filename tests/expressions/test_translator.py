"""
Тесты подстановки значений в выражения IF/SET.
"""

import datetime as dt

import pytest

from hte.context import GlobalVariables, Scope
from hte.errors import EvaluationError, ExpressionSyntaxError
from hte.expressions.translator import (
    evaluate_condition,
    evaluate_expression,
    has_arithmetic,
    is_atomic,
    literal_for,
    translate_expression,
)


@pytest.fixture
def scope(customer):
    return Scope({
        "x": 2,
        "name": "Bob",
        "empty": "",
        "zero": 0,
        "code": "00123",
        "price": "12.5",
        "items": [1, 2],
        "none": [],
        "customer": customer,
        "order": {"total": 150, "paid": False, "lines": [{"qty": 3}]},
    })


class TestLiteralFor:

    def test_empty_values_depend_on_arithmetic(self):
        assert literal_for(None, arithmetic=False) == ""
        assert literal_for(None, arithmetic=True) == 0
        assert literal_for("  ", arithmetic=True) == 0

    def test_numeric_strings_become_numbers(self):
        assert literal_for("12.5", arithmetic=False) == 12.5
        assert literal_for("00123", arithmetic=False) == "00123"

    def test_containers_become_truthiness(self, customer):
        assert literal_for([1], arithmetic=False) is True
        assert literal_for({}, arithmetic=False) is False
        assert literal_for(customer, arithmetic=False) is True

    def test_dates_become_text(self):
        assert literal_for(dt.date(2024, 1, 2), arithmetic=False) == "2024-01-02"


class TestEvaluateExpression:

    def test_bare_names_and_paths(self, scope):
        assert evaluate_expression("x * 10", scope) == 20
        assert evaluate_expression("order.total > 100 && !order.paid", scope) is True
        assert evaluate_expression("order.lines.0.qty + 1", scope) == 4
        assert evaluate_expression("price * 2", scope) == 25.0

    def test_string_value_kept(self, scope):
        assert evaluate_expression("name", scope) == "Bob"
        assert evaluate_expression("code", scope) == "00123"

    def test_missing_path_is_empty(self, scope):
        assert evaluate_expression('order.missing == ""', scope) is True
        assert evaluate_expression("order.missing + 1", scope) == 1

    def test_missing_bare_name_is_an_error(self, scope):
        with pytest.raises(EvaluationError, match="Undefined name 'nope'"):
            evaluate_expression("nope + 1", scope)

    def test_syntax_error(self, scope):
        with pytest.raises(ExpressionSyntaxError):
            evaluate_expression("x ==", scope)

    def test_global_variables_shadow_bindings(self):
        globals_ = GlobalVariables()
        globals_.assign("x", 100)
        scope = Scope({"x": 1}, globals_)
        assert evaluate_expression("x + 1", scope) == 101

    def test_model_attribute(self, scope):
        assert evaluate_expression("customer.id == 123", scope) is True
        assert evaluate_expression('customer.name == "John Doe"', scope) is True


class TestEvaluateCondition:

    def test_atomic_truthiness(self, scope):
        assert evaluate_condition("name", scope) is True
        assert evaluate_condition("empty", scope) is False
        assert evaluate_condition("zero", scope) is False
        assert evaluate_condition("items", scope) is True
        assert evaluate_condition("none", scope) is False
        assert evaluate_condition("customer", scope) is True

    def test_atomic_missing_is_false(self, scope):
        assert evaluate_condition("user", scope) is False

    def test_literal_conditions(self, scope):
        assert evaluate_condition("0", scope) is False
        assert evaluate_condition("1", scope) is True
        assert evaluate_condition("true", scope) is True

    def test_is_atomic(self):
        assert is_atomic("user")
        assert is_atomic("  user_2 ")
        assert not is_atomic("user.name")
        assert not is_atomic("true")
        assert not is_atomic("a && b")
        assert not is_atomic("x" * 65)


def test_has_arithmetic():
    assert has_arithmetic("a + b")
    assert has_arithmetic('x == "a-b"')
    assert not has_arithmetic("a && b")


def test_translate_expression(scope):
    assert translate_expression("x == 2 && name", scope) == 'x == 2 && "Bob"'
    assert translate_expression("order.paid || nope", scope) == "false || nope"
    assert translate_expression("a = b", scope) == "a = b"
