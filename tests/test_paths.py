"""
Тесты разрешения путей и области видимости.
"""

import datetime as dt
from decimal import Decimal

import pytest

from hte.context import MISSING, GlobalVariables, LoopInfo, Scope, collect_values
from hte.errors import EvaluationError
from hte.paths import ObjectAttributeAccess, PathResolver, is_path


class TestPathResolver:

    def setup_method(self):
        self.resolver = PathResolver()

    def test_deep_record_chain(self):
        scope = Scope({"aaa": {"bbb": {"ccc": {"ddd": "deep"}}}})
        assert self.resolver.resolve("aaa.bbb.ccc.ddd", scope) == "deep"

    def test_sequence_index(self):
        scope = Scope({"items": [{"name": "first"}, {"name": "second"}]})
        assert self.resolver.resolve("items.1.name", scope) == "second"
        assert self.resolver.resolve("items.5.name", scope) is None

    def test_record_with_int_keys(self):
        scope = Scope({"rows": {0: "zero"}})
        assert self.resolver.resolve("rows.0", scope) == "zero"

    def test_model_attributes(self, customer):
        scope = Scope({"customer": customer})
        assert self.resolver.resolve("customer.name", scope) == "John Doe"
        assert self.resolver.resolve("customer.tags.0", scope) == "vip"

    def test_private_and_callable_attributes_hidden(self, customer):
        scope = Scope({"customer": customer})
        assert self.resolver.resolve("customer.secret", scope) is None
        assert self.resolver.resolve("customer.__class__", scope) is None

    def test_head_case_insensitive(self, customer):
        scope = Scope({"customer": customer})
        assert self.resolver.resolve("Customer.id", scope) == 123

    def test_flat_dotted_key_wins(self):
        scope = Scope({"supplier.name": "ACME", "supplier": {"name": "other"}})
        assert self.resolver.resolve("supplier.name", scope) == "ACME"

    def test_date_attribute(self):
        scope = Scope({"created": dt.date(2024, 5, 17)})
        assert self.resolver.resolve("created.year", scope) == 2024

    def test_failing_attribute_raises_evaluation_error(self, broken_order):
        scope = Scope({"order": broken_order})
        assert self.resolver.resolve("order.id", scope) == 7
        with pytest.raises(EvaluationError, match="Cannot read 'total' of Order: lazy load failed"):
            self.resolver.resolve("order.total", scope)

    def test_miss_degrades_to_none(self):
        scope = Scope({"order": {"id": 1}, "n": 5})
        assert self.resolver.resolve("order.nothing.deeper", scope) is None
        assert self.resolver.resolve("unknown.id", scope) is None
        assert self.resolver.resolve("n.value", scope) is None
        assert self.resolver.resolve("", scope) is None


def test_object_attribute_access():
    access = ObjectAttributeAccess()
    assert access.get(dt.date(2024, 1, 1), "month") == 1
    assert access.get(dt.date(2024, 1, 1), "isoformat") is MISSING
    assert access.get(object(), "_x") is MISSING


def test_is_path():
    assert is_path("order.id")
    assert not is_path("order")
    assert not is_path("")
    assert not is_path(".x")


class TestScope:

    def test_globals_shadow_layers(self):
        globals_ = GlobalVariables()
        scope = Scope({"a": 1}, globals_)
        child = scope.child({"a": 2, "b": 3})
        assert child.lookup("a") == 2
        globals_.assign("a", 9)
        assert child.lookup("a") == 9
        assert scope.lookup("b") is MISSING

    def test_bare_names_are_case_sensitive(self):
        scope = Scope({"Name": "x"})
        assert scope.lookup("name") is MISSING
        assert scope.lookup_head("name") == "x"
        assert "Name" in scope
        assert "name" not in scope

    def test_as_dict(self):
        globals_ = GlobalVariables()
        globals_.assign("g", 1)
        scope = Scope({"a": 1}, globals_).child({"b": 2})
        assert scope.as_dict() == {"a": 1, "b": 2, "g": 1}

    def test_define_keeps_existing_value(self):
        globals_ = GlobalVariables()
        globals_.define("t")
        assert globals_["t"] is None
        globals_.assign("t", 5)
        globals_.define("t")
        assert globals_["t"] == 5


def test_loop_info_record():
    assert LoopInfo(1, 3).as_record() == {"index": 1, "index0": 0, "length": 3, "first": True, "last": False}
    assert LoopInfo(3, 3).as_record()["last"] is True
    empty = LoopInfo(0, 0).as_record()
    assert empty["first"] is False and empty["last"] is False and empty["index0"] == -1


class TestCollectValues:

    def test_model_under_numeric_key_uses_class_name(self, customer):
        assert collect_values({0: customer}) == {"customer": customer}

    def test_model_under_string_key_is_lowercased(self, customer):
        assert collect_values({"Buyer": customer}) == {"buyer": customer}

    def test_plain_values_keep_key(self):
        values = collect_values({"Title": "x", "items": [1], "n": None, 5: "dropped"})
        assert values == {"Title": "x", "items": [1], "n": None}

    def test_decimal_is_a_plain_value(self):
        assert collect_values({"Price": Decimal("3")}) == {"Price": Decimal("3")}

    def test_none_params(self):
        assert collect_values(None) == {}
