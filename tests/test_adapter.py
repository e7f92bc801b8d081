"""Tests for alias-tolerant AST field access."""

from types import SimpleNamespace

from openscad_csg.adapter import (
    children,
    expression_kind,
    get_field,
    is_ast_node,
    lookup_param,
    raw_text,
    source_location,
)
from openscad_csg.tree.nodes import SourceLocation

from conftest import expr, ident, lit, loc, vec


class TestFieldAccess:
    """Tests for get_field and related helpers."""

    def test_mapping_and_object(self):
        assert get_field({"h": 10}, "h") == 10
        assert get_field(SimpleNamespace(h=10), "h") == 10
        assert get_field({}, "h") is None
        assert get_field(None, "h") is None

    def test_is_ast_node(self):
        assert is_ast_node({"type": "cube"})
        assert is_ast_node(SimpleNamespace(type="cube"))
        assert not is_ast_node([1, 2, 3])
        assert not is_ast_node(5)
        assert not is_ast_node("text")
        assert not is_ast_node(None)

    def test_children(self):
        assert children({"children": [1, 2]}) == [1, 2]
        assert children({"type": "cube"}) == ()

    def test_raw_text(self):
        assert raw_text({"text": "cube(1)"}) == "cube(1)"
        assert raw_text({"location": {"text": "sphere(2)"}}) == "sphere(2)"
        assert raw_text({"type": "cube"}) is None


class TestExpressionKind:
    """Tests for expression_kind."""

    def test_tagged_expressions(self):
        assert expression_kind(lit(1)) == "literal"
        assert expression_kind(ident("x")) == "identifier"
        assert expression_kind(vec(1, 2, 3)) == "vector_expression"

    def test_bare_discriminants(self):
        """Test that raw-shape discriminants map to canonical kinds."""
        assert expression_kind({"type": "number"}) == "literal"
        assert expression_kind({"type": "binary"}) == "binary_expression"
        assert expression_kind({"type": "ternary"}) == "conditional_expression"
        assert expression_kind({"type": "array"}) == "vector_expression"
        assert expression_kind({"type": "call_expression"}) == "function_call"
        assert expression_kind({"type": "ERROR"}) == "error"

    def test_snake_case_expression_type(self):
        assert expression_kind({"type": "expression", "expression_type": "unary"}) == "unary_expression"

    def test_unknown_kind_passes_through(self):
        assert expression_kind({"type": "let_expression"}) == "let_expression"

    def test_typeless(self):
        assert expression_kind({"value": 3}) == "literal"
        assert expression_kind({}) is None


class TestSourceLocation:
    """Tests for source_location."""

    def test_from_location_start(self):
        assert source_location({"location": loc(3, 7)}) == SourceLocation(line=3, column=7)

    def test_missing_location(self):
        assert source_location({"type": "cube"}) is None

    def test_missing_fields_default_to_zero(self):
        assert source_location({"location": {"start": {"line": 2}}}) == SourceLocation(line=2, column=0)
        assert source_location({"location": {}}) == SourceLocation(line=0, column=0)


class TestLookupParam:
    """Tests for lookup_param."""

    def test_direct_field(self):
        assert lookup_param({"h": 10}, "height", "h") == 10

    def test_alias_order(self):
        """Test that earlier aliases win."""
        assert lookup_param({"r": 1, "radius": 2}, "radius", "r") == 2

    def test_parameter_mapping(self):
        node = {"type": "cube", "parameters": {"size": 5}}
        assert lookup_param(node, "size") == 5

    def test_named_parameter_list(self):
        node = {"type": "cylinder", "parameters": [
            {"name": "h", "value": lit(10)},
            {"name": "r", "value": lit(2)},
        ]}
        assert lookup_param(node, "r") == lit(2)
        assert lookup_param(node, "height", "h") == lit(10)
        assert lookup_param(node, "r2") is None

    def test_typed_argument_entries(self):
        """Test argument nodes carrying their own type and an identifier name."""
        node = {"type": "sphere", "arguments": [
            {"type": "named_argument", "name": {"type": "identifier", "name": "r"}, "expr": lit(3)},
        ]}
        assert lookup_param(node, "r") == lit(3)

    def test_positional_arguments(self):
        """Test positional arguments given as bare expressions or values."""
        node = {"type": "cylinder", "args": [lit(10), 2]}
        assert lookup_param(node, "h", position=0) == lit(10)
        assert lookup_param(node, "r1", position=1) == 2
        assert lookup_param(node, "r2", position=2) is None
        assert lookup_param(node, "h") is None

    def test_unnamed_entries_are_positional(self):
        node = {"type": "cube", "parameters": [{"value": vec(1, 2, 3)}]}
        assert lookup_param(node, "size", position=0) == vec(1, 2, 3)

    def test_raw_shape_positional_expression(self):
        node = {"type": "cube", "parameters": [{"type": "vector", "elements": [1, 2, 3]}]}
        assert lookup_param(node, "size", position=0) == {"type": "vector", "elements": [1, 2, 3]}

    def test_named_wins_over_positional(self):
        node = {"type": "cube", "parameters": [lit(1), {"name": "size", "value": lit(2)}]}
        assert lookup_param(node, "size", position=0) == lit(2)
