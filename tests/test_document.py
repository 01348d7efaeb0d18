"""Tests for marshalling and document assembly."""

import pytest
from graphql import parse

import shapes
from gql_pymarshal import marshal, to_mutation, to_query
from gql_pymarshal.core.errors import (
    MissingVariableTypeError,
    NilInputError,
    UnsupportedShapeError,
)
from gql_pymarshal.core.settings import CompilerSettings, get_settings, set_indent
from gql_pymarshal.core.values import EnumLiteral, format_default, format_literal


@pytest.fixture
def restore_indent():
    """Put the process-wide indent back after the test."""
    original = get_settings().indent
    yield
    set_indent(original)


class TestMarshalInput:
    """Tests for the accepted root inputs."""

    def test_none(self):
        with pytest.raises(NilInputError):
            marshal(None)

    def test_empty_shape(self):
        with pytest.raises(NilInputError):
            marshal(shapes.Empty)

    def test_not_a_shape(self):
        with pytest.raises(UnsupportedShapeError):
            marshal(42)

    def test_instance(self):
        assert marshal(shapes.Single(id="1")).body == "{\n  id\n}"

    def test_wrapped_type(self):
        assert marshal(list[shapes.Single]).body == "{\n  id\n}"


class TestAssembly:
    """Tests for query and mutation documents."""

    def test_plain_query(self):
        assert marshal(shapes.Single).query() == "query {\n  id\n}"

    def test_named_query(self):
        assert marshal(shapes.Single).query("GetSingle") == "query GetSingle {\n  id\n}"

    def test_mutation(self):
        assert to_mutation(shapes.Single, "update") == "mutation update {\n  id\n}"

    def test_fragments_come_first(self):
        assert to_query(shapes.Catalog, "Catalog") == (
            "fragment ShapesItem on Item {\n  id\n}\n"
            "query Catalog {\n  featured { ...ShapesItem }\n  latest { ...ShapesItem }\n}"
        )

    def test_variable_declarations(self):
        document = marshal(shapes.ProductsQuery)
        assert document.query("GetProducts").startswith(
            "query GetProducts($products_query: String!, $id: ID!) {\n  products(first: 10"
        )

    def test_defaults(self):
        header = marshal(shapes.DefaultsQuery).query("Page").split(" {", 1)[0]
        assert header == (
            'query Page($size: Int = 20, $order: Order = DESC, $tags: [String!] = ["a"], '
            "$cursor: String = null)"
        )

    def test_missing_variable_type(self):
        document = marshal(shapes.UntypedVariable)
        assert document.body == "{\n  total(since: $since)\n}"
        with pytest.raises(MissingVariableTypeError) as exc_info:
            document.query()
        assert "$since" in str(exc_info.value)
        assert "total" in str(exc_info.value)

    def test_escaped_strings_stay_valid(self):
        document = to_query(shapes.EscapedSearch)
        operation = parse(document).definitions[0]
        argument = operation.selection_set.selections[0].arguments[0]
        assert argument.value.value == "a\\b\nc"
        default = operation.variable_definitions[0].default_value
        assert default.value == "tab\there"

    def test_variable_lookup(self):
        document = marshal(shapes.SharedVariable)
        assert document.variable("$since").usage_paths == ["total", "count"]
        assert document.variable("since").type == "DateTime"
        assert document.variable("missing") is None

    def test_end_to_end(self):
        document = marshal(shapes.OrderQuery)
        assert document.query("GetOrder") == (
            "fragment ShapesProduct on Product {\n"
            "  id\n"
            "}\n"
            "query GetOrder($orderId: ID!, $order_line_items_first: Int, $order_recent_line_items_first: Int) {\n"
            "  order(id: $orderId) {\n"
            "    lineItems(first: $order_line_items_first) { ...ShapesProduct }\n"
            "    recent:lineItems(first: $order_recent_line_items_first) { ...ShapesProduct }\n"
            "  }\n"
            "}"
        )


class TestSettings:
    """Tests for the process-wide indent setting."""

    def test_set_indent_applies_to_later_compiles(self, restore_indent):
        before = marshal(shapes.TreeRoot).body
        set_indent("    ")
        after = marshal(shapes.TreeRoot).body
        assert before.startswith("{\n  node {")
        assert after.startswith("{\n    node {\n        label")

    def test_explicit_settings_win(self, restore_indent):
        set_indent("    ")
        body = marshal(shapes.Single, CompilerSettings(indent=" ")).body
        assert body == "{\n id\n}"

    def test_compiled_text_is_unaffected(self, restore_indent):
        document = marshal(shapes.Single)
        set_indent("\t")
        assert document.body == "{\n  id\n}"


class TestValueFormatting:
    """Tests for GraphQL value formatting."""

    def test_literal_string_is_quoted(self):
        assert format_literal('say "hi"') == '"say \\"hi\\""'

    def test_literal_control_characters_are_escaped(self):
        assert format_literal("a\\b\nc") == '"a\\\\b\\nc"'
        assert format_default("tab\there") == '"tab\\there"'

    def test_literal_bool(self):
        assert format_literal(True) == "true"
        assert format_literal(False) == "false"

    def test_literal_none_is_empty(self):
        assert format_literal(None) == ""

    def test_literal_enum(self):
        assert format_literal(EnumLiteral("DESC")) == "DESC"

    def test_literal_number(self):
        assert format_literal(10) == "10"
        assert format_literal(1.5) == "1.5"

    def test_nested_values(self):
        assert format_literal({"ids": [1, None], "q": "x"}) == '{ids: [1, null], q: "x"}'

    def test_default_none(self):
        assert format_default(None) == "null"
