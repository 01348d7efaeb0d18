"""Tests for field tag decoding."""

import pytest

from gql_pymarshal.core.errors import TagSyntaxError
from gql_pymarshal.core.tags import TagFlag, decode_tag
from gql_pymarshal.core.values import EnumLiteral


class TestNameAndFlags:
    """Tests for the field name and trailing flags."""

    def test_empty_tag(self):
        assert decode_tag("") is None
        assert decode_tag("   ") is None
        assert decode_tag(None) is None

    def test_name_only(self):
        tag = decode_tag("bar")
        assert tag.name == "bar"
        assert tag.flags == ()
        assert tag.arguments == {}

    def test_boolean_flags(self):
        tag = decode_tag("contact,inline")
        assert tag.name == "contact"
        assert tag.flags == (TagFlag("inline"),)
        assert tag.flag("inline").is_boolean

    def test_valued_flag(self):
        tag = decode_tag("fax,alias=faxNumber")
        assert tag.flag("alias") == TagFlag("alias", "faxNumber")
        assert not tag.flag("alias").is_boolean

    def test_quoted_flag_value(self):
        tag = decode_tag('fax,alias="faxNumber"')
        assert tag.flag("alias").value == "faxNumber"

    def test_flags_without_name(self):
        tag = decode_tag(",union")
        assert tag.name == ""
        assert tag.has_flag("union")

    def test_typename_union(self):
        tag = decode_tag("__typename,union")
        assert tag.name == "__typename"
        assert tag.has_flag("union")
        assert not tag.has_flag("inline")

    def test_flag_order_preserved(self):
        tag = decode_tag("profile,inline,alias=me")
        assert [f.name for f in tag.flags] == ["inline", "alias"]


class TestArguments:
    """Tests for decoding the argument list."""

    def test_literal_int(self):
        arg = decode_tag("list(first:10)").arguments["first"]
        assert not arg.placeholder
        assert arg.value == 10
        assert arg.declared_type is None

    def test_literal_kinds(self):
        tag = decode_tag('f(s:"a,b:c", b:false, e:DESC, l:[1, 2], o:{a: 1}, fl:1.5, n:null)')
        args = tag.arguments
        assert args["s"].value == "a,b:c"
        assert args["b"].value is False
        assert args["e"].value == "DESC"
        assert isinstance(args["e"].value, EnumLiteral)
        assert args["l"].value == [1, 2]
        assert args["o"].value == {"a": 1}
        assert args["fl"].value == 1.5
        assert args["n"].value is None

    def test_literal_with_type(self):
        arg = decode_tag("f(first:10:Int)").arguments["first"]
        assert arg.value == 10
        assert arg.declared_type == "Int"

    def test_anonymous_variable(self):
        arg = decode_tag("list(query:$:String!)").arguments["query"]
        assert arg.placeholder
        assert arg.variable_name is None
        assert arg.declared_type == "String!"
        assert not arg.has_default

    def test_bare_variable(self):
        arg = decode_tag("list(query:$)").arguments["query"]
        assert arg.placeholder
        assert arg.variable_name is None
        assert arg.declared_type is None

    def test_named_variable(self):
        arg = decode_tag("list(id:$id:Int!)").arguments["id"]
        assert arg.variable_name == "id"
        assert arg.declared_type == "Int!"

    def test_variable_default(self):
        arg = decode_tag("list(page:$page:Int=1)").arguments["page"]
        assert arg.has_default
        assert arg.default == 1

    def test_variable_null_default(self):
        arg = decode_tag("list(after:$after:String=null)").arguments["after"]
        assert arg.has_default
        assert arg.default is None

    def test_list_type_is_normalized(self):
        arg = decode_tag("f(variants:$variants:[ ProductVariantsBulkInput! ]!)").arguments["variants"]
        assert arg.declared_type == "[ProductVariantsBulkInput!]!"

    def test_argument_order_preserved(self):
        tag = decode_tag("list(first:10, query:$:String!, id:$id:Int!)")
        assert list(tag.arguments) == ["first", "query", "id"]

    def test_arguments_and_flags(self):
        tag = decode_tag("lineItem(first:10),alias=items")
        assert tag.name == "lineItem"
        assert tag.arguments["first"].value == 10
        assert tag.flag("alias").value == "items"

    def test_empty_argument_list(self):
        tag = decode_tag("list()")
        assert tag.name == "list"
        assert tag.arguments == {}


class TestSyntaxErrors:
    """Tests for malformed tags."""

    @pytest.mark.parametrize("text", [
        "list(first:10",
        "list(first:10))",
        "list(first:[1, 2)",
        'list(q:"open)',
        "list(first:)",
        "list(first)",
        "list(first:10,)",
        "list(first:10, first:20)",
        "list(first:$:Int=)",
        "list(first:$:Int!!)",
        "list(first:$1abc:Int)",
        "list(first:10)x",
        "bad name",
        "name,",
        "list(first:@)",
        "list(ratio:1e400)",
        "list(ratio:$:Float=-1e400)",
    ])
    def test_rejected(self, text):
        with pytest.raises(TagSyntaxError):
            decode_tag(text)

    def test_error_carries_tag(self):
        with pytest.raises(TagSyntaxError) as exc_info:
            decode_tag("list(first:)")
        assert exc_info.value.tag == "list(first:)"
        assert "first" in str(exc_info.value)
