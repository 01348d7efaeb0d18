"""Conversion between GraphQL value syntax and Python values."""

import math
from typing import Any

from graphql import (
    BooleanValueNode,
    EnumValueNode,
    FloatValueNode,
    IntValueNode,
    ListValueNode,
    NullValueNode,
    ObjectValueNode,
    StringValueNode,
    ValueNode,
)
from graphql.language.print_string import print_string


class EnumLiteral(str):
    """A bare GraphQL enum value; formatted without quotes."""

    def __repr__(self):
        return f"EnumLiteral({str(self)!r})"


def value_from_node(node: ValueNode) -> Any:
    """Convert a parsed GraphQL value node to a Python value.

    Raises:
        ValueError: for a float outside the finite range (e.g. 1e400)
    """
    if isinstance(node, NullValueNode):
        return None
    if isinstance(node, BooleanValueNode):
        return node.value
    if isinstance(node, IntValueNode):
        return int(node.value)
    if isinstance(node, FloatValueNode):
        value = float(node.value)
        if not math.isfinite(value):
            raise ValueError(f"float {node.value} is out of range")
        return value
    if isinstance(node, StringValueNode):
        return node.value
    if isinstance(node, EnumValueNode):
        return EnumLiteral(node.value)
    if isinstance(node, ListValueNode):
        return [value_from_node(v) for v in node.values]
    if isinstance(node, ObjectValueNode):
        return {f.name.value: value_from_node(f.value) for f in node.fields}
    raise ValueError(f"unsupported value: {node.kind}")


def _format(value: Any, none_text: str) -> str:
    if value is None:
        return none_text
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, EnumLiteral):
        return str(value)
    if isinstance(value, str):
        return print_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format(v, "null") for v in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{k}: {_format(v, 'null')}" for k, v in value.items()) + "}"
    return str(value)


def format_literal(value: Any) -> str:
    """Format an argument literal; None formats to "" so the argument is dropped."""
    return _format(value, "")


def format_default(value: Any) -> str:
    """Format a variable default value; None is written as null."""
    return _format(value, "null")
