"""Field tag decoding.

A tag is a short annotation string attached to a field that controls how
the field is written in the selection set:

    "name"                                  rename the field
    "items(first:10, after:$:String)"       field call with arguments
    "node(id:$nodeId:ID!)"                  explicitly named variable
    "page(size:$size:Int=20)"               variable with a default
    "contact,inline"                        flatten the nested shape
    "fax,alias=faxNumber"                   GraphQL alias
    "__typename,union"                      union discriminator

Example usage:
    from typing import Annotated
    from pydantic import BaseModel
    from gql_pymarshal import GraphQL

    class Query(BaseModel):
        items: Annotated[list[Item], GraphQL("items(first:10)")]
"""

import re
from dataclasses import dataclass, field
from typing import Any

from graphql import parse_type, parse_value, print_ast
from graphql.error import GraphQLSyntaxError

from .errors import TagSyntaxError
from .values import value_from_node

_IDENT_RE = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")
_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}


@dataclass(frozen=True)
class GraphQL:
    """Annotated marker carrying a field tag."""
    tag: str


@dataclass(frozen=True)
class TagFlag:
    """A flag following the field name, e.g. 'inline' or 'alias=x'."""
    name: str
    value: str | None = None

    @property
    def is_boolean(self) -> bool:
        return self.value is None


@dataclass
class TagArgument:
    """One decoded argument of a field call."""
    key: str
    placeholder: bool
    value: Any = None
    variable_name: str | None = None
    declared_type: str | None = None
    default: Any = None
    has_default: bool = False


@dataclass
class TagValue:
    """Decoded form of a field tag."""
    name: str = ""
    flags: tuple[TagFlag, ...] = ()
    arguments: dict[str, TagArgument] = field(default_factory=dict)

    def flag(self, name: str) -> TagFlag | None:
        for flag in self.flags:
            if flag.name == name:
                return flag
        return None

    def has_flag(self, name: str) -> bool:
        return self.flag(name) is not None


def _split(tag: str, text: str, sep: str, maxsplit: int = -1) -> list[str]:
    """Split on sep at bracket depth zero and outside string literals."""
    parts = []
    stack: list[str] = []
    start = 0
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in _CLOSERS:
            if not stack or stack.pop() != ch:
                raise TagSyntaxError(tag, f"unbalanced {ch!r}")
        elif ch == sep and not stack and maxsplit != 0:
            parts.append(text[start:i])
            start = i + 1
            maxsplit -= 1
    if in_string:
        raise TagSyntaxError(tag, "unterminated string")
    if stack:
        raise TagSyntaxError(tag, f"missing {stack[-1]!r}")
    parts.append(text[start:])
    return parts


def _check_ident(tag: str, text: str, what: str) -> str:
    if not _IDENT_RE.match(text):
        raise TagSyntaxError(tag, f"invalid {what} {text!r}")
    return text


def _parse_type(tag: str, text: str) -> str:
    try:
        return print_ast(parse_type(text))
    except GraphQLSyntaxError as e:
        raise TagSyntaxError(tag, f"invalid type {text!r}: {e.message}") from e


def _parse_value(tag: str, text: str) -> Any:
    try:
        node = parse_value(text)
    except GraphQLSyntaxError as e:
        raise TagSyntaxError(tag, f"invalid value {text!r}: {e.message}") from e
    try:
        return value_from_node(node)
    except ValueError as e:
        raise TagSyntaxError(tag, f"invalid value {text!r}: {e}") from e


def _decode_argument(tag: str, text: str) -> TagArgument:
    pieces = _split(tag, text, ":", maxsplit=1)
    if len(pieces) != 2:
        raise TagSyntaxError(tag, f"argument {text.strip()!r} has no value")
    key = _check_ident(tag, pieces[0].strip(), "argument name")
    raw = pieces[1].strip()
    if not raw:
        raise TagSyntaxError(tag, f"argument {key!r} has an empty value")

    if raw.startswith("$"):
        arg = TagArgument(key=key, placeholder=True)
        head, *default = _split(tag, raw[1:], "=", maxsplit=1)
        name, *type_ = _split(tag, head, ":", maxsplit=1)
        name = name.strip()
        if name:
            arg.variable_name = _check_ident(tag, name, "variable name")
        if type_ and type_[0].strip():
            arg.declared_type = _parse_type(tag, type_[0].strip())
        if default:
            if not default[0].strip():
                raise TagSyntaxError(tag, f"argument {key!r} has an empty default")
            arg.default = _parse_value(tag, default[0].strip())
            arg.has_default = True
        return arg

    value, *type_ = _split(tag, raw, ":", maxsplit=1)
    if not value.strip():
        raise TagSyntaxError(tag, f"argument {key!r} has an empty value")
    arg = TagArgument(key=key, placeholder=False, value=_parse_value(tag, value.strip()))
    if type_ and type_[0].strip():
        arg.declared_type = _parse_type(tag, type_[0].strip())
    return arg


def decode_tag(tag: str | None) -> TagValue | None:
    """Decode a field tag; returns None for an empty tag.

    Raises:
        TagSyntaxError: if the tag is malformed
    """
    if tag is None or not tag.strip():
        return None
    head, *flag_parts = _split(tag, tag, ",")
    head = head.strip()
    result = TagValue()

    if "(" in head:
        if not head.endswith(")"):
            raise TagSyntaxError(tag, "text after argument list")
        name, _, args_text = head[:-1].partition("(")
        for part in _split(tag, args_text, ","):
            if not part.strip():
                if args_text.strip():
                    raise TagSyntaxError(tag, "empty argument")
                continue
            arg = _decode_argument(tag, part)
            if arg.key in result.arguments:
                raise TagSyntaxError(tag, f"duplicate argument {arg.key!r}")
            result.arguments[arg.key] = arg
        head = name.strip()
    if head:
        result.name = _check_ident(tag, head, "field name")

    flags = []
    for part in flag_parts:
        name, *value = _split(tag, part, "=", maxsplit=1)
        name = _check_ident(tag, name.strip(), "flag")
        flag_value = None
        if value:
            flag_value = value[0].strip()
            if len(flag_value) >= 2 and flag_value[0] == flag_value[-1] == '"':
                flag_value = flag_value[1:-1]
        flags.append(TagFlag(name=name, value=flag_value))
    result.flags = tuple(flags)
    return result
