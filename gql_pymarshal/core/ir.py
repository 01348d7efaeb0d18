"""Intermediate Representation (IR) for marshalled shapes.

This module defines dataclasses for the type graph produced by the
extractor and for the fragments and variables collected by the compiler.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .tags import TagFlag
from .values import format_default

_NAME_RE = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")
_NON_NAME_CHAR_RE = re.compile(r"[^_0-9A-Za-z]")

TYPENAME = "__typename"


def is_graphql_name(name: str) -> bool:
    """Check if a string is a valid GraphQL name."""
    return bool(_NAME_RE.match(name))


def to_snake_case(name: str) -> str:
    """Convert camelCase to snake_case."""
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', name)
    return re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()


def to_variable_name(text: str) -> str:
    """Turn a field path like 'items_alias:items_first' into a variable name."""
    return to_snake_case(_NON_NAME_CHAR_RE.sub("_", text))


class ArgumentKind(Enum):
    """How an argument value is supplied."""
    LITERAL = "literal"
    VARIABLE = "variable"


@dataclass
class Argument:
    """Represents one argument on a field call."""
    key: str
    kind: ArgumentKind
    value: Any = None
    variable_name: str | None = None  # None means synthesize from the field path
    declared_type: str | None = None
    default: Any = None
    has_default: bool = False

    @property
    def is_variable(self) -> bool:
        return self.kind is ArgumentKind.VARIABLE


@dataclass
class FieldNode:
    """Represents one field of a shape."""
    name: str
    attribute: str
    inline: bool = False
    nested: "TypeNode | None" = None
    arguments: dict[str, Argument] = field(default_factory=dict)
    flags: tuple[TagFlag, ...] = ()

    def has_flag(self, name: str) -> bool:
        return any(flag.name == name for flag in self.flags)

    @property
    def is_typename(self) -> bool:
        return self.name == TYPENAME


@dataclass(eq=False)
class TypeNode:
    """Represents one distinct structured shape.

    Nodes are compared by identity: the extractor creates exactly one node
    per shape class.
    """
    source: type
    name: str
    qualified_name: str
    fields: list[FieldNode] = field(default_factory=list)
    is_union: bool = False
    reuse_count: int = 1

    @property
    def is_anonymous(self) -> bool:
        return not is_graphql_name(self.name)

    @property
    def is_reused(self) -> bool:
        return self.reuse_count > 1

    @property
    def fragment_name(self) -> str:
        """Fragment name, e.g. 'shapes.Order.Line' -> 'ShapesOrderLine'."""
        segments = [s[:1].upper() + s[1:] for s in self.qualified_name.split(".") if s]
        return _NON_NAME_CHAR_RE.sub("_", "".join(segments))


@dataclass
class Fragment:
    """A named selection set extracted for a reused shape."""
    name: str
    type_condition: str
    body: str  # Complete definition, e.g. "fragment ShapesUser on User {...}"

    @property
    def spread(self) -> str:
        return f"...{self.name}"


@dataclass
class Variable:
    """A deduplicated variable collected from field arguments."""
    name: str  # Without the leading "$"
    type: str | None = None
    usage_paths: list[str] = field(default_factory=list)
    default: Any = None
    has_default: bool = False
    explicit: bool = False  # Named in the tag rather than synthesized

    @property
    def reference(self) -> str:
        return f"${self.name}"

    def declaration(self) -> str:
        """Return the definition used in the operation header: '$first: Int = 10'."""
        text = f"{self.reference}: {self.type}"
        if self.has_default:
            text += f" = {format_default(self.default)}"
        return text
