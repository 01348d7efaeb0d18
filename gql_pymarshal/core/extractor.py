"""Type graph extraction.

Walks pydantic models and dataclasses and produces the TypeNode graph the
compiler works on. Each shape class is extracted once per extractor;
later references reuse the cached node and bump its reuse count.
"""

import collections.abc
import dataclasses
import logging
import typing
from collections.abc import Iterator
from contextlib import contextmanager
from types import NoneType, UnionType
from typing import Annotated, Any, ForwardRef, get_args, get_origin, get_type_hints

from pydantic import BaseModel, PydanticUndefinedAnnotation

from .errors import (
    CyclicReferenceError,
    TagConflictError,
    TagSyntaxError,
    UnresolvedReferenceError,
    UnsupportedShapeError,
)
from .ir import TYPENAME, Argument, ArgumentKind, FieldNode, TypeNode
from .tags import GraphQL, TagArgument, TagValue, decode_tag

logger = logging.getLogger(__name__)

# Wrappers stripped to reach the element type of a field
_CONTAINER_ORIGINS = {
    list,
    set,
    frozenset,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.Collection,
    collections.abc.Iterable,
}


def is_shape(tp: Any) -> bool:
    """Check if a type is a structured shape (pydantic model or dataclass)."""
    if not isinstance(tp, type):
        return False
    return issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp)


def unwrap_type(tp: Any) -> Any:
    """Strip Annotated, Optional and collection wrappers from a type."""
    while True:
        origin = get_origin(tp)
        if origin is Annotated:
            tp = get_args(tp)[0]
        elif origin in (typing.Union, UnionType):
            args = [a for a in get_args(tp) if a is not NoneType]
            if len(args) != 1:
                return tp
            tp = args[0]
        elif origin in _CONTAINER_ORIGINS:
            args = [a for a in get_args(tp) if a is not Ellipsis]
            if not args:
                return tp
            tp = args[0]
        else:
            return tp


def shape_name(cls: type) -> str:
    """Return the GraphQL type name of a shape."""
    return getattr(cls, "__typename__", cls.__name__)


def qualified_name(cls: type) -> str:
    """Return 'package.module.Outer.Inner' for a shape class."""
    segments = [s for s in cls.__qualname__.split(".") if s != "<locals>"]
    return ".".join([cls.__module__, *segments])


@dataclasses.dataclass
class _Member:
    attribute: str
    annotation: Any
    tag: str | None = None
    json_name: str | None = None


def _tag_from_metadata(metadata: typing.Iterable[Any]) -> str | None:
    for item in metadata:
        if isinstance(item, GraphQL):
            return item.tag
    return None


def _model_members(cls: type[BaseModel]) -> Iterator[_Member]:
    if not cls.__pydantic_complete__:
        # String annotations stay unresolved until the model is rebuilt
        try:
            cls.model_rebuild()
        except PydanticUndefinedAnnotation as e:
            raise UnresolvedReferenceError(shape_name(cls), e.name) from e
    for attribute, info in cls.model_fields.items():
        if attribute.startswith("_"):
            continue
        yield _Member(
            attribute,
            info.annotation,
            tag=_tag_from_metadata(info.metadata),
            json_name=info.alias,
        )


def _dataclass_members(cls: type) -> Iterator[_Member]:
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise UnresolvedReferenceError(shape_name(cls), e.name or str(e)) from e
    for f in dataclasses.fields(cls):
        if f.name.startswith("_"):
            continue
        annotation = hints.get(f.name, f.type)
        tag = f.metadata.get("graphql")
        if tag is None and get_origin(annotation) is Annotated:
            tag = _tag_from_metadata(annotation.__metadata__)
        yield _Member(f.name, annotation, tag=tag, json_name=f.metadata.get("json"))


def _members(cls: type) -> Iterator[_Member]:
    if issubclass(cls, BaseModel):
        return _model_members(cls)
    return _dataclass_members(cls)


def _argument(arg: TagArgument) -> Argument:
    if arg.placeholder:
        return Argument(
            key=arg.key,
            kind=ArgumentKind.VARIABLE,
            variable_name=arg.variable_name,
            declared_type=arg.declared_type,
            default=arg.default,
            has_default=arg.has_default,
        )
    return Argument(
        key=arg.key,
        kind=ArgumentKind.LITERAL,
        value=arg.value,
        declared_type=arg.declared_type,
    )


class TypeExtractor:
    """Builds the type graph for one compile.

    The cache and the in-progress set belong to this instance; create a
    new extractor for every compile.
    """

    def __init__(self):
        self._types: dict[type, TypeNode | None] = {}
        self._visiting: dict[type, None] = {}  # Insertion-ordered expansion stack

    @contextmanager
    def _expanding(self, cls: type) -> Iterator[None]:
        """Mark a shape as being expanded for the duration of the block."""
        if cls in self._visiting:
            stack = list(self._visiting)
            chain = [shape_name(c) for c in stack[stack.index(cls):]]
            raise CyclicReferenceError(chain + [shape_name(cls)])
        self._visiting[cls] = None
        try:
            yield
        finally:
            del self._visiting[cls]

    def extract(self, shape: Any) -> TypeNode | None:
        """Extract the node for a shape, or None if it has no visible fields.

        Raises:
            CyclicReferenceError: if the shape contains itself
            UnsupportedShapeError: if the type is not a pydantic model or dataclass
            TagSyntaxError: if a field tag is malformed
            UnresolvedReferenceError: if a field names a class that is not defined
        """
        cls = unwrap_type(shape)
        if not is_shape(cls):
            raise UnsupportedShapeError(shape)
        with self._expanding(cls):
            if cls in self._types:
                node = self._types[cls]
                if node is not None:
                    node.reuse_count += 1
                    logger.debug("Reusing %s (references: %d)", node.name, node.reuse_count)
                return node

            fields = [self._extract_field(cls, member) for member in _members(cls)]
            if not fields:
                self._types[cls] = None
                return None

            node = TypeNode(
                source=cls,
                name=shape_name(cls),
                qualified_name=qualified_name(cls),
                fields=fields,
                is_union=any(f.is_typename and f.has_flag("union") for f in fields),
            )
            self._types[cls] = node
            logger.debug("Extracted %s with %d fields", node.name, len(fields))
            return node

    def _decode(self, owner: type, member: _Member) -> TagValue | None:
        if member.tag is None:
            # JSON name only renames the field, it carries no options
            return TagValue(name=member.json_name) if member.json_name else None
        try:
            return decode_tag(member.tag)
        except TagSyntaxError as e:
            e.add_note(f"in field {shape_name(owner)}.{member.attribute}")
            raise

    def _extract_field(self, owner: type, member: _Member) -> FieldNode:
        tag = self._decode(owner, member)
        name = member.attribute
        flags = ()
        arguments = {}
        if tag is not None:
            flags = tag.flags
            if tag.name:
                name = tag.name
            elif tag.has_flag("union"):
                name = TYPENAME
            alias = tag.flag("alias")
            if alias is not None and alias.value:
                if name == TYPENAME and tag.has_flag("union"):
                    raise TagConflictError(
                        f"field {shape_name(owner)}.{member.attribute}: "
                        "the union discriminator cannot be aliased"
                    )
                name = f"{alias.value}:{name}"
            arguments = {key: _argument(arg) for key, arg in tag.arguments.items()}

        nested = None
        element = unwrap_type(member.annotation)
        if isinstance(element, (str, ForwardRef)):
            reference = element if isinstance(element, str) else element.__forward_arg__
            raise UnresolvedReferenceError(shape_name(owner), reference)
        if is_shape(element):
            nested = self.extract(element)

        return FieldNode(
            name=name,
            attribute=member.attribute,
            inline=tag is not None and tag.has_flag("inline"),
            nested=nested,
            arguments=arguments,
            flags=flags,
        )
