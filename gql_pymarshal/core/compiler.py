"""Selection set compiler.

Turns a TypeNode graph into GraphQL selection set text, extracting
fragments for shapes referenced more than once and collecting the
variables used by field arguments.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from .errors import (
    AnonymousShapeError,
    AnonymousUnionMemberError,
    FragmentNameConflictError,
    InvalidUnionMemberError,
    NilInputError,
    VariableNameConflictError,
    VariableTypeConflictError,
)
from .ir import Argument, FieldNode, Fragment, TypeNode, Variable, to_variable_name
from .settings import CompilerSettings, get_settings
from .values import format_literal

logger = logging.getLogger(__name__)


class SelectionSetCompiler:
    """Compiles one type graph into selection set text.

    Holds the fragment table, the variable table and the field path for a
    single compile; create a new compiler for every compile.
    """

    def __init__(self, settings: CompilerSettings | None = None):
        """Initialize with formatting settings (defaults to the process-wide ones)."""
        self.settings = settings or get_settings()
        self.fragments: dict[type, Fragment] = {}
        self.variables: dict[str, Variable] = {}
        self._path: list[str] = []

    def build(self, root: TypeNode | None) -> str:
        """Compile the root shape into the operation body."""
        if root is None:
            raise NilInputError("shape to marshal cannot be empty")
        return self.compile(root)

    def compile(
        self,
        node: TypeNode | None,
        inline: bool = False,
        union_member: bool = False,
        level: int = 0,
    ) -> str:
        """Compile a node into selection set text.

        Args:
            node: The shape to compile
            inline: True when the fields are spliced into the parent set
            union_member: True for a union branch; keeps braces even when inline
            level: Nesting level of the set, 0 at the top

        Returns:
            "{ ... }" for a braced set, the bare field lines for an inline
            set, or a fragment spread for a shape already made a fragment
        """
        if node is None:
            return ""
        if node.is_reused:
            fragment = self.fragments.get(node.source)
            if fragment is not None:
                if inline and not union_member:
                    return f"\n{self._indent(level + 1)}{fragment.spread}"
                return f"{{ {fragment.spread} }}"

        braced = not inline or union_member
        if node.is_reused and braced:
            # Becomes a fragment, which starts at the top level
            level = 0

        parts = ["{"] if braced else []
        with self._segment():
            for field in node.fields:
                self._path[-1] = field.name
                if node.is_union:
                    parts.append(self._compile_union_member(node, field, level))
                elif field.inline:
                    parts.append(self.compile(field.nested, inline=True, level=level))
                else:
                    parts.append(self._compile_field(field, level))
        if not braced:
            return "".join(parts)

        parts.append(f"\n{self._indent(level)}}}")
        body = "".join(parts)
        if node.is_reused:
            return self._register_fragment(node, body)
        return body

    @contextmanager
    def _segment(self) -> Iterator[None]:
        """Reserve one path segment for the fields of the current node."""
        self._path.append("")
        try:
            yield
        finally:
            self._path.pop()

    def _indent(self, level: int) -> str:
        return self.settings.indent_for(level)

    def _current_path(self) -> str:
        return "/".join(self._path)

    def _compile_field(self, field: FieldNode, level: int) -> str:
        """Compile 'name(args) { ... }' on its own line."""
        text = f"\n{self._indent(level + 1)}{field.name}{self._compile_arguments(field)}"
        nested = self.compile(field.nested, level=level + 1)
        if nested:
            text += f" {nested}"
        return text

    def _compile_union_member(self, node: TypeNode, field: FieldNode, level: int) -> str:
        """Compile one branch of a union: '__typename' or '... on Shape { ... }'."""
        prefix = f"\n{self._indent(level + 1)}"
        if field.is_typename:
            return prefix + field.name
        if field.nested is None:
            raise InvalidUnionMemberError(
                f"field [{self._current_path()}] in union type {node.name} should be a structured shape"
            )
        if field.nested.is_anonymous:
            raise AnonymousUnionMemberError(
                f"anonymous shapes are not supported for field [{self._current_path()}] in union type {node.name}"
            )
        selection = self.compile(field.nested, inline=field.inline, union_member=True, level=level + 1)
        return f"{prefix}... on {field.nested.name} {selection}"

    def _register_fragment(self, node: TypeNode, body: str) -> str:
        """Store the body of a reused shape as a fragment and return its spread."""
        if node.is_anonymous:
            raise AnonymousShapeError(
                f"shape {node.qualified_name} is referenced {node.reuse_count} times "
                "but has no GraphQL name to declare a fragment on"
            )
        name = node.fragment_name
        for source, existing in self.fragments.items():
            if existing.name == name and source is not node.source:
                raise FragmentNameConflictError(
                    f"shapes {source!r} and {node.source!r} both map to fragment {name}"
                )
        fragment = Fragment(
            name=name,
            type_condition=node.name,
            body=f"fragment {name} on {node.name} {body}",
        )
        self.fragments[node.source] = fragment
        logger.debug("Registered fragment %s on %s", name, node.name)
        return f"{{ {fragment.spread} }}"

    def _compile_arguments(self, field: FieldNode) -> str:
        """Build the argument clause: (first: 10, after: $items_after)"""
        parts = []
        for key, arg in field.arguments.items():
            value = self._compile_argument(key, arg)
            if value:
                parts.append(f"{key}: {value}")
        if not parts:
            return ""
        return f"({', '.join(parts)})"

    def _compile_argument(self, key: str, arg: Argument) -> str:
        """Return the value text of one argument, registering variables."""
        if not arg.is_variable:
            return format_literal(arg.value)

        path = self._current_path()
        explicit = bool(arg.variable_name)
        name = arg.variable_name if explicit else to_variable_name("_".join([*self._path, key]))
        variable = self.variables.get(name)
        if variable is None:
            variable = Variable(
                name=name,
                type=arg.declared_type,
                usage_paths=[path],
                default=arg.default,
                has_default=arg.has_default,
                explicit=explicit,
            )
            self.variables[name] = variable
            logger.debug("Collected variable $%s (%s) at [%s]", name, arg.declared_type, path)
            return variable.reference

        if variable.explicit != explicit:
            raise VariableNameConflictError(
                f"variable ${name} at [{path}] collides with the "
                f"{'explicit' if variable.explicit else 'generated'} variable used at "
                f"[{', '.join(variable.usage_paths)}]"
            )
        if variable.type != arg.declared_type:
            raise VariableTypeConflictError(name, variable.type, arg.declared_type, path)
        variable.usage_paths.append(path)
        return variable.reference
