"""Compile entry point and operation assembly.

Example usage:
    from gql_pymarshal import marshal

    document = marshal(ProductsQuery)
    print(document.query("GetProducts"))
"""

import logging
from dataclasses import dataclass, field
from typing import Any, get_origin

from .compiler import SelectionSetCompiler
from .errors import MissingVariableTypeError, NilInputError
from .extractor import TypeExtractor
from .ir import Fragment, Variable
from .settings import CompilerSettings

logger = logging.getLogger(__name__)


@dataclass
class CompiledDocument:
    """Result of marshalling one root shape."""
    body: str
    variables: list[Variable] = field(default_factory=list)
    fragments: list[Fragment] = field(default_factory=list)

    def variable(self, name: str) -> Variable | None:
        """Look up a variable by name (with or without the leading '$')."""
        name = name.removeprefix("$")
        for variable in self.variables:
            if variable.name == name:
                return variable
        return None

    def query(self, name: str | None = None) -> str:
        """Assemble a complete query document.

        Args:
            name: Operation name, e.g. "GetProducts"

        Returns:
            Fragment definitions followed by the query operation
        """
        return self._build("query", name)

    def mutation(self, name: str | None = None) -> str:
        """Assemble a complete mutation document."""
        return self._build("mutation", name)

    def _build(self, operation: str, name: str | None) -> str:
        declarations = []
        for variable in self.variables:
            if not variable.type:
                raise MissingVariableTypeError(
                    f"variable {variable.reference} has no type "
                    f"(used at [{', '.join(variable.usage_paths)}])"
                )
            declarations.append(variable.declaration())

        header = operation
        if name:
            header += f" {name}"
        if declarations:
            header += f"({', '.join(declarations)})"

        parts = [fragment.body for fragment in self.fragments]
        parts.append(f"{header} {self.body}")
        return "\n".join(parts)


def marshal(shape: Any, settings: CompilerSettings | None = None) -> CompiledDocument:
    """Compile a pydantic model or dataclass into a GraphQL document.

    Args:
        shape: The root shape: a class, an instance, or a wrapped type like list[Model]
        settings: Formatting settings; the process-wide settings when omitted

    Returns:
        The compiled body with its fragments and variables

    Raises:
        NilInputError: if no shape is given or the shape has no fields
        MarshalError: for any other problem found while compiling
    """
    if shape is None:
        raise NilInputError("shape to marshal cannot be None")
    if not isinstance(shape, type) and get_origin(shape) is None:
        # An instance; its class is the shape
        shape = type(shape)

    root = TypeExtractor().extract(shape)
    compiler = SelectionSetCompiler(settings)
    body = compiler.build(root)
    logger.debug(
        "Marshalled %s: %d fragments, %d variables",
        root.name, len(compiler.fragments), len(compiler.variables),
    )
    return CompiledDocument(
        body=body,
        variables=list(compiler.variables.values()),
        fragments=list(compiler.fragments.values()),
    )


def to_query(shape: Any, name: str | None = None, settings: CompilerSettings | None = None) -> str:
    """Marshal a shape and assemble it as a query document."""
    return marshal(shape, settings).query(name)


def to_mutation(shape: Any, name: str | None = None, settings: CompilerSettings | None = None) -> str:
    """Marshal a shape and assemble it as a mutation document."""
    return marshal(shape, settings).mutation(name)
