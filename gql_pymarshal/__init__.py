"""Marshal pydantic models and dataclasses into GraphQL query documents."""

from .core import (
    CompiledDocument,
    GraphQL,
    MarshalError,
    marshal,
    set_indent,
    to_mutation,
    to_query,
)

__version__ = "0.1.0"

__all__ = [
    "CompiledDocument",
    "GraphQL",
    "MarshalError",
    "marshal",
    "set_indent",
    "to_mutation",
    "to_query",
]
