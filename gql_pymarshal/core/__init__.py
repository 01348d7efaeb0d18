"""Core modules for marshalling shapes into GraphQL documents."""

from .compiler import SelectionSetCompiler
from .document import CompiledDocument, marshal, to_mutation, to_query
from .errors import (
    AnonymousShapeError,
    AnonymousUnionMemberError,
    CyclicReferenceError,
    FragmentNameConflictError,
    InvalidUnionMemberError,
    MarshalError,
    MissingVariableTypeError,
    NilInputError,
    TagConflictError,
    TagSyntaxError,
    UnresolvedReferenceError,
    UnsupportedShapeError,
    VariableNameConflictError,
    VariableTypeConflictError,
)
from .extractor import TypeExtractor
from .ir import (
    Argument,
    ArgumentKind,
    FieldNode,
    Fragment,
    TypeNode,
    Variable,
)
from .settings import CompilerSettings, get_settings, set_indent
from .tags import GraphQL, TagArgument, TagFlag, TagValue, decode_tag

__all__ = [
    # Entry points
    "marshal",
    "to_query",
    "to_mutation",
    "CompiledDocument",
    # Tags
    "GraphQL",
    "TagArgument",
    "TagFlag",
    "TagValue",
    "decode_tag",
    # IR types
    "Argument",
    "ArgumentKind",
    "FieldNode",
    "Fragment",
    "TypeNode",
    "Variable",
    # Extractor / Compiler
    "TypeExtractor",
    "SelectionSetCompiler",
    # Settings
    "CompilerSettings",
    "get_settings",
    "set_indent",
    # Errors
    "MarshalError",
    "NilInputError",
    "UnsupportedShapeError",
    "CyclicReferenceError",
    "TagSyntaxError",
    "TagConflictError",
    "AnonymousShapeError",
    "AnonymousUnionMemberError",
    "InvalidUnionMemberError",
    "FragmentNameConflictError",
    "VariableTypeConflictError",
    "VariableNameConflictError",
    "MissingVariableTypeError",
    "UnresolvedReferenceError",
]
