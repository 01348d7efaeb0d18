"""Exceptions raised while marshalling shapes into GraphQL documents.

Every error is terminal for the compile that raised it: nothing is retried
and no partial document is produced.
"""


class MarshalError(Exception):
    """Base class for all marshalling errors."""


class NilInputError(MarshalError):
    """Raised when no root shape (or an empty one) is given."""


class UnsupportedShapeError(MarshalError):
    """Raised when a type is not a pydantic model or a dataclass."""

    def __init__(self, type_: object):
        self.type = type_
        super().__init__(
            f"{type_!r} is not a structured shape (expected a pydantic model or a dataclass)"
        )


class CyclicReferenceError(MarshalError):
    """Raised when a shape is reached again while it is still being expanded.

    Attributes:
        chain: Shape names from the first occurrence back to itself
    """

    def __init__(self, chain: list[str]):
        self.chain = chain
        super().__init__(f"cyclic reference detected: {' -> '.join(chain)}")


class TagSyntaxError(MarshalError):
    """Raised for a malformed field tag."""

    def __init__(self, tag: str, reason: str):
        self.tag = tag
        self.reason = reason
        super().__init__(f"invalid tag {tag!r}: {reason}")


class TagConflictError(MarshalError):
    """Raised when a tag combines options that cannot be resolved together."""


class AnonymousShapeError(MarshalError):
    """Raised when a shape needs a GraphQL type name but has none."""


class AnonymousUnionMemberError(AnonymousShapeError):
    """Raised when a union branch refers to a shape without a derivable name."""


class InvalidUnionMemberError(MarshalError):
    """Raised when a union branch is not itself a structured shape."""


class VariableTypeConflictError(MarshalError):
    """Raised when one variable name is declared with two different types."""

    def __init__(self, name: str, existing: str | None, new: str | None, path: str):
        self.name = name
        self.existing = existing
        self.new = new
        self.path = path
        super().__init__(
            f"variable ${name} at [{path}] declared as {new!r}, "
            f"but already declared as {existing!r}"
        )


class VariableNameConflictError(MarshalError):
    """Raised when an explicit variable name collides with a synthesized one."""


class MissingVariableTypeError(MarshalError):
    """Raised at assembly time for a variable that was never given a type."""


class FragmentNameConflictError(MarshalError):
    """Raised when two different shapes derive the same fragment name."""


class UnresolvedReferenceError(MarshalError):
    """Raised when a field annotation names a class that cannot be found.

    Attributes:
        shape: Name of the shape declaring the field
        reference: The unresolved name
    """

    def __init__(self, shape: str, reference: str):
        self.shape = shape
        self.reference = reference
        super().__init__(f"shape {shape} refers to undefined type {reference!r}")
