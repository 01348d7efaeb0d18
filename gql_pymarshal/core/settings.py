"""Output settings shared by all compilations in the process.

Example usage:
    from gql_pymarshal.core.settings import set_indent

    set_indent("\\t")  # applies to every compile started afterwards
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CompilerSettings:
    """Formatting options for compiled selection sets."""
    indent: str = "  "
    _levels: dict[int, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    def indent_for(self, level: int) -> str:
        """Return the indentation for a nesting level."""
        if level not in self._levels:
            self._levels[level] = self.indent * level
        return self._levels[level]


_default_settings = CompilerSettings()


def get_settings() -> CompilerSettings:
    """Return the process-wide default settings."""
    return _default_settings


def set_indent(unit: str) -> CompilerSettings:
    """Replace the process-wide indent unit.

    Text compiled before the call is unaffected; compilers already
    constructed keep the settings they captured.
    """
    global _default_settings
    _default_settings = CompilerSettings(indent=unit)
    return _default_settings
