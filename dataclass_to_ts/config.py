"""
Configuration for the TypeScript generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Indentation unit
    indent: str = "\t"

    # Add `?` to fields marked omitempty / optional
    mark_optional: bool = False

    # Don't generate a constructor
    no_constructor: bool = False

    # Don't generate a toObject() method
    no_to_object: bool = False

    # Don't map dates to Date (render their raw representation instead)
    no_date: bool = False

    # Don't assign default/zero values in the constructor
    no_assign_defaults: bool = False

    # Keep derived type names as declared
    no_capitalize: bool = False

    # Don't export anything
    no_exports: bool = False

    # Don't emit the helper functions
    no_helpers: bool = False

    # Emit untyped ES6 JavaScript instead of TypeScript
    es6: bool = False

    # Only generate interfaces (disables all class-only options)
    interface_only: bool = False

    # Render growable sequences as nullable arrays
    nullable_slices: bool = False

    # Name suffixes marking an int field as a unix timestamp
    date_suffixes: list[str] = field(default_factory=lambda: ["TS", "_ts"])

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        names = {f.name for f in fields(CodeGeneratorConfig)}
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k in names:
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @property
    def has_classes(self) -> bool:
        """Whether class-only output (constructors, helpers, exports list) applies."""
        return not self.interface_only

    @property
    def emit_helpers(self) -> bool:
        return self.has_classes and not self.no_helpers
