"""
Code generation backends.
"""

from __future__ import annotations

from ..config import CodeGeneratorConfig
from .base import CodeBackend
from .es6_backend import ES6Backend
from .indent_writer import IndentingWriter
from .typescript_backend import TypeScriptBackend


def create_backend(config: CodeGeneratorConfig) -> CodeBackend:
    """Select the backend for a configuration."""
    if config.es6:
        return ES6Backend(config)
    return TypeScriptBackend(config)


__all__ = [
    "CodeBackend",
    "TypeScriptBackend",
    "ES6Backend",
    "IndentingWriter",
    "create_backend",
]
