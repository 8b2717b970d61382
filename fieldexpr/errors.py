"""
Error taxonomy for template parsing, compilation and evaluation.

Construction-time errors (ParseError, CompileError) reject a template
outright. EvalError is raised per evaluation call and only fails the message
that requested it.
"""

from typing import Any, Optional


class ExpressionError(Exception):
    """Base class for all template and expression errors."""


class ParseError(ExpressionError):
    """Malformed template, e.g. an unclosed ${! expression."""

    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.position = position


class CompileError(ExpressionError):
    """Expression source rejected by the expression compiler."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"failed to compile expression '{source}': {reason}")
        self.source = source
        self.reason = reason


class EvalError(ExpressionError):
    """Evaluation of a template against a batch failed."""

    # Name of the dynamic field being rendered, set by MessageRenderer.
    field: Optional[str] = None


class ConversionError(EvalError):
    """A result could not be converted to the requested type."""

    def __init__(self, value: Any, target: str, reason: str = ""):
        message = f"cannot convert {type(value).__name__} {value!r} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.value = value
        self.target = target


class ConfigError(Exception):
    """A component configuration could not be turned into dynamic fields."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field
