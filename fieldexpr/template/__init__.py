"""Template parsing, compilation and evaluation."""

from .coercion import ValueKind, classify, convert, to_bool, to_float, to_int, to_string
from .compiler import Program, compile_expression
from .context import EvaluationContext, MessageView, build_context, message_expression_context
from .engine import BatchExpressionFactory, FieldEvaluator, parse
from .functions import ExpressionFunctions
from .interpolated import (
    InterpolatedExpression,
    InterpolatedExpressionFactory,
    JinjaExpressionFactory,
)
from .parser import ExpressionSource, Literal, parse_segments, render_segments

__all__ = [
    "BatchExpressionFactory",
    "EvaluationContext",
    "ExpressionFunctions",
    "ExpressionSource",
    "FieldEvaluator",
    "InterpolatedExpression",
    "InterpolatedExpressionFactory",
    "JinjaExpressionFactory",
    "Literal",
    "MessageView",
    "Program",
    "ValueKind",
    "build_context",
    "classify",
    "compile_expression",
    "convert",
    "message_expression_context",
    "parse",
    "parse_segments",
    "render_segments",
    "to_bool",
    "to_float",
    "to_int",
    "to_string",
]
