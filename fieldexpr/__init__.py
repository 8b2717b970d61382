"""
fieldexpr - per-message template evaluation for pipeline configuration.

Configuration strings such as topic or queue names may embed ${!...}
expressions that are compiled once and evaluated for every message.
"""

from .errors import CompileError, ConversionError, EvalError, ExpressionError, ParseError
from .message import Batch, Message
from .template import FieldEvaluator, InterpolatedExpressionFactory, parse

__all__ = [
    "Batch",
    "CompileError",
    "ConversionError",
    "EvalError",
    "ExpressionError",
    "FieldEvaluator",
    "InterpolatedExpressionFactory",
    "Message",
    "ParseError",
    "parse",
]
