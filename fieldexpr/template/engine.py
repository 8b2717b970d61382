"""
Template evaluation against message batches.

A FieldEvaluator parses and compiles a template once, then evaluates it any
number of times, once per message, against a context built from that
message's batch and index.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from ..message import Batch, Message
from .coercion import to_bool, to_float, to_int, to_string
from .compiler import Program, compile_expression
from .context import ExpressionContext, build_context
from .parser import ExpressionSource, Literal, parse_segments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledExpression:
    """An expression segment paired with its compiled program."""
    source: str
    program: Program


Segment = Union[Literal, CompiledExpression]


class FieldEvaluator:
    """Holds a precompiled template and evaluates it against batches."""

    def __init__(self, template: str):
        """
        Parse and compile a template.

        Args:
            template: Template string, e.g. "devices/${!meta('id')}/events"

        Raises:
            ParseError: If the template is malformed
            CompileError: If any expression fails to compile
        """
        self._original = template
        segments: List[Segment] = []
        for segment in parse_segments(template):
            if isinstance(segment, ExpressionSource):
                segments.append(CompiledExpression(segment.source, compile_expression(segment.source)))
            else:
                segments.append(segment)
        self._segments = tuple(segments)

        logger.debug("Compiled template %r with %d expression(s)", template, self.expression_count())

    @property
    def original(self) -> str:
        return self._original

    def get_original(self) -> str:
        """Return the template string this evaluator was built from."""
        return self._original

    def has_expressions(self) -> bool:
        return any(isinstance(s, CompiledExpression) for s in self._segments)

    def expression_count(self) -> int:
        return sum(1 for s in self._segments if isinstance(s, CompiledExpression))

    def eval(self, batch: Sequence[Message], index: int) -> Any:
        """
        Evaluate the template for the message at index.

        A template made of exactly one expression returns the expression's
        native result. Anything else returns the concatenated string.

        Raises:
            EvalError: On an empty batch, an out of range index, or a
                failing expression
        """
        environment = build_context(batch, index).as_environment()

        if len(self._segments) == 1 and isinstance(self._segments[0], CompiledExpression):
            return self._segments[0].program.run(environment)

        parts = []
        for segment in self._segments:
            if isinstance(segment, CompiledExpression):
                parts.append(to_string(segment.program.run(environment)))
            else:
                parts.append(segment.text)
        return "".join(parts)

    def eval_string(self, batch: Sequence[Message], index: int) -> str:
        return to_string(self.eval(batch, index))

    def eval_int(self, batch: Sequence[Message], index: int) -> int:
        return to_int(self.eval(batch, index))

    def eval_bool(self, batch: Sequence[Message], index: int) -> bool:
        return to_bool(self.eval(batch, index))

    def eval_float(self, batch: Sequence[Message], index: int) -> float:
        return to_float(self.eval(batch, index))

    def __repr__(self) -> str:
        return f"FieldEvaluator({self._original!r})"


def parse(template: str) -> FieldEvaluator:
    """Parse and compile a template into a FieldEvaluator."""
    return FieldEvaluator(template)


class BatchExpression:
    """Expression backed by a FieldEvaluator over a one-message batch."""

    def __init__(self, evaluator: FieldEvaluator):
        self.evaluator = evaluator

    @staticmethod
    def _to_batch(ctx: Optional[ExpressionContext]) -> Batch:
        ctx = ctx or {}
        message = Message()

        content = ctx.get("content")
        if isinstance(content, str):
            message.set_raw(content.encode("utf-8"))

        metadata = ctx.get("metadata")
        if isinstance(metadata, dict):
            for key, value in metadata.items():
                message.set_metadata(key, value)

        return Batch([message])

    def eval_string(self, ctx: Optional[ExpressionContext]) -> str:
        return self.evaluator.eval_string(self._to_batch(ctx), 0)

    def eval_int(self, ctx: Optional[ExpressionContext]) -> int:
        return self.evaluator.eval_int(self._to_batch(ctx), 0)

    def eval_bool(self, ctx: Optional[ExpressionContext]) -> bool:
        return self.evaluator.eval_bool(self._to_batch(ctx), 0)


class BatchExpressionFactory:
    """
    Expression factory that treats each source as a full template.

    Lets code written against a plain ExpressionContext (content and
    metadata keys) reuse the batch evaluator with all of its bindings.
    """

    def parse_expression(self, source: str) -> BatchExpression:
        return BatchExpression(FieldEvaluator(source))
