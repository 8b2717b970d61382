"""
Single-message interpolated expressions.

A lighter alternative to FieldEvaluator for call sites that only see one
message at a time. Expressions are evaluated against a plain key/value
ExpressionContext instead of a batch, and fully static templates are
resolved once at construction.
"""

from typing import List, Optional, Protocol, Union

from ..errors import CompileError, EvalError
from .coercion import to_bool, to_int, to_string
from .compiler import Program, compile_expression
from .context import ExpressionContext
from .parser import ExpressionSource, parse_segments


class Expression(Protocol):
    def eval_string(self, ctx: Optional[ExpressionContext]) -> str: ...

    def eval_int(self, ctx: Optional[ExpressionContext]) -> int: ...

    def eval_bool(self, ctx: Optional[ExpressionContext]) -> bool: ...


class ExpressionFactory(Protocol):
    def parse_expression(self, source: str) -> Expression: ...


class JinjaExpression:
    """A bare compiled expression evaluated against an ExpressionContext."""

    def __init__(self, program: Program):
        self.program = program

    def _run(self, ctx: Optional[ExpressionContext]):
        return self.program.run(ctx or {})

    def eval_string(self, ctx: Optional[ExpressionContext]) -> str:
        return to_string(self._run(ctx))

    def eval_int(self, ctx: Optional[ExpressionContext]) -> int:
        return to_int(self._run(ctx))

    def eval_bool(self, ctx: Optional[ExpressionContext]) -> bool:
        return to_bool(self._run(ctx))


class JinjaExpressionFactory:
    """Default factory: compiles bare expression source."""

    def parse_expression(self, source: str) -> JinjaExpression:
        return JinjaExpression(compile_expression(source))


class StaticText:
    """Resolver for literal text."""

    def __init__(self, text: str):
        self.text = text

    def is_static(self) -> bool:
        return True

    def resolve(self, ctx: Optional[ExpressionContext]) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"StaticText({self.text!r})"


class DynamicExpression:
    """Resolver for one ${!...} expression."""

    def __init__(self, source: str, expression: Expression):
        self.source = source
        self.expression = expression

    def is_static(self) -> bool:
        return False

    def resolve(self, ctx: Optional[ExpressionContext]) -> str:
        return self.expression.eval_string(ctx)

    def __repr__(self) -> str:
        return f"DynamicExpression({self.source!r})"


Resolver = Union[StaticText, DynamicExpression]


class InterpolatedExpression:
    """A template of static text and dynamic expressions."""

    def __init__(self, template: str, resolvers: List[Resolver], expression_factory: ExpressionFactory):
        self.template = template
        self.resolvers = resolvers
        self.expression_factory = expression_factory
        self._static = all(r.is_static() for r in resolvers)
        self._static_value = "".join(r.resolve(None) for r in resolvers) if self._static else ""

    def is_static(self) -> bool:
        """True when the template contains no expressions."""
        return self._static

    def static_value(self) -> str:
        """The precomputed output of a static template, "" otherwise."""
        return self._static_value

    def eval_string(self, ctx: Optional[ExpressionContext]) -> str:
        if self._static:
            return self._static_value
        return "".join(r.resolve(ctx) for r in self.resolvers)

    def _reparse(self, ctx: Optional[ExpressionContext], target: str) -> Expression:
        """
        Evaluate the template and compile its output as a new expression.

        Only templates made of exactly one expression support typed
        evaluation; anything with literal text fails.
        """
        if self._static:
            raise EvalError(f"interpolated expressions do not support direct {target} evaluation")
        if len(self.resolvers) != 1:
            raise EvalError(
                f"{target} evaluation requires a template with a single expression and no literal text: "
                f"'{self.template}'"
            )

        value = self.eval_string(ctx)
        try:
            return self.expression_factory.parse_expression(value)
        except CompileError as e:
            raise EvalError(f"failed to parse result as expression: {e}") from e

    def eval_int(self, ctx: Optional[ExpressionContext]) -> int:
        return self._reparse(ctx, "int").eval_int(ctx)

    def eval_bool(self, ctx: Optional[ExpressionContext]) -> bool:
        return self._reparse(ctx, "bool").eval_bool(ctx)

    def __repr__(self) -> str:
        return f"InterpolatedExpression({self.template!r})"


class InterpolatedExpressionFactory:
    """Creates interpolated expressions using a given expression backend."""

    def __init__(self, expression_factory: Optional[ExpressionFactory] = None):
        self.expression_factory = expression_factory or JinjaExpressionFactory()

    def parse_interpolated_expression(self, template: str) -> InterpolatedExpression:
        """
        Parse a string that may contain ${!...} interpolations.

        Raises:
            ParseError: If the template is malformed
            CompileError: If an expression is rejected by the backend
        """
        resolvers: List[Resolver] = []
        for segment in parse_segments(template):
            if isinstance(segment, ExpressionSource):
                expression = self.expression_factory.parse_expression(segment.source)
                resolvers.append(DynamicExpression(segment.source, expression))
            else:
                resolvers.append(StaticText(segment.text))
        return InterpolatedExpression(template, resolvers, self.expression_factory)
