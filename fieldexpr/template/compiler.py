"""
Expression compilation.

Thin adapter over Jinja2's sandboxed expression compiler. An expression is
compiled once into a Program which can then be run any number of times,
from any thread, against different environments.
"""

import logging
from typing import Any, Mapping

from jinja2 import StrictUndefined, TemplateSyntaxError, Undefined
from jinja2.sandbox import SandboxedEnvironment

from ..errors import CompileError, EvalError
from .functions import ExpressionFunctions

logger = logging.getLogger(__name__)


def _build_environment() -> SandboxedEnvironment:
    env = SandboxedEnvironment(undefined=StrictUndefined)
    env.globals.update(ExpressionFunctions.as_globals())
    return env


_ENVIRONMENT = _build_environment()


class Program:
    """A compiled expression. Immutable once constructed."""

    __slots__ = ("_source", "_expression")

    def __init__(self, source: str, expression: Any):
        self._source = source
        self._expression = expression

    @property
    def source(self) -> str:
        return self._source

    def run(self, environment: Mapping[str, Any]) -> Any:
        """
        Execute the program against an environment.

        Args:
            environment: Names visible to the expression

        Returns:
            The expression's native result

        Raises:
            EvalError: If the expression fails or its result is undefined
        """
        try:
            result = self._expression(**environment)
        except Exception as e:
            raise EvalError(f"failed to evaluate expression '{self._source}': {e}") from e

        if isinstance(result, Undefined):
            raise EvalError(f"failed to evaluate expression '{self._source}': result is undefined")
        return result

    def __repr__(self) -> str:
        return f"Program({self._source!r})"


def compile_expression(source: str) -> Program:
    """
    Compile expression source into a reusable Program.

    Raises:
        CompileError: If the source is not a valid expression
    """
    try:
        expression = _ENVIRONMENT.compile_expression(source, undefined_to_none=False)
    except TemplateSyntaxError as e:
        raise CompileError(source, e.message or str(e)) from e

    logger.debug("Compiled expression %r", source)
    return Program(source, expression)
