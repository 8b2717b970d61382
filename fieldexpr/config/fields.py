"""
Dynamic configuration fields.

A component config declares its templated fields under "fields":

    {
        "fields": {
            "topic": "devices/${!meta('device')}/events",
            "qos": {"template": "${!meta('qos')}", "type": "int"}
        }
    }

Every field is parsed and compiled when the config is loaded so a bad
template stops the component from starting.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from ..errors import CompileError, ConfigError, ParseError
from ..message import Message
from ..template import FieldEvaluator

logger = logging.getLogger(__name__)


FIELD_TYPES = ("auto", "string", "int", "bool", "float")


@dataclass(frozen=True)
class DynamicField:
    """A named, typed template compiled for the lifetime of a component."""

    name: str
    evaluator: FieldEvaluator
    type: str = "string"

    def evaluate(self, batch: Sequence[Message], index: int) -> Any:
        """Evaluate for one message, converted to the field's type."""
        if self.type == "string":
            return self.evaluator.eval_string(batch, index)
        if self.type == "int":
            return self.evaluator.eval_int(batch, index)
        if self.type == "bool":
            return self.evaluator.eval_bool(batch, index)
        if self.type == "float":
            return self.evaluator.eval_float(batch, index)
        return self.evaluator.eval(batch, index)


def build_field(name: str, declaration: Any) -> DynamicField:
    """
    Compile one field declaration.

    Args:
        name: Field name
        declaration: Template string, or {"template": str, "type": str}

    Returns:
        DynamicField ready for evaluation

    Raises:
        ConfigError: If the declaration or its template is invalid
    """
    if isinstance(declaration, str):
        template, field_type = declaration, "string"
    elif isinstance(declaration, dict):
        template = declaration.get("template")
        field_type = declaration.get("type", "string")
    else:
        raise ConfigError(f"field '{name}' must be a template string or an object", name)

    if not isinstance(template, str):
        raise ConfigError(f"field '{name}' is missing a 'template' string", name)
    if field_type not in FIELD_TYPES:
        raise ConfigError(
            f"field '{name}' has unknown type '{field_type}', expected one of {', '.join(FIELD_TYPES)}",
            name,
        )

    try:
        evaluator = FieldEvaluator(template)
    except (ParseError, CompileError) as e:
        raise ConfigError(f"field '{name}': {e}", name) from e

    return DynamicField(name=name, evaluator=evaluator, type=field_type)


def build_fields(config: Dict[str, Any]) -> Dict[str, DynamicField]:
    """Compile every entry of a component config's "fields" mapping."""
    declared = config.get("fields", {})
    if not isinstance(declared, dict):
        raise ConfigError("'fields' must be an object mapping field names to templates")

    fields = {name: build_field(name, declaration) for name, declaration in declared.items()}
    logger.debug(
        "Built %d dynamic field(s) for component %s",
        len(fields),
        config.get("name", "<unnamed>"),
    )
    return fields
