"""
Evaluation contexts.

build_context() turns a batch and an index into the environment a compiled
expression runs against. message_expression_context() builds the plain
key/value context used by single-message interpolated expressions.
"""

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Sequence, Tuple

from ..errors import EvalError
from ..message import Message


ExpressionContext = Dict[str, Any]


@dataclass(frozen=True)
class MessageView:
    """Immutable snapshot of one message, exposed as batch[i] in expressions."""

    payload: str
    raw: bytes
    metadata: Mapping[str, Any]

    @classmethod
    def snapshot(cls, message: Message) -> "MessageView":
        raw = message.raw()
        return cls(
            payload=raw.decode("utf-8", errors="replace"),
            raw=raw,
            metadata=MappingProxyType(message.metadata()),
        )

    def GetHeader(self, key: str) -> Any:  # noqa: N802 - name used by expressions
        """Metadata value for key, or "" when absent."""
        return self.metadata.get(key, "")


@dataclass(frozen=True)
class EvaluationContext:
    """Everything an expression can see while evaluating one message."""

    index: int
    current: MessageView
    batch: Tuple[MessageView, ...]

    def meta(self, key: str) -> Any:
        """Metadata of the current message; missing keys resolve to ""."""
        return self.current.GetHeader(key)

    def as_environment(self) -> Dict[str, Any]:
        return {
            "payload": self.current.payload,
            "payloadBytes": self.current.raw,
            "index": self.index,
            "meta": self.meta,
            "metas": dict(self.current.metadata),
            "batch": self.batch,
        }


def build_context(batch: Sequence[Message], index: int) -> EvaluationContext:
    """
    Build the evaluation context for the message at index.

    Args:
        batch: Messages evaluated together
        index: Position of the message being evaluated

    Returns:
        A fresh EvaluationContext

    Raises:
        EvalError: If the batch is empty or index is out of range
    """
    messages = list(batch)
    if not messages:
        raise EvalError("cannot evaluate expression on empty batch")
    if index < 0:
        raise EvalError(f"negative index {index} is not allowed")
    if index >= len(messages):
        raise EvalError(f"index {index} is out of bounds for batch of size {len(messages)}")

    views = tuple(MessageView.snapshot(message) for message in messages)
    return EvaluationContext(index=index, current=views[index], batch=views)


def message_expression_context(message: Message) -> ExpressionContext:
    """
    Build a plain expression context from a single message.

    Exposes the message itself, its payload as text under "content", the
    payload parsed as a JSON object under "json" ({} when it is not one)
    and its metadata.
    """
    raw = message.raw()
    return {
        "message": message,
        "content": raw.decode("utf-8", errors="replace"),
        "json": _parse_json_object(raw),
        "metadata": message.metadata(),
    }


def _parse_json_object(data: bytes) -> Dict[str, Any]:
    try:
        parsed = json.loads(data)
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}
