"""
Per-message rendering of a component's dynamic fields.

Handles evaluating every field for every message of a batch, isolating
failures to the message that caused them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..config import DynamicField
from ..errors import EvalError
from ..message import Message

logger = logging.getLogger(__name__)


@dataclass
class RenderedMessage:
    """Field values for one message, or the error that prevented them."""

    index: int
    fields: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"index": self.index, "error": self.error}
        return {"index": self.index, "fields": self.fields}


class MessageRenderer:
    """Renders dynamic fields for the messages of a batch."""

    def __init__(self, fields: Dict[str, DynamicField]):
        self.fields = fields

    def render_message(self, batch: Sequence[Message], index: int) -> Dict[str, Any]:
        """
        Evaluate every field for the message at index.

        Args:
            batch: Messages evaluated together
            index: Position of the message to render

        Returns:
            Mapping of field name to evaluated value

        Raises:
            EvalError: If any field fails to evaluate, with its field
                attribute set to the failing field's name
        """
        rendered = {}
        for name, dynamic_field in self.fields.items():
            try:
                rendered[name] = dynamic_field.evaluate(batch, index)
            except EvalError as e:
                e.field = name
                raise
        return rendered

    def render_batch(self, batch: Sequence[Message]) -> List[RenderedMessage]:
        """
        Render every message of a batch.

        A message whose fields fail to evaluate is reported with its error;
        the remaining messages are still rendered.
        """
        results = []
        for index in range(len(batch)):
            try:
                results.append(RenderedMessage(index, self.render_message(batch, index)))
            except EvalError as e:
                error = f"field '{e.field}': {e}" if e.field else str(e)
                logger.warning("Failed to render message %d: %s", index, error)
                results.append(RenderedMessage(index, error=error))
        return results
