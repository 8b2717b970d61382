"""Component and message rendering modules."""

from .component_renderer import ComponentRenderer
from .message_renderer import MessageRenderer, RenderedMessage

__all__ = ["ComponentRenderer", "MessageRenderer", "RenderedMessage"]
