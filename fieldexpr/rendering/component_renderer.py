"""
Rendering of configured components.

Loads a component config, compiles its dynamic fields once and renders
batches against them.
"""

import logging
from typing import Any, Dict, Sequence

from ..config import ConfigLoader, build_fields
from ..message import Message
from .message_renderer import MessageRenderer

logger = logging.getLogger(__name__)


class ComponentRenderer:
    """Renders batches for components described by config files."""

    def __init__(self, config_loader: ConfigLoader):
        self.config_loader = config_loader
        self._renderers: Dict[str, MessageRenderer] = {}

    def renderer_for(self, component_name: str) -> MessageRenderer:
        """
        Return the MessageRenderer of a component, compiling it on first use.

        Raises:
            FileNotFoundError: If the component config does not exist
            ConfigError: If one of its fields cannot be compiled
        """
        renderer = self._renderers.get(component_name)
        if renderer is None:
            config = self.config_loader.load_component(component_name)
            renderer = MessageRenderer(build_fields(config))
            self._renderers[component_name] = renderer
            logger.info("Initialized component %s with %d field(s)", component_name, len(renderer.fields))
        return renderer

    def render_component(self, component_name: str, batch: Sequence[Message]) -> Dict[str, Any]:
        """
        Render a batch for a component.

        Returns:
            Response with the component name and one entry per message
        """
        renderer = self.renderer_for(component_name)
        results = renderer.render_batch(batch)
        return {
            "component": component_name,
            "messages": [result.to_dict() for result in results],
        }
