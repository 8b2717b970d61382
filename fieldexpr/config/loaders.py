"""
Component configuration and message fixture loaders.

Handles loading of component configs and of message batches from JSON files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ..message import Batch, Message

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads component configuration files."""

    def __init__(self, config_dir: str = "configs"):
        self.config_dir = Path(config_dir)

    def load_component(self, component_name: str) -> Dict[str, Any]:
        """Load a component configuration by name."""
        config_file = self.config_dir / f"{component_name}.json"
        if not config_file.exists():
            raise FileNotFoundError(f"Component config not found: {component_name}")

        with open(config_file) as f:
            config = json.load(f)

        if not isinstance(config, dict):
            raise ValueError(f"Component config '{component_name}' must be a JSON object")
        return config

    def available_components(self) -> List[str]:
        """Names of all component configs in the config directory."""
        return sorted(path.stem for path in self.config_dir.glob("*.json"))


class MessageLoader:
    """Loads message batches from JSON or JSON Lines files."""

    @staticmethod
    def message_from_dict(data: Dict[str, Any]) -> Message:
        """
        Build a message from {"payload": ..., "metadata": {...}}.

        A payload that is not a string is stored as its JSON encoding.
        """
        payload = data.get("payload", "")
        if not isinstance(payload, str):
            payload = json.dumps(payload)

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValueError("message metadata must be a JSON object")

        return Message.from_text(payload, metadata)

    @classmethod
    def batch_from_dicts(cls, items: Iterable[Dict[str, Any]]) -> Batch:
        return Batch(cls.message_from_dict(item) for item in items)

    @classmethod
    def load_batch(cls, path: str) -> Batch:
        """
        Load a batch of messages.

        Args:
            path: A .json file holding an array of messages, or a file with
                one message object per line

        Returns:
            Batch in file order
        """
        messages_file = Path(path)
        if not messages_file.exists():
            raise FileNotFoundError(f"Messages file not found: {path}")

        text = messages_file.read_text(encoding="utf-8")
        stripped = text.lstrip()
        if stripped.startswith("["):
            items = json.loads(stripped)
        else:
            items = [json.loads(line) for line in text.splitlines() if line.strip()]

        batch = cls.batch_from_dicts(items)
        logger.debug("Loaded %d message(s) from %s", len(batch), path)
        return batch
