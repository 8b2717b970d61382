"""
Messages and batches as seen by the template engine.

A message is raw bytes plus string-keyed metadata. A batch is an ordered
collection of messages that are evaluated together.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence


class Message:
    """A single message: raw payload bytes and a metadata map."""

    def __init__(self, raw: bytes = b"", metadata: Optional[Dict[str, Any]] = None):
        self._raw = bytes(raw)
        self._metadata: Dict[str, Any] = dict(metadata or {})

    @classmethod
    def from_text(cls, text: str, metadata: Optional[Dict[str, Any]] = None) -> "Message":
        return cls(text.encode("utf-8"), metadata)

    def raw(self) -> bytes:
        return self._raw

    def set_raw(self, raw: bytes) -> None:
        self._raw = bytes(raw)

    @property
    def payload(self) -> str:
        """Payload decoded as UTF-8 text."""
        return self._raw.decode("utf-8", errors="replace")

    def set_metadata(self, key: str, value: Any) -> None:
        self._metadata[key] = value

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self._metadata.get(key, default)

    def metadata(self) -> Dict[str, Any]:
        """Return a copy of the metadata map."""
        return dict(self._metadata)

    def __repr__(self) -> str:
        return f"Message(raw={self._raw!r}, metadata={self._metadata!r})"


class Batch(Sequence[Message]):
    """Ordered, indexable collection of messages."""

    def __init__(self, messages: Optional[Iterable[Message]] = None):
        self._messages: List[Message] = list(messages or [])

    def __getitem__(self, index):
        return self._messages[index]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __repr__(self) -> str:
        return f"Batch({self._messages!r})"
