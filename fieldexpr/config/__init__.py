"""Configuration loading modules."""

from .fields import DynamicField, build_field, build_fields
from .loaders import ConfigLoader, MessageLoader

__all__ = ["ConfigLoader", "DynamicField", "MessageLoader", "build_field", "build_fields"]
