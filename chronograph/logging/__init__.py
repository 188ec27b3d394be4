"""Event levels, ambient properties and logger bootstrap for chronograph."""

from chronograph.logging.context import PropertyScope, current_properties, push_property
from chronograph.logging.levels import EventLevel

__all__ = ["EventLevel", "PropertyScope", "current_properties", "push_property"]
