"""Attribute declaration and attribute method dispatch.

Usage:
    from recordkit.attributes import AttributeRegistry

    registry = AttributeRegistry()
    registry.declare_attributes(["name", "age"])
    registry.define_suffix_method("_upcased", lambda rec, attr: ...)
"""

from recordkit.attributes.registry import (
    AttributeMethodHandler,
    AttributeMethodMatch,
    AttributeMethodPattern,
    AttributeRegistry,
)

__all__ = [
    "AttributeMethodHandler",
    "AttributeMethodMatch",
    "AttributeMethodPattern",
    "AttributeRegistry",
]
