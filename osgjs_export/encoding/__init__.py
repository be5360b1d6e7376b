"""Encoders turning scene graph entities into document objects."""

from osgjs_export.encoding.traversal import WriteVisitor, encode

__all__ = [
    "WriteVisitor",
    "encode",
]
