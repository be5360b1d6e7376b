"""Document tree and its JSON writer."""

from osgjs_export.document.model import DocArray, DocBuffer, DocObject, DocValue, UniqueIds

__all__ = [
    "DocArray",
    "DocBuffer",
    "DocObject",
    "DocValue",
    "UniqueIds",
]
