"""JSON writer for document trees."""

from __future__ import annotations

import json
from typing import Any, TextIO

from osgjs_export.document.model import DocArray, DocBuffer, DocNode, DocObject, DocValue
from osgjs_export.errors import StructuralError


def to_plain(node: DocNode, _seen: set[int] | None = None) -> Any:
    """Convert a document tree to plain dicts/lists.

    An object with a ``unique_id`` is written in full at its first
    occurrence and as ``{"UniqueID": n}`` at every later one.
    """
    seen = _seen if _seen is not None else set()

    if isinstance(node, DocValue):
        return node.value
    if isinstance(node, DocBuffer):
        return {node.type_name: {"Elements": node.elements(), "Size": node.size}}
    if isinstance(node, DocArray):
        return [to_plain(item, seen) for item in node]
    if isinstance(node, DocObject):
        out: dict[str, Any] = {}
        if node.unique_id is not None:
            if node.unique_id in seen:
                return {"UniqueID": node.unique_id}
            seen.add(node.unique_id)
            out["UniqueID"] = node.unique_id
        for key, value in node.items():
            out[key] = to_plain(value, seen)
        return out
    raise TypeError(f"Not a document node: {type(node).__name__}")


def dumps(document: DocObject, indent: int | None = 2) -> str:
    """Render *document* as JSON text.

    Raises
    ------
    StructuralError
        If the document holds NaN or infinity, which JSON cannot represent.
    """
    try:
        return json.dumps(to_plain(document), indent=indent, allow_nan=False)
    except ValueError as exc:
        raise StructuralError(f"Document is not valid JSON: {exc}") from exc


def write(document: DocObject, stream: TextIO, indent: int | None = 2) -> None:
    """Serialize *document* as JSON text to *stream*.

    The text is rendered in full before anything reaches *stream*.
    """
    text = dumps(document, indent=indent)
    stream.write(text)
    stream.write("\n")
