"""Document model — ordered key/value tree handed to the writer.

Four variants: ``DocValue`` (scalar), ``DocBuffer`` (typed numeric buffer),
``DocArray`` and ``DocObject``. A ``DocObject`` carrying a ``unique_id`` may
be referenced from several places; the writer emits it once in full and as a
``UniqueID`` reference afterwards.
"""

from __future__ import annotations

import itertools
from typing import Any, Iterable, Iterator, Union

import numpy as np

# Typed array names, keyed by numpy element type
TYPED_ARRAY_NAMES: dict[np.dtype, str] = {
    np.dtype(np.float32): "Float32Array",
    np.dtype(np.float64): "Float32Array",
    np.dtype(np.int8): "Int8Array",
    np.dtype(np.uint8): "Uint8Array",
    np.dtype(np.int16): "Int16Array",
    np.dtype(np.uint16): "Uint16Array",
    np.dtype(np.int32): "Int32Array",
    np.dtype(np.uint32): "Uint32Array",
}

Scalar = Union[str, int, float, bool, None]


class DocValue:
    """A scalar leaf."""

    __slots__ = ("value",)

    def __init__(self, value: Scalar) -> None:
        self.value = value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DocValue):
            return self.value == other.value
        return self.value == other

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f"DocValue({self.value!r})"


class DocBuffer:
    """Typed numeric buffer; ``size`` counts tuples, not scalars."""

    def __init__(self, data: np.ndarray) -> None:
        data = np.asarray(data)
        if data.dtype == np.float64:
            data = data.astype(np.float32)
        if data.dtype not in TYPED_ARRAY_NAMES:
            raise ValueError(f"No typed array for element type {data.dtype}")
        self.data = data

    @property
    def type_name(self) -> str:
        return TYPED_ARRAY_NAMES[self.data.dtype]

    @property
    def size(self) -> int:
        return int(self.data.shape[0]) if self.data.ndim else 0

    def elements(self) -> list[Any]:
        return self.data.reshape(-1).tolist()

    def __repr__(self) -> str:
        return f"DocBuffer({self.type_name}, size={self.size})"


class DocArray:
    """Ordered list of document nodes."""

    def __init__(self, items: Iterable[Any] = ()) -> None:
        self._items: list[DocNode] = [coerce(i) for i in items]

    def append(self, item: Any) -> None:
        self._items.append(coerce(item))

    def __getitem__(self, index: int) -> DocNode:
        return self._items[index]

    def __iter__(self) -> Iterator[DocNode]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"DocArray(len={len(self._items)})"


class DocObject:
    """Insertion-ordered mapping of string keys to document nodes."""

    def __init__(
        self,
        items: dict[str, Any] | None = None,
        unique_id: int | None = None,
    ) -> None:
        self.unique_id = unique_id
        self._maps: dict[str, DocNode] = {}
        for key, value in (items or {}).items():
            self[key] = value

    def __setitem__(self, key: str, value: Any) -> None:
        self._maps[key] = coerce(value)

    def __getitem__(self, key: str) -> DocNode:
        return self._maps[key]

    def __contains__(self, key: object) -> bool:
        return key in self._maps

    def __iter__(self) -> Iterator[str]:
        return iter(self._maps)

    def __len__(self) -> int:
        return len(self._maps)

    def get(self, key: str, default: Any = None) -> Any:
        return self._maps.get(key, default)

    def keys(self) -> list[str]:
        return list(self._maps)

    def items(self) -> list[tuple[str, DocNode]]:
        return list(self._maps.items())

    def add_child(self, type_key: str, child: DocObject) -> None:
        """Append ``{type_key: child}`` to this object's ``Children`` array."""
        children = self._maps.get("Children")
        if not isinstance(children, DocArray):
            children = DocArray()
            self._maps["Children"] = children
        children.append(DocObject({type_key: child}))

    def __repr__(self) -> str:
        uid = f", unique_id={self.unique_id}" if self.unique_id is not None else ""
        return f"DocObject(keys={self.keys()}{uid})"


DocNode = Union[DocValue, DocBuffer, DocArray, DocObject]


def coerce(value: Any) -> DocNode:
    """Wrap plain Python values into document nodes."""
    if isinstance(value, (DocValue, DocBuffer, DocArray, DocObject)):
        return value
    if isinstance(value, np.ndarray):
        return DocArray(value.tolist())
    if isinstance(value, np.generic):
        return DocValue(value.item())
    if isinstance(value, (list, tuple)):
        return DocArray(value)
    if isinstance(value, dict):
        return DocObject(value)
    if value is None or isinstance(value, (str, int, float, bool)):
        return DocValue(value)
    raise TypeError(f"Cannot store {type(value).__name__} in a document")


class UniqueIds:
    """Allocates ``UniqueID`` values for one encode."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def new_object(self, items: dict[str, Any] | None = None) -> DocObject:
        return DocObject(items, unique_id=next(self._counter))
