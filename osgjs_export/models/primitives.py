"""Primitive sets — draw commands interpreting a geometry's vertex data."""

from __future__ import annotations

import enum
from typing import Sequence

import numpy as np


class PrimitiveMode(str, enum.Enum):
    """OpenGL draw modes, named as they appear in the document."""

    POINTS = "POINTS"
    LINES = "LINES"
    LINE_LOOP = "LINE_LOOP"
    LINE_STRIP = "LINE_STRIP"
    TRIANGLES = "TRIANGLES"
    TRIANGLE_STRIP = "TRIANGLE_STRIP"
    TRIANGLE_FAN = "TRIANGLE_FAN"
    QUADS = "QUADS"
    QUAD_STRIP = "QUAD_STRIP"
    POLYGON = "POLYGON"


class IndexType(enum.Enum):
    """Index width of an indexed draw."""

    UBYTE = "UByte"
    USHORT = "UShort"
    UINT = "UInt"

    @property
    def dtype(self) -> np.dtype:
        return _INDEX_DTYPES[self]

    @property
    def max_index(self) -> int:
        return int(np.iinfo(self.dtype).max)

    @classmethod
    def narrowest_for(cls, max_index: int, floor: IndexType | None = None) -> IndexType:
        """Return the smallest index type, no narrower than *floor*, able to address *max_index*."""
        candidates = (cls.UBYTE, cls.USHORT, cls.UINT)
        if floor is not None:
            candidates = candidates[candidates.index(floor):]
        for index_type in candidates:
            if max_index <= index_type.max_index:
                return index_type
        raise ValueError(f"Index {max_index} does not fit any index type")


_INDEX_DTYPES: dict[IndexType, np.dtype] = {
    IndexType.UBYTE: np.dtype(np.uint8),
    IndexType.USHORT: np.dtype(np.uint16),
    IndexType.UINT: np.dtype(np.uint32),
}


class PrimitiveSet:
    """Base class of every draw command."""

    def __init__(self, mode: PrimitiveMode = PrimitiveMode.TRIANGLES) -> None:
        self.mode = PrimitiveMode(mode)


class DrawArrays(PrimitiveSet):
    """Non-indexed draw of ``count`` vertices starting at ``first``."""

    def __init__(
        self,
        mode: PrimitiveMode = PrimitiveMode.TRIANGLES,
        first: int = 0,
        count: int = 0,
    ) -> None:
        super().__init__(mode)
        self.first = first
        self.count = count

    def __repr__(self) -> str:
        return f"DrawArrays({self.mode.value}, first={self.first}, count={self.count})"


class DrawElements(PrimitiveSet):
    """Indexed draw; the index width is part of the command."""

    def __init__(
        self,
        mode: PrimitiveMode = PrimitiveMode.TRIANGLES,
        indices: Sequence[int] | np.ndarray = (),
        index_type: IndexType = IndexType.USHORT,
    ) -> None:
        super().__init__(mode)
        self.index_type = index_type
        # Keep the raw values; range checks against the index type happen at encode time.
        self.indices = np.asarray(indices, dtype=np.int64).reshape(-1)

    def __len__(self) -> int:
        return int(self.indices.shape[0])

    def __repr__(self) -> str:
        return f"DrawElements{self.index_type.value}({self.mode.value}, n={len(self)})"


class DrawArrayLengths(PrimitiveSet):
    """Consecutive runs of vertices, one draw per run length."""

    def __init__(
        self,
        mode: PrimitiveMode = PrimitiveMode.TRIANGLE_STRIP,
        first: int = 0,
        lengths: Sequence[int] = (),
    ) -> None:
        super().__init__(mode)
        self.first = first
        self.lengths = [int(n) for n in lengths]

    def __repr__(self) -> str:
        return f"DrawArrayLengths({self.mode.value}, first={self.first}, runs={len(self.lengths)})"
