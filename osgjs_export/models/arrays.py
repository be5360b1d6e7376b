"""Per-vertex attribute data attached to a geometry."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

# Element types an attribute array may hold
SUPPORTED_DTYPES: tuple[np.dtype, ...] = tuple(
    np.dtype(t)
    for t in (
        np.float32, np.float64,
        np.int8, np.uint8,
        np.int16, np.uint16,
        np.int32, np.uint32,
    )
)


class AttributeArray:
    """Ordered sequence of fixed-width numeric tuples.

    Parameters
    ----------
    values:
        Either a sequence of tuples (``[(x, y, z), ...]``) or a flat sequence
        of scalars when *item_size* is given.
    dtype:
        Element type, ``float32`` by default.
    item_size:
        Tuple width (1..4). Inferred from *values* when omitted.
    """

    def __init__(
        self,
        values: Sequence[Any] | np.ndarray,
        dtype: Any = np.float32,
        item_size: int | None = None,
    ) -> None:
        data = np.asarray(values, dtype=dtype)
        if np.dtype(data.dtype) not in SUPPORTED_DTYPES:
            raise ValueError(f"Unsupported attribute element type: {data.dtype}")

        if item_size is not None:
            data = data.reshape(-1, item_size)
        elif data.ndim == 1:
            data = data.reshape(-1, 1)
        elif data.ndim != 2:
            raise ValueError(f"Attribute data must be 1D or 2D, got {data.ndim}D")

        if not 1 <= data.shape[1] <= 4:
            raise ValueError(f"Attribute item size must be 1..4, got {data.shape[1]}")

        self._data = data

    @property
    def data(self) -> np.ndarray:
        """The ``(count, item_size)`` array backing this attribute."""
        return self._data

    @property
    def item_size(self) -> int:
        return int(self._data.shape[1])

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def __len__(self) -> int:
        return int(self._data.shape[0])

    def __repr__(self) -> str:
        return f"AttributeArray(count={len(self)}, item_size={self.item_size}, dtype={self.dtype})"
