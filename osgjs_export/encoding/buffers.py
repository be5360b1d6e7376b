"""Encode attribute arrays and index lists as buffer records."""

from __future__ import annotations

import numpy as np

from osgjs_export.config import ARRAY_BUFFER, ELEMENT_ARRAY_BUFFER
from osgjs_export.document.model import DocBuffer, DocObject, UniqueIds
from osgjs_export.models.arrays import AttributeArray
from osgjs_export.models.primitives import IndexType


def encode_buffer(array: AttributeArray, ids: UniqueIds) -> DocObject:
    """Encode a per-vertex attribute array.

    Values are copied as-is; element counts are checked by the traversal.
    """
    record = ids.new_object()
    record["Array"] = DocBuffer(array.data)
    record["ItemSize"] = array.item_size
    record["Type"] = ARRAY_BUFFER
    return record


def encode_indices(indices: np.ndarray, index_type: IndexType, ids: UniqueIds) -> DocObject:
    """Encode an index list using the typed array matching *index_type*."""
    record = ids.new_object()
    record["Array"] = DocBuffer(np.asarray(indices).astype(index_type.dtype))
    record["ItemSize"] = 1
    record["Type"] = ELEMENT_ARRAY_BUFFER
    return record
