"""Primitive set encoder — draw commands to PrimitiveSetList entries."""

from __future__ import annotations

import logging

import numpy as np

from osgjs_export.document.model import DocObject, UniqueIds
from osgjs_export.encoding.buffers import encode_indices
from osgjs_export.models.primitives import (
    DrawArrayLengths,
    DrawArrays,
    DrawElements,
    IndexType,
    PrimitiveMode,
    PrimitiveSet,
)

logger = logging.getLogger(__name__)

# Two triangles per quad, relative to the quad's first vertex
_QUAD_TRIANGLES = np.array([0, 1, 2, 0, 2, 3], dtype=np.int64)


def expand_quads(draw: DrawArrays) -> DrawElements:
    """Rewrite a QUADS DrawArrays as an indexed TRIANGLES draw.

    Trailing vertices that do not form a complete quad are dropped.
    """
    quads = draw.count // 4
    if draw.count % 4:
        logger.debug("Dropping %d trailing vertices of a QUADS draw", draw.count % 4)

    bases = draw.first + 4 * np.arange(quads, dtype=np.int64)
    indices = (bases[:, None] + _QUAD_TRIANGLES[None, :]).reshape(-1)
    max_index = int(indices.max()) if indices.size else 0
    return DrawElements(
        PrimitiveMode.TRIANGLES,
        indices,
        index_type=IndexType.narrowest_for(max_index, floor=IndexType.USHORT),
    )


def encode_primitive_set(primitive_set: PrimitiveSet, ids: UniqueIds) -> DocObject | None:
    """Encode one draw command as a single-key variant object.

    Returns None for unsupported categories; the caller omits them.
    """
    if isinstance(primitive_set, DrawArrays):
        if primitive_set.mode is PrimitiveMode.QUADS:
            return _encode_draw_elements(expand_quads(primitive_set), ids)
        return DocObject({
            "DrawArrays": DocObject({
                "First": primitive_set.first,
                "Count": primitive_set.count,
                "Mode": primitive_set.mode.value,
            }),
        })

    if isinstance(primitive_set, DrawElements):
        return _encode_draw_elements(primitive_set, ids)

    if isinstance(primitive_set, DrawArrayLengths):
        return DocObject({
            "DrawArrayLengths": DocObject({
                "First": primitive_set.first,
                "ArrayLengths": list(primitive_set.lengths),
                "Mode": primitive_set.mode.value,
            }),
        })

    logger.warning(
        "Primitive type %s not supported, skipping", type(primitive_set).__name__,
    )
    return None


def _encode_draw_elements(draw: DrawElements, ids: UniqueIds) -> DocObject:
    body = DocObject()
    body["Indices"] = encode_indices(draw.indices, draw.index_type, ids)
    body["Mode"] = draw.mode.value
    return DocObject({f"DrawElements{draw.index_type.value}": body})


def check_primitive_set(primitive_set: PrimitiveSet, vertex_count: int) -> list[str]:
    """Return the invariant violations of *primitive_set* against *vertex_count*."""
    problems: list[str] = []

    if isinstance(primitive_set, DrawArrays):
        if primitive_set.first < 0 or primitive_set.count < 0:
            problems.append(f"{primitive_set!r} has a negative range")
        elif primitive_set.first + primitive_set.count > vertex_count:
            problems.append(
                f"{primitive_set!r} reads past the last vertex ({vertex_count} vertices)"
            )

    elif isinstance(primitive_set, DrawElements):
        if len(primitive_set):
            lo = int(primitive_set.indices.min())
            hi = int(primitive_set.indices.max())
            if lo < 0:
                problems.append(f"{primitive_set!r} has negative index {lo}")
            if hi > primitive_set.index_type.max_index:
                problems.append(
                    f"{primitive_set!r} index {hi} does not fit {primitive_set.index_type.name}"
                )
            if hi >= vertex_count:
                problems.append(
                    f"{primitive_set!r} index {hi} out of range ({vertex_count} vertices)"
                )

    elif isinstance(primitive_set, DrawArrayLengths):
        if primitive_set.first < 0 or any(n < 0 for n in primitive_set.lengths):
            problems.append(f"{primitive_set!r} has a negative range")
        elif primitive_set.first + sum(primitive_set.lengths) > vertex_count:
            problems.append(
                f"{primitive_set!r} reads past the last vertex ({vertex_count} vertices)"
            )

    return problems
