"""Graph traversal — depth-first visitor assembling the osgjs document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, cast

import numpy as np

from osgjs_export.config import (
    BITANGENT_KEY,
    COLOR_KEY,
    GENERATOR,
    NORMAL_KEY,
    TANGENT_KEY,
    TEXCOORD_KEY_PREFIX,
    VERTEX_KEY,
    WRITER_VERSION,
)
from osgjs_export.document.model import DocArray, DocObject, UniqueIds
from osgjs_export.encoding.buffers import encode_buffer
from osgjs_export.encoding.callbacks import CallbackEncoder
from osgjs_export.encoding.primitives import check_primitive_set, encode_primitive_set
from osgjs_export.encoding.state import StateEncoder, encode_light
from osgjs_export.errors import StructuralError
from osgjs_export.models.arrays import AttributeArray
from osgjs_export.models.scene import (
    Geode,
    Geometry,
    Group,
    LightSource,
    MatrixTransform,
    Node,
    NodeKind,
    PositionAttitudeTransform,
    Projection,
    SceneObject,
)
from osgjs_export.models.state import StateSet

logger = logging.getLogger(__name__)

# Key under which each variant is attached to its parent's Children
_WRAPPER_KEYS: dict[NodeKind, str] = {
    NodeKind.GROUP: "osg.Node",
    NodeKind.GEODE: "osg.Node",
    NodeKind.MATRIX_TRANSFORM: "osg.MatrixTransform",
    NodeKind.POSITION_ATTITUDE_TRANSFORM: "osg.MatrixTransform",
    NodeKind.PROJECTION: "osg.Projection",
    NodeKind.LIGHT_SOURCE: "osg.LightSource",
    NodeKind.GEOMETRY: "osg.Geometry",
}


@dataclass(frozen=True)
class _Context:
    """Per-call traversal context: the receiving parent and inherited state."""

    parent: DocObject
    # Inherited state sets, root first; only reported in debug diagnostics
    states: tuple[StateSet, ...] = ()
    path: tuple[str, ...] = ()

    def enter(self, obj: SceneObject, json: DocObject) -> _Context:
        states = self.states
        if obj.state_set is not None:
            states = states + (obj.state_set,)
        return _Context(
            parent=json,
            states=states,
            path=self.path + (obj.name or obj.kind.value,),
        )


class WriteVisitor:
    """Walk a scene graph and build its osgjs document.

    Memo tables (visited nodes, encoded state sets) are reset by every
    call to :meth:`encode`.

    Parameters
    ----------
    generator:
        Free-text string written under ``Generator``.
    """

    def __init__(self, generator: str = GENERATOR) -> None:
        self.generator = generator
        self._reset()

    def _reset(self) -> None:
        self._ids = UniqueIds()
        self._states = StateEncoder(self._ids)
        self._callbacks = CallbackEncoder(self._ids)
        self._visited: dict[int, DocObject] = {}
        # Keeps visited objects alive so their id() cannot be reused
        self._owners: list[SceneObject] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encode(self, root: Node | Geometry) -> DocObject:
        """Encode *root* and everything below it.

        Raises
        ------
        StructuralError
            If any encoding invariant is violated. No document is returned.
        """
        self._reset()
        container = DocObject()
        self._apply(root, _Context(parent=container))

        document = DocObject()
        document["Version"] = WRITER_VERSION
        document["Generator"] = self.generator
        document["osg.Node"] = container
        return document

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _apply(self, obj: SceneObject, ctx: _Context) -> None:
        kind = getattr(type(obj), "kind", None)
        if kind is None:
            logger.warning("%s not supported, skipping", type(obj).__name__)
            return

        wrapper = _WRAPPER_KEYS[kind]
        shared = self._visited.get(id(obj))
        if shared is not None:
            logger.debug("%s %r already encoded, linking", kind.value, obj.name)
            ctx.parent.add_child(wrapper, shared)
            return

        json = self._ids.new_object()
        self._visited[id(obj)] = json
        self._owners.append(obj)
        ctx.parent.add_child(wrapper, json)

        if kind is NodeKind.GEOMETRY:
            self._geometry(cast(Geometry, obj), json, ctx)
        else:
            self._node(cast(Node, obj), kind, json, ctx)

    def _node(self, node: Node, kind: NodeKind, json: DocObject, ctx: _Context) -> None:
        callbacks = self._callbacks.encode(node.update_callbacks)
        if callbacks is not None:
            json["UpdateCallbacks"] = callbacks

        self._attach_state(node, json)
        if node.name:
            json["Name"] = node.name

        if kind is NodeKind.MATRIX_TRANSFORM:
            json["Matrix"] = _flatten(cast(MatrixTransform, node).matrix)
        elif kind is NodeKind.POSITION_ATTITUDE_TRANSFORM:
            json["Matrix"] = _flatten(cast(PositionAttitudeTransform, node).local_matrix())
        elif kind is NodeKind.PROJECTION:
            json["Matrix"] = _flatten(cast(Projection, node).matrix)
        elif kind is NodeKind.LIGHT_SOURCE:
            light = cast(LightSource, node).light
            if light is not None:
                json["Light"] = DocObject({"osg.Light": encode_light(light, self._ids)})

        child_ctx = ctx.enter(node, json)
        if kind is NodeKind.GEODE:
            for drawable in cast(Geode, node).drawables:
                if drawable is not None:
                    self._apply(drawable, child_ctx)
        else:
            for child in cast(Group, node).children:
                if child is not None:
                    self._apply(child, child_ctx)

    def _geometry(self, geom: Geometry, json: DocObject, ctx: _Context) -> None:
        path = ctx.enter(geom, json).path
        self._attach_state(geom, json)
        if geom.name:
            json["Name"] = geom.name

        nb_vertexes = geom.vertex_count
        attributes = DocObject()
        for key, array in _attribute_arrays(geom):
            nb = len(array)
            if key != VERTEX_KEY and nb != nb_vertexes:
                self._fail(f"Fatal nb {key} {nb} != {nb_vertexes}", path)
            attributes[key] = encode_buffer(array, self._ids)
        json["VertexAttributeList"] = attributes

        if geom.primitive_sets:
            primitives = DocArray()
            for primitive_set in geom.primitive_sets:
                problems = check_primitive_set(primitive_set, nb_vertexes)
                if problems:
                    self._fail(problems[0], path)
                encoded = encode_primitive_set(primitive_set, self._ids)
                if encoded is not None:
                    primitives.append(encoded)
            json["PrimitiveSetList"] = primitives

        logger.debug(
            "Encoded geometry %s: %d vertices, %d inherited state sets",
            "/".join(path), nb_vertexes, len(ctx.states),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _attach_state(self, obj: SceneObject, json: DocObject) -> None:
        if obj.state_set is None:
            return
        wrapped = self._states.wrap(obj.state_set)
        if wrapped is not None:
            json["StateSet"] = wrapped

    @staticmethod
    def _fail(message: str, path: tuple[str, ...]) -> None:
        logger.critical("%s (at %s)", message, "/".join(path))
        raise StructuralError(message, path)


def encode(root: Node | Geometry, generator: str = GENERATOR) -> DocObject:
    """Encode *root* into a fresh osgjs document."""
    return WriteVisitor(generator=generator).encode(root)


def _attribute_arrays(geom: Geometry) -> Iterator[tuple[str, AttributeArray]]:
    """Yield the present attribute arrays in document order."""
    if geom.vertices is not None:
        yield VERTEX_KEY, geom.vertices
    if geom.normals is not None:
        yield NORMAL_KEY, geom.normals
    if geom.colors is not None:
        yield COLOR_KEY, geom.colors
    for unit in sorted(geom.tex_coords):
        yield f"{TEXCOORD_KEY_PREFIX}{unit}", geom.tex_coords[unit]
    if geom.tangents is not None:
        yield TANGENT_KEY, geom.tangents
    if geom.bitangents is not None:
        yield BITANGENT_KEY, geom.bitangents


def _flatten(matrix: np.ndarray) -> list[float]:
    return np.asarray(matrix, dtype=np.float64).reshape(-1).tolist()
