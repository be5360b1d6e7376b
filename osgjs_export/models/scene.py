"""Scene graph model — nodes, transforms, geodes and geometries.

The encoder treats every instance here as read-only. Nodes compare by
identity so one node may be shared by several parents.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar, Sequence

import numpy as np

from osgjs_export.config import MAX_TEXTURE_UNITS
from osgjs_export.models.animation import UpdateCallback
from osgjs_export.models.arrays import AttributeArray
from osgjs_export.models.primitives import PrimitiveSet
from osgjs_export.models.state import Light, StateSet


class NodeKind(enum.Enum):
    """Closed set of scene graph variants the encoder dispatches on."""

    GROUP = "Group"
    MATRIX_TRANSFORM = "MatrixTransform"
    POSITION_ATTITUDE_TRANSFORM = "PositionAttitudeTransform"
    PROJECTION = "Projection"
    LIGHT_SOURCE = "LightSource"
    GEODE = "Geode"
    GEOMETRY = "Geometry"


def _as_matrix(value: Sequence[Sequence[float]] | np.ndarray | None) -> np.ndarray:
    if value is None:
        return np.identity(4)
    m = np.asarray(value, dtype=np.float64)
    if m.shape == (16,):
        m = m.reshape(4, 4)
    if m.shape != (4, 4):
        raise ValueError(f"Matrix must be 4x4, got shape {m.shape}")
    return m


def translation_matrix(t: Sequence[float]) -> np.ndarray:
    m = np.identity(4)
    m[3, 0:3] = t
    return m


def scale_matrix(s: Sequence[float]) -> np.ndarray:
    return np.diag([s[0], s[1], s[2], 1.0])


def rotation_matrix(q: Sequence[float]) -> np.ndarray:
    """Rotation matrix of quaternion ``(x, y, z, w)``, row-vector convention."""
    x, y, z, w = (float(c) for c in q)
    n = x * x + y * y + z * z + w * w
    if n == 0.0:
        return np.identity(4)
    s = 2.0 / n
    m = np.identity(4)
    m[0, 0] = 1.0 - s * (y * y + z * z)
    m[0, 1] = s * (x * y + w * z)
    m[0, 2] = s * (x * z - w * y)
    m[1, 0] = s * (x * y - w * z)
    m[1, 1] = 1.0 - s * (x * x + z * z)
    m[1, 2] = s * (y * z + w * x)
    m[2, 0] = s * (x * z + w * y)
    m[2, 1] = s * (y * z - w * x)
    m[2, 2] = 1.0 - s * (x * x + y * y)
    return m


# ---------------------------------------------------------------------------
# Base classes
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class SceneObject:
    """Anything that can carry a name and a StateSet."""

    kind: ClassVar[NodeKind]

    name: str = ""
    state_set: StateSet | None = None


@dataclass(eq=False)
class Node(SceneObject):
    """A scene graph node with an update callback chain."""

    update_callbacks: list[UpdateCallback] = field(default_factory=list)


@dataclass(eq=False)
class Group(Node):
    """Container node; children are visited in order."""

    kind: ClassVar[NodeKind] = NodeKind.GROUP

    children: list[Node] = field(default_factory=list)

    def add_child(self, child: Node) -> Node:
        self.children.append(child)
        return child


@dataclass(eq=False)
class MatrixTransform(Group):
    """Group positioned by an explicit 4x4 matrix."""

    kind: ClassVar[NodeKind] = NodeKind.MATRIX_TRANSFORM

    matrix: np.ndarray = field(default_factory=lambda: np.identity(4))

    def __post_init__(self) -> None:
        self.matrix = _as_matrix(self.matrix)


@dataclass(eq=False)
class PositionAttitudeTransform(Group):
    """Group positioned by translation, quaternion attitude, scale and pivot."""

    kind: ClassVar[NodeKind] = NodeKind.POSITION_ATTITUDE_TRANSFORM

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    attitude: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    scale: tuple[float, float, float] = (1.0, 1.0, 1.0)
    pivot_point: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def local_matrix(self) -> np.ndarray:
        """Compose ``T(-pivot) * S * R * T(position)``."""
        pivot = [-c for c in self.pivot_point]
        return (
            translation_matrix(pivot)
            @ scale_matrix(self.scale)
            @ rotation_matrix(self.attitude)
            @ translation_matrix(self.position)
        )


@dataclass(eq=False)
class Projection(Group):
    """Group that replaces the projection matrix for its subgraph."""

    kind: ClassVar[NodeKind] = NodeKind.PROJECTION

    matrix: np.ndarray = field(default_factory=lambda: np.identity(4))

    def __post_init__(self) -> None:
        self.matrix = _as_matrix(self.matrix)


@dataclass(eq=False)
class LightSource(Group):
    """Group carrying a light."""

    kind: ClassVar[NodeKind] = NodeKind.LIGHT_SOURCE

    light: Light | None = None


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Drawable(SceneObject):
    """Leaf entity attached to a Geode."""


@dataclass(eq=False)
class Geometry(Drawable):
    """Per-vertex attribute arrays plus the draw commands using them."""

    kind: ClassVar[NodeKind] = NodeKind.GEOMETRY

    vertices: AttributeArray | None = None
    normals: AttributeArray | None = None
    colors: AttributeArray | None = None
    tex_coords: dict[int, AttributeArray] = field(default_factory=dict)
    tangents: AttributeArray | None = None
    bitangents: AttributeArray | None = None
    primitive_sets: list[PrimitiveSet] = field(default_factory=list)

    def __post_init__(self) -> None:
        for unit in self.tex_coords:
            if not 0 <= unit < MAX_TEXTURE_UNITS:
                raise ValueError(f"Texture unit {unit} out of range 0..{MAX_TEXTURE_UNITS - 1}")

    @property
    def vertex_count(self) -> int:
        return len(self.vertices) if self.vertices is not None else 0


@dataclass(eq=False)
class Geode(Node):
    """Leaf container holding drawables."""

    kind: ClassVar[NodeKind] = NodeKind.GEODE

    drawables: list[Drawable] = field(default_factory=list)

    def add_drawable(self, drawable: Drawable) -> Drawable:
        self.drawables.append(drawable)
        return drawable
