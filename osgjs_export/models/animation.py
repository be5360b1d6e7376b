"""Update callbacks — animation managers and transform updaters."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


class ChannelType(enum.Enum):
    """Value type animated by a channel, with its interpolation."""

    FLOAT = "FloatLerpChannel"
    VEC3 = "Vec3LerpChannel"
    QUAT = "QuatSlerpChannel"

    @property
    def value_size(self) -> int:
        return {ChannelType.FLOAT: 1, ChannelType.VEC3: 3, ChannelType.QUAT: 4}[self]


class UpdateCallback:
    """Base class of every update-time behaviour attached to a node."""


@dataclass(eq=False)
class Channel:
    """Keyframe track animating one named target."""

    name: str
    target_name: str
    type: ChannelType = ChannelType.VEC3
    keyframes: list[tuple[float, Sequence[float] | float]] = field(default_factory=list)

    def __post_init__(self) -> None:
        size = self.type.value_size
        for time, value in self.keyframes:
            n = 1 if np.isscalar(value) else len(value)  # type: ignore[arg-type]
            if n != size:
                raise ValueError(
                    f"Channel {self.name!r} expects {size} components per key, "
                    f"got {n} at t={time}"
                )


@dataclass(eq=False)
class Animation:
    """A named set of channels played together."""

    name: str
    channels: list[Channel] = field(default_factory=list)


@dataclass(eq=False)
class AnimationManager(UpdateCallback):
    """Owns the animations of a subgraph."""

    animations: list[Animation] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Stacked transform elements
# ---------------------------------------------------------------------------


class StackedTransform:
    """One operation of an UpdateMatrixTransform stack."""

    name: str = ""


@dataclass(eq=False)
class StackedTranslate(StackedTransform):
    name: str = "translate"
    translate: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(eq=False)
class StackedScale(StackedTransform):
    name: str = "scale"
    scale: tuple[float, float, float] = (1.0, 1.0, 1.0)


@dataclass(eq=False)
class StackedRotateAxis(StackedTransform):
    name: str = "rotate"
    axis: tuple[float, float, float] = (0.0, 0.0, 1.0)
    angle: float = 0.0


@dataclass(eq=False)
class StackedQuaternion(StackedTransform):
    name: str = "quaternion"
    quaternion: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


@dataclass(eq=False)
class StackedMatrix(StackedTransform):
    name: str = "matrix"
    matrix: np.ndarray = field(default_factory=lambda: np.identity(4))

    @classmethod
    def look_at(
        cls,
        eye: Sequence[float],
        center: Sequence[float],
        up: Sequence[float],
        name: str = "lookat",
    ) -> StackedMatrix:
        """Build a view matrix element looking from *eye* toward *center*.

        Row-vector convention, matching the node matrices.
        """
        eye_v = np.asarray(eye, dtype=np.float64)
        f = np.asarray(center, dtype=np.float64) - eye_v
        f /= np.linalg.norm(f)
        s = np.cross(f, np.asarray(up, dtype=np.float64))
        s /= np.linalg.norm(s)
        u = np.cross(s, f)

        m = np.identity(4)
        m[0:3, 0] = s
        m[0:3, 1] = u
        m[0:3, 2] = -f
        m[3, 0:3] = [-np.dot(s, eye_v), -np.dot(u, eye_v), np.dot(f, eye_v)]
        return cls(name=name, matrix=m)


@dataclass(eq=False)
class UpdateMatrixTransform(UpdateCallback):
    """Recomputes a transform node's matrix from a stack of operations."""

    name: str = ""
    stacked_transforms: list[StackedTransform] = field(default_factory=list)
