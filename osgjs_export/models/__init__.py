"""Scene graph input model."""

from osgjs_export.models.animation import (
    Animation,
    AnimationManager,
    Channel,
    ChannelType,
    StackedMatrix,
    StackedQuaternion,
    StackedRotateAxis,
    StackedScale,
    StackedTranslate,
    UpdateCallback,
    UpdateMatrixTransform,
)
from osgjs_export.models.arrays import AttributeArray
from osgjs_export.models.primitives import (
    DrawArrayLengths,
    DrawArrays,
    DrawElements,
    IndexType,
    PrimitiveMode,
    PrimitiveSet,
)
from osgjs_export.models.scene import (
    Drawable,
    Geode,
    Geometry,
    Group,
    LightSource,
    MatrixTransform,
    Node,
    NodeKind,
    PositionAttitudeTransform,
    Projection,
)
from osgjs_export.models.state import Light, Material, StateSet, Texture

__all__ = [
    "Animation",
    "AnimationManager",
    "AttributeArray",
    "Channel",
    "ChannelType",
    "DrawArrayLengths",
    "DrawArrays",
    "DrawElements",
    "Drawable",
    "Geode",
    "Geometry",
    "Group",
    "IndexType",
    "Light",
    "LightSource",
    "Material",
    "MatrixTransform",
    "Node",
    "NodeKind",
    "PositionAttitudeTransform",
    "PrimitiveMode",
    "PrimitiveSet",
    "Projection",
    "StackedMatrix",
    "StackedQuaternion",
    "StackedRotateAxis",
    "StackedScale",
    "StackedTranslate",
    "StateSet",
    "Texture",
    "UpdateCallback",
    "UpdateMatrixTransform",
]
