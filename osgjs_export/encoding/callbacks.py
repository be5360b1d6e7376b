"""Callback encoder — animation managers and UpdateMatrixTransform stacks."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from osgjs_export.document.model import DocArray, DocObject, UniqueIds
from osgjs_export.models.animation import (
    Animation,
    AnimationManager,
    Channel,
    StackedMatrix,
    StackedQuaternion,
    StackedRotateAxis,
    StackedScale,
    StackedTransform,
    StackedTranslate,
    UpdateCallback,
    UpdateMatrixTransform,
)

logger = logging.getLogger(__name__)


class CallbackEncoder:
    """Encode a node's update callback chain into an ``UpdateCallbacks`` array."""

    def __init__(self, ids: UniqueIds) -> None:
        self._ids = ids

    def encode(self, callbacks: Sequence[UpdateCallback]) -> DocArray | None:
        """Walk the chain front to back.

        Returns None when no callback was recognised, so the owner omits
        the key instead of writing an empty array.
        """
        update_callbacks = DocArray()
        for callback in callbacks:
            if isinstance(callback, AnimationManager):
                update_callbacks.append(DocObject({
                    "osgAnimation.BasicAnimationManager": self._animation_manager(callback),
                }))
            elif isinstance(callback, UpdateMatrixTransform):
                update_callbacks.append(DocObject({
                    "osgAnimation.UpdateMatrixTransform": self._update_matrix_transform(callback),
                }))
            else:
                logger.debug("Skipping unrecognised callback %s", type(callback).__name__)

        if not len(update_callbacks):
            return None
        return update_callbacks

    def _animation_manager(self, manager: AnimationManager) -> DocObject:
        animations = DocArray()
        for animation in manager.animations:
            json_anim = self._animation(animation)
            if json_anim is not None:
                animations.append(DocObject({"osgAnimation.Animation": json_anim}))
        obj = self._ids.new_object()
        obj["Animations"] = animations
        return obj

    def _animation(self, animation: Animation) -> DocObject | None:
        if not animation.channels:
            logger.debug("Animation %r has no channels, skipping", animation.name)
            return None
        obj = self._ids.new_object()
        obj["Name"] = animation.name
        obj["Channels"] = DocArray(
            DocObject({f"osgAnimation.{channel.type.value}": _channel(channel)})
            for channel in animation.channels
        )
        return obj

    def _update_matrix_transform(self, callback: UpdateMatrixTransform) -> DocObject:
        obj = self._ids.new_object()
        obj["Name"] = callback.name
        stacked = DocArray()
        for element in callback.stacked_transforms:
            json_element = _stacked_element(element)
            if json_element is None:
                logger.warning(
                    "Stacked element %s not supported, skipping", type(element).__name__,
                )
                continue
            stacked.append(json_element)
        obj["StackedTransforms"] = stacked
        return obj


def _channel(channel: Channel) -> DocObject:
    keyframes = DocArray()
    for time, value in channel.keyframes:
        key = DocObject()
        key["Time"] = float(time)
        key["Value"] = float(value) if np.isscalar(value) else [float(v) for v in value]  # type: ignore[union-attr]
        keyframes.append(key)
    return DocObject({
        "Name": channel.name,
        "TargetName": channel.target_name,
        "KeyFrames": keyframes,
    })


def _stacked_element(element: StackedTransform) -> DocObject | None:
    if isinstance(element, StackedTranslate):
        tag, body = "StackedTranslateElement", {"Translate": list(element.translate)}
    elif isinstance(element, StackedRotateAxis):
        tag, body = "StackedRotateAxisElement", {
            "Axis": list(element.axis), "Angle": float(element.angle),
        }
    elif isinstance(element, StackedScale):
        tag, body = "StackedScaleElement", {"Scale": list(element.scale)}
    elif isinstance(element, StackedQuaternion):
        tag, body = "StackedQuaternionElement", {"Quaternion": list(element.quaternion)}
    elif isinstance(element, StackedMatrix):
        tag, body = "StackedMatrixElement", {
            "Matrix": np.asarray(element.matrix, dtype=np.float64).reshape(-1).tolist(),
        }
    else:
        return None
    return DocObject({f"osgAnimation.{tag}": DocObject({"Name": element.name, **body})})
