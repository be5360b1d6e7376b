"""State encoder — StateSets, materials, textures and lights."""

from __future__ import annotations

import logging

from osgjs_export.config import TRANSPARENT_BIN
from osgjs_export.document.model import DocArray, DocObject, UniqueIds
from osgjs_export.models.state import Light, Material, StateSet, Texture

logger = logging.getLogger(__name__)


class StateEncoder:
    """Encode StateSets once per identity.

    The memo lives as long as the encoder, i.e. one encode call.

    Parameters
    ----------
    ids:
        UniqueID allocator shared with the rest of the encode.
    """

    def __init__(self, ids: UniqueIds) -> None:
        self._ids = ids
        self._memo: dict[int, DocObject | None] = {}
        # Keeps memoized StateSets alive so their id() cannot be reused
        self._owners: list[StateSet] = []

    def encode(self, state_set: StateSet) -> DocObject | None:
        """Return the shared document object for *state_set*, or None if empty."""
        key = id(state_set)
        if key in self._memo:
            return self._memo[key]

        json_state = self._build(state_set)
        self._memo[key] = json_state
        self._owners.append(state_set)
        return json_state

    def wrap(self, state_set: StateSet) -> DocObject | None:
        """Return ``{"osg.StateSet": <shared object>}`` ready to attach, or None."""
        json_state = self.encode(state_set)
        if json_state is None:
            return None
        return DocObject({"osg.StateSet": json_state})

    def _build(self, state_set: StateSet) -> DocObject | None:
        if state_set.is_empty():
            logger.debug("StateSet %r has no encodable content", state_set.name)
            return None

        json_state = self._ids.new_object()
        if state_set.name:
            json_state["Name"] = state_set.name

        if state_set.material is not None:
            json_state["AttributeList"] = DocArray([
                DocObject({"osg.Material": encode_material(state_set.material, self._ids)}),
            ])

        if state_set.textures:
            units = DocArray()
            for unit in range(max(state_set.textures) + 1):
                attributes = DocArray()
                texture = state_set.textures.get(unit)
                if texture is not None:
                    attributes.append(
                        DocObject({"osg.Texture": encode_texture(texture, self._ids)})
                    )
                units.append(attributes)
            json_state["TextureAttributeList"] = units

        if state_set.transparent:
            json_state["RenderingHint"] = TRANSPARENT_BIN

        return json_state


def encode_material(material: Material, ids: UniqueIds) -> DocObject:
    obj = ids.new_object()
    if material.name:
        obj["Name"] = material.name
    obj["Ambient"] = list(material.ambient)
    obj["Diffuse"] = list(material.diffuse)
    obj["Specular"] = list(material.specular)
    obj["Emission"] = list(material.emission)
    obj["Shininess"] = material.shininess
    return obj


def encode_texture(texture: Texture, ids: UniqueIds) -> DocObject:
    obj = ids.new_object()
    if texture.name:
        obj["Name"] = texture.name
    obj["File"] = texture.file
    obj["MagFilter"] = texture.mag_filter
    obj["MinFilter"] = texture.min_filter
    obj["WrapS"] = texture.wrap_s
    obj["WrapT"] = texture.wrap_t
    return obj


def encode_light(light: Light, ids: UniqueIds) -> DocObject:
    obj = ids.new_object()
    if light.name:
        obj["Name"] = light.name
    obj["LightNum"] = light.light_num
    obj["Ambient"] = list(light.ambient)
    obj["Diffuse"] = list(light.diffuse)
    obj["Specular"] = list(light.specular)
    obj["Position"] = list(light.position)
    obj["Direction"] = list(light.direction)
    obj["ConstantAttenuation"] = light.constant_attenuation
    obj["LinearAttenuation"] = light.linear_attenuation
    obj["QuadraticAttenuation"] = light.quadratic_attenuation
    obj["SpotExponent"] = light.spot_exponent
    obj["SpotCutoff"] = light.spot_cutoff
    return obj
