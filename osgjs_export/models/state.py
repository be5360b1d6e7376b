"""Rendering state — materials, textures, lights and the StateSet bundle."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from osgjs_export.config import MAX_TEXTURE_UNITS

RGBA = tuple[float, float, float, float]


class Material(BaseModel):
    """Fixed-function material colours."""

    name: str = ""
    ambient: RGBA = (0.2, 0.2, 0.2, 1.0)
    diffuse: RGBA = (0.8, 0.8, 0.8, 1.0)
    specular: RGBA = (0.0, 0.0, 0.0, 1.0)
    emission: RGBA = (0.0, 0.0, 0.0, 1.0)
    shininess: float = Field(default=0.0, ge=0.0, le=128.0)


class Texture(BaseModel):
    """2D texture bound to a texture unit."""

    name: str = ""
    file: str = ""
    min_filter: str = "LINEAR_MIPMAP_LINEAR"
    mag_filter: str = "LINEAR"
    wrap_s: str = "REPEAT"
    wrap_t: str = "REPEAT"


class Light(BaseModel):
    """Light parameters carried by a LightSource node."""

    name: str = ""
    light_num: int = Field(default=0, ge=0)
    ambient: RGBA = (0.0, 0.0, 0.0, 1.0)
    diffuse: RGBA = (0.8, 0.8, 0.8, 1.0)
    specular: RGBA = (1.0, 1.0, 1.0, 1.0)
    position: RGBA = (0.0, 0.0, 1.0, 0.0)
    direction: tuple[float, float, float] = (0.0, 0.0, -1.0)
    constant_attenuation: float = 1.0
    linear_attenuation: float = 0.0
    quadratic_attenuation: float = 0.0
    spot_exponent: float = 0.0
    spot_cutoff: float = 180.0


@dataclass(eq=False)
class StateSet:
    """Identity-bearing bundle of rendering state.

    Two owners referencing the same StateSet instance share one encoded
    object in the document.
    """

    name: str = ""
    material: Material | None = None
    textures: dict[int, Texture] = field(default_factory=dict)
    transparent: bool = False

    def __post_init__(self) -> None:
        for unit in self.textures:
            if not 0 <= unit < MAX_TEXTURE_UNITS:
                raise ValueError(f"Texture unit {unit} out of range 0..{MAX_TEXTURE_UNITS - 1}")

    def is_empty(self) -> bool:
        return self.material is None and not self.textures and not self.transparent
