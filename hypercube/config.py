"""Preferences consumed by the controller and the geometry projector.

Values can be overridden from the environment, e.g.
``HYPERCUBE_INTERACTION__TWIST_DURATION=0.5`` or ``HYPERCUBE_GFX__FOV_4D=45``.
Angles are in degrees.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InteractionPreferences(BaseModel):
    """Per-frame animation settings."""

    # seconds per twist
    twist_duration: float = Field(default=0.2, ge=0.0)
    # twist faster when several twists are queued
    dynamic_twist_speed: bool = True


class GfxPreferences(BaseModel):
    """Projection and sticker layout settings."""

    fov_3d: float = Field(default=30.0, gt=-180.0, lt=180.0)
    fov_4d: float = Field(default=30.0, gt=-180.0, lt=180.0)
    scale: float = Field(default=1.0, gt=0.0)
    theta: float = 35.0
    phi: float = -30.0
    face_spacing: float = Field(default=0.1, ge=0.0, lt=1.0)
    sticker_spacing: float = Field(default=0.1, ge=0.0, lt=1.0)
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)


class Preferences(BaseSettings):
    interaction: InteractionPreferences = InteractionPreferences()
    gfx: GfxPreferences = GfxPreferences()

    model_config = SettingsConfigDict(
        env_prefix="HYPERCUBE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_preferences() -> Preferences:
    return Preferences()
