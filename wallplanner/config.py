"""
Editor configuration

Global constants for the canvas scale and interaction thresholds, plus the
``EditorConfig`` model that carries them through the editing operations.
Defaults can be overridden per process with ``WALLPLANNER_<FIELD>``
environment variables.
"""

import os
from typing import Optional, Mapping

from pydantic import BaseModel, Field

# 100px = 1m
SCALE: float = 100.0
SNAP_CLOSE_PX: float = 20.0
SNAP_ALIGN_PX: float = 20.0
MIN_SHAPE_PX: float = 5.0

ENV_PREFIX = "WALLPLANNER_"


class EditorConfig(BaseModel):
    """Configuration for the wall editor"""
    scale: float = Field(SCALE, gt=0, description="Canvas pixels per meter")
    snap_close_px: float = Field(SNAP_CLOSE_PX, ge=0, description="Distance to the first vertex that closes the outline")
    snap_align_px: float = Field(SNAP_ALIGN_PX, ge=0, description="Distance under which a dragged vertex aligns to a neighbour")
    min_shape_px: float = Field(MIN_SHAPE_PX, ge=0, description="Smallest width/height a drawn shape may have")
    history_limit: Optional[int] = Field(None, ge=1, description="Maximum undo depth, unbounded when unset")

    class Config:
        json_schema_extra = {
            "example": {
                "scale": 100.0,
                "snap_close_px": 20.0,
                "snap_align_px": 20.0,
                "min_shape_px": 5.0,
                "history_limit": 50
            }
        }

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorConfig":
        """Create config from environment variables, falling back to defaults"""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)


DEFAULT_CONFIG = EditorConfig()
