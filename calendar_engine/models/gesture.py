"""
Pointer gesture value objects for the drag/resize controller.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from calendar_engine.utils.date_keys import DateKey


class DragGesture(BaseModel):
    """Pointer movement since the gesture started."""

    pointer_delta_y: float = 0.0
    elapsed_ms: int = Field(0, ge=0)


class DropTarget(BaseModel):
    """An hour cell an instance was dropped on."""

    date: DateKey
    hour: int = Field(..., ge=0, le=23)
    offset_y: float = Field(0.0, description="Pointer offset from the top of the cell (px)")
    slot_height_px: float = Field(50.0, gt=0)


class GestureOutcome(BaseModel):
    """Result of a finished gesture."""

    instance_id: str
    date: DateKey
    start_time: str
    end_time: str
    changed: bool = False
    committed: bool = False
