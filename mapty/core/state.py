"""Shared runtime state for the workout controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from mapty.workout.model import Coordinates

FormPhase = Literal["idle", "awaiting_input"]


@dataclass
class ControllerState:
    phase: FormPhase = "idle"
    pending: Coordinates | None = None
    map_ready: bool = False
    map_center: Coordinates | None = None
