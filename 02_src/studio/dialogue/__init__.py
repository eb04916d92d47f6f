"""Dialogue module."""

from .agent import ILaneAgent, LaneAgent, UpdateCallback
from .buffer import LaneBuffer

__all__ = ["ILaneAgent", "LaneAgent", "LaneBuffer", "UpdateCallback"]
