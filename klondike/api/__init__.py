"""
API - JSON contract for front ends.

Pydantic models for incoming actions and the outgoing table view.
"""

from .schemas import (
    ActionRequest,
    CardInfo,
    DispatchResponse,
    GameStateResponse,
    LocationModel,
    PileInfo,
    PileType,
)

__all__ = [
    "ActionRequest",
    "CardInfo",
    "DispatchResponse",
    "GameStateResponse",
    "LocationModel",
    "PileInfo",
    "PileType",
]
