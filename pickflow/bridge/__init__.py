"""
Bridge Module - Synchronization with a spatial picking surface.

The engine publishes what is pickable and droppable; the board reports
clicks and drags back through the controller's entry points.
"""

from .board import BoardBridge, BoardInteraction
from .sync import BridgeSync

__all__ = [
    "BoardBridge",
    "BoardInteraction",
    "BridgeSync",
]
