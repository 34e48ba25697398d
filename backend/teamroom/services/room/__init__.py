"""Room domain services: seating, team assignment and the reset timer.

Nothing in here knows about HTTP or Socket.IO. Routes and socket handlers
call into RoomManager, which owns all mutable room state.
"""

from .manager import JoinResult, Player, RoomManager, PHASE_PLAYING, PHASE_WAITING
from .scheduler import ResetScheduler

__all__ = [
    'JoinResult',
    'Player',
    'RoomManager',
    'ResetScheduler',
    'PHASE_PLAYING',
    'PHASE_WAITING',
]
