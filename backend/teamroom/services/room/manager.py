"""RoomManager: lifecycle of the single shared room.

Responsibilities:
1. Seat players until the room is full, queue the overflow
2. Assign teams and traitors the moment the room fills
3. Reset the room after a delay and promote queued players
4. Hand out consistent snapshots of the room

Every mutation and every snapshot runs under one lock. Archiving a
finished assignment and notifying listeners happen after the lock is
released.
"""
import itertools
import logging
import random
import string
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from teamroom.exceptions import InvalidArgument, RoomBusy
from .assignment import assign_teams_and_traitors, validate_rules
from .naming import unique_name
from .scheduler import ResetScheduler

logger = logging.getLogger(__name__)

PHASE_WAITING = 'waiting'
PHASE_PLAYING = 'playing'

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Player:
    id: str
    name: str
    joined_at: int
    is_traitor: bool = False
    team: int = 0

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'isTraitor': self.is_traitor,
            'team': self.team,
            'joinedAt': self.joined_at,
        }


@dataclass
class JoinResult:
    player: dict
    room_state: dict
    waiting_position: Optional[int] = None

    @property
    def queued(self) -> bool:
        return self.waiting_position is not None


class RoomManager:
    """Single-room state machine: waiting -> playing -> (reset) -> waiting."""

    def __init__(self, capacity: int = 10, traitor_count: int = 4, reset_delay: float = 30.0, *,
                 rng: Optional[random.Random] = None, scheduler=None, game_log=None,
                 queue_during_game: bool = False, first_game_number: int = 1):
        validate_rules(capacity, traitor_count)
        self.capacity = capacity
        self.traitor_count = traitor_count
        self.reset_delay = reset_delay
        self.queue_during_game = queue_during_game

        self._rng = rng or random.Random()
        # Kept apart from the assignment RNG so seeded runs stay reproducible
        self._id_rng = random.SystemRandom()
        self._scheduler = scheduler or ResetScheduler()
        self._game_log = game_log
        self._listeners: List[Callable[[dict], None]] = []
        self._lock = threading.Lock()
        self._id_seq = itertools.count(1)

        self._players: List[Player] = []
        self._queue: List[Player] = []
        self._teams: Dict[str, List[Player]] = {'team1': [], 'team2': []}
        self._phase = PHASE_WAITING
        self._game_number = first_game_number

    def add_listener(self, listener: Callable[[dict], None]) -> None:
        """Register a callable that receives a fresh snapshot after every change."""
        self._listeners.append(listener)

    # ---- operations ----

    def join(self, name) -> JoinResult:
        """Seat a new player, or queue them if the room is already full.

        Raises:
            InvalidArgument: name missing or blank
            RoomBusy: a game is in progress (unless queue_during_game is set)
        """
        base_name = name.strip() if isinstance(name, str) else ''
        if not base_name:
            raise InvalidArgument('playerName')

        started = None
        with self._lock:
            if self._phase == PHASE_PLAYING and not self.queue_during_game:
                logger.info(f"[room-busy] rejected {base_name!r} during game #{self._game_number}")
                raise RoomBusy(self._game_number)

            taken = (p.name for p in itertools.chain(self._players, self._queue))
            player = Player(
                id=self._generate_id(),
                name=unique_name(base_name, taken),
                joined_at=_now_ms(),
            )

            position = None
            if self._phase == PHASE_WAITING and len(self._players) < self.capacity:
                self._players.append(player)
                logger.info(f"[room-join] {player.name} seated ({len(self._players)}/{self.capacity})")
                if len(self._players) == self.capacity:
                    started = self._start_game_locked()
            else:
                self._queue.append(player)
                position = len(self._queue)
                logger.info(f"[queue-join] {player.name} queued at position {position}")

            result = JoinResult(player.to_dict(), self._snapshot_locked(), position)

        self._after_change(result.room_state, started)
        return result

    def leave(self, player_id) -> dict:
        """Remove a player from the room and/or the queue.

        Unknown ids are ignored. A leave during a game keeps the stale team
        slot until the next reset.
        """
        if not player_id:
            raise InvalidArgument('playerId')

        changed = False
        with self._lock:
            for container, where in ((self._players, 'room'), (self._queue, 'queue')):
                for index, player in enumerate(container):
                    if player.id == player_id:
                        del container[index]
                        changed = True
                        logger.info(
                            f"[room-leave] {player.name} left {where} "
                            f"({len(self._players)}/{self.capacity}, queued={len(self._queue)})"
                        )
                        break
            state = self._snapshot_locked()

        if changed:
            self._after_change(state)
        return state

    def snapshot(self) -> dict:
        with self._lock:
            return self._snapshot_locked()

    @property
    def game_number(self) -> int:
        with self._lock:
            return self._game_number

    @property
    def phase(self) -> str:
        with self._lock:
            return self._phase

    def shutdown(self) -> None:
        """Cancel any pending reset timer."""
        self._scheduler.cancel_all()

    # ---- transitions ----

    def _reset(self, generation: int) -> bool:
        """Timer callback: end game `generation` and promote the queue head.

        Returns False when the timer belongs to a generation that is no
        longer current.
        """
        started = None
        with self._lock:
            if generation != self._game_number or self._phase != PHASE_PLAYING:
                logger.info(
                    f"[room-reset-skip] stale timer generation={generation} "
                    f"current={self._game_number} phase={self._phase}"
                )
                return False

            promoted = self._queue[:self.capacity]
            del self._queue[:len(promoted)]
            self._players = promoted
            self._teams = {'team1': [], 'team2': []}
            self._phase = PHASE_WAITING
            self._game_number += 1
            logger.info(
                f"[room-reset] game #{generation} over, room #{self._game_number} opened "
                f"with {len(promoted)} promoted, {len(self._queue)} still queued"
            )

            if len(self._players) == self.capacity:
                started = self._start_game_locked()
            state = self._snapshot_locked()

        self._after_change(state, started)
        return True

    def _start_game_locked(self) -> dict:
        self._teams = assign_teams_and_traitors(self._players, self.traitor_count, self._rng)
        self._phase = PHASE_PLAYING
        self._scheduler.schedule(self._game_number, self.reset_delay, self._reset)
        return self._build_log_entry_locked()

    # ---- helpers ----

    def _generate_id(self) -> str:
        suffix = ''.join(self._id_rng.choices(_ID_ALPHABET, k=9))
        return f"{_now_ms()}{next(self._id_seq):x}{suffix}"

    def _snapshot_locked(self) -> dict:
        return {
            'players': [p.to_dict() for p in self._players],
            'gamePhase': self._phase,
            'teams': {key: [p.to_dict() for p in team] for key, team in self._teams.items()},
            'playerCount': len(self._players),
            'waitingQueue': [p.to_dict() for p in self._queue],
            'waitingCount': len(self._queue),
            'gameNumber': self._game_number,
            'capacity': self.capacity,
        }

    def _build_log_entry_locked(self) -> dict:
        return {
            'id': self._generate_id(),
            'timestamp': _now_ms(),
            'gameNumber': self._game_number,
            'players': [p.to_dict() for p in self._players],
            'teams': {key: [p.to_dict() for p in team] for key, team in self._teams.items()},
            'traitors': [p.id for p in self._players if p.is_traitor],
        }

    def _after_change(self, state: dict, started: Optional[dict] = None) -> None:
        if started is not None:
            self._announce(started)
            if self._game_log is not None:
                self._game_log.record(started)
        for listener in self._listeners:
            try:
                listener(state)
            except Exception:
                logger.exception("[room-notify] listener failed")

    @staticmethod
    def _announce(entry: dict) -> None:
        def names(players):
            return ', '.join(p['name'] for p in players)

        logger.info(f"[game-start] game #{entry['gameNumber']} started")
        logger.info(f"[game-start] players: {names(entry['players'])}")
        logger.info(f"[game-start] traitors: {names(p for p in entry['players'] if p['isTraitor'])}")
        logger.info(f"[game-start] team1: {names(entry['teams']['team1'])}")
        logger.info(f"[game-start] team2: {names(entry['teams']['team2'])}")
