"""Session lifecycle and the registry of players, jurors and pending votes.

A session moves uninitialized -> lobby -> in_progress -> destroyed. Players
join and leave only while the lobby is open; board actions and votes are
only accepted once the game is in progress and nobody has won yet.

All mutation happens under ``session.lock``. The tick timer runs on a
background task, so the resolver and the tick never interleave.
"""
import logging
import random
import threading
from enum import Enum
from typing import Callable, List, Optional

from tankbot.models import JuryMember, JuryVote, Player, Tile
from .errors import (
    GameError,
    NotEnoughPlayers,
    SessionInProgress,
    SessionNotInitialized,
    SessionNotInProgress,
)
from .settings import GameSettings

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = 'uninitialized'
    LOBBY = 'lobby'
    IN_PROGRESS = 'in_progress'
    DESTROYED = 'destroyed'


class GameSession:
    def __init__(
        self,
        channel_id: str = 'default',
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
        timer_factory: Optional[Callable[['GameSession'], object]] = None,
    ):
        self.channel_id = channel_id
        self.settings = settings or GameSettings()
        self.rng = rng or random.Random()
        self.timer_factory = timer_factory
        self.lock = threading.RLock()
        self.state = SessionState.UNINITIALIZED
        self.players: List[Player] = []
        self.jury: List[JuryMember] = []
        self.votes: List[JuryVote] = []
        self.winner_id: Optional[str] = None
        self._timer = None

    # ---- Lifecycle ----

    @property
    def is_initialized(self) -> bool:
        return self.state in (SessionState.LOBBY, SessionState.IN_PROGRESS)

    @property
    def in_progress(self) -> bool:
        return self.state == SessionState.IN_PROGRESS

    @property
    def is_over(self) -> bool:
        return self.in_progress and self.winner_id is not None

    def create(self) -> bool:
        with self.lock:
            if self.is_initialized:
                return False
            self.state = SessionState.LOBBY
            logger.info(f"[session-create] channel={self.channel_id}")
            return True

    def destroy(self) -> bool:
        with self.lock:
            if not self.is_initialized:
                return False
            self.cancel_timer()
            self.state = SessionState.DESTROYED
            self.players = []
            self.jury = []
            self.votes = []
            self.winner_id = None
            logger.info(f"[session-destroy] channel={self.channel_id}")
            return True

    def reset(self) -> bool:
        with self.lock:
            self.destroy()
            return self.create()

    def check_can_start(self) -> None:
        """Raise the error explaining why ``start`` would refuse, if any."""
        if not self.is_initialized:
            raise SessionNotInitialized()
        if self.in_progress:
            raise SessionInProgress('the game has already started')
        if len(self.players) < self.settings.min_players:
            raise NotEnoughPlayers(f'at least {self.settings.min_players} players are needed to start')

    def start(self) -> bool:
        with self.lock:
            try:
                self.check_can_start()
            except GameError:
                return False
            self.state = SessionState.IN_PROGRESS
            if self.timer_factory is not None:
                self._timer = self.timer_factory(self)
                self._timer.start()
            logger.info(f"[session-start] channel={self.channel_id} players={len(self.players)}")
            return True

    def cancel_timer(self) -> None:
        with self.lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def timer(self):
        return self._timer

    # ---- State guards used by every action ----

    def require_lobby(self) -> None:
        if not self.is_initialized:
            raise SessionNotInitialized()
        if self.in_progress:
            raise SessionInProgress()

    def require_in_progress(self) -> None:
        if not self.is_initialized:
            raise SessionNotInitialized()
        if not self.in_progress:
            raise SessionNotInProgress()
        if self.winner_id is not None:
            raise SessionNotInProgress('the game is over')

    # ---- Registry ----

    def find_player(self, participant_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == participant_id), None)

    def find_player_at(self, tile: Tile) -> Optional[Player]:
        return next((p for p in self.players if p.position == tile), None)

    def find_player_by_name(self, name: str) -> Optional[Player]:
        name = (name or '').strip().lower()
        return next((p for p in self.players if p.name == name), None)

    def find_juror(self, participant_id: str) -> Optional[JuryMember]:
        return next((j for j in self.jury if j.id == participant_id), None)

    def eliminate(self, player: Player) -> JuryMember:
        """Move ``player`` from the board into the jury."""
        self.players.remove(player)
        member = JuryMember.from_player(player)
        self.jury.append(member)
        return member

    def record_vote(self, target_id: str) -> JuryVote:
        entry = next((v for v in self.votes if v.target_id == target_id), None)
        if entry is None:
            entry = JuryVote(target_id=target_id)
            self.votes.append(entry)
        entry.votes += 1
        return entry

    def declare_winner(self, player: Player) -> None:
        self.winner_id = player.id
        self.cancel_timer()
        logger.info(f"[win] channel={self.channel_id} winner={player.id} name={player.name}")

    def snapshot(self) -> dict:
        """Read-only view for renderers and API clients."""
        with self.lock:
            return {
                'channel_id': self.channel_id,
                'state': self.state.value,
                'board_size': self.settings.board_size,
                'players': [p.to_dict() for p in self.players],
                'jury': [j.to_dict() for j in self.jury],
                'pending_votes': len(self.votes),
                'winner_id': self.winner_id,
            }
