import random
import threading
from typing import Callable, Dict, List, Optional

from tankbot.services.game.session import GameSession
from tankbot.services.game.settings import GameSettings


class SessionManager:
    """Owns one GameSession per chat channel for the lifetime of the process."""

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        timer_factory: Optional[Callable[[GameSession], object]] = None,
        rng_factory: Callable[[], random.Random] = random.Random,
    ):
        self.settings = settings or GameSettings()
        self.timer_factory = timer_factory
        self.rng_factory = rng_factory
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def get(self, channel_id: str) -> Optional[GameSession]:
        return self._sessions.get(str(channel_id))

    def get_or_create(self, channel_id: str) -> GameSession:
        channel_id = str(channel_id)
        with self._lock:
            session = self._sessions.get(channel_id)
            if session is None:
                session = GameSession(
                    channel_id=channel_id,
                    settings=self.settings,
                    rng=self.rng_factory(),
                    timer_factory=self.timer_factory,
                )
                self._sessions[channel_id] = session
            return session

    def active_channels(self) -> List[str]:
        with self._lock:
            sessions = list(self._sessions.items())
        return [cid for cid, s in sessions if s.is_initialized]

    def shutdown(self) -> None:
        """Destroy every session, cancelling their timers."""
        with self._lock:
            for session in self._sessions.values():
                session.destroy()
            self._sessions.clear()
