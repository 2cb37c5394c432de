import logging
import threading
from datetime import datetime, time, timedelta, timezone
from typing import Callable, List, Optional

from tankbot.models import TickReport
from .session import GameSession

logger = logging.getLogger(__name__)

DAWN_MESSAGE = "It's a new dawn, it's a day. All players have been given +1 action point."
VOTES_PER_BONUS_POINT = 3


def apply_tick(session: GameSession) -> Optional[TickReport]:
    """Apply the daily tick to an in-progress session.

    +1 point to every active player; every juror may vote again; each vote
    target still on the board receives votes // 3 bonus points; the vote
    accumulator is emptied. Returns None when the session is not running.
    """
    with session.lock:
        if not session.in_progress:
            return None
        report = TickReport()
        for player in session.players:
            player.points += 1
        report.players_credited = len(session.players)
        for juror in session.jury:
            juror.can_vote = True
        report.jurors_restored = len(session.jury)
        for entry in session.votes:
            player = session.find_player(entry.target_id)
            if player is None:
                continue
            bonus = entry.votes // VOTES_PER_BONUS_POINT
            player.points += bonus
            report.bonuses[player.id] = bonus
        session.votes = []
        logger.info(
            f"[tick] channel={session.channel_id} players={report.players_credited} jurors={report.jurors_restored} bonuses={report.bonuses}"
        )
        return report


def local_now() -> datetime:
    return datetime.now().astimezone()


def seconds_until_next_midnight(now: datetime) -> float:
    """Seconds from ``now`` to the following local midnight (always in the future).

    Aware datetimes are compared in UTC, so a daylight-saving change between
    now and midnight shortens or lengthens the wait by the shifted hour. A
    fixed-offset ``now`` (what ``astimezone()`` returns) is resolved against
    the host's local zone. Naive datetimes are treated as wall-clock time.
    """
    next_day = now.date() + timedelta(days=1)
    if now.tzinfo is None:
        return (datetime.combine(next_day, time()) - now).total_seconds()
    if isinstance(now.tzinfo, timezone):
        next_midnight = datetime.combine(next_day, time()).astimezone()
    else:
        next_midnight = datetime.combine(next_day, time(), tzinfo=now.tzinfo)
    return (next_midnight.astimezone(timezone.utc) - now.astimezone(timezone.utc)).total_seconds()


def split_delay(total: float, max_step: float) -> List[float]:
    """Break ``total`` seconds into consecutive waits of at most ``max_step`` each."""
    if max_step <= 0:
        raise ValueError('max_step must be positive')
    steps = []
    remaining = max(0.0, float(total))
    while remaining > max_step:
        steps.append(max_step)
        remaining -= max_step
    steps.append(remaining)
    return steps


def _spawn_thread(target: Callable) -> threading.Thread:
    worker = threading.Thread(target=target, daemon=True)
    worker.start()
    return worker


class TickTimer:
    """Fires ``apply_tick`` at the next local midnight, then every tick interval.

    Waits longer than the configured maximum delay are chained. ``cancel``
    interrupts the current wait and the timer never fires again.
    """

    def __init__(
        self,
        session: GameSession,
        on_tick: Optional[Callable[[GameSession, TickReport], None]] = None,
        clock: Callable[[], datetime] = local_now,
        spawn: Optional[Callable[[Callable], object]] = None,
    ):
        self.session = session
        self.on_tick = on_tick
        self.clock = clock
        self._spawn = spawn or _spawn_thread
        self._cancelled = threading.Event()
        self.fired = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        self._spawn(self._run)

    def cancel(self) -> None:
        if not self._cancelled.is_set():
            self._cancelled.set()
            logger.info(f"[timer-cancel] channel={self.session.channel_id}")

    def _step_size(self) -> float:
        settings = self.session.settings
        hb = settings.timer_heartbeat_sec
        if hb and hb > 0:
            return min(hb, settings.timer_max_delay_sec)
        return settings.timer_max_delay_sec

    def wait(self, delay: float) -> bool:
        """Sleep for ``delay`` seconds in chained steps; False if cancelled meanwhile."""
        hb = self.session.settings.timer_heartbeat_sec
        remaining = delay
        for step in split_delay(delay, self._step_size()):
            if self._cancelled.wait(step):
                return False
            remaining -= step
            if hb and hb > 0:
                logger.info(f"[timer-heartbeat] channel={self.session.channel_id} remaining={max(0, remaining):.0f}s")
        return not self._cancelled.is_set()

    def _run(self) -> None:
        delay = seconds_until_next_midnight(self.clock())
        logger.info(f"[timer-set] channel={self.session.channel_id} first_tick_in={delay:.0f}s")
        while self.wait(delay):
            with self.session.lock:
                # cancel() is called under the session lock, so this check cannot race destroy()
                if self.cancelled:
                    return
                report = apply_tick(self.session)
            if report is None:
                logger.info(f"[timer-abort] channel={self.session.channel_id} session is not in progress")
                return
            self.fired += 1
            logger.info(f"[timer-fire] channel={self.session.channel_id} tick={self.fired}")
            if self.on_tick is not None:
                try:
                    self.on_tick(self.session, report)
                except Exception:
                    logger.exception(f"[timer-callback-error] channel={self.session.channel_id}")
            delay = self.session.settings.tick_interval_sec
