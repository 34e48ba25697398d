import logging
import threading
import time
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


def _start_daemon_thread(target, *args):
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


class ResetScheduler:
    """One-shot delayed callbacks keyed by room generation.

    - A key can only be pending once; scheduling it again is a no-op
    - cancel() drops the key, and the worker aborts when it wakes up
    - The callback receives the key so it can check it is still current

    start_task/sleep default to plain threads and time.sleep; the app
    factory passes socketio.start_background_task and socketio.sleep so the
    timer cooperates with whatever async mode Socket.IO runs in.
    """

    def __init__(self, start_task: Optional[Callable] = None, sleep: Optional[Callable] = None,
                 heartbeat: int = 0):
        self._start_task = start_task or _start_daemon_thread
        self._sleep = sleep or time.sleep
        self._heartbeat = heartbeat
        self._pending: Dict[int, float] = {}
        self._lock = threading.Lock()

    def schedule(self, key: int, delay: float, callback: Callable[[int], object]) -> bool:
        deadline = time.time() + delay
        with self._lock:
            if key in self._pending:
                logger.info(f"[timer-skip] generation={key} already scheduled")
                return False
            self._pending[key] = deadline
        logger.info(f"[timer-set] generation={key} delay={delay}s deadline={deadline}")
        self._start_task(self._worker, key, deadline, delay, callback)
        return True

    def cancel(self, key: int) -> bool:
        with self._lock:
            cancelled = self._pending.pop(key, None) is not None
        if cancelled:
            logger.info(f"[timer-cancel] generation={key}")
        return cancelled

    def cancel_all(self) -> None:
        with self._lock:
            keys = list(self._pending)
            self._pending.clear()
        for key in keys:
            logger.info(f"[timer-cancel] generation={key}")

    def pending(self) -> List[int]:
        with self._lock:
            return sorted(self._pending)

    def _worker(self, key: int, deadline: float, delay: float, callback: Callable[[int], object]) -> None:
        if self._heartbeat and self._heartbeat > 0:
            slept = 0.0
            while slept < delay:
                step = min(self._heartbeat, delay - slept)
                self._sleep(step)
                slept += step
                logger.info(f"[timer-heartbeat] generation={key} remaining={max(0, delay - slept)}s")
        else:
            self._sleep(delay)

        with self._lock:
            if self._pending.get(key) != deadline:
                logger.info(f"[timer-abort] generation={key} cancelled or superseded")
                return
            del self._pending[key]

        logger.info(f"[timer-fire] generation={key}")
        try:
            callback(key)
        except Exception:
            logger.exception(f"[timer-error] generation={key} reset callback failed")
