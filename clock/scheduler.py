import logging
import threading
from datetime import datetime, timedelta

from clock.slots import CurrentSlot, NextSlot, PoemCache
from db.database import Database
from db.models import PoemRecord
from processing.generator import PoemGenerator

logger = logging.getLogger(__name__)


def format_time(moment: datetime) -> str:
    return moment.strftime("%I:%M %p")


def to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _spawn_thread(fn, *args):
    threading.Thread(target=fn, args=args, daemon=True).start()


class PoemScheduler:
    """Keeps one fresh poem in the cache, driven by a once-per-second tick.

    At second ``prefetch_second`` the poem for the next minute is generated in
    the background. At second 0 of a new minute the prefetched poem is promoted
    if it matches, otherwise a poem is generated on demand. Old history is
    pruned at the top of every hour.

    Generation calls go through ``dispatch`` (a daemon thread by default) so
    the tick never waits on the API. Tests pass a synchronous dispatcher.
    """

    def __init__(self, generator: PoemGenerator, db: Database, cache: PoemCache,
                 retention_hours: int = 24, prefetch_second: int = 45,
                 startup_prefetch_delay: float = 2.0, clock=datetime.now,
                 dispatch=_spawn_thread):
        self.generator = generator
        self.db = db
        self.cache = cache
        self.retention_hours = retention_hours
        self.prefetch_second = prefetch_second
        self.startup_prefetch_delay = startup_prefetch_delay
        self._clock = clock
        self._dispatch = dispatch
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self):
        logger.info("Starting background poem generator...")
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="poem-scheduler", daemon=True)
        self._thread.start()
        threading.Thread(target=self._startup, name="poem-startup", daemon=True).start()

    def stop(self, timeout: float = 2.0):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _startup(self):
        self.generate_and_cache(self._clock())
        logger.info("Initial poem generated")
        if self._stop.wait(self.startup_prefetch_delay):
            return
        self.prefetch_next_minute(self._clock())

    def _run(self):
        last_second = None
        while not self._stop.is_set():
            now = self._clock()
            second = now.replace(microsecond=0)
            if second != last_second:
                last_second = second
                try:
                    self.tick(now)
                except Exception:
                    logger.exception("Poem scheduler tick failed at %s", second)
            # Wake just after the next whole second
            if self._stop.wait(1 - now.microsecond / 1_000_000):
                break

    def tick(self, now: datetime):
        if now.second == self.prefetch_second:
            self.prefetch_next_minute(now)

        if now.second == 0 and now.minute != self.cache.current.minute_of_hour:
            self.handle_boundary(now)

    def prefetch_next_minute(self, now: datetime) -> bool:
        target = (now + timedelta(minutes=1)).replace(second=0, microsecond=0)
        if self.cache.next.minute_of_hour == target.minute:
            logger.debug("Poem for minute %d already prefetched", target.minute)
            return False

        logger.info("Prefetching poem for next minute: %d", target.minute)
        self._dispatch(self._fill_next, target)
        return True

    def _fill_next(self, target: datetime):
        time_label = format_time(target)
        text = self.generator.generate(time_label)
        self.cache.next = NextSlot(
            text=text,
            minute_of_hour=target.minute,
            time_label=time_label,
            timestamp=to_millis(target),
        )
        logger.info("Prefetch complete for minute: %d", target.minute)

    def handle_boundary(self, now: datetime):
        minute = now.minute
        logger.info("Minute changed to: %d", minute)

        nxt = self.cache.next
        if nxt.minute_of_hour == minute and nxt.text:
            logger.info("Using prefetched poem for minute: %d", minute)
            self.cache.current = CurrentSlot(
                time_label=nxt.time_label,
                text=nxt.text,
                timestamp=nxt.timestamp,
                minute_of_hour=minute,
            )
            self._save(nxt.time_label, nxt.text, nxt.timestamp)
            self.cache.next = NextSlot()
        else:
            logger.warning("No prefetched poem for minute %d, generating on demand...", minute)
            self._dispatch(self.generate_and_cache, now)

        if minute == 0:
            self.db.prune_poems(self.retention_hours, now_ms=to_millis(now))

    def generate_and_cache(self, now: datetime) -> str:
        time_label = format_time(now)
        timestamp = to_millis(now)
        text = self.generator.generate(time_label)

        self.cache.current = CurrentSlot(
            time_label=time_label,
            text=text,
            timestamp=timestamp,
            minute_of_hour=now.minute,
        )
        self._save(time_label, text, timestamp)
        return text

    def _save(self, time_label: str, text: str, timestamp: int):
        self.db.save_poem(PoemRecord(
            timestamp=timestamp,
            time_label=time_label,
            text=text,
            model_id=self.generator.model,
        ))
