import asyncio
import logging
from collections import deque

__all__ = ["EventQueue", "EventDispatcher"]

logger = logging.getLogger(__name__)


class EventQueue(asyncio.Queue):

    def __init__(self, event_type: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.event_type = event_type

    def put_latest(self, item) -> None:
        """Put without blocking, dropping the oldest item when full"""
        try:
            self.put_nowait(item)
        except asyncio.QueueFull:
            self.get_nowait()
            self.task_done()
            self.put_nowait(item)


class EventDispatcher:
    """Fans (event_type, item) tuples from a source queue out to per-subscriber queues"""

    def __init__(self, q: asyncio.Queue, buffer_size: int = 20, subs_queue_max_size: int = 100):
        if buffer_size > subs_queue_max_size:
            raise ValueError(f"Buffer size cannot be greater than subscriber queue max size ({subs_queue_max_size})")

        self._queue: asyncio.Queue = q
        self._subs: set[EventQueue] = set()
        self._buffer_size: int = buffer_size
        self._subs_queue_max_size: int = subs_queue_max_size

        self._fanout_task: asyncio.Task | None = None
        self._buffers: dict[str, deque] = {}

    @property
    def subscribers(self) -> int:
        return len(self._subs)

    def subscribe(self, event_type: str, *, scrollback: int = 0) -> EventQueue:
        if scrollback > self._buffer_size:
            raise ValueError(f"Scrollback cannot be greater than buffer size ({self._buffer_size})")

        q = EventQueue(event_type, maxsize=self._subs_queue_max_size)

        if scrollback:
            for item in list(self._buffers.get(event_type, ()))[-scrollback:]:
                q.put_nowait(item)

        self._subs.add(q)

        logger.debug(f"New subscriber added. Total subscribers: {len(self._subs)}")

        return q

    def unsubscribe(self, q: EventQueue) -> None:
        if q not in self._subs:
            logger.warning("Attempted to unsubscribe a non-subscriber")
            return

        self._subs.remove(q)
        logger.debug(f"Subscriber removed. Total subscribers: {len(self._subs)}")

    async def start(self) -> None:
        if self._fanout_task and not self._fanout_task.done():
            return

        logger.info("Starting event dispatcher")

        self._fanout_task = asyncio.create_task(self._fanout(), name="event_dispatcher")

    async def stop(self) -> None:
        if not self._fanout_task or self._fanout_task.done():
            return

        logger.info("Stopping event dispatcher")

        self._fanout_task.cancel()
        await asyncio.gather(self._fanout_task, return_exceptions=True)
        self._fanout_task = None

        self._subs.clear()

    async def _fanout(self) -> None:
        while True:
            (event_type, item) = await self._queue.get()

            for sub in self._subs:
                if sub.event_type and sub.event_type != event_type:
                    continue

                sub.put_latest(item)

            self._queue.task_done()

            self._buffers.setdefault(event_type, deque(maxlen=self._buffer_size)).append(item)
