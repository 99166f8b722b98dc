"""Background polling for unread notifications (badge feed)."""

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from pipeline_board.connectors.base import DealSource, DealSourceError
from pipeline_board.models.notification import Notification
from pipeline_board.models.settings import DEFAULT_POLL_INTERVAL

logger = logging.getLogger(__name__)

NotificationCallback = Callable[[tuple[Notification, ...]], None]


class NotificationFeed(ABC):
    """
    What the board needs from a notification transport. Polling is one
    implementation; a push/streaming transport can replace it unchanged.
    """

    @property
    @abstractmethod
    def unread(self) -> tuple[Notification, ...]:
        pass

    @abstractmethod
    def subscribe(self, callback: NotificationCallback) -> Callable[[], None]:
        """Register for unread-list changes; returns an unsubscribe callable."""
        pass

    @abstractmethod
    async def mark_read(self, ids: list[str]) -> None:
        pass

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    @property
    def badge_count(self) -> int:
        return len(self.unread)

    async def mark_all_read(self) -> None:
        ids = [n.id for n in self.unread]
        if ids:
            await self.mark_read(ids)

    async def acknowledge(self, notification: Notification) -> Optional[str]:
        """Mark one notification read; returns the deal id to navigate to."""
        await self.mark_read([notification.id])
        return notification.deal_id


class NotificationPoller(NotificationFeed):
    """
    Fixed-interval fetch of pending notifications.

    A tick is skipped while the previous fetch is still outstanding.
    Failures are logged and dropped; the next tick is the only retry.
    Mark-read removes entries locally before the request resolves and
    never puts them back.
    """

    def __init__(self, source: DealSource, interval: float = DEFAULT_POLL_INTERVAL):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._source = source
        self._interval = interval
        self._unread: tuple[Notification, ...] = ()
        self._acknowledged: set[str] = set()
        self._callbacks: list[NotificationCallback] = []
        self._loop_task: Optional[asyncio.Task] = None
        self._inflight: Optional[asyncio.Task] = None
        self._stopped = False

    @property
    def unread(self) -> tuple[Notification, ...]:
        return self._unread

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def subscribe(self, callback: NotificationCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def _unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _unsubscribe

    async def start(self) -> None:
        """Begin polling: one fetch now, then every interval."""
        if self.running:
            return
        self._stopped = False
        self._loop_task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the schedule. An outstanding fetch is left to finish but its result is dropped."""
        self._stopped = True
        task, self._loop_task = self._loop_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def tick(self) -> bool:
        """Start a fetch unless one is outstanding. Returns True if a fetch started."""
        if self._inflight is not None and not self._inflight.done():
            logger.debug("Notification poll skipped: previous fetch still outstanding")
            return False
        self._inflight = asyncio.create_task(self.poll_once())
        self._inflight.add_done_callback(self._collect)
        return True

    async def poll_once(self) -> None:
        try:
            fetched = await self._source.fetch_pending_notifications()
        except DealSourceError as e:
            logger.warning("Notification poll failed: %s", e)
            return
        if self._stopped:
            logger.debug("Dropping notification poll result after stop")
            return
        fetched_ids = {n.id for n in fetched}
        # Server has caught up with ids it no longer returns.
        self._acknowledged &= fetched_ids
        self._publish(tuple(n for n in fetched if n.id not in self._acknowledged))

    async def mark_read(self, ids: list[str]) -> None:
        read = set(ids)
        if not read:
            return
        self._acknowledged |= read
        self._publish(tuple(n for n in self._unread if n.id not in read))
        try:
            await self._source.mark_notifications_read(list(ids))
        except DealSourceError as e:
            logger.warning("Mark-read failed for %d notification(s): %s", len(read), e)

    def _collect(self, task: asyncio.Task) -> None:
        """Retrieve the outcome of a finished poll so crashes are logged, not lost."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Notification poll crashed: %s", exc, exc_info=exc)

    async def _run(self) -> None:
        while True:
            self.tick()
            await asyncio.sleep(self._interval)

    def _publish(self, unread: tuple[Notification, ...]) -> None:
        if unread == self._unread:
            return
        self._unread = unread
        for callback in list(self._callbacks):
            callback(unread)
