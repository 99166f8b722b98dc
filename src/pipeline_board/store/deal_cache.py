"""In-memory working set of deals the board renders from."""

import logging
from typing import Callable, Iterable, Iterator, Optional

from pipeline_board.models.deal import Deal, Stage

logger = logging.getLogger(__name__)

CacheListener = Callable[["DealCache"], None]
Snapshot = tuple[Deal, ...]


class DealCache:
    """
    Ordered, scoped copy of the deal collection.

    Every mutation is a single synchronous swap of the backing tuple, so a
    reader never observes a deal in two stages at once. Mutation is reserved
    for the drag controller and the full-reload path; everything else reads.
    """

    def __init__(self, deals: Optional[Iterable[Deal]] = None):
        self._deals: Snapshot = ()
        self._version = 0
        self._live = True
        self._listeners: list[CacheListener] = []
        if deals is not None:
            self.load(deals)

    @property
    def deals(self) -> Snapshot:
        return self._deals

    @property
    def version(self) -> int:
        """Bumped on every completed mutation."""
        return self._version

    @property
    def live(self) -> bool:
        return self._live

    def __len__(self) -> int:
        return len(self._deals)

    def __iter__(self) -> Iterator[Deal]:
        return iter(self._deals)

    def get(self, deal_id: str) -> Optional[Deal]:
        for deal in self._deals:
            if deal.id == deal_id:
                return deal
        return None

    def ordered(self) -> list[Deal]:
        """All deals by fetch sequence."""
        return sorted(self._deals, key=lambda d: d.sequence)

    def in_stage(self, stage: Stage) -> list[Deal]:
        """Deals in one stage, in fetch order."""
        return [d for d in self.ordered() if d.stage == stage]

    def subscribe(self, listener: CacheListener) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def load(self, deals: Iterable[Deal]) -> None:
        """Replace the whole collection; fetch order becomes the sequence."""
        if not self._live:
            logger.debug("Ignoring load into discarded cache")
            return
        self._commit(
            tuple(
                deal.model_copy(update={"sequence": index})
                for index, deal in enumerate(deals)
            )
        )

    def set_stage(self, deal_id: str, stage: Stage) -> Optional[Stage]:
        """
        Move one deal to a new stage. Returns the previous stage, or None
        (and changes nothing) when the deal is not cached.
        """
        if not self._live:
            logger.debug("Ignoring stage change on discarded cache")
            return None
        for index, deal in enumerate(self._deals):
            if deal.id == deal_id:
                previous = deal.stage
                if previous == stage:
                    return previous
                updated = deal.model_copy(update={"stage": Stage(stage)})
                self._commit(self._deals[:index] + (updated,) + self._deals[index + 1:])
                return previous
        logger.debug("set_stage: deal %s not cached", deal_id)
        return None

    def snapshot(self) -> Snapshot:
        """Current contents; records are immutable so the tuple is a full copy."""
        return self._deals

    def restore(self, snapshot: Snapshot) -> None:
        """Put back a previously captured snapshot verbatim (sequences included)."""
        if not self._live:
            logger.debug("Ignoring restore into discarded cache")
            return
        self._commit(tuple(snapshot))

    def discard(self) -> None:
        """Tear down: drop contents and turn later writes into no-ops."""
        self._deals = ()
        self._live = False
        self._listeners.clear()

    def _commit(self, deals: Snapshot) -> None:
        self._deals = deals
        self._version += 1
        for listener in list(self._listeners):
            listener(self)
