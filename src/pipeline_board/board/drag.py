"""Optimistic stage moves: mutate locally, confirm remotely, roll back on failure."""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pipeline_board.connectors.base import DealSource, DealSourceError
from pipeline_board.models.deal import Stage
from pipeline_board.store.deal_cache import DealCache

logger = logging.getLogger(__name__)

ROLLBACK_MESSAGE = "Failed to update opportunity stage. Reverting changes."

Reconciler = Callable[[], Awaitable[Any]]


class DragResult(BaseModel):
    """What a finished drag gesture reports. destination_stage is None when dropped outside."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    deal_id: str
    source_stage: Stage
    source_index: int = 0
    destination_stage: Optional[Stage] = None
    destination_index: Optional[int] = None


class DragState(str, Enum):
    IDLE = "idle"
    COMMITTING = "committing"


class DragOutcome(str, Enum):
    NOOP = "noop"
    REJECTED = "rejected"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


def is_noop(result: DragResult) -> bool:
    """Dropped nowhere, or dropped back onto its own slot."""
    if result.destination_stage is None:
        return True
    return (
        result.source_stage == result.destination_stage
        and result.source_index == result.destination_index
    )


class DragMoveController:
    """
    Runs the Idle -> Committing -> (Confirmed | RolledBack) -> Idle protocol.

    Only one move commits at a time; a drag arriving mid-commit is rejected
    untouched. Rollback restores the whole pre-move snapshot, not just the
    moved field. Failures are reported once and never retried.
    """

    def __init__(
        self,
        cache: DealCache,
        source: DealSource,
        reconcile: Optional[Reconciler] = None,
    ):
        self._cache = cache
        self._source = source
        self._reconcile = reconcile
        self._state = DragState.IDLE
        self._generation = 0
        self.last_outcome: Optional[DragOutcome] = None
        self.last_error: Optional[str] = None

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def is_committing(self) -> bool:
        return self._state is DragState.COMMITTING

    @property
    def generation(self) -> int:
        """Bumped each time a move starts committing."""
        return self._generation

    async def on_drag_end(self, result: DragResult) -> DragOutcome:
        outcome = await self._run(result)
        self.last_outcome = outcome
        return outcome

    async def _run(self, result: DragResult) -> DragOutcome:
        if is_noop(result):
            logger.debug("Drag of %s is a no-op", result.deal_id)
            return DragOutcome.NOOP
        if self.is_committing:
            logger.warning("Drag of %s rejected: another move is still committing", result.deal_id)
            return DragOutcome.REJECTED
        if self._cache.get(result.deal_id) is None:
            logger.debug("Drag of unknown deal %s ignored", result.deal_id)
            return DragOutcome.NOOP

        destination = Stage(result.destination_stage)
        snapshot = self._cache.snapshot()
        self._cache.set_stage(result.deal_id, destination)
        self._state = DragState.COMMITTING
        self._generation += 1
        try:
            await self._source.update_deal_stage(result.deal_id, destination)
        except DealSourceError as e:
            self._cache.restore(snapshot)
            self.last_error = ROLLBACK_MESSAGE
            logger.warning(
                "Stage update %s -> %s failed, rolled back: %s",
                result.deal_id,
                destination.value,
                e,
            )
            return DragOutcome.ROLLED_BACK
        except BaseException:
            self._cache.restore(snapshot)
            raise
        finally:
            self._state = DragState.IDLE

        self.last_error = None
        logger.info("Moved deal %s to %s", result.deal_id, destination.value)
        if self._reconcile is not None:
            await self._reconcile()
        return DragOutcome.CONFIRMED
