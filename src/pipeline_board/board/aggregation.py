"""Per-stage counts and revenue, recomputed from the cache on demand."""

from typing import Callable, Iterable

from pydantic import BaseModel

from pipeline_board.models.deal import IN_PROGRESS_STAGES, Deal, Stage


class StageBucket(BaseModel):
    """Derived view of one stage; never stored."""

    stage: Stage
    count: int
    revenue: float


class PipelineKpis(BaseModel):
    """KPI strip shown above the columns."""

    total_leads: int = 0
    won_count: int = 0
    in_progress_count: int = 0
    sales_target: float = 0.0
    revenue_generated: float = 0.0
    expected_margin: float = 0.0
    margin_earned: float = 0.0


def count_for(deals: Iterable[Deal], stage: Stage) -> int:
    return sum(1 for d in deals if d.stage == stage)


def revenue_for(deals: Iterable[Deal], stage: Stage) -> float:
    """Summed expected revenue; missing values count as 0."""
    return sum((d.revenue for d in deals if d.stage == stage), 0.0)


def _sum_in(deals: Iterable[Deal], stages: tuple[Stage, ...], field: str) -> float:
    return sum((getattr(d, field) for d in deals if d.stage in stages), 0.0)


def summarize(deals: Iterable[Deal]) -> PipelineKpis:
    """Board KPIs: in-progress is New + Qualified + Proposition."""
    deals = list(deals)
    won = (Stage.WON,)
    return PipelineKpis(
        total_leads=len(deals),
        won_count=count_for(deals, Stage.WON),
        in_progress_count=sum(1 for d in deals if d.stage in IN_PROGRESS_STAGES),
        sales_target=_sum_in(deals, IN_PROGRESS_STAGES, "revenue"),
        revenue_generated=_sum_in(deals, won, "revenue"),
        expected_margin=_sum_in(deals, IN_PROGRESS_STAGES, "margin"),
        margin_earned=_sum_in(deals, won, "margin"),
    )


class StageAggregator:
    """
    Reads whatever deal set the provider returns at call time.
    No caching of results: every call walks the current deals.
    """

    def __init__(self, provider: Callable[[], Iterable[Deal]]):
        self._provider = provider

    def count_for(self, stage: Stage) -> int:
        return count_for(self._provider(), stage)

    def revenue_for(self, stage: Stage) -> float:
        return revenue_for(self._provider(), stage)

    def bucket(self, stage: Stage) -> StageBucket:
        deals = list(self._provider())
        return StageBucket(stage=stage, count=count_for(deals, stage), revenue=revenue_for(deals, stage))

    def buckets(self, stages: Iterable[Stage]) -> list[StageBucket]:
        return [self.bucket(s) for s in stages]

    def kpis(self) -> PipelineKpis:
        return summarize(self._provider())
