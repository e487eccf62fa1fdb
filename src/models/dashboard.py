"""Aggregate statistics shown on the overview page"""

import datetime as dt
from typing import Dict, List

from pydantic import Field

from .base import BackendRecord, QueryStatus


class DashboardStats(BackendRecord):
    total_queries: int = 0
    new_queries: int = 0
    agent_replied_queries: int = 0
    customer_reply_queries: int = 0
    closed_queries: int = 0

    def status_breakdown(self) -> Dict[str, int]:
        """Counts per query status, skipping statuses with no queries."""
        counts = {
            QueryStatus.NEW.value: self.new_queries,
            QueryStatus.CUSTOMER_REPLY.value: self.customer_reply_queries,
            QueryStatus.AGENT_REPLIED.value: self.agent_replied_queries,
            QueryStatus.CLOSED.value: self.closed_queries,
        }
        return {status: count for status, count in counts.items() if count > 0}


class QueryVolumePoint(BackendRecord):
    date: dt.date
    query_count: int = 0

    @property
    def weekday_label(self) -> str:
        """Short English weekday name, e.g. 'Mon'."""
        return self.date.strftime("%a")


class QueryVolume(BackendRecord):
    data: List[QueryVolumePoint] = Field(default_factory=list)
    period_days: int = 7

    @property
    def peak(self) -> int:
        return max((point.query_count for point in self.data), default=0)


class DashboardOverview(BackendRecord):
    """Everything the overview page renders"""

    stats: DashboardStats
    volume: QueryVolume
