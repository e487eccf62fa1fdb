"""Aggregate statistics for the overview page"""

import asyncio

from src.models.dashboard import DashboardOverview, DashboardStats, QueryVolume
from src.services.backend_client import BackendClient, parse_record


class DashboardService:
    def __init__(self, client: BackendClient):
        self.client = client

    async def get_stats(self, token: str) -> DashboardStats:
        data = await self.client.get(
            "/api/dashboard/stats",
            token,
            fallback_detail="Failed to fetch dashboard stats",
        )
        return parse_record(DashboardStats, data or {}, "Failed to fetch dashboard stats")

    async def get_query_volume(self, token: str, days: int = 7) -> QueryVolume:
        data = await self.client.get(
            "/api/dashboard/query-volume",
            token,
            params={"days": days},
            fallback_detail="Failed to fetch query volume",
        )
        return parse_record(QueryVolume, data or {"period_days": days}, "Failed to fetch query volume")

    async def get_overview(self, token: str, days: int = 7) -> DashboardOverview:
        """Stats and volume are fetched concurrently; either failure fails the overview."""
        stats, volume = await asyncio.gather(
            self.get_stats(token),
            self.get_query_volume(token, days),
        )
        return DashboardOverview(stats=stats, volume=volume)
