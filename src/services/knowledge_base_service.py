"""Knowledge base entries used to ground AI drafts"""

import logging
from typing import List

from src.models.knowledge_base import KnowledgeBaseEntry
from src.services.backend_client import BackendClient, parse_records

logger = logging.getLogger(__name__)


class KnowledgeBaseService:
    def __init__(self, client: BackendClient):
        self.client = client

    async def list_entries(self, token: str) -> List[KnowledgeBaseEntry]:
        data = await self.client.get(
            "/api/knowledge-base",
            token,
            fallback_detail="Failed to fetch knowledge base entries",
        )
        return parse_records(KnowledgeBaseEntry, data, "Failed to fetch knowledge base entries")

    async def ingest(self, token: str, content: str) -> None:
        """Store new content. Embedding happens on the backend."""
        if not content or not content.strip():
            raise ValueError("Content cannot be empty.")
        await self.client.post(
            "/api/knowledge-base/ingest",
            token,
            json={"content": content},
            fallback_detail="Failed to ingest new content",
        )
        logger.info(f"Ingested {len(content)} characters into the knowledge base")

    async def delete_entry(self, token: str, entry_id: str) -> None:
        if not entry_id:
            raise ValueError("Cannot delete entry: ID is missing.")
        await self.client.delete(
            "/api/knowledge-base/{entry_id}",
            token,
            path_params={"entry_id": entry_id},
            fallback_detail="Failed to delete entry",
        )
