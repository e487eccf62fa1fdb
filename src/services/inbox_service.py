"""Customer queries, their message threads, AI drafts and replies"""

import logging
from typing import List, Optional, Sequence

from src.models.base import QueryStatus
from src.models.query import Customer, CustomerQuery, DraftResponse, QueryMessage
from src.services.backend_client import BackendClient, parse_record, parse_records

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


def parse_status_filter(value: Optional[str]) -> Optional[QueryStatus]:
    """Map the inbox filter value to a status; 'all', blanks and unknown values mean no filter."""
    if not value or value == ALL_STATUSES:
        return None
    try:
        return QueryStatus(value)
    except ValueError:
        logger.warning(f"Ignoring unknown status filter: {value}")
        return None


def draft_source_text(query: CustomerQuery, messages: Sequence[QueryMessage]) -> str:
    """Text the AI should answer: the latest customer message, else the original query body."""
    customer_messages = [m for m in messages if m.from_customer]
    if customer_messages and customer_messages[-1].body_text:
        return customer_messages[-1].body_text
    return query.body_text


class InboxService:
    """Operations behind the inbox and customers pages"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def list_queries(self, token: str, status: Optional[QueryStatus] = None) -> List[CustomerQuery]:
        params = {"status": status.value} if status else None
        data = await self.client.get(
            "/api/customer-queries",
            token,
            params=params,
            fallback_detail="Failed to fetch customer queries",
        )
        return parse_records(CustomerQuery, data, "Failed to fetch customer queries")

    async def get_query(self, token: str, query_id: str) -> CustomerQuery:
        data = await self.client.get(
            "/api/customer-queries/{query_id}",
            token,
            path_params={"query_id": query_id},
            fallback_detail="Failed to fetch query",
        )
        return parse_record(CustomerQuery, data, "Failed to fetch query")

    async def list_messages(self, token: str, query_id: str) -> List[QueryMessage]:
        data = await self.client.get(
            "/api/customer-queries/{query_id}/messages",
            token,
            path_params={"query_id": query_id},
            fallback_detail="Failed to fetch messages",
        )
        return parse_records(QueryMessage, data, "Failed to fetch messages")

    async def generate_draft(self, token: str, text: str) -> DraftResponse:
        data = await self.client.post(
            "/api/generate-response",
            token,
            json={"text": text},
            fallback_detail="Server responded with an error",
        )
        draft = parse_record(DraftResponse, data or {}, "Server responded with an error")
        logger.info(
            f"Draft generated from {draft.source or 'unknown source'}",
            extra={"source": draft.source, "context_count": draft.retrieved_context_count},
        )
        return draft

    async def send_agent_reply(self, token: str, query_id: str, reply_text: str) -> None:
        if not reply_text or not reply_text.strip():
            raise ValueError("Reply text cannot be empty.")
        await self.client.post(
            "/api/customer-queries/{query_id}/agent-reply",
            token,
            path_params={"query_id": query_id},
            json={"reply_text": reply_text},
            fallback_detail="Failed to send reply",
        )
        logger.info(f"Agent reply sent for query {query_id}")

    async def list_customers(self, token: str, search: Optional[str] = None) -> List[Customer]:
        data = await self.client.get(
            "/api/customers",
            token,
            fallback_detail="Failed to fetch customers.",
        )
        customers = parse_records(Customer, data, "Failed to fetch customers.")
        if search:
            customers = [c for c in customers if c.matches(search)]
        return customers
