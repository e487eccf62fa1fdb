"""Customer query, message thread and AI draft models"""

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from .base import BackendRecord, QueryStatus, SenderType, initials_from_name

NO_BADGE_SOURCES = {"no_kb_content"}

# Backend sources that mean retrieval produced nothing useful
LIMITED_INFO_SOURCES = {"tfidf_retrieval_no_match", "tfidf_retrieval_failed", "tfidf_failed"}

SOURCE_LABELS = {
    "openai_rag": "OpenAI RAG",
    "openai_rag_no_context": "OpenAI (No Context)",
    "tfidf_retrieval": "Knowledge Base (TF-IDF)",
}


class CustomerQuery(BackendRecord):
    """A customer-initiated conversation thread"""

    id: str
    organization_id: str
    channel: str
    sender_identifier: str
    sender_name: Optional[str] = None
    subject: Optional[str] = None
    body_text: str
    status: str = QueryStatus.NEW.value
    received_at: datetime
    updated_at: Optional[datetime] = None
    original_created_at: Optional[datetime] = None
    ai_draft_response: Optional[str] = None
    ai_response_source: Optional[str] = None
    ai_retrieved_context_count: Optional[int] = None

    @property
    def display_name(self) -> str:
        return self.sender_name or self.sender_identifier

    @property
    def display_subject(self) -> str:
        return self.subject or "No Subject"

    @property
    def awaiting_agent(self) -> bool:
        """True while the customer is waiting on us."""
        return self.status in (QueryStatus.NEW.value, QueryStatus.CUSTOMER_REPLY.value)

    @property
    def initials(self) -> str:
        """Avatar initials from the sender name, falling back to the email local part."""
        initials = initials_from_name(self.sender_name)
        if initials:
            return initials
        if self.sender_identifier:
            local_part = self.sender_identifier.split("@")[0]
            if "." in local_part:
                parts = [p for p in local_part.split(".") if p]
                if parts:
                    last = parts[-1][0] if len(parts) > 1 else ""
                    return f"{parts[0][0]}{last}".upper()
            if len(local_part) >= 2:
                return local_part[:2].upper()
            if local_part:
                return local_part[:1].upper()
        return "??"


class QueryMessage(BackendRecord):
    """One message in a query thread"""

    id: str
    customer_query_id: str
    organization_id: str
    sender_type: str
    sender_identifier: Optional[str] = None
    body_text: str
    message_id_header: Optional[str] = None
    in_reply_to_header: Optional[str] = None
    created_at: datetime

    @property
    def from_customer(self) -> bool:
        return self.sender_type == SenderType.CUSTOMER.value

    @property
    def from_agent(self) -> bool:
        return self.sender_type == SenderType.AGENT.value


class DraftResponse(BackendRecord):
    """AI draft returned by the generate-response endpoint"""

    generated_response: str = ""
    retrieved_context_count: Optional[int] = None
    source: Optional[str] = None

    @field_validator("generated_response", mode="before")
    @classmethod
    def _null_draft_is_empty(cls, value):
        return "" if value is None else value

    @property
    def source_label(self) -> Optional[str]:
        """Badge label for the draft source, None when no badge is shown."""
        if not self.source or self.source in NO_BADGE_SOURCES or not self.generated_response:
            return None
        if self.source in LIMITED_INFO_SOURCES:
            return "KB Search (Limited Info)"
        return SOURCE_LABELS.get(self.source, "AI Generated")

    @property
    def shows_context_count(self) -> bool:
        if not self.source or not self.retrieved_context_count:
            return False
        return ("rag" in self.source or "tfidf_retrieval" in self.source) and self.retrieved_context_count > 0

    @property
    def is_empty_knowledge_base(self) -> bool:
        return self.source == "no_kb_content"

    @property
    def is_confident(self) -> bool:
        """Whether a success notification is warranted for this draft."""
        return self.source not in ("no_kb_content", "tfidf_failed", "openai_rag_no_context")


class Customer(BackendRecord):
    """Aggregated view of one customer across queries"""

    email: str
    name: Optional[str] = None
    total_queries: int = 0
    last_contact: Optional[datetime] = None

    @property
    def initials(self) -> str:
        initials = initials_from_name(self.name)
        if initials:
            return initials
        if self.email:
            return self.email[:2].upper()
        return "??"

    def matches(self, term: str) -> bool:
        """Case-insensitive match of term against name or email."""
        term = term.lower()
        return term in (self.name or "").lower() or term in self.email.lower()

