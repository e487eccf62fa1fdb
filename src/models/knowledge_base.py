"""Knowledge base entry model"""

from datetime import datetime
from typing import Optional

from .base import BackendRecord


class KnowledgeBaseEntry(BackendRecord):
    """A block of organization knowledge used to ground AI drafts"""

    id: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None
    organization_id: Optional[str] = None
