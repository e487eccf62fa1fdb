"""
Organization, membership and invitation models
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from .base import BackendRecord


class InvitationRole(str, Enum):
    """Roles an invitation can grant"""
    AGENT = "agent"
    ADMIN = "admin"


class Organization(BackendRecord):
    """A tenant grouping users, queries and knowledge base content"""

    id: str
    name: str
    created_at: Optional[datetime] = None


class OrganizationMember(BackendRecord):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    joined_at: Optional[datetime] = None


class PendingInvitation(BackendRecord):
    id: str
    email: str
    role: str
    status: str
    created_at: datetime
    expires_at: datetime
    invited_by_user_id: Optional[str] = None


class InvitationResult(BackendRecord):
    """Acknowledgement body returned by invitation endpoints"""

    message: Optional[str] = None
