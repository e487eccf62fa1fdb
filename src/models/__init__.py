"""Data models for records owned by the auth service and the backend API"""

from .base import BackendRecord, QueryStatus, SenderType, format_date, initials_from_name
from .query import CustomerQuery, QueryMessage, DraftResponse, Customer
from .knowledge_base import KnowledgeBaseEntry
from .organization import (
    InvitationRole,
    InvitationResult,
    Organization,
    OrganizationMember,
    PendingInvitation,
)
from .auth import AuthUser, AuthSession, UserProfile, CurrentUser
from .dashboard import DashboardStats, QueryVolume, QueryVolumePoint, DashboardOverview
from .api_key import ApiKeyStatus, SUPPORTED_PROVIDERS, provider_name

__all__ = [
    "BackendRecord",
    "QueryStatus",
    "SenderType",
    "format_date",
    "initials_from_name",
    "CustomerQuery",
    "QueryMessage",
    "DraftResponse",
    "Customer",
    "KnowledgeBaseEntry",
    "InvitationRole",
    "InvitationResult",
    "Organization",
    "OrganizationMember",
    "PendingInvitation",
    "AuthUser",
    "AuthSession",
    "UserProfile",
    "CurrentUser",
    "DashboardStats",
    "QueryVolume",
    "QueryVolumePoint",
    "DashboardOverview",
    "ApiKeyStatus",
    "SUPPORTED_PROVIDERS",
    "provider_name",
]
