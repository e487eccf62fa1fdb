"""Clients and services for the auth service and the backend API"""

from .errors import DashboardError, AuthError, BackendError
from .backend_client import BackendClient
from .auth_service import AuthService
from .inbox_service import InboxService
from .knowledge_base_service import KnowledgeBaseService
from .organization_service import OrganizationService
from .dashboard_service import DashboardService
from .settings_service import SettingsService

__all__ = [
    'DashboardError',
    'AuthError',
    'BackendError',
    'BackendClient',
    'AuthService',
    'InboxService',
    'KnowledgeBaseService',
    'OrganizationService',
    'DashboardService',
    'SettingsService'
]
