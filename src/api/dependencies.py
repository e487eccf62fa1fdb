"""API dependency injection: collaborator clients, services and the session guard"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request

from src.api.redirects import (
    LOGIN_PATH,
    ONBOARDING_PATH,
    RedirectRequired,
    current_path,
    login_url,
)
from src.api.toasts import push_toast
from src.models.auth import AuthSession, CurrentUser
from src.services import (
    AuthError,
    AuthService,
    BackendClient,
    DashboardService,
    InboxService,
    KnowledgeBaseService,
    OrganizationService,
    SettingsService,
)

logger = logging.getLogger(__name__)

SESSION_KEY = "auth"

# Shared clients, created lazily
_auth_service = None
_backend_client = None


async def get_auth_service() -> AuthService:
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service


async def get_backend_client() -> BackendClient:
    global _backend_client
    if _backend_client is None:
        _backend_client = BackendClient()
    return _backend_client


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
BackendClientDep = Annotated[BackendClient, Depends(get_backend_client)]


async def get_inbox_service(client: BackendClientDep) -> InboxService:
    return InboxService(client)


async def get_knowledge_base_service(client: BackendClientDep) -> KnowledgeBaseService:
    return KnowledgeBaseService(client)


async def get_organization_service(client: BackendClientDep) -> OrganizationService:
    return OrganizationService(client)


async def get_dashboard_service(client: BackendClientDep) -> DashboardService:
    return DashboardService(client)


async def get_settings_service(client: BackendClientDep) -> SettingsService:
    return SettingsService(client)


InboxServiceDep = Annotated[InboxService, Depends(get_inbox_service)]
KnowledgeBaseServiceDep = Annotated[KnowledgeBaseService, Depends(get_knowledge_base_service)]
OrganizationServiceDep = Annotated[OrganizationService, Depends(get_organization_service)]
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
SettingsServiceDep = Annotated[SettingsService, Depends(get_settings_service)]


def store_session(request: Request, session: AuthSession) -> None:
    """Keep the tokens of a fresh auth session in the signed session cookie."""
    request.session[SESSION_KEY] = {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_at": session.expires_at,
        "user_id": session.user.id,
        "email": session.user.email,
    }


def clear_session(request: Request) -> None:
    request.session.pop(SESSION_KEY, None)


async def get_optional_user(request: Request, auth: AuthServiceDep) -> Optional[CurrentUser]:
    """Resolve the signed-in agent, refreshing an expired access token once."""
    stored = request.session.get(SESSION_KEY)
    if not stored or not stored.get("access_token"):
        return None

    access_token = stored["access_token"]
    try:
        user = await auth.get_user(access_token)
        return CurrentUser(user=user, access_token=access_token)
    except AuthError as e:
        if e.status_code not in (401, 403):
            logger.error(f"Session check failed: {e.message}")
            return None

    refresh_token = stored.get("refresh_token")
    if not refresh_token:
        clear_session(request)
        return None
    try:
        session = await auth.refresh_session(refresh_token)
    except AuthError as e:
        logger.info(f"Session refresh rejected: {e.message}")
        clear_session(request)
        return None

    store_session(request, session)
    return CurrentUser(user=session.user, access_token=session.access_token)


OptionalUserDep = Annotated[Optional[CurrentUser], Depends(get_optional_user)]


async def require_user(request: Request, user: OptionalUserDep) -> CurrentUser:
    """Protected pages send anonymous visitors to the login page, remembering where they were."""
    if user is None:
        raise RedirectRequired(login_url(current_path(request)))
    return user


UserDep = Annotated[CurrentUser, Depends(require_user)]


async def require_organization(request: Request, user: UserDep, auth: AuthServiceDep) -> CurrentUser:
    """Dashboard pages additionally need a profile that belongs to an organization."""
    try:
        profile = await auth.get_profile(user.access_token, user.user.id)
    except AuthError as e:
        logger.error(f"Profile lookup failed for {user.user.id}: {e.message}")
        # a signed-in agent on /login is sent back here, so drop the session
        clear_session(request)
        raise RedirectRequired(LOGIN_PATH)

    if profile is None or not profile.has_organization:
        push_toast(request, "info", "Please complete your organization setup.")
        raise RedirectRequired(ONBOARDING_PATH)

    user.profile = profile
    return user


MemberDep = Annotated[CurrentUser, Depends(require_organization)]


async def cleanup_services():
    """Close the shared HTTP clients"""
    global _auth_service, _backend_client

    logger.info("Closing collaborator clients")

    if _auth_service is not None:
        await _auth_service.close()
    if _backend_client is not None:
        await _backend_client.close()

    _auth_service = None
    _backend_client = None
