"""Dashboard page routes"""

import logging
from typing import Annotated, Any, Dict, List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Form, Query as QueryParam, Request
from fastapi.responses import RedirectResponse

from src.api.dependencies import (
    DashboardServiceDep,
    InboxServiceDep,
    KnowledgeBaseServiceDep,
    MemberDep,
    OrganizationServiceDep,
    SettingsServiceDep,
)
from src.api.redirects import HOME_PATH
from src.api.rendering import render
from src.api.toasts import push_toast
from src.config.settings import get_settings
from src.models import (
    ApiKeyStatus,
    CurrentUser,
    CustomerQuery,
    DraftResponse,
    InvitationRole,
    QueryMessage,
    QueryStatus,
)
from src.services import BackendError, InboxService
from src.services.inbox_service import ALL_STATUSES, draft_source_text, parse_status_filter

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/dashboard")

STATUS_FILTERS = [ALL_STATUSES] + [status.value for status in QueryStatus]


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def _inbox_url(query_id: Optional[str] = None, status: Optional[str] = None) -> str:
    params = {}
    if status and status != ALL_STATUSES:
        params["status"] = status
    if query_id:
        params["query_id"] = query_id
    return f"/dashboard/inbox?{urlencode(params)}" if params else "/dashboard/inbox"


@router.get("")
async def dashboard_root():
    return _redirect(HOME_PATH)


# Overview
@router.get("/overview")
async def overview(request: Request, user: MemberDep, dashboard: DashboardServiceDep):
    """Greeting, status counts and recent query volume"""
    overview_data = None
    error = None
    try:
        overview_data = await dashboard.get_overview(user.access_token, settings.query_volume_days)
    except BackendError as e:
        error = e.message or "An unknown error occurred loading dashboard data."
        push_toast(request, "error", error)

    return render(
        request,
        "overview.html",
        {"overview": overview_data, "error": error},
        user=user,
    )


# Inbox
async def _inbox_context(
    request: Request,
    user: CurrentUser,
    inbox: InboxService,
    status: Optional[str],
    query_id: Optional[str],
) -> Dict[str, Any]:
    status_filter = parse_status_filter(status)
    queries: List[CustomerQuery] = []
    error = None
    try:
        queries = await inbox.list_queries(user.access_token, status_filter)
    except BackendError as e:
        error = e.message
        push_toast(request, "error", f"Could not load queries: {e.message}")

    selected: Optional[CustomerQuery] = None
    messages: List[QueryMessage] = []
    if query_id:
        selected = next((q for q in queries if q.id == query_id), None)
        try:
            if selected is None:
                selected = await inbox.get_query(user.access_token, query_id)
            messages = await inbox.list_messages(user.access_token, query_id)
        except BackendError as e:
            push_toast(request, "error", f"Could not load messages: {e.message}")

    return {
        "queries": queries,
        "error": error,
        "selected": selected,
        "messages": messages,
        "status": status_filter.value if status_filter else ALL_STATUSES,
        "status_filters": STATUS_FILTERS,
        "draft": None,
        "reply_text": "",
    }


@router.get("/inbox")
async def inbox_page(
    request: Request,
    user: MemberDep,
    inbox: InboxServiceDep,
    status: Optional[str] = QueryParam(None),
    query_id: Optional[str] = QueryParam(None),
):
    context = await _inbox_context(request, user, inbox, status, query_id)
    return render(request, "inbox.html", context, user=user)


@router.post("/inbox/{query_id}/draft")
async def generate_draft(
    request: Request,
    query_id: str,
    user: MemberDep,
    inbox: InboxServiceDep,
    status: Annotated[str, Form()] = ALL_STATUSES,
):
    """Ask the backend for an AI draft and pre-fill the reply box with it"""
    context = await _inbox_context(request, user, inbox, status, query_id)
    if context["selected"] is None:
        push_toast(request, "error", "Failed to Generate Draft", "Query could not be loaded.")
        return render(request, "inbox.html", context, user=user)

    text = draft_source_text(context["selected"], context["messages"])
    try:
        draft = await inbox.generate_draft(user.access_token, text)
    except BackendError as e:
        push_toast(request, "error", "Failed to Generate Draft", e.message)
        context["draft"] = DraftResponse(
            generated_response=f"Failed to load draft. Error: {e.message}",
            retrieved_context_count=0,
        )
        return render(request, "inbox.html", context, user=user)

    if draft.is_empty_knowledge_base:
        push_toast(
            request,
            "info",
            "Knowledge base is empty. Please add content.",
            "The AI needs information to generate relevant responses.",
        )
    elif draft.is_confident:
        push_toast(request, "success", "AI Draft Generated Successfully!")

    context["draft"] = draft
    context["reply_text"] = draft.generated_response
    return render(request, "inbox.html", context, user=user)


@router.post("/inbox/{query_id}/reply")
async def send_reply(
    request: Request,
    query_id: str,
    user: MemberDep,
    inbox: InboxServiceDep,
    reply_text: Annotated[str, Form()] = "",
    status: Annotated[str, Form()] = ALL_STATUSES,
):
    try:
        await inbox.send_agent_reply(user.access_token, query_id, reply_text)
    except ValueError as e:
        push_toast(request, "error", str(e))
        return _redirect(_inbox_url(query_id, status))
    except BackendError as e:
        push_toast(request, "error", f"Failed to send reply: {e.message}")
        context = await _inbox_context(request, user, inbox, status, query_id)
        context["reply_text"] = reply_text
        return render(request, "inbox.html", context, user=user)

    push_toast(request, "success", "Reply sent and saved!")
    return _redirect(_inbox_url(query_id, status))


# Customers
@router.get("/customers")
async def customers_page(
    request: Request,
    user: MemberDep,
    inbox: InboxServiceDep,
    search: str = QueryParam(""),
):
    customers = []
    try:
        customers = await inbox.list_customers(user.access_token, search.strip() or None)
    except BackendError as e:
        push_toast(request, "error", e.message or "An unknown error occurred.")

    return render(request, "customers.html", {"customers": customers, "search": search}, user=user)


# Knowledge base
async def _render_knowledge_base(
    request: Request,
    user: CurrentUser,
    knowledge_base: KnowledgeBaseServiceDep,
    new_content: str = "",
):
    entries = []
    try:
        entries = await knowledge_base.list_entries(user.access_token)
    except BackendError as e:
        push_toast(request, "error", e.message or "An error occurred while fetching entries.")

    return render(
        request,
        "knowledge_base.html",
        {"entries": entries, "new_content": new_content},
        user=user,
    )


@router.get("/knowledge-base")
async def knowledge_base_page(request: Request, user: MemberDep, knowledge_base: KnowledgeBaseServiceDep):
    return await _render_knowledge_base(request, user, knowledge_base)


@router.post("/knowledge-base")
async def ingest_content(
    request: Request,
    user: MemberDep,
    knowledge_base: KnowledgeBaseServiceDep,
    content: Annotated[str, Form()] = "",
):
    try:
        await knowledge_base.ingest(user.access_token, content)
    except ValueError as e:
        push_toast(request, "error", str(e))
        return await _render_knowledge_base(request, user, knowledge_base, content)
    except BackendError as e:
        if not e.is_quota_error:
            push_toast(request, "error", e.message or "An error occurred while ingesting content.")
            return await _render_knowledge_base(request, user, knowledge_base, content)
        # the backend keeps the content even when embedding ran out of quota
        push_toast(
            request,
            "warning",
            "Failed to process content with AI due to OpenAI quota issues. "
            "Content saved without AI embedding.",
        )
    else:
        push_toast(request, "success", "Content ingested successfully!")

    return _redirect("/dashboard/knowledge-base")


@router.post("/knowledge-base/{entry_id}/delete")
async def delete_entry(
    request: Request,
    entry_id: str,
    user: MemberDep,
    knowledge_base: KnowledgeBaseServiceDep,
):
    try:
        await knowledge_base.delete_entry(user.access_token, entry_id)
    except BackendError as e:
        push_toast(request, "error", e.message or "An error occurred while deleting the entry.")
    else:
        push_toast(request, "success", "Entry deleted successfully!")

    return _redirect("/dashboard/knowledge-base")


# Settings
@router.get("/settings")
async def settings_page(request: Request, user: MemberDep, settings_service: SettingsServiceDep):
    key_status = ApiKeyStatus()
    try:
        key_status = await settings_service.get_api_key_status(user.access_token)
    except BackendError as e:
        logger.warning(f"API key status unavailable: {e.message}")

    return render(request, "settings.html", {"key_status": key_status}, user=user)


@router.post("/settings/api-key")
async def save_api_key(
    request: Request,
    user: MemberDep,
    settings_service: SettingsServiceDep,
    api_key: Annotated[str, Form()] = "",
    provider: Annotated[str, Form()] = "openai",
):
    try:
        await settings_service.save_api_key(user.access_token, provider, api_key)
    except ValueError as e:
        push_toast(request, "error", str(e))
    except BackendError as e:
        push_toast(request, "error", e.message or "An error occurred while saving the API key.")
    else:
        push_toast(request, "success", "OpenAI API Key saved successfully!")

    return _redirect("/dashboard/settings")


# Team management
@router.get("/settings/team")
async def team_page(request: Request, user: MemberDep, organizations: OrganizationServiceDep):
    members = []
    invitations = []
    try:
        members = await organizations.list_members(user.access_token)
    except BackendError as e:
        push_toast(request, "error", e.message or "Error fetching team members.")
    try:
        invitations = await organizations.list_pending_invitations(user.access_token)
    except BackendError as e:
        push_toast(request, "error", e.message or "Error fetching pending invitations.")

    return render(
        request,
        "team.html",
        {
            "members": members,
            "invitations": invitations,
            "roles": [role.value for role in InvitationRole],
        },
        user=user,
    )


@router.post("/settings/team/invitations")
async def invite_member(
    request: Request,
    user: MemberDep,
    organizations: OrganizationServiceDep,
    email: Annotated[str, Form()] = "",
    role: Annotated[str, Form()] = InvitationRole.AGENT.value,
):
    try:
        result = await organizations.invite(user.access_token, email, role)
    except ValueError as e:
        push_toast(request, "error", str(e))
    except BackendError as e:
        push_toast(request, "error", e.message or "Error sending invitation.")
    else:
        push_toast(request, "success", result.message or f"Invitation sent successfully to {email.strip()}!")

    return _redirect("/dashboard/settings/team")


@router.post("/settings/team/invitations/{invitation_id}/revoke")
async def revoke_invitation(
    request: Request,
    invitation_id: str,
    user: MemberDep,
    organizations: OrganizationServiceDep,
):
    try:
        result = await organizations.revoke_invitation(user.access_token, invitation_id)
    except BackendError as e:
        push_toast(request, "error", e.message or "Error revoking invitation.")
    else:
        push_toast(request, "success", result.message or "Invitation revoked successfully!")

    return _redirect("/dashboard/settings/team")
