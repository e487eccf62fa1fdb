"""Public pages, sign-in/out, onboarding and invitation acceptance"""

import logging
from urllib.parse import urlencode
from typing import Annotated, Optional

from fastapi import APIRouter, Form, Query as QueryParam, Request
from fastapi.responses import RedirectResponse

from src.api.dependencies import (
    AuthServiceDep,
    OptionalUserDep,
    OrganizationServiceDep,
    UserDep,
    clear_session,
    store_session,
)
from src.api.redirects import (
    HOME_PATH,
    LOGIN_PATH,
    ONBOARDING_PATH,
    login_url,
    safe_redirect_path,
)
from src.api.rendering import render
from src.api.toasts import push_toast
from src.services import AuthError, BackendError

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


@router.get("/")
async def landing(request: Request, user: OptionalUserDep):
    """Marketing page; signed-in agents go straight to the dashboard"""
    if user is not None:
        return _redirect(HOME_PATH)
    return render(request, "landing.html")


@router.get("/login")
async def login_page(
    request: Request,
    user: OptionalUserDep,
    redirect_path: Optional[str] = None,
):
    if user is not None:
        return _redirect(HOME_PATH)
    return render(request, "login.html", {"redirect_path": redirect_path or "", "email": ""})


@router.post("/login")
async def login(
    request: Request,
    auth: AuthServiceDep,
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    redirect_path: Annotated[str, Form()] = "",
):
    context = {"redirect_path": redirect_path, "email": email}
    if not email.strip() or not password:
        push_toast(request, "error", "Email and password are required.")
        return render(request, "login.html", context)

    try:
        session = await auth.sign_in_with_password(email.strip(), password)
    except AuthError as e:
        push_toast(request, "error", e.message)
        return render(request, "login.html", context)

    store_session(request, session)
    return _redirect(safe_redirect_path(redirect_path))


@router.get("/signup")
async def signup_page(request: Request, user: OptionalUserDep):
    if user is not None:
        return _redirect(HOME_PATH)
    return render(request, "signup.html", {"email": "", "full_name": ""})


@router.post("/signup")
async def signup(
    request: Request,
    auth: AuthServiceDep,
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    full_name: Annotated[str, Form()] = "",
):
    context = {"email": email, "full_name": full_name}
    if not email.strip() or not password:
        push_toast(request, "error", "Email and password are required.")
        return render(request, "signup.html", context)

    try:
        session = await auth.sign_up(email.strip(), password, full_name.strip() or None)
    except AuthError as e:
        push_toast(request, "error", e.message)
        return render(request, "signup.html", context)

    if session is None:
        push_toast(request, "info", "Check your email to confirm your account, then sign in.")
        return _redirect(LOGIN_PATH)

    store_session(request, session)
    return _redirect(ONBOARDING_PATH)


@router.post("/logout")
async def logout(request: Request, user: OptionalUserDep, auth: AuthServiceDep):
    if user is not None:
        try:
            await auth.sign_out(user.access_token)
        except AuthError as e:
            push_toast(request, "error", f"Logout failed: {e.message}")
            return _redirect(HOME_PATH)

    clear_session(request)
    push_toast(request, "success", "You have been logged out.")
    return _redirect(LOGIN_PATH)


@router.get("/onboarding/create-organization")
async def create_organization_page(request: Request, user: UserDep, auth: AuthServiceDep):
    try:
        profile = await auth.get_profile(user.access_token, user.user.id, "organization_id")
    except AuthError as e:
        logger.error(f"Profile lookup failed during onboarding: {e.message}")
        clear_session(request)
        push_toast(request, "error", "Error checking user status. Please try logging in again.")
        return _redirect(LOGIN_PATH)

    if profile is not None and profile.has_organization:
        push_toast(request, "info", "You already belong to an organization.")
        return _redirect("/")

    return render(request, "onboarding.html", {"organization_name": ""}, user=user)


@router.post("/onboarding/create-organization")
async def create_organization(
    request: Request,
    user: UserDep,
    organizations: OrganizationServiceDep,
    organization_name: Annotated[str, Form()] = "",
):
    try:
        organization = await organizations.create_organization(user.access_token, organization_name)
    except (ValueError, BackendError) as e:
        message = e.message if isinstance(e, BackendError) else str(e)
        push_toast(request, "error", message)
        return render(request, "onboarding.html", {"organization_name": organization_name}, user=user)

    push_toast(request, "success", f'Organization "{organization.name}" created successfully!')
    return _redirect("/")


@router.get("/accept-invitation")
async def accept_invitation(
    request: Request,
    user: OptionalUserDep,
    organizations: OrganizationServiceDep,
    token: Optional[str] = QueryParam(None),
):
    if not token:
        return render(
            request,
            "accept_invitation.html",
            {"status": "error", "message": "Invitation token is missing or invalid."},
        )

    if user is None:
        return _redirect(login_url(f"/accept-invitation?{urlencode({'token': token})}"))

    try:
        result = await organizations.accept_invitation(user.access_token, token)
    except BackendError as e:
        push_toast(request, "error", e.message or "Could not accept invitation.")
        return render(
            request,
            "accept_invitation.html",
            {"status": "error", "message": e.message},
            user=user,
        )

    push_toast(request, "success", result.message or "Invitation accepted successfully!")
    return _redirect(HOME_PATH)
