"""Redirect helpers shared by dependencies and routes"""

from typing import Optional
from urllib.parse import urlencode

from starlette.requests import Request

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard/overview"
ONBOARDING_PATH = "/onboarding/create-organization"


class RedirectRequired(Exception):
    """Raised from a dependency to send the browser elsewhere (303)."""

    def __init__(self, url: str):
        super().__init__(url)
        self.url = url


def safe_redirect_path(path: Optional[str], default: str = HOME_PATH) -> str:
    """Only local absolute paths are followed after login; anything else goes to default."""
    if not path or not path.startswith("/") or path.startswith("//") or "\\" in path:
        return default
    return path


def login_url(redirect_path: Optional[str] = None) -> str:
    if not redirect_path:
        return LOGIN_PATH
    return f"{LOGIN_PATH}?{urlencode({'redirect_path': redirect_path})}"


def current_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path
