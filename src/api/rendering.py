"""Jinja2 page rendering with the dashboard shell context"""

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import Response

from src.api.navigation import BOTTOM_NAV_LINKS, NAV_LINKS, is_active, page_title
from src.api.toasts import pop_toasts
from src.config.settings import get_settings
from src.models.api_key import provider_name
from src.models.base import format_date
from src.models.auth import CurrentUser

settings = get_settings()

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.filters["format_date"] = format_date
templates.env.filters["provider_name"] = provider_name
templates.env.globals["is_active"] = is_active


def render(
    request: Request,
    template: str,
    context: Optional[Dict[str, Any]] = None,
    user: Optional[CurrentUser] = None,
    status_code: int = 200,
) -> Response:
    """Render a page, draining pending toasts into it."""
    path = request.url.path
    page_context = {
        "app_name": settings.app_name,
        "page_title": page_title(path),
        "current_path": path,
        "nav_links": NAV_LINKS,
        "bottom_nav_links": BOTTOM_NAV_LINKS,
        "user": user,
        "toasts": pop_toasts(request),
    }
    page_context.update(context or {})
    return templates.TemplateResponse(request, template, page_context, status_code=status_code)
