"""One-shot notifications carried in the session until the next rendered page"""

from typing import Dict, List, Optional

from starlette.requests import Request

TOAST_KEY = "toasts"
LEVELS = ("success", "info", "warning", "error")


def push_toast(request: Request, level: str, message: str, description: Optional[str] = None) -> None:
    if level not in LEVELS:
        raise ValueError(f"Unknown toast level: {level}")
    toast = {"level": level, "message": message}
    if description:
        toast["description"] = description
    request.session[TOAST_KEY] = request.session.get(TOAST_KEY, []) + [toast]


def pop_toasts(request: Request) -> List[Dict[str, str]]:
    return request.session.pop(TOAST_KEY, [])
