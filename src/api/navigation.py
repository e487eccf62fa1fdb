"""Sidebar links and page titles of the dashboard shell"""

from typing import List, NamedTuple


class NavLink(NamedTuple):
    href: str
    icon: str
    label: str


NAV_LINKS: List[NavLink] = [
    NavLink("/dashboard/overview", "layout-dashboard", "Dashboard Overview"),
    NavLink("/dashboard/inbox", "inbox", "Inbox"),
    NavLink("/dashboard/knowledge-base", "book-marked", "Knowledge Base"),
    NavLink("/dashboard/customers", "user", "Customers"),
    NavLink("/dashboard/settings/team", "user-cog", "Team Management"),
]

BOTTOM_NAV_LINKS: List[NavLink] = [
    NavLink("/dashboard/settings", "settings", "Settings"),
]

# first matching prefix wins
PAGE_TITLES = [
    ("/dashboard/overview", "Dashboard Overview"),
    ("/dashboard/inbox", "Inbox"),
    ("/dashboard/knowledge-base", "Knowledge Base"),
    ("/dashboard/settings", "Settings"),
    ("/dashboard", "Dashboard"),
]
DEFAULT_TITLE = "AI Responder"


def page_title(path: str) -> str:
    for prefix, title in PAGE_TITLES:
        if path.startswith(prefix):
            return title
    return DEFAULT_TITLE


def is_active(href: str, path: str) -> bool:
    return path == href or (href == "/dashboard/overview" and path == "/")
