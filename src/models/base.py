"""
Base data model definitions shared by records fetched from the backend
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class BackendRecord(BaseModel):
    """Base for records owned by the backend or auth service.

    Unknown fields are kept so newer backend versions do not break rendering.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True
    )


class QueryStatus(str, Enum):
    """Lifecycle states of a customer query"""
    NEW = "new"
    CUSTOMER_REPLY = "customer_reply"
    AGENT_REPLIED = "agent_replied"
    CLOSED = "closed"


class SenderType(str, Enum):
    """Who wrote a message in a query thread"""
    CUSTOMER = "customer"
    AGENT = "agent"
    AI_DRAFT = "ai_draft"
    SYSTEM_NOTE = "system_note"


def initials_from_name(name: Optional[str]) -> str:
    """First and last word initials of a name, upper-cased. Empty if no name."""
    if not name or not name.strip():
        return ""
    parts = name.split()
    first = parts[0][0]
    last = parts[-1][0] if len(parts) > 1 else ""
    return f"{first}{last}".upper()


def format_date(value: Union[datetime, str, None], with_time: bool = True) -> str:
    """Human readable timestamp, 'N/A' when missing and 'Invalid Date' when unparsable."""
    if value is None or value == "":
        return "N/A"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return "Invalid Date"
    if with_time:
        return value.strftime("%b %d, %Y, %I:%M %p")
    return value.strftime("%b %d, %Y")
