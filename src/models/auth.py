"""
Session and profile models from the auth service
"""

from typing import Optional

from .base import BackendRecord, initials_from_name


class AuthUser(BackendRecord):
    id: str
    email: Optional[str] = None


class AuthSession(BackendRecord):
    """Tokens returned by a password or refresh-token grant"""

    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: str = "bearer"
    user: AuthUser


class UserProfile(BackendRecord):
    """Row of the profiles table"""

    id: Optional[str] = None
    full_name: Optional[str] = None
    organization_id: Optional[str] = None

    @property
    def has_organization(self) -> bool:
        return bool(self.organization_id)


class CurrentUser(BackendRecord):
    """What the dashboard knows about the signed-in agent"""

    user: AuthUser
    access_token: str
    profile: Optional[UserProfile] = None

    @property
    def email(self) -> Optional[str]:
        return self.user.email

    @property
    def full_name(self) -> Optional[str]:
        return self.profile.full_name if self.profile else None

    @property
    def organization_id(self) -> Optional[str]:
        return self.profile.organization_id if self.profile else None

    @property
    def initials(self) -> str:
        """Initials for the user menu avatar."""
        initials = initials_from_name(self.full_name)
        if initials:
            return initials
        if self.email:
            return self.email[:2].upper()
        return ".."
