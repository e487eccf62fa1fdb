"""Organizations, team members and invitations"""

import logging
from typing import List, Union

from src.models.organization import (
    InvitationResult,
    InvitationRole,
    Organization,
    OrganizationMember,
    PendingInvitation,
)
from src.services.backend_client import BackendClient, parse_record, parse_records

logger = logging.getLogger(__name__)


class OrganizationService:
    """Onboarding and team management calls"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def create_organization(self, token: str, name: str) -> Organization:
        if not name or not name.strip():
            raise ValueError("Organization name cannot be empty.")
        data = await self.client.post(
            "/api/organizations",
            token,
            json={"name": name.strip()},
            fallback_detail="Failed to create organization",
        )
        organization = parse_record(Organization, data, "Failed to create organization")
        logger.info(f"Organization created: {organization.id}")
        return organization

    async def list_members(self, token: str) -> List[OrganizationMember]:
        data = await self.client.get(
            "/api/organizations/members",
            token,
            fallback_detail="Failed to fetch team members.",
        )
        return parse_records(OrganizationMember, data, "Failed to fetch team members.")

    async def list_pending_invitations(self, token: str) -> List[PendingInvitation]:
        data = await self.client.get(
            "/api/organizations/invitations/pending",
            token,
            fallback_detail="Failed to fetch pending invitations.",
        )
        return parse_records(PendingInvitation, data, "Failed to fetch pending invitations.")

    async def invite(
        self, token: str, email: str, role: Union[InvitationRole, str] = InvitationRole.AGENT
    ) -> InvitationResult:
        if not email or not email.strip():
            raise ValueError("Email address cannot be empty.")
        try:
            role = InvitationRole(role)
        except ValueError:
            raise ValueError(f"Unknown role: {role}")
        data = await self.client.post(
            "/api/organizations/invitations",
            token,
            json={"email": email.strip(), "role": role.value},
            fallback_detail="Failed to send invitation.",
        )
        return parse_record(InvitationResult, data or {}, "Failed to send invitation.")

    async def revoke_invitation(self, token: str, invitation_id: str) -> InvitationResult:
        data = await self.client.delete(
            "/api/invitations/{invitation_id}",
            token,
            path_params={"invitation_id": invitation_id},
            fallback_detail="Failed to revoke invitation.",
        )
        return parse_record(InvitationResult, data or {}, "Failed to revoke invitation.")

    async def accept_invitation(self, token: str, invitation_token: str) -> InvitationResult:
        if not invitation_token:
            raise ValueError("Invitation token is missing or invalid.")
        data = await self.client.post(
            "/api/invitations/accept",
            token,
            json={"token": invitation_token},
            fallback_detail="Failed to accept invitation.",
        )
        return parse_record(InvitationResult, data or {}, "Failed to accept invitation.")
