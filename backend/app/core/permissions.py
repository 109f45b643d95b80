"""Role & capability helpers for organization-scoped resources."""
import enum
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.exceptions import NotFoundError, PermissionDenied
from app.models.org_membership import OrgMembership, OrgMembershipRole
from app.models.organization import Organization
from app.models.user import User


class Capability(str, enum.Enum):
    VIEW_MEETINGS = "view_meetings"
    MANAGE_OWN_TASKS = "manage_own_tasks"
    EDIT_MINUTES = "edit_minutes"
    MANAGE_MEETINGS = "manage_meetings"
    APPROVE_MINUTES = "approve_minutes"
    MANAGE_DOCUMENTS = "manage_documents"
    SUBMIT_FEEDBACK = "submit_feedback"


_VIEWER_CAPABILITIES = frozenset({
    Capability.VIEW_MEETINGS,
    Capability.SUBMIT_FEEDBACK,
})
_MEMBER_CAPABILITIES = _VIEWER_CAPABILITIES | {
    Capability.MANAGE_OWN_TASKS,
    Capability.EDIT_MINUTES,
}
_ADMIN_CAPABILITIES = _MEMBER_CAPABILITIES | {
    Capability.MANAGE_MEETINGS,
    Capability.APPROVE_MINUTES,
    Capability.MANAGE_DOCUMENTS,
}

ROLE_CAPABILITIES: dict[OrgMembershipRole, frozenset[Capability]] = {
    OrgMembershipRole.VIEWER: _VIEWER_CAPABILITIES,
    OrgMembershipRole.MEMBER: _MEMBER_CAPABILITIES,
    OrgMembershipRole.ADMIN: _ADMIN_CAPABILITIES,
    OrgMembershipRole.OWNER: _ADMIN_CAPABILITIES,
}


async def get_membership(db: AsyncSession, user_id: int, organization_id: int) -> Optional[OrgMembership]:
    result = await db.execute(
        select(OrgMembership).where(
            OrgMembership.user_id == user_id,
            OrgMembership.organization_id == organization_id,
            OrgMembership.is_active == True,  # noqa: E712
        )
    )
    return result.scalar_one_or_none()


async def ensure_org_exists(db: AsyncSession, organization_id: int) -> Organization:
    result = await db.execute(select(Organization).where(Organization.id == organization_id))
    org = result.scalar_one_or_none()
    if org is None:
        raise NotFoundError("Organization not found")
    return org


async def is_member(db: AsyncSession, user_id: int, organization_id: int) -> bool:
    """Active membership, or ownership of the organization."""
    if await get_membership(db, user_id, organization_id) is not None:
        return True
    org = await ensure_org_exists(db, organization_id)
    return org.owner_id == user_id


def has_capability(role: OrgMembershipRole, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES[role]


async def require_capability(
    db: AsyncSession,
    user: User,
    organization_id: int,
    capability: Capability,
) -> Optional[OrgMembership]:
    """Ensure the user's role in the organization grants ``capability``.

    Superadmins pass every check. The organization owner is accepted even
    without a membership row. Raises PermissionDenied otherwise.
    """
    if user.is_superadmin:
        return None
    org = await ensure_org_exists(db, organization_id)
    membership = await get_membership(db, user.id, organization_id)
    if membership is None:
        if org.owner_id == user.id:
            return None
        raise PermissionDenied("Not a member of organization")
    if not has_capability(membership.role, capability):
        raise PermissionDenied("Insufficient permissions")
    return membership


async def user_capabilities(db: AsyncSession, user: User, organization_id: int) -> frozenset[Capability]:
    if user.is_superadmin:
        return frozenset(Capability)
    membership = await get_membership(db, user.id, organization_id)
    if membership is None:
        org = await ensure_org_exists(db, organization_id)
        return frozenset(Capability) if org.owner_id == user.id else frozenset()
    return ROLE_CAPABILITIES[membership.role]
