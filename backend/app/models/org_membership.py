"""
Organization membership model.
"""
from typing import TYPE_CHECKING
from sqlalchemy import Boolean, Integer, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum
from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.organization import Organization


class OrgMembershipRole(str, enum.Enum):
    """Roles in an organization."""
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class OrgMembership(BaseModel):
    """Organization membership model - links users to organizations with roles."""
    __tablename__ = "org_memberships"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_org_memberships_org_user"),
    )

    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    role: Mapped[OrgMembershipRole] = mapped_column(
        Enum(OrgMembershipRole, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=OrgMembershipRole.MEMBER,
        index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="memberships"
    )
    user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[user_id],
        back_populates="memberships"
    )

    def __repr__(self) -> str:
        return f"<OrgMembership {self.user_id} in {self.organization_id} as {self.role}>"
