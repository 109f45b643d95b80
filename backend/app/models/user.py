"""
User model.
"""
from typing import TYPE_CHECKING
from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.organization import Organization
    from app.models.org_membership import OrgMembership


class User(BaseModel):
    """User model for authentication and profile."""
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Superadmin flag passes every capability check
    is_superadmin: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    owned_organizations: Mapped[list["Organization"]] = relationship(
        "Organization",
        foreign_keys="Organization.owner_id",
        back_populates="owner"
    )
    memberships: Mapped[list["OrgMembership"]] = relationship(
        "OrgMembership",
        foreign_keys="OrgMembership.user_id",
        back_populates="user",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
