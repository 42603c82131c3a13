from __future__ import annotations
from typing import TYPE_CHECKING
from enum import StrEnum
from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from uuid import uuid4
from ..db.base_class import Base
from . import utcnow

if TYPE_CHECKING:
    from .user import User
    from .family import Family

class MemberRole(StrEnum):
    MEMBER = "MEMBER"
    WORKER = "WORKER"
    HEAD = "HEAD"

class FamilyMember(Base):
    __table_args__ = (UniqueConstraint("user_id", "family_id", name="uq_member_user_family"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    family_id: Mapped[str] = mapped_column(String(36), ForeignKey("family.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("user.id", ondelete="CASCADE"), index=True)
    role: Mapped[MemberRole] = mapped_column(default=MemberRole.MEMBER)
    joined_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    user: Mapped["User"] = relationship(back_populates="memberships")
    family: Mapped["Family"] = relationship(back_populates="members")

    @property
    def first_name(self) -> str | None:
        return self.user.first_name if self.user else None

    @property
    def last_name(self) -> str | None:
        return self.user.last_name if self.user else None

    @property
    def email(self) -> str | None:
        return self.user.email if self.user else None
