from typing import TYPE_CHECKING
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from uuid import uuid4
from ..db.base_class import Base
from . import utcnow

if TYPE_CHECKING:
    from .family_member import FamilyMember
    from .dwelling import Dwelling
    from .movement import Movement

INVITE_CODE_LENGTH = 8

class Family(Base):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    surname: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    invite_code: Mapped[str] = mapped_column(String(INVITE_CODE_LENGTH), unique=True, index=True, nullable=False)
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    members: Mapped[list["FamilyMember"]] = relationship(back_populates="family", cascade="all,delete-orphan")
    dwellings: Mapped[list["Dwelling"]] = relationship(back_populates="family", cascade="all,delete-orphan")
    movements: Mapped[list["Movement"]] = relationship(back_populates="family", cascade="all,delete-orphan")
