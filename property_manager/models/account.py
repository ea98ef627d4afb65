"""Account model: the multi-tenant isolation boundary."""

import uuid
from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from property_manager.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from property_manager.models.user import User


class Account(Base, TimestampMixin):
    """
    Landlord account (tenant).

    Every property, photo, receipt, work order and expense belongs to
    exactly one account. Users reach data only through their account.
    Accounts are never deleted by this service.
    """

    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    users: Mapped[list["User"]] = relationship("User", back_populates="account")

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, name='{self.name}')>"
