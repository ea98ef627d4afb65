import uuid
from sqlalchemy import String, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from property_manager.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from property_manager.models.account import Account


class User(Base, TimestampMixin):
    """
    Tracks users from the auth service.

    Only stores auth_user_id (sub from JWT) - no auth credentials.
    Auto-created with a personal account on first API request with a valid JWT.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    auth_user_id: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    account: Mapped["Account"] = relationship("Account", back_populates="users")
