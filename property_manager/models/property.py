import uuid
from sqlalchemy import String, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from property_manager.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from property_manager.models.property_photo import PropertyPhoto


class Property(Base, TimestampMixin, SoftDeleteMixin):
    """Rental property owned by an account"""

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Critical for multi-tenant queries
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Relationships
    photos: Mapped[list["PropertyPhoto"]] = relationship(
        "PropertyPhoto",
        back_populates="property",
        order_by="PropertyPhoto.display_order",
    )
