import uuid
from sqlalchemy import String, Integer, BigInteger, Boolean, ForeignKey, Index, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from property_manager.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from property_manager.models.property import Property


class PropertyPhoto(Base, TimestampMixin):
    """
    Photo of a property stored in object storage.

    Invariants per property:
    - exactly one photo has is_primary=True while any photo exists
      (backed by a partial unique index)
    - display_order values are dense and zero-based after a reorder

    Photos are hard-deleted together with their storage objects.
    """

    __tablename__ = "property_photos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    storage_key: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    thumbnail_storage_key: Mapped[str | None] = mapped_column(String(500), nullable=True)
    original_file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="photos")

    __table_args__ = (
        Index("ix_property_photos_property_display_order", "property_id", "display_order"),
        # At most one primary photo per property
        Index(
            "uq_property_photos_primary",
            "property_id",
            unique=True,
            sqlite_where=text("is_primary = 1"),
            postgresql_where=text("is_primary = true"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<PropertyPhoto(id={self.id}, property_id={self.property_id}, "
            f"order={self.display_order}, primary={self.is_primary})>"
        )
