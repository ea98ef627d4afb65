import uuid
from sqlalchemy import func
from sqlalchemy.orm import Session

from property_manager.core.tenant_scope import TenantScope
from property_manager.models.property_photo import PropertyPhoto


class PropertyPhotoRepository:
    """
    Repository for PropertyPhoto data access.

    Write methods named *_no_commit only flush, so the caller can compose
    several persisted steps into one unit and commit once.
    """

    def __init__(self, db: Session):
        self.db = db

    def _for_property(self, property_id: uuid.UUID, scope: TenantScope):
        query = self.db.query(PropertyPhoto).filter(PropertyPhoto.property_id == property_id)
        return scope.apply(query, PropertyPhoto)

    def get_by_id(
        self, photo_id: uuid.UUID, property_id: uuid.UUID, scope: TenantScope
    ) -> PropertyPhoto | None:
        """
        Get photo by ID, ensuring it belongs to the property and the scope.

        Returns:
            PropertyPhoto or None if not found, on another property or in another account
        """
        return self._for_property(property_id, scope).filter(PropertyPhoto.id == photo_id).first()

    def get_by_property(self, property_id: uuid.UUID, scope: TenantScope) -> list[PropertyPhoto]:
        """Get all photos for a property ordered by display order"""
        return (
            self._for_property(property_id, scope)
            .order_by(PropertyPhoto.display_order, PropertyPhoto.created_at)
            .all()
        )

    def count_by_property(self, property_id: uuid.UUID, scope: TenantScope) -> int:
        """Count photos for a property"""
        return self._for_property(property_id, scope).count()

    def get_max_display_order(self, property_id: uuid.UUID, scope: TenantScope) -> int | None:
        """Highest display order among a property's photos, or None if it has none"""
        return (
            self._for_property(property_id, scope)
            .with_entities(func.max(PropertyPhoto.display_order))
            .scalar()
        )

    def get_primary(self, property_id: uuid.UUID, scope: TenantScope) -> PropertyPhoto | None:
        """Get the current primary photo of a property"""
        return self._for_property(property_id, scope).filter(PropertyPhoto.is_primary.is_(True)).first()

    def get_first_in_order(self, property_id: uuid.UUID, scope: TenantScope) -> PropertyPhoto | None:
        """Get the photo with the lowest display order (oldest first on ties)"""
        return (
            self._for_property(property_id, scope)
            .order_by(PropertyPhoto.display_order, PropertyPhoto.created_at)
            .first()
        )

    def storage_key_exists(self, storage_key: str, scope: TenantScope) -> bool:
        """Check whether any photo in scope already holds this storage key"""
        query = self.db.query(PropertyPhoto.id).filter(PropertyPhoto.storage_key == storage_key)
        return scope.apply(query, PropertyPhoto).first() is not None

    def create(self, photo: PropertyPhoto) -> PropertyPhoto:
        """Create a new photo"""
        self.db.add(photo)
        self.db.commit()
        self.db.refresh(photo)
        return photo

    def save_no_commit(self, photo: PropertyPhoto) -> PropertyPhoto:
        """Persist pending changes to a photo without committing"""
        self.db.add(photo)
        self.db.flush()
        return photo

    def delete_no_commit(self, photo: PropertyPhoto) -> None:
        """Delete photo row without committing"""
        self.db.delete(photo)
        self.db.flush()

    def set_display_orders_no_commit(
        self, photos_by_id: dict[uuid.UUID, PropertyPhoto], ordered_ids: list[uuid.UUID]
    ) -> None:
        """Assign display_order = position for every photo in ordered_ids"""
        for index, photo_id in enumerate(ordered_ids):
            photos_by_id[photo_id].display_order = index
        self.db.flush()
