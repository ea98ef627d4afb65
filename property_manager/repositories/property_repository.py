import uuid
from sqlalchemy.orm import Session
from property_manager.core.tenant_scope import TenantScope
from property_manager.models.property import Property


class PropertyRepository:
    """Repository for Property model operations with multi-tenant support"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, scope: TenantScope) -> list[Property]:
        """Get all properties visible in scope, ordered by name"""
        return scope.apply(self.db.query(Property), Property).order_by(Property.name).all()

    def get_by_id(self, property_id: uuid.UUID, scope: TenantScope) -> Property | None:
        """
        Get property ensuring it is visible in scope (multi-tenant safety).

        Returns None if property doesn't exist, is soft-deleted, or belongs to
        another account.
        """
        query = self.db.query(Property).filter(Property.id == property_id)
        return scope.apply(query, Property).first()

    def exists(self, property_id: uuid.UUID, scope: TenantScope) -> bool:
        """Check whether a property is visible in scope"""
        return self.get_by_id(property_id, scope) is not None

    def create(self, property: Property) -> Property:
        """Create new property"""
        self.db.add(property)
        self.db.commit()
        self.db.refresh(property)
        return property
