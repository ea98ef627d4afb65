import uuid
from sqlalchemy.orm import Session
from property_manager.core.exceptions import NotFoundException
from property_manager.core.tenant_scope import TenantScope
from property_manager.models.expense_category import ExpenseCategory
from property_manager.models.property import Property
from property_manager.models.tenant_context import TenantContext
from property_manager.repositories.expense_category_repository import ExpenseCategoryRepository
from property_manager.repositories.property_repository import PropertyRepository
from property_manager.schemas.property_schemas import PropertyCreate


class PropertyService:
    """Service for property business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PropertyRepository(db)
        self.category_repo = ExpenseCategoryRepository(db)

    def create_property(self, data: PropertyCreate, context: TenantContext) -> Property:
        """Create new property for the caller's account"""
        property = Property(
            account_id=context.account_id,
            name=data.name.strip(),
            street=data.street,
            city=data.city,
            state=data.state,
            zip_code=data.zip_code,
        )
        return self.repo.create(property)

    def get_properties(self, context: TenantContext) -> list[Property]:
        """Get all properties for the caller's account"""
        return self.repo.get_all(TenantScope.for_context(context))

    def get_property(self, property_id: uuid.UUID, context: TenantContext) -> Property:
        """
        Get specific property ensuring account ownership.

        Raises:
            NotFoundException: If property not found or belongs to another account
        """
        property = self.repo.get_by_id(property_id, TenantScope.for_context(context))
        if not property:
            raise NotFoundException("Property not found")
        return property

    def get_expense_categories(self) -> list[ExpenseCategory]:
        """Get the global expense categories"""
        return self.category_repo.get_all()
