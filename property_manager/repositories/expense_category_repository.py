import uuid
from sqlalchemy.orm import Session
from property_manager.models.expense_category import ExpenseCategory

# IRS Schedule E expense lines
DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("Advertising", "5"),
    ("Auto and Travel", "6"),
    ("Cleaning and Maintenance", "7"),
    ("Commissions", "8"),
    ("Insurance", "9"),
    ("Legal and Professional Fees", "10"),
    ("Management Fees", "11"),
    ("Mortgage Interest", "12"),
    ("Other Interest", "13"),
    ("Repairs", "14"),
    ("Supplies", "15"),
    ("Taxes", "16"),
    ("Utilities", "17"),
    ("Depreciation", "18"),
    ("Other", "19"),
]


class ExpenseCategoryRepository:
    """Repository for global ExpenseCategory rows (no tenant scoping)"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[ExpenseCategory]:
        """Get all categories in display order"""
        return self.db.query(ExpenseCategory).order_by(ExpenseCategory.sort_order).all()

    def get_by_id(self, category_id: uuid.UUID) -> ExpenseCategory | None:
        """Get category by ID"""
        return self.db.query(ExpenseCategory).filter(ExpenseCategory.id == category_id).first()

    def seed_defaults(self) -> int:
        """
        Insert any missing default categories.

        Returns:
            Number of categories inserted
        """
        existing = {name for (name,) in self.db.query(ExpenseCategory.name).all()}
        added = 0
        for sort_order, (name, line) in enumerate(DEFAULT_CATEGORIES):
            if name in existing:
                continue
            self.db.add(ExpenseCategory(name=name, schedule_e_line=line, sort_order=sort_order))
            added += 1
        if added:
            self.db.commit()
        return added
