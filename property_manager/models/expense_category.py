import uuid
from sqlalchemy import String, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from property_manager.models.base import Base


class ExpenseCategory(Base):
    """
    Global expense category (IRS Schedule E lines).

    Categories are shared by all accounts and carry no account_id.
    """

    __tablename__ = "expense_categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    schedule_e_line: Mapped[str | None] = mapped_column(String(20), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
