"""Explicit tenant isolation and soft-delete predicate for data access."""

import uuid
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement

if TYPE_CHECKING:
    from property_manager.models.tenant_context import TenantContext


@dataclass(frozen=True)
class TenantScope:
    """
    Row filter applied to every read and write of tenant-owned entities.

    Scopes rows to one account and hides soft-deleted rows unless
    include_deleted is set. Repositories receive the scope as an argument;
    nothing is applied implicitly.

    Attributes:
        account_id: Tenant whose rows are visible
        include_deleted: Also return rows with deleted_at set (admin paths)
    """

    account_id: uuid.UUID
    include_deleted: bool = False

    @classmethod
    def for_context(cls, context: "TenantContext") -> "TenantScope":
        """Scope for the caller described by a tenant context."""
        return cls(account_id=context.account_id)

    def with_deleted(self) -> "TenantScope":
        """Copy of this scope that also sees soft-deleted rows."""
        return replace(self, include_deleted=True)

    def criteria(self, model: type) -> list[ColumnElement[bool]]:
        """
        Build the filter clauses for a model.

        The soft-delete clause is only added for models that carry a
        deleted_at column.
        """
        clauses: list[ColumnElement[bool]] = [model.account_id == self.account_id]
        if not self.include_deleted and hasattr(model, "deleted_at"):
            clauses.append(model.deleted_at.is_(None))
        return clauses

    def apply(self, statement: Any, model: type) -> Any:
        """Apply the scope to a Query, Select, Update or Delete statement."""
        return statement.where(*self.criteria(model))
