"""Tenant context for request authorization."""

import uuid
from dataclasses import dataclass
from property_manager.models.user import User
from property_manager.models.account import Account


@dataclass(frozen=True)
class TenantContext:
    """
    Identity of the caller for one request.

    Resolved from the JWT and verified against the database. Every service
    operation takes it and scopes its reads and writes to account_id.
    Read-only for the rest of the application.

    Attributes:
        user: The authenticated User object
        account: The Account (tenant) the user belongs to
    """

    user: User
    account: Account

    @property
    def account_id(self) -> uuid.UUID:
        return self.account.id

    @property
    def user_id(self) -> uuid.UUID:
        return self.user.id

    @property
    def is_authenticated(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"<TenantContext(user_id={self.user.id}, account_id={self.account.id})>"
