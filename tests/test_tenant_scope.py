import uuid
from sqlalchemy import select

from property_manager.core.tenant_scope import TenantScope
from property_manager.models.account import Account
from property_manager.models.base import utcnow
from property_manager.models.expense_category import ExpenseCategory
from property_manager.models.property import Property
from property_manager.models.receipt import Receipt
from property_manager.repositories.property_repository import PropertyRepository
from property_manager.repositories.receipt_repository import ReceiptRepository


def _account(db, name):
    account = Account(name=name)
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def _property(db, account, name="Duplex"):
    prop = Property(account_id=account.id, name=name)
    db.add(prop)
    db.commit()
    db.refresh(prop)
    return prop


def _receipt(db, account, deleted=False):
    receipt = Receipt(
        account_id=account.id,
        storage_key=f"{account.id}/receipts/2026/{uuid.uuid4()}.jpg",
        content_type="image/jpeg",
        created_by_user_id=uuid.uuid4(),
        deleted_at=utcnow() if deleted else None,
    )
    db.add(receipt)
    db.commit()
    db.refresh(receipt)
    return receipt


class TestTenantScope:
    """Tests for the tenant isolation and soft-delete predicate"""

    def test_only_own_account_rows_visible(self, db_session):
        """Rows of another account are never returned"""
        account_a = _account(db_session, "A")
        account_b = _account(db_session, "B")
        _property(db_session, account_a, "A's house")
        prop_b = _property(db_session, account_b, "B's house")

        repo = PropertyRepository(db_session)
        names = [p.name for p in repo.get_all(TenantScope(account_id=account_a.id))]
        assert names == ["A's house"]
        assert repo.get_by_id(prop_b.id, TenantScope(account_id=account_a.id)) is None

    def test_soft_deleted_rows_hidden_by_default(self, db_session):
        """Soft-deleted rows are invisible unless the scope includes them"""
        account = _account(db_session, "A")
        live = _receipt(db_session, account)
        deleted = _receipt(db_session, account, deleted=True)

        repo = ReceiptRepository(db_session)
        scope = TenantScope(account_id=account.id)

        assert repo.get_by_id(live.id, scope) is not None
        assert repo.get_by_id(deleted.id, scope) is None
        assert repo.get_by_id(deleted.id, scope.with_deleted()) is not None

    def test_with_deleted_keeps_tenant_filter(self, db_session):
        """Including deleted rows never widens the scope to other accounts"""
        account_a = _account(db_session, "A")
        account_b = _account(db_session, "B")
        deleted_b = _receipt(db_session, account_b, deleted=True)

        scope = TenantScope(account_id=account_a.id).with_deleted()
        assert ReceiptRepository(db_session).get_by_id(deleted_b.id, scope) is None

    def test_with_deleted_returns_copy(self):
        """with_deleted leaves the original scope unchanged"""
        scope = TenantScope(account_id=uuid.uuid4())
        widened = scope.with_deleted()
        assert scope.include_deleted is False
        assert widened.include_deleted is True
        assert widened.account_id == scope.account_id

    def test_criteria_without_soft_delete_column(self):
        """Models without deleted_at only get the account clause"""
        from property_manager.models.property_photo import PropertyPhoto

        scope = TenantScope(account_id=uuid.uuid4())
        assert len(scope.criteria(PropertyPhoto)) == 1
        assert len(scope.criteria(Receipt)) == 2

    def test_apply_to_select_statement(self, db_session):
        """apply works on 2.0-style select statements"""
        account_a = _account(db_session, "A")
        account_b = _account(db_session, "B")
        _property(db_session, account_a)
        _property(db_session, account_b)

        statement = TenantScope(account_id=account_b.id).apply(select(Property), Property)
        rows = db_session.execute(statement).scalars().all()
        assert [row.account_id for row in rows] == [account_b.id]

    def test_global_categories_not_tenant_scoped(self, db_session, categories):
        """Expense categories are shared by every account"""
        assert db_session.query(ExpenseCategory).count() == 15
