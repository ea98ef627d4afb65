from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from property_manager.config import settings
from property_manager.models.base import Base
# Import all model classes so autogenerate sees every table
from property_manager.models.account import Account  # noqa: F401
from property_manager.models.user import User  # noqa: F401
from property_manager.models.property import Property  # noqa: F401
from property_manager.models.property_photo import PropertyPhoto  # noqa: F401
from property_manager.models.expense_category import ExpenseCategory  # noqa: F401
from property_manager.models.work_order import WorkOrder  # noqa: F401
from property_manager.models.expense import Expense  # noqa: F401
from property_manager.models.receipt import Receipt  # noqa: F401
from property_manager.models.outbox_event import OutboxEvent  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to stdout."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live database connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
