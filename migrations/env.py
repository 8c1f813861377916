import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection

from eventrsvp.config.database import create_engine
from eventrsvp.config.settings import settings
from eventrsvp.models import BaseModel

# Every ORM module has to be imported so its tables land in the metadata
from eventrsvp.events.repository import orm_models as _event_models  # noqa: F401
from eventrsvp.guests.repository import orm_models as _guest_models  # noqa: F401
from eventrsvp.notifications.mail import orm_models as _email_models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = BaseModel.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=settings.DB_DSN,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    # A dedicated engine: this may run on its own event loop in a worker thread
    connectable = create_engine(settings.DB_DSN)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
