import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, create_engine

from ticketpro.core.config import settings
from ticketpro.db.session import Base

# Import all models so Alembic sees them in metadata
from ticketpro.models.user import User  # noqa: F401
from ticketpro.models.country import Country  # noqa: F401
from ticketpro.models.airline import Airline  # noqa: F401
from ticketpro.models.ticket_batch import TicketBatch  # noqa: F401
from ticketpro.models.ticket import Ticket  # noqa: F401
from ticketpro.models.booking import Booking  # noqa: F401
from ticketpro.models.system_setting import SystemSetting  # noqa: F401
from ticketpro.models.activity_log import ActivityLog  # noqa: F401
from ticketpro.models.umrah_with_transport import UmrahWithTransport  # noqa: F401
from ticketpro.models.umrah_without_transport import UmrahWithoutTransport  # noqa: F401
from ticketpro.models.umrah_group_ticket import UmrahGroupTicket  # noqa: F401
from ticketpro.models.umrah_group_booking import UmrahGroupBooking  # noqa: F401


# Alembic Config object
config = context.config

# Force sqlalchemy.url from real runtime DATABASE_URL
db_url = getattr(settings, "DATABASE_URL", None) or os.getenv("DATABASE_URL")
if not db_url:
    raise RuntimeError("DATABASE_URL is not set (check .env / ticketpro.core.config.settings)")

config.set_main_option("sqlalchemy.url", db_url)

# Logging config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Target metadata for autogenerate
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    url = config.get_main_option("sqlalchemy.url")

    # Use create_engine with url from config (from DATABASE_URL env);
    # engine_from_config would not expand env vars in alembic.ini.
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite cannot ALTER most constraints in place
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
