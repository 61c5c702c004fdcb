"""
Alembic environment for the Closet schema
Migrations run on a sync driver: asyncpg URLs are rewritten to psycopg2
Reference: https://alembic.sqlalchemy.org/en/latest/tutorial.html
"""
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from closet.core.config import settings
from closet.models import Base  # registers users, clothes, events, outfit_suggestions

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def sync_database_url(database_url: str) -> str:
    """Swap the async driver of the app URL for its sync counterpart"""
    return (
        database_url
        .replace("postgresql+asyncpg://", "postgresql+psycopg2://")
        .replace("sqlite+aiosqlite://", "sqlite://")
    )


if not config.get_main_option("sqlalchemy.url"):
    # ConfigParser interpolates %, URL-encoded passwords need it doubled
    config.set_main_option(
        "sqlalchemy.url", sync_database_url(settings.DATABASE_URL).replace("%", "%%")
    )

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout without a connection"""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite cannot ALTER most columns in place
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
