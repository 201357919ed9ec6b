from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from teashop.core.config import settings
from teashop.db.session import Base
import teashop.db.models  # noqa

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

MIGRATION_OPTS = dict(
    target_metadata=Base.metadata,
    version_table="alembic_version_teashop",
    compare_type=True,
    render_as_batch=settings.POSTGRES_DSN.startswith("sqlite"),
)


def run_migrations_offline():
    context.configure(url=settings.POSTGRES_DSN, literal_binds=True,
                      dialect_opts={"paramstyle": "named"}, **MIGRATION_OPTS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    engine = create_engine(settings.POSTGRES_DSN, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, **MIGRATION_OPTS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
