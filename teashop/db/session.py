from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy import create_engine
from teashop.core.config import settings

class Base(DeclarativeBase): pass

def _engine_options(dsn: str) -> dict:
    if not dsn.startswith('sqlite'):
        return {'pool_pre_ping': True}
    opts = {'connect_args': {'check_same_thread': False}}
    if ':memory:' in dsn:
        # one shared connection, otherwise every checkout sees an empty database
        opts['poolclass'] = StaticPool
    return opts

engine = create_engine(settings.POSTGRES_DSN, **_engine_options(settings.POSTGRES_DSN))
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
