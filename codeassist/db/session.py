from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

MEMORY_DB_URL = 'sqlite://'


def create_memory_engine() -> Engine:
    """One private in-memory database; every connection of the pool shares it."""
    return create_engine(
        MEMORY_DB_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
