from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from .core.config import settings
# Register table metadata before create_all
from .db import models  # noqa: F401


def build_engine(db_url: Optional[str] = None, echo: bool = False) -> Engine:
    """Create an engine with options chosen by database scheme"""
    db_url = db_url or settings.DATABASE_URL
    engine_kwargs = {}

    if db_url.startswith("sqlite"):
        # Store calls run on a threadpool
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in db_url or db_url in ("sqlite://", "sqlite:///"):
            # One shared connection, otherwise every thread sees an empty database
            engine_kwargs["poolclass"] = StaticPool
    else:
        # Better resiliency for managed Postgres
        engine_kwargs.update({
            "pool_pre_ping": True,
            "pool_recycle": 300,
            "pool_size": 5,
            "max_overflow": 10,
        })

    return create_engine(db_url, echo=echo, **engine_kwargs)


engine = build_engine(echo=settings.DEBUG)


def create_db_and_tables(target: Optional[Engine] = None):
    SQLModel.metadata.create_all(target or engine)
