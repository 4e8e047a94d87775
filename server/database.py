# server/database.py

import logging
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from server.models import Base


logger = logging.getLogger(__name__)

engine: Engine | None = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def init_engine(database_url: str) -> Engine:
    """
    Bind the session factory to a new engine for `database_url`.
    SQLite files get their parent directory created; in-memory SQLite
    shares one connection so every session sees the same data.
    """
    global engine

    url = make_url(database_url)
    kwargs = {}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    if engine is not None:
        engine.dispose()
    engine = create_engine(url, **kwargs)
    SessionLocal.configure(bind=engine)
    logger.info("Database engine bound to %s", url.render_as_string(hide_password=True))
    return engine


def init_db():
    Base.metadata.create_all(bind=get_db_engine())


def drop_db():
    Base.metadata.drop_all(bind=get_db_engine())


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db_engine() -> Engine:
    if engine is None:
        raise RuntimeError("Database engine is not initialised; call init_engine() first")
    return engine
