# artmarket/data/database.py
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from artmarket.utils.retry import db_retry
from artmarket.utils.settings import DATABASE_URL, DB_CONNECT_ATTEMPTS
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    #jedna sesja na request
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ping(bind: Engine) -> None:
    with bind.connect() as conn:
        conn.execute(text("SELECT 1"))


def wait_for_database(bind: Engine = engine, attempts: int = DB_CONNECT_ATTEMPTS) -> None:
    logger.info(f"Waiting for database (max {attempts} attempts)")
    db_retry(attempts)(ping)(bind)
    logger.info("Database is reachable")


def init_db(bind: Engine = engine) -> None:
    # rejestracja modeli w Base.metadata przed create_all
    import artmarket.data.models  # noqa: F401

    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=bind)
