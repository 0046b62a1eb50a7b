from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from copisteria import config


@lru_cache(maxsize=None)
def get_engine(url: str = config.DATABASE_URL) -> Engine:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=config.SQL_ECHO, connect_args=connect_args)


def get_session(url: str = config.DATABASE_URL) -> Session:
    return Session(get_engine(url))
