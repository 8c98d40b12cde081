from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def make_engine(database_url: str, echo: bool = False) -> Engine:
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args, echo=echo)


def init_db(engine: Engine) -> None:
    # Import here to register the tables on Base before create_all
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
