from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base

DEFAULT_DATABASE_URL = "sqlite:///std_reference.db"


def init_db(database_url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> Session:
    engine: Engine = create_engine(database_url, echo=echo)

    Base.metadata.create_all(engine)
    return sessionmaker(engine)()
