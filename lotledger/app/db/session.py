from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from lotledger.app.core.config import DATABASE_URL, DB_ECHO


def _sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite n'applique les FK (RESTRICT) qu'avec ce pragma, par connexion
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    eng = create_engine(url, echo=echo, pool_pre_ping=True, connect_args=connect_args)
    if eng.dialect.name == "sqlite":
        event.listen(eng, "connect", _sqlite_foreign_keys)
    return eng


engine = build_engine(DATABASE_URL, echo=DB_ECHO)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
