import sqlalchemy
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase


class DBTable(DeclarativeBase):
    metadata: sqlalchemy.MetaData = sqlalchemy.MetaData()  # type: ignore


Base = DBTable

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONDocument = sqlalchemy.JSON().with_variant(JSONB(), "postgresql")
