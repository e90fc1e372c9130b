# file: database.py

import sqlalchemy  # engine
from databases import Database  # async db
from sqlalchemy.orm import declarative_base  # ORM base

import config  # settings

database = Database(config.DATABASE_URL)  # shared async pool
Base = declarative_base()  # table base


def sync_url(url: str) -> str:  # async url -> sync url
    return str(url).replace("+asyncpg", "").replace("+aiosqlite", "")  # drop async driver


engine = sqlalchemy.create_engine(sync_url(config.DATABASE_URL))  # sync engine for DDL


def create_tables():  # create missing tables
    import models  # noqa: F401  register tables on Base
    Base.metadata.create_all(engine)


async def get_database() -> Database:  # dependency: persistence handle
    return database
