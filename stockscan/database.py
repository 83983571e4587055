# -*- coding: utf-8 -*-
"""
SQLAlchemy database setup for the inventory API.
"""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from stockscan.config import Config

logger = logging.getLogger(__name__)

DATABASE_URL = Config.DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

# pool_pre_ping avoids handing out connections the server already closed
engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
    pool_recycle=3600,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """
    Checks that the database is reachable and creates the tables.

    A database that cannot be reached at startup is fatal: the error is logged
    and the process exits instead of serving requests that would all fail.
    """
    bind = bind or engine
    # registers the models on Base.metadata
    from stockscan.models import product  # noqa: F401

    try:
        with bind.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=bind)
    except SQLAlchemyError as e:
        logger.error(f"Database connection error: {e}")
        raise SystemExit(1)

    logger.info("Database connected successfully")
