import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .models import Base

logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # Background tasks run on other threads than the request that created the engine
        return create_engine(url, connect_args={"check_same_thread": False})
    elif url.startswith("postgresql"):
        return create_engine(
            url,
            pool_pre_ping=True,
            pool_recycle=300,
            connect_args={"connect_timeout": 10}
        )
    return create_engine(url)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(engine: Engine) -> None:
    try:
        Base.metadata.create_all(bind=engine)
        logger.info(f"Credential tables ready on {engine.url.get_backend_name()}://...")
    except Exception as e:
        logger.error(f"Error creating tables: {e}")
        raise
