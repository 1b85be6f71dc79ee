# database.py
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from fastapi import HTTPException
import time
import logging

from config import config

logger = logging.getLogger(__name__)

DATABASE_URL = config.DATABASE_URL


def _engine_options(database_url):
    """Connection pool settings; SQLite gets its own threading flag instead"""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before use
        "pool_recycle": 300,    # Recycle connections every 5 minutes
        "pool_size": 5,
        "max_overflow": 10,
    }


def create_engine_with_retry(database_url, max_retries=5, retry_delay=2):
    """Create database engine with connection retry logic"""
    for attempt in range(max_retries):
        try:
            engine = create_engine(database_url, echo=False, **_engine_options(database_url))

            # Test the connection
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()

            logger.info(f"Database engine created successfully on attempt {attempt + 1}")
            return engine

        except Exception as e:
            logger.warning(f"Database connection attempt {attempt + 1} failed: {e}")
            if attempt < max_retries - 1:
                logger.info(f"Retrying in {retry_delay} seconds...")
                time.sleep(retry_delay)
            else:
                logger.error("All database connection attempts failed")
                raise


try:
    engine = create_engine_with_retry(DATABASE_URL)
except Exception as e:
    logger.error(f"Failed to create database engine: {e}")
    # App still starts; /health reports the database as disconnected
    engine = None

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine) if engine else None
Base = declarative_base()


def get_db():
    """Dependency to get database session"""
    if not SessionLocal:
        raise HTTPException(status_code=503, detail="Database not available")

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create all tables"""
    if not engine:
        logger.error("Cannot create tables - database engine not available")
        return False

    # Register models on Base.metadata
    import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
        return True
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        return False


def test_connection():
    """Test database connection"""
    if not engine:
        logger.error("Database engine not available")
        return False

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
            logger.info(f"Database connection successful ({engine.dialect.name})")
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
