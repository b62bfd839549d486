import logging
import traceback
from typing import Generator, List

import pymysql
from fastapi import Request
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from employee_api.config import Settings
from employee_api.errors import SchemaBootstrapError

logger = logging.getLogger(__name__)

Base = declarative_base()

EMPLOYEES_TABLE = "employees"


# ---------------------------------------------------------------------------
# SQLAlchemy engine / sessions (one engine per process, owned by the app)
# ---------------------------------------------------------------------------

def create_db_engine(settings: Settings) -> Engine:
    url = settings.sqlalchemy_url
    if url.startswith("sqlite"):
        # sqlite is used for local runs and the test-suite
        return create_engine(url, echo=False, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        echo=False,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_connection(engine: Engine) -> None:
    """Run a trivial statement; raises if the store is unreachable."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


# ---------------------------------------------------------------------------
# pymysql direct helper: create the database itself if missing
# ---------------------------------------------------------------------------

def ensure_database(settings: Settings) -> bool:
    """
    CREATE DATABASE IF NOT EXISTS for MySQL targets. Returns False for other
    dialects, where the database is expected to exist already.
    """
    url = make_url(settings.sqlalchemy_url)
    if url.get_backend_name() != "mysql":
        return False

    try:
        conn = pymysql.connect(
            host=url.host or "localhost",
            user=url.username or "root",
            password=url.password or "",
            port=url.port or 3306,
        )
    except pymysql.MySQLError as e:
        logger.error("ERROR: Could not connect to MySQL server to create database.")
        logger.error(traceback.format_exc())
        raise SchemaBootstrapError(f"Database server unreachable: {e}") from e

    try:
        with conn.cursor() as cur:
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{url.database}` "
                "DEFAULT CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
            )
        conn.commit()
        logger.info(f"Database `{url.database}` ensured.")
    except pymysql.MySQLError as e:
        conn.rollback()
        logger.error(f"ERROR: Could not create database `{url.database}`.")
        raise SchemaBootstrapError(f"Could not create database: {e}") from e
    finally:
        conn.close()
    return True


# ---------------------------------------------------------------------------
# init_db: ensure the employees table and its columns exist
# ---------------------------------------------------------------------------

def init_db(engine: Engine) -> List[str]:
    """
    Bring the employees schema up to date and return the changes applied.

    Creates the table when absent and adds ``profile_image`` to tables created
    before the column existed. Running it against a current schema applies
    nothing. Any failure raises SchemaBootstrapError; the caller must not
    start serving requests after that.
    """
    # the model must be imported so Base.metadata knows the table
    from employee_api.models.employee_model import Employee

    applied: List[str] = []
    try:
        inspector = inspect(engine)
        if not inspector.has_table(EMPLOYEES_TABLE):
            logger.info("Creating employees table...")
            Base.metadata.create_all(bind=engine, tables=[Employee.__table__])
            applied.append("create_table:employees")
            logger.info("Employees table created successfully.")
        else:
            columns = {c["name"] for c in inspector.get_columns(EMPLOYEES_TABLE)}
            if "profile_image" not in columns:
                logger.info("Adding profile_image column to employees table...")
                with engine.begin() as conn:
                    conn.execute(text("ALTER TABLE employees ADD COLUMN profile_image VARCHAR(255)"))
                applied.append("add_column:profile_image")
                logger.info("profile_image column added successfully.")
    except SQLAlchemyError as e:
        logger.error("Error initializing database:")
        logger.error(traceback.format_exc())
        raise SchemaBootstrapError(f"Schema bootstrap failed: {e}") from e

    logger.info("Database initialization complete")
    return applied
