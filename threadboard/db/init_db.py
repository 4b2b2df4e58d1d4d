import logging

from alembic.config import Config
from alembic import command
from sqlalchemy import inspect

from threadboard.db.session import engine, Base
# Registers every model on Base.metadata
import threadboard.db.base  # noqa: F401

logger = logging.getLogger("threadboard")

def init_db() -> None:
    """
    Initialize the database by running Alembic migrations.
    """
    try:
        alembic_cfg = Config("alembic.ini")
        command.upgrade(alembic_cfg, "head")
        logger.info("Database migrations applied successfully")
    except Exception as e:
        logger.error(f"Error applying database migrations: {e}")
        raise


def create_all_tables(bind=None) -> None:
    bind = bind if bind is not None else engine
    existing_tables = inspect(bind).get_table_names()

    Base.metadata.create_all(bind=bind)

    new_tables = set(inspect(bind).get_table_names()) - set(existing_tables)
    if new_tables:
        logger.info(f"Created new tables: {new_tables}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("Applying database migrations")
    init_db()
    logger.info("Database is up to date")
