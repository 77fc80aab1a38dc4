import logging
from logging import INFO

from tortoise import Tortoise

from restaurant.core.config import DB_URL

# Set logging level for Tortoise ORM
logging.getLogger('tortoise').setLevel(INFO)
log = logging.getLogger("restaurant.db")

# Define all models modules for the ORM
MODELS_MODULES = [
    "restaurant.models.menu",
    "restaurant.models.table",
    "restaurant.models.order",
    "restaurant.models.reservation",
    "restaurant.models.inventory",
    "restaurant.models.outbox",
]

async def init_db(db_url: str = DB_URL):
    """Initializes the Tortoise ORM connection and generates schemas."""
    try:
        await Tortoise.init(
            db_url=db_url,
            modules={"models": MODELS_MODULES},
        )
        # Generate the database schema (create tables)
        await Tortoise.generate_schemas()
        log.info("Database connection established and schemas generated.")
    except Exception as e:
        log.critical(f"Could not connect to database at {db_url}. Error: {e}")
        # Re-raise to prevent the application from starting without a database
        raise

async def close_db():
    """Closes all database connections."""
    await Tortoise.close_connections()
    log.info("Database connections closed.")
