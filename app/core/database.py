import logging

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from app.core.config import settings
from app.models.user import User
from app.models.inventory import InventoryItem
from app.models.purchase import Purchase
from app.models.sale import Sale
from app.models.order import Order
from app.models.document import StoredDocument
from app.models.activity_log import ActivityLog
from app.models.company import CompanyInfo

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [
    User,
    InventoryItem,
    Purchase,
    Sale,
    Order,
    StoredDocument,
    ActivityLog,
    CompanyInfo,
]


async def init_db(database=None):
    """Connect to MongoDB and initialize Beanie.

    ``database`` lets callers hand in an already-open database (scripts,
    tests); otherwise one is opened from ``MONGODB_URI``.
    """
    if database is None:
        if not settings.MONGODB_URI:
            raise RuntimeError("MONGODB_URI is not set.")

        client = AsyncIOMotorClient(settings.MONGODB_URI)
        # A database named in the URI wins over DATABASE_NAME
        database = client.get_default_database(settings.DATABASE_NAME)

    await init_beanie(database=database, document_models=DOCUMENT_MODELS)

    logger.info("Beanie initialized with database: %s", database.name)
    return database
