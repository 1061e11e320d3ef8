import logging
import os
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from dotenv import load_dotenv

load_dotenv()

MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017/youth_compliance")

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None


def _database_name() -> str:
    return MONGODB_URL.rsplit("/", 1)[-1].split("?")[0]


async def init_db():
    global _client

    from .models import (
        WorkerDoc,
        WorkerDocumentDoc,
        TaskCodeDoc,
        TimesheetDoc,
        ComplianceRuleDoc,
        ComplianceCheckLogDoc,
    )

    _client = AsyncIOMotorClient(MONGODB_URL)
    database = _client[_database_name()]

    await init_beanie(
        database=database,
        document_models=[
            WorkerDoc,
            WorkerDocumentDoc,
            TaskCodeDoc,
            TimesheetDoc,
            ComplianceRuleDoc,
            ComplianceCheckLogDoc,
        ],
    )
    logger.info("Connected to MongoDB database %s", _database_name())

    return database


async def close_db():
    global _client
    if _client is not None:
        _client.close()
        _client = None
