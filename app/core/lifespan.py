from contextlib import asynccontextmanager
import logging

from app.core.config import settings
from app.storage.users import close_user_store, get_user_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = get_user_store()
    logger.info(
        "startup provider=%s users_db=%s rate_limit=%s",
        settings.ai_provider,
        store.db_path,
        settings.rate_limit if settings.rate_limit_enabled else "off",
    )
    yield
    close_user_store()
