"""Application bootstrap: logging, storage and the AI gateway wired into a controller."""

import logging
from typing import Optional

from evolua.config import Settings, get_settings
from evolua.database import init_db, make_engine, make_sessionmaker
from evolua.services.ai_gateway import AIGateway, LLMGateway
from evolua.services.app_controller import AppController
from evolua.services.state_store import StateStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.APP_DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
    )


async def create_controller(
    settings: Optional[Settings] = None,
    gateway: Optional[AIGateway] = None,
) -> AppController:
    """
    Build a controller with saved state loaded. Tables are created on first run.

    The controller owns the database engine; call `aclose()` when done.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    engine = make_engine(settings.DATABASE_URL)
    await init_db(engine)
    store = StateStore(make_sessionmaker(engine), engine=engine)

    controller = await AppController.load(
        store, gateway or LLMGateway(history_window=settings.COACH_HISTORY_WINDOW)
    )
    if controller.needs_onboarding:
        logger.info("No saved profile – onboarding required")
    else:
        logger.info("Welcome back, %s", controller.state.user.name)
    return controller
