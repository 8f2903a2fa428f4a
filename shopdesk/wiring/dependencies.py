from datetime import datetime
from functools import lru_cache
import logging
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shopdesk.application.ports.auth import AuthPort
from shopdesk.application.ports.inventory_gateway import InventoryGatewayPort
from shopdesk.application.ports.llm import ContentGeneratorPort
from shopdesk.application.ports.persistence import SalonPersistencePort
from shopdesk.application.ports.session_store import SessionStorePort
from shopdesk.application.use_cases.auth import AuthUseCase
from shopdesk.application.use_cases.expand_idea import ExpandIdeaUseCase
from shopdesk.application.use_cases.inventory_session import InventoryUseCase
from shopdesk.application.use_cases.salon_session import SalonUseCase
from shopdesk.core.config import settings
from shopdesk.domain.entities.shop_settings import ShopSettings
from shopdesk.domain.entities.store_state import AppState
from shopdesk.domain.entities.user import User
from shopdesk.infrastructure.llm.mock_content import MockContentGenerator
from shopdesk.infrastructure.llm.openai_content import OpenAIContentGenerator
from shopdesk.infrastructure.sheets.apps_script_client import AppsScriptClient
from shopdesk.infrastructure.sheets.auth_gateway import SheetsAuthGateway
from shopdesk.infrastructure.sheets.inventory_gateway import SheetsInventoryGateway
from shopdesk.infrastructure.sheets.salon_gateway import SheetsSalonPersistence
from shopdesk.infrastructure.store.json_store import JsonSessionStore
from shopdesk.infrastructure.store.memory_store import (
    MemoryAuthGateway,
    MemoryInventoryGateway,
    MemorySalonPersistence,
    MemorySessionStore,
)

logger = logging.getLogger(__name__)


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def get_timezone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.BUSINESS_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown BUSINESS_TIMEZONE, using UTC", extra={"reason": settings.BUSINESS_TIMEZONE})
        return ZoneInfo("UTC")


def get_clock() -> Callable[[], datetime]:
    tz = get_timezone()
    return lambda: datetime.now(tz)


@lru_cache
def get_app_state() -> AppState:
    return AppState(settings=ShopSettings(product_sales_enabled=settings.PRODUCT_SALES_ENABLED))


@lru_cache
def get_llm() -> ContentGeneratorPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAIContentGenerator()
    return MockContentGenerator()


@lru_cache
def get_auth_gateway() -> AuthPort:
    if not settings.SHEETS_API_URL:
        if not _is_local():
            raise ValueError("SHEETS_API_URL is required outside dev/local.")
        logger.info("Using MemoryAuthGateway (SHEETS_API_URL missing, ENV=dev/local)")
        return MemoryAuthGateway()
    return SheetsAuthGateway(AppsScriptClient(settings.SHEETS_API_URL, timeout=settings.SHEETS_TIMEOUT_SECONDS))


@lru_cache
def get_session_store() -> SessionStorePort:
    if _is_local() and not settings.SHEETS_API_URL:
        return MemorySessionStore()
    return JsonSessionStore(settings.SESSION_FILE)


@lru_cache
def get_memory_salon_persistence() -> MemorySalonPersistence:
    return MemorySalonPersistence()


def build_salon_persistence(user: User) -> SalonPersistencePort | None:
    if not user.has_backend:
        return None
    if str(user.sheet_url).startswith("memory://"):
        return get_memory_salon_persistence()
    client = AppsScriptClient(str(user.sheet_url), timeout=settings.SHEETS_TIMEOUT_SECONDS)
    return SheetsSalonPersistence(client, str(user.sheet_id))


@lru_cache
def get_inventory_gateway() -> InventoryGatewayPort:
    if not settings.INVENTORY_API_URL:
        logger.info("Using MemoryInventoryGateway (INVENTORY_API_URL missing)")
        return MemoryInventoryGateway()
    return SheetsInventoryGateway(AppsScriptClient(settings.INVENTORY_API_URL, timeout=settings.SHEETS_TIMEOUT_SECONDS))


@lru_cache
def get_salon_use_case() -> SalonUseCase:
    return SalonUseCase(
        state=get_app_state(),
        persistence_factory=build_salon_persistence,
        timezone=get_timezone(),
    )


@lru_cache
def get_auth_use_case() -> AuthUseCase:
    return AuthUseCase(
        auth=get_auth_gateway(),
        sessions=get_session_store(),
        salon=get_salon_use_case(),
        default_sheet_url=settings.SHEETS_API_URL,
    )


@lru_cache
def get_inventory_use_case() -> InventoryUseCase:
    return InventoryUseCase(state=get_app_state(), gateway=get_inventory_gateway(), timezone=get_timezone())


def get_expand_idea_use_case() -> ExpandIdeaUseCase:
    return ExpandIdeaUseCase(generator=get_llm())


def startup() -> None:
    """Restore the cached session and load inventory once per process."""
    user = get_auth_use_case().restore_session()
    logger.info("Session restored" if user else "No cached session")
    get_inventory_use_case().load()
