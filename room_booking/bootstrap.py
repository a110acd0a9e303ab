from typing import Any, Dict, Optional

from .booking.application import (
    BookingApplicationService,
    LoginService,
    RoomApplicationService,
    SessionManager,
)
from .booking.domain import BookingService
from .booking.infrastructure import DataSeeder, DataStoreRepository
from .config import Settings
from .datastore import interfaces as store_ports
from .datastore.infrastructure import ConsoleLogger, configure_logging, create_data_store
from .shared_kernel import StoreConfigurationError, StoreError


async def bootstrap_app(
    settings: Optional[Settings] = None,
    store: Optional[store_ports.IDataStore] = None,
) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or Settings()
    configure_logging(settings.log_level)
    logger = ConsoleLogger()

    # 1. Создаем хранилище; без него приложение не запускается
    if store is None:
        try:
            store = create_data_store(
                settings.store_backend, settings.store_path, logger=logger
            )
        except StoreConfigurationError as e:
            logger.error(f"Не удалось настроить хранилище: {str(e)}")
            raise
    logger.info("Хранилище настроено", backend=type(store).__name__)

    # 2. Создаем репозиторий и сервисы, передавая им зависимости
    repository = DataStoreRepository(
        store, timeout=settings.store_timeout_seconds, logger=logger
    )
    session = SessionManager()
    booking_service = BookingService(
        repository, enforce_availability=settings.enforce_availability
    )

    # 3. Заполняем пустое хранилище тестовыми номерами
    # Ошибка заполнения не мешает запуску, если хранилище не повреждено
    if settings.seed_rooms:
        try:
            await DataSeeder(repository, logger=logger).seed_rooms_if_needed()
        except StoreConfigurationError as e:
            logger.error(f"Хранилище повреждено: {str(e)}")
            raise
        except StoreError as e:
            logger.warning(f"Не удалось заполнить хранилище: {str(e)}")

    return {
        "store": store,
        "repository": repository,
        "session": session,
        "login_service": LoginService(repository, session, logger=logger),
        "room_service": RoomApplicationService(repository, logger=logger),
        "booking_service": BookingApplicationService(
            repository, session, booking_service=booking_service, logger=logger
        ),
    }
