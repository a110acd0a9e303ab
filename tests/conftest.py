"""
Общие фикстуры для тестов приложения бронирования.
"""
import asyncio
from datetime import date

import pytest

from room_booking.booking.application import (
    BookingApplicationService,
    LoginService,
    RoomApplicationService,
    SessionManager,
)
from room_booking.booking.domain import BookingService, Room, User
from room_booking.booking.infrastructure import DataStoreRepository
from room_booking.datastore.infrastructure import InMemoryDataStore


class SlowDataStore(InMemoryDataStore):
    """Хранилище, отвечающее дольше таймаута репозитория."""

    async def query(self, *args, **kwargs):
        await asyncio.sleep(1)
        return await super().query(*args, **kwargs)

    async def query_by_id(self, *args, **kwargs):
        await asyncio.sleep(1)
        return await super().query_by_id(*args, **kwargs)


class YieldingDataStore(InMemoryDataStore):
    """Хранилище, уступающее управление циклу событий перед каждой операцией."""

    async def save(self, record):
        await asyncio.sleep(0)
        return await super().save(record)

    async def query_by_id(self, *args, **kwargs):
        await asyncio.sleep(0)
        return await super().query_by_id(*args, **kwargs)


class UnreachableDataStore(InMemoryDataStore):
    """Хранилище, к которому невозможно подключиться."""

    async def save(self, record):
        raise ConnectionError("сеть недоступна")

    async def query(self, *args, **kwargs):
        raise ConnectionError("сеть недоступна")

    async def query_by_id(self, *args, **kwargs):
        raise ConnectionError("сеть недоступна")


@pytest.fixture
def store() -> InMemoryDataStore:
    return InMemoryDataStore()


@pytest.fixture
def repository(store: InMemoryDataStore) -> DataStoreRepository:
    return DataStoreRepository(store, timeout=1.0)


@pytest.fixture
def session() -> SessionManager:
    return SessionManager()


@pytest.fixture
def login_service(repository, session) -> LoginService:
    return LoginService(repository, session)


@pytest.fixture
def room_service(repository) -> RoomApplicationService:
    return RoomApplicationService(repository)


@pytest.fixture
def booking_service(repository, session) -> BookingApplicationService:
    return BookingApplicationService(repository, session, BookingService(repository))


@pytest.fixture
def la_room() -> Room:
    return Room.create(
        description="One king size bed",
        city="Los Angeles",
        price=100,
        image_key="stockphoto-1",
    )


@pytest.fixture
def alice() -> User:
    return User.for_username("alice")


@pytest.fixture
def check_in() -> date:
    return date(2024, 1, 10)


@pytest.fixture
def check_out() -> date:
    return date(2024, 1, 12)


@pytest.fixture
def slow_repository() -> DataStoreRepository:
    return DataStoreRepository(SlowDataStore(), timeout=0.01)


@pytest.fixture
def unreachable_repository() -> DataStoreRepository:
    return DataStoreRepository(UnreachableDataStore(), timeout=1.0)


@pytest.fixture
def hanging_repository() -> DataStoreRepository:
    return DataStoreRepository(SlowDataStore(), timeout=5.0)


@pytest.fixture
def yielding_repository() -> DataStoreRepository:
    return DataStoreRepository(YieldingDataStore(), timeout=1.0)
