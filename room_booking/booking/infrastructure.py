"""
Инфраструктурный слой контекста бронирования.

Содержит реализацию репозитория поверх хранилища данных
и заполнение хранилища тестовыми номерами.
"""
import asyncio
from typing import Awaitable, List, Optional, Type, TypeVar

from ..datastore import interfaces as store_ports
from ..datastore.infrastructure import ConsoleLogger
from ..datastore.interfaces import SortBy
from ..shared_kernel import (
    DateRange,
    EntityId,
    SortDirection,
    StoreError,
    ValidationError,
)
from . import interfaces as ports
from .domain import Booking, Record, Room, User

T = TypeVar("T")
T_Record = TypeVar("T_Record", bound=Record)

DEFAULT_TIMEOUT_SECONDS = 5.0

SAMPLE_ROOMS = [
    {
        "description": "One king size bed",
        "city": "Los Angeles",
        "price": 100,
        "image_key": "stockphoto-1",
    },
    {
        "description": "Two full sized beds",
        "city": "Pasadena",
        "price": 64,
        "image_key": "stockphoto-2",
    },
    {
        "description": "Whole studio apartment",
        "city": "El Segundo",
        "price": 120,
        "image_key": "stockphoto-3",
    },
]


class DataStoreRepository(ports.IRoomBookingRepository):
    """Репозиторий записей приложения поверх хранилища данных."""

    ENTITY_TYPES = (User, Room, Booking)

    def __init__(
        self,
        store: store_ports.IDataStore,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        logger: Optional[store_ports.ILogger] = None,
    ):
        """
        Инициализирует репозиторий.

        Args:
            store: Хранилище записей
            timeout: Предельное время одного обращения к хранилищу, в секундах
            logger: Логгер для ошибок хранилища
        """
        if timeout <= 0:
            raise ValueError("Таймаут хранилища должен быть положительным")
        self._store = store
        self._timeout = timeout
        self._logger = logger or ConsoleLogger()

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Выполняет обращение к хранилищу с ограничением по времени."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            self._logger.error(
                "Хранилище не ответило вовремя",
                operation=operation,
                timeout=self._timeout,
            )
            raise StoreError(
                f"Операция {operation} не завершилась за {self._timeout} с"
            ) from exc
        except StoreError as exc:
            self._logger.error(
                "Ошибка хранилища", operation=operation, error=str(exc)
            )
            raise
        except OSError as exc:
            self._logger.error(
                "Хранилище недоступно", operation=operation, error=str(exc)
            )
            raise StoreError(f"Хранилище недоступно: {exc}") from exc

    def _check_entity_type(self, entity_type: type) -> None:
        if entity_type not in self.ENTITY_TYPES:
            raise ValidationError(f"Неизвестный тип записи: {entity_type.__name__}")

    async def create(self, entity: T_Record) -> T_Record:
        """Проверяет и сохраняет новую запись."""
        self._check_entity_type(type(entity))
        record = entity.validated()
        return await self._call("create", self._store.save(record))

    async def query_all(self, entity_type: Type[T_Record]) -> List[T_Record]:
        """Возвращает все записи указанного типа без гарантии порядка."""
        self._check_entity_type(entity_type)
        return await self._call("query_all", self._store.query(entity_type))

    async def query_by_user_and_sort(
        self,
        guest_id: EntityId,
        sort_field: str = "check_in_date",
        direction: SortDirection = SortDirection.ASCENDING,
    ) -> List[Booking]:
        """Возвращает бронирования гостя, отсортированные по полю."""
        return await self._call(
            "query_by_user_and_sort",
            self._store.query(
                Booking,
                where={"guest_id": guest_id},
                sort=SortBy(field=sort_field, direction=direction),
            ),
        )

    async def query_user_by_id(self, user_id: EntityId) -> Optional[User]:
        """Возвращает пользователя по идентификатору или None."""
        return await self._call(
            "query_user_by_id", self._store.query_by_id(User, user_id)
        )

    async def query_room_by_id(self, room_id: EntityId) -> Optional[Room]:
        """Возвращает номер по идентификатору или None."""
        return await self._call(
            "query_room_by_id", self._store.query_by_id(Room, room_id)
        )

    async def find_overlapping_bookings(
        self,
        room_id: EntityId,
        period: DateRange,
        exclude_booking_id: Optional[EntityId] = None,
    ) -> List[Booking]:
        """Возвращает бронирования номера, пересекающиеся с периодом."""
        bookings = await self._call(
            "find_overlapping_bookings", self._store.query(Booking)
        )
        return [
            booking
            for booking in bookings
            if booking.room.id == room_id
            and booking.id != exclude_booking_id
            and booking.period.overlaps(period)
        ]


class DataSeeder:
    """Заполняет пустое хранилище тестовыми номерами."""

    def __init__(
        self,
        repository: ports.IRoomBookingRepository,
        logger: Optional[store_ports.ILogger] = None,
    ):
        self._repository = repository
        self._logger = logger or ConsoleLogger()

    async def seed_rooms_if_needed(self) -> List[Room]:
        """
        Добавляет тестовые номера, если в хранилище нет ни одного.

        Проверка и запись не атомарны: при одновременном запуске
        нескольких процессов номера могут быть добавлены дважды.
        Номера добавляются по одному: если запись прервется на середине,
        в хранилище останется часть номеров, и последующие запуски
        сочтут его заполненным.

        Returns:
            Список добавленных номеров (пустой, если номера уже были)
        """
        existing = await self._repository.query_all(Room)
        if existing:
            self._logger.debug("Номера уже есть, заполнение пропущено",
                               count=len(existing))
            return []

        seeded = []
        for data in SAMPLE_ROOMS:
            room = await self._repository.create(Room.create(**data))
            seeded.append(room)
        self._logger.info("Добавлены тестовые номера", count=len(seeded))
        return seeded
