"""
Прикладной слой контекста бронирования.

Содержит сервисы приложения, которые координируют
взаимодействие между внешними интерфейсами и доменной моделью:
вход пользователя, список номеров, создание и просмотр бронирований.
"""

from datetime import date, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..datastore import interfaces as store_ports
from ..datastore.infrastructure import ConsoleLogger
from ..shared_kernel import (
    DomainException,
    EntityId,
    NotFoundError,
    NotLoggedInError,
    SortDirection,
    StoreError,
    ValidationError,
    days_from_today,
)
from . import interfaces as ports
from .domain import Booking, BookingService, Room, User, describe_validation_error

# Даты бронирования, предлагаемые по умолчанию (дней от сегодняшнего)
DEFAULT_CHECK_IN_OFFSET_DAYS = 15
DEFAULT_CHECK_OUT_OFFSET_DAYS = 18
DEFAULT_STAY_NIGHTS = DEFAULT_CHECK_OUT_OFFSET_DAYS - DEFAULT_CHECK_IN_OFFSET_DAYS


def default_booking_period() -> tuple[date, date]:
    """Возвращает даты заезда и выезда, предлагаемые по умолчанию."""
    return (
        days_from_today(DEFAULT_CHECK_IN_OFFSET_DAYS),
        days_from_today(DEFAULT_CHECK_OUT_OFFSET_DAYS),
    )


# DTO (Data Transfer Objects) для входящих данных


class CreateBookingRequest(BaseModel):
    """Запрос на создание бронирования."""

    room_id: EntityId
    check_in: date
    check_out: date

    @model_validator(mode="after")
    def check_out_after_check_in(self) -> "CreateBookingRequest":
        if self.check_out <= self.check_in:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return self

    @classmethod
    def parse(cls, **data) -> "CreateBookingRequest":
        try:
            return cls(**data)
        except PydanticValidationError as exc:
            raise ValidationError(describe_validation_error(exc)) from exc


# DTO для исходящих данных


class RoomDTO(BaseModel):
    """DTO для представления номера в списке."""

    id: EntityId
    description: str
    city: str
    price: int
    image_key: str
    title: str
    price_label: str

    @classmethod
    def from_domain(cls, room: Room) -> "RoomDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=room.id,
            description=room.description,
            city=room.city,
            price=room.price,
            image_key=room.image_key,
            title=f"{room.description} - {room.city}",
            price_label=f"${room.price} / night",
        )


class BookingDTO(BaseModel):
    """DTO для представления бронирования."""

    id: EntityId
    room: RoomDTO
    guest_id: EntityId
    check_in_date: date
    check_out_date: date
    nights: int
    booking_description: str

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=booking.id,
            room=RoomDTO.from_domain(booking.room),
            guest_id=booking.guest_id,
            check_in_date=booking.check_in_date,
            check_out_date=booking.check_out_date,
            nights=booking.period.nights,
            booking_description=(
                f"Booked from {booking.check_in_date.isoformat()} "
                f"to {booking.check_out_date.isoformat()}"
            ),
        )


# Сессия


class LoginState(str, Enum):
    """Состояния входа пользователя."""

    LOGGED_OUT = "logged_out"
    LOOKING_UP_USER = "looking_up_user"
    CREATING_USER = "creating_user"
    LOGGED_IN = "logged_in"


class SessionManager:
    """Хранит текущего пользователя на время работы приложения."""

    def __init__(self) -> None:
        self._current_user: Optional[User] = None
        self.state = LoginState.LOGGED_OUT

    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    @property
    def is_logged_in(self) -> bool:
        return self.state == LoginState.LOGGED_IN

    def require_user(self) -> User:
        """Возвращает текущего пользователя или ошибку, если вход не выполнен."""
        if self._current_user is None:
            raise NotLoggedInError("Пользователь не выполнил вход")
        return self._current_user

    def log_in(self, user: User) -> None:
        self._current_user = user
        self.state = LoginState.LOGGED_IN

    def logout(self) -> None:
        self._current_user = None
        self.state = LoginState.LOGGED_OUT


# Сервисы приложения


class LoginService:
    """Вход по имени пользователя с созданием записи при первом входе."""

    def __init__(
        self,
        repository: ports.IRoomBookingRepository,
        session: SessionManager,
        logger: Optional[store_ports.ILogger] = None,
    ):
        self._repository = repository
        self._session = session
        self._logger = logger or ConsoleLogger()

    async def login(self, username: str) -> User:
        """
        Выполняет вход пользователя.

        Пароль не проверяется: имя пользователя и есть его идентификатор.
        Если пользователя нет в хранилище, он создается.
        При ошибке или отмене сессия возвращается в LOGGED_OUT,
        если ее не успел заполнить другой вход.
        """
        if not username:
            raise ValidationError("Имя пользователя не может быть пустым")

        self._session.state = LoginState.LOOKING_UP_USER
        try:
            user = await self._repository.query_user_by_id(username)

            if user is not None:
                self._logger.info("Найден пользователь", user_id=user.id)
            else:
                self._session.state = LoginState.CREATING_USER
                user = await self._create_user(username)

            self._session.log_in(user)
            return user

        except Exception as e:
            self._logger.error(f"Ошибка при входе пользователя: {str(e)}")
            raise

        finally:
            if self._session.state in (
                LoginState.LOOKING_UP_USER,
                LoginState.CREATING_USER,
            ):
                self._session.logout()

    async def _create_user(self, username: str) -> User:
        """Создает пользователя или возвращает созданного параллельным входом."""
        try:
            user = await self._repository.create(User.for_username(username))
        except StoreError:
            # Запись могла появиться между поиском и созданием
            user = await self._repository.query_user_by_id(username)
            if user is None:
                raise
            self._logger.info("Пользователь создан параллельным входом",
                              user_id=user.id)
            return user

        self._logger.info("Создан пользователь", user_id=user.id)
        return user


class RoomApplicationService:
    """Сервис приложения для просмотра номеров."""

    def __init__(
        self,
        repository: ports.IRoomBookingRepository,
        logger: Optional[store_ports.ILogger] = None,
    ):
        self._repository = repository
        self._logger = logger or ConsoleLogger()

    async def list_rooms(self) -> List[RoomDTO]:
        """Возвращает все номера."""
        try:
            rooms = await self._repository.query_all(Room)
        except DomainException as e:
            self._logger.error(f"Ошибка при получении списка номеров: {str(e)}")
            raise
        return [RoomDTO.from_domain(room) for room in rooms]

    async def get_room(self, room_id: EntityId) -> Room:
        """Возвращает номер по идентификатору."""
        room = await self._repository.query_room_by_id(room_id)
        if room is None:
            raise NotFoundError(f"Room with id {room_id} not found")
        return room


class BookingApplicationService:
    """Сервис приложения для работы с бронированиями текущего пользователя."""

    def __init__(
        self,
        repository: ports.IRoomBookingRepository,
        session: SessionManager,
        booking_service: Optional[BookingService] = None,
        logger: Optional[store_ports.ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._repository = repository
        self._session = session
        self._booking_service = booking_service or BookingService(repository)
        self._logger = logger or ConsoleLogger()

    async def book_room(
        self,
        room: Room,
        check_in: Optional[date] = None,
        check_out: Optional[date] = None,
    ) -> BookingDTO:
        """
        Бронирует номер для текущего пользователя.

        Без дат используется период по умолчанию. Если задана только дата
        заезда, выезд назначается через DEFAULT_STAY_NIGHTS ночей.
        """
        user = self._session.require_user()
        if check_in is None:
            check_in, default_check_out = default_booking_period()
        else:
            default_check_out = check_in + timedelta(days=DEFAULT_STAY_NIGHTS)

        try:
            booking = await self._booking_service.create_booking(
                room=room,
                guest=user,
                check_in=check_in,
                check_out=check_out or default_check_out,
            )
        except DomainException as e:
            self._logger.error(f"Ошибка при создании бронирования: {str(e)}")
            raise

        self._logger.info("Номер забронирован", booking_id=booking.id, room_id=room.id)
        return BookingDTO.from_domain(booking)

    async def create_booking(self, request: CreateBookingRequest) -> BookingDTO:
        """Создает бронирование по запросу с идентификатором номера."""
        room = await self._repository.query_room_by_id(request.room_id)
        if room is None:
            raise NotFoundError(f"Room with id {request.room_id} not found")
        return await self.book_room(room, request.check_in, request.check_out)

    async def list_my_bookings(
        self, direction: SortDirection = SortDirection.ASCENDING
    ) -> List[BookingDTO]:
        """Возвращает бронирования текущего пользователя по дате заезда."""
        user = self._session.require_user()
        try:
            bookings = await self._repository.query_by_user_and_sort(
                user.id, "check_in_date", direction
            )
        except DomainException as e:
            self._logger.error(f"Ошибка при получении бронирований: {str(e)}")
            raise
        return [BookingDTO.from_domain(booking) for booking in bookings]
