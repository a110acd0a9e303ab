"""
Доменная модель контекста бронирования.

Содержит записи пользователя, номера и бронирования, а также
доменный сервис создания бронирований.
"""

from datetime import date
from typing import TYPE_CHECKING, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..shared_kernel import DateRange, EntityId, ValidationError, generate_id

if TYPE_CHECKING:
    from .interfaces import IRoomBookingRepository


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Формирует читаемое сообщение из ошибки валидации pydantic."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        problems.append(f"{location}: {message}" if location else message)
    return "; ".join(problems)


class Record(BaseModel):
    """Базовая запись хранилища с неизменяемыми полями."""

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(default_factory=generate_id, min_length=1)

    @classmethod
    def create(cls, **data: Any):
        """Создает запись, переводя ошибки pydantic в ValidationError."""
        try:
            return cls(**data)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Некорректные данные {cls.__name__}: {describe_validation_error(exc)}"
            ) from exc

    def validated(self):
        """Повторно проверяет поля записи перед сохранением."""
        type(self).create(**self.model_dump())
        return self


class User(Record):
    """Пользователь приложения. Идентификатор совпадает с именем."""

    username: str = Field(..., min_length=1)

    @classmethod
    def for_username(cls, username: str) -> "User":
        return cls.create(id=username, username=username)


class Room(Record):
    """Номер, доступный для бронирования."""

    description: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)  # Цена за ночь в целых единицах валюты
    image_key: str = Field(..., min_length=1)  # Ключ внешнего изображения


class Booking(Record):
    """Бронирование номера гостем."""

    # Снимок номера на момент бронирования
    room: Room
    guest_id: EntityId = Field(..., min_length=1)
    check_in_date: date
    check_out_date: date

    @model_validator(mode="after")
    def check_out_after_check_in(self) -> "Booking":
        if self.check_out_date <= self.check_in_date:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return self

    @property
    def period(self) -> DateRange:
        """Период проживания."""
        return DateRange(check_in=self.check_in_date, check_out=self.check_out_date)

    @classmethod
    def for_guest(
        cls, room: Room, guest: User, check_in: date, check_out: date
    ) -> "Booking":
        """Создает новое бронирование номера для пользователя."""
        return cls.create(
            room=room,
            guest_id=guest.id,
            check_in_date=check_in,
            check_out_date=check_out,
        )


class BookingService:
    """Доменный сервис для работы с бронированиями."""

    def __init__(
        self,
        repository: "IRoomBookingRepository",
        enforce_availability: bool = False,
    ):
        self.repository = repository
        # Проверка пересечений выключена по умолчанию: повторные брони
        # одного номера на те же даты принимаются
        self.enforce_availability = enforce_availability

    async def create_booking(
        self, room: Room, guest: User, check_in: date, check_out: date
    ) -> Booking:
        """Создает и сохраняет новое бронирование."""
        booking = Booking.for_guest(room, guest, check_in, check_out)

        if self.enforce_availability and not await self.is_room_available(
            room.id, booking.period
        ):
            raise ValidationError(
                f"Номер {room.description} ({room.city}) уже забронирован "
                f"на выбранные даты"
            )

        return await self.repository.create(booking)

    async def is_room_available(
        self,
        room_id: EntityId,
        period: DateRange,
        exclude_booking_id: Optional[EntityId] = None,
    ) -> bool:
        """Проверяет, свободен ли номер на указанные даты."""
        overlapping: List[Booking] = await self.repository.find_overlapping_bookings(
            room_id=room_id,
            period=period,
            exclude_booking_id=exclude_booking_id,
        )
        return not overlapping
