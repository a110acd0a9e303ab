"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import date, timedelta
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, model_validator

# Идентификаторы записей хранилища - строки (UUID или имя пользователя)
EntityId = str


def generate_id() -> EntityId:
    """Генерирует новый уникальный идентификатор записи."""
    return str(uuid4())


class DateRange(BaseModel):
    """Диапазон дат проживания."""

    check_in: date
    check_out: date

    @model_validator(mode="after")
    def check_out_after_check_in(self) -> "DateRange":
        if self.check_out <= self.check_in:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return self

    @property
    def nights(self) -> int:
        """Количество ночей в бронировании."""
        return (self.check_out - self.check_in).days

    def overlaps(self, other: "DateRange") -> bool:
        """Проверяет пересечение с другим диапазоном (день выезда свободен)."""
        return self.check_in < other.check_out and self.check_out > other.check_in


class SortDirection(str, Enum):
    """Направление сортировки результатов запроса."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class ValidationError(DomainException):
    """Отсутствует обязательное поле или нарушен инвариант записи."""

    pass


class NotFoundError(DomainException):
    """Запись с указанным идентификатором не найдена."""

    pass


class StoreError(DomainException):
    """Хранилище недоступно или отклонило операцию."""

    pass


class StoreConfigurationError(StoreError):
    """Хранилище невозможно сконфигурировать при запуске."""

    pass


class NotLoggedInError(DomainException):
    """Операция требует вошедшего пользователя."""

    pass


# Общие утилиты
def today() -> date:
    """Возвращает текущую дату."""
    return date.today()


def days_from_today(days: int) -> date:
    """Возвращает дату, отстоящую от сегодняшней на указанное число дней."""
    return today() + timedelta(days=days)
