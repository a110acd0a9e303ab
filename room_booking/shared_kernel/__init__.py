"""
Общее ядро (Shared Kernel) приложения бронирования номеров.

Содержит общие типы данных, исключения и утилиты.
"""

from .domain import (
    DateRange,
    # Исключения
    DomainException,
    # Базовые типы
    EntityId,
    NotFoundError,
    NotLoggedInError,
    SortDirection,
    StoreConfigurationError,
    StoreError,
    ValidationError,
    # Утилиты
    days_from_today,
    generate_id,
    today,
)

__all__ = [
    # Базовые типы
    "EntityId",
    "generate_id",
    "DateRange",
    "SortDirection",
    # Исключения
    "DomainException",
    "ValidationError",
    "NotFoundError",
    "NotLoggedInError",
    "StoreError",
    "StoreConfigurationError",
    # Утилиты
    "today",
    "days_from_today",
]
