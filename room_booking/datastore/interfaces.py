"""
Интерфейсы (порты) хранилища данных.

Хранилище синхронизирует записи приложения (пользователей, номера,
бронирования). Конкретная реализация подставляется при запуске.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel

from ..shared_kernel import EntityId, SortDirection

T_Record = TypeVar("T_Record", bound=BaseModel)


class SortBy(BaseModel):
    """Порядок сортировки результатов запроса."""

    field: str
    direction: SortDirection = SortDirection.ASCENDING

    @classmethod
    def ascending(cls, field: str) -> "SortBy":
        return cls(field=field, direction=SortDirection.ASCENDING)

    @classmethod
    def descending(cls, field: str) -> "SortBy":
        return cls(field=field, direction=SortDirection.DESCENDING)


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IDataStore(Protocol):
    """Интерфейс хранилища записей."""

    async def save(self, record: T_Record) -> T_Record: ...
    async def query(
        self,
        model_type: Type[T_Record],
        where: Optional[Dict[str, Any]] = None,
        sort: Optional[SortBy] = None,
    ) -> List[T_Record]: ...
    async def query_by_id(
        self, model_type: Type[T_Record], record_id: EntityId
    ) -> Optional[T_Record]: ...
