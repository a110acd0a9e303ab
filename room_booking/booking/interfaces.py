"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Type, TypeVar

from ..shared_kernel import DateRange, EntityId, SortDirection
from .domain import Booking, Record, Room, User

T_Record = TypeVar("T_Record", bound=Record)


class IRoomBookingRepository(Protocol):
    """Интерфейс репозитория записей приложения."""

    async def create(self, entity: T_Record) -> T_Record: ...
    async def query_all(self, entity_type: Type[T_Record]) -> List[T_Record]: ...
    async def query_by_user_and_sort(
        self,
        guest_id: EntityId,
        sort_field: str = "check_in_date",
        direction: SortDirection = SortDirection.ASCENDING,
    ) -> List[Booking]: ...
    async def query_user_by_id(self, user_id: EntityId) -> User | None: ...
    async def query_room_by_id(self, room_id: EntityId) -> Room | None: ...
    async def find_overlapping_bookings(
        self,
        room_id: EntityId,
        period: DateRange,
        exclude_booking_id: Optional[EntityId] = None,
    ) -> List[Booking]: ...
