"""
Тесты для репозитория поверх хранилища и заполнения тестовыми номерами.
"""
from datetime import date

import pytest

from room_booking.booking.domain import Booking, Room, User
from room_booking.booking.infrastructure import (
    SAMPLE_ROOMS,
    DataSeeder,
    DataStoreRepository,
)
from room_booking.datastore.infrastructure import InMemoryDataStore
from room_booking.shared_kernel import (
    DateRange,
    SortDirection,
    StoreError,
    ValidationError,
)


class InterruptedDataStore(InMemoryDataStore):
    """Хранилище, теряющее соединение на второй записи."""

    def __init__(self):
        super().__init__()
        self.saves = 0

    async def save(self, record):
        self.saves += 1
        if self.saves == 2:
            raise ConnectionError("соединение разорвано")
        return await super().save(record)


def booking_for(room: Room, guest_id: str, check_in: date, nights: int = 2) -> Booking:
    return Booking.create(
        room=room,
        guest_id=guest_id,
        check_in_date=check_in,
        check_out_date=date.fromordinal(check_in.toordinal() + nights),
    )


class TestDataStoreRepository:
    """Тесты для DataStoreRepository."""

    async def test_create_room_returns_input_fields(self, repository, la_room):
        saved = await repository.create(la_room)

        assert saved.description == la_room.description
        assert saved.city == la_room.city
        assert saved.price == la_room.price
        assert saved.image_key == la_room.image_key
        assert saved.id == la_room.id

    async def test_create_rejects_invalid_record(self, repository):
        # model_construct обходит проверки при создании записи
        broken = Room.model_construct(
            id="r1", description="", city="Pasadena", price=-5, image_key="img"
        )

        with pytest.raises(ValidationError):
            await repository.create(broken)

        assert await repository.query_all(Room) == []

    async def test_create_rejects_unknown_entity_type(self, repository):
        with pytest.raises(ValidationError, match="Неизвестный тип записи"):
            await repository.create(DateRange(check_in=date(2024, 1, 1),
                                              check_out=date(2024, 1, 2)))

    async def test_query_all_returns_every_room(self, repository, la_room):
        other = Room.create(
            description="Whole studio apartment",
            city="El Segundo",
            price=120,
            image_key="stockphoto-3",
        )
        await repository.create(la_room)
        await repository.create(other)

        rooms = await repository.query_all(Room)

        assert {room.id for room in rooms} == {la_room.id, other.id}

    async def test_query_by_user_filters_by_guest(self, repository, la_room):
        await repository.create(booking_for(la_room, "alice", date(2024, 1, 10)))
        await repository.create(booking_for(la_room, "bob", date(2024, 1, 5)))
        await repository.create(booking_for(la_room, "alice", date(2024, 2, 1)))

        bookings = await repository.query_by_user_and_sort("alice")

        assert len(bookings) == 2
        assert all(booking.guest_id == "alice" for booking in bookings)

    async def test_query_by_user_sorts_ascending(self, repository, la_room):
        for check_in in (date(2024, 3, 1), date(2024, 1, 1), date(2024, 2, 1)):
            await repository.create(booking_for(la_room, "alice", check_in))

        bookings = await repository.query_by_user_and_sort(
            "alice", "check_in_date", SortDirection.ASCENDING
        )

        dates = [booking.check_in_date for booking in bookings]
        assert dates == sorted(dates)

    async def test_query_by_user_sorts_descending(self, repository, la_room):
        for check_in in (date(2024, 3, 1), date(2024, 1, 1), date(2024, 2, 1)):
            await repository.create(booking_for(la_room, "alice", check_in))

        bookings = await repository.query_by_user_and_sort(
            "alice", "check_in_date", SortDirection.DESCENDING
        )

        dates = [booking.check_in_date for booking in bookings]
        assert dates == sorted(dates, reverse=True)

    async def test_query_by_user_without_bookings(self, repository):
        assert await repository.query_by_user_and_sort("nobody") == []

    async def test_query_user_by_id(self, repository, alice):
        assert await repository.query_user_by_id("alice") is None

        await repository.create(alice)

        assert await repository.query_user_by_id("alice") is alice

    async def test_duplicate_user_is_store_error(self, repository, alice):
        await repository.create(alice)
        with pytest.raises(StoreError):
            await repository.create(User.for_username("alice"))

    async def test_find_overlapping_bookings(self, repository, la_room):
        existing = await repository.create(
            booking_for(la_room, "alice", date(2024, 1, 10))
        )
        period = DateRange(check_in=date(2024, 1, 11), check_out=date(2024, 1, 13))

        assert await repository.find_overlapping_bookings(la_room.id, period) == [
            existing
        ]
        assert (
            await repository.find_overlapping_bookings(
                la_room.id, period, exclude_booking_id=existing.id
            )
            == []
        )
        assert await repository.find_overlapping_bookings("other-room", period) == []

    async def test_timeout_is_store_error(self, slow_repository):
        with pytest.raises(StoreError, match="не завершилась"):
            await slow_repository.query_all(Room)

    async def test_unreachable_store_is_store_error(self, unreachable_repository):
        with pytest.raises(StoreError, match="Хранилище недоступно"):
            await unreachable_repository.query_user_by_id("alice")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            DataStoreRepository(InMemoryDataStore(), timeout=0)


class TestDataSeeder:
    """Тесты для DataSeeder."""

    async def test_seeds_empty_store(self, repository):
        seeded = await DataSeeder(repository).seed_rooms_if_needed()

        rooms = await repository.query_all(Room)
        assert len(seeded) == 3
        assert len(rooms) == 3
        assert sorted(
            (room.description, room.city, room.price, room.image_key)
            for room in rooms
        ) == sorted(
            (data["description"], data["city"], data["price"], data["image_key"])
            for data in SAMPLE_ROOMS
        )

    def test_sample_rooms(self):
        assert [(data["city"], data["price"]) for data in SAMPLE_ROOMS] == [
            ("Los Angeles", 100),
            ("Pasadena", 64),
            ("El Segundo", 120),
        ]

    async def test_seeding_twice_is_idempotent(self, repository):
        seeder = DataSeeder(repository)
        await seeder.seed_rooms_if_needed()

        assert await seeder.seed_rooms_if_needed() == []
        assert len(await repository.query_all(Room)) == 3

    async def test_interrupted_seeding_is_not_resumed(self):
        """Частично заполненное хранилище считается заполненным."""
        repository = DataStoreRepository(InterruptedDataStore())
        seeder = DataSeeder(repository)

        with pytest.raises(StoreError):
            await seeder.seed_rooms_if_needed()

        assert await seeder.seed_rooms_if_needed() == []
        assert len(await repository.query_all(Room)) == 1

    async def test_non_empty_store_is_not_seeded(self, repository, la_room):
        await repository.create(la_room)

        assert await DataSeeder(repository).seed_rooms_if_needed() == []
        assert await repository.query_all(Room) == [la_room]
