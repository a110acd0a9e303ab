"""
Настройки приложения.

Значения читаются из переменных окружения с префиксом ROOM_BOOKING_
и из файла .env в рабочей директории.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Настройки хранилища, журнала и политик бронирования."""

    model_config = SettingsConfigDict(
        env_prefix="ROOM_BOOKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Хранилище: "memory" или "json"
    store_backend: str = "memory"
    store_path: str = "data/room_booking.json"
    store_timeout_seconds: float = Field(5.0, gt=0)

    seed_rooms: bool = True
    # Отклонять бронирования, пересекающиеся по датам с существующими
    enforce_availability: bool = False

    log_level: str = "INFO"
