"""
Модуль контекста бронирования (Booking Context).

Отвечает за работу с номерами и бронированиями, включая:
- Вход пользователя и создание его записи при первом входе
- Просмотр списка номеров
- Создание бронирований и просмотр бронирований гостя
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
