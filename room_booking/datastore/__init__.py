"""
Модуль хранилища данных.

Отвечает за сохранение записей и запросы к ним с фильтрацией
и сортировкой. Реализации хранилища взаимозаменяемы.
"""

from . import infrastructure, interfaces

__all__ = [
    "infrastructure",
    "interfaces",
]
