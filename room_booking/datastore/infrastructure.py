"""
Инфраструктурный слой хранилища данных.

Содержит реализации хранилища записей (в памяти и в JSON-файле)
и консольный логгер.
"""
import json
import logging
from operator import attrgetter
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..shared_kernel import (
    EntityId,
    SortDirection,
    StoreConfigurationError,
    StoreError,
    ValidationError,
)
from . import interfaces as ports
from .interfaces import SortBy, T_Record

LOGGER_NAME = "room_booking"


class ConsoleLogger(ports.ILogger):
    """Логгер, пишущий сообщения через стандартный модуль logging."""

    def __init__(self, name: str = LOGGER_NAME):
        self._logger = logging.getLogger(name)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def _log(self, level: int, message: str, context: Dict[str, Any]) -> None:
        if context:
            message = (
                f"{message} | {json.dumps(context, default=str, ensure_ascii=False)}"
            )
        self._logger.log(level, message)


def configure_logging(level: str = "INFO") -> None:
    """Настраивает вывод логов приложения в консоль."""
    logging.basicConfig(format="[%(levelname)s] %(name)s: %(message)s")
    logging.getLogger(LOGGER_NAME).setLevel(level.upper())


class InMemoryDataStore(ports.IDataStore):
    """Реализация хранилища записей в памяти."""

    def __init__(self, logger: Optional[ports.ILogger] = None):
        # Имя модели -> (id записи -> запись)
        self._records: Dict[str, Dict[EntityId, BaseModel]] = {}
        self._logger = logger or ConsoleLogger()

    def _table(self, model_type: Type[BaseModel]) -> Dict[EntityId, BaseModel]:
        return self._records.setdefault(model_type.__name__, {})

    async def save(self, record: T_Record) -> T_Record:
        """Сохраняет новую запись."""
        table = self._table(type(record))
        if record.id in table:
            raise StoreError(
                f"{type(record).__name__} with id {record.id} already exists"
            )
        table[record.id] = record
        self._logger.debug(
            "Запись сохранена", model=type(record).__name__, id=record.id
        )
        return record

    async def query(
        self,
        model_type: Type[T_Record],
        where: Optional[Dict[str, Any]] = None,
        sort: Optional[SortBy] = None,
    ) -> List[T_Record]:
        """Возвращает записи, удовлетворяющие фильтру, в заданном порядке."""
        records = list(self._table(model_type).values())

        if where:
            self._check_fields(model_type, where.keys())
            records = [
                record
                for record in records
                if all(getattr(record, name) == value for name, value in where.items())
            ]

        if sort is not None:
            self._check_fields(model_type, [sort.field])
            # sort() устойчива: равные ключи сохраняют порядок вставки
            records.sort(
                key=attrgetter(sort.field),
                reverse=sort.direction == SortDirection.DESCENDING,
            )

        return records

    async def query_by_id(
        self, model_type: Type[T_Record], record_id: EntityId
    ) -> Optional[T_Record]:
        """Возвращает запись по идентификатору или None."""
        return self._table(model_type).get(record_id)

    @staticmethod
    def _check_fields(model_type: Type[BaseModel], names) -> None:
        unknown = sorted(set(names) - set(model_type.model_fields))
        if unknown:
            raise ValidationError(
                f"Неизвестные поля {model_type.__name__}: {', '.join(unknown)}"
            )


class JsonFileDataStore(InMemoryDataStore):
    """Хранилище записей, сохраняющее данные в JSON-файл."""

    def __init__(self, file_path: str, logger: Optional[ports.ILogger] = None):
        """
        Инициализирует хранилище.

        Args:
            file_path: Путь к JSON-файлу с данными
            logger: Логгер для диагностических сообщений

        Raises:
            StoreConfigurationError: Файл не читается или его структура
                не соответствует {имя модели: [записи]}
        """
        super().__init__(logger)
        self._file_path = Path(file_path)
        self._raw_data: Dict[str, List[Dict[str, Any]]] = self._load_data()

    def _load_data(self) -> Dict[str, List[Dict[str, Any]]]:
        """Загружает данные из JSON-файла."""
        if not self._file_path.exists():
            return {}

        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                raw_data = f.read()
        except OSError as exc:
            raise StoreConfigurationError(
                f"Не удалось прочитать файл хранилища {self._file_path}"
            ) from exc

        if not raw_data.strip():
            return {}

        try:
            data = json.loads(raw_data)
        except json.JSONDecodeError as exc:
            raise StoreConfigurationError(
                f"Файл хранилища {self._file_path} повреждён"
            ) from exc

        if not isinstance(data, dict):
            raise StoreConfigurationError(
                f"Файл хранилища {self._file_path} должен содержать JSON-объект"
            )

        # Каждая модель - список объектов с идентификатором
        for name, items in data.items():
            if not isinstance(items, list) or not all(
                isinstance(item, dict) and "id" in item for item in items
            ):
                raise StoreConfigurationError(
                    f"Некорректные записи {name} в файле {self._file_path}"
                )
        return data

    def _save_data(self) -> None:
        """Сохраняет данные в JSON-файл."""
        # Создаем директорию, если она не существует
        self._file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self._file_path, "w", encoding="utf-8") as f:
            json.dump(self._raw_data, f, indent=2, ensure_ascii=False)

    def _table(self, model_type: Type[BaseModel]) -> Dict[EntityId, BaseModel]:
        name = model_type.__name__
        if name not in self._records:
            # Записи разбираются при первом обращении к типу модели
            try:
                self._records[name] = {
                    item["id"]: model_type.model_validate(item)
                    for item in self._raw_data.get(name, [])
                }
            except PydanticValidationError as exc:
                raise StoreConfigurationError(
                    f"Некорректные записи {name} в файле {self._file_path}"
                ) from exc
        return self._records[name]

    async def save(self, record: T_Record) -> T_Record:
        """Сохраняет новую запись и записывает файл."""
        saved = await super().save(record)
        name = type(record).__name__
        items = self._raw_data.setdefault(name, [])
        items.append(record.model_dump(mode="json"))

        try:
            self._save_data()
        except OSError as exc:
            items.pop()
            del self._records[name][record.id]
            raise StoreError(
                f"Не удалось записать файл хранилища {self._file_path}"
            ) from exc

        return saved


def create_data_store(
    backend: str,
    store_path: Optional[str] = None,
    logger: Optional[ports.ILogger] = None,
) -> ports.IDataStore:
    """Создает хранилище указанного типа."""
    if backend == "memory":
        return InMemoryDataStore(logger=logger)
    if backend == "json":
        if not store_path:
            raise StoreConfigurationError("Для JSON-хранилища не задан путь к файлу")
        return JsonFileDataStore(store_path, logger=logger)
    raise StoreConfigurationError(f"Неизвестный тип хранилища: {backend}")
