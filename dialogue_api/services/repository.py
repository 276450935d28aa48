"""
Хранилище диалогов в MongoDB.
"""
import asyncio
import logging
from contextlib import contextmanager
from typing import List, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError
from pymongo.errors import PyMongoError

from dialogue_api.core.errors import DuplicateKeyError, PersistenceError
from dialogue_api.models.dialogue import Dialogue, default_title
from dialogue_api.models.highlight import Highlight

logger = logging.getLogger(__name__)

WITH_HIGHLIGHTS = {"highlights": {"$exists": True, "$ne": []}}


@contextmanager
def _db_call(action: str):
    """Переводит ошибки pymongo в PersistenceError"""
    try:
        yield
    except MongoDuplicateKeyError as e:
        raise DuplicateKeyError(f"Dialogue already exists: {e}") from e
    except PyMongoError as e:
        logger.error(f"MongoDB {action} failed: {e}")
        raise PersistenceError(f"Database {action} failed: {e}") from e


class DialogueRepository:
    """
    Доступ к коллекции диалогов.

    pymongo синхронный, поэтому каждая операция уходит в пул потоков.
    Удаления нет: записи создаются лениво и живут вечно.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        """Уникальный индекс по number; вызывается один раз при старте"""
        with _db_call("index creation"):
            self.collection.create_index(
                [("number", ASCENDING)], unique=True, name="number_unique"
            )

    # ---------- синхронные операции ----------

    def _find_by_number_sync(self, number: int) -> Optional[Dialogue]:
        with _db_call("lookup"):
            document = self.collection.find_one({"number": number})
        return Dialogue.from_document(document) if document else None

    def _find_sync(self, query: dict) -> List[Dialogue]:
        with _db_call("query"):
            documents = list(self.collection.find(query))
        return [Dialogue.from_document(d) for d in documents]

    def _create_sync(self, dialogue: Dialogue) -> Dialogue:
        with _db_call("insert"):
            result = self.collection.insert_one(dialogue.to_document())
        dialogue.id = result.inserted_id
        return dialogue

    def _save_sync(self, dialogue: Dialogue) -> Dialogue:
        # загруженная запись обновляется по _id, новая upsert-ом по number
        query = {"_id": dialogue.id} if dialogue.id is not None else {"number": dialogue.number}
        with _db_call("save"):
            result = self.collection.replace_one(
                query, dialogue.to_document(), upsert=True
            )
            if result.upserted_id is not None:
                dialogue.id = result.upserted_id
            elif dialogue.id is None:
                document = self.collection.find_one(
                    {"number": dialogue.number}, {"_id": 1})
                dialogue.id = document["_id"] if document else None
        return dialogue

    def _update_fields_sync(self, number: int, fields: dict) -> Dialogue:
        # меняются только переданные поля; запись создаётся, если её нет
        with _db_call("update"):
            document = self.collection.find_one_and_update(
                {"number": number},
                {"$set": fields, "$setOnInsert": {"title": default_title(number)}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        return Dialogue.from_document(document)

    # ---------- асинхронный интерфейс ----------

    async def find_by_number(self, number: int) -> Optional[Dialogue]:
        return await asyncio.to_thread(self._find_by_number_sync, number)

    async def find_all(self) -> List[Dialogue]:
        return await asyncio.to_thread(self._find_sync, {})

    async def find_with_highlights(self) -> List[Dialogue]:
        """Только диалоги, у которых есть хотя бы одно выделение"""
        return await asyncio.to_thread(self._find_sync, WITH_HIGHLIGHTS)

    async def create(self, dialogue: Dialogue) -> Dialogue:
        """Вставка новой записи; DuplicateKeyError, если номер занят"""
        return await asyncio.to_thread(self._create_sync, dialogue)

    async def save(self, dialogue: Dialogue) -> Dialogue:
        """Upsert: загруженная запись заменяется, новая вставляется"""
        return await asyncio.to_thread(self._save_sync, dialogue)

    async def set_transcript(self, number: int, text: str) -> Dialogue:
        """Кэширует транскрипт, не трогая выделения"""
        return await asyncio.to_thread(
            self._update_fields_sync, number, {"transcriptText": text})

    async def set_highlights(self, number: int, highlights: List[Highlight]) -> Dialogue:
        """Заменяет список выделений целиком, не трогая транскрипт"""
        documents = [h.model_dump(by_alias=True, exclude_none=True) for h in highlights]
        return await asyncio.to_thread(
            self._update_fields_sync, number, {"highlights": documents})
