from functools import lru_cache

from fastapi import Depends
from pymongo import MongoClient

from dialogue_api.core.config import settings
from dialogue_api.services.drive import DriveClient
from dialogue_api.services.repository import DialogueRepository
from dialogue_api.services.catalog import DialogueService


@lru_cache(maxsize=1)
def get_mongo_client() -> MongoClient:
    """
    Единственный на процесс клиент MongoDB.
    Подключение ленивое: недоступная база не мешает старту.
    """
    return MongoClient(settings.mongodb_uri, tz_aware=True)


@lru_cache(maxsize=1)
def get_dialogue_repository() -> DialogueRepository:
    client = get_mongo_client()
    if settings.mongodb_database:
        database = client[settings.mongodb_database]
    else:
        database = client.get_default_database(default="dialogues")
    return DialogueRepository(database[settings.mongodb_collection])


@lru_cache(maxsize=1)
def get_drive_client() -> DriveClient:
    credentials = settings.google_credentials
    return DriveClient(
        credentials_json=credentials.get_secret_value() if credentials else None,
        folder_id=settings.drive_folder_id,
        page_size=settings.drive_page_size,
        chunk_size=settings.audio_chunk_size,
    )


def get_dialogue_service(
    drive: DriveClient = Depends(get_drive_client),
    repository: DialogueRepository = Depends(get_dialogue_repository),
) -> DialogueService:
    return DialogueService(drive=drive, repository=repository)
