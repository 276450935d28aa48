from typing import Dict, List, Optional

import mongomock
import pytest
from fastapi.testclient import TestClient

from dialogue_api.api.deps import get_dialogue_repository, get_drive_client
from dialogue_api.main import app
from dialogue_api.models.storage import AudioStream, DriveFile
from dialogue_api.services.repository import DialogueRepository


class FakeDriveClient:
    """Подмена DriveClient со счётчиками обращений"""

    def __init__(self, files: Optional[List[DriveFile]] = None,
                 contents: Optional[Dict[str, bytes]] = None,
                 chunk_size: int = 4):
        self.files = files or []
        self.contents = contents or {}
        self.chunk_size = chunk_size
        self.list_calls: List[Optional[str]] = []
        self.fetch_calls: List[str] = []
        self.stream_calls: List[str] = []
        self.error: Optional[Exception] = None

    def add(self, file_id: str, name: str, content: bytes = b"") -> None:
        self.files.append(DriveFile(id=file_id, name=name))
        self.contents[file_id] = content

    async def list_files(self, name: Optional[str] = None) -> List[DriveFile]:
        self.list_calls.append(name)
        if self.error:
            raise self.error
        if name is None:
            return list(self.files)
        return [f for f in self.files if f.name == name]

    async def fetch_text(self, file_id: str) -> str:
        self.fetch_calls.append(file_id)
        if self.error:
            raise self.error
        return self.contents[file_id].decode("utf-8")

    async def open_stream(self, file_id: str) -> AudioStream:
        self.stream_calls.append(file_id)
        if self.error:
            raise self.error
        data = self.contents[file_id]
        chunks = (data[i:i + self.chunk_size]
                  for i in range(0, len(data), self.chunk_size))
        return AudioStream(file_id=file_id, mime_type="audio/mpeg",
                           size=len(data), chunks=chunks)


@pytest.fixture
def drive():
    return FakeDriveClient()


@pytest.fixture
def repository():
    collection = mongomock.MongoClient().db.dialogues
    repo = DialogueRepository(collection)
    repo.ensure_indexes()
    return repo


@pytest.fixture
def client(drive, repository):
    app.dependency_overrides[get_drive_client] = lambda: drive
    app.dependency_overrides[get_dialogue_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()
