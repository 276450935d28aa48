"""
Клиент Google Drive: листинг папки, загрузка текста и потоковая загрузка аудио.
"""
import asyncio
import io
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiError
from googleapiclient.http import MediaIoBaseDownload

from dialogue_api.core.errors import DialogueApiError, StorageError
from dialogue_api.models.storage import AudioStream, DriveFile
from dialogue_api.services.credentials import load_credentials

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

ServiceFactory = Callable[[Credentials], Any]


def build_drive_service(credentials: Credentials) -> Any:
    return build("drive", "v3", credentials=credentials, cache_discovery=False)


def _escape_query_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


@contextmanager
def _storage_call(action: str):
    """Переводит ошибки Google API в StorageError"""
    try:
        yield
    except DialogueApiError:
        raise
    except (GoogleApiError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
        logger.error(f"Drive {action} failed: {e}")
        raise StorageError(f"Drive {action} failed: {e}") from e


class DriveClient:
    """
    Доступ к одной папке Google Drive только на чтение.

    Учётные данные строятся при первом обращении и дальше переиспользуются,
    поэтому ошибка конфигурации проявляется как ошибка запроса, а не падение
    процесса. Объект service создаётся на каждую операцию: httplib2 внутри
    него не потокобезопасен, а вызовы идут из пула потоков.
    """

    def __init__(
        self,
        credentials_json: Optional[str],
        folder_id: str,
        page_size: int = 1000,
        chunk_size: int = 1024 * 1024,
        service_factory: ServiceFactory = build_drive_service,
    ):
        self.folder_id = folder_id
        self.page_size = page_size
        self.chunk_size = chunk_size
        self._credentials_json = credentials_json
        self._service_factory = service_factory
        self._credentials: Optional[Credentials] = None

    def _service(self) -> Any:
        if self._credentials is None:
            self._credentials = load_credentials(self._credentials_json)
        return self._service_factory(self._credentials)

    # ---------- синхронные операции (выполняются в потоке) ----------

    def _list_files_sync(self, name: Optional[str]) -> List[DriveFile]:
        query = f"'{_escape_query_value(self.folder_id)}' in parents and trashed = false"
        if name is not None:
            query += f" and name = '{_escape_query_value(name)}'"

        with _storage_call("listing"):
            response = (
                self._service()
                .files()
                .list(q=query, fields="files(id, name)", pageSize=self.page_size)
                .execute()
            )

        files = [DriveFile(id=f["id"], name=f["name"])
                 for f in response.get("files", [])]
        logger.info(f"Drive listing returned {len(files)} file(s)"
                    + (f" for '{name}'" if name else ""))
        return files

    def _fetch_text_sync(self, file_id: str) -> str:
        with _storage_call("download"):
            content = self._service().files().get_media(fileId=file_id).execute()

        logger.info(f"Downloaded {len(content)} bytes from Drive file {file_id}")
        if isinstance(content, bytes):
            return content.decode("utf-8", errors="replace")
        return content

    def _open_stream_sync(self, file_id: str) -> AudioStream:
        with _storage_call("metadata"):
            service = self._service()
            meta = (
                service.files()
                .get(fileId=file_id, fields="mimeType, size")
                .execute()
            )

        size_raw = meta.get("size")
        return AudioStream(
            file_id=file_id,
            mime_type=meta.get("mimeType") or DEFAULT_MIME_TYPE,
            size=int(size_raw) if size_raw is not None else None,
            chunks=self._iter_chunks(service, file_id),
        )

    def _iter_chunks(self, service: Any, file_id: str) -> Iterator[bytes]:
        """
        Отдаёт содержимое файла кусками по chunk_size.
        Следующий кусок запрашивается только когда потребитель забрал предыдущий.
        """
        request = service.files().get_media(fileId=file_id)
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request, chunksize=self.chunk_size)

        done = False
        while not done:
            with _storage_call("stream"):
                _, done = downloader.next_chunk()
            chunk = buffer.getvalue()
            buffer.seek(0)
            buffer.truncate()
            if chunk:
                yield chunk

    # ---------- асинхронный интерфейс ----------

    async def list_files(self, name: Optional[str] = None) -> List[DriveFile]:
        """Файлы папки (не в корзине), при name только с точным именем"""
        return await asyncio.to_thread(self._list_files_sync, name)

    async def fetch_text(self, file_id: str) -> str:
        """Полное содержимое файла как текст (для транскриптов)"""
        return await asyncio.to_thread(self._fetch_text_sync, file_id)

    async def open_stream(self, file_id: str) -> AudioStream:
        """
        Открывает файл для потоковой отдачи.

        Метаданные запрашиваются сразу, так что отсутствующий файл или
        проблемы с доступом обнаруживаются до начала ответа.
        """
        return await asyncio.to_thread(self._open_stream_sync, file_id)
