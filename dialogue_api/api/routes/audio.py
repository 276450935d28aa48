import logging
from typing import Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from dialogue_api.api.deps import get_dialogue_service
from dialogue_api.api.responses import error_response
from dialogue_api.models.storage import AudioStream
from dialogue_api.services.catalog import DialogueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["audio"])


def _relay(stream: AudioStream) -> Iterator[bytes]:
    """
    Передаёт куски из Drive клиенту.

    Ошибка после начала ответа пробрасывается дальше: сервер обрывает
    соединение, и клиент видит неполный ответ, а не JSON посреди аудио.
    """
    sent = 0
    try:
        for chunk in stream.chunks:
            sent += len(chunk)
            yield chunk
    except Exception:
        logger.exception(
            f"Audio stream {stream.file_id} aborted after {sent} bytes")
        raise


@router.get("/audio/{file_id}")
async def stream_audio(
    file_id: str,
    service: DialogueService = Depends(get_dialogue_service),
):
    """Проксирует аудиофайл из Drive без буферизации целиком"""
    try:
        stream = await service.open_audio(file_id)
    except Exception as e:
        logger.exception(f"Failed to open audio {file_id}")
        return error_response(e)

    headers = {}
    if stream.size is not None:
        headers["Content-Length"] = str(stream.size)

    return StreamingResponse(
        _relay(stream), media_type=stream.mime_type, headers=headers
    )
