import logging
from typing import List

from fastapi import APIRouter, Body, Depends

from dialogue_api.api.deps import get_dialogue_service
from dialogue_api.api.responses import error_response
from dialogue_api.models.dialogue import DialogueContent, DialogueSummary, SaveResult
from dialogue_api.models.highlight import Highlight, TrainingHighlight
from dialogue_api.services.catalog import DialogueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["dialogues"])


@router.get("/dialogues", response_model=List[DialogueSummary])
async def list_dialogues(
    service: DialogueService = Depends(get_dialogue_service),
):
    """
    Список диалогов, найденных в папке Drive, отсортированный по номеру.
    Подпись и флаг выделений берутся из базы, если запись есть.
    """
    try:
        return await service.list_dialogues()
    except Exception as e:
        logger.exception("Failed to list dialogues")
        return error_response(e)


@router.get("/dialogues/{number}", response_model=DialogueContent)
async def get_dialogue(
    number: str,
    service: DialogueService = Depends(get_dialogue_service),
):
    """
    Транскрипт и выделения диалога.

    Если ничего не найдено, 200 с пустым транскриптом и пустым
    списком (мягкий промах, клиенты на это рассчитывают).
    """
    try:
        return await service.get_dialogue(number)
    except Exception as e:
        logger.exception(f"Failed to load dialogue {number}")
        return error_response(e)


@router.post("/dialogues/{number}/highlights", response_model=SaveResult)
async def save_highlights(
    number: str,
    highlights: List[Highlight] = Body(...),
    service: DialogueService = Depends(get_dialogue_service),
):
    """Полностью заменяет список выделений диалога"""
    try:
        await service.save_highlights(number, highlights)
        return SaveResult(success=True)
    except Exception as e:
        logger.exception(f"Failed to save highlights for dialogue {number}")
        return error_response(e)


@router.get("/all-highlights", response_model=List[TrainingHighlight])
async def all_highlights(
    service: DialogueService = Depends(get_dialogue_service),
):
    """Все выделения всех диалогов: набор данных для тренировки"""
    try:
        return await service.all_highlights()
    except Exception as e:
        logger.exception("Failed to fetch highlights")
        return error_response(e)
