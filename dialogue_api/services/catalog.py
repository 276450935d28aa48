"""
Сборка данных о диалогах из Google Drive и MongoDB.
"""
import logging
import re
from typing import Dict, List, Optional, Sequence

from dialogue_api.models.dialogue import (
    Dialogue,
    DialogueContent,
    DialogueSummary,
    default_title,
)
from dialogue_api.models.highlight import Highlight, TrainingHighlight
from dialogue_api.models.storage import AudioStream, DriveFile
from dialogue_api.services.drive import DriveClient
from dialogue_api.services.repository import DialogueRepository

logger = logging.getLogger(__name__)

AUDIO_NAME = re.compile(r"^audio(\d+)\.", re.IGNORECASE)
TRANSCRIPT_NAME = re.compile(r"^transcript(\d+)\.txt$", re.IGNORECASE)


def transcript_file_name(number: int) -> str:
    return f"transcript{number}.txt"


def parse_dialogue_number(raw: str) -> Optional[int]:
    """Номер из параметра пути; нечисловое значение → None"""
    try:
        return int(raw.strip())
    except (ValueError, AttributeError):
        return None


def index_drive_files(files: Sequence[DriveFile]) -> Dict[int, Dict[str, str]]:
    """
    Группирует файлы папки по номеру диалога.

    audio<N>.<ext> → audio_id, transcript<N>.txt → transcript_id.
    Остальные файлы игнорируются.
    """
    found: Dict[int, Dict[str, str]] = {}

    for f in files:
        audio_match = AUDIO_NAME.match(f.name)
        if audio_match:
            found.setdefault(int(audio_match.group(1)), {})["audio_id"] = f.id

        text_match = TRANSCRIPT_NAME.match(f.name)
        if text_match:
            found.setdefault(int(text_match.group(1)), {})["transcript_id"] = f.id

    return found


class DialogueService:
    """
    Координирует Drive и MongoDB для маршрутов API.

    Drive и хранилище друг о друге не знают; кэширование транскриптов
    и слияние списков происходит только здесь.
    """

    def __init__(self, drive: DriveClient, repository: DialogueRepository):
        self.drive = drive
        self.repository = repository

    async def list_dialogues(self) -> List[DialogueSummary]:
        files = await self.drive.list_files()
        found = index_drive_files(files)
        stored = {d.number: d for d in await self.repository.find_all()}

        result = []
        for number in sorted(found):
            record = stored.get(number)
            result.append(DialogueSummary(
                number=number,
                label=record.label if record else default_title(number),
                audio_id=found[number].get("audio_id"),
                transcript_id=found[number].get("transcript_id"),
                has_highlights=bool(record and record.highlights),
            ))
        return result

    async def get_dialogue(self, raw_number: str) -> DialogueContent:
        """
        Транскрипт и выделения диалога.

        Транскрипт кэшируется в базе при первом чтении (write-through).
        Если нет ни записи, ни файла, ответ пустой, не ошибка.
        """
        number = parse_dialogue_number(raw_number)
        if number is None:
            return DialogueContent()

        record = await self.repository.find_by_number(number)

        if record is None or not record.transcript_text:
            logger.info(f"Transcript cache miss for dialogue {number}")
            record = await self._cache_transcript(number, record)
        else:
            logger.debug(f"Transcript cache hit for dialogue {number}")

        if record is None:
            return DialogueContent()

        return DialogueContent(
            transcript=record.transcript_text or "",
            highlights=[h.with_fallbacks() for h in record.highlights],
        )

    async def _cache_transcript(
        self, number: int, record: Optional[Dialogue]
    ) -> Optional[Dialogue]:
        files = await self.drive.list_files(name=transcript_file_name(number))
        if not files:
            return record

        text = await self.drive.fetch_text(files[0].id)

        # пишется только transcriptText: выделения, сохранённые параллельно, не теряются
        return await self.repository.set_transcript(number, text)

    async def save_highlights(self, raw_number: str, highlights: List[Highlight]) -> None:
        """Заменяет набор выделений целиком; последняя запись побеждает"""
        number = parse_dialogue_number(raw_number)
        if number is None:
            raise ValueError(f"Invalid dialogue number: {raw_number!r}")

        await self.repository.set_highlights(number, list(highlights))
        logger.info(f"Saved {len(highlights)} highlight(s) for dialogue {number}")

    async def all_highlights(self) -> List[TrainingHighlight]:
        """Все выделения всех диалогов одним списком для тренировки"""
        result = []
        for record in await self.repository.find_with_highlights():
            for h in record.highlights:
                h = h.with_fallbacks()
                result.append(TrainingHighlight(
                    russian=h.russian,
                    translation=h.translation,
                    full_sentence=h.full_sentence,
                    translated_word=h.translated_word,
                    dialogue_number=record.number,
                ))
        return result

    async def open_audio(self, file_id: str) -> AudioStream:
        return await self.drive.open_stream(file_id)
