"""
Модели диалога: хранимая запись и ответы API.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dialogue_api.models.highlight import Highlight


def default_title(number: int) -> str:
    return f"Dialogue {number}"


class Dialogue(BaseModel):
    """Документ коллекции dialogues, уникальный по number"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[Any] = Field(default=None, exclude=True)  # _id из MongoDB
    number: int
    title: Optional[str] = None
    audio_drive_id: Optional[str] = None
    transcript_text: Optional[str] = None
    highlights: List[Highlight] = []

    @property
    def label(self) -> str:
        return self.title or default_title(self.number)

    @classmethod
    def new(cls, number: int) -> "Dialogue":
        return cls(number=number, title=default_title(number))

    @classmethod
    def from_document(cls, document: dict) -> "Dialogue":
        data = dict(document)
        return cls.model_validate({**data, "id": data.pop("_id", None)})

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class DialogueSummary(BaseModel):
    """Элемент списка /api/dialogues"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    number: int
    label: str
    audio_id: Optional[str] = None
    transcript_id: Optional[str] = None
    has_highlights: bool = False


class DialogueContent(BaseModel):
    """Ответ /api/dialogues/{number}; пустой, если ничего не найдено"""
    transcript: str = ""
    highlights: List[Highlight] = []


class SaveResult(BaseModel):
    success: bool = True
