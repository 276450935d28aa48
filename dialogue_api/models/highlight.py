"""
Модели выделений (highlights) внутри диалога.
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Highlight(BaseModel):
    """
    Выделенный пользователем фрагмент транскрипта.

    Старые записи могут не иметь full_sentence и translated_word:
    значения по умолчанию подставляются при чтении (with_fallbacks),
    в базу они не записываются.
    """
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    russian: Optional[str] = None        # выделенное слово/фраза
    translation: Optional[str] = None    # общий перевод в контексте
    full_sentence: Optional[str] = None  # всё предложение с фрагментом
    translated_word: Optional[str] = None  # перевод конкретного слова
    date: Optional[datetime] = Field(default_factory=_utcnow)  # у старых записей бывает null

    def with_fallbacks(self) -> "Highlight":
        return self.model_copy(update={
            "full_sentence": self.full_sentence or self.russian,
            "translated_word": self.translated_word or None,
        })


class TrainingHighlight(BaseModel):
    """Выделение в плоском наборе для тренировки (/api/all-highlights)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    russian: Optional[str] = None
    translation: Optional[str] = None
    full_sentence: Optional[str] = None
    translated_word: Optional[str] = None
    dialogue_number: int
