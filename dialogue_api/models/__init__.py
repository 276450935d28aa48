# Экспортируем все модели для удобного импорта
from .highlight import Highlight, TrainingHighlight
from .dialogue import (
    Dialogue,
    DialogueSummary,
    DialogueContent,
    SaveResult,
    default_title,
)
from .storage import DriveFile, AudioStream

__all__ = [
    "Highlight",
    "TrainingHighlight",
    "Dialogue",
    "DialogueSummary",
    "DialogueContent",
    "SaveResult",
    "default_title",
    "DriveFile",
    "AudioStream",
]
