"""
Модели объектов Google Drive.
"""
from dataclasses import dataclass
from typing import Iterator, Optional

from pydantic import BaseModel


class DriveFile(BaseModel):
    id: str
    name: str


@dataclass
class AudioStream:
    """Открытый поток файла: метаданные известны до первого байта"""
    file_id: str
    mime_type: str
    size: Optional[int]
    chunks: Iterator[bytes]
