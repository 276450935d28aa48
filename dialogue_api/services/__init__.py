# Экспортируем все сервисы для удобного импорта
from dialogue_api.services.credentials import load_credentials, DRIVE_READONLY_SCOPE
from dialogue_api.services.drive import DriveClient, build_drive_service
from dialogue_api.services.repository import DialogueRepository
from dialogue_api.services.catalog import DialogueService, index_drive_files

__all__ = [
    # Google
    "load_credentials",
    "DRIVE_READONLY_SCOPE",
    "DriveClient",
    "build_drive_service",

    # MongoDB
    "DialogueRepository",

    # Оркестрация
    "DialogueService",
    "index_drive_files",
]
