"""
Учётные данные сервисного аккаунта Google с доступом только на чтение Drive.
"""
import json
import logging
from typing import Optional

from google.oauth2.service_account import Credentials

from dialogue_api.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DRIVE_READONLY_SCOPE = "https://www.googleapis.com/auth/drive.readonly"


def load_credentials(raw: Optional[str]) -> Credentials:
    """
    Строит Credentials из JSON-строки сервисного аккаунта.

    Функцию можно вызывать сколько угодно раз; состояния она не хранит.
    Пустой или некорректный JSON → ConfigurationError.
    """
    if not raw or not raw.strip():
        raise ConfigurationError("GOOGLE_CREDENTIALS is not configured")

    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"GOOGLE_CREDENTIALS is not valid JSON: {e}") from e

    if not isinstance(info, dict):
        raise ConfigurationError("GOOGLE_CREDENTIALS must be a JSON object")

    try:
        return Credentials.from_service_account_info(
            info, scopes=[DRIVE_READONLY_SCOPE]
        )
    except (ValueError, KeyError) as e:
        logger.error(f"Invalid service account credentials: {e}")
        raise ConfigurationError(f"Invalid service account credentials: {e}") from e
