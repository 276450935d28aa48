"""
Иерархия ошибок сервиса.

Все обработчики маршрутов превращают эти ошибки в ответ 500 с текстом
сообщения, поэтому сообщения должны быть понятны клиенту.
"""


class DialogueApiError(Exception):
    """Базовая ошибка сервиса"""
    pass


class ConfigurationError(DialogueApiError):
    """Нет или испорчены учётные данные Google"""
    pass


class StorageError(DialogueApiError):
    """Ошибка обращения к Google Drive (сеть, авторизация, квоты)"""
    pass


class PersistenceError(DialogueApiError):
    """Ошибка MongoDB"""
    pass


class DuplicateKeyError(PersistenceError):
    """Нарушена уникальность номера диалога"""
    pass


class NotFoundError(DialogueApiError):
    """
    Диалог не найден.

    Маршруты это исключение не выбрасывают: для транскриптов и выделений
    действует политика «мягкого промаха»: пустой успешный ответ.
    """
    pass
