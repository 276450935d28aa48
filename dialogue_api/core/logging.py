import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO") -> None:
    """Настраивает корневой логгер пакета. Повторный вызов меняет только уровень."""
    global _handler

    logger = logging.getLogger("dialogue_api")
    logger.setLevel(level.upper())

    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
